"""Shared fixtures for TestPlan tests."""

import pytest

from testplan.core.declarations import SuiteDeclaration, TestDeclaration
from testplan.core.fixtures import FixtureRegistry, declared_callback


def make_test(title: str, *fixtures: str, only: bool = False, file: str = "a.spec") -> TestDeclaration:
    """Build a test declaration whose callback requests ``fixtures``."""
    return TestDeclaration(title=title, fn=declared_callback(fixtures), file=file, only=only)


@pytest.fixture
def registry():
    """Registry with one generator fixture and one worker fixture."""
    registry = FixtureRegistry()
    registry.register("browser", scope="test", location="fixtures.py:1", values=["chromium", "firefox"])
    registry.register("page", scope="worker", location="L")
    return registry


@pytest.fixture
def nested_suite():
    """File suite 'A' with a nested suite 'B'."""
    suite = SuiteDeclaration("A", file="a.spec", location="a.spec:1")
    suite.add_test(make_test("first"))
    inner = suite.add_suite(SuiteDeclaration("B", file="a.spec", location="a.spec:5"))
    inner.add_test(make_test("second"))
    inner.add_test(make_test("third"))
    suite.add_test(make_test("fourth"))
    return suite


@pytest.fixture(name="make_test")
def make_test_fixture():
    """Factory for test declarations with declared fixtures."""
    return make_test
