"""Core test-plan generation functionality."""

from testplan.core.declarations import SuiteDeclaration, TestDeclaration, TestRun
from testplan.core.fixtures import FixtureRegistry, FixtureScope, Registration
from testplan.core.generator import generate_tests, group_by_worker, iter_runs
from testplan.core.run_tree import Suite, Test, build_suite_run

__all__ = [
    "SuiteDeclaration",
    "TestDeclaration",
    "TestRun",
    "FixtureRegistry",
    "FixtureScope",
    "Registration",
    "generate_tests",
    "group_by_worker",
    "iter_runs",
    "Suite",
    "Test",
    "build_suite_run",
]
