"""Execution tree projected from the filtered declarations."""

import re
from typing import Any, Callable, Collection, Optional

from testplan.core.declarations import SuiteDeclaration, TestDeclaration
from testplan.core.filters import matches_grep


class Test:
    """A test as handed to the execution layer."""

    __test__ = False

    def __init__(self, title: str, fn: Optional[Callable[..., Any]] = None):
        self.title = title
        self.fn = fn
        self.parent: Optional["Suite"] = None
        self.file = ""
        self.location = ""
        self.ordinal = 0
        self.only = False
        self.skipped = False

    def full_title(self) -> str:
        parent_title = self.parent.full_title() if self.parent else ""
        return f"{parent_title} {self.title}".strip()

    def __repr__(self) -> str:
        return f"Test({self.full_title()!r})"


class Suite:
    """A suite as handed to the execution layer."""

    def __init__(self, title: str, parent: Optional["Suite"] = None):
        self.title = title
        self.parent = parent
        self.suites: list[Suite] = []
        self.tests: list[Test] = []
        self.entries: list[Suite | Test] = []
        self.file = ""
        self.location = ""
        self.ordinal = 0
        self.only = False
        self.skipped = False

    def add_suite(self, suite: "Suite") -> None:
        suite.parent = self
        self.suites.append(suite)
        self.entries.append(suite)

    def add_test(self, test: Test) -> None:
        test.parent = self
        self.tests.append(test)
        self.entries.append(test)

    def full_title(self) -> str:
        parent_title = self.parent.full_title() if self.parent else ""
        return f"{parent_title} {self.title}".strip()

    def all_tests(self) -> list[Test]:
        result = []
        for entry in self.entries:
            if isinstance(entry, Suite):
                result.extend(entry.all_tests())
            else:
                result.append(entry)
        return result

    def __repr__(self) -> str:
        return f"Suite({self.full_title()!r})"


def build_suite_run(
    suite: SuiteDeclaration,
    tests: Collection[TestDeclaration],
    grep: Optional[re.Pattern[str]] = None,
    parent: Optional[Suite] = None,
) -> Suite:
    """Rebuild ``suite`` as an execution tree holding only the selected tests.

    Args:
        suite: Filtered declaration tree
        tests: Declarations selected for this worker
        grep: Title filter, applied again to each selected test
        parent: Suite the result is attached under

    Returns:
        A new Suite mirroring the declaration tree's shape
    """
    result = Suite(suite.title, parent)
    for entry in suite.entries:
        if isinstance(entry, SuiteDeclaration):
            result.add_suite(build_suite_run(entry, tests, grep, result))
            continue
        if entry not in tests:
            continue
        if not matches_grep(grep, entry.full_title()):
            continue
        result.add_test(_build_test_run(entry))

    result.location = suite.location
    result.file = suite.file
    result.ordinal = suite.ordinal
    result.only = suite.only
    result.skipped = suite.skipped
    return result


def _build_test_run(test: TestDeclaration) -> Test:
    result = Test(test.title, test.fn)
    result.location = test.location
    result.file = test.file
    result.ordinal = test.ordinal
    result.only = test.only
    result.skipped = test.skipped
    return result
