"""Static declaration tree of suites, tests and their generated runs."""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, Union


@dataclass(frozen=True)
class ConfigurationEntry:
    """One generator fixture value contributing to a run."""

    name: str
    value: Any

    def to_dict(self) -> dict:
        return {"name": self.name, "value": self.value}


Configuration = list[ConfigurationEntry]


@dataclass(eq=False)
class TestRun:
    """One concrete execution unit for a test declaration."""

    __test__ = False

    test: "TestDeclaration" = field(repr=False)
    configuration: Configuration = field(default_factory=list)
    configuration_string: str = ""
    worker_hash: str = ""

    @property
    def affinity_hash(self) -> str:
        """Digest of the worker-scoped fixture locations, without the configuration."""
        return self.worker_hash.partition("@")[0]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "title": self.test.full_title(),
            "file": self.test.file,
            "location": self.test.location,
            "ordinal": self.test.ordinal,
            "configuration": [entry.to_dict() for entry in self.configuration],
            "configuration_string": self.configuration_string,
            "worker_hash": self.worker_hash,
        }


@dataclass(eq=False)
class TestDeclaration:
    """A test as declared, before any expansion."""

    __test__ = False

    title: str
    fn: Optional[Callable[..., Any]] = None
    file: str = ""
    location: str = ""
    only: bool = False
    skipped: bool = False
    ordinal: int = 0
    runs: list[TestRun] = field(default_factory=list, repr=False)
    parent: Optional["SuiteDeclaration"] = field(default=None, repr=False)

    def full_title(self) -> str:
        """Get the title of every enclosing suite followed by the test title."""
        parent_title = self.parent.full_title() if self.parent else ""
        return f"{parent_title} {self.title}".strip()

    def clone(self) -> "TestDeclaration":
        """Copy the declaration without its runs or parent."""
        return TestDeclaration(
            title=self.title,
            fn=self.fn,
            file=self.file,
            location=self.location,
            only=self.only,
            skipped=self.skipped,
            ordinal=self.ordinal,
        )


Entry = Union["SuiteDeclaration", TestDeclaration]


@dataclass(eq=False)
class SuiteDeclaration:
    """A suite as declared: an ordered list of nested suites and tests."""

    title: str
    file: str = ""
    location: str = ""
    only: bool = False
    skipped: bool = False
    ordinal: int = 0
    entries: list[Entry] = field(default_factory=list, repr=False)
    parent: Optional["SuiteDeclaration"] = field(default=None, repr=False)

    @property
    def suites(self) -> list["SuiteDeclaration"]:
        return [e for e in self.entries if isinstance(e, SuiteDeclaration)]

    @property
    def tests(self) -> list[TestDeclaration]:
        return [e for e in self.entries if isinstance(e, TestDeclaration)]

    def add_suite(self, suite: "SuiteDeclaration") -> "SuiteDeclaration":
        suite.parent = self
        self.entries.append(suite)
        return suite

    def add_test(self, test: TestDeclaration) -> TestDeclaration:
        test.parent = self
        self.entries.append(test)
        return test

    def full_title(self) -> str:
        parent_title = self.parent.full_title() if self.parent else ""
        return f"{parent_title} {self.title}".strip()

    def all_tests(self) -> Iterator[TestDeclaration]:
        """Iterate over every test in the subtree, in declaration order."""
        for entry in self.entries:
            if isinstance(entry, SuiteDeclaration):
                yield from entry.all_tests()
            else:
                yield entry

    def renumber(self, start: int = 0) -> int:
        """Assign ordinals in pre-order starting at ``start``.

        Returns:
            The next unused ordinal
        """
        self.ordinal = start
        ordinal = start + 1
        for entry in self.entries:
            if isinstance(entry, SuiteDeclaration):
                ordinal = entry.renumber(ordinal)
            else:
                entry.ordinal = ordinal
                ordinal += 1
        return ordinal

    def clone(self) -> "SuiteDeclaration":
        """Deep-copy the subtree; cloned tests start with no runs."""
        result = SuiteDeclaration(
            title=self.title,
            file=self.file,
            location=self.location,
            only=self.only,
            skipped=self.skipped,
            ordinal=self.ordinal,
        )
        for entry in self.entries:
            if isinstance(entry, SuiteDeclaration):
                result.add_suite(entry.clone())
            else:
                result.add_test(entry.clone())
        return result
