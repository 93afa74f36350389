"""Fixture registrations and callback fixture resolution."""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator, Optional, Sequence


class FixtureScope(str, Enum):
    """Lifetime of a fixture's setup."""

    TEST = "test"
    WORKER = "worker"


class FixtureResolutionError(Exception):
    """Raised when a callback's fixtures cannot be determined."""

    pass


class UnknownFixtureError(KeyError):
    """Raised when a test depends on a fixture that was never registered."""

    def __init__(self, name: str, file: str = ""):
        self.name = name
        self.file = file
        where = f" (as seen from {file})" if file else ""
        super().__init__(f"Fixture '{name}' is not registered{where}")

    def __str__(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class Registration:
    """A registered fixture as seen by the generator."""

    name: str
    scope: FixtureScope
    location: str
    values: Optional[tuple] = None

    def __post_init__(self):
        if self.values is not None and not self.values:
            raise ValueError(f"Generator fixture '{self.name}' must declare at least one value")

    @property
    def is_generator(self) -> bool:
        return self.values is not None


class FileRegistrations(Mapping):
    """Read-only view of the registrations visible from one file."""

    def __init__(self, file: str, registrations: dict[str, Registration]):
        self.file = file
        self._registrations = registrations

    def __getitem__(self, name: str) -> Registration:
        try:
            return self._registrations[name]
        except KeyError:
            raise UnknownFixtureError(name, self.file) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._registrations)

    def __len__(self) -> int:
        return len(self._registrations)

    def domain(self, name: str) -> Optional[tuple]:
        """Get the declared values of a generator fixture, or None."""
        registration = self._registrations.get(name)
        return registration.values if registration else None


class FixtureRegistry:
    """Fixture registrations, global or overridden per declaring file."""

    def __init__(self):
        self._global: dict[str, Registration] = {}
        self._by_file: dict[str, dict[str, Registration]] = {}

    def register(
        self,
        name: str,
        scope: FixtureScope | str = FixtureScope.TEST,
        location: str = "",
        values: Optional[Sequence[Any]] = None,
        file: Optional[str] = None,
    ) -> Registration:
        """Register a fixture.

        Args:
            name: Fixture name as it appears in test callbacks
            scope: "test" or "worker"
            location: Source location of the fixture definition
            values: Domain of a generator fixture (None for a plain fixture)
            file: Restrict the registration to tests declared in this file

        Returns:
            The new Registration
        """
        registration = Registration(
            name=name,
            scope=FixtureScope(scope),
            location=location,
            values=tuple(values) if values is not None else None,
        )
        if file is None:
            self._global[name] = registration
        else:
            self._by_file.setdefault(file, {})[name] = registration
        return registration

    def for_file(self, file: str) -> FileRegistrations:
        """Get the registrations visible to tests declared in ``file``."""
        merged = dict(self._global)
        merged.update(self._by_file.get(file, {}))
        return FileRegistrations(file, merged)


def fixtures_for_callback(fn: Callable[..., Any]) -> list[str]:
    """Get the fixture names a test callback declares, in parameter order.

    Parameters with default values are not fixtures.

    Raises:
        FixtureResolutionError: If fn is not callable or takes *args/**kwargs
    """
    if not callable(fn):
        raise FixtureResolutionError(f"Test callback is not callable: {fn!r}")

    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        raise FixtureResolutionError(f"Cannot inspect test callback: {e}") from e

    names = []
    for parameter in signature.parameters.values():
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            raise FixtureResolutionError(
                f"Test callback cannot take variadic parameters: *{parameter.name}"
            )
        if parameter.default is parameter.empty:
            names.append(parameter.name)
    return names


def declared_callback(fixtures: Sequence[str]) -> Callable[..., Any]:
    """Build a placeholder callback whose signature declares ``fixtures``."""

    def callback(**kwargs: Any) -> None:
        return None

    callback.__signature__ = inspect.Signature(
        [inspect.Parameter(name, inspect.Parameter.KEYWORD_ONLY) for name in fixtures]
    )
    return callback
