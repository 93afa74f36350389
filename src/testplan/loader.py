"""Loading declaration trees and fixture registrations from JSON files."""

import json
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from testplan.core.declarations import SuiteDeclaration, TestDeclaration
from testplan.core.fixtures import FixtureRegistry, FixtureScope, declared_callback


class DeclarationError(Exception):
    """Raised when a declaration file cannot be loaded."""

    pass


class FixtureSpec(BaseModel):
    """A fixture registration."""

    name: str
    scope: FixtureScope = FixtureScope.TEST
    location: str = ""
    values: Optional[list[Any]] = Field(default=None, description="Values of a generator fixture")
    file: Optional[str] = Field(default=None, description="Only visible to tests declared in this file")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Fixture name must be an identifier: {v!r}")
        return v

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: Optional[list[Any]]) -> Optional[list[Any]]:
        if v is not None and not v:
            raise ValueError("Generator fixture must declare at least one value")
        return v


class TestSpec(BaseModel):
    """A declared test."""

    kind: Literal["test"] = "test"
    title: str
    location: str = ""
    fixtures: list[str] = Field(default_factory=list)
    only: bool = False
    skip: bool = False

    @field_validator("fixtures")
    @classmethod
    def validate_fixtures(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name.isidentifier():
                raise ValueError(f"Fixture name must be an identifier: {name!r}")
        if len(set(v)) != len(v):
            raise ValueError("Fixture names must not repeat")
        return v


class SuiteSpec(BaseModel):
    """A declared suite."""

    kind: Literal["suite"] = "suite"
    title: str
    file: Optional[str] = None
    location: str = ""
    only: bool = False
    skip: bool = False
    entries: list[Annotated[Union["SuiteSpec", TestSpec], Field(discriminator="kind")]] = Field(
        default_factory=list
    )


SuiteSpec.model_rebuild()


class DeclarationFile(BaseModel):
    """Top-level declaration document."""

    fixtures: list[FixtureSpec] = Field(default_factory=list)
    suites: list[SuiteSpec] = Field(default_factory=list)


def load_declarations(path: Path | str) -> tuple[list[SuiteDeclaration], FixtureRegistry]:
    """Load suites and fixture registrations from a declaration file.

    Raises:
        FileNotFoundError: If the file does not exist
        DeclarationError: If the file is not a valid declaration document
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Declaration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = json.load(f)
        document = DeclarationFile.model_validate(data)
    except json.JSONDecodeError as e:
        raise DeclarationError(f"Invalid JSON in {path}: {e}") from e
    except ValidationError as e:
        raise DeclarationError(f"Invalid declarations in {path}: {e}") from e

    return build_declarations(document)


def build_declarations(document: DeclarationFile) -> tuple[list[SuiteDeclaration], FixtureRegistry]:
    """Turn a validated document into declarations and a registry."""
    registry = FixtureRegistry()
    for fixture in document.fixtures:
        registry.register(
            fixture.name,
            scope=fixture.scope,
            location=fixture.location,
            values=fixture.values,
            file=fixture.file,
        )

    suites = []
    for spec in document.suites:
        # A top-level suite stands for its declaring file.
        file = spec.file or spec.title
        suites.append(_build_suite(spec, file))
    return suites, registry


def _build_suite(spec: SuiteSpec, file: str) -> SuiteDeclaration:
    suite = SuiteDeclaration(
        title=spec.title,
        file=file,
        location=spec.location,
        only=spec.only,
        skipped=spec.skip,
    )
    for entry in spec.entries:
        if isinstance(entry, SuiteSpec):
            suite.add_suite(_build_suite(entry, file))
        else:
            suite.add_test(
                TestDeclaration(
                    title=entry.title,
                    fn=declared_callback(entry.fixtures),
                    file=file,
                    location=entry.location,
                    only=entry.only,
                    skipped=entry.skip,
                )
            )
    return suite
