"""Configuration management for TestPlan."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PlanConfig(BaseModel):
    """Plan generation configuration."""

    grep: Optional[str] = Field(default=None, description="Only include tests whose full title matches")
    repeat_each: int = Field(default=1, description="Number of runs generated per test configuration")

    @field_validator("repeat_each")
    @classmethod
    def validate_repeat_each(cls, v: int) -> int:
        if v < 0:
            raise ValueError("repeat_each cannot be negative")
        return v

    @field_validator("grep")
    @classmethod
    def validate_grep(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class TestPlanConfig(BaseModel):
    """Main configuration for TestPlan."""

    declarations: str = Field(default="declarations.json", description="Path to the declaration file")
    plan: PlanConfig = Field(default_factory=PlanConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "TestPlanConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def find_and_load(cls, start_dir: Path | str | None = None) -> "TestPlanConfig":
        """Find and load configuration file, searching up the directory tree."""
        if start_dir is None:
            start_dir = Path.cwd()
        else:
            start_dir = Path(start_dir)

        config_names = ["testplan.json", ".testplan.json"]

        current = start_dir.resolve()
        while True:
            for name in config_names:
                config_path = current / name
                if config_path.exists():
                    return cls.from_file(config_path)
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Create testplan.json or run 'testplan init'"
        )

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)

    def get_declarations_path(self, base_dir: Path | str | None = None) -> Path:
        """Get the absolute path of the declaration file."""
        if base_dir is None:
            base_dir = Path.cwd()
        else:
            base_dir = Path(base_dir)

        return (base_dir / self.declarations).resolve()


def get_default_config() -> TestPlanConfig:
    """Return a default configuration."""
    return TestPlanConfig(
        declarations="declarations.json",
        plan=PlanConfig(grep=None, repeat_each=1),
    )


def create_example_config(output_path: Path | str) -> Path:
    """Create an example configuration file."""
    output_path = Path(output_path)
    config = get_default_config()
    config.to_file(output_path)
    return output_path
