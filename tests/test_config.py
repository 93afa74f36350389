"""Tests for the configuration module."""

import json
import tempfile
from pathlib import Path

import pytest

from testplan.config import (
    PlanConfig,
    TestPlanConfig,
    create_example_config,
    get_default_config,
)


class TestPlanConfigModel:
    """Tests for PlanConfig."""

    def test_default_values(self):
        """Test default values are set correctly."""
        config = PlanConfig()
        assert config.grep is None
        assert config.repeat_each == 1

    def test_repeat_each_validation(self):
        """Test that repeat_each cannot be negative."""
        with pytest.raises(ValueError):
            PlanConfig(repeat_each=-1)

    def test_repeat_each_zero_allowed(self):
        """Test that zero repeats is a valid configuration."""
        assert PlanConfig(repeat_each=0).repeat_each == 0

    def test_blank_grep_is_none(self):
        """Test that a whitespace-only grep means no filtering."""
        assert PlanConfig(grep="   ").grep is None


class TestTestPlanConfig:
    """Tests for TestPlanConfig."""

    def test_default_config(self):
        """Test creating a default configuration."""
        config = get_default_config()
        assert config.declarations == "declarations.json"
        assert config.plan.repeat_each == 1

    def test_from_file(self):
        """Test loading configuration from a file."""
        config_data = {
            "declarations": "plan/decl.json",
            "plan": {"grep": "/login/i", "repeat_each": 3},
        }

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "testplan.json"
            path.write_text(json.dumps(config_data))

            config = TestPlanConfig.from_file(path)
            assert config.declarations == "plan/decl.json"
            assert config.plan.grep == "/login/i"
            assert config.plan.repeat_each == 3

    def test_from_file_not_found(self):
        """Test loading from non-existent file raises error."""
        with pytest.raises(FileNotFoundError):
            TestPlanConfig.from_file("/nonexistent/path.json")

    def test_to_file(self):
        """Test saving configuration to a file."""
        config = get_default_config()
        config.plan.repeat_each = 4

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "config.json"
            config.to_file(path)

            assert path.exists()

            loaded = TestPlanConfig.from_file(path)
            assert loaded.plan.repeat_each == 4

    def test_find_and_load_searches_parents(self):
        """Test that configuration is found in a parent directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            (base / ".testplan.json").write_text(json.dumps({"declarations": "found.json"}))
            nested = base / "a" / "b"
            nested.mkdir(parents=True)

            config = TestPlanConfig.find_and_load(nested)
            assert config.declarations == "found.json"

    def test_create_example_config(self):
        """Test creating an example configuration file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "example.json"
            result = create_example_config(path)

            assert result == path
            with open(path) as f:
                data = json.load(f)
                assert "declarations" in data
                assert "plan" in data

    def test_get_declarations_path(self):
        """Test resolving the declaration file against a base directory."""
        config = get_default_config()

        with tempfile.TemporaryDirectory() as tmpdir:
            path = config.get_declarations_path(tmpdir)
            assert path.is_absolute()
            assert path.name == "declarations.json"
