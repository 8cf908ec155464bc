"""
Unit tests for SQFLint configuration.

Run with: pytest tests/test_config.py -v
"""

import json

import pytest

from sqflint.core.config import DEFAULT_JAR_PATH, Config
from sqflint.core.exceptions import ConfigError


class TestConfig:
    """Tests for Config loading and validation."""

    def test_defaults(self):
        config = Config()
        assert config.linter_args == ["-j", "-v"]
        assert config.debounce_seconds == 0.2
        assert config.jar_path == DEFAULT_JAR_PATH
        assert config.command == []

    def test_valid_with_existing_jar(self, tmp_path):
        jar = tmp_path / "SQFLint.jar"
        jar.write_bytes(b"PK")
        assert Config(jar_path=str(jar)).validate() == []

    def test_missing_jar_reported(self, tmp_path):
        errors = Config(jar_path=str(tmp_path / "SQFLint.jar")).validate()
        assert len(errors) == 1
        assert "jar not found" in errors[0]

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SQFLINT_JAR", "/opt/sqflint/SQFLint.jar")
        monkeypatch.setenv("SQFLINT_DEBOUNCE", "0.5")
        monkeypatch.setenv("SQFLINT_COMMAND", "sqflint-native --json")
        monkeypatch.setenv("SQFLINT_LOG_LEVEL", "debug")

        config = Config.from_env()

        assert config.jar_path == "/opt/sqflint/SQFLint.jar"
        assert config.debounce_seconds == 0.5
        assert config.command == ["sqflint-native", "--json"]
        assert config.log_level == "DEBUG"

    def test_from_json(self, tmp_path):
        path = tmp_path / "sqflint.json"
        path.write_text(json.dumps({"java_path": "/usr/bin/java", "timeout_seconds": 5}))

        config = Config.from_json(str(path))

        assert config.java_path == "/usr/bin/java"
        assert config.timeout_seconds == 5.0
        assert config.linter_args == ["-j", "-v"]

    def test_merge_keeps_non_default_values(self):
        base = Config(jar_path="/a.jar", debounce_seconds=0.5)
        other = Config(timeout_seconds=3.0)

        base.merge(other)

        assert base.jar_path == "/a.jar"
        assert base.debounce_seconds == 0.5
        assert base.timeout_seconds == 3.0

    def test_validate(self):
        config = Config(debounce_seconds=-1, timeout_seconds=-2, log_level="LOUD", command=["linter"])
        errors = config.validate()
        assert len(errors) == 3

    def test_validate_or_raise(self):
        with pytest.raises(ConfigError) as exc_info:
            Config(jar_path="").validate_or_raise()
        assert "jar_path" in str(exc_info.value)

    def test_command_makes_jar_optional(self):
        assert Config(jar_path="", command=["linter"]).validate() == []

    def test_to_dict(self):
        data = Config(command=["linter"]).to_dict()
        assert data["command"] == ["linter"]
        assert set(data) == {
            "java_path",
            "jar_path",
            "linter_args",
            "command",
            "debounce_seconds",
            "timeout_seconds",
            "log_level",
        }
