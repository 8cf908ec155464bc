"""
Command line tests.

Run with: pytest tests/test_main.py -v
"""

import json
import shlex
import sys

import pytest
from loguru import logger

from sqflint.linter.models import ErrorMessage, Position, Range, WarningMessage
from sqflint.main import EXIT_FAILURE, EXIT_LINT_ERRORS, EXIT_OK, format_message, main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SQFLINT_COMMAND", "SQFLINT_JAR", "SQFLINT_JAVA", "SQFLINT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    # main() installs its own handlers and excepthook
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield
    logger.remove()


def _command(config) -> str:
    return " ".join(shlex.quote(part) for part in config.command)


class TestFormatMessage:
    def test_with_range(self):
        message = ErrorMessage("Missing ;", Range(Position(1, 9), Position(1, 10)))
        assert format_message("init.sqf", message) == "init.sqf:2:10: error: Missing ;"

    def test_without_range(self):
        assert format_message("init.sqf", WarningMessage("odd")) == "init.sqf: warning: odd"


class TestMain:
    def test_reports_errors(self, fake_linter, tmp_path, capsys):
        config = fake_linter.config(
            parts=['{"type": "error", "error": "Missing ;", "line": [2, 2], "column": [10, 10]}\n']
        )
        script = tmp_path / "init.sqf"
        script.write_text("_a = 1\n_b = 2\n")

        code = main([str(script), "--command", _command(config)])

        assert code == EXIT_LINT_ERRORS
        assert capsys.readouterr().out.strip() == f"{script}:2:10: error: Missing ;"
        assert fake_linter.inputs == ["_a = 1\n_b = 2\n"]

    def test_clean_file(self, fake_linter, tmp_path, capsys):
        config = fake_linter.config(
            parts=['{"type": "variable", "variable": "_a", "definitions": [], "usage": []}\n']
        )
        script = tmp_path / "init.sqf"
        script.write_text("_a = 1;")

        code = main([str(script), "--command", _command(config), "--json"])

        assert code == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data[str(script)]["variables"][0]["isLocal"] is True

    def test_launch_failure(self, tmp_path):
        script = tmp_path / "init.sqf"
        script.write_text("x")

        code = main([str(script), "--command", str(tmp_path / "missing-linter")])

        assert code == EXIT_FAILURE

    def test_invalid_config(self, tmp_path):
        script = tmp_path / "init.sqf"
        script.write_text("x")

        assert main([str(script), "--log-level", "loud"]) == EXIT_FAILURE

    def test_log_dir(self, fake_linter, tmp_path):
        config = fake_linter.config()
        script = tmp_path / "init.sqf"
        script.write_text("x")
        log_dir = tmp_path / "logs"

        code = main([str(script), "--command", _command(config), "--log-dir", str(log_dir)])

        assert code == EXIT_OK
        assert (log_dir / "sqflint.log").exists()

    def test_missing_jar(self, tmp_path, capsys):
        java = tmp_path / "java"
        java.write_text("")
        script = tmp_path / "init.sqf"
        script.write_text("x")

        code = main([str(script), "--java", str(java), "--jar", str(tmp_path / "SQFLint.jar")])

        assert code == EXIT_FAILURE
        assert capsys.readouterr().out == ""

    def test_log_dir_header(self, fake_linter, tmp_path):
        config = fake_linter.config()
        script = tmp_path / "init.sqf"
        script.write_text("x")
        log_dir = tmp_path / "logs"

        main([str(script), "--command", _command(config), "--log-dir", str(log_dir)])

        log_text = (log_dir / "sqflint.log").read_text(encoding="utf-8")
        assert "SQFLINT SESSION" in log_text
        assert str(log_dir) in log_text
