"""Shared fixtures for SQFLint tests."""

import json
import sys
import textwrap

import pytest

from sqflint.core.config import Config


_FAKE_LINTER = textwrap.dedent(
    """
    import sys
    import time

    if {read_stdin!r}:
        source = sys.stdin.buffer.read().decode("utf-8")
        with open({record_path!r}, "a", encoding="utf-8") as f:
            f.write(json.dumps(source) + "\\n")

    time.sleep({delay!r})
    for part in {parts!r}:
        sys.stdout.buffer.write(part.encode("utf-8"))
        sys.stdout.buffer.flush()
        time.sleep({pause!r})
    sys.stderr.write("fake linter done\\n")
    sys.exit({exit_code!r})
    """
)


class FakeLinter:
    """
    Stand-in for SQFLint.jar: a Python script that records its stdin
    (unless read_stdin is False) and writes the given output parts to
    stdout, flushing after each part.
    """

    def __init__(self, tmp_path):
        self.tmp_path = tmp_path
        self.record_path = tmp_path / "inputs.jsonl"
        self._count = 0

    def config(
        self, parts=(), exit_code=0, delay=0.0, pause=0.0, read_stdin=True, **overrides
    ) -> Config:
        self._count += 1
        script = self.tmp_path / f"fake_linter_{self._count}.py"
        script.write_text(
            "import json\n"
            + _FAKE_LINTER.format(
                record_path=str(self.record_path),
                parts=list(parts),
                exit_code=exit_code,
                delay=delay,
                pause=pause,
                read_stdin=read_stdin,
            ),
            encoding="utf-8",
        )
        settings = {
            "command": [sys.executable, str(script)],
            "debounce_seconds": 0.01,
            "timeout_seconds": 20.0,
        }
        settings.update(overrides)
        return Config(**settings)

    @property
    def inputs(self) -> list:
        """Source texts received by all fake linter runs, in order."""
        if not self.record_path.exists():
            return []
        lines = self.record_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines]


@pytest.fixture
def fake_linter(tmp_path):
    """Factory for configs that run a fake linter script."""
    return FakeLinter(tmp_path)
