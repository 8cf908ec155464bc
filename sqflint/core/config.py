"""
SQFLint Configuration

Handles configuration from environment variables, JSON files, and CLI arguments.
"""

import json
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .exceptions import ConfigError


DEFAULT_JAR_PATH = str(Path(__file__).parent.parent / "bin" / "SQFLint.jar")
DEFAULT_LINTER_ARGS = ["-j", "-v"]  # JSON output, verbose (variables included)
VALID_LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


@dataclass
class Config:
    """SQFLint client configuration"""

    # Java launcher
    java_path: Optional[str] = None  # None = JAVA_HOME, then PATH
    jar_path: str = DEFAULT_JAR_PATH
    linter_args: List[str] = field(default_factory=lambda: list(DEFAULT_LINTER_ARGS))

    # Full command override (skips Java entirely, e.g. a native linter build)
    command: List[str] = field(default_factory=list)

    # Scheduling
    debounce_seconds: float = 0.2
    timeout_seconds: float = 30.0  # 0 = no timeout

    # Logging
    log_level: str = "WARNING"

    @classmethod
    def from_json(cls, json_path: str) -> "Config":
        """Load configuration from JSON file"""
        with open(json_path, "r") as f:
            data = json.load(f)

        return cls(
            java_path=data.get("java_path"),
            jar_path=data.get("jar_path", DEFAULT_JAR_PATH),
            linter_args=data.get("linter_args", list(DEFAULT_LINTER_ARGS)),
            command=data.get("command", []),
            debounce_seconds=float(data.get("debounce_seconds", 0.2)),
            timeout_seconds=float(data.get("timeout_seconds", 30.0)),
            log_level=data.get("log_level", "WARNING"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables"""
        linter_args = os.environ.get("SQFLINT_ARGS")
        command = os.environ.get("SQFLINT_COMMAND", "")

        return cls(
            java_path=os.environ.get("SQFLINT_JAVA"),
            jar_path=os.environ.get("SQFLINT_JAR", DEFAULT_JAR_PATH),
            linter_args=linter_args.split() if linter_args else list(DEFAULT_LINTER_ARGS),
            command=shlex.split(command),
            debounce_seconds=float(os.environ.get("SQFLINT_DEBOUNCE", "0.2")),
            timeout_seconds=float(os.environ.get("SQFLINT_TIMEOUT", "30")),
            log_level=os.environ.get("SQFLINT_LOG_LEVEL", "WARNING").upper(),
        )

    def merge(self, other: "Config") -> "Config":
        """Merge another config into this one (other takes precedence for non-default values)"""
        defaults = Config()
        for field_name in self.__dataclass_fields__:
            other_val = getattr(other, field_name)
            if other_val is not None and other_val != getattr(defaults, field_name):
                setattr(self, field_name, other_val)
        return self

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors"""
        errors = []

        if self.debounce_seconds < 0:
            errors.append(f"debounce_seconds must be >= 0: {self.debounce_seconds}")

        if self.timeout_seconds < 0:
            errors.append(f"timeout_seconds must be >= 0: {self.timeout_seconds}")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log_level: {self.log_level}")

        # The jar only matters when launching through Java
        if not self.command:
            if not self.jar_path:
                errors.append("Must provide jar_path or command")
            elif not Path(self.jar_path).is_file():
                errors.append(f"Linter jar not found: {self.jar_path}")

        return errors

    def validate_or_raise(self) -> "Config":
        """Raise ConfigError if the configuration is invalid"""
        errors = self.validate()
        if errors:
            raise ConfigError("Invalid configuration", errors=errors)
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            "java_path": self.java_path,
            "jar_path": self.jar_path,
            "linter_args": self.linter_args,
            "command": self.command,
            "debounce_seconds": self.debounce_seconds,
            "timeout_seconds": self.timeout_seconds,
            "log_level": self.log_level,
        }
