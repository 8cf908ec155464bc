"""
SQFLint Core Module

Configuration, logging and exceptions shared by the linter client.
"""

from .config import Config
from .exceptions import (
    LintError,
    SupersededError,
    LaunchError,
    WriteError,
    ProcessFault,
    LintTimeoutError,
    ConfigError,
)
from .logging import setup_logging, setup_console_only

__all__ = [
    "Config",
    "LintError",
    "SupersededError",
    "LaunchError",
    "WriteError",
    "ProcessFault",
    "LintTimeoutError",
    "ConfigError",
    "setup_logging",
    "setup_console_only",
]
