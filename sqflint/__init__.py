"""
SQFLint - client for the SQF linter

Feeds SQF source to the linter process and returns errors, warnings and
variable usage with zero-based ranges.
"""

__version__ = "0.7.0"

from .core import (
    Config,
    LintError,
    SupersededError,
    LaunchError,
    WriteError,
    ProcessFault,
    LintTimeoutError,
    ConfigError,
)
from .linter import (
    Position,
    Range,
    Message,
    ErrorMessage,
    WarningMessage,
    VariableInfo,
    ParseInfo,
    LinterProcess,
    SQFLint,
    lint,
)

__all__ = [
    "Config",
    "LintError",
    "SupersededError",
    "LaunchError",
    "WriteError",
    "ProcessFault",
    "LintTimeoutError",
    "ConfigError",
    "Position",
    "Range",
    "Message",
    "ErrorMessage",
    "WarningMessage",
    "VariableInfo",
    "ParseInfo",
    "LinterProcess",
    "SQFLint",
    "lint",
]
