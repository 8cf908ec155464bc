"""
SQFLint Linter Client

Runs the SQF linter (SQFLint.jar) and converts its JSON output into
editor-friendly diagnostics:
- Debounced scheduling of lint requests (SQFLint)
- One subprocess per run (LinterProcess)
- Streaming decoding of JSON output lines (StreamDecoder)
"""

from typing import Optional

from ..core.config import Config
from .models import (
    Position,
    Range,
    Message,
    ErrorMessage,
    WarningMessage,
    VariableInfo,
    ParseInfo,
)
from .protocol import (
    RawMessage,
    RawPosition,
    DecodeError,
    StreamDecoder,
    decode_line,
    parse_comment,
    parse_position,
)
from .runner import LinterProcess
from .scheduler import SQFLint, PendingTask


async def lint(contents: str, config: Optional[Config] = None) -> ParseInfo:
    """Lint source text once, without debouncing."""
    return await LinterProcess(config).run(contents)


__all__ = [
    # Models
    "Position",
    "Range",
    "Message",
    "ErrorMessage",
    "WarningMessage",
    "VariableInfo",
    "ParseInfo",
    # Protocol
    "RawMessage",
    "RawPosition",
    "DecodeError",
    "StreamDecoder",
    "decode_line",
    "parse_comment",
    "parse_position",
    # Runner / scheduler
    "LinterProcess",
    "SQFLint",
    "PendingTask",
    "lint",
]
