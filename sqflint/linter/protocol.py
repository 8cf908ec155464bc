"""
SQFLint Output Protocol

Decodes the linter's JSON output into result models.

The linter (run with -j -v) writes one JSON object per line on stdout:
    {"type": "error", "error": "...", "line": [3, 3], "column": [5, 8]}
    {"type": "variable", "variable": "_x", "comment": "// note",
     "definitions": [{"line": [1, 1], "column": [1, 2]}], "usage": []}

Lines and columns are one-based and inclusive.
"""

import codecs
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from loguru import logger
from pydantic import BaseModel, ValidationError, model_validator

from .models import (
    ErrorMessage,
    ParseInfo,
    Position,
    Range,
    VariableInfo,
    WarningMessage,
)


# Message framing: each record is a line of JSON terminated by newline
MESSAGE_DELIMITER = "\n"
ENCODING = "utf-8"
LINE_ENDINGS = "\r\n"

COMMENT_LINE_SEPARATOR = "\r\n"


def _check_span(line: Tuple[int, int], column: Tuple[int, int]) -> None:
    """Reject spans that cannot map to a valid zero-based range."""
    if line[0] < 1 or line[1] < 1 or column[0] < 1 or column[1] < 0:
        raise ValueError(f"position out of range: line={list(line)} column={list(column)}")
    # Mapped start (line0-1, col0-1) must not come after mapped end (line1-1, col1)
    if (line[0], column[0] - 1) > (line[1], column[1]):
        raise ValueError(f"start after end: line={list(line)} column={list(column)}")


class RawPosition(BaseModel):
    """Raw position received from the linter."""

    line: Tuple[int, int]
    column: Tuple[int, int]

    @model_validator(mode="after")
    def check_span(self):
        _check_span(self.line, self.column)
        return self


class RawMessage(BaseModel):
    """Raw message received from the linter."""

    type: str
    error: Optional[str] = None
    message: Optional[str] = None

    variable: Optional[str] = None
    comment: Optional[str] = None
    # Spans are validated one at a time by StreamDecoder
    usage: List[Any] = []
    definitions: List[Any] = []

    line: Optional[Tuple[int, int]] = None
    column: Optional[Tuple[int, int]] = None

    @model_validator(mode="after")
    def check_span(self):
        if self.line is not None and self.column is not None:
            _check_span(self.line, self.column)
        if self.type == "variable" and not self.variable:
            raise ValueError("variable record without a name")
        return self

    def has_position(self) -> bool:
        return self.line is not None and self.column is not None

    @property
    def text(self) -> str:
        return self.error or self.message or ""


@dataclass(frozen=True)
class DecodeError:
    """A line that could not be decoded into a RawMessage."""

    line: str
    reason: str


def parse_position(position: Union[RawPosition, RawMessage]) -> Range:
    """
    Convert a raw one-based, inclusive position to a zero-based range.

    The end character is not decremented: the inclusive raw end becomes
    an exclusive end.
    """
    return Range(
        Position(position.line[0] - 1, position.column[0] - 1),
        Position(position.line[1] - 1, position.column[1]),
    )


def parse_comment(comment: Optional[str]) -> Optional[str]:
    """Remove comment markers and trim the comment."""
    if not comment:
        return comment

    comment = comment.strip()
    if comment.startswith("//"):
        comment = comment[2:].strip()
    elif comment.startswith("/*"):
        body = comment[2:]
        if body.endswith("*/"):
            body = body[:-2]

        lines = []
        # Only newlines separate comment lines; \r is removed by strip()
        for cline in body.strip().split("\n"):
            cline = cline.strip()
            if cline.startswith("*"):
                cline = cline[1:].strip()
            if cline:
                lines.append(cline)
        comment = COMMENT_LINE_SEPARATOR.join(lines).strip()

    return comment


def decode_line(line: str) -> Union[RawMessage, DecodeError]:
    """Decode one output line. Never raises on bad input."""
    try:
        return RawMessage.model_validate_json(line)
    except ValidationError as e:
        reasons = "; ".join(err["msg"] for err in e.errors())
        return DecodeError(line=line, reason=reasons)


class StreamDecoder:
    """
    Incremental decoder for the linter's stdout.

    Chunks may split records (and multi-byte characters) anywhere; a
    trailing partial line is kept until the next chunk or close().
    Malformed lines are logged and skipped without affecting other lines.
    A malformed usage or definition span inside a variable record drops
    only that span; the variable and its other spans are kept.
    """

    def __init__(self, info: ParseInfo, source: str = "SQFLint"):
        self.info = info
        self.source = source
        self._decoder = codecs.getincrementaldecoder(ENCODING)(errors="replace")
        self._buffer = ""

        # Counters for diagnostics
        self.records = 0
        self.skipped = 0
        self.malformed = 0
        self.bad_spans = 0

    def feed(self, chunk: bytes) -> None:
        """Process one chunk of output."""
        if not chunk:
            return

        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split(MESSAGE_DELIMITER)
        for line in lines:
            self._feed_line(line)

    def close(self) -> None:
        """Flush the remaining partial line at end of stream."""
        self._buffer += self._decoder.decode(b"", final=True)
        remaining, self._buffer = self._buffer, ""
        self._feed_line(remaining)

    def _feed_line(self, line: str) -> None:
        line = line.strip(LINE_ENDINGS)
        if not line:
            return

        result = decode_line(line)
        if isinstance(result, DecodeError):
            self.malformed += 1
            logger.warning(f"[{self.source}] Failed to parse response: >{line}< ({result.reason})")
            return

        self._classify(result)

    def _classify(self, message: RawMessage) -> None:
        """Create a result entry based on the message type."""
        position = parse_position(message) if message.has_position() else None

        if message.type == "error":
            self.info.add_error(ErrorMessage(message.text, position))
        elif message.type == "warning":
            self.info.add_warning(WarningMessage(message.text, position))
        elif message.type == "variable":
            self.info.add_variable(
                VariableInfo(
                    name=message.variable,
                    comment=parse_comment(message.comment) or "",
                    definitions=self._spans(message.variable, "definition", message.definitions),
                    usage=self._spans(message.variable, "usage", message.usage),
                )
            )
        else:
            self.skipped += 1
            logger.trace(f"[{self.source}] Ignoring record type: {message.type}")
            return

        self.records += 1

    def _spans(self, variable: str, kind: str, items: List[Any]) -> Tuple[Range, ...]:
        ranges = []
        for item in items:
            try:
                position = RawPosition.model_validate(item)
            except ValidationError as e:
                self.bad_spans += 1
                reasons = "; ".join(err["msg"] for err in e.errors())
                logger.warning(f"[{self.source}] Skipping bad {kind} of {variable}: {item!r} ({reasons})")
                continue
            ranges.append(parse_position(position))
        return tuple(ranges)
