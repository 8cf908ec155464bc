"""
Linter Data Models

Result types produced by a linter run. Positions are zero-based and
ranges are half-open in columns, matching editor (LSP) conventions.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class Position:
    """Zero-based line/character position."""

    line: int
    character: int

    def to_dict(self) -> dict:
        return {"line": self.line, "character": self.character}

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        return cls(line=data["line"], character=data["character"])


@dataclass(frozen=True)
class Range:
    """Start/end position pair. End character is exclusive."""

    start: Position
    end: Position

    def to_dict(self) -> dict:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> "Range":
        return cls(
            start=Position.from_dict(data["start"]),
            end=Position.from_dict(data["end"]),
        )


@dataclass(frozen=True)
class Message:
    """Base diagnostic. range is None when the linter reported no position."""

    message: str
    range: Optional[Range] = None

    severity = "message"

    def to_dict(self) -> dict:
        return {
            "severity": self.severity,
            "message": self.message,
            "range": self.range.to_dict() if self.range else None,
        }


@dataclass(frozen=True)
class ErrorMessage(Message):
    """Error in code."""

    severity = "error"


@dataclass(frozen=True)
class WarningMessage(Message):
    """Warning in code."""

    severity = "warning"


@dataclass(frozen=True)
class VariableInfo:
    """
    Definitions and usages of one variable across a document.

    SQF identifiers are case-insensitive, so ident holds the lower-cased
    name for callers merging usages.
    """

    name: str
    comment: Optional[str] = ""
    definitions: Sequence[Range] = ()
    usage: Sequence[Range] = ()

    @property
    def ident(self) -> str:
        return self.name.lower()

    @property
    def is_local(self) -> bool:
        """Local variables start with an underscore."""
        return self.name.startswith("_")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "ident": self.ident,
            "comment": self.comment,
            "isLocal": self.is_local,
            "definitions": [r.to_dict() for r in self.definitions],
            "usage": [r.to_dict() for r in self.usage],
        }


@dataclass
class ParseInfo:
    """
    Result of one linter run.

    Filled while the linter output streams in, then frozen: the lists
    become tuples and further appends raise RuntimeError.
    """

    errors: Sequence[ErrorMessage] = field(default_factory=list)
    warnings: Sequence[WarningMessage] = field(default_factory=list)
    variables: Sequence[VariableInfo] = field(default_factory=list)
    _frozen: bool = field(default=False, repr=False, compare=False)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_open(self):
        if self._frozen:
            raise RuntimeError("ParseInfo is frozen; the run has already finished")

    def add_error(self, error: ErrorMessage) -> None:
        self._check_open()
        self.errors.append(error)

    def add_warning(self, warning: WarningMessage) -> None:
        self._check_open()
        self.warnings.append(warning)

    def add_variable(self, variable: VariableInfo) -> None:
        self._check_open()
        self.variables.append(variable)

    def freeze(self) -> "ParseInfo":
        if not self._frozen:
            self.errors = tuple(self.errors)
            self.warnings = tuple(self.warnings)
            self.variables = tuple(self.variables)
            self._frozen = True
        return self

    def get_variable(self, name: str) -> Optional[VariableInfo]:
        """Find a variable by name (case-insensitive)."""
        ident = name.lower()
        for variable in self.variables:
            if variable.ident == ident:
                return variable
        return None

    def to_dict(self) -> dict:
        return {
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "variables": [v.to_dict() for v in self.variables],
        }

    def summary(self) -> str:
        return (
            f"{len(self.errors)} errors, {len(self.warnings)} warnings, "
            f"{len(self.variables)} variables"
        )
