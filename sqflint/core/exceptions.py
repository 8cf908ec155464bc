"""
SQFLint Exceptions

Custom exceptions for linter runs.
"""

from typing import List, Optional


class LintError(Exception):
    """Base exception for linter errors"""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
    ):
        self.message = message
        self.command = command
        self.returncode = returncode
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.command:
            parts.append(f"command={' '.join(self.command)}")
        if self.returncode is not None:
            parts.append(f"returncode={self.returncode}")
        return " | ".join(parts)


class SupersededError(LintError):
    """Pending request was replaced by a newer one before it started"""

    def __init__(self, message: str = "Superseded by a newer request", **kwargs):
        super().__init__(message, **kwargs)


class LaunchError(LintError):
    """Linter process could not be started"""
    pass


class WriteError(LintError):
    """Source text could not be delivered to the linter"""
    pass


class ProcessFault(LintError):
    """I/O failure on the linter's pipes"""
    pass


class LintTimeoutError(LintError):
    """Linter run took too long"""

    def __init__(self, message: str, timeout: float = None, **kwargs):
        self.timeout = timeout
        super().__init__(message, **kwargs)


class ConfigError(LintError):
    """Invalid configuration"""

    def __init__(self, message: str, errors: list = None):
        self.errors = errors or []
        super().__init__(message)

    def _format_message(self) -> str:
        msg = self.message
        if self.errors:
            msg += f" | {'; '.join(self.errors)}"
        return msg
