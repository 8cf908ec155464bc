"""
SQFLint Scheduler

Debounced entry point for linting. Rapid requests (one per keystroke)
are coalesced so that only the latest text is linted.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..core.config import Config
from ..core.exceptions import LintError, SupersededError
from .models import ParseInfo
from .runner import LinterProcess


@dataclass
class PendingTask:
    """Lint request waiting for its debounce timer."""

    future: asyncio.Future
    contents: str


class SQFLint:
    """
    Debounced linter client.

    Holds at most one pending request. A new request rejects the pending
    one with SupersededError and restarts the debounce timer. Runs never
    overlap: a request whose timer fires during a run starts when that run
    finishes, and stays replaceable until then.

    Usage:
        linter = SQFLint(Config(jar_path="/path/to/SQFLint.jar"))
        try:
            info = await linter.parse(text)
        except SupersededError:
            pass
    """

    def __init__(self, config: Optional[Config] = None, runner: Optional[LinterProcess] = None):
        self.config = config or Config()
        self.runner = runner or LinterProcess(self.config)

        self._pending: Optional[PendingTask] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._active: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._active is not None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def parse(self, contents: str) -> "asyncio.Future[ParseInfo]":
        """
        Queue source text for linting.

        Linting starts after debounce_seconds without a newer request.
        Must be called from a running event loop.

        Returns:
            Future resolving to the ParseInfo, or failing with SupersededError
            if a newer request replaced this one before it started.
        """
        loop = asyncio.get_running_loop()

        self._supersede()

        future = loop.create_future()
        self._pending = PendingTask(future=future, contents=contents)
        self._timer = loop.call_later(self.config.debounce_seconds, self._on_timer)
        return future

    def _supersede(self) -> None:
        """Drop the pending task (if any) and its timer."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self._pending is not None:
            if not self._pending.future.done():
                self._pending.future.set_exception(SupersededError())
            logger.trace("[SQFLint] Pending request superseded")
            self._pending = None

    def _on_timer(self) -> None:
        self._timer = None
        if self._active is not None:
            # Started by _start_next once the current run finishes
            logger.debug("[SQFLint] Run in progress, request waits for it")
            return
        self._start_next()

    def _start_next(self) -> None:
        task, self._pending = self._pending, None
        if task is None:
            return

        if task.future.done():
            # Cancelled by the caller while waiting
            return

        self._active = asyncio.get_running_loop().create_task(self._process(task))

    async def _process(self, task: PendingTask) -> None:
        """Run the linter for a task and settle its future."""
        try:
            info = await self.runner.run(task.contents)
        except asyncio.CancelledError:
            task.future.cancel()
            raise
        except LintError as e:
            if not task.future.done():
                task.future.set_exception(e)
        except Exception as e:
            logger.exception(f"[SQFLint] Unexpected linter failure: {e}")
            if not task.future.done():
                task.future.set_exception(e)
        else:
            if not task.future.done():
                task.future.set_result(info)
        finally:
            self._active = None
            # A request whose timer already fired was waiting on this run
            if self._pending is not None and self._timer is None:
                self._start_next()

    async def wait_idle(self) -> None:
        """Wait for the in-flight run (if any) to finish."""
        while self._active is not None:
            await asyncio.shield(self._active)

    def close(self) -> None:
        """Drop the pending request. An in-flight run is left to finish."""
        self._supersede()
