"""
Linter Process

Runs one linter subprocess: source text goes in on stdin, JSON records
come back on stdout.
"""

import asyncio
from typing import List, Optional

from loguru import logger

from ..core.config import Config
from ..core.exceptions import (
    LaunchError,
    LintTimeoutError,
    ProcessFault,
    WriteError,
)
from .java import build_command
from .models import ParseInfo
from .protocol import ENCODING, StreamDecoder


CHUNK_SIZE = 64 * 1024
KILL_GRACE_SECONDS = 2.0
EXIT_GRACE_SECONDS = 1.0  # wait for a linter that stopped reading stdin to exit


class LinterProcess:
    """
    Runs the linter once per call to run().

    Each run owns its subprocess from launch to exit. A non-zero exit
    status is logged, and the partial result is still returned.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    async def run(self, contents: str) -> ParseInfo:
        """
        Lint source text.

        Args:
            contents: Source text to lint

        Returns:
            Frozen ParseInfo with everything the linter reported

        Raises:
            LaunchError: the process could not be started
            WriteError: the source could not be written and the process kept running
            ProcessFault: reading the process output failed
            LintTimeoutError: the run exceeded timeout_seconds
        """
        cmd = build_command(self.config)
        process = await self._launch(cmd)

        timeout = self.config.timeout_seconds or None
        try:
            info = await asyncio.wait_for(self._communicate(process, cmd, contents), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"[Linter:{process.pid}] Timed out after {timeout}s")
            await self._stop(process)
            raise LintTimeoutError("Linter run timed out", timeout=timeout, command=cmd)
        except asyncio.CancelledError:
            logger.debug(f"[Linter:{process.pid}] Run cancelled, killing process")
            self._kill(process)
            raise

        return info.freeze()

    async def _launch(self, cmd: List[str]) -> asyncio.subprocess.Process:
        logger.debug(f"[Linter] Starting: {' '.join(cmd)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            logger.error(f"[Linter] Failed to call sqflint. Do you have java installed? ({e})")
            raise LaunchError(f"Failed to launch linter process: {e}", command=cmd) from e

        logger.debug(f"[Linter:{process.pid}] Started")
        return process

    async def _communicate(
        self,
        process: asyncio.subprocess.Process,
        cmd: List[str],
        contents: str,
    ) -> ParseInfo:
        info = ParseInfo()
        decoder = StreamDecoder(info, source=f"Linter:{process.pid}")

        readers = asyncio.gather(
            self._read_stdout(process, decoder),
            self._read_stderr(process),
        )

        try:
            try:
                await self._write_stdin(process, cmd, contents)
            except WriteError as e:
                # A linter may exit without reading all of stdin; its output still counts
                if not await self._exits_within(process, EXIT_GRACE_SECONDS):
                    logger.error(f"[Linter:{process.pid}] Failed to contact the sqflint: {e.message}")
                    await self._stop(process, force=True)
                    raise
                logger.debug(f"[Linter:{process.pid}] Exited before reading all input: {e.message}")

            try:
                await readers
            except OSError as e:
                logger.error(f"[Linter:{process.pid}] Failed to read linter output: {e}")
                await self._stop(process, force=True)
                raise ProcessFault(f"Failed to read linter output: {e}", command=cmd) from e
        finally:
            if not readers.done():
                readers.cancel()

        returncode = await process.wait()
        if returncode != 0:
            logger.warning(
                f"[Linter:{process.pid}] Failed to run sqflint (exit code {returncode}), "
                f"returning partial result: {info.summary()}"
            )
        else:
            logger.debug(f"[Linter:{process.pid}] Finished: {info.summary()}")

        if decoder.malformed:
            logger.warning(f"[Linter:{process.pid}] Skipped {decoder.malformed} malformed lines")

        return info

    async def _write_stdin(
        self,
        process: asyncio.subprocess.Process,
        cmd: List[str],
        contents: str,
    ) -> None:
        try:
            process.stdin.write(contents.encode(ENCODING))
            await process.stdin.drain()
            process.stdin.close()
            await process.stdin.wait_closed()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise WriteError(f"Failed to write source to linter: {e}", command=cmd) from e

    async def _read_stdout(self, process: asyncio.subprocess.Process, decoder: StreamDecoder) -> None:
        while True:
            chunk = await process.stdout.read(CHUNK_SIZE)
            if not chunk:
                break
            decoder.feed(chunk)
        decoder.close()

    async def _read_stderr(self, process: asyncio.subprocess.Process) -> None:
        while True:
            chunk = await process.stderr.read(CHUNK_SIZE)
            if not chunk:
                break
            text = chunk.decode(ENCODING, errors="replace").rstrip()
            if text:
                logger.debug(f"[Linter:{process.pid}] stderr: {text}")

    async def _exits_within(self, process: asyncio.subprocess.Process, timeout: float) -> bool:
        try:
            await asyncio.wait_for(process.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            return False
        return True

    def _kill(self, process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass

    async def _stop(self, process: asyncio.subprocess.Process, force: bool = False) -> None:
        """Terminate the process, killing it if it does not exit in time."""
        if process.returncode is not None:
            return

        try:
            if force:
                process.kill()
            else:
                process.terminate()

            try:
                await asyncio.wait_for(process.wait(), timeout=KILL_GRACE_SECONDS)
            except asyncio.TimeoutError:
                logger.warning(f"[Linter:{process.pid}] Force killing...")
                process.kill()
                await process.wait()

        except ProcessLookupError:
            # Process already dead
            pass
