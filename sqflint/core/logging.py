"""
SQFLint Logging Framework

Centralized logging configuration using loguru.
Library code only emits records; handlers are installed by the entry point.
"""

import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any

from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def _global_exception_handler(exc_type, exc_value, exc_tb):
    """Handle uncaught exceptions globally."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return

    error_msg = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
    logger.error(f"Uncaught exception:\n{error_msg}")


def _create_header(metadata: Dict[str, Any]) -> str:
    """Create a formatted session metadata header"""
    items = [(k, v) for k, v in metadata.items() if v is not None]
    max_key_len = max(len(str(k)) for k, _ in items)

    content_lines = []
    for key, value in items:
        key_padded = f"{key}:".ljust(max_key_len + 2)
        content_lines.append(f"  {key_padded} {value}")

    width = max(len(line) for line in content_lines) + 2
    width = max(width, 60)

    lines = []
    lines.append("┌" + "─" * width + "┐")
    lines.append("│" + " SQFLINT SESSION ".center(width) + "│")
    lines.append("├" + "─" * width + "┤")

    for content in content_lines:
        lines.append("│" + content.ljust(width) + "│")

    lines.append("└" + "─" * width + "┘")
    lines.append("")

    return "\n".join(lines)


def setup_console_only(level: str = "INFO"):
    """
    Setup console-only logging (default for the command line).

    Args:
        level: Log level
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    sys.excepthook = _global_exception_handler


def setup_logging(
    log_dir: Path,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    metadata: Optional[Dict[str, Any]] = None,
) -> Path:
    """
    Setup console and file logging.

    Creates {log_dir}/sqflint.log (with a metadata header) and {log_dir}/error.log.

    Args:
        log_dir: Directory for log files
        console_level: Log level for console output
        file_level: Log level for file output
        metadata: Optional session metadata to include in log header

    Returns:
        Path to the log directory
    """
    setup_console_only(console_level)

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "sqflint.log"
    default_metadata = {
        "Start Time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "Log Directory": str(log_dir),
    }
    full_metadata = {**default_metadata, **(metadata or {})}
    with open(log_file, "a", encoding="utf-8") as f:
        f.write(_create_header(full_metadata))
        f.write("\n")

    logger.add(
        log_file,
        level=file_level,
        format=FILE_FORMAT,
        rotation="10 MB",
        retention="7 days",
        encoding="utf-8",
        mode="a",
    )

    # Error log file - only errors and above
    logger.add(
        log_dir / "error.log",
        level="ERROR",
        format=FILE_FORMAT,
        rotation="10 MB",
        encoding="utf-8",
    )

    logger.info(f"Logging initialized: {log_dir}")

    return log_dir
