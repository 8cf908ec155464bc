"""
SQFLint - Command Line Entry Point

Lints SQF files with the linter and prints the diagnostics.

Usage:
    sqflint init.sqf functions/fn_spawn.sqf
    cat init.sqf | sqflint -
    sqflint --json --variables init.sqf
"""

import argparse
import asyncio
import json
import shlex
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from .core import Config, ConfigError, LintError, setup_console_only, setup_logging
from .linter import LinterProcess, Message, ParseInfo


EXIT_OK = 0
EXIT_LINT_ERRORS = 1
EXIT_FAILURE = 2


# =============================================================================
# Output Helpers
# =============================================================================

def print_error(msg: str):
    print(f"\033[0;31m[ERROR]\033[0m {msg}", file=sys.stderr)


def format_message(path: str, message: Message) -> str:
    """Format a diagnostic as path:line:col: severity: message (one-based)."""
    if message.range is None:
        return f"{path}: {message.severity}: {message.message}"
    start = message.range.start
    return f"{path}:{start.line + 1}:{start.character + 1}: {message.severity}: {message.message}"


def format_text(path: str, info: ParseInfo, show_variables: bool = False) -> List[str]:
    lines = [format_message(path, m) for m in (*info.errors, *info.warnings)]
    if show_variables:
        for variable in info.variables:
            scope = "local" if variable.is_local else "global"
            lines.append(
                f"{path}: variable: {variable.name} ({scope}, "
                f"{len(variable.definitions)} definitions, {len(variable.usage)} usages)"
            )
    return lines


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="sqflint",
        description="SQFLint - lint SQF scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("files", nargs="+", help="SQF files to lint ('-' reads stdin)")
    parser.add_argument("--config", type=str, help="JSON configuration file path")

    # Linter launch
    parser.add_argument("--java", type=str, help="Java executable (default: JAVA_HOME, then PATH)")
    parser.add_argument("--jar", type=str, help="Path to SQFLint.jar")
    parser.add_argument("--command", type=str, help="Full linter command, replaces java -jar")
    parser.add_argument("--timeout", type=float, help="Timeout per file in seconds (0 = none)")

    # Output
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--variables", action="store_true", help="Also list variables")

    # Logging
    parser.add_argument("--log-level", type=str, help="Console log level (default: WARNING)")
    parser.add_argument("--log-dir", type=str, help="Also write logs to this directory")

    return parser.parse_args(argv)


def create_config_from_args(args: argparse.Namespace) -> Config:
    """Create Config from parsed arguments"""
    # Start with environment config
    config = Config.from_env()

    if args.config:
        config.merge(Config.from_json(args.config))

    if args.java:
        config.java_path = args.java
    if args.jar:
        config.jar_path = args.jar
    if args.command:
        config.command = shlex.split(args.command)
    if args.timeout is not None:
        config.timeout_seconds = args.timeout
    if args.log_level:
        config.log_level = args.log_level.upper()

    return config


# =============================================================================
# Linting
# =============================================================================

def read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


async def lint_files(paths: List[str], config: Config) -> List[Tuple[str, ParseInfo]]:
    """Lint files one after another (one linter process at a time)."""
    runner = LinterProcess(config)
    results = []
    for path in paths:
        contents = read_source(path)
        logger.debug(f"[SQFLint] Linting {path} ({len(contents)} chars)")
        info = await runner.run(contents)
        logger.info(f"[SQFLint] {path}: {info.summary()}")
        results.append((path, info))
    return results


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = parse_args(argv)

    try:
        config = create_config_from_args(args).validate_or_raise()
    except (ConfigError, OSError, ValueError) as e:
        print_error(str(e))
        return EXIT_FAILURE

    console_level = config.log_level.upper()
    if args.log_dir:
        setup_logging(
            Path(args.log_dir),
            console_level=console_level,
            metadata={"Files": ", ".join(args.files), "Command": " ".join(config.command) or None},
        )
    else:
        setup_console_only(console_level)

    try:
        results = asyncio.run(lint_files(args.files, config))
    except (LintError, OSError) as e:
        print_error(str(e))
        return EXIT_FAILURE

    if args.json:
        print(json.dumps({path: info.to_dict() for path, info in results}, indent=2))
    else:
        for path, info in results:
            for line in format_text(path, info, show_variables=args.variables):
                print(line)

    has_errors = any(info.errors for _, info in results)
    return EXIT_LINT_ERRORS if has_errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
