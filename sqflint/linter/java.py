"""
Java Launcher

Locates a Java runtime and builds the linter command line.
"""

import os
import shutil
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..core.config import Config
from ..core.exceptions import LaunchError


def find_java(java_path: Optional[str] = None) -> Optional[str]:
    """
    Find the java executable.

    Lookup order: explicit path, $JAVA_HOME/bin/java, java on PATH.

    Returns:
        Path to java, or None if not found
    """
    if java_path:
        return java_path if Path(java_path).exists() or shutil.which(java_path) else None

    java_home = os.environ.get("JAVA_HOME")
    if java_home:
        for name in ("java", "java.exe"):
            candidate = Path(java_home) / "bin" / name
            if candidate.is_file():
                return str(candidate)
        logger.debug(f"[Java] JAVA_HOME set but no java binary found: {java_home}")

    return shutil.which("java")


def build_command(config: Config) -> List[str]:
    """
    Build the linter command line.

    A configured command is used as-is; otherwise the jar is run with java.

    Raises:
        LaunchError: if no Java runtime or no linter jar can be found
    """
    if config.command:
        return list(config.command)

    java = find_java(config.java_path)
    if java is None:
        raise LaunchError("Failed to launch java process. Do you have java installed?")

    if not Path(config.jar_path).is_file():
        raise LaunchError(f"Linter jar not found: {config.jar_path}")

    return [java, "-jar", config.jar_path, *config.linter_args]
