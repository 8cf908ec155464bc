"""
Entry point for running the linter client.

Usage:
    python -m sqflint [OPTIONS] FILE [FILE ...]
"""

import sys

from .main import main


if __name__ == "__main__":
    sys.exit(main())
