"""
CLI entry point for arith.

This allows the calculator to be run as:
    python -m arith [file] [options]
"""

import sys

from arith.arith_cli import main

if __name__ == "__main__":
    sys.exit(main())
