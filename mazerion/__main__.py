"""
Entry point for running mazerion as a module.

Usage:
    python -m mazerion list
    python -m mazerion calc abv -p og=1.050 -p fg=1.010
    python -m mazerion serve --port 8000
"""

import sys

from mazerion.cli.main import cli

if __name__ == "__main__":
    sys.exit(cli())
