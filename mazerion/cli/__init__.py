"""
Command-line interface.
"""

from mazerion.cli.main import cli, main

__all__ = ["cli", "main"]
