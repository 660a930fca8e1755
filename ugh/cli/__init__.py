"""Command Line Interface Package"""

from ugh.cli.main import main

__all__ = ["main"]
