"""Command-line entry points."""

from relaychat.cli.serve import main

__all__ = ["main"]
