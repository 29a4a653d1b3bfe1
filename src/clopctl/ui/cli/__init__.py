"""Command line interface package."""

from clopctl.ui.cli.cli import CommandProcessor, main

__all__ = ["CommandProcessor", "main"]
