"""Command implementations for CLI."""

from clopctl.ui.cli.commands.optimise import OptimiseCommand

__all__ = ["OptimiseCommand"]
