"""Display management for CLI interface."""

from clopctl.ui.cli.display.progress import TerminalProgressView
from clopctl.ui.cli.display.result import ResultDisplay

__all__ = ["ResultDisplay", "TerminalProgressView"]
