"""src/clopctl/ui/cli/display/result.py
What: Print the machine-readable result of a batch.
Why: stdout carries only the JSON report; everything human-facing goes to stderr.
"""

from __future__ import annotations

from typing import final

from rich.console import Console

from clopctl.features.optimisation.domain import FinalReport, report_to_json


@final
class ResultDisplay:
    """Handles result display in CLI."""

    console: Console

    def __init__(self, console: Console | None = None) -> None:
        """Initialize result display."""
        self.console = console or Console(soft_wrap=True)

    def show_report(self, report: FinalReport) -> None:
        """Write the report as one JSON document to stdout."""
        self.console.out(report_to_json(report), highlight=False)
