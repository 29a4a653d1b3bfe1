"""Command line argument options."""

from dataclasses import dataclass
from typing import Literal, final

from clopctl.features.optimisation.domain import CropSize, WorkItem


@final
@dataclass(slots=True)
class OptimiseArgs:
    """Command line arguments for the ``optimise`` subcommand."""

    command: Literal["optimise"]
    items: list[WorkItem]
    crop_size: CropSize | None
    downscale_factor: float | None
    speed_up_factor: float | None
    gui: bool
    progress: bool
    aggressive: bool
    copy: bool
    skip_errors: bool
    recursive: bool
    asynchronous: bool
    verbose: bool
    quiet: bool


CLIArgs = OptimiseArgs

__all__ = ["CLIArgs", "OptimiseArgs"]
