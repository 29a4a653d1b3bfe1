"""Progress display functionality for CLI."""

from collections.abc import Sequence
from typing import final

from rich.console import Console
from rich.control import Control
from rich.segment import ControlType

from clopctl.platform.logging import ItemPathRichHandler, logger

_LINE_UP_AND_CLEAR = Control((ControlType.CURSOR_UP, 1), (ControlType.ERASE_IN_LINE, 2))


def _stderr_console() -> Console:
    """Reuse the logging console so progress and log lines share one stream."""

    for handler in logger.handlers:
        if isinstance(handler, ItemPathRichHandler):
            return handler.console
    return Console(stderr=True)


@final
class TerminalProgressView:
    """Draw the aggregate progress on stderr, rewriting it in place."""

    console: Console

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or _stderr_console()

    def redraw(self, erase: int, lines: Sequence[str]) -> None:
        """Move up over the ``erase`` previously drawn lines, clearing each, then print ``lines``."""

        if erase > 0:
            self.console.control(*([_LINE_UP_AND_CLEAR] * erase))
        for line in lines:
            # One physical row per line, or the erase count above goes stale.
            self.console.print(
                line,
                markup=False,
                highlight=False,
                soft_wrap=False,
                overflow="ellipsis",
                no_wrap=True,
                crop=True,
            )
