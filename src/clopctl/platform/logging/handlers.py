"""Where: platform/logging/handlers.py
What: Rich console handler that keeps item locators short and readable.
Why: Log lines share stderr with the in-place progress view.
"""

from __future__ import annotations

import logging
from typing import Any, Final

from rich.logging import RichHandler
from rich.text import Text

from clopctl.shared.display_text import shorten_locator

_ITEM_WIDTH: Final[int] = 60


class ItemPathRichHandler(RichHandler):
    """Render ``item`` log extras in white with a leading-ellipsis shortening."""

    def __init__(self, **kwargs: Any) -> None:
        _ = kwargs.setdefault("show_path", False)
        _ = kwargs.setdefault("markup", False)
        super().__init__(**kwargs)

    def render_message(self, record: logging.LogRecord, message: str) -> Text:
        rendered = super().render_message(record, message)
        text = rendered if isinstance(rendered, Text) else Text(str(rendered))

        item = getattr(record, "item", None)
        if item:
            if text.plain:
                _ = text.append(" ")
            _ = text.append(shorten_locator(str(item), _ITEM_WIDTH), style="white")
        return text


__all__ = ["ItemPathRichHandler"]
