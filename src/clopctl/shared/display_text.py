"""
Summary: Shorten item locators for narrow terminal columns.
Why: Progress lines and log records must stay on one line for in-place redraws.
"""

from __future__ import annotations

ELLIPSIS: str = "…"


def shorten_locator(locator: str, width: int) -> str:
    """Return ``locator`` truncated to ``width`` characters with a leading ellipsis.

    The tail of a path carries the file name, so characters are dropped from
    the front. When possible the cut is moved forward to the next ``/`` so
    the result starts at a path component boundary.
    """

    if width <= 0:
        return ""
    if len(locator) <= width:
        return locator
    if width == 1:
        return ELLIPSIS

    tail = locator[len(locator) - (width - 1):]
    boundary = tail.find("/")
    if 0 < boundary < len(tail) - 1:
        tail = tail[boundary:]
    return f"{ELLIPSIS}{tail}"


__all__ = ["ELLIPSIS", "shorten_locator"]
