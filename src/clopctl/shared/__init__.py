"""Helpers shared across layers."""

from .display_text import shorten_locator

__all__ = ["shorten_locator"]
