"""Text layout of the aggregate progress view."""

from __future__ import annotations

from clopctl.shared.display_text import shorten_locator

from .session import ItemProgress, SessionSnapshot

FILLED: str = "█"
EMPTY: str = "░"


def progress_bar(fraction: float, segments: int) -> str:
    filled = int(min(1.0, max(0.0, fraction)) * segments)
    return FILLED * filled + EMPTY * (segments - filled)


def summary_line(snapshot: SessionSnapshot) -> str:
    return (
        f"Processed {snapshot.processed} of {snapshot.total}"
        f" | Success: {snapshot.succeeded}"
        f" | Failed: {snapshot.failed}"
    )


def item_line(progress: ItemProgress, *, segments: int, label_width: int) -> str:
    label = shorten_locator(progress.item.display_name, label_width)
    bar = progress_bar(progress.fraction_completed, segments)
    percent = f"{progress.fraction_completed * 100:6.2f}%"
    if progress.description:
        return f"{label}: {progress.description} {bar} {percent}"
    return f"{label}: {bar} {percent}"


def render_lines(snapshot: SessionSnapshot, *, segments: int, label_width: int) -> list[str]:
    """Summary line followed by one line per unresolved item."""

    lines = [summary_line(snapshot)]
    lines.extend(
        item_line(progress, segments=segments, label_width=label_width)
        for progress in snapshot.in_progress
    )
    return lines


__all__ = ["EMPTY", "FILLED", "item_line", "progress_bar", "render_lines", "summary_line"]
