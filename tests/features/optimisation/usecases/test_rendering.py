"""Tests for the text layout of the progress view."""

from clopctl.features.optimisation.domain import WorkItem
from clopctl.features.optimisation.usecases.rendering import (
    EMPTY,
    FILLED,
    item_line,
    progress_bar,
    render_lines,
)
from clopctl.features.optimisation.usecases.session import ItemProgress, SessionSnapshot


def test_bar_has_fixed_width() -> None:
    assert progress_bar(0.0, 20) == EMPTY * 20
    assert progress_bar(0.5, 20) == FILLED * 10 + EMPTY * 10
    assert progress_bar(1.0, 20) == FILLED * 20
    assert len(progress_bar(0.333, 20)) == 20


def test_item_line_shows_description_and_percentage() -> None:
    progress = ItemProgress(WorkItem("file:///tmp/a.mov"), 0.25, "Encoding")

    line = item_line(progress, segments=20, label_width=50)

    assert line == f"/tmp/a.mov: Encoding {FILLED * 5}{EMPTY * 15}  25.00%"


def test_long_labels_are_shortened_from_the_front() -> None:
    locator = "https://example.com/" + "deep/" * 20 + "final.png"
    progress = ItemProgress(WorkItem(locator), 1.0)

    line = item_line(progress, segments=20, label_width=30)

    label = line.split(": ")[0]
    assert label.startswith("…")
    assert label.endswith("final.png")
    assert len(label) <= 30
    assert line.endswith("100.00%")


def test_render_lines_has_summary_then_unresolved_items() -> None:
    snapshot = SessionSnapshot(
        total=3,
        succeeded=1,
        failed=1,
        in_progress=(ItemProgress(WorkItem("https://example.com/x.png"), 0.0),),
    )

    lines = render_lines(snapshot, segments=20, label_width=50)

    assert lines[0] == "Processed 2 of 3 | Success: 1 | Failed: 1"
    assert len(lines) == 2
    assert lines[1].startswith("https://example.com/x.png: ")
