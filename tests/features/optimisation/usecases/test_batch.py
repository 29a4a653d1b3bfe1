"""
Summary: Tests for batch validation, crop parsing and request building.
Why: Bad input must stop the run before anything is sent.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from clopctl.features.optimisation.domain import CropSize, ValidationError, WorkItem
from clopctl.features.optimisation.usecases import (
    build_request,
    collect_items,
    new_request_id,
    parse_crop_size,
    validate_factor,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1200x630", CropSize(1200, 630)),
        ("1200X630", CropSize(1200, 630)),
        ("1200×630", CropSize(1200, 630)),
        ("50", CropSize(50, 50)),
    ],
)
def test_crop_sizes_parse(raw: str, expected: CropSize) -> None:
    assert parse_crop_size(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", "12x", "x12", "0", "0x10", "-5", "1.5x2"])
def test_invalid_crop_sizes_fail_validation(raw: str) -> None:
    with pytest.raises(ValidationError):
        _ = parse_crop_size(raw)


def test_factors_must_be_positive() -> None:
    assert validate_factor("speed", None) is None
    assert validate_factor("speed", 0.5) == 0.5
    with pytest.raises(ValidationError):
        _ = validate_factor("speed", 0)


def test_missing_file_fails_without_skip_errors(tmp_path: Path) -> None:
    present = tmp_path / "present.png"
    present.touch()

    with pytest.raises(ValidationError, match="missing.png"):
        _ = collect_items([str(present), str(tmp_path / "missing.png")])


def test_missing_file_is_dropped_with_skip_errors(tmp_path: Path) -> None:
    present = tmp_path / "present.png"
    present.touch()

    items = collect_items([str(present), str(tmp_path / "missing.png")], skip_errors=True)

    assert items == [WorkItem.from_path(present)]


def test_urls_are_not_checked(tmp_path: Path) -> None:
    items = collect_items(["https://example.com/a.png"])

    assert items == [WorkItem("https://example.com/a.png")]


def test_directories_need_recursive(tmp_path: Path) -> None:
    folder = tmp_path / "folder"
    (folder / "nested").mkdir(parents=True)
    (folder / "b.png").touch()
    (folder / "nested" / "a.png").touch()
    (folder / ".DS_Store").touch()

    with pytest.raises(ValidationError, match="directory"):
        _ = collect_items([str(folder)])

    items = collect_items([str(folder)], recursive=True)

    assert items == [
        WorkItem.from_path(folder / "b.png"),
        WorkItem.from_path(folder / "nested" / "a.png"),
    ]


def test_duplicates_keep_first_position(tmp_path: Path) -> None:
    first = tmp_path / "first.png"
    second = tmp_path / "second.png"
    first.touch()
    second.touch()

    items = collect_items([str(second), str(first), str(second)])

    assert items == [WorkItem.from_path(second), WorkItem.from_path(first)]


def test_nothing_left_is_a_validation_error(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        _ = collect_items([str(tmp_path / "gone.png")], skip_errors=True)


def test_build_request_maps_cli_flags() -> None:
    items = [WorkItem("file:///tmp/a.png")]

    request = build_request(
        items,
        request_id="1234",
        size=CropSize(10, 10),
        show_floating_result=True,
        copy_to_clipboard=True,
        aggressive=True,
    )

    assert request.items == tuple(items)
    assert request.hide_floating_result is False
    assert request.copy_to_clipboard and request.aggressive_optimisation
    assert request.source == "cli"


def test_request_ids_are_numeric_strings_in_range() -> None:
    for _ in range(20):
        assert 1000 <= int(new_request_id()) <= 100_000
