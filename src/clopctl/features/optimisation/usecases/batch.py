"""
Summary: Turn raw CLI input into a validated batch and a single request.
Why: Every validation failure must surface before anything is sent to the service.
"""

from __future__ import annotations

import random
import re
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Final

from clopctl.features.optimisation.domain import (
    CropSize,
    OptimisationRequest,
    ValidationError,
    WorkItem,
)
from clopctl.platform.logging import logger

SIZE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*(\d+)\s*[xX×]\s*(\d+)\s*$")
REQUEST_ID_RANGE: Final[tuple[int, int]] = (1000, 100_000)


def parse_crop_size(raw: str) -> CropSize:
    """Parse ``WIDTHxHEIGHT`` or a single integer (square).

    Raises:
        ValidationError: For anything else, or for zero-sized dimensions.
    """

    match = SIZE_PATTERN.match(raw)
    if match is not None:
        width, height = int(match.group(1)), int(match.group(2))
    elif raw.strip().isdigit():
        width = height = int(raw.strip())
    else:
        raise ValidationError(f"Invalid crop size: {raw}", "Use WIDTHxHEIGHT (e.g. 1200x630) or a single number")

    if width <= 0 or height <= 0:
        raise ValidationError(f"Invalid crop size: {raw}", "Width and height must be positive")
    return CropSize(width=width, height=height)


def validate_factor(name: str, value: float | None) -> float | None:
    if value is None:
        return None
    if value <= 0:
        raise ValidationError(f"Invalid {name}: {value}", f"{name} must be greater than 0")
    return value


def _expand_directory(directory: Path) -> Iterator[Path]:
    for candidate in sorted(directory.rglob("*")):
        if candidate.is_file() and not candidate.name.startswith("."):
            yield candidate


def collect_items(
    raw_items: Sequence[str],
    *,
    recursive: bool = False,
    skip_errors: bool = False,
) -> list[WorkItem]:
    """Resolve locators into work items, expanding directories when asked.

    Missing files and (without ``recursive``) directories are validation
    errors; with ``skip_errors`` they are dropped instead. Duplicates keep
    their first position.

    Raises:
        ValidationError: On the first offending locator, or when nothing is left.
    """

    items: dict[WorkItem, None] = {}
    for raw in raw_items:
        item = WorkItem.from_user_input(raw)
        path = item.path
        if path is None:
            items.setdefault(item, None)
            continue

        if path.is_dir():
            if not recursive:
                if skip_errors:
                    logger.debug("Skipping directory %s", path)
                    continue
                raise ValidationError(f"{path} is a directory", "Pass --recursive to optimise its files")
            for child in _expand_directory(path):
                items.setdefault(WorkItem.from_path(child), None)
            continue

        if not path.exists():
            if skip_errors:
                logger.debug("Skipping missing file %s", path)
                continue
            raise ValidationError(f"File {path} does not exist")

        items.setdefault(item, None)

    if not items:
        raise ValidationError("Nothing to optimise", "Check the paths and URLs passed on the command line")
    return list(items)


def new_request_id() -> str:
    low, high = REQUEST_ID_RANGE
    return str(random.randint(low, high))


def build_request(
    items: Sequence[WorkItem],
    *,
    request_id: str,
    size: CropSize | None = None,
    downscale_factor: float | None = None,
    speed_up_factor: float | None = None,
    show_floating_result: bool = False,
    copy_to_clipboard: bool = False,
    aggressive: bool = False,
    source: str = "cli",
) -> OptimisationRequest:
    return OptimisationRequest(
        request_id=request_id,
        items=tuple(items),
        size=size,
        downscale_factor=downscale_factor,
        speed_up_factor=speed_up_factor,
        hide_floating_result=not show_floating_result,
        copy_to_clipboard=copy_to_clipboard,
        aggressive_optimisation=aggressive,
        source=source,
    )


__all__ = [
    "build_request",
    "collect_items",
    "new_request_id",
    "parse_crop_size",
    "validate_factor",
]
