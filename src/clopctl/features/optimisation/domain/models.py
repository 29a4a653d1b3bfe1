"""Records exchanged with the optimisation service."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote, urlparse


@dataclass(slots=True, frozen=True)
class WorkItem:
    """One local file or remote URL submitted for processing.

    ``locator`` is the identity used on the wire: a ``file://`` URL for
    local files and the URL itself for remote items.
    """

    locator: str

    @classmethod
    def from_path(cls, path: Path) -> "WorkItem":
        return cls(path.expanduser().absolute().as_uri())

    @classmethod
    def from_user_input(cls, raw: str) -> "WorkItem":
        """Interpret CLI input: anything with a URL scheme stays a URL, the rest is a path."""

        if ":" in raw:
            parsed = urlparse(raw)
            if parsed.scheme and len(parsed.scheme) > 1:
                return cls(raw)
        return cls.from_path(Path(raw))

    @property
    def is_file(self) -> bool:
        return urlparse(self.locator).scheme == "file"

    @property
    def path(self) -> Path | None:
        if not self.is_file:
            return None
        return Path(unquote(urlparse(self.locator).path))

    @property
    def display_name(self) -> str:
        path = self.path
        return str(path) if path is not None else self.locator

    def __str__(self) -> str:
        return self.display_name


@dataclass(slots=True, frozen=True)
class CropSize:
    """Target size for downscale-and-crop."""

    width: int
    height: int


@dataclass(slots=True, frozen=True)
class OptimisationRequest:
    """A whole batch, sent once and never mutated."""

    request_id: str
    items: tuple[WorkItem, ...]
    size: CropSize | None = None
    downscale_factor: float | None = None
    speed_up_factor: float | None = None
    hide_floating_result: bool = True
    copy_to_clipboard: bool = False
    aggressive_optimisation: bool = False
    source: str = "cli"


@dataclass(slots=True, frozen=True)
class OptimisationResponse:
    """Successful result for one item."""

    path: str
    for_item: WorkItem
    converted_from: str | None = None
    old_bytes: int = 0
    new_bytes: int = 0
    old_size: CropSize | None = None
    new_size: CropSize | None = None


@dataclass(slots=True, frozen=True)
class OptimisationResponseError:
    """Failure description for one item."""

    error: str
    for_item: WorkItem


@dataclass(slots=True, frozen=True)
class ProgressSnapshot:
    """Intermediate completion for one item."""

    for_item: WorkItem
    fraction_completed: float
    description: str | None = None

    def clamped(self) -> float:
        return min(1.0, max(0.0, self.fraction_completed))


@dataclass(slots=True, frozen=True)
class StopRequest:
    """Ask the service to stop the listed requests; no reply is sent."""

    ids: tuple[str, ...]
    remove: bool = False


@dataclass(slots=True)
class FinalReport:
    """Terminal outcome of a batch, ordered by item locator."""

    done: list[OptimisationResponse] = field(default_factory=list)
    failed: list[OptimisationResponseError] = field(default_factory=list)
    pending: list[WorkItem] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.pending


WireRecord = (
    OptimisationRequest
    | OptimisationResponse
    | OptimisationResponseError
    | ProgressSnapshot
    | StopRequest
)


__all__ = [
    "CropSize",
    "FinalReport",
    "OptimisationRequest",
    "OptimisationResponse",
    "OptimisationResponseError",
    "ProgressSnapshot",
    "StopRequest",
    "WireRecord",
    "WorkItem",
]
