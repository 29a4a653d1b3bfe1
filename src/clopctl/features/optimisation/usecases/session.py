"""
Summary: Per-invocation bookkeeping of which items succeeded, failed or are in flight.
Why: Keep the resolution invariants in one place, independent of threading.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from clopctl.features.optimisation.domain import (
    FinalReport,
    OptimisationResponse,
    OptimisationResponseError,
    ProgressSnapshot,
    WorkItem,
)
from clopctl.platform.logging import logger


@dataclass(slots=True, frozen=True)
class ItemProgress:
    """One in-flight item as shown in the progress view."""

    item: WorkItem
    fraction_completed: float
    description: str | None = None


@dataclass(slots=True, frozen=True)
class SessionSnapshot:
    """Immutable copy of a session, safe to render without any lock."""

    total: int
    succeeded: int
    failed: int
    in_progress: tuple[ItemProgress, ...]

    @property
    def processed(self) -> int:
        return self.succeeded + self.failed


class JobSession:
    """Track the outcome of every item of one batch.

    Not thread-safe: a single owner must serialize all calls.

    Invariants:
        - an item is in at most one of ``responses`` and ``errors``;
        - a resolved item never has an entry in ``live_progress``;
        - records for items outside the batch are ignored.
    """

    def __init__(self, items: Iterable[WorkItem]) -> None:
        self.items: tuple[WorkItem, ...] = tuple(dict.fromkeys(items))
        self._members: frozenset[WorkItem] = frozenset(self.items)
        self.responses: dict[WorkItem, OptimisationResponse] = {}
        self.errors: dict[WorkItem, OptimisationResponseError] = {}
        self.live_progress: dict[WorkItem, ProgressSnapshot] = {}

    def _known(self, item: WorkItem, kind: str) -> bool:
        if item in self._members:
            return True
        logger.warning("Ignoring %s for an item outside this batch", kind, extra={"item": item.locator})
        return False

    def is_resolved(self, item: WorkItem) -> bool:
        return item in self.responses or item in self.errors

    def record_success(self, response: OptimisationResponse) -> bool:
        """Resolve the item as succeeded. Returns False for unknown items."""

        item = response.for_item
        if not self._known(item, "response"):
            return False
        _ = self.errors.pop(item, None)
        _ = self.live_progress.pop(item, None)
        self.responses[item] = response
        return True

    def record_failure(self, error: OptimisationResponseError) -> bool:
        """Resolve the item as failed. Returns False for unknown items."""

        item = error.for_item
        if not self._known(item, "error"):
            return False
        _ = self.responses.pop(item, None)
        _ = self.live_progress.pop(item, None)
        self.errors[item] = error
        return True

    def record_progress(self, snapshot: ProgressSnapshot) -> bool:
        """Store a snapshot for an unresolved item.

        Stale snapshots (lower fraction than the one already shown) and
        snapshots for resolved items are dropped. Returns True when the
        visible state changed.
        """

        item = snapshot.for_item
        if not self._known(item, "progress") or self.is_resolved(item):
            return False

        current = self.live_progress.get(item)
        if current is not None:
            if snapshot.clamped() < current.clamped():
                return False
            if snapshot == current:
                return False
        self.live_progress[item] = snapshot
        return True

    def is_complete(self) -> bool:
        return len(self.responses) + len(self.errors) == len(self.items)

    def unresolved(self) -> list[WorkItem]:
        return [item for item in self.items if not self.is_resolved(item)]

    def snapshot(self) -> SessionSnapshot:
        in_progress: list[ItemProgress] = []
        for item in self.unresolved():
            live = self.live_progress.get(item)
            if live is None:
                in_progress.append(ItemProgress(item=item, fraction_completed=0.0))
            else:
                in_progress.append(
                    ItemProgress(
                        item=item,
                        fraction_completed=live.clamped(),
                        description=live.description,
                    )
                )
        return SessionSnapshot(
            total=len(self.items),
            succeeded=len(self.responses),
            failed=len(self.errors),
            in_progress=tuple(in_progress),
        )

    def final_report(self) -> FinalReport:
        """Successes and failures sorted by item locator, plus anything still pending."""

        return FinalReport(
            done=sorted(self.responses.values(), key=lambda r: r.for_item.locator),
            failed=sorted(self.errors.values(), key=lambda e: e.for_item.locator),
            pending=sorted(self.unresolved(), key=lambda item: item.locator),
        )


__all__ = ["ItemProgress", "JobSession", "SessionSnapshot"]
