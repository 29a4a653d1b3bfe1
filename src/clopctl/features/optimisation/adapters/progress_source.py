"""Where: src/clopctl/features/optimisation/adapters/progress_source.py
What: Progress publishers keyed by item identity.
Why: The service streams per-item progress on the response channel; targets
without it plug in the null source and the aggregator runs unchanged.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import Final, final

from clopctl.features.optimisation.domain import ProgressSnapshot, WorkItem
from clopctl.features.optimisation.usecases.ports import SnapshotCallback
from clopctl.platform.logging import logger


@dataclass(slots=True, frozen=True)
class SubscriptionHandle:
    """Opaque token returned by ``subscribe``."""

    item: WorkItem
    token: int


@final
class ChannelProgressSource:
    """Dispatch snapshots received on the wire to per-item subscribers.

    Snapshots for items nobody (or nobody any longer) subscribes to are
    discarded.
    """

    def __init__(self) -> None:
        self._lock: Final[threading.Lock] = threading.Lock()
        self._tokens = itertools.count(1)
        self._callbacks: dict[SubscriptionHandle, SnapshotCallback] = {}

    def subscribe(self, item: WorkItem, callback: SnapshotCallback) -> SubscriptionHandle:
        with self._lock:
            handle = SubscriptionHandle(item=item, token=next(self._tokens))
            self._callbacks[handle] = callback
        return handle

    def unsubscribe(self, handle: object) -> None:
        with self._lock:
            if isinstance(handle, SubscriptionHandle):
                _ = self._callbacks.pop(handle, None)

    def publish(self, snapshot: ProgressSnapshot) -> None:
        with self._lock:
            callbacks = [
                callback
                for handle, callback in self._callbacks.items()
                if handle.item == snapshot.for_item
            ]

        if not callbacks:
            logger.debug("Discarding progress without subscriber", extra={"item": snapshot.for_item.locator})
            return

        for callback in callbacks:
            callback(snapshot)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._callbacks)


@final
class NullProgressSource:
    """Progress source for environments without progress publishing; never fires."""

    def subscribe(self, item: WorkItem, callback: SnapshotCallback) -> SubscriptionHandle:
        del callback
        return SubscriptionHandle(item=item, token=0)

    def unsubscribe(self, handle: object) -> None:
        del handle

    def publish(self, snapshot: ProgressSnapshot) -> None:
        del snapshot


__all__ = ["ChannelProgressSource", "NullProgressSource", "SubscriptionHandle"]
