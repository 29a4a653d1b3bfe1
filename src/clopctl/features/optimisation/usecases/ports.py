"""Ports for the optimisation feature."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from typing import Protocol

from clopctl.features.optimisation.domain import ProgressSnapshot, WorkItem

SnapshotCallback = Callable[[ProgressSnapshot], None]


class RequestChannel(Protocol):
    """Outbound channel carrying submissions and stop requests to the service."""

    name: str

    def is_reachable(self) -> bool:
        """Return True when a listener is bound to the channel."""

        ...

    def send_and_forget(self, payload: bytes) -> None:
        """Deliver ``payload``; raise ``ChannelUnreachableError`` if nobody listens."""

        ...

    def send_and_wait(self, payload: bytes, timeout: float | None = None) -> bytes:
        """Deliver ``payload`` and return the single reply (``b""`` when empty)."""

        ...


class Listener(Protocol):
    """Handle returned by :meth:`ResponseChannel.listen`."""

    def stop(self) -> None:
        """Stop receiving; safe to call repeatedly."""

        ...


class ResponseChannel(Protocol):
    """Inbound channel on which the service reports back to the client."""

    name: str

    def listen(self, on_message: Callable[[bytes], bytes | None]) -> Listener:
        """Invoke ``on_message`` for every inbound payload on a background thread."""

        ...


class ProgressSource(Protocol):
    """Per-item progress publishing keyed by item identity."""

    def subscribe(self, item: WorkItem, callback: SnapshotCallback) -> Hashable:
        """Start observing ``item``; ``callback`` receives each snapshot."""

        ...

    def unsubscribe(self, handle: Hashable) -> None:
        """Stop observing; idempotent and safe after the item finished."""

        ...

    def publish(self, snapshot: ProgressSnapshot) -> None:
        """Feed a snapshot observed on the wire to its subscribers, if any."""

        ...


class ServiceLauncher(Protocol):
    """Best-effort guarantee that the optimisation service is reachable."""

    def ensure_service_available(self) -> None:
        """Return once the service answers; raise ``ChannelUnreachableError`` otherwise."""

        ...


class ProgressView(Protocol):
    """Terminal surface the aggregate progress is drawn on."""

    def redraw(self, erase: int, lines: Sequence[str]) -> None:
        """Erase the last ``erase`` lines, then write ``lines``."""

        ...


__all__ = [
    "Listener",
    "ProgressSource",
    "ProgressView",
    "RequestChannel",
    "ResponseChannel",
    "ServiceLauncher",
    "SnapshotCallback",
]
