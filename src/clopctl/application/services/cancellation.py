"""Application service turning termination signals into a best-effort stop request."""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable, Sequence
from types import FrameType
from typing import Any, NoReturn, final

from clopctl.features.optimisation.domain import ChannelError, StopRequest, encode
from clopctl.features.optimisation.usecases.ports import RequestChannel
from clopctl.platform.logging import logger

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


def _exit(code: int) -> NoReturn:
    raise SystemExit(code)


@final
class CancellationController:
    """Send ``StopRequest(ids, remove=False)`` and exit when a signal arrives.

    Args:
        channel: Request channel the stop message is sent on.
        signals: Signals to intercept while armed.
        terminate: Called with ``128 + signum`` after the stop was sent.
    """

    def __init__(
        self,
        channel: RequestChannel,
        *,
        signals: Sequence[signal.Signals] = DEFAULT_SIGNALS,
        terminate: Callable[[int], Any] = _exit,
    ) -> None:
        self._channel = channel
        self._signals = tuple(signals)
        self._terminate = terminate
        self._ids: tuple[str, ...] = ()
        self._on_cancel: Callable[[], None] | None = None
        self._previous: dict[signal.Signals, Any] = {}
        self._fired = False

    @property
    def armed(self) -> bool:
        return bool(self._previous)

    @property
    def fired(self) -> bool:
        """Whether a signal has already been handled."""

        return self._fired

    @property
    def ids(self) -> tuple[str, ...]:
        return self._ids

    def arm(self, ids: Sequence[str], on_cancel: Callable[[], None] | None = None) -> None:
        """Install the handlers. ``on_cancel`` runs before the stop is sent."""

        self._ids = tuple(ids)
        self._on_cancel = on_cancel
        if self._previous:
            return
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Signal handlers can only be installed from the main thread")
            return
        for signum in self._signals:
            self._previous[signum] = signal.signal(signum, self.handle_signal)

    def disarm(self) -> None:
        """Restore whatever handlers were installed before ``arm``."""

        for signum, previous in self._previous.items():
            _ = signal.signal(signum, previous)
        self._previous.clear()

    def handle_signal(self, signum: int, frame: FrameType | None) -> None:
        del frame
        if self._fired:
            return
        self._fired = True

        if self._on_cancel is not None:
            self._on_cancel()

        self.send_stop()
        self._terminate(128 + signum)

    def send_stop(self) -> None:
        """Fire-and-forget stop for the armed ids; failures are only logged."""

        if not self._ids:
            return
        try:
            self._channel.send_and_forget(encode(StopRequest(ids=self._ids, remove=False)))
        except ChannelError as exc:
            logger.warning("Could not ask the service to stop: %s", exc)
        else:
            logger.info("Asked the service to stop %d item(s)", len(self._ids))


__all__ = ["CancellationController", "DEFAULT_SIGNALS"]
