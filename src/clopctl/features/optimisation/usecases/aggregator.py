"""Where: src/clopctl/features/optimisation/usecases/aggregator.py
What: Single-owner event loop that folds responses and progress into a JobSession.
Why: Listener and progress callbacks arrive on many threads; one worker applies
them in order so renders never observe a half-applied update.
"""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Callable, Hashable, Iterable
from concurrent.futures import Future
from typing import Any, Final, TypeVar, final

from clopctl.config.settings import POLL_INTERVAL, PROGRESS_BAR_SEGMENTS, PROGRESS_LABEL_WIDTH
from clopctl.features.optimisation.domain import (
    FinalReport,
    OptimisationResponse,
    OptimisationResponseError,
    PayloadDecodeError,
    ProgressSnapshot,
    WorkItem,
    decode,
)
from clopctl.platform.logging import logger

from .ports import Listener, ProgressSource, ProgressView, ResponseChannel
from .rendering import render_lines
from .session import JobSession, SessionSnapshot

T = TypeVar("T")

_Message = tuple[Callable[[], Any], Future[Any]]
_SHUTDOWN: Final[object] = object()


@final
class ProgressAggregator:
    """Own a :class:`JobSession` and the printed-line counter.

    Every mutation and every render is a message executed one at a time by
    a dedicated worker thread, whichever thread it originated from.

    Args:
        items: The full batch.
        response_channel: Channel on which the service reports results.
        progress_source: Per-item progress publisher.
        view: Where to draw the progress; ``None`` disables drawing.
        poll_interval: Seconds between completion checks in ``await_completion``.
    """

    def __init__(
        self,
        items: Iterable[WorkItem],
        *,
        response_channel: ResponseChannel,
        progress_source: ProgressSource,
        view: ProgressView | None = None,
        poll_interval: float = POLL_INTERVAL,
        segments: int = PROGRESS_BAR_SEGMENTS,
        label_width: int = PROGRESS_LABEL_WIDTH,
    ) -> None:
        self._session = JobSession(items)
        self._response_channel = response_channel
        self._progress_source = progress_source
        self._view = view
        self._poll_interval = poll_interval
        self._segments = segments
        self._label_width = label_width

        self._mailbox: queue.SimpleQueue[_Message | object] = queue.SimpleQueue()
        self._worker = threading.Thread(target=self._run, name="progress-aggregator", daemon=True)
        self._post_lock = threading.Lock()
        self._closing = False
        self._complete = threading.Event()
        self._halted = False

        self._listener: Listener | None = None
        self._subscriptions: dict[WorkItem, Hashable] = {}
        self._printed_lines = 0

    @property
    def items(self) -> tuple[WorkItem, ...]:
        return self._session.items

    @property
    def printed_lines(self) -> int:
        """Number of lines drawn by the last render."""

        return self._printed_lines

    # Lifecycle ---------------------------------------------------------------

    def start(self) -> None:
        """Start the worker, subscribe file items to progress, then start listening."""

        self._worker.start()
        self._call(self._subscribe_all)
        self._listener = self._response_channel.listen(self._on_message)
        logger.debug(
            "Aggregating %d items (%d with progress)",
            len(self._session.items),
            len(self._subscriptions),
        )

    def stop(self, *, wait: bool = True) -> None:
        """Stop listening, drop subscriptions and let the worker drain. Idempotent.

        With ``wait=False`` the worker is told to shut down but not joined.
        """

        if self._listener is not None:
            self._listener.stop()
            self._listener = None

        with self._post_lock:
            if self._closing:
                return
            if not self._worker.is_alive():
                self._closing = True
                self._unsubscribe_all()
                return
            self._mailbox.put((self._unsubscribe_all, Future()))
            self._mailbox.put(_SHUTDOWN)
            self._closing = True
        if wait:
            self._worker.join()

    def halt(self) -> None:
        """Suppress any further drawing. Safe to call from a signal handler."""

        self._halted = True

    # Event intake (any thread) ---------------------------------------------

    def record_success(self, response: OptimisationResponse) -> "Future[None]":
        return self._post(lambda: self._apply_terminal(response.for_item, self._session.record_success(response)))

    def record_failure(self, error: OptimisationResponseError) -> "Future[None]":
        return self._post(lambda: self._apply_terminal(error.for_item, self._session.record_failure(error)))

    def record_progress(self, snapshot: ProgressSnapshot) -> "Future[None]":
        return self._post(lambda: self._apply_progress(snapshot))

    def _on_message(self, payload: bytes) -> bytes | None:
        try:
            record = decode(payload)
        except PayloadDecodeError as exc:
            logger.warning("Ignoring undecodable message: %s", exc)
            return None

        if isinstance(record, OptimisationResponse):
            logger.debug("Got response %s", record.path, extra={"item": record.for_item.locator})
            _ = self.record_success(record)
        elif isinstance(record, OptimisationResponseError):
            logger.debug("Got error response: %s", record.error, extra={"item": record.for_item.locator})
            _ = self.record_failure(record)
        elif isinstance(record, ProgressSnapshot):
            self._progress_source.publish(record)
        else:
            logger.debug("Ignoring unexpected %s message", type(record).__name__)
        return None

    # Queries (any thread) ----------------------------------------------------

    def render(self) -> list[str]:
        """Redraw the progress view in place and return the drawn lines."""

        return self._call(self._render)

    def snapshot(self) -> SessionSnapshot:
        return self._call(self._session.snapshot)

    def is_complete(self) -> bool:
        return self._complete.is_set()

    def await_completion(self, timeout: float | None = None) -> bool:
        """Block until every item resolved; False if ``timeout`` elapsed first."""

        deadline = None if timeout is None else time.monotonic() + timeout
        while not self._complete.wait(self._poll_interval):
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning("Gave up waiting after %.1fs with items still pending", timeout)
                return False
        return True

    def final_report(self) -> FinalReport:
        return self._call(self._session.final_report)

    # Mailbox -----------------------------------------------------------------

    def _post(self, action: Callable[[], T]) -> "Future[T]":
        future: Future[T] = Future()
        with self._post_lock:
            if self._closing:
                _ = future.cancel()
                return future
            self._mailbox.put((action, future))
        return future

    def _call(self, action: Callable[[], T]) -> T:
        if self._closing or not self._worker.is_alive():
            # Worker exited or never started; the caller is the only owner left.
            if self._worker.is_alive():
                self._worker.join()
            return action()
        return self._post(action).result()

    def _run(self) -> None:
        while True:
            message = self._mailbox.get()
            if message is _SHUTDOWN:
                return
            assert isinstance(message, tuple)
            action, future = message
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = action()
            except Exception as exc:
                logger.exception("Progress aggregator step failed")
                future.set_exception(exc)
            else:
                future.set_result(result)

    # Owner-only steps --------------------------------------------------------

    def _subscribe_all(self) -> None:
        for item in self._session.items:
            if not item.is_file:
                continue
            self._subscriptions[item] = self._progress_source.subscribe(item, self._on_snapshot)
        if self._session.is_complete():
            self._complete.set()

    def _unsubscribe_all(self) -> None:
        while self._subscriptions:
            _, handle = self._subscriptions.popitem()
            self._progress_source.unsubscribe(handle)

    def _on_snapshot(self, snapshot: ProgressSnapshot) -> None:
        _ = self.record_progress(snapshot)

    def _apply_terminal(self, item: WorkItem, changed: bool) -> None:
        if not changed:
            return
        handle = self._subscriptions.pop(item, None)
        if handle is not None:
            self._progress_source.unsubscribe(handle)
        _ = self._render()
        if self._session.is_complete():
            self._complete.set()

    def _apply_progress(self, snapshot: ProgressSnapshot) -> None:
        if self._session.record_progress(snapshot):
            _ = self._render()

    def _render(self) -> list[str]:
        lines = render_lines(
            self._session.snapshot(),
            segments=self._segments,
            label_width=self._label_width,
        )
        if self._view is not None and not self._halted:
            self._view.redraw(self._printed_lines, lines)
            self._printed_lines = len(lines)
        return lines


__all__ = ["ProgressAggregator"]
