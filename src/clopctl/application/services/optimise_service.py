"""Application service driving one batch from submission to the final report."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from logging import Logger, getLogger
from typing import final

from clopctl.config.settings import COMPLETION_TIMEOUT, POLL_INTERVAL, REQUEST_SOURCE, SEND_TIMEOUT
from clopctl.features.optimisation.adapters import NoopServiceLauncher, NullProgressSource
from clopctl.features.optimisation.domain import (
    ChannelError,
    CropSize,
    FinalReport,
    OptimisationError,
    OptimisationRequest,
    WorkItem,
    encode,
)
from clopctl.features.optimisation.usecases import (
    ProgressAggregator,
    ProgressSource,
    ProgressView,
    RequestChannel,
    ResponseChannel,
    ServiceLauncher,
    build_request,
    new_request_id,
)

from .cancellation import CancellationController


class DriverState(str, Enum):
    """Where a batch is in its lifecycle."""

    BUILDING = "building"
    SUBMITTING = "submitting"
    ASYNC_ACKNOWLEDGED = "async_acknowledged"
    SYNC_WAITING = "sync_waiting"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class OptimiseServiceRequest:
    """Parameters describing one batch."""

    items: list[WorkItem]
    size: CropSize | None = None
    downscale_factor: float | None = None
    speed_up_factor: float | None = None
    show_floating_result: bool = False
    copy_to_clipboard: bool = False
    aggressive: bool = False
    asynchronous: bool = False
    show_progress: bool = True


@dataclass(slots=True)
class OptimiseOutcome:
    """What the driver ended with."""

    state: DriverState
    request: OptimisationRequest
    report: FinalReport | None = None
    history: list[DriverState] = field(default_factory=list)

    @property
    def queued(self) -> int:
        return len(self.request.items)


@final
class OptimiseService:
    """Session driver: build, submit, wait, report.

    Collaborators are injected so tests can run without a service or a
    terminal. Missing ones default to no-op implementations.
    """

    def __init__(
        self,
        *,
        request_channel: RequestChannel,
        response_channel: ResponseChannel,
        progress_source: ProgressSource | None = None,
        launcher: ServiceLauncher | None = None,
        view: ProgressView | None = None,
        cancellation: CancellationController | None = None,
        send_timeout: float | None = SEND_TIMEOUT,
        completion_timeout: float | None = COMPLETION_TIMEOUT,
        poll_interval: float = POLL_INTERVAL,
        request_id_factory: Callable[[], str] = new_request_id,
        logger: Logger | None = None,
    ) -> None:
        self._request_channel = request_channel
        self._response_channel = response_channel
        self._progress_source = progress_source or NullProgressSource()
        self._launcher = launcher or NoopServiceLauncher()
        self._view = view
        self._cancellation = cancellation or CancellationController(request_channel)
        self._send_timeout = send_timeout
        self._completion_timeout = completion_timeout
        self._poll_interval = poll_interval
        self._request_id_factory = request_id_factory
        self._logger = logger or getLogger(__name__)
        self._history: list[DriverState] = []

    @property
    def state(self) -> DriverState | None:
        return self._history[-1] if self._history else None

    def _transition(self, state: DriverState) -> None:
        self._logger.debug("Driver state: %s -> %s", self.state.value if self.state else "-", state.value)
        self._history.append(state)

    def run(self, request: OptimiseServiceRequest) -> OptimiseOutcome:
        """Run the batch.

        Raises:
            ChannelUnreachableError: The service is not running.
            ChannelTimeoutError: The service did not acknowledge in time.
            OptimisationError: The service rejected the batch.
        """

        self._history = []
        self._transition(DriverState.BUILDING)
        optimisation_request = build_request(
            request.items,
            request_id=self._request_id_factory(),
            size=request.size,
            downscale_factor=request.downscale_factor,
            speed_up_factor=request.speed_up_factor,
            show_floating_result=request.show_floating_result,
            copy_to_clipboard=request.copy_to_clipboard,
            aggressive=request.aggressive,
            source=REQUEST_SOURCE,
        )
        payload = encode(optimisation_request)
        ids = [item.locator for item in optimisation_request.items]

        self._launcher.ensure_service_available()

        if request.asynchronous:
            return self._submit_async(optimisation_request, payload)
        return self._submit_sync(optimisation_request, payload, ids, request.show_progress)

    def _submit_async(self, optimisation_request: OptimisationRequest, payload: bytes) -> OptimiseOutcome:
        self._transition(DriverState.SUBMITTING)
        try:
            self._request_channel.send_and_forget(payload)
        except ChannelError:
            self._transition(DriverState.FAILED)
            raise

        self._transition(DriverState.ASYNC_ACKNOWLEDGED)
        self._logger.info(
            "Queued %d item(s) for optimisation (request %s)",
            len(optimisation_request.items),
            optimisation_request.request_id,
        )
        self._transition(DriverState.DONE)
        return OptimiseOutcome(
            state=DriverState.DONE,
            request=optimisation_request,
            history=list(self._history),
        )

    def _submit_sync(
        self,
        optimisation_request: OptimisationRequest,
        payload: bytes,
        ids: list[str],
        show_progress: bool,
    ) -> OptimiseOutcome:
        aggregator = ProgressAggregator(
            optimisation_request.items,
            response_channel=self._response_channel,
            progress_source=self._progress_source,
            view=self._view if show_progress else None,
            poll_interval=self._poll_interval,
        )

        # Listen first so no terminal event can slip past us.
        aggregator.start()
        self._cancellation.arm(ids, on_cancel=aggregator.halt)
        try:
            self._transition(DriverState.SUBMITTING)
            try:
                reply = self._request_channel.send_and_wait(payload, timeout=self._send_timeout)
            except ChannelError:
                self._transition(DriverState.FAILED)
                raise

            if not reply:
                self._transition(DriverState.FAILED)
                raise OptimisationError(
                    "The optimisation service did not accept the batch",
                    "Check the service logs for details",
                )
            self._logger.debug("Service acknowledged request %s", optimisation_request.request_id)

            self._transition(DriverState.SYNC_WAITING)
            completed = aggregator.await_completion(self._completion_timeout)

            self._transition(DriverState.REPORTING)
            if show_progress:
                _ = aggregator.render()
            report = aggregator.final_report()
            if not completed:
                self._logger.warning("%d item(s) never finished", len(report.pending))
        finally:
            # After a signal the process is exiting; do not block on the worker.
            aggregator.stop(wait=not self._cancellation.fired)
            self._cancellation.disarm()

        self._transition(DriverState.DONE)
        return OptimiseOutcome(
            state=DriverState.DONE,
            request=optimisation_request,
            report=report,
            history=list(self._history),
        )


__all__ = ["DriverState", "OptimiseOutcome", "OptimiseService", "OptimiseServiceRequest"]
