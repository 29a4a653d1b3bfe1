"""Shared fakes standing in for the optimisation service and the terminal."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from clopctl.features.optimisation.domain import WireRecord, encode
from clopctl.shared.errors import ChannelUnreachableError


class FakeListener:
    """Listener handle counting ``stop`` calls."""

    def __init__(self) -> None:
        self.stop_calls = 0

    def stop(self) -> None:
        self.stop_calls += 1


class FakeResponseChannel:
    """Response channel whose messages are injected by the test."""

    name = "responses"

    def __init__(self) -> None:
        self.on_message: Callable[[bytes], bytes | None] | None = None
        self.listener = FakeListener()

    def listen(self, on_message: Callable[[bytes], bytes | None]) -> FakeListener:
        self.on_message = on_message
        return self.listener

    def deliver(self, record: WireRecord) -> None:
        assert self.on_message is not None, "listen() was not called"
        _ = self.on_message(encode(record))

    def deliver_raw(self, payload: bytes) -> None:
        assert self.on_message is not None, "listen() was not called"
        _ = self.on_message(payload)


class FakeRequestChannel:
    """Request channel recording what was sent.

    ``on_wait`` runs inside ``send_and_wait`` so a test can play the service.
    """

    name = "requests"

    def __init__(self) -> None:
        self.reachable = True
        self.forgotten: list[bytes] = []
        self.waited: list[bytes] = []
        self.reply: bytes = b'{"type":"ack"}'
        self.on_wait: Callable[[bytes], None] | None = None
        self.wait_error: Exception | None = None

    def is_reachable(self) -> bool:
        return self.reachable

    def send_and_forget(self, payload: bytes) -> None:
        if not self.reachable:
            raise ChannelUnreachableError(self.name)
        self.forgotten.append(payload)

    def send_and_wait(self, payload: bytes, timeout: float | None = None) -> bytes:
        del timeout
        if not self.reachable:
            raise ChannelUnreachableError(self.name)
        if self.wait_error is not None:
            raise self.wait_error
        self.waited.append(payload)
        if self.on_wait is not None:
            self.on_wait(payload)
        return self.reply

    @property
    def send_count(self) -> int:
        return len(self.forgotten) + len(self.waited)


class RecordingView:
    """Progress view remembering every redraw."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, list[str]]] = []

    def redraw(self, erase: int, lines: Sequence[str]) -> None:
        self.calls.append((erase, list(lines)))


@pytest.fixture
def request_channel() -> FakeRequestChannel:
    return FakeRequestChannel()


@pytest.fixture
def response_channel() -> FakeResponseChannel:
    return FakeResponseChannel()


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()
