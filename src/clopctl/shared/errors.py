"""Error taxonomy with friendly messages and stable exit codes."""

from __future__ import annotations


class ClopError(Exception):
    """Base exception for all client errors."""

    exit_code: int = 1

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ValidationError(ClopError):
    """Bad user input detected before anything is submitted."""

    exit_code = 1


class ChannelError(ClopError):
    """Local channel failure."""

    exit_code = 7


class ChannelUnreachableError(ChannelError):
    """Nobody is listening on the channel."""

    exit_code = 3

    def __init__(self, channel: str) -> None:
        super().__init__(
            f"Channel '{channel}' is not reachable",
            "Make sure the optimisation service is running",
        )
        self.channel = channel


class ChannelTimeoutError(ChannelError):
    """The peer did not answer in time."""

    exit_code = 4

    def __init__(self, channel: str, timeout: float | None) -> None:
        super().__init__(f"Timed out after {timeout}s waiting for a reply on '{channel}'")
        self.channel = channel
        self.timeout = timeout


class OptimisationError(ClopError):
    """The service did not accept the batch."""

    exit_code = 6


class PayloadDecodeError(ClopError):
    """A frame could not be decoded into a known record."""


class IncompleteError(ClopError):
    """Some items never produced a terminal event."""

    exit_code = 5


__all__ = [
    "ChannelError",
    "ChannelTimeoutError",
    "ChannelUnreachableError",
    "ClopError",
    "IncompleteError",
    "OptimisationError",
    "PayloadDecodeError",
    "ValidationError",
]
