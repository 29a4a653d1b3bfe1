"""Local inter-process channels."""

from .channel import ListenHandle, LocalChannel, MessageCallback
from .framing import FrameError, read_frame, write_frame

__all__ = [
    "FrameError",
    "ListenHandle",
    "LocalChannel",
    "MessageCallback",
    "read_frame",
    "write_frame",
]
