"""Length-prefixed framing over stream sockets."""

from __future__ import annotations

import socket
import struct
from typing import Final

HEADER: Final[struct.Struct] = struct.Struct(">I")
MAX_FRAME_BYTES: Final[int] = 64 * 1024 * 1024


class FrameError(ConnectionError):
    """The peer sent a truncated or oversized frame."""


def write_frame(sock: socket.socket, payload: bytes) -> None:
    if len(payload) > MAX_FRAME_BYTES:
        raise FrameError(f"Frame of {len(payload)} bytes exceeds {MAX_FRAME_BYTES}")
    sock.sendall(HEADER.pack(len(payload)) + payload)


def _read_exact(sock: socket.socket, size: int) -> bytes:
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = sock.recv(min(remaining, 65536))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_frame(sock: socket.socket) -> bytes | None:
    """Read one frame; ``None`` means the peer closed cleanly between frames."""

    header = _read_exact(sock, HEADER.size)
    if not header:
        return None
    if len(header) < HEADER.size:
        raise FrameError("Connection closed inside a frame header")

    (length,) = HEADER.unpack(header)
    if length > MAX_FRAME_BYTES:
        raise FrameError(f"Announced frame of {length} bytes exceeds {MAX_FRAME_BYTES}")

    payload = _read_exact(sock, length)
    if len(payload) < length:
        raise FrameError("Connection closed inside a frame body")
    return payload


__all__ = ["FrameError", "HEADER", "MAX_FRAME_BYTES", "read_frame", "write_frame"]
