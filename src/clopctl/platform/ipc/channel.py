"""Where: src/clopctl/platform/ipc/channel.py
What: Named local message channel backed by a Unix-domain socket.
Why: The client talks to the long-running service only through two such channels.
"""

from __future__ import annotations

import socket
import socketserver
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Final, final

from clopctl.platform.logging import logger
from clopctl.shared.errors import ChannelError, ChannelTimeoutError, ChannelUnreachableError

from .framing import FrameError, read_frame, write_frame

MessageCallback = Callable[[bytes], bytes | None]

_CONNECT_TIMEOUT: Final[float] = 2.0
_IDLE_TIMEOUT: Final[float] = 5.0


class _ChannelServer(socketserver.ThreadingUnixStreamServer):
    """One handler thread per connection; open connections are tracked so they can be cut."""

    daemon_threads = True
    block_on_close = False

    def __init__(self, socket_path: Path, channel_name: str, on_message: MessageCallback) -> None:
        self.channel_name = channel_name
        self.on_message = on_message
        self._connections: set[socket.socket] = set()
        self._connections_lock = threading.Lock()
        self._closing = False
        super().__init__(str(socket_path), _FrameHandler)

    def track(self, sock: socket.socket) -> None:
        with self._connections_lock:
            if not self._closing:
                self._connections.add(sock)
                return
        self._cut(sock)

    def untrack(self, sock: socket.socket) -> None:
        with self._connections_lock:
            self._connections.discard(sock)

    def close_connections(self) -> None:
        """Shut down every open connection so blocked handlers return at once."""

        with self._connections_lock:
            self._closing = True
            connections = list(self._connections)
            self._connections.clear()
        for sock in connections:
            self._cut(sock)

    def _cut(self, sock: socket.socket) -> None:
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            logger.debug("Connection on '%s' already closed: %s", self.channel_name, exc)


class _FrameHandler(socketserver.BaseRequestHandler):
    server: _ChannelServer

    def setup(self) -> None:
        # An idle peer must not pin a handler thread forever.
        self.request.settimeout(_IDLE_TIMEOUT)
        self.server.track(self.request)

    def finish(self) -> None:
        self.server.untrack(self.request)

    def handle(self) -> None:
        sock: socket.socket = self.request
        name = self.server.channel_name
        while True:
            try:
                payload = read_frame(sock)
            except (FrameError, OSError) as exc:
                logger.warning("Dropping connection on '%s': %s", name, exc)
                return
            if payload is None:
                return

            logger.debug("Received %d bytes on '%s'", len(payload), name)
            try:
                reply = self.server.on_message(payload)
            except Exception:
                logger.exception("Message callback failed on '%s'", name)
                continue

            if reply is None:
                continue
            try:
                write_frame(sock, reply)
            except OSError as exc:
                logger.warning("Could not reply on '%s': %s", name, exc)
                return


@final
class ListenHandle:
    """Running listener; ``stop`` may be called any number of times."""

    def __init__(self, server: _ChannelServer, thread: threading.Thread, socket_path: Path) -> None:
        self._server = server
        self._thread = thread
        self._socket_path = socket_path
        self._lock = threading.Lock()
        self._stopped = False

    @property
    def active(self) -> bool:
        return not self._stopped

    def stop(self) -> None:
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
        self._server.shutdown()
        self._server.close_connections()
        self._server.server_close()
        self._thread.join(timeout=1.0)
        self._socket_path.unlink(missing_ok=True)
        logger.debug("Stopped listening on '%s'", self._server.channel_name)


@final
class LocalChannel:
    """Bidirectional local channel identified by a well-known name.

    Args:
        name: Well-known channel identifier, used in messages and logs.
        socket_path: Filesystem location of the channel socket.
        connect_timeout: Seconds allowed for establishing a connection.
    """

    def __init__(self, name: str, socket_path: Path, *, connect_timeout: float = _CONNECT_TIMEOUT) -> None:
        self.name = name
        self.socket_path = socket_path
        self._connect_timeout = connect_timeout
        self._send_lock: Final[threading.Lock] = threading.Lock()

    def __repr__(self) -> str:
        return f"LocalChannel(name={self.name!r}, socket_path={str(self.socket_path)!r})"

    def _connect(self) -> socket.socket:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self._connect_timeout)
        try:
            sock.connect(str(self.socket_path))
        except (FileNotFoundError, ConnectionRefusedError) as exc:
            sock.close()
            raise ChannelUnreachableError(self.name) from exc
        except socket.timeout as exc:
            sock.close()
            raise ChannelUnreachableError(self.name) from exc
        except OSError as exc:
            sock.close()
            raise ChannelError(f"Cannot connect to '{self.name}': {exc}") from exc
        return sock

    def is_reachable(self) -> bool:
        """Probe the channel without sending anything."""

        try:
            sock = self._connect()
        except ChannelError:
            return False
        sock.close()
        return True

    def send_and_forget(self, payload: bytes) -> None:
        """Deliver ``payload`` without waiting for any reply.

        Raises:
            ChannelUnreachableError: No listener is bound to the channel.
        """

        sock = self._connect()
        try:
            write_frame(sock, payload)
        except OSError as exc:
            raise ChannelError(f"Failed to send on '{self.name}': {exc}") from exc
        finally:
            sock.close()
        logger.debug("Sent %d bytes to '%s'", len(payload), self.name)

    def send_and_wait(self, payload: bytes, timeout: float | None = None) -> bytes:
        """Deliver ``payload`` and block until exactly one reply arrives.

        Concurrent callers on the same handle are serialized.

        Returns:
            The reply payload; ``b""`` when the peer closed without replying
            or replied with an empty frame.

        Raises:
            ChannelUnreachableError: No listener is bound to the channel.
            ChannelTimeoutError: No reply within ``timeout`` seconds.
        """

        with self._send_lock:
            sock = self._connect()
            try:
                sock.settimeout(timeout)
                write_frame(sock, payload)
                logger.debug("Sent %d bytes to '%s', awaiting reply", len(payload), self.name)
                reply = read_frame(sock)
            except socket.timeout as exc:
                raise ChannelTimeoutError(self.name, timeout) from exc
            except OSError as exc:
                raise ChannelError(f"Failed to exchange on '{self.name}': {exc}") from exc
            finally:
                sock.close()

        return reply or b""

    def listen(self, on_message: MessageCallback) -> ListenHandle:
        """Bind the channel and invoke ``on_message`` for every inbound frame.

        Each connection is served on its own daemon thread, so the callback
        may run concurrently. A non-``None`` return value is written back to
        the sender of that frame.
        """

        self.socket_path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
        if self.socket_path.exists():
            if self.is_reachable():
                raise ChannelError(f"Channel '{self.name}' is already being listened on")
            logger.debug("Removing stale socket %s", self.socket_path)
            self.socket_path.unlink(missing_ok=True)

        server = _ChannelServer(self.socket_path, self.name, on_message)
        thread = threading.Thread(
            target=server.serve_forever,
            kwargs={"poll_interval": 0.05},
            name=f"listen:{self.name}",
            daemon=True,
        )
        thread.start()
        logger.debug("Listening on '%s' at %s", self.name, self.socket_path)
        return ListenHandle(server, thread, self.socket_path)


__all__ = ["ListenHandle", "LocalChannel", "MessageCallback"]
