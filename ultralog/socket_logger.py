"""Sends log entries to a single TCP client and keeps it alive with pings."""

from __future__ import annotations

import logging
import os
import select
import socket
import threading
from typing import Optional, Tuple

from ultralog.common import (
    ClientWaitResult,
    PingResult,
    Priority,
    WriteResult,
    format_entry,
)

_log = logging.getLogger(__name__)

MESSAGE_LENGTH = 512
PING = b"PING"
PONG = "PONG"


def _frame(data: bytes) -> bytes:
    """Cut data to fit a fixed-size, NUL-terminated frame and pad it."""
    return data[: MESSAGE_LENGTH - 1].ljust(MESSAGE_LENGTH, b"\0")


def _decode(data: bytes) -> str:
    """Read the text of a frame up to its first NUL byte."""
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


class SocketLogger:
    """Listens on ip:port, accepts one client and sends it log entries.

    The listening socket is non-blocking, so wait_for_client never blocks.
    If the listening socket cannot be set up, the failure is logged and
    wait_for_client reports FAILURE from then on.
    """

    def __init__(self, ip: str = "127.0.0.1", port: int = 60420) -> None:
        self._lock = threading.RLock()
        self._client: Optional[socket.socket] = None
        self._listener: Optional[socket.socket] = None
        self._setup(ip, port)

    def _setup(self, ip: str, port: int) -> None:
        _log.info("Trying to setup on port %d...", port)
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
        try:
            if os.name != "nt":
                listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((ip, port))
            listener.listen(socket.SOMAXCONN)
            listener.setblocking(False)
        except OSError as error:
            _log.warning("Listening socket setup failed: %s", error)
            listener.close()
            return
        self._listener = listener

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """The address the listening socket is bound to, if it is set up."""
        with self._lock:
            if self._listener is None:
                return None
            return self._listener.getsockname()

    def has_client(self) -> bool:
        with self._lock:
            return self._client is not None

    def wait_for_client(self) -> ClientWaitResult:
        """Accept a pending connection if there is one, without blocking."""
        with self._lock:
            if self._client is not None:
                return ClientWaitResult.HAS_CLIENT
            if self._listener is None:
                return ClientWaitResult.FAILURE
            try:
                conn, _ = self._listener.accept()
            except BlockingIOError:
                return ClientWaitResult.NO_CONNECTION_YET
            except OSError:
                return ClientWaitResult.FAILURE
            conn.setblocking(True)
            self._client = conn
        return ClientWaitResult.SUCCESS

    def ping_client(self, timeout: float = 3.0) -> PingResult:
        """Send PING and expect PONG within timeout seconds.

        A client that is gone, silent or answers anything else is dropped.
        """
        with self._lock:
            client = self._client
            if client is None:
                return PingResult.NO_CLIENT
            try:
                client.sendall(_frame(PING))
            except OSError:
                pass
            ready, _, _ = select.select([client], [], [], timeout)
            if not ready:
                self._close_client()
                return PingResult.TIMEOUT
            try:
                data = client.recv(MESSAGE_LENGTH)
            except OSError:
                data = b""
            if not data:
                self._close_client()
                return PingResult.CLIENT_DISCONNECTED
            if _decode(data) == PONG:
                return PingResult.CLIENT_ALIVE
            self._close_client()
            return PingResult.TERMINATED

    def write(self, message: str, priority: Priority) -> WriteResult:
        """Send one formatted entry as a fixed-size frame."""
        payload = _frame(format_entry(message, priority).encode("utf-8"))
        with self._lock:
            if self._client is None:
                return WriteResult.NO_CLIENT
            try:
                self._client.sendall(payload)
            except OSError:
                _log.warning("Send failed. Closing client.")
                self._close_client()
                return WriteResult.FAILURE
        return WriteResult.SUCCESS

    def close(self) -> None:
        """Close the client and the listening socket."""
        with self._lock:
            self._close_client()
            if self._listener is not None:
                self._listener.close()
                self._listener = None

    def __enter__(self) -> "SocketLogger":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _close_client(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            _log.info("Closed client's socket.")