"""Client side of the log socket: connects, receives entries, answers pings."""

from __future__ import annotations

import socket
import threading
from enum import Enum, auto
from typing import Optional, Tuple

from ultralog.socket_logger import MESSAGE_LENGTH

PING = "PING"
PONG = b"PONG"


class SocketOperationResult(Enum):
    """Outcome of creating a socket or connecting it."""

    EXISTS = auto()
    SUCCESS = auto()
    FAILURE = auto()


class RecvResult(Enum):
    """Kind of what came back from one receive."""

    INVALID_S = auto()
    S_ERROR = auto()
    C_CLOSED = auto()
    SUCCESS = auto()
    PING = auto()


def _frame(data: bytes) -> bytes:
    return data[: MESSAGE_LENGTH - 1].ljust(MESSAGE_LENGTH, b"\0")


def _decode(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _recv_frame(sock: socket.socket) -> bytes:
    """Read one fixed-size frame, or less if the peer closes first."""
    data = b""
    while len(data) < MESSAGE_LENGTH:
        chunk = sock.recv(MESSAGE_LENGTH - len(data))
        if not chunk:
            break
        data += chunk
    return data


class SocketManager:
    """Holds one TCP connection to the logger at ip:port."""

    def __init__(self, ip: str = "127.0.0.1", port: int = 60420) -> None:
        self.address = (ip, int(port))
        self._lock = threading.Lock()
        self._socket: Optional[socket.socket] = None
        self._connected = False

    def has_socket(self) -> bool:
        with self._lock:
            return self._socket is not None

    def has_connection(self) -> bool:
        with self._lock:
            return self._connected

    def create_socket(self) -> SocketOperationResult:
        """Create the connection socket unless there already is one."""
        with self._lock:
            if self._socket is not None:
                return SocketOperationResult.EXISTS
            try:
                self._socket = socket.socket(
                    socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP
                )
            except OSError:
                return SocketOperationResult.FAILURE
            return SocketOperationResult.SUCCESS

    def establish_connection(self) -> SocketOperationResult:
        """Connect the socket to the logger; blocks until it succeeds or fails.

        A socket whose connect failed is discarded, since it cannot be reused
        on every platform.
        """
        with self._lock:
            if self._connected:
                return SocketOperationResult.EXISTS
            sock = self._socket
        if sock is None:
            return SocketOperationResult.FAILURE
        try:
            sock.connect(self.address)
        except OSError:
            with self._lock:
                self._connected = False
                if self._socket is sock:
                    self._socket = None
            sock.close()
            return SocketOperationResult.FAILURE
        with self._lock:
            if self._socket is not sock:
                return SocketOperationResult.FAILURE
            self._connected = True
        return SocketOperationResult.SUCCESS

    def receive_messages(self) -> Tuple[RecvResult, str]:
        """Wait for one frame; answer a ping, or return the entry received.

        On an error the text returned describes it.
        """
        with self._lock:
            sock = self._socket
        if sock is None:
            return RecvResult.INVALID_S, ""
        try:
            data = _recv_frame(sock)
        except OSError as error:
            self.close_socket()
            return RecvResult.S_ERROR, str(error)
        if not data:
            self.close_socket()
            return RecvResult.C_CLOSED, ""
        message = _decode(data)
        if message == PING:
            try:
                sock.sendall(_frame(PONG))
            except OSError as error:
                self.close_socket()
                return RecvResult.S_ERROR, str(error)
            return RecvResult.PING, ""
        return RecvResult.SUCCESS, message

    def close_socket(self) -> None:
        """Shut down and close the socket if there is one."""
        with self._lock:
            sock, self._socket = self._socket, None
            self._connected = False
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        sock.close()

    def __enter__(self) -> "SocketManager":
        return self

    def __exit__(self, *args) -> None:
        self.close_socket()