"""Terminal monitor: receives log entries and shows live statistics."""

from __future__ import annotations

import sys
import threading
import time
from collections import deque
from enum import Enum, auto
from typing import Deque, Optional, Sequence, TextIO

from ultralog.monitor.checker import Checker
from ultralog.monitor.netdata import NetData
from ultralog.monitor.socket_manager import (
    RecvResult,
    SocketManager,
    SocketOperationResult,
)
from ultralog.monitor.statistician import Statistician

_CLEAR_SCREEN = "\033[2J\033[H"
_HOME = "\033[0;0H"
_CLEAR_LINE = "\33[2K\r"


class ConnectionState(Enum):
    """What the socket thread is doing or what last went wrong."""

    IDLE = auto()
    CREATING_SOCKET = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    FAILED_CREATION = auto()
    FAILED_CONNECTION = auto()
    SOCK_INVALID = auto()
    SOCK_CLOSED = auto()
    SOCK_ERROR = auto()


def describe_state(state: ConnectionState, net_data: NetData) -> str:
    """Human-readable text for a connection state."""
    if state is ConnectionState.CONNECTED:
        return f"connected ({net_data.ip}:{net_data.port})"
    return {
        ConnectionState.IDLE: "idle",
        ConnectionState.CREATING_SOCKET: "creating socket...",
        ConnectionState.CONNECTING: "connecting...",
        ConnectionState.FAILED_CREATION: "failed at socket creation; sleeping...",
        ConnectionState.FAILED_CONNECTION: "failed at connection; sleeping...",
        ConnectionState.SOCK_INVALID:
            "failed to receive message (socket is invalid); sleeping...",
        ConnectionState.SOCK_CLOSED:
            "failed to receive message (socket is closed); sleeping...",
        ConnectionState.SOCK_ERROR: "failed to receive message (error); sleeping...",
    }[state]


def _or_none_yet(value: int) -> str:
    return "[no messages yet]" if value < 0 else str(value)


class MonitorApp:
    """Connects to the logger, collects entries and renders a status screen.

    Statistics are published every `mtu` messages or every `timeout` seconds,
    whichever comes first.
    """

    REFRESH_INTERVAL = 0.1
    RETRY_INTERVAL = 1.0

    def __init__(self, net_data: NetData, stdout: Optional[TextIO] = None) -> None:
        self.net_data = net_data
        self._stdout = stdout if stdout is not None else sys.stdout
        self.mtu = int(net_data.mtu)
        self.timeout = int(net_data.timeout)
        self.messages_left = self.mtu
        self.state = ConnectionState.IDLE
        self.last_message = "\n"
        self.last_error = ""
        self.statistician = Statistician()
        self.socket_manager = SocketManager(net_data.ip, int(net_data.port))
        self._lock = threading.Lock()
        self._messages: Deque[str] = deque()
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def socket_job(self) -> None:
        """Keep connected and collect entries until stop() is called."""
        manager = self.socket_manager
        while not self._stopped.is_set():
            self.state = (
                ConnectionState.CONNECTED
                if manager.has_socket()
                else ConnectionState.CREATING_SOCKET
            )
            if manager.create_socket() is SocketOperationResult.FAILURE:
                self._fail(ConnectionState.FAILED_CREATION)
                continue

            self.state = (
                ConnectionState.CONNECTED
                if manager.has_connection()
                else ConnectionState.CONNECTING
            )
            if manager.establish_connection() is SocketOperationResult.FAILURE:
                self._fail(ConnectionState.FAILED_CONNECTION)
                continue

            self.state = ConnectionState.CONNECTED
            flag, message = manager.receive_messages()
            if flag is RecvResult.PING:
                continue
            if flag is RecvResult.SUCCESS:
                with self._lock:
                    self.statistician.new_message(message)
                    self._messages.append(message)
                continue
            if flag is RecvResult.INVALID_S:
                self._fail(ConnectionState.SOCK_INVALID)
            elif flag is RecvResult.C_CLOSED:
                self._fail(ConnectionState.SOCK_CLOSED)
            else:
                self.last_error = message
                self._fail(ConnectionState.SOCK_ERROR)

    def _fail(self, state: ConnectionState) -> None:
        self.state = state
        self._stopped.wait(self.RETRY_INTERVAL)

    def render(self) -> str:
        """Build one screen, consuming one received entry and updating statistics."""
        return self._info() + self._display_state() + self._statistics()

    def _info(self) -> str:
        data = self.net_data
        seconds_left = self.timeout - self.statistician.clock_dif()
        head = (
            _HOME
            + "\n\tParameters:\n"
            + f"{_CLEAR_LINE}\tTrying to connect to: {data.ip}:{data.port}\n"
            + f"{_CLEAR_LINE}\tMessages to statistics update: {self.messages_left}"
            + f" (set to {data.mtu} messages)\n"
            + f"{_CLEAR_LINE}\tSeconds to statistics update: {seconds_left}"
            + f" (set to {data.timeout}s)\n\n"
            + "\tLast entry:\n"
        )
        with self._lock:
            if self._messages:
                self.last_message = self._messages.popleft()
                self.messages_left -= 1
                if self.statistician.should_update_by_messages(self.mtu):
                    self.messages_left = self.mtu
                    self.statistician.update()
        return head + f"{_CLEAR_LINE}\t{self.last_message}\n"

    def _display_state(self) -> str:
        return (
            "\tConnection state:\n"
            + f"{_CLEAR_LINE}\t > {describe_state(self.state, self.net_data)}\n\n"
        )

    def _statistics(self) -> str:
        with self._lock:
            stats = self.statistician
            regular, important, critical = stats.priority_counts
            text = (
                "\t-----------------------------------------\n"
                "\tSTATISTICS\n"
                "\t-----------------------------------------\n\n"
                f"\tTotal messages: {stats.total_messages}\n"
                f"\tTotal regular messages: {regular}\n"
                f"\tTotal importaint messages: {important}\n"
                f"\tTotal critical messages: {critical}\n"
                f"\tTotal messages in last hour: {stats.last_hour_count}\n"
                f"{_CLEAR_LINE}\tMax message length: {_or_none_yet(stats.max_length)}\n"
                f"{_CLEAR_LINE}\tMin message length: {_or_none_yet(stats.min_length)}\n"
                f"{_CLEAR_LINE}\tAverage message length: "
                f"{_or_none_yet(stats.average_length)}\n\n"
            )
            if stats.should_update_by_timeout(self.timeout):
                stats.update()
        return text

    def run(self) -> None:
        """Start the socket thread and redraw the screen until stopped."""
        self._stopped.clear()
        self._thread = threading.Thread(target=self.socket_job, daemon=True)
        self._thread.start()
        self.statistician.start_clock()
        self._stdout.write(_CLEAR_SCREEN)
        try:
            while not self._stopped.is_set():
                self._stdout.write(self.render())
                self._stdout.flush()
                self._stopped.wait(self.REFRESH_INTERVAL)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()

    def stop(self) -> None:
        """Stop the socket thread and close the connection."""
        self._stopped.set()
        self.socket_manager.close_socket()
        thread, self._thread = self._thread, None
        if thread is None or thread is threading.current_thread():
            return
        deadline = time.monotonic() + 5.0
        while thread.is_alive() and time.monotonic() < deadline:
            self.socket_manager.close_socket()
            thread.join(0.1)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the monitor with: ip:port messages_per_update seconds_per_update."""
    args = list(sys.argv[1:] if argv is None else argv)
    checker = Checker(["ultralog-monitor", *args])
    if not checker.all_clear:
        sys.stdout.write(checker.explanation)
        sys.stdout.flush()
        sys.stdin.readline()
        return 1
    MonitorApp(checker.net_data, sys.stdout).run()
    return 0