"""Routes user input to the file or socket logger by priority."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass

from ultralog.common import (
    ClientWaitResult,
    CoreConfig,
    PingResult,
    Priority,
    WriteResult,
    char_to_priority,
    validate_priority,
)
from ultralog.file_logger import FileLogger
from ultralog.socket_logger import SocketLogger

DEFAULT_IP = "127.0.0.1"
DEFAULT_PORT = 60420

_INPUT = re.compile(r"(.*?)(?:\s+-([a-zA-Z0-9]))?")


@dataclass(frozen=True)
class HandledInput:
    """A message and the priority letter given after it, if any."""

    message: str
    priority: str


def handle_input(text: str) -> HandledInput:
    """Split 'message -p' into its message and its one-character priority."""
    match = _INPUT.fullmatch(text)
    if match is None:
        return HandledInput("", "")
    return HandledInput(match.group(1), match.group(2) or "")


class Core:
    """Writes entries to a log file or to a socket client.

    An entry given an explicit priority lower than the default is discarded.
    """

    def __init__(self, config: CoreConfig, ip: str = "", port: int = 0) -> None:
        self.config = dataclasses.replace(config)
        self.file_logging = True
        self._file_logger = FileLogger(config.log_file_name)
        self._socket_logger = SocketLogger(ip or DEFAULT_IP, port or DEFAULT_PORT)

    @property
    def default_priority(self) -> Priority:
        return self.config.priority

    @property
    def is_logging_to_file(self) -> bool:
        return self.file_logging

    def switch_default_priority(self, priority: Priority) -> None:
        self.config.priority = priority

    def switch_logging_destination(self) -> None:
        self.file_logging = not self.file_logging

    def listen(self) -> ClientWaitResult:
        """Accept a socket client if one is waiting."""
        return self._socket_logger.wait_for_client()

    def ping_pong(self) -> PingResult:
        """Check that the socket client is still alive."""
        return self._socket_logger.ping_client()

    def log(self, text: str) -> bool:
        """Log one line of user input; return True if it was written."""
        handled = handle_input(text)
        if not handled.priority:
            priority = self.config.priority
        elif validate_priority(handled.priority):
            priority = char_to_priority(handled.priority[0])
            if priority < self.config.priority:
                return False
        else:
            return False
        return self._write(handled.message, priority)

    def close(self) -> None:
        self._file_logger.close()
        self._socket_logger.close()

    def __enter__(self) -> "Core":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _write(self, message: str, priority: Priority) -> bool:
        if self.file_logging:
            return self._file_logger.write(message, priority)
        return self._socket_logger.write(message, priority) is WriteResult.SUCCESS