"""Shared types and helpers for log entries."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from enum import Enum, IntEnum, auto


class ClientWaitResult(Enum):
    """Outcome of waiting for a socket client to connect."""

    HAS_CLIENT = auto()
    NO_CONNECTION_YET = auto()
    FAILURE = auto()
    SUCCESS = auto()


class PingResult(Enum):
    """Outcome of a keep-alive ping to the socket client."""

    NO_CLIENT = auto()
    CLIENT_DISCONNECTED = auto()
    CLIENT_ALIVE = auto()
    TERMINATED = auto()
    TIMEOUT = auto()


class WriteResult(Enum):
    """Outcome of writing an entry to the socket client."""

    NO_CLIENT = auto()
    FAILURE = auto()
    SUCCESS = auto()


class Priority(IntEnum):
    """Priority of a log entry; higher values are more severe."""

    REGULAR = 0
    IMPORTANT = 1
    CRITICAL = 2


@dataclass
class CoreConfig:
    """Log file name and default priority of entries."""

    log_file_name: str
    priority: Priority


_NAMES = {
    Priority.REGULAR: "regular",
    Priority.IMPORTANT: "important",
    Priority.CRITICAL: "critical",
}

_BY_CHAR = {
    "r": Priority.REGULAR,
    "i": Priority.IMPORTANT,
    "c": Priority.CRITICAL,
}

_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def priority_to_string(priority: Priority) -> str:
    """Return the lower-case name of a priority, or "unknown"."""
    return _NAMES.get(priority, "unknown")


def char_to_priority(c: str) -> Priority:
    """Map 'r', 'i' or 'c' (any case) to a priority."""
    try:
        return _BY_CHAR[c.lower()]
    except KeyError:
        raise ValueError(f"unknown priority {c!r}") from None


def compose_config(file_arg: str, priority_arg: str) -> CoreConfig:
    """Build a config from a file name and a flag whose last character is the priority."""
    if not priority_arg:
        raise ValueError("priority argument is empty")
    return CoreConfig(file_arg, char_to_priority(priority_arg[-1]))


def get_time() -> str:
    """Return the local time as 'H:M:S D/M/YYYY' without zero padding."""
    now = time.localtime()
    return (
        f"{now.tm_hour}:{now.tm_min}:{now.tm_sec} "
        f"{now.tm_mday}/{now.tm_mon}/{now.tm_year}"
    )


def validate_priority(p: str) -> bool:
    """Tell whether the first character of p names a priority."""
    if not p:
        return False
    return p[0].lower() in _BY_CHAR


def strip_escape_codes(text: str) -> str:
    """Remove ANSI CSI escape sequences from text."""
    return _ESCAPE.sub("", text)


def format_entry(message: str, priority: Priority) -> str:
    """Format one log line, newline included."""
    return (
        f"message: {message} (priority: {priority_to_string(priority)}) "
        f"[{get_time()}]\n"
    )