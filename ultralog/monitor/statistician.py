"""Statistics over the log entries the monitor receives."""

from __future__ import annotations

import re
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Tuple

HOUR = 3600.0

_ENTRY = re.compile(r"(message:\s)(.*)( \s*\(priority:\s*)([a-zA-Z]+)(.*\s*)")

_PRIORITY_NAMES = ("regular", "important", "critical")


@dataclass
class _Statistic:
    """A value being counted and the value last published by update()."""

    old: int = 0
    current: int = 0

    def update(self) -> None:
        self.old = self.current


class Statistician:
    """Counts entries by priority and tracks body lengths.

    Values read through the properties change only when update() publishes
    them. Lengths are -1 until a message has been published.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started = False
        self._total = _Statistic()
        self._by_priority = {name: _Statistic() for name in _PRIORITY_NAMES}
        self._timestamps: Deque[float] = deque()
        self._last_hour = _Statistic()
        self._max_length = _Statistic(-1, -1)
        self._min_length = _Statistic(-1, -1)
        self._average_length = _Statistic(-1, -1)
        self._total_length = 0
        self._since_update = 0
        self._start_time = self._end_time = clock()

    @property
    def total_messages(self) -> int:
        return self._total.old

    @property
    def priority_counts(self) -> Tuple[int, int, int]:
        """Published counts of regular, important and critical entries."""
        return tuple(self._by_priority[name].old for name in _PRIORITY_NAMES)

    @property
    def last_hour_count(self) -> int:
        return self._last_hour.old

    @property
    def max_length(self) -> int:
        return self._max_length.old

    @property
    def min_length(self) -> int:
        return self._min_length.old

    @property
    def average_length(self) -> int:
        return self._average_length.old

    def _stats(self):
        yield self._total
        yield from self._by_priority.values()
        yield self._last_hour
        yield self._max_length
        yield self._min_length
        yield self._average_length

    def update(self) -> None:
        """Drop entries older than an hour and publish the current values."""
        self.remove_expired()
        for stat in self._stats():
            stat.update()

    def new_message(self, message: str) -> None:
        """Count one received entry of the form 'message: ... (priority: ...) [...]'."""
        self._since_update += 1
        match = _ENTRY.fullmatch(message)
        body, priority = (match.group(2), match.group(4)) if match else ("", "")

        self._total.current += 1
        if priority in self._by_priority:
            self._by_priority[priority].current += 1

        self._timestamps.append(self._clock())
        self._last_hour.current = len(self._timestamps)
        self._set_lengths(len(body))

    def remove_expired(self) -> None:
        """Forget timestamps that are at least an hour old."""
        now = self._clock()
        while self._timestamps and now - self._timestamps[0] >= HOUR:
            self._timestamps.popleft()
        self._last_hour.current = len(self._timestamps)

    def _set_lengths(self, length: int) -> None:
        if self._max_length.current == -1 or self._max_length.current < length:
            self._max_length.current = length
        if self._min_length.current == -1 or self._min_length.current > length:
            self._min_length.current = length
        self._total_length += length
        self._average_length.current = self._total_length // self._total.current

    def start_clock(self) -> None:
        """Start the update timer; later calls do nothing."""
        if not self._started:
            self._reset_clock()
        self._started = True

    def _reset_clock(self) -> None:
        self._start_time = self._end_time = self._clock()

    def clock_dif(self) -> int:
        """Whole seconds between the timer start and its last reading."""
        return int(self._end_time - self._start_time)

    def should_update_by_messages(self, mtu: int) -> bool:
        """True once mtu messages have arrived since the last time this said so."""
        if self._since_update >= mtu:
            self._since_update = 0
            return True
        return False

    def should_update_by_timeout(self, timeout: int) -> bool:
        """Read the timer; True (and restart it) once timeout seconds have passed."""
        self._end_time = self._clock()
        if timeout - self.clock_dif() <= 0:
            self._reset_clock()
            return True
        return False