"""Connection parameters of the monitor and checks on their values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

_DIGITS = frozenset("0123456789")


@dataclass
class NetData:
    """Address, port and update thresholds, all as given on the command line."""

    ip: str = ""
    port: str = ""
    mtu: str = ""
    timeout: str = ""

    def something_is_empty(self) -> bool:
        return not (self.ip and self.port and self.mtu and self.timeout)

    def empty_ip_port(self) -> bool:
        return not (self.ip and self.port)


def in_ip_range(nums: Union[int, str, Iterable[Union[int, str]]]) -> bool:
    """Tell whether every number (or numeric string) lies in 0..255."""
    if isinstance(nums, (int, str)):
        nums = (nums,)
    return all(0 <= int(num) <= 255 for num in nums)


def in_port_range(num: int) -> bool:
    return 0 <= int(num) <= 65535


def contains_only_digits(text: str) -> bool:
    """Tell whether text is non-empty and made of ASCII digits only."""
    return bool(text) and set(text) <= _DIGITS