"""Validation of the monitor's command-line arguments."""

from __future__ import annotations

import re
from typing import Sequence, Tuple

from ultralog.monitor.netdata import (
    NetData,
    contains_only_digits,
    in_ip_range,
    in_port_range,
)

_IP_PORT = re.compile(r"([0-9]+\.[0-9]+\.[0-9]+\.[0-9]+):([0-9]+)")
_IP = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)\.([0-9]+)")

_USAGE = (
    "\tProvide three command-line arguments:\n"
    "\t > first for ip::port to connect to;\n"
    "\t > second for the amount of messages until app's update;\n"
    "\t > third for timeout (in seconds) until update.\n\n"
    "\tStartup example: [binary name] 127.0.0.1:60420 3 5\n\n"
    "\tPress [Enter] to quit...\n"
)


def examine_ip_port_string(ip_port: str) -> Tuple[str, str]:
    """Split 'a.b.c.d:port' into its ip and port; both empty if it does not match."""
    match = _IP_PORT.fullmatch(ip_port)
    if match is None:
        return "", ""
    return match.group(1), match.group(2)


class Checker:
    """Checks argv (program name first): ip:port, message count and timeout.

    After construction, all_clear says whether the arguments are usable,
    explanation holds the text to show the user and net_data the parsed values.
    """

    def __init__(self, argv: Sequence[str]) -> None:
        self.all_clear = False
        self.explanation = ""
        self.net_data = NetData()
        count = len(argv)
        if count <= 1:
            self.explanation += "\tError: no command-line arguments provided.\n"
        elif count in (2, 3):
            self.explanation += "\tError: not enough command-line arguments provided.\n"
        elif count == 4:
            ip, port = examine_ip_port_string(argv[1])
            self.net_data = NetData(ip, port, argv[2], argv[3])
            self.all_clear = self._checkup()
        else:
            self.explanation += "\tError: too many command-line arguments provided.\n"
        self.explanation += _USAGE

    def _checkup(self) -> bool:
        data = self.net_data
        if data.something_is_empty():
            self.explanation += "\tError: some of the arguments turned up empty.\n"
            if data.empty_ip_port():
                self.explanation += (
                    "\tFor one, ip or port turned up empty. This could be due to "
                    "ip:port arg string being passed incorretly.\n"
                )
            self.explanation += (
                "\tMake sure your ip:port argument looks like this (example):\n"
                "\t127.0.0.1:60420\n\n"
            )
            return False
        if not self._check_ip():
            return False
        if not in_port_range(int(data.port)):
            return False
        return contains_only_digits(data.mtu) and contains_only_digits(data.timeout)

    def _check_ip(self) -> bool:
        match = _IP.fullmatch(self.net_data.ip)
        if match is None:
            self.explanation += "\tError: ip failed to match its regex.\n"
            return False
        return in_ip_range(match.groups())