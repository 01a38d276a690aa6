"""Validation of the logger's command-line arguments."""

from __future__ import annotations

import re
from typing import Sequence

from ultralog.common import validate_priority

_IP_PORT = re.compile(r"([0-9]+\.[0-9]+\.[0-9]+\.[0-9]+):([0-9]+)")
_IP = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)\.([0-9]+)")

_USAGE = (
    "\tProvide at least two command-line arguments: one for log file name, "
    "one for default priority of entries.\n"
    "\tOptional third argument is ip:port\n"
    "\tIf it's not set up, it defaults to 127.0.0.1:60420\n\n"
    "\tStartup example: [binary name] log.txt -r 127.0.0.1:60420\n\n"
    "\tPossible priority values:\n"
    "\t-r / regular\n"
    "\t-i / important\n"
    "\t-c / critical\n"
    "\tPress [Enter] to quit...\n"
)


def check_default(flag: str) -> bool:
    """Tell whether flag starts with '-' and ends with a priority letter."""
    if not flag:
        return False
    last = flag[-1]
    return flag[0] == "-" and last.isalpha() and validate_priority(last)


def check_ip_port(ip_port: str) -> None:
    """Validate an 'a.b.c.d:port' string; raise ValueError with the reason."""
    match = _IP_PORT.fullmatch(ip_port)
    if match is None:
        raise ValueError("\tError: ip:port set incorrectly.\n")
    ip, port = match.groups()
    if not 0 <= int(port) <= 65535:
        raise ValueError("\tError: port is out of range.\n")
    octets = _IP.fullmatch(ip).groups()
    if any(not 0 <= int(octet) <= 255 for octet in octets):
        raise ValueError("\tError: ip is set incorrectly (out of range).\n")


class Checker:
    """Checks argv (program name first) and explains what is wrong.

    After construction, all_clear says whether the arguments are usable and
    explanation holds the text to show the user.
    """

    def __init__(self, argv: Sequence[str]) -> None:
        self.all_clear = False
        self.explanation = ""
        count = len(argv)
        if count <= 1:
            self.explanation += "\tError: no command-line arguments provided.\n"
        elif count == 2:
            self.explanation += "\tError: not enough command-line arguments provided.\n"
        elif count in (3, 4):
            if count == 4:
                try:
                    check_ip_port(argv[3])
                except ValueError as error:
                    self.explanation += str(error)
                    return
            if not check_default(argv[2]):
                self.explanation += "\tError: provided flag is incorrect.\n"
                return
            self.all_clear = True
        else:
            self.explanation += "\tError: too many command-line arguments provided.\n"
        self.explanation += _USAGE