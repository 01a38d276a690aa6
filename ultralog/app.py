"""Interactive front end: reads lines from the user and logs them."""

from __future__ import annotations

import sys
import threading
import time
from typing import List, Optional, Sequence, TextIO

from ultralog.checker import Checker
from ultralog.common import (
    char_to_priority,
    compose_config,
    priority_to_string,
    strip_escape_codes,
    validate_priority,
)
from ultralog.core import Core
from ultralog.pool import Pool

_CLEAR_SCREEN = "\033[2J\033[H"


class App:
    """Reads user input line by line and hands it to the core for logging.

    While running, one background thread accepts socket clients and another
    pings the connected client every PING_INTERVAL seconds.
    """

    PING_INTERVAL = 10.0
    LISTEN_INTERVAL = 0.1

    def __init__(
        self,
        core,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.core = core
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self.running = False
        self._stopped = threading.Event()
        self._threads: List[threading.Thread] = []
        self._pool: Optional[Pool] = None

    def command_filter(self, text: str) -> bool:
        """Handle a special command; return True if text was one and must not be logged."""
        if text == "-p":
            self._specify_priority()
            return True
        if text == "-t":
            self.core.switch_logging_destination()
            return True
        if text == "exit":
            self.running = False
            return True
        return False

    def run(self) -> None:
        """Read and log lines until 'exit' or end of input, then stop."""
        self.running = True
        self._stopped.clear()
        self._pool = Pool()
        self._threads = [
            threading.Thread(target=self._listen_job, daemon=True),
            threading.Thread(target=self._ping_pong_job, daemon=True),
        ]
        for thread in self._threads:
            thread.start()
        try:
            while self.running:
                self._instructions()
                line = self._stdin.readline()
                if not line:
                    break
                text = strip_escape_codes(line.rstrip("\r\n"))
                if self.command_filter(text):
                    continue
                self._pool.submit(self.core.log, text)
        finally:
            self.stop()

    def stop(self) -> None:
        """End the background threads and wait for queued entries to be logged."""
        self.running = False
        self._stopped.set()
        for thread in self._threads:
            thread.join()
        self._threads = []
        if self._pool is not None:
            while self._pool.is_working():
                time.sleep(0.01)
            self._pool.stop()
            self._pool = None

    def _listen_job(self) -> None:
        while True:
            self.core.listen()
            if self._stopped.wait(self.LISTEN_INTERVAL):
                return

    def _ping_pong_job(self) -> None:
        while True:
            self.core.ping_pong()
            if self._stopped.wait(self.PING_INTERVAL):
                return

    def _specify_priority(self) -> None:
        self._stdout.write("\n\tSpecify new default priority [r/i/c]: ")
        self._stdout.flush()
        answer = self._stdin.readline().rstrip("\r\n")
        if len(answer) != 1 or not validate_priority(answer):
            return
        self.core.switch_default_priority(char_to_priority(answer))

    def _instructions(self) -> None:
        destination = "file.\n" if self.core.is_logging_to_file else "socket.\n"
        self._stdout.write(
            _CLEAR_SCREEN
            + "\n"
            + f"\tCurrently logging to: {destination}"
            + f"\tDefault priority: {priority_to_string(self.core.default_priority)}\n\n"
            + "\tUnique commands:\n"
            + "\texit // exit;\n"
            + "\t-p // change default priority;\n"
            + "\t-t // switch logging destination (file/socket);\n\n"
            + "\tGeneral use:\n"
            + "\t[message] -[priority]\n"
            + "\tLike so:\n"
            + "\ta bright red fox jumps over a high fence -r\n"
            + "\t\tNote: priority is optional.\n\n\t"
        )
        self._stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the logger with: log_file -priority [ip:port]."""
    args = list(sys.argv[1:] if argv is None else argv)
    checker = Checker(["ultralog", *args])
    if not checker.all_clear:
        sys.stdout.write(checker.explanation)
        sys.stdout.flush()
        sys.stdin.readline()
        return 1
    ip, port = "", 0
    if len(args) == 3:
        ip, _, port_text = args[2].rpartition(":")
        port = int(port_text)
    with Core(compose_config(args[0], args[1]), ip, port) as core:
        App(core).run()
    return 0