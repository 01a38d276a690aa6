import socket
import time

import pytest

from ultralog.common import ClientWaitResult, CoreConfig, PingResult, Priority
from ultralog.core import Core, HandledInput, handle_input


def _free_port():
    with socket.socket() as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "log.txt"


@pytest.fixture
def core(log_path):
    port = _free_port()
    instance = Core(CoreConfig(str(log_path), Priority.IMPORTANT), "127.0.0.1", port)
    instance.test_port = port
    yield instance
    instance.close()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("hello -r", HandledInput("hello", "r")),
        ("hello", HandledInput("hello", "")),
        ("a -rr", HandledInput("a -rr", "")),
        ("two words   -C", HandledInput("two words", "C")),
        ("a\nb", HandledInput("", "")),
    ],
)
def test_handle_input(text, expected):
    assert handle_input(text) == expected


def test_log_default_priority(core, log_path):
    assert core.log("hello") is True
    content = log_path.read_text(encoding="utf-8")
    assert content.startswith("message: hello (priority: important) [")


def test_lower_priority_is_discarded(core, log_path):
    assert core.log("quiet -r") is False
    assert log_path.read_text(encoding="utf-8") == ""


def test_higher_priority_is_written(core, log_path):
    assert core.log("loud -c") is True
    content = log_path.read_text(encoding="utf-8")
    assert content.startswith("message: loud (priority: critical) [")


def test_unknown_priority_is_discarded(core, log_path):
    assert core.log("odd -x") is False
    assert log_path.read_text(encoding="utf-8") == ""


def test_switch_default_priority(core, log_path):
    core.switch_default_priority(Priority.REGULAR)
    assert core.default_priority is Priority.REGULAR
    assert core.log("quiet -r") is True
    assert "(priority: regular)" in log_path.read_text(encoding="utf-8")


def test_switch_destination_without_client(core, log_path):
    core.switch_logging_destination()
    assert core.is_logging_to_file is False
    assert core.log("hello -c") is False
    assert log_path.read_text(encoding="utf-8") == ""
    core.switch_logging_destination()
    assert core.is_logging_to_file is True


def test_ping_pong_without_client(core):
    assert core.ping_pong() is PingResult.NO_CLIENT


def test_log_to_socket_client(core):
    client = socket.create_connection(("127.0.0.1", core.test_port), timeout=5)
    try:
        for _ in range(200):
            if core.listen() is ClientWaitResult.SUCCESS:
                break
            time.sleep(0.01)
        assert core.listen() is ClientWaitResult.HAS_CLIENT
        core.switch_logging_destination()
        assert core.log("net -c") is True
        data = b""
        while len(data) < 512:
            chunk = client.recv(512 - len(data))
            if not chunk:
                break
            data += chunk
        assert data.rstrip(b"\0").startswith(b"message: net (priority: critical) [")
    finally:
        client.close()