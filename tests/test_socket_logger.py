import socket
import time

import pytest

from ultralog.common import ClientWaitResult, PingResult, Priority, WriteResult
from ultralog.socket_logger import MESSAGE_LENGTH, SocketLogger


@pytest.fixture
def logger():
    sock_logger = SocketLogger("127.0.0.1", 0)
    yield sock_logger
    sock_logger.close()


def _connect(sock_logger):
    client = socket.create_connection(sock_logger.address, timeout=5)
    for _ in range(200):
        if sock_logger.wait_for_client() is ClientWaitResult.SUCCESS:
            return client
        time.sleep(0.01)
    raise AssertionError("client was never accepted")


def _recv_exact(client, size):
    data = b""
    while len(data) < size:
        chunk = client.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


def test_no_connection_yet(logger):
    assert logger.wait_for_client() is ClientWaitResult.NO_CONNECTION_YET
    assert logger.has_client() is False


def test_write_without_client(logger):
    assert logger.write("hi", Priority.REGULAR) is WriteResult.NO_CLIENT


def test_ping_without_client(logger):
    assert logger.ping_client(0.1) is PingResult.NO_CLIENT


def test_accept_then_has_client(logger):
    client = _connect(logger)
    try:
        assert logger.has_client() is True
        assert logger.wait_for_client() is ClientWaitResult.HAS_CLIENT
    finally:
        client.close()


def test_write_sends_fixed_frame(logger):
    client = _connect(logger)
    try:
        assert logger.write("hi", Priority.CRITICAL) is WriteResult.SUCCESS
        data = _recv_exact(client, MESSAGE_LENGTH)
        assert len(data) == MESSAGE_LENGTH
        text = data.rstrip(b"\0")
        assert text.startswith(b"message: hi (priority: critical) [")
        assert text.endswith(b"]\n")
    finally:
        client.close()


def test_write_truncates_long_message(logger):
    client = _connect(logger)
    try:
        assert logger.write("x" * 1000, Priority.REGULAR) is WriteResult.SUCCESS
        data = _recv_exact(client, MESSAGE_LENGTH)
        assert len(data) == MESSAGE_LENGTH
        assert data[-1] == 0
        assert b"\0" not in data[:-1]
    finally:
        client.close()


def test_ping_alive(logger):
    client = _connect(logger)
    try:
        client.sendall(b"PONG".ljust(MESSAGE_LENGTH, b"\0"))
        assert logger.ping_client(2.0) is PingResult.CLIENT_ALIVE
        assert logger.has_client() is True
        ping = _recv_exact(client, MESSAGE_LENGTH)
        assert ping.rstrip(b"\0") == b"PING"
    finally:
        client.close()


def test_ping_wrong_answer_terminates(logger):
    client = _connect(logger)
    try:
        client.sendall(b"HELLO".ljust(MESSAGE_LENGTH, b"\0"))
        assert logger.ping_client(2.0) is PingResult.TERMINATED
        assert logger.has_client() is False
    finally:
        client.close()


def test_ping_disconnected(logger):
    client = _connect(logger)
    client.close()
    assert logger.ping_client(2.0) is PingResult.CLIENT_DISCONNECTED
    assert logger.has_client() is False


def test_ping_timeout(logger):
    client = _connect(logger)
    try:
        assert logger.ping_client(0.2) is PingResult.TIMEOUT
        assert logger.has_client() is False
    finally:
        client.close()


def test_bind_failure_reports_failure(logger):
    taken_port = logger.address[1]
    other = SocketLogger("127.0.0.1", taken_port)
    try:
        assert other.address is None
        assert other.wait_for_client() is ClientWaitResult.FAILURE
    finally:
        other.close()