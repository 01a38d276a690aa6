import socket
import threading
import time

import pytest

from ultralog.common import ClientWaitResult, PingResult, Priority
from ultralog.monitor.socket_manager import (
    RecvResult,
    SocketManager,
    SocketOperationResult,
)
from ultralog.socket_logger import SocketLogger


@pytest.fixture
def listener():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    server.settimeout(5)
    yield server
    server.close()


@pytest.fixture
def connected(listener):
    port = listener.getsockname()[1]
    manager = SocketManager("127.0.0.1", port)
    manager.create_socket()
    assert manager.establish_connection() is SocketOperationResult.SUCCESS
    peer, _ = listener.accept()
    yield manager, peer
    peer.close()
    manager.close_socket()


def _recv_exact(sock, size):
    data = b""
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


def test_create_socket_then_exists():
    manager = SocketManager("127.0.0.1", 60420)
    try:
        assert manager.create_socket() is SocketOperationResult.SUCCESS
        assert manager.has_socket()
        assert manager.create_socket() is SocketOperationResult.EXISTS
    finally:
        manager.close_socket()


def test_establish_without_socket_fails():
    manager = SocketManager("127.0.0.1", 60420)
    assert manager.establish_connection() is SocketOperationResult.FAILURE
    assert not manager.has_connection()


def test_refused_connection_fails():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    manager = SocketManager("127.0.0.1", port)
    manager.create_socket()
    assert manager.establish_connection() is SocketOperationResult.FAILURE
    assert not manager.has_connection()
    assert manager.create_socket() is SocketOperationResult.SUCCESS
    manager.close_socket()


def test_connect_then_exists(connected):
    manager, _ = connected
    assert manager.has_connection()
    assert manager.establish_connection() is SocketOperationResult.EXISTS


def test_receive_without_socket_is_invalid():
    manager = SocketManager("127.0.0.1", 60420)
    assert manager.receive_messages() == (RecvResult.INVALID_S, "")


def test_receive_entry(connected):
    manager, peer = connected
    text = "message: hi (priority: regular) [1:2:3 4/5/2024]\n"
    peer.sendall(text.encode().ljust(512, b"\0"))
    assert manager.receive_messages() == (RecvResult.SUCCESS, text)


def test_ping_is_answered_with_pong_frame(connected):
    manager, peer = connected
    peer.sendall(b"PING".ljust(512, b"\0"))
    assert manager.receive_messages() == (RecvResult.PING, "")
    assert _recv_exact(peer, 512) == b"PONG" + b"\0" * 508


def test_peer_close_reports_closed(connected):
    manager, peer = connected
    peer.close()
    assert manager.receive_messages() == (RecvResult.C_CLOSED, "")
    assert not manager.has_socket()
    assert not manager.has_connection()


def test_close_socket_is_idempotent(connected):
    manager, _ = connected
    manager.close_socket()
    manager.close_socket()
    assert not manager.has_socket()
    assert not manager.has_connection()


def test_against_socket_logger():
    with SocketLogger("127.0.0.1", 0) as server:
        port = server.address[1]
        with SocketManager("127.0.0.1", port) as manager:
            manager.create_socket()
            assert manager.establish_connection() is SocketOperationResult.SUCCESS
            deadline = time.monotonic() + 5
            result = server.wait_for_client()
            while result is ClientWaitResult.NO_CONNECTION_YET and time.monotonic() < deadline:
                time.sleep(0.01)
                result = server.wait_for_client()
            assert result is ClientWaitResult.SUCCESS

            outcome = {}
            pinger = threading.Thread(
                target=lambda: outcome.setdefault("ping", server.ping_client(5.0))
            )
            pinger.start()
            assert manager.receive_messages() == (RecvResult.PING, "")
            pinger.join(10)
            assert outcome["ping"] is PingResult.CLIENT_ALIVE

            server.write("hello", Priority.CRITICAL)
            flag, message = manager.receive_messages()
            assert flag is RecvResult.SUCCESS
            assert message.startswith("message: hello (priority: critical) [")
            assert message.endswith("]\n")