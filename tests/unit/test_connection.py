"""
Unit tests for Connection, using a local socket pair.
"""

import socket

import pytest

from lwebservr.core.connection import Connection, ConnectionState


@pytest.fixture
def socket_pair():
    server_side, client_side = socket.socketpair()
    client_side.settimeout(5.0)
    yield server_side, client_side
    server_side.close()
    client_side.close()


def make_connection(sock: socket.socket, **kwargs) -> Connection:
    return Connection(socket=sock, address=("127.0.0.1", 54321), **kwargs)


class TestConnection:

    def test_initial_state(self, socket_pair):
        server_side, _ = socket_pair
        conn = make_connection(server_side)

        assert conn.state == ConnectionState.ACCEPTED
        assert conn.client_ip == "127.0.0.1"
        assert conn.client_port == 54321
        assert len(conn.id) == 8

    def test_socket_is_blocking_without_timeout(self, socket_pair):
        server_side, _ = socket_pair
        server_side.settimeout(3.0)
        make_connection(server_side)

        assert server_side.gettimeout() is None

    def test_read_request(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        client_side.sendall(b"GET / HTTP/1.1\r\n\r\n")

        assert conn.read_request() == b"GET / HTTP/1.1\r\n\r\n"
        assert conn.state == ConnectionState.READ

    def test_read_is_capped_at_read_size(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side, read_size=16)

        client_side.sendall(b"A" * 100)

        assert len(conn.read_request()) <= 16

    def test_default_read_size(self, socket_pair):
        server_side, _ = socket_pair
        assert make_connection(server_side).read_size == 512

    def test_read_after_client_closed(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        client_side.shutdown(socket.SHUT_WR)

        assert conn.read_request() == b""

    def test_send_response(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        assert conn.send_response(b"HTTP/1.0 404 Not Found\r\n") is True
        assert conn.state == ConnectionState.WRITTEN
        assert client_side.recv(1024) == b"HTTP/1.0 404 Not Found\r\n"

    def test_send_failure_returns_false(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        client_side.close()
        # Keep writing until the kernel reports the closed peer
        results = [conn.send_response(b"x" * 65536) for _ in range(20)]

        assert results[-1] is False
        assert conn.state == ConnectionState.FAILED

    def test_close_is_idempotent(self, socket_pair):
        server_side, client_side = socket_pair
        conn = make_connection(server_side)

        conn.close()
        conn.close()

        assert conn.state == ConnectionState.CLOSED
        assert client_side.recv(1024) == b""

    def test_context_manager_closes(self, socket_pair):
        server_side, _ = socket_pair

        with make_connection(server_side) as conn:
            assert conn.state == ConnectionState.ACCEPTED

        assert conn.state == ConnectionState.CLOSED

    def test_close_drains_unread_data(self, socket_pair):
        """Unread request bytes do not turn the close into a reset."""
        server_side, client_side = socket_pair
        conn = make_connection(server_side, read_size=8)

        client_side.sendall(b"GET / HTTP/1.1\r\n" + b"X" * 2000)
        conn.read_request()
        conn.send_response(b"HTTP/1.0 200\r\n")
        client_side.shutdown(socket.SHUT_WR)
        conn.close()

        assert client_side.recv(1024) == b"HTTP/1.0 200\r\n"
