"""
Tests for the blocking socket transport
"""

import socket
from unittest.mock import MagicMock, patch

import pytest

from dazeus.errors import ConnectError, TransportError
from dazeus.transport import SocketTransport, TcpDescriptor, UnixDescriptor, open_transport


class TestOpenTransport:
    @patch("dazeus.transport.socket_transport.socket.socket")
    def test_unix_connect(self, mock_socket_cls):
        sock = MagicMock()
        mock_socket_cls.return_value = sock

        transport = open_transport(UnixDescriptor("/tmp/dazeus.sock"), connect_timeout=2.0)

        mock_socket_cls.assert_called_once_with(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.connect.assert_called_once_with("/tmp/dazeus.sock")
        sock.settimeout.assert_any_call(2.0)
        sock.settimeout.assert_called_with(None)
        assert transport.sock is sock

    @patch("dazeus.transport.socket_transport.socket.socket")
    def test_unix_connect_failure_closes_socket(self, mock_socket_cls):
        sock = MagicMock()
        sock.connect.side_effect = FileNotFoundError("no such file")
        mock_socket_cls.return_value = sock

        with pytest.raises(ConnectError) as exc:
            open_transport(UnixDescriptor("/nope"))

        sock.close.assert_called_once()
        assert exc.value.data["descriptor"] == "unix:/nope"

    @patch("dazeus.transport.socket_transport.socket.create_connection")
    def test_tcp_connect(self, mock_create):
        mock_create.return_value = MagicMock()
        open_transport(TcpDescriptor("localhost", 1234), connect_timeout=5.0)
        mock_create.assert_called_once_with(("localhost", 1234), timeout=5.0)

    @patch("dazeus.transport.socket_transport.socket.create_connection")
    def test_tcp_refused(self, mock_create, caplog):
        mock_create.side_effect = ConnectionRefusedError("refused")
        with pytest.raises(ConnectError):
            open_transport(TcpDescriptor("localhost", 1))
        assert any("Cannot connect to tcp:localhost:1" in r.message for r in caplog.records)


class TestSocketTransport:
    def test_read_returns_bytes(self):
        sock = MagicMock()
        sock.recv.return_value = b"abc"
        transport = SocketTransport(sock)
        assert transport.read(10, timeout=1.5) == b"abc"
        sock.settimeout.assert_called_once_with(1.5)
        sock.recv.assert_called_once_with(10)

    def test_read_timeout_raises_builtin_timeout(self):
        sock = MagicMock()
        sock.recv.side_effect = socket.timeout("timed out")
        with pytest.raises(TimeoutError):
            SocketTransport(sock).read(10, timeout=0.1)

    def test_zero_timeout_would_block(self):
        sock = MagicMock()
        sock.recv.side_effect = BlockingIOError()
        with pytest.raises(TimeoutError):
            SocketTransport(sock).read(10, timeout=0)

    def test_read_error_is_transport_error(self):
        sock = MagicMock()
        sock.recv.side_effect = ConnectionResetError("reset")
        with pytest.raises(TransportError):
            SocketTransport(sock).read()

    def test_write_uses_sendall(self):
        sock = MagicMock()
        SocketTransport(sock).write(b"payload")
        sock.sendall.assert_called_once_with(b"payload")

    def test_write_error_is_transport_error(self):
        sock = MagicMock()
        sock.sendall.side_effect = BrokenPipeError("pipe")
        with pytest.raises(TransportError):
            SocketTransport(sock).write(b"x")

    def test_close_is_idempotent(self):
        sock = MagicMock()
        transport = SocketTransport(sock)
        with transport:
            pass
        transport.close()
        sock.close.assert_called_once()
        assert transport.closed
        with pytest.raises(TransportError):
            transport.read()
