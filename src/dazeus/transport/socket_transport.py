"""Blocking socket transport for Unix domain and TCP connections."""

from __future__ import annotations

import logging
import socket
from typing import Any, Protocol

from ..errors.internal import ConnectError, TransportError
from ..logs.logger import logger
from .descriptor import ConnectionDescriptor, TcpDescriptor, UnixDescriptor


class Transport(Protocol):
    """Bidirectional byte stream the connection reads frames from."""

    def read(self, size: int, timeout: float | None = None) -> bytes:
        """Return up to size bytes, b"" at end-of-stream.

        Raises TimeoutError when timeout elapses without data.
        """
        ...

    def write(self, data: bytes) -> None:
        """Write all of data."""
        ...

    def close(self) -> None:
        """Release the underlying resource. Safe to call twice."""
        ...

    def __enter__(self) -> Transport: ...

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...


class SocketTransport:
    """Transport over an already connected socket."""

    def __init__(self, sock: socket.socket, descriptor: ConnectionDescriptor | None = None):
        self.sock: socket.socket | None = sock
        self.descriptor = descriptor

    @property
    def closed(self) -> bool:
        return self.sock is None

    def _require_socket(self) -> socket.socket:
        if self.sock is None:
            raise TransportError("Transport is closed")
        return self.sock

    def read(self, size: int = 4096, timeout: float | None = None) -> bytes:
        sock = self._require_socket()
        try:
            sock.settimeout(timeout)
            return sock.recv(size)
        except (TimeoutError, BlockingIOError) as e:
            raise TimeoutError(f"No data within {timeout}s") from e
        except OSError as e:
            raise TransportError(
                f"Read from {self.descriptor} failed: {e}",
                data={"descriptor": str(self.descriptor)},
            ) from e

    def write(self, data: bytes) -> None:
        sock = self._require_socket()
        try:
            sock.settimeout(None)
            sock.sendall(data)
        except OSError as e:
            raise TransportError(
                f"Write to {self.descriptor} failed: {e}",
                data={"descriptor": str(self.descriptor)},
            ) from e

    def close(self) -> None:
        if self.sock is None:
            return
        sock, self.sock = self.sock, None
        try:
            sock.close()
        except OSError:
            pass
        logger.log_event(
            "transport", "closed", level=logging.DEBUG, descriptor=str(self.descriptor)
        )

    def __enter__(self) -> SocketTransport:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def _connect_unix(descriptor: UnixDescriptor, timeout: float | None) -> socket.socket:
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.settimeout(timeout)
        sock.connect(descriptor.path)
    except BaseException:
        sock.close()
        raise
    return sock


def _connect_tcp(descriptor: TcpDescriptor, timeout: float | None) -> socket.socket:
    return socket.create_connection((descriptor.host, descriptor.port), timeout=timeout)


def open_transport(
    descriptor: ConnectionDescriptor, connect_timeout: float | None = None
) -> SocketTransport:
    """Open the socket named by descriptor.

    Raises:
        ConnectError: When the socket cannot be created or connected.
    """
    logger.log_event("transport", "connect_start", descriptor=str(descriptor))
    try:
        if isinstance(descriptor, UnixDescriptor):
            sock = _connect_unix(descriptor, connect_timeout)
        else:
            sock = _connect_tcp(descriptor, connect_timeout)
        sock.settimeout(None)
    except OSError as e:
        logger.log_event(
            "transport",
            "connect_failed",
            level=logging.ERROR,
            descriptor=str(descriptor),
            error=str(e),
        )
        raise ConnectError(
            f"Could not connect to {descriptor}: {e}",
            data={"descriptor": str(descriptor)},
        ) from e
    logger.log_event("transport", "connected", descriptor=str(descriptor))
    return SocketTransport(sock, descriptor)


__all__ = ["SocketTransport", "Transport", "open_transport"]
