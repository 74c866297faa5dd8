"""Transport subsystem: descriptor parsing and blocking socket streams."""

from .descriptor import (  # noqa: F401
    ConnectionDescriptor,
    TcpDescriptor,
    UnixDescriptor,
    as_descriptor,
    parse_descriptor,
)
from .socket_transport import SocketTransport, Transport, open_transport  # noqa: F401

__all__ = [
    "ConnectionDescriptor",
    "SocketTransport",
    "TcpDescriptor",
    "Transport",
    "UnixDescriptor",
    "as_descriptor",
    "open_transport",
    "parse_descriptor",
]
