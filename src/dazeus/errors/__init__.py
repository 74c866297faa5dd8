"""Error taxonomy and error handling helpers."""

from .handling import classify_error, connect_with_retry, log_error  # noqa: F401
from .internal import (  # noqa: F401
    ConnectError,
    ConnectionClosed,
    DaZeusError,
    ParseError,
    ProtocolError,
    RequestError,
    RequestTimeout,
    TransportError,
)

__all__ = [
    "DaZeusError",
    "ConnectError",
    "ParseError",
    "ProtocolError",
    "TransportError",
    "RequestError",
    "RequestTimeout",
    "ConnectionClosed",
    "classify_error",
    "connect_with_retry",
    "log_error",
]
