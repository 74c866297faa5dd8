"""Python bindings for writing DaZeus IRC bot plugins."""

from .client import (  # noqa: F401
    CommandInvocation,
    Commander,
    Connection,
    DaZeus,
    ListenerHandle,
    connect,
)
from .config import PluginConfig  # noqa: F401
from .errors import (  # noqa: F401
    ConnectError,
    ConnectionClosed,
    DaZeusError,
    ParseError,
    ProtocolError,
    RequestError,
    RequestTimeout,
    TransportError,
)
from .protocol import ConfigGroup, Event, EventType, Message, Response, Scope  # noqa: F401
from .transport import parse_descriptor  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "CommandInvocation",
    "Commander",
    "ConfigGroup",
    "ConnectError",
    "Connection",
    "ConnectionClosed",
    "DaZeus",
    "DaZeusError",
    "Event",
    "EventType",
    "ListenerHandle",
    "Message",
    "ParseError",
    "PluginConfig",
    "ProtocolError",
    "RequestError",
    "RequestTimeout",
    "Response",
    "Scope",
    "TransportError",
    "connect",
    "parse_descriptor",
]
