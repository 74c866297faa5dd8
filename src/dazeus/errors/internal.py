"""Centralized error hierarchy for the DaZeus client.

Classes:
  DaZeusError       – Base for all client errors.
  ConnectError      – Transport could not be opened (fatal to startup).
  ParseError        – Malformed connection descriptor or config file.
  ProtocolError     – Malformed frame on the wire (logged, frame dropped).
  TransportError    – Read/write failure mid-session (terminal).
  RequestError      – A synchronous request failed.
  RequestTimeout    – The request deadline elapsed before its response.
  ConnectionClosed  – End-of-stream before the response, or while listening.

Only connection-level failures (TransportError, ConnectionClosed) end a
session; the core never retries them. Reconnecting is the caller's decision.
"""

from __future__ import annotations

from collections.abc import Mapping


class DaZeusError(Exception):
    """Base class for all client errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ConnectError(DaZeusError):
    """Raised when the socket to the core could not be opened."""


class ParseError(DaZeusError):
    """Raised for a malformed connection descriptor or config file."""


class ProtocolError(DaZeusError):
    """Raised by a frame codec for a frame that cannot be decoded.

    The offending bytes are already consumed when this is raised, so the
    reader can log it and continue with the next frame.
    """

    def __init__(self, message: str, *, frame: bytes = b"") -> None:
        super().__init__(message, data={"frame": frame[:200]})
        self.frame = frame


class TransportError(DaZeusError):
    """Raised when reading from or writing to the socket fails."""


class RequestError(DaZeusError):
    """Base for failures of a single synchronous request."""


class RequestTimeout(RequestError):
    """The caller supplied deadline elapsed before the response arrived."""

    def __init__(self, message: str, *, request_id: int | str | None = None,
                 timeout: float | None = None) -> None:
        super().__init__(message, data={"request_id": request_id, "timeout": timeout})
        self.request_id = request_id
        self.timeout = timeout


class ConnectionClosed(RequestError):
    """The core closed the stream.

    Raised by a pending request that can no longer be answered and as the
    terminal result of `Connection.listen()`.
    """


__all__ = [
    "DaZeusError",
    "ConnectError",
    "ParseError",
    "ProtocolError",
    "TransportError",
    "RequestError",
    "RequestTimeout",
    "ConnectionClosed",
]
