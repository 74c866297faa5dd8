"""Connection descriptor strings (`unix:<path>`, `tcp:<host>:<port>`)."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors.internal import ParseError


@dataclass(frozen=True, slots=True)
class UnixDescriptor:
    path: str

    def __str__(self) -> str:
        return f"unix:{self.path}"


@dataclass(frozen=True, slots=True)
class TcpDescriptor:
    host: str
    port: int

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"tcp:{host}:{self.port}"


ConnectionDescriptor = UnixDescriptor | TcpDescriptor


def _parse_tcp(location: str, original: str) -> TcpDescriptor:
    host, sep, port_text = location.rpartition(":")
    if not sep or not host:
        raise ParseError(
            f"Expected tcp:<host>:<port>, got {original!r}", data={"descriptor": original}
        )
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not host:
        raise ParseError(f"Empty host in {original!r}", data={"descriptor": original})
    if not port_text.isdigit():
        raise ParseError(
            f"Port must be numeric in {original!r}", data={"descriptor": original}
        )
    port = int(port_text)
    if not 0 < port < 65536:
        raise ParseError(
            f"Port {port} out of range in {original!r}", data={"descriptor": original}
        )
    return TcpDescriptor(host=host, port=port)


def parse_descriptor(text: str) -> ConnectionDescriptor:
    """Parse a descriptor string into a ConnectionDescriptor.

    Raises:
        ParseError: For an unknown scheme, an empty unix path, or a tcp
            location without a valid host and port.
    """
    scheme, sep, rest = text.strip().partition(":")
    if not sep:
        raise ParseError(
            f"Missing connection type in {text!r}", data={"descriptor": text}
        )
    scheme = scheme.lower()
    if scheme == "unix":
        if not rest:
            raise ParseError(f"Empty socket path in {text!r}", data={"descriptor": text})
        return UnixDescriptor(path=rest)
    if scheme == "tcp":
        return _parse_tcp(rest, text)
    raise ParseError(
        f"Unknown connection type {scheme!r} in {text!r}", data={"descriptor": text}
    )


def as_descriptor(value: str | ConnectionDescriptor) -> ConnectionDescriptor:
    if isinstance(value, UnixDescriptor | TcpDescriptor):
        return value
    return parse_descriptor(value)


__all__ = [
    "ConnectionDescriptor",
    "TcpDescriptor",
    "UnixDescriptor",
    "as_descriptor",
    "parse_descriptor",
]
