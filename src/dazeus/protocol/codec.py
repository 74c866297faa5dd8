"""Frame codecs: message <-> bytes, with incremental decoding.

A codec owns the receive accumulation buffer. Bytes are appended with
`feed()`; `next_frame()` returns one decoded Message at a time and leaves any
partial trailing frame buffered until more bytes arrive.
"""

from __future__ import annotations

import json
from typing import Any

from ..errors.internal import ProtocolError
from .message import Message, MessageKind

_CR = 0x0D
_LF = 0x0A


def _is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


class FrameCodec:
    """Base class; subclasses define framing and frame classification."""

    name = "base"
    # Whether the peer echoes correlation ids on responses.
    echoes_ids = True

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet returned as a frame."""
        return len(self._buffer)

    def feed(self, data: bytes) -> None:
        self._buffer.extend(data)

    def encode(self, message: Message) -> bytes:
        payload = json.dumps(
            message.to_wire(include_id=self.echoes_ids),
            ensure_ascii=False,
            separators=(",", ":"),
        ).encode("utf-8")
        return self._frame(payload)

    def next_frame(self) -> Message | None:
        """Decode the next complete frame.

        Returns:
            The decoded message, or None when no complete frame is buffered.

        Raises:
            ProtocolError: The next frame is malformed. It has already been
                removed from the buffer.
        """
        raw = self._take_frame()
        if raw is None:
            return None
        return self._classify(self._parse(raw), raw)

    def _frame(self, payload: bytes) -> bytes:  # pragma: no cover - interface
        raise NotImplementedError

    def _take_frame(self) -> bytes | None:  # pragma: no cover - interface
        raise NotImplementedError

    def _classify(self, obj: dict[str, Any], raw: bytes) -> Message:  # pragma: no cover
        raise NotImplementedError

    @staticmethod
    def _parse(raw: bytes) -> dict[str, Any]:
        try:
            obj = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ProtocolError(f"Frame is not valid UTF-8: {e}", frame=raw) from e
        except json.JSONDecodeError as e:
            raise ProtocolError(f"Frame is not valid JSON: {e}", frame=raw) from e
        if not isinstance(obj, dict):
            raise ProtocolError("Frame is not a JSON object", frame=raw)
        return obj

    @staticmethod
    def _event(obj: dict[str, Any], raw: bytes) -> Message:
        tag = obj.get("event")
        params = obj.get("params", [])
        if not isinstance(tag, str) or not isinstance(params, list):
            raise ProtocolError("Event frame needs a string tag and a params list", frame=raw)
        return Message(kind=MessageKind.EVENT, name=tag, params=params, data=obj)


class LineCodec(FrameCodec):
    """Newline-delimited JSON, one message per line, ids echoed by the peer."""

    name = "line"
    echoes_ids = True

    def _frame(self, payload: bytes) -> bytes:
        return payload + b"\n"

    def _take_frame(self) -> bytes | None:
        buf = self._buffer
        while True:
            idx = buf.find(b"\n")
            if idx < 0:
                return None
            line = bytes(buf[:idx]).rstrip(b"\r")
            del buf[: idx + 1]
            if line.strip():
                return line

    def _classify(self, obj: dict[str, Any], raw: bytes) -> Message:
        if "id" in obj:
            return Message(kind=MessageKind.RESPONSE, id=obj["id"], data=obj)
        if "event" in obj:
            return self._event(obj, raw)
        raise ProtocolError("Frame has neither a correlation id nor an event tag", frame=raw)


class LengthPrefixedCodec(FrameCodec):
    """dazeus-core framing: decimal byte length immediately followed by JSON.

    The core answers requests in the order it received them and does not
    echo ids, so ids are left off outgoing frames and responses decode with
    id None.
    """

    name = "length"
    echoes_ids = False

    def _frame(self, payload: bytes) -> bytes:
        return str(len(payload)).encode("ascii") + payload

    def _take_frame(self) -> bytes | None:
        buf = self._buffer
        i = 0
        while i < len(buf) and buf[i] in (_CR, _LF):
            i += 1
        start = i
        while i < len(buf) and _is_digit(buf[i]):
            i += 1
        if i == len(buf):
            # Separators only, or a length that may still be growing.
            del buf[:start]
            return None
        if i == start:
            end = i
            while end < len(buf) and not _is_digit(buf[end]):
                end += 1
            junk = bytes(buf[start:end])
            del buf[:end]
            raise ProtocolError("Expected a frame length", frame=junk)
        length = int(buf[start:i])
        if length == 0:
            del buf[:i]
            raise ProtocolError("Zero length frame")
        end = i + length
        if len(buf) < end:
            return None
        frame = bytes(buf[i:end])
        del buf[:end]
        return frame

    def _classify(self, obj: dict[str, Any], raw: bytes) -> Message:
        if "event" in obj:
            return self._event(obj, raw)
        return Message(kind=MessageKind.RESPONSE, id=obj.get("id"), data=obj)


_CODECS: dict[str, type[FrameCodec]] = {
    LineCodec.name: LineCodec,
    LengthPrefixedCodec.name: LengthPrefixedCodec,
}


def codec_for(name: str) -> FrameCodec:
    try:
        return _CODECS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown codec {name!r}; expected one of {sorted(_CODECS)}"
        ) from None


__all__ = ["FrameCodec", "LengthPrefixedCodec", "LineCodec", "codec_for"]
