"""Protocol subsystem.

Message model, request builders and frame codecs for the DaZeus plugin
protocol.
"""

from . import requests  # noqa: F401
from .codec import FrameCodec, LengthPrefixedCodec, LineCodec, codec_for  # noqa: F401
from .message import (  # noqa: F401
    REPLYABLE_EVENTS,
    ConfigGroup,
    Event,
    EventType,
    Message,
    MessageKind,
    Response,
    Scope,
)
from .requests import PROTOCOL_VERSION  # noqa: F401

__all__ = [
    "ConfigGroup",
    "Event",
    "EventType",
    "FrameCodec",
    "LengthPrefixedCodec",
    "LineCodec",
    "Message",
    "MessageKind",
    "PROTOCOL_VERSION",
    "REPLYABLE_EVENTS",
    "Response",
    "Scope",
    "codec_for",
    "requests",
]
