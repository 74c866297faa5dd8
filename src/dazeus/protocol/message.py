"""DaZeus protocol data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors.internal import ProtocolError


class MessageKind(Enum):
    REQUEST = "request"
    RESPONSE = "response"
    EVENT = "event"


@dataclass(slots=True)
class Message:
    """One protocol unit as it travels over the wire.

    Attributes:
        kind: Request, response or event.
        id: Correlation id (requests and, when echoed, responses).
        name: Request name ("join", "property", ...) or event tag ("PRIVMSG").
        params: Ordered parameter list.
        data: The complete decoded object; response payloads live here, as
            do request extras such as "scope".
        action: "get" or "do" for requests.
    """

    kind: MessageKind
    name: str | None = None
    params: list[Any] = field(default_factory=list)
    id: int | str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    action: str | None = None

    @property
    def is_event(self) -> bool:
        return self.kind is MessageKind.EVENT

    @property
    def is_response(self) -> bool:
        return self.kind is MessageKind.RESPONSE

    def to_wire(self, include_id: bool = True) -> dict[str, Any]:
        """Build the JSON object for this message."""
        if self.kind is MessageKind.REQUEST:
            obj: dict[str, Any] = {k: v for k, v in self.data.items() if k != "id"}
            obj[self.action or "do"] = self.name
            if self.params:
                obj["params"] = list(self.params)
        elif self.kind is MessageKind.EVENT:
            obj = {"event": self.name, "params": list(self.params)}
        else:
            obj = dict(self.data)
        if include_id and self.id is not None:
            obj["id"] = self.id
        return obj


class EventType(Enum):
    ACTION = "ACTION"
    ACTION_ME = "ACTION_ME"
    COMMAND = "COMMAND"
    CONNECT = "CONNECT"
    CTCP = "CTCP"
    CTCP_ME = "CTCP_ME"
    CTCP_REP = "CTCP_REP"
    DISCONNECT = "DISCONNECT"
    INVITE = "INVITE"
    JOIN = "JOIN"
    KICK = "KICK"
    MODE = "MODE"
    NAMES = "NAMES"
    NICK = "NICK"
    NOTICE = "NOTICE"
    NUMERIC = "NUMERIC"
    PART = "PART"
    PONG = "PONG"
    PRIVMSG = "PRIVMSG"
    PRIVMSG_ME = "PRIVMSG_ME"
    QUIT = "QUIT"
    TOPIC = "TOPIC"
    UNKNOWN = "UNKNOWN"
    WHOIS = "WHOIS"

    @classmethod
    def from_wire(cls, tag: str) -> EventType:
        upper = tag.upper()
        if upper.startswith("COMMAND_") and len(upper) > len("COMMAND_"):
            return cls.COMMAND
        try:
            return cls(upper)
        except ValueError:
            raise ValueError(f"Unknown event type {tag!r}") from None


# Events that carry [network, sender, channel, ...] and can be replied to.
REPLYABLE_EVENTS = frozenset(
    {
        EventType.JOIN,
        EventType.PRIVMSG,
        EventType.NOTICE,
        EventType.CTCP,
        EventType.ACTION,
        EventType.COMMAND,
    }
)


@dataclass(slots=True)
class Event:
    event_type: EventType
    params: list[str] = field(default_factory=list)
    command: str | None = None

    @classmethod
    def from_message(cls, message: Message) -> Event:
        """Build an Event from a decoded event frame.

        Non-string parameters are dropped.

        Raises:
            ProtocolError: For an unknown tag or a COMMAND without a name.
        """
        tag = message.name or ""
        try:
            event_type = EventType.from_wire(tag)
        except ValueError as e:
            raise ProtocolError(str(e)) from e
        params = [p for p in message.params if isinstance(p, str)]
        command = None
        if event_type is EventType.COMMAND:
            if tag.upper().startswith("COMMAND_"):
                command = tag[len("COMMAND_"):]
            elif len(message.params) >= 4 and isinstance(message.params[3], str):
                command = message.params[3]
            else:
                raise ProtocolError("COMMAND event without a command name")
        return cls(event_type=event_type, params=params, command=command)

    def __getitem__(self, index: int) -> str:
        return self.params[index]

    def param(self, index: int, default: str = "") -> str:
        if -len(self.params) <= index < len(self.params):
            return self.params[index]
        return default

    @property
    def network(self) -> str:
        return self.param(0)

    @property
    def sender(self) -> str:
        return self.param(1)

    @property
    def channel(self) -> str:
        return self.param(2)

    @property
    def text(self) -> str:
        """Message body of chat events (PRIVMSG, NOTICE, ACTION, ...)."""
        return self.param(3)


class Response:
    """The answer of the core to one request."""

    __slots__ = ("data",)

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data = dict(data) if data else {}

    @classmethod
    def from_message(cls, message: Message) -> Response:
        return cls({k: v for k, v in message.data.items() if k != "id"})

    @classmethod
    def for_success(cls) -> Response:
        return cls({"success": True})

    @classmethod
    def for_fail(cls, reason: str) -> Response:
        return cls({"success": False, "reason": reason})

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def get_str(self, key: str, default: str | None = None) -> str | None:
        value = self.data.get(key)
        return value if isinstance(value, str) else default

    def has(self, key: str) -> bool:
        return key in self.data

    def has_success(self) -> bool:
        return self.data.get("success") is True

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Response) and other.data == self.data

    def __repr__(self) -> str:
        return f"Response({self.data!r})"


@dataclass(frozen=True, slots=True)
class Scope:
    """Limits a property or permission to a network, sender and/or receiver."""

    network: str | None = None
    sender: str | None = None
    receiver: str | None = None

    @classmethod
    def any(cls) -> Scope:
        return cls()

    @classmethod
    def for_network(cls, network: str) -> Scope:
        return cls(network=network)

    @classmethod
    def for_sender(cls, network: str, sender: str) -> Scope:
        return cls(network=network, sender=sender)

    @classmethod
    def for_receiver(cls, network: str, receiver: str) -> Scope:
        return cls(network=network, receiver=receiver)

    @classmethod
    def to(cls, network: str, sender: str, receiver: str) -> Scope:
        return cls(network=network, sender=sender, receiver=receiver)

    def is_any(self) -> bool:
        return self.network is None and self.sender is None and self.receiver is None

    def to_wire(self) -> list[str]:
        # Core order is [network, receiver, sender]; unset trailing slots dropped.
        values = [self.network, self.receiver, self.sender]
        while values and values[-1] is None:
            values.pop()
        return [v if v is not None else "" for v in values]


class ConfigGroup(Enum):
    PLUGIN = "plugin"
    CORE = "core"


__all__ = [
    "ConfigGroup",
    "Event",
    "EventType",
    "Message",
    "MessageKind",
    "REPLYABLE_EVENTS",
    "Response",
    "Scope",
]
