from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from ..client.commander import Commander
from ..constants import (
    DAZEUS_CODEC,
    DAZEUS_COMMAND_PREFIX,
    DAZEUS_CONNECT_ATTEMPTS,
    DAZEUS_CONNECT_TIMEOUT,
    DAZEUS_PLUGIN_NAME,
    DAZEUS_PLUGIN_VERSION,
    DAZEUS_READ_SIZE,
    DAZEUS_REQUEST_TIMEOUT,
    DAZEUS_SOCKET,
)
from ..errors.internal import ParseError
from ..transport.descriptor import ConnectionDescriptor, parse_descriptor


class PluginConfig(BaseModel):
    """Settings for one plugin process.

    Attributes:
        socket: Connection descriptor of the core (unix:<path> or tcp:<host>:<port>).
        plugin_name: Name sent in the handshake.
        plugin_version: Version sent in the handshake.
        config_name: Name of the plugin's config section in the core, defaults
            to plugin_name.
        command_prefix: Local command trigger, None to disable.
        bot_name: Nick that also triggers commands when addressed ("bot: ping").
        address_separators: Characters accepted after bot_name.
        core_commands: Let the core parse commands instead of the prefix.
        codec: "length" (dazeus-core framing) or "line".
        request_timeout: Default request deadline in seconds, None = unbounded.
        connect_timeout: Deadline for opening the socket.
        read_size: Bytes requested per socket read.
        announce_subscriptions: Send subscribe/unsubscribe requests to the core.
        connect_attempts: Attempts made by connect_with_retry.
    """

    socket: str = DAZEUS_SOCKET
    plugin_name: str = Field(default=DAZEUS_PLUGIN_NAME, min_length=1)
    plugin_version: str = DAZEUS_PLUGIN_VERSION
    config_name: str | None = None
    command_prefix: str | None = DAZEUS_COMMAND_PREFIX
    bot_name: str | None = None
    address_separators: tuple[str, ...] = (":", ",")
    core_commands: bool = False
    codec: Literal["line", "length"] = DAZEUS_CODEC  # type: ignore[assignment]
    request_timeout: float | None = Field(default=DAZEUS_REQUEST_TIMEOUT, gt=0)
    connect_timeout: float | None = Field(default=DAZEUS_CONNECT_TIMEOUT, gt=0)
    read_size: int = Field(default=DAZEUS_READ_SIZE, gt=0)
    announce_subscriptions: bool = True
    connect_attempts: int = Field(default=max(1, DAZEUS_CONNECT_ATTEMPTS), ge=1)

    @field_validator("socket")
    @classmethod
    def validate_socket(cls, v: str) -> str:
        """Reject descriptors that would fail at connect time."""
        try:
            return str(parse_descriptor(v.strip()))
        except ParseError as e:
            raise ValueError(str(e)) from e

    @field_validator("command_prefix", "bot_name", "config_name")
    @classmethod
    def empty_as_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v

    @field_validator("address_separators")
    @classmethod
    def validate_separators(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if any(len(sep) != 1 for sep in v):
            raise ValueError("address separators must be single characters")
        return v

    @property
    def descriptor(self) -> ConnectionDescriptor:
        return parse_descriptor(self.socket)

    def build_commander(self) -> Commander:
        """Commander matching these settings; inert in core command mode."""
        if self.core_commands:
            return Commander(prefix=None)
        return Commander(
            prefix=self.command_prefix,
            bot_name=self.bot_name,
            separators=self.address_separators,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PluginConfig:
        """Create a PluginConfig from a mapping, ignoring None values."""
        return cls.model_validate({k: v for k, v in data.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
