"""Builders for the requests a plugin can send to the DaZeus core.

Every builder returns a request Message; the connection assigns the
correlation id when it sends it.
"""

from __future__ import annotations

from typing import Any

from .message import ConfigGroup, EventType, Message, MessageKind, Scope

# The version of the plugin protocol these bindings understand.
PROTOCOL_VERSION = "1"


def build_request(
    name: str,
    params: list[Any] | None = None,
    *,
    action: str = "do",
    scope: Scope | None = None,
) -> Message:
    data: dict[str, Any] = {}
    if scope is not None and not scope.is_any():
        data["scope"] = scope.to_wire()
    return Message(
        kind=MessageKind.REQUEST,
        name=name,
        params=list(params or []),
        data=data,
        action=action,
    )


def subscribe(event_type: EventType) -> Message:
    if event_type is EventType.COMMAND:
        raise ValueError("Use subscribe_command() for commands")
    return build_request("subscribe", [event_type.value])


def unsubscribe(event_type: EventType) -> Message:
    if event_type is EventType.COMMAND:
        # the core has no way to drop a registered command
        raise ValueError("Cannot unsubscribe from a command")
    return build_request("unsubscribe", [event_type.value])


def subscribe_command(command: str, network: str | None = None) -> Message:
    params = [command] if network is None else [command, network]
    return build_request("command", params)


def networks() -> Message:
    return build_request("networks", action="get")


def channels(network: str) -> Message:
    return build_request("channels", [network], action="get")


def nick(network: str) -> Message:
    return build_request("nick", [network], action="get")


def message(network: str, target: str, text: str) -> Message:
    return build_request("message", [network, target, text])


def notice(network: str, target: str, text: str) -> Message:
    return build_request("notice", [network, target, text])


def ctcp(network: str, target: str, text: str) -> Message:
    return build_request("ctcp", [network, target, text])


def ctcp_reply(network: str, target: str, text: str) -> Message:
    return build_request("ctcp_rep", [network, target, text])


def action(network: str, target: str, text: str) -> Message:
    return build_request("action", [network, target, text])


def names(network: str, channel: str) -> Message:
    return build_request("names", [network, channel])


def whois(network: str, user: str) -> Message:
    return build_request("whois", [network, user])


def join(network: str, channel: str) -> Message:
    return build_request("join", [network, channel])


def part(network: str, channel: str) -> Message:
    return build_request("part", [network, channel])


def handshake(name: str, version: str, config_name: str | None = None) -> Message:
    return build_request(
        "handshake", [name, version, PROTOCOL_VERSION, config_name or name]
    )


def config(key: str, group: ConfigGroup = ConfigGroup.PLUGIN) -> Message:
    return build_request("config", [group.value, key], action="get")


def get_property(name: str, scope: Scope | None = None) -> Message:
    return build_request("property", ["get", name], scope=scope)


def set_property(name: str, value: str, scope: Scope | None = None) -> Message:
    return build_request("property", ["set", name, value], scope=scope)


def unset_property(name: str, scope: Scope | None = None) -> Message:
    return build_request("property", ["unset", name], scope=scope)


def property_keys(prefix: str, scope: Scope | None = None) -> Message:
    return build_request("property", ["keys", prefix], scope=scope)


def set_permission(permission: str, allow: bool, scope: Scope | None = None) -> Message:
    return build_request("permission", ["set", permission, allow], scope=scope)


def has_permission(permission: str, default: bool, scope: Scope | None = None) -> Message:
    return build_request("permission", ["get", permission, default], scope=scope)


def unset_permission(permission: str, scope: Scope | None = None) -> Message:
    return build_request("permission", ["unset", permission], scope=scope)
