"""High-level DaZeus API: one method per core request plus reply helpers."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from ..errors.internal import RequestTimeout
from ..logs.logger import logger
from ..protocol import requests
from ..protocol.codec import codec_for
from ..protocol.message import REPLYABLE_EVENTS, ConfigGroup, Event, EventType, Response, Scope
from ..transport.descriptor import ConnectionDescriptor
from .commander import CommandInvocation
from .connection import Connection


def _reply_targets(event: Event | CommandInvocation) -> tuple[str, str, str] | None:
    """(network, channel, user) for events that can be answered."""
    if isinstance(event, CommandInvocation):
        event = event.event
    if event.event_type not in REPLYABLE_EVENTS or len(event.params) < 3:
        return None
    return event.network, event.channel, event.sender


class DaZeus(Connection):
    """Connection with the full request vocabulary of the plugin protocol.

    Every request method blocks until the core answers and returns the
    Response. Failures reported by the core (``success: false``) are not
    exceptions; check ``response.has_success()``.
    """

    def networks(self) -> Response:
        return self.send_request(requests.networks())

    def channels(self, network: str) -> Response:
        return self.send_request(requests.channels(network))

    def message(self, network: str, target: str, text: str) -> Response:
        return self.send_request(requests.message(network, target, text))

    def notice(self, network: str, target: str, text: str) -> Response:
        return self.send_request(requests.notice(network, target, text))

    def ctcp(self, network: str, target: str, text: str) -> Response:
        return self.send_request(requests.ctcp(network, target, text))

    def ctcp_reply(self, network: str, target: str, text: str) -> Response:
        return self.send_request(requests.ctcp_reply(network, target, text))

    def action(self, network: str, target: str, text: str) -> Response:
        return self.send_request(requests.action(network, target, text))

    def send_names(self, network: str, channel: str) -> Response:
        """Ask for the NAMES of a channel; the list itself arrives as an event."""
        return self.send_request(requests.names(network, channel))

    def send_whois(self, network: str, nick: str) -> Response:
        """Ask for a WHOIS; the answer arrives as an event."""
        return self.send_request(requests.whois(network, nick))

    def join(self, network: str, channel: str) -> Response:
        return self.send_request(requests.join(network, channel))

    def part(self, network: str, channel: str) -> Response:
        return self.send_request(requests.part(network, channel))

    def nick(self, network: str) -> Response:
        """Current nick of the bot on network, under the "nick" key."""
        return self.send_request(requests.nick(network))

    def handshake(self, name: str, version: str, config_name: str | None = None) -> Response:
        """Identify the plugin; required before plugin config can be read."""
        response = self.send_request(requests.handshake(name, version, config_name))
        logger.log_event(
            "app",
            "handshake",
            level=logging.INFO if response.has_success() else logging.WARNING,
            plugin=name,
            version=version,
            success=response.has_success(),
        )
        return response

    def get_config(self, key: str, group: ConfigGroup = ConfigGroup.PLUGIN) -> Response:
        return self.send_request(requests.config(key, group))

    def get_highlight_char(self) -> Response:
        return self.get_config("highlight", ConfigGroup.CORE)

    def get_property(self, name: str, scope: Scope | None = None) -> Response:
        return self.send_request(requests.get_property(name, scope))

    def set_property(self, name: str, value: str, scope: Scope | None = None) -> Response:
        return self.send_request(requests.set_property(name, value, scope))

    def unset_property(self, name: str, scope: Scope | None = None) -> Response:
        return self.send_request(requests.unset_property(name, scope))

    def get_property_keys(self, prefix: str, scope: Scope | None = None) -> Response:
        return self.send_request(requests.property_keys(prefix, scope))

    def set_permission(self, permission: str, allow: bool, scope: Scope | None = None) -> Response:
        return self.send_request(requests.set_permission(permission, allow, scope))

    def has_permission(
        self, permission: str, default: bool, scope: Scope | None = None
    ) -> Response:
        """The stored value of permission for scope, or default when unset."""
        return self.send_request(requests.has_permission(permission, default, scope))

    def unset_permission(self, permission: str, scope: Scope | None = None) -> Response:
        return self.send_request(requests.unset_permission(permission, scope))

    # -- blocking event queries -------------------------------------------

    def _await_event(
        self,
        event_type: EventType,
        send: Callable[[], Response],
        matches: Callable[[Event], bool],
        timeout: float | None,
    ) -> Event:
        temporary = self._ensure_core_event(event_type)
        send()
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            event = self.next_event(remaining)
            if event is None:
                if temporary:
                    self._release_core_event(event_type)
                raise RequestTimeout(
                    f"No {event_type.value} event within {timeout}s", timeout=timeout
                )
            if event.event_type is event_type and matches(event):
                if temporary:
                    self._release_core_event(event_type)
                return event

    def whois(self, network: str, nick: str, timeout: float | None = None) -> Event:
        """Send a WHOIS and block until the matching WHOIS event arrives.

        IRC servers may ignore the query; without a timeout this then blocks
        forever.
        """
        return self._await_event(
            EventType.WHOIS,
            lambda: self.send_whois(network, nick),
            lambda e: e.param(0) == network and e.param(2) == nick,
            timeout,
        )

    def names(self, network: str, channel: str, timeout: float | None = None) -> Event:
        """Send a NAMES query and block until the matching NAMES event arrives."""
        return self._await_event(
            EventType.NAMES,
            lambda: self.send_names(network, channel),
            lambda e: e.param(0) == network and e.param(2) == channel,
            timeout,
        )

    # -- replies ----------------------------------------------------------

    def _reply_with(
        self,
        send: Callable[[str, str, str], Response],
        event: Event | CommandInvocation,
        text: str,
        highlight: bool = False,
    ) -> Response:
        targets = _reply_targets(event)
        if targets is None:
            return Response.for_fail("Not an event to reply to")
        network, channel, user = targets
        own_nick = self.nick(network).get_str("nick", "")
        if channel == own_nick:
            return send(network, user, text)
        if highlight:
            text = f"{user}: {text}"
        return send(network, channel, text)

    def reply(
        self, event: Event | CommandInvocation, text: str, highlight: bool = True
    ) -> Response:
        """Answer an event privately or in its channel.

        Messages addressed to the bot itself are answered to the sender; in a
        channel the reply is prefixed with "<sender>: " when highlight is set.
        """
        return self._reply_with(self.message, event, text, highlight)

    def reply_with_notice(self, event: Event | CommandInvocation, text: str) -> Response:
        return self._reply_with(self.notice, event, text)

    def reply_with_action(self, event: Event | CommandInvocation, text: str) -> Response:
        return self._reply_with(self.action, event, text)


def connect(
    descriptor: str | ConnectionDescriptor | None = None,
    config: Any = None,
    **kwargs: Any,
) -> DaZeus:
    """Open a DaZeus connection from a descriptor and/or a PluginConfig.

    Keyword arguments override what the config provides.
    """
    if config is not None:
        options: dict[str, Any] = {
            "codec": codec_for(config.codec),
            "commander": config.build_commander(),
            "request_timeout": config.request_timeout,
            "read_size": config.read_size,
            "announce_subscriptions": config.announce_subscriptions,
            "core_commands": config.core_commands,
            "connect_timeout": config.connect_timeout,
        }
        options.update(kwargs)
        kwargs = options
        if descriptor is None:
            descriptor = config.descriptor
    if descriptor is None:
        raise ValueError("No descriptor given and no config to take it from")
    return DaZeus.open(descriptor, **kwargs)
