"""Routes decoded events to registered handlers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..logs.logger import logger
from ..protocol.message import Event, EventType, Message, MessageKind
from .commander import Commander, CommandInvocation
from .registry import SubscriptionRegistry


def _follow_ups(result: Any) -> list[Message]:
    """Collect request messages a handler returned for the loop to send."""
    if result is None:
        return []
    if isinstance(result, Message):
        result = [result]
    if isinstance(result, Iterable) and not isinstance(result, str | bytes | dict):
        requests = [m for m in result if isinstance(m, Message) and m.kind is MessageKind.REQUEST]
        return requests
    return []


class EventDispatcher:
    """Invokes handlers for one event, synchronously and in registration order.

    Plain subscribers of the event type run first. A PRIVMSG that the
    commander recognizes additionally reaches the handlers of that command;
    a COMMAND event sent by the core reaches only the command handlers.
    Handlers are called as ``handler(event, connection)`` and command
    handlers as ``handler(invocation, connection)``. Exceptions raised by a
    handler are not caught here.
    """

    def __init__(self, registry: SubscriptionRegistry, commander: Commander | None = None):
        self.registry = registry
        self.commander = commander or Commander()

    def invocation_for(self, event: Event) -> CommandInvocation | None:
        if event.event_type is EventType.COMMAND:
            return Commander.from_core(event)
        if event.event_type is EventType.PRIVMSG:
            return self.commander.parse(event)
        return None

    def dispatch(self, event: Event, connection: Any) -> list[Message]:
        """Run every matching handler and return the follow-up requests."""
        follow_ups: list[Message] = []
        handlers = []
        if event.event_type is not EventType.COMMAND:
            handlers = self.registry.handlers_for(event.event_type)
            for handler in handlers:
                follow_ups.extend(_follow_ups(handler(event, connection)))

        invocation = self.invocation_for(event)
        command_handlers = self.registry.handlers_for(invocation.name) if invocation else []
        if invocation and command_handlers:
            logger.log_event(
                "command",
                "dispatch",
                level=logging.DEBUG,
                network=event.network,
                channel=event.channel,
                command=invocation.name,
                handlers=len(command_handlers),
            )
        for handler in command_handlers:
            follow_ups.extend(_follow_ups(handler(invocation, connection)))

        if not handlers and not command_handlers:
            logger.log_event(
                "event",
                "no_subscribers",
                level=logging.DEBUG,
                event_type=event.event_type.value,
            )
        return follow_ups
