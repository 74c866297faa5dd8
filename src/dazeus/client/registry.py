"""Subscription registry: event keys -> ordered handler lists."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..protocol.message import EventType

# An EventType for raw event subscriptions, a command name for commands.
SubscriptionKey = EventType | str
ListenerHandle = int
Handler = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class Subscription:
    handle: ListenerHandle
    key: SubscriptionKey
    handler: Handler


class SubscriptionRegistry:
    """Ordered, non-deduplicating store of handlers per key."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._handles = itertools.count(1)

    def subscribe(self, key: SubscriptionKey, handler: Handler) -> ListenerHandle:
        if not callable(handler):
            raise TypeError(f"Handler for {key!r} is not callable")
        handle = next(self._handles)
        self._subscriptions.append(Subscription(handle, key, handler))
        return handle

    def handlers_for(self, key: SubscriptionKey) -> list[Handler]:
        """Snapshot of handlers for key in registration order (may be empty)."""
        return [s.handler for s in self._subscriptions if s.key == key]

    def unsubscribe(self, handle: ListenerHandle) -> SubscriptionKey | None:
        """Remove one subscription, returning its key or None if unknown."""
        for index, sub in enumerate(self._subscriptions):
            if sub.handle == handle:
                del self._subscriptions[index]
                return sub.key
        return None

    def unsubscribe_all(self, key: SubscriptionKey) -> int:
        before = len(self._subscriptions)
        self._subscriptions = [s for s in self._subscriptions if s.key != key]
        return before - len(self._subscriptions)

    def has_any(self, key: SubscriptionKey) -> bool:
        return any(s.key == key for s in self._subscriptions)

    def keys(self) -> list[SubscriptionKey]:
        return list(dict.fromkeys(s.key for s in self._subscriptions))

    def __len__(self) -> int:
        return len(self._subscriptions)
