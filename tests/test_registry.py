"""
Tests for the subscription registry
"""

import pytest

from dazeus.client import SubscriptionRegistry
from dazeus.protocol import EventType


def noop(*_args):
    return None


class TestSubscriptionRegistry:
    def test_handles_are_unique_and_increasing(self):
        registry = SubscriptionRegistry()
        first = registry.subscribe(EventType.JOIN, noop)
        second = registry.subscribe(EventType.JOIN, noop)
        assert second > first

    def test_registration_order_and_no_dedup(self):
        registry = SubscriptionRegistry()

        def a(*_args):
            return None

        def b(*_args):
            return None

        registry.subscribe(EventType.PRIVMSG, a)
        registry.subscribe(EventType.PRIVMSG, b)
        registry.subscribe(EventType.PRIVMSG, a)
        assert registry.handlers_for(EventType.PRIVMSG) == [a, b, a]

    def test_unknown_key_is_empty(self):
        assert SubscriptionRegistry().handlers_for("ping") == []

    def test_commands_and_events_are_separate_keys(self):
        registry = SubscriptionRegistry()
        registry.subscribe("PRIVMSG", noop)
        assert not registry.has_any(EventType.PRIVMSG)
        assert registry.has_any("PRIVMSG")

    def test_unsubscribe(self):
        registry = SubscriptionRegistry()
        handle = registry.subscribe("ping", noop)
        assert registry.unsubscribe(handle) == "ping"
        assert registry.unsubscribe(handle) is None
        assert len(registry) == 0

    def test_unsubscribe_all(self):
        registry = SubscriptionRegistry()
        registry.subscribe(EventType.JOIN, noop)
        registry.subscribe(EventType.JOIN, noop)
        registry.subscribe(EventType.PART, noop)
        assert registry.unsubscribe_all(EventType.JOIN) == 2
        assert registry.keys() == [EventType.PART]

    def test_snapshot_is_not_affected_by_later_changes(self):
        registry = SubscriptionRegistry()
        registry.subscribe(EventType.JOIN, noop)
        snapshot = registry.handlers_for(EventType.JOIN)
        registry.subscribe(EventType.JOIN, noop)
        assert len(snapshot) == 1

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            SubscriptionRegistry().subscribe(EventType.JOIN, "not callable")
