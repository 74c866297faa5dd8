"""Client subsystem: subscriptions, command parsing, correlation and the connection."""

from .commander import Commander, CommandInvocation  # noqa: F401
from .connection import Connection  # noqa: F401
from .correlator import RequestCorrelator  # noqa: F401
from .dazeus import DaZeus, connect  # noqa: F401
from .dispatcher import EventDispatcher  # noqa: F401
from .registry import ListenerHandle, Subscription, SubscriptionKey, SubscriptionRegistry  # noqa: F401

__all__ = [
    "CommandInvocation",
    "Commander",
    "Connection",
    "DaZeus",
    "EventDispatcher",
    "ListenerHandle",
    "RequestCorrelator",
    "Subscription",
    "SubscriptionKey",
    "SubscriptionRegistry",
    "connect",
]
