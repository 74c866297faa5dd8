"""Blocking connection to a DaZeus core: requests, events and the listen loop."""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NoReturn

from ..constants import DAZEUS_READ_SIZE
from ..errors.internal import (
    ConnectionClosed,
    ProtocolError,
    RequestTimeout,
    TransportError,
)
from ..logs.logger import logger
from ..protocol import requests
from ..protocol.codec import FrameCodec, LengthPrefixedCodec
from ..protocol.message import Event, EventType, Message, MessageKind, Response
from ..transport.descriptor import ConnectionDescriptor, as_descriptor
from ..transport.socket_transport import Transport, open_transport
from .commander import Commander
from .correlator import RequestCorrelator
from .dispatcher import EventDispatcher
from .registry import Handler, ListenerHandle, SubscriptionKey, SubscriptionRegistry

_DEFAULT = object()


class Connection:
    """One plugin's session with the core.

    The connection is driven by a single owner. `send_request()` blocks until
    the matching response arrives; events read in the meantime are
    dispatched right away, so handlers keep running during a long request
    and may themselves send requests. Handlers receive the connection as
    their second argument.

    Args:
        transport: Open byte stream to the core.
        codec: Frame codec, LengthPrefixedCodec (dazeus-core framing) by default.
        commander: Command recognizer for PRIVMSG events.
        request_timeout: Default deadline in seconds for requests, None for
            unbounded waits.
        read_size: Bytes requested per transport read.
        announce_subscriptions: Tell the core about (un)subscriptions.
        core_commands: Register commands with the core and route its COMMAND
            events, instead of recognizing the prefix locally.
    """

    def __init__(
        self,
        transport: Transport,
        codec: FrameCodec | None = None,
        commander: Commander | None = None,
        *,
        request_timeout: float | None = None,
        read_size: int = DAZEUS_READ_SIZE,
        announce_subscriptions: bool = True,
        core_commands: bool = False,
    ) -> None:
        self.transport = transport
        self.codec = codec or LengthPrefixedCodec()
        if commander is None:
            commander = Commander(prefix=None) if core_commands else Commander()
        self.registry = SubscriptionRegistry()
        self.correlator = RequestCorrelator(echoes_ids=self.codec.echoes_ids)
        self.dispatcher = EventDispatcher(self.registry, commander)
        self.request_timeout = request_timeout
        self.read_size = read_size
        self.announce_subscriptions = announce_subscriptions
        self.core_commands = core_commands
        self._core_events: set[EventType] = set()
        self._core_commands: set[tuple[str, str | None]] = set()
        self._eof = False
        self._owner: int | None = None
        self._depth = 0
        self._owner_lock = threading.Lock()

    @classmethod
    def open(
        cls,
        descriptor: str | ConnectionDescriptor,
        *,
        connect_timeout: float | None = None,
        **kwargs: Any,
    ) -> Connection:
        """Parse descriptor, open the transport and wrap it."""
        transport = open_transport(as_descriptor(descriptor), connect_timeout)
        return cls(transport, **kwargs)

    @property
    def commander(self) -> Commander:
        return self.dispatcher.commander

    @property
    def closed(self) -> bool:
        return self._eof

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @contextmanager
    def _owned(self) -> Iterator[None]:
        me = threading.get_ident()
        with self._owner_lock:
            if self._owner is not None and self._owner != me:
                raise RuntimeError("Connection is in use by another thread")
            self._owner = me
            self._depth += 1
        try:
            yield
        finally:
            with self._owner_lock:
                self._depth -= 1
                if self._depth == 0:
                    self._owner = None

    # -- reading ---------------------------------------------------------

    def _fill(self, deadline: float | None) -> None:
        if self._eof:
            raise ConnectionClosed("Connection closed by the core")
        timeout = None if deadline is None else max(0.0, deadline - time.monotonic())
        data = self.transport.read(self.read_size, timeout)
        if not data:
            self._eof = True
            logger.log_event("listen", "closed", level=logging.WARNING)
            raise ConnectionClosed("Connection closed by the core")
        self.codec.feed(data)

    def _read_frame(self, deadline: float | None) -> Message:
        """Next decoded frame; malformed frames are logged and skipped.

        Raises:
            ConnectionClosed: End-of-stream.
            TimeoutError: deadline passed without a complete frame.
            TransportError: The read failed.
        """
        while True:
            try:
                frame = self.codec.next_frame()
            except ProtocolError as e:
                logger.log_event(
                    "frame",
                    "protocol_error",
                    level=logging.WARNING,
                    error=str(e),
                    frame=e.frame[:80],
                )
                continue
            if frame is not None:
                return frame
            self._fill(deadline)

    def _handle_frame(self, frame: Message) -> Event | None:
        """Route one frame; returns the event if it was one."""
        if frame.is_response:
            self.correlator.accept(frame)
            return None
        try:
            event = Event.from_message(frame)
        except ProtocolError as e:
            logger.log_event(
                "frame", "protocol_error", level=logging.WARNING, error=str(e), tag=frame.name
            )
            return None
        if event.event_type is EventType.PRIVMSG:
            logger.log_event(
                "event",
                "privmsg",
                level=logging.DEBUG,
                network=event.network,
                channel=event.channel,
                author=event.sender,
                text=event.text,
            )
        else:
            logger.log_event(
                "event",
                "received",
                level=logging.DEBUG,
                network=event.network,
                event_type=event.event_type.value,
                params=len(event.params),
            )
        for request in self.dispatcher.dispatch(event, self):
            try:
                response = self.send_request(request)
            except RequestTimeout:
                # Closure and I/O errors still end the loop.
                logger.log_event(
                    "request",
                    "follow_up_failed",
                    level=logging.WARNING,
                    request=request.name,
                    reason="timeout",
                )
                continue
            if not response.has_success():
                logger.log_event(
                    "request",
                    "follow_up_failed",
                    level=logging.WARNING,
                    request=request.name,
                    reason=response.get_str("reason", "unknown"),
                )
        return event

    # -- requests --------------------------------------------------------

    def send_request(self, message: Message, timeout: Any = _DEFAULT) -> Response:
        """Send a request and block until its response arrives.

        Args:
            message: A request built with dazeus.protocol.requests.
            timeout: Seconds to wait; defaults to the connection's
                request_timeout. None waits indefinitely.

        Raises:
            RequestTimeout: The deadline passed first.
            ConnectionClosed: The core closed the stream first.
            TransportError: Reading or writing failed.
        """
        if message.kind is not MessageKind.REQUEST:
            raise ValueError(f"Can only send requests, got {message.kind.value}")
        if timeout is _DEFAULT:
            timeout = self.request_timeout
        with self._owned():
            if self._eof:
                raise ConnectionClosed(f"Cannot send {message.name}: connection closed")
            request_id = self.correlator.allocate()
            frame = dataclasses.replace(message, id=request_id)
            try:
                self.transport.write(self.codec.encode(frame))
            except TransportError:
                self.correlator.cancel(request_id)
                raise
            logger.log_event(
                "request",
                "sent",
                level=logging.DEBUG,
                request=message.name,
                request_id=request_id,
            )
            deadline = None if timeout is None else time.monotonic() + timeout
            try:
                return self._await_response(message, request_id, deadline, timeout)
            except BaseException:
                self.correlator.abandon(request_id)
                raise

    def _await_response(
        self, message: Message, request_id: int, deadline: float | None, timeout: float | None
    ) -> Response:
        while True:
            answer = self.correlator.take(request_id)
            if answer is not None:
                return Response.from_message(answer)
            try:
                frame = self._read_frame(deadline)
            except TimeoutError as e:
                logger.log_event(
                    "request",
                    "timeout",
                    level=logging.WARNING,
                    request=message.name,
                    request_id=request_id,
                    timeout=timeout,
                )
                raise RequestTimeout(
                    f"No response to {message.name} within {timeout}s",
                    request_id=request_id,
                    timeout=timeout,
                ) from e
            except ConnectionClosed as e:
                raise ConnectionClosed(
                    f"Connection closed while waiting for {message.name}",
                    data={"request_id": request_id},
                ) from e
            self._handle_frame(frame)

    # -- event loop ------------------------------------------------------

    def listen(self) -> NoReturn:
        """Dispatch events until the connection ends.

        Never returns normally: raises ConnectionClosed when the core closes
        the stream and TransportError when reading fails. Exceptions from
        handlers propagate out of here as well.
        """
        with self._owned():
            logger.log_event("listen", "start", handlers=len(self.registry))
            while True:
                try:
                    frame = self._read_frame(None)
                except TransportError as e:
                    logger.log_event("listen", "io_error", level=logging.ERROR, error=str(e))
                    raise
                self._handle_frame(frame)

    def next_event(self, timeout: float | None = None) -> Event | None:
        """Read and dispatch until one event has been handled.

        Returns:
            The event, or None if timeout seconds passed without one.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._owned():
            while True:
                try:
                    frame = self._read_frame(deadline)
                except TimeoutError:
                    return None
                event = self._handle_frame(frame)
                if event is not None:
                    return event

    # -- subscriptions ---------------------------------------------------

    def _announce(self, request: Message) -> Response:
        response = self.send_request(request)
        level = logging.DEBUG if response.has_success() else logging.WARNING
        logger.log_event(
            "subscription",
            "announced" if response.has_success() else "rejected",
            level=level,
            request=request.name,
            target=request.params[0] if request.params else None,
            reason=response.get_str("reason", ""),
        )
        return response

    def _ensure_core_event(self, event_type: EventType) -> bool:
        """Subscribe on the core if needed; True when a request was sent."""
        if not self.announce_subscriptions or event_type in self._core_events:
            return False
        self._announce(requests.subscribe(event_type))
        self._core_events.add(event_type)
        return True

    def _release_core_event(self, event_type: EventType) -> None:
        if event_type not in self._core_events or self.registry.has_any(event_type):
            return
        if event_type is EventType.PRIVMSG and self._needs_local_privmsg():
            return
        self._core_events.discard(event_type)
        if self.announce_subscriptions:
            self._announce(requests.unsubscribe(event_type))

    def _needs_local_privmsg(self) -> bool:
        return not self.core_commands and any(isinstance(k, str) for k in self.registry.keys())

    def subscribe(self, event_type: EventType, handler: Handler) -> ListenerHandle:
        """Call handler(event, connection) for every event of this type."""
        if event_type is EventType.COMMAND:
            raise ValueError("Use subscribe_command() for commands")
        handle = self.registry.subscribe(event_type, handler)
        logger.log_event(
            "subscription", "added", level=logging.DEBUG, key=event_type.value, handle=handle
        )
        try:
            self._ensure_core_event(event_type)
        except BaseException:
            self.registry.unsubscribe(handle)
            raise
        return handle

    def subscribe_command(
        self, command: str, handler: Handler, network: str | None = None
    ) -> ListenerHandle:
        """Call handler(invocation, connection) whenever command is invoked."""
        if not command or command != command.strip():
            raise ValueError(f"Invalid command name {command!r}")
        handle = self.registry.subscribe(command, handler)
        logger.log_event(
            "subscription", "added", level=logging.DEBUG, key=command, handle=handle
        )
        try:
            if self.core_commands:
                if self.announce_subscriptions and (command, network) not in self._core_commands:
                    self._announce(requests.subscribe_command(command, network))
                    self._core_commands.add((command, network))
            else:
                self._ensure_core_event(EventType.PRIVMSG)
        except BaseException:
            self.registry.unsubscribe(handle)
            raise
        return handle

    def unsubscribe(self, handle: ListenerHandle) -> bool:
        """Remove one handler. Commands stay registered on the core."""
        key = self.registry.unsubscribe(handle)
        if key is None:
            return False
        self._release(key)
        return True

    def unsubscribe_all(self, key: SubscriptionKey) -> int:
        removed = self.registry.unsubscribe_all(key)
        if removed:
            self._release(key)
        return removed

    def _release(self, key: SubscriptionKey) -> None:
        if isinstance(key, EventType):
            self._release_core_event(key)
        elif not self._needs_local_privmsg():
            self._release_core_event(EventType.PRIVMSG)

    def has_any_subscription(self, key: SubscriptionKey) -> bool:
        return self.registry.has_any(key)
