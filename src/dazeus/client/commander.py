"""Command recognition inside chat-message events."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..protocol.message import Event, EventType

_WS = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class CommandInvocation:
    """A command found in an event: name, argument text, and the source event."""

    name: str
    args: str
    event: Event

    @property
    def argv(self) -> list[str]:
        return self.args.split()


class Commander:
    """Recognizes `<prefix>name args` and `<bot_name>: name args` messages.

    Args:
        prefix: Trigger string at the very start of the message, or None to
            disable prefix commands.
        bot_name: Nick the bot answers to when addressed directly, or None.
        separators: Characters accepted between bot_name and the command.
    """

    def __init__(
        self,
        prefix: str | None = "!",
        bot_name: str | None = None,
        separators: tuple[str, ...] = (":", ","),
    ) -> None:
        self.prefix = prefix or None
        self.bot_name = bot_name or None
        self.separators = tuple(separators)

    def _strip_trigger(self, text: str) -> str | None:
        if self.prefix and text.startswith(self.prefix):
            body = text[len(self.prefix):]
            # "! ping" is chatter, not a command
            return None if body[:1].isspace() else body
        if self.bot_name and len(text) > len(self.bot_name):
            head, sep = text[: len(self.bot_name)], text[len(self.bot_name)]
            if head.lower() == self.bot_name.lower() and sep in self.separators:
                return text[len(self.bot_name) + 1:]
        return None

    def parse(self, event: Event) -> CommandInvocation | None:
        """Return the invocation carried by a PRIVMSG event, if any."""
        if event.event_type is not EventType.PRIVMSG or len(event.params) < 4:
            return None
        body = self._strip_trigger(event.text)
        if body is None:
            return None
        parts = _WS.split(body.strip(), maxsplit=1)
        if not parts[0]:
            return None
        rest = parts[1] if len(parts) > 1 else ""
        return CommandInvocation(name=parts[0], args=rest, event=event)

    @staticmethod
    def from_core(event: Event) -> CommandInvocation | None:
        """Invocation for a COMMAND event the core parsed itself.

        The core sends [network, sender, channel, command, argument text, ...].
        """
        if event.event_type is not EventType.COMMAND or not event.command:
            return None
        return CommandInvocation(
            name=event.command, args=" ".join(event.params[4:]), event=event
        )
