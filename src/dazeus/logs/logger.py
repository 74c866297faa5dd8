"""Structured event logger used throughout the client."""

from __future__ import annotations

import logging
import os

_NAME_WIDTH = 32
_PREFIX_WIDTH = 24


def _debug_env() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


class PluginLogger:
    """Project logger with lightweight structured event support.

    Conventions:
        * Use logger.log_event("request", "sent", request="join", request_id=3)
        * The canonical event name is '<domain>_<action>'. Human text comes from
          the JSON template catalog, an explicit 'human' override, or is derived
          from the domain and action names.
        * 'network' and 'channel' keyword arguments are lifted into the fixed
          width prefix column; everything else becomes key=value context in
          DEBUG mode.

    No handler is attached here; records propagate to whatever the embedding
    plugin configured (see ``dazeus.logging_config``).
    """

    def __init__(self, name: str = "dazeus") -> None:
        self.logger = logging.getLogger(name)
        if _debug_env():
            self.logger.setLevel(logging.DEBUG)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        human_text = human
        if human_text is None:
            from . import event_catalog

            human_text = event_catalog.catalog.render(domain, action, kwargs)
            if human_text is None:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
                kwargs.setdefault("derived", True)
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        network = kwargs.pop("network", None)
        channel = kwargs.pop("channel", None)
        prefix = self._build_prefix(
            network if isinstance(network, str) else None,
            channel if isinstance(channel, str) else None,
        )
        if _debug_env():
            msg = self._build_debug_message(event_name, prefix, human_text, kwargs)
        else:
            msg = f"{prefix} {human_text}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _build_prefix(network: str | None, channel: str | None) -> str:
        label = network or "dazeus"
        core = f"{label}/{channel}" if channel else label
        return f"[{core.ljust(_PREFIX_WIDTH)[:_PREFIX_WIDTH]}]"

    @staticmethod
    def _build_debug_message(
        event_name: str, prefix: str, human_text: str, kwargs: dict[str, object]
    ) -> str:
        context = ", ".join(f"{k}={v!r}" for k, v in kwargs.items())
        if len(event_name) <= _NAME_WIDTH:
            ev = event_name.ljust(_NAME_WIDTH)
        else:  # truncate but keep rightmost indicator
            ev = event_name[: _NAME_WIDTH - 1] + "…"
        base = f"{ev} {prefix} {human_text}"
        if context:
            base = f"{base} ({context})"
        return base


logger = PluginLogger()
