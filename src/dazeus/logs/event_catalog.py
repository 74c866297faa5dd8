"""Human text for PluginLogger events.

Templates live in ``event_templates.json`` next to this module, keyed by
domain and action. Loading checks every entry: the domain must be one the
client logs under, the action a lowercase identifier, and the template may
only use named ``{field}`` placeholders. Entries failing a check are left
out and listed in ``EventCatalog.problems``.
"""

from __future__ import annotations

import json
import re
import string
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

LOG_DOMAINS = frozenset(
    {
        "app",
        "config",
        "transport",
        "listen",
        "request",
        "frame",
        "event",
        "command",
        "subscription",
    }
)
_ACTION = re.compile(r"^[a-z][a-z0-9_]*$")
_FIELD = re.compile(r"^[a-z_][a-z0-9_]*$")
_JSON_FILENAME = "event_templates.json"


@dataclass(frozen=True, slots=True)
class EventTemplate:
    text: str
    fields: frozenset[str]

    def render(self, context: Mapping[str, object]) -> str:
        """Fill in the placeholders; the raw text when context lacks one."""
        if not self.fields <= context.keys():
            return self.text
        return self.text.format_map({name: context[name] for name in self.fields})


def parse_template(text: str) -> EventTemplate:
    """Parse text into a template.

    Raises:
        ValueError: Unbalanced braces, positional ``{}`` fields, or
            attribute/index access such as ``{a.b}``.
    """
    fields = set()
    for _, name, _, _ in string.Formatter().parse(text):
        if name is None:
            continue
        if not _FIELD.match(name):
            raise ValueError(f"placeholder {{{name}}} is not a plain context key")
        fields.add(name)
    return EventTemplate(text, frozenset(fields))


class EventCatalog:
    """Validated (domain, action) -> EventTemplate lookup."""

    def __init__(
        self,
        templates: Mapping[tuple[str, str], EventTemplate] | None = None,
        problems: list[str] | None = None,
    ) -> None:
        self._templates = dict(templates or {})
        self.problems = problems or []

    @classmethod
    def from_mapping(cls, raw: Any) -> EventCatalog:
        if not isinstance(raw, Mapping):
            return cls(problems=["catalog root is not an object"])
        templates: dict[tuple[str, str], EventTemplate] = {}
        problems: list[str] = []
        for domain, actions in raw.items():
            if domain not in LOG_DOMAINS:
                problems.append(f"unknown domain {domain!r}")
                continue
            if not isinstance(actions, Mapping):
                problems.append(f"{domain}: actions are not an object")
                continue
            for action, text in actions.items():
                where = f"{domain}.{action}"
                if not isinstance(action, str) or not _ACTION.match(action):
                    problems.append(f"{where}: action must be a lowercase identifier")
                    continue
                if not isinstance(text, str):
                    problems.append(f"{where}: template is not a string")
                    continue
                try:
                    templates[(domain, action)] = parse_template(text)
                except ValueError as e:
                    problems.append(f"{where}: {e}")
        return cls(templates, problems)

    @classmethod
    def from_file(cls, path: Path) -> EventCatalog:
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return cls(
                {("app", "load_error"): parse_template("Event templates file missing")},
                [f"{path.name} not found"],
            )
        except (OSError, ValueError) as e:
            message = f"Failed to load event templates: {e}"[:200]
            escaped = message.replace("{", "{{").replace("}", "}}")
            return cls({("app", "load_error"): parse_template(escaped)}, [message])
        return cls.from_mapping(raw)

    def get(self, domain: str, action: str) -> EventTemplate | None:
        return self._templates.get((domain, action))

    def render(self, domain: str, action: str, context: Mapping[str, object]) -> str | None:
        template = self.get(domain, action)
        return None if template is None else template.render(context)

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)


catalog = EventCatalog.from_file(Path(__file__).with_name(_JSON_FILENAME))


def reload_event_templates(filename: str = _JSON_FILENAME) -> EventCatalog:
    """Reload the module catalog, from another file next to this one if given."""
    global catalog
    catalog = EventCatalog.from_file(Path(__file__).with_name(filename))
    return catalog


__all__ = [
    "EventCatalog",
    "EventTemplate",
    "LOG_DOMAINS",
    "catalog",
    "parse_template",
    "reload_event_templates",
]
