"""Project logging package.

Contains internal logging utilities (event catalog + PluginLogger). Avoid
importing stdlib logging through this package name externally.
"""

from .event_catalog import EventCatalog, EventTemplate, reload_event_templates  # noqa: F401
from .logger import PluginLogger, logger  # noqa: F401

__all__ = ["EventCatalog", "EventTemplate", "PluginLogger", "logger", "reload_event_templates"]
