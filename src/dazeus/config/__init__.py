"""Configuration package exports."""

from .loader import load_config  # noqa: F401
from .model import PluginConfig  # noqa: F401

__all__ = ["PluginConfig", "load_config"]
