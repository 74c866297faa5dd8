"""Loading PluginConfig from a JSON file."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from ..errors.internal import ParseError
from ..logs.logger import logger
from .model import PluginConfig


def load_config(path: str | Path | None = None) -> PluginConfig:
    """Read a plugin config file.

    The path defaults to the DAZEUS_CONFIG_FILE environment variable. Without
    a path, or when the file does not exist, defaults are returned.

    Raises:
        ParseError: The file is not a JSON object or fails validation.
    """
    if path is None:
        path = os.environ.get("DAZEUS_CONFIG_FILE")
    if not path:
        return PluginConfig()
    config_path = Path(path)
    if not config_path.exists():
        logger.log_event("config", "missing", level=logging.WARNING, path=str(config_path))
        return PluginConfig()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"Cannot read config {config_path}: {e}") from e
    if not isinstance(raw, dict):
        raise ParseError(f"Config {config_path} must contain a JSON object")
    try:
        config = PluginConfig.from_dict(raw)
    except ValidationError as e:
        raise ParseError(
            f"Invalid config {config_path}",
            data={"errors": [err["msg"] for err in e.errors()]},
        ) from e
    logger.log_event("config", "loaded", path=str(config_path), socket=config.socket)
    return config
