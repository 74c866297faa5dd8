"""
Configuration constants for the DaZeus client.

Each constant can be overridden by setting an environment variable with the
same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Falls back to the default (with a warning on stdout) when the variable is
    set but cannot be parsed.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float | None) -> float | None:
    """Retrieve a float value from an environment variable.

    An empty value maps to None (no deadline).
    """
    value = os.getenv(name)
    if value is not None:
        if not value.strip():
            return None
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Well-known local socket of dazeus-core
DAZEUS_SOCKET = os.getenv("DAZEUS_SOCKET", "unix:/tmp/dazeus.sock")

# Local command trigger for chat messages
DAZEUS_COMMAND_PREFIX = os.getenv("DAZEUS_COMMAND_PREFIX", "!")

# Frame codec: "length" speaks dazeus-core's length-prefixed JSON, "line" is
# newline-delimited JSON with echoed correlation ids
DAZEUS_CODEC = os.getenv("DAZEUS_CODEC", "length")

# Default deadline for synchronous requests (None = block until answered)
DAZEUS_REQUEST_TIMEOUT = _get_env_float("DAZEUS_REQUEST_TIMEOUT", None)

# Deadline for opening the socket
DAZEUS_CONNECT_TIMEOUT = _get_env_float("DAZEUS_CONNECT_TIMEOUT", 10.0)

# Bytes requested from the socket per read
DAZEUS_READ_SIZE = _get_env_int("DAZEUS_READ_SIZE", 4096)

# Connection attempts made by the example plugin (the core never retries)
DAZEUS_CONNECT_ATTEMPTS = _get_env_int("DAZEUS_CONNECT_ATTEMPTS", 1)

# Plugin identity sent in the handshake
DAZEUS_PLUGIN_NAME = os.getenv("DAZEUS_PLUGIN_NAME", "dazeus-python")
DAZEUS_PLUGIN_VERSION = os.getenv("DAZEUS_PLUGIN_VERSION", "1")
