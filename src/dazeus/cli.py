"""Command line entry point running a small example plugin.

The plugin answers ``!ping`` with ``pong`` and ``!echo <text>`` with the text,
and keeps listening until the core closes the connection.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import Any

from .client.commander import CommandInvocation
from .client.dazeus import DaZeus, connect
from .config import PluginConfig, load_config
from .errors.handling import connect_with_retry, log_error
from .errors.internal import ConnectError, ConnectionClosed, ParseError, TransportError
from .logging_config import LoggerConfigurator
from .logs.logger import logger

EXIT_OK = 0
EXIT_CONNECT_FAILED = 1
EXIT_BAD_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dazeus-plugin",
        description="Example DaZeus plugin answering ping and echo commands.",
    )
    parser.add_argument("--config", help="JSON config file (default: $DAZEUS_CONFIG_FILE)")
    parser.add_argument(
        "--socket", help="core descriptor, unix:<path> or tcp:<host>:<port>"
    )
    parser.add_argument("--prefix", help="command prefix, empty to disable")
    parser.add_argument("--bot-name", help="nick that triggers commands when addressed")
    parser.add_argument(
        "--core-commands",
        action="store_true",
        default=None,
        help="register commands with the core instead of parsing the prefix",
    )
    parser.add_argument("--codec", choices=("length", "line"), help="frame codec")
    parser.add_argument("--timeout", type=float, help="request timeout in seconds")
    parser.add_argument(
        "--connect-attempts", type=int, help="connection attempts before giving up"
    )
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser


def resolve_config(args: argparse.Namespace) -> PluginConfig:
    """Config file values overridden by the command line.

    Raises:
        ParseError: Invalid file or option values.
    """
    base = load_config(args.config)
    overrides: dict[str, Any] = {
        "socket": args.socket,
        "command_prefix": args.prefix,
        "bot_name": args.bot_name,
        "core_commands": args.core_commands,
        "codec": args.codec,
        "request_timeout": args.timeout,
        "connect_attempts": args.connect_attempts,
    }
    merged = base.model_dump()
    merged.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return PluginConfig.model_validate(merged)
    except ValueError as e:
        raise ParseError(f"Invalid option: {e}") from e


def on_ping(invocation: CommandInvocation, bot: DaZeus) -> None:
    bot.reply(invocation, "pong")


def on_echo(invocation: CommandInvocation, bot: DaZeus) -> None:
    if invocation.args:
        bot.reply(invocation, invocation.args, highlight=False)


def install_plugin(bot: DaZeus) -> None:
    bot.subscribe_command("ping", on_ping)
    bot.subscribe_command("echo", on_echo)


def run(config: PluginConfig) -> int:
    try:
        bot = connect_with_retry(
            lambda: connect(config=config), attempts=config.connect_attempts
        )
    except ConnectError as e:
        log_error("Cannot connect to DaZeus", e, {"socket": config.socket})
        return EXIT_CONNECT_FAILED

    with bot:
        try:
            bot.handshake(config.plugin_name, config.plugin_version, config.config_name)
            install_plugin(bot)
            bot.listen()
        except ConnectionClosed:
            logger.log_event("app", "stop", reason="closed")
            return EXIT_OK
        except TransportError as e:
            log_error("Connection lost", e, {"socket": config.socket})
            return EXIT_CONNECT_FAILED
        except KeyboardInterrupt:
            logger.log_event("app", "stop", reason="interrupted")
            return EXIT_OK
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    LoggerConfigurator(debug=True if args.debug else None).configure()
    try:
        config = resolve_config(args)
    except ParseError as e:
        log_error("Invalid configuration", e, e.data or None)
        return EXIT_BAD_CONFIG
    logger.log_event(
        "app", "start", socket=config.socket, codec=config.codec, plugin=config.plugin_name
    )
    return run(config)
