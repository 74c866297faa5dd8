"""
Tests for the example plugin command line
"""

import json
from unittest.mock import patch

import pytest

from dazeus import DaZeus
from dazeus.cli import EXIT_BAD_CONFIG, EXIT_CONNECT_FAILED, EXIT_OK, build_parser, main, resolve_config
from dazeus.errors import ConnectError, ParseError, TransportError
from dazeus.protocol import LineCodec
from tests.fixtures.fake_transport import FakeTransport, event, line_frame


@pytest.fixture(autouse=True)
def no_console_logging(monkeypatch):
    monkeypatch.delenv("DAZEUS_CONFIG_FILE", raising=False)
    with patch("dazeus.cli.LoggerConfigurator") as configurator:
        yield configurator


def fake_core(data):
    obj = json.loads(data)
    name = obj.get("get") or obj.get("do")
    reply = {"id": obj["id"], "success": True}
    if name == "nick":
        reply["nick"] = "bot"
    frames = [line_frame(reply)]
    if name == "subscribe":
        frames.append(line_frame(event("PRIVMSG", "q", "alice", "#chan", "!ping")))
        frames.append(line_frame(event("PRIVMSG", "q", "alice", "#chan", "!echo hello  world")))
    return frames


class TestResolveConfig:
    def test_overrides(self):
        args = build_parser().parse_args(
            ["--socket", "tcp:core:4000", "--prefix", "}", "--codec", "line", "--timeout", "2"]
        )
        config = resolve_config(args)
        assert config.socket == "tcp:core:4000"
        assert config.command_prefix == "}"
        assert config.codec == "line"
        assert config.request_timeout == 2.0

    def test_empty_prefix_disables(self):
        config = resolve_config(build_parser().parse_args(["--prefix", ""]))
        assert config.command_prefix is None

    def test_invalid_socket(self):
        with pytest.raises(ParseError):
            resolve_config(build_parser().parse_args(["--socket", "nowhere"]))


class TestMain:
    def test_bad_config_exit_code(self):
        assert main(["--socket", "nowhere"]) == EXIT_BAD_CONFIG

    @patch("dazeus.cli.connect")
    def test_connect_failure_exit_code(self, mock_connect, caplog):
        mock_connect.side_effect = ConnectError("refused")
        assert main(["--socket", "unix:/tmp/none.sock"]) == EXIT_CONNECT_FAILED
        assert any("Cannot connect to DaZeus" in r.message for r in caplog.records)

    @patch("dazeus.cli.connect")
    def test_runs_plugin_until_closed(self, mock_connect):
        transport = FakeTransport(responder=fake_core)
        mock_connect.return_value = DaZeus(transport, LineCodec())

        assert main(["--debug"]) == EXIT_OK

        sent = [(o.get("get") or o.get("do"), o.get("params")) for o in transport.written_objects()]
        assert sent[0][0] == "handshake"
        assert ("subscribe", ["PRIVMSG"]) in sent
        assert ("message", ["q", "#chan", "alice: pong"]) in sent
        assert ("message", ["q", "#chan", "hello  world"]) in sent
        assert transport.closed

    @patch("dazeus.cli.connect")
    def test_transport_failure_exit_code(self, mock_connect):
        transport = FakeTransport()

        def broken(*_args):
            raise TransportError("reset")

        transport.read = broken
        mock_connect.return_value = DaZeus(transport, LineCodec())
        assert main([]) == EXIT_CONNECT_FAILED
