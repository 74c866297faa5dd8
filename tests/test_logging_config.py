"""Tests for logging_config.py module."""

import io
import logging

import colorlog
import pytest

from dazeus.logging_config import LoggerConfigurator, log_structured_error


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    dazeus_logger = logging.getLogger("dazeus")
    saved = (root.level, dazeus_logger.level, list(root.handlers))
    yield
    root.setLevel(saved[0])
    dazeus_logger.setLevel(saved[1])
    root.handlers[:] = saved[2]


class TestLoggerConfigurator:
    def test_installs_colored_handler(self, restore_logging):
        stream = io.StringIO()
        handler = LoggerConfigurator(debug=True, stream=stream).configure()
        assert isinstance(handler.formatter, colorlog.ColoredFormatter)
        assert handler in logging.getLogger().handlers
        assert logging.getLogger().level == logging.DEBUG

        logging.getLogger("dazeus").debug("hello there")
        assert "hello there" in stream.getvalue()

    def test_debug_env(self, restore_logging, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        LoggerConfigurator(stream=io.StringIO()).configure()
        assert logging.getLogger("dazeus").level == logging.DEBUG

    def test_info_by_default(self, restore_logging, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        LoggerConfigurator(stream=io.StringIO()).configure()
        assert logging.getLogger().level == logging.INFO


class TestLogStructuredError:
    def test_full_line(self, caplog):
        log_structured_error(
            "network", "Lost it", ValueError("boom"), {"socket": "unix:/x"}
        )
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.message == (
            "[NETWORK] Lost it | Exception: ValueError: boom | Context: socket=unix:/x"
        )

    def test_custom_level(self, caplog):
        caplog.set_level(logging.INFO, logger="dazeus")
        log_structured_error("config", "just so you know", level=logging.INFO)
        assert caplog.records[-1].message == "[CONFIG] just so you know"
