"""
Tests for the structured event logger
"""

import logging

import pytest

from dazeus.logs import EventCatalog, PluginLogger, event_catalog, reload_event_templates
from dazeus.logs.event_catalog import parse_template


@pytest.fixture
def plugin_logger(caplog):
    caplog.set_level(logging.DEBUG, logger="dazeus.test")
    return PluginLogger("dazeus.test")


class TestPluginLogger:
    def test_template_is_rendered(self, plugin_logger, caplog):
        plugin_logger.log_event("request", "sent", request="join", request_id=4)
        assert "Sent join (id=4)" in caplog.records[-1].message

    def test_level_is_respected(self, plugin_logger, caplog):
        plugin_logger.log_event("request", "timeout", level=logging.WARNING, request="x",
                                request_id=1, timeout=2)
        assert caplog.records[-1].levelno == logging.WARNING

    def test_missing_placeholder_falls_back_to_raw_template(self, plugin_logger, caplog):
        plugin_logger.log_event("request", "sent")
        assert "{request}" in caplog.records[-1].message

    def test_explicit_human_text(self, plugin_logger, caplog):
        plugin_logger.log_event("app", "start", human="custom text")
        assert caplog.records[-1].message.endswith("custom text")

    def test_network_and_channel_prefix(self, plugin_logger, caplog):
        plugin_logger.log_event("event", "privmsg", network="q", channel="#c", author="a", text="t")
        message = caplog.records[-1].message
        assert message.startswith("[q/#c")
        assert "a: t" in message

    def test_default_prefix(self, plugin_logger, caplog):
        plugin_logger.log_event("listen", "closed")
        assert caplog.records[-1].message.startswith("[dazeus")

    def test_debug_format_includes_event_name_and_context(self, plugin_logger, caplog, monkeypatch):
        monkeypatch.setenv("DEBUG", "1")
        plugin_logger.log_event("request", "sent", request="join", request_id=4)
        message = caplog.records[-1].message
        assert message.startswith("request_sent")
        assert "request='join'" in message

    def test_disabled_level_is_skipped(self, caplog):
        quiet = PluginLogger("dazeus.quiet")
        quiet.set_level(logging.ERROR)
        quiet.log_event("request", "sent", request="join", request_id=1)
        assert not [r for r in caplog.records if r.name == "dazeus.quiet"]


class TestEventCatalog:
    def test_shipped_catalog_is_clean(self):
        assert event_catalog.catalog.problems == []
        assert ("transport", "connected") in event_catalog.catalog

    def test_render_fills_fields(self):
        template = parse_template("Sent {request} (id={request_id})")
        assert template.fields == {"request", "request_id"}
        assert template.render({"request": "join", "request_id": 2, "extra": 1}) == "Sent join (id=2)"

    def test_render_with_missing_field_keeps_raw_text(self):
        template = parse_template("{a} and {b}")
        assert template.render({"a": 1}) == "{a} and {b}"

    @pytest.mark.parametrize("text", ["{}", "{0}", "{a.b}", "{a[0]}", "unbalanced {", "{Upper}"])
    def test_invalid_placeholders_rejected(self, text):
        with pytest.raises(ValueError):
            parse_template(text)

    def test_invalid_entries_are_reported_and_skipped(self):
        catalog = EventCatalog.from_mapping(
            {
                "request": {"sent": "ok {request}", "Bad": "x", "odd": "{0}", "num": 3},
                "twitch": {"joined": "x"},
                "frame": "not an object",
            }
        )
        assert list(catalog) == [("request", "sent")]
        assert len(catalog.problems) == 5
        assert any("unknown domain 'twitch'" in p for p in catalog.problems)

    def test_non_object_root(self):
        catalog = EventCatalog.from_mapping(["a"])
        assert len(catalog) == 0
        assert catalog.problems

    def test_reload_rebinds_module_catalog(self):
        before = event_catalog.catalog
        reloaded = reload_event_templates()
        assert event_catalog.catalog is reloaded
        assert reloaded is not before
        assert ("transport", "connected") in reloaded

    def test_missing_file_yields_load_error_entry(self):
        try:
            catalog = reload_event_templates("does-not-exist.json")
            assert ("app", "load_error") in catalog
            assert ("request", "sent") not in catalog
            assert catalog.problems == ["does-not-exist.json not found"]
        finally:
            reload_event_templates()
        assert ("request", "sent") in event_catalog.catalog

    def test_logger_uses_reloaded_catalog(self, plugin_logger, caplog):
        try:
            reload_event_templates("does-not-exist.json")
            plugin_logger.log_event("request", "sent", request="join", request_id=1)
            assert caplog.records[-1].message.endswith("request: sent")
        finally:
            reload_event_templates()
