"""
Tests for request/response correlation
"""

import logging

from dazeus.client import RequestCorrelator
from dazeus.protocol import Message, MessageKind


def response(request_id=None, **data):
    payload = dict(data)
    if request_id is not None:
        payload["id"] = request_id
    return Message(kind=MessageKind.RESPONSE, id=request_id, data=payload)


class TestRequestCorrelator:
    def test_ids_start_at_one_and_increase(self):
        correlator = RequestCorrelator()
        assert [correlator.allocate() for _ in range(3)] == [1, 2, 3]
        assert correlator.outstanding == 3

    def test_response_by_id(self):
        correlator = RequestCorrelator()
        first, second = correlator.allocate(), correlator.allocate()
        assert correlator.accept(response(second, success=True))
        assert correlator.take(first) is None
        assert correlator.take(second).data["success"] is True
        assert correlator.outstanding == 1

    def test_string_id_matches_int(self):
        correlator = RequestCorrelator()
        request_id = correlator.allocate()
        assert correlator.accept(response(str(request_id)))
        assert correlator.take(request_id) is not None

    def test_response_without_id_goes_to_oldest(self):
        correlator = RequestCorrelator()
        first, second = correlator.allocate(), correlator.allocate()
        correlator.accept(response(nick="a"))
        correlator.accept(response(nick="b"))
        assert correlator.take(first).data["nick"] == "a"
        assert correlator.take(second).data["nick"] == "b"

    def test_orphan_is_dropped(self, caplog):
        correlator = RequestCorrelator()
        assert not correlator.accept(response(99))
        assert not correlator.accept(response())
        assert sum("nobody asked for" in r.message for r in caplog.records) == 2

    def test_null_id_is_orphan_when_peer_echoes_ids(self, caplog):
        caplog.set_level(logging.WARNING)
        correlator = RequestCorrelator(echoes_ids=True)
        request_id = correlator.allocate()
        assert not correlator.accept(response(success=True))
        assert correlator.take(request_id) is None
        assert correlator.outstanding == 1
        assert any("nobody asked for" in r.message for r in caplog.records)
        assert correlator.accept(response(request_id, success=True))

    def test_late_response_after_abandon(self, caplog):
        caplog.set_level(logging.WARNING)
        correlator = RequestCorrelator()
        first, second = correlator.allocate(), correlator.allocate()
        correlator.abandon(first)
        # FIFO: the core still answers the abandoned request first
        assert not correlator.accept(response(success=True))
        assert correlator.accept(response(success=False))
        assert correlator.take(second).data["success"] is False
        assert any("late response" in r.message for r in caplog.records)

    def test_cancel_forgets_request(self):
        correlator = RequestCorrelator()
        request_id = correlator.allocate()
        correlator.cancel(request_id)
        assert correlator.outstanding == 0
        assert not correlator.accept(response(request_id))
