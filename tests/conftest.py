import os

import pytest

from dazeus.client.connection import Connection
from dazeus.client.dazeus import DaZeus
from dazeus.protocol.codec import LineCodec
from tests.fixtures.fake_transport import FakeTransport, ack_all

# Tests assert on the plain message format
os.environ.pop("DEBUG", None)


@pytest.fixture
def make_connection():
    """Build a line-codec Connection (or DaZeus) over a FakeTransport."""

    def _make(chunks=(), responder=None, cls=Connection, **kwargs):
        kwargs.setdefault("announce_subscriptions", False)
        transport = FakeTransport(chunks, responder=responder)
        return cls(transport, LineCodec(), **kwargs), transport

    return _make


@pytest.fixture
def make_dazeus(make_connection):
    def _make(chunks=(), responder=ack_all, **kwargs):
        return make_connection(chunks, responder=responder, cls=DaZeus, **kwargs)

    return _make
