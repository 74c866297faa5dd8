"""Request/response bookkeeping for one connection."""

from __future__ import annotations

import itertools
import logging
from collections import OrderedDict

from ..logs.logger import logger
from ..protocol.message import Message

RequestId = int | str


class RequestCorrelator:
    """Matches response frames to the requests waiting for them.

    Outstanding ids are kept in send order. A response carrying an id is
    filed under that id. When the peer does not echo ids (dazeus-core never
    does), a response without one is filed under the oldest outstanding
    request, mirroring the core answering in order; a peer that does echo
    ids gets no such fallback and an id-less response is an orphan. Filed
    responses wait in `take()` until the request that owns them resumes,
    which lets nested requests issued from event handlers complete in any
    order.
    """

    def __init__(self, echoes_ids: bool = False) -> None:
        self.echoes_ids = echoes_ids
        self._ids = itertools.count(1)
        self._outstanding: OrderedDict[RequestId, bool] = OrderedDict()
        self._completed: dict[RequestId, Message] = {}

    @property
    def outstanding(self) -> int:
        """Requests still waiting for a response (including abandoned ones)."""
        return len(self._outstanding)

    def allocate(self) -> int:
        request_id = next(self._ids)
        self._outstanding[request_id] = True
        return request_id

    def accept(self, message: Message) -> bool:
        """File a response frame; False if nobody is waiting for it."""
        request_id = message.id
        if request_id is None:
            if self.echoes_ids or not self._outstanding:
                self._log_orphan(message)
                return False
            request_id = next(iter(self._outstanding))
        elif request_id not in self._outstanding:
            # ids come back as JSON; tolerate "3" for 3
            request_id = self._coerce(request_id)
            if request_id is None:
                self._log_orphan(message)
                return False

        live = self._outstanding.pop(request_id)
        if not live:
            logger.log_event(
                "request",
                "late_response",
                level=logging.WARNING,
                request_id=request_id,
            )
            return False
        self._completed[request_id] = message
        return True

    def take(self, request_id: RequestId) -> Message | None:
        return self._completed.pop(request_id, None)

    def abandon(self, request_id: RequestId) -> None:
        """Give up on a request; its response, if it ever comes, is dropped."""
        self._completed.pop(request_id, None)
        if request_id in self._outstanding:
            self._outstanding[request_id] = False

    def cancel(self, request_id: RequestId) -> None:
        """Forget a request that never reached the core."""
        self._outstanding.pop(request_id, None)
        self._completed.pop(request_id, None)

    def _coerce(self, request_id: RequestId) -> RequestId | None:
        for known in self._outstanding:
            if str(known) == str(request_id):
                return known
        return None

    @staticmethod
    def _log_orphan(message: Message) -> None:
        logger.log_event(
            "request",
            "orphan_response",
            level=logging.WARNING,
            request_id=message.id,
        )
