from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..logging_config import log_structured_error
from .internal import (
    ConnectError,
    ConnectionClosed,
    DaZeusError,
    ParseError,
    ProtocolError,
    RequestError,
    TransportError,
)

T = TypeVar("T")


def classify_error(error: BaseException) -> str:
    """Map an exception onto the category used in structured error lines."""
    if isinstance(error, ConnectError | TransportError | ConnectionClosed | OSError):
        return "network"
    if isinstance(error, ParseError):
        return "config"
    if isinstance(error, ProtocolError):
        return "protocol"
    if isinstance(error, RequestError):
        return "request"
    if isinstance(error, DaZeusError):
        return "internal"
    return "unknown"


def log_error(
    message: str, error: BaseException, context: dict[str, Any] | None = None
) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {error}",
        exception=error if isinstance(error, Exception) else None,
        context=context,
    )


def connect_with_retry(
    open_connection: Callable[[], T],
    attempts: int = 3,
    max_wait: float = 30.0,
) -> T:
    """Open a connection, retrying ConnectError with exponential backoff.

    This is a policy helper for plugin programs; the client core itself never
    retries. Only ConnectError is retried, since anything else (a bad
    descriptor, for instance) will not improve by waiting.

    Args:
        open_connection: Callable performing one connection attempt.
        attempts: Total number of attempts, at least 1.
        max_wait: Upper bound in seconds for a single backoff sleep.

    Returns:
        Whatever open_connection returned on the first successful attempt.

    Raises:
        ConnectError: The last failure, once all attempts are exhausted.
    """

    def before_sleep(retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        log_structured_error(
            error_type="network",
            message=f"Connect attempt {retry_state.attempt_number} failed, retrying",
            exception=exc,
            level=logging.WARNING,
        )

    retrying = Retrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_exponential(multiplier=1, max=max_wait),
        retry=retry_if_exception_type(ConnectError),
        before_sleep=before_sleep,
        reraise=True,
    )
    return retrying(open_connection)


__all__ = ["classify_error", "log_error", "connect_with_retry"]
