"""Shared httpx client configuration and retry pipeline using tenacity."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
)

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = frozenset({
    429,  # Too Many Requests
    408,  # Request Timeout
})

MAX_ATTEMPTS = 5


def _is_retryable_status(status_code: int) -> bool:
    return status_code in _RETRYABLE_STATUS_CODES or status_code >= 500


def _is_retryable_response(response: httpx.Response) -> bool:
    """Tenacity retry predicate: retry on retryable HTTP status codes."""
    return _is_retryable_status(response.status_code)


def _is_retryable_exception(exc: BaseException) -> bool:
    """Tenacity retry predicate: retry on transient network/timeout errors."""
    if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return _is_retryable_status(exc.response.status_code)
    return False


def _compute_retry_wait(retry_state: RetryCallState) -> float:
    """Wait callback that honours ``Retry-After`` on rate-limited responses.

    Falls back to exponential backoff (2^attempt + 1 seconds) otherwise.
    """
    outcome = retry_state.outcome
    if outcome is not None and not outcome.failed:
        response: httpx.Response = outcome.result()
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return float(retry_after) + 1.0
            except (ValueError, TypeError):
                pass

    return float(2**retry_state.attempt_number + 1)


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    if outcome is None:
        return
    if outcome.failed:
        reason = repr(outcome.exception())
    else:
        reason = f"status {outcome.result().status_code}"
    logger.debug("Attempt %d failed (%s), retrying", retry_state.attempt_number, reason)


def _return_last_outcome(retry_state: RetryCallState) -> httpx.Response:
    """Hand the final response back to the caller once retries are exhausted.

    Raises the last exception instead when the final attempt failed.
    """
    assert retry_state.outcome is not None
    return retry_state.outcome.result()


# Used by DiscordClient._raw_request to retry on 429/408/5xx and transient errors.
response_retry = retry(
    retry=(
        retry_if_result(_is_retryable_response) | retry_if_exception(_is_retryable_exception)
    ),
    stop=stop_after_attempt(MAX_ATTEMPTS),
    wait=_compute_retry_wait,
    before_sleep=_log_retry,
    retry_error_callback=_return_last_outcome,
)


def create_async_client(**kwargs: Any) -> httpx.AsyncClient:
    """Create a pre-configured httpx.AsyncClient with HTTP/2 support.

    The caller is responsible for using this within an async context manager
    or calling ``aclose()`` when done.
    """
    return httpx.AsyncClient(
        http2=True,
        timeout=httpx.Timeout(30.0),
        follow_redirects=True,
        **kwargs,
    )
