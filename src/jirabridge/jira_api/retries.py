"""Retry decisions and exponential backoff for Jira API requests.

* :func:`should_retry` -- decide whether a failed attempt may be repeated.
* :func:`compute_backoff` -- how long to wait before the next attempt.

Jira Cloud answers ``429`` with a ``Retry-After`` header when a tenant's
rate limit is hit, and occasionally ``502``/``503`` during deploys.  A
``429`` means the request was not processed, so it is retried for every
method.  A ``5xx`` or a timeout may arrive after Jira already applied the
write, so those are retried only for idempotent methods; a ``POST`` is
repeated only when the connection was never established.  Every other
``4xx`` is the caller's fault and is not retried.
"""

from __future__ import annotations

import random

import httpx

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

IDEMPOTENT_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE"})

_RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)

# Failures that happen before any byte of the request reaches the server.
_UNSENT_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
)


def is_idempotent(method: str | None) -> bool:
    """``True`` for methods that may be repeated without side effects."""
    return method is None or method.upper() in IDEMPOTENT_METHODS


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
    method: str | None = None,
) -> bool:
    """Return ``True`` if attempt number *attempt* (0-indexed) may be retried.

    Exactly one of *status_code* (a response was received) and *exception*
    (the request never got a response) is expected to be set.  When
    *method* is given and is not idempotent, only ``429`` responses and
    connection failures are retried.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        if is_idempotent(method):
            return isinstance(exception, _RETRYABLE_EXCEPTIONS)
        return isinstance(exception, _UNSENT_EXCEPTIONS)
    if status_code is not None:
        if status_code == 429:
            return True
        return status_code in RETRYABLE_STATUSES and is_idempotent(method)
    return False


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 30.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Seconds to wait before the next attempt.

    A server-provided *retry_after* is used as-is; otherwise the delay is
    ``base * 2**attempt`` capped at *maximum*.  With *jitter* the delay is
    scaled to a random 50-100 % of its value.
    """
    if retry_after is not None:
        delay = retry_after
    else:
        delay = min(base * (2 ** attempt), maximum)

    if jitter:
        delay *= 0.5 + random.random() * 0.5

    return delay
