"""HTTP transport for the Jira Cloud REST API.

:class:`JiraTransport` handles the full request lifecycle:

1. Acquire a token-bucket slot (wait if needed).
2. Send the request with HTTP Basic auth (account e-mail + API token).
3. On ``2xx`` -- return the parsed JSON body (or raw bytes for downloads).
4. On ``429`` -- honour ``Retry-After``, sleep, and retry.
5. On ``5xx`` / network error -- exponential backoff and retry (idempotent
   methods only; a ``POST`` is retried only on ``429`` or a failed connect).
6. On any other ``4xx`` -- raise the matching typed error immediately.
7. On max attempts exceeded -- raise :class:`JiraRetryExhaustedError`.
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any

import httpx

from jirabridge.config import JiraBridgeConfig
from jirabridge.errors import (
    JiraAuthError,
    JiraConflictError,
    JiraNetworkError,
    JiraNotFoundError,
    JiraPermissionError,
    JiraRetryExhaustedError,
    JiraValidationError,
)
from jirabridge.observability import NoopMetricsHook, get_logger

from .rate_limit import TokenBucket
from .retries import RETRYABLE_STATUSES, compute_backoff, should_retry

log = get_logger("jirabridge.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _error_summary(response: httpx.Response) -> tuple[str, dict[str, Any]]:
    """Pull a readable message out of a Jira error body.

    Jira reports failures as ``{"errorMessages": [...], "errors": {field: msg}}``.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    messages = [str(m) for m in body.get("errorMessages") or []]
    field_errors = body.get("errors") or {}
    if isinstance(field_errors, dict):
        messages.extend(f"{name}: {msg}" for name, msg in field_errors.items())
    summary = "; ".join(messages) or response.text[:500] or response.reason_phrase
    return summary, body


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a non-retryable 4xx response."""
    status = response.status_code
    summary, body = _error_summary(response)
    context: dict[str, Any] = {
        "status_code": status,
        "error_messages": body.get("errorMessages", []),
        "errors": body.get("errors", {}),
    }

    if status == 401:
        raise JiraAuthError(
            message=f"Authentication failed on {method} {path}: {summary}",
            context=context,
        )
    if status == 403:
        raise JiraPermissionError(
            message=f"Permission denied on {method} {path}: {summary}",
            context={**context, "operation": f"{method} {path}"},
        )
    if status == 404:
        raise JiraNotFoundError(
            message=f"Resource not found on {method} {path}: {summary}",
            context={**context, "path": path},
        )
    if status == 409:
        raise JiraConflictError(
            message=f"Conflict on {method} {path}: {summary}",
            context=context,
        )
    if status == 400:
        raise JiraValidationError(
            message=f"Validation error on {method} {path}: {summary}",
            context={**context, "body": body},
        )
    raise JiraValidationError(
        message=f"Client error {status} on {method} {path}: {summary}",
        context={**context, "body": body},
    )


def _dump_payload(
    method: str,
    url: str,
    payload: Any | None,
    response_status: int | None,
    response_body: Any | None,
    token: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    from jirabridge.utils.redact import redact

    dump: dict[str, Any] = {
        "method": method,
        "url": url,
    }
    if payload is not None:
        dump["request_body"] = payload
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    print(
        _json.dumps(redact(dump, token), indent=2, default=str),
        file=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class JiraTransport:
    """Synchronous HTTP transport with auth, retry, and rate limiting.

    Parameters
    ----------
    config:
        A :class:`JiraBridgeConfig` controlling all transport behaviour.
    client:
        Optional pre-built :class:`httpx.Client`, mainly for tests using
        :class:`httpx.MockTransport`.
    """

    def __init__(
        self,
        config: JiraBridgeConfig,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._bucket = TokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

        # Content-Type is left to httpx so multipart uploads get their boundary.
        self._client = client or httpx.Client(
            base_url=config.base_url,
            auth=httpx.BasicAuth(config.email, config.api_token),
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    # -- public API --------------------------------------------------------

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Execute a request and return the decoded JSON body.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
        path:
            Path relative to the REST root (e.g. ``/issue/PROJ-1``) or an
            absolute URL.
        **kwargs:
            Forwarded to :meth:`httpx.Client.request` (``json=``,
            ``params=``, ``files=``, ``headers=`` ...).

        Returns
        -------
        Any
            The parsed JSON body; ``{}`` for ``204`` or empty responses.

        Raises
        ------
        JiraAuthError
            On 401 responses.
        JiraPermissionError
            On 403 responses.
        JiraNotFoundError
            On 404 responses.
        JiraConflictError
            On 409 responses.
        JiraValidationError
            On 400 and other non-retryable 4xx responses.
        JiraRetryExhaustedError
            When all retry attempts have been exhausted.
        JiraNetworkError
            On transport-level failures after exhausting retries.
        """
        response = self._send(method, path, **kwargs)
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    def request_bytes(self, method: str, url: str, **kwargs: Any) -> bytes:
        """Execute a request and return the raw body (attachment downloads).

        Redirects are followed, since attachment content URLs redirect to
        the media service.
        """
        kwargs.setdefault("follow_redirects", True)
        return self._send(method, url, **kwargs).content

    # -- internals ---------------------------------------------------------

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Run the retry loop and return the first successful response."""
        max_attempts = self._config.retry_max_attempts
        last_exception: Exception | None = None
        last_status: int | None = None
        attempts_made = 0

        for attempt in range(max_attempts):
            attempts_made = attempt + 1
            wait = self._bucket.acquire()
            if wait > 0:
                self._metrics.timing(
                    "jirabridge.rate_limit_wait_ms",
                    wait * 1000,
                    tags={"method": method, "path": path},
                )

            t0 = time.monotonic()
            try:
                response = self._client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_exception = exc
                last_status = None
                time.sleep(self._network_backoff(method, path, exc, attempt))
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            last_status = response.status_code
            last_exception = None
            tags = {"method": method, "path": path, "status": str(response.status_code)}
            self._metrics.increment("jirabridge.requests_total", tags=tags)
            self._metrics.timing("jirabridge.request_duration_ms", elapsed_ms, tags=tags)
            log.debug(
                "Jira request",
                extra={
                    "extra_fields": {
                        "op": "request",
                        "method": method,
                        "path": path,
                        "status_code": response.status_code,
                        "elapsed_ms": round(elapsed_ms, 1),
                        "attempt": attempt + 1,
                    }
                },
            )
            self._emit_debug_dump(method, response, kwargs.get("json"))

            if 200 <= response.status_code < 300:
                return response

            if response.status_code not in RETRYABLE_STATUSES:
                _raise_for_status(response, method, path)

            if not should_retry(response.status_code, None, attempt, max_attempts, method):
                break

            retry_after: float | None = None
            reason = "server_error"
            if response.status_code == 429:
                retry_after = _parse_retry_after(response)
                reason = "rate_limited"
                self._metrics.increment(
                    "jirabridge.rate_limited_total",
                    tags={"method": method, "path": path},
                )
                log.warning(
                    "Rate limited by Jira",
                    extra={
                        "extra_fields": {
                            "op": "request",
                            "method": method,
                            "path": path,
                            "retry_after": retry_after,
                            "attempt": attempt + 1,
                        }
                    },
                )

            delay = compute_backoff(
                attempt,
                base=self._config.retry_base_delay,
                maximum=self._config.retry_max_delay,
                jitter=self._config.retry_jitter,
                retry_after=retry_after,
            )
            self._metrics.increment(
                "jirabridge.retries_total",
                tags={"method": method, "path": path, "reason": reason},
            )
            time.sleep(delay)

        ctx: dict[str, Any] = {
            "attempts": attempts_made,
            "last_status_code": last_status,
        }
        if last_exception is not None:
            raise JiraRetryExhaustedError(
                message=(
                    f"All {max_attempts} attempts exhausted for {method} {path} "
                    f"(last error: {last_exception})"
                ),
                context=ctx,
                cause=last_exception,
            )
        if attempts_made < max_attempts:
            raise JiraRetryExhaustedError(
                message=(
                    f"{method} {path} failed with status {last_status}; "
                    "not retried because the request may already have been applied"
                ),
                context=ctx,
            )
        raise JiraRetryExhaustedError(
            message=(
                f"All {max_attempts} attempts exhausted for {method} {path} "
                f"(last status: {last_status})"
            ),
            context=ctx,
        )

    def _network_backoff(self, method: str, path: str, exc: Exception, attempt: int) -> float:
        """Delay before retrying a network failure, or raise if out of attempts."""
        self._metrics.increment(
            "jirabridge.requests_total",
            tags={"method": method, "path": path, "status": "error"},
        )
        log.warning(
            "Request network error",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "attempt": attempt + 1,
                    "error": str(exc),
                }
            },
        )
        if not should_retry(None, exc, attempt, self._config.retry_max_attempts, method):
            raise JiraNetworkError(
                message=f"Network error on {method} {path}: {exc}",
                context={"url": path, "attempt": attempt + 1},
                cause=exc,
            ) from exc
        self._metrics.increment(
            "jirabridge.retries_total",
            tags={"method": method, "path": path, "reason": "network_error"},
        )
        return compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
        )

    def _emit_debug_dump(self, method: str, response: httpx.Response, json_payload: Any) -> None:
        if not self._config.debug_dump_payload:
            return
        try:
            resp_body: Any = response.json()
        except ValueError:
            resp_body = response.content[:1000]
        _dump_payload(
            method, str(response.url), json_payload,
            response.status_code, resp_body,
            token=self._config.api_token,
        )

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> JiraTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
