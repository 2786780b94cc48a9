"""Metrics hook protocol and no-op default implementation.

jirabridge emits counters and timings around every Jira API request.  By
default a :class:`NoopMetricsHook` is used so there is zero overhead; pass
any object satisfying :class:`MetricsHook` as ``JiraBridgeConfig.metrics``
to route them to StatsD, Prometheus or similar.

Emitted metric names:

* ``jirabridge.requests_total``       -- counter
* ``jirabridge.retries_total``        -- counter
* ``jirabridge.rate_limited_total``   -- counter
* ``jirabridge.request_duration_ms``  -- timing
* ``jirabridge.rate_limit_wait_ms``   -- timing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
