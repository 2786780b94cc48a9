"""Shared test fixtures for the jirabridge test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from jirabridge.client import JiraBridgeClient
from jirabridge.config import JiraBridgeConfig
from jirabridge.converter.blocks import BlockStructurer

Handler = Callable[[httpx.Request], httpx.Response]


def _test_config(**overrides: Any) -> JiraBridgeConfig:
    defaults: dict[str, Any] = dict(
        jira_url="https://example.atlassian.net",
        email="dev@example.com",
        api_token="test-token-1234",
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
        # High RPS so the token bucket never blocks during tests.
        rate_limit_rps=10_000.0,
    )
    defaults.update(overrides)
    return JiraBridgeConfig(**defaults)


@pytest.fixture
def config() -> JiraBridgeConfig:
    """Default test configuration with dummy credentials and no retry delay."""
    return _test_config()


@pytest.fixture
def structurer() -> BlockStructurer:
    """Markdown block structurer."""
    return BlockStructurer()


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests captured by clients built with ``make_client``."""
    return []


@pytest.fixture
def make_client(
    recorded_requests: list[httpx.Request],
) -> Iterator[Callable[..., JiraBridgeClient]]:
    """Factory for a JiraBridgeClient whose HTTP traffic goes to *handler*.

    ``make_client(handler, **config_overrides)``; every request the handler
    sees is appended to ``recorded_requests``.
    """
    clients: list[JiraBridgeClient] = []

    def _factory(handler: Handler, **overrides: Any) -> JiraBridgeClient:
        cfg = _test_config(**overrides)

        def _recording(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        http_client = httpx.Client(
            base_url=cfg.base_url,
            auth=httpx.BasicAuth(cfg.email, cfg.api_token),
            transport=httpx.MockTransport(_recording),
        )
        client = JiraBridgeClient(cfg, http_client=http_client)
        clients.append(client)
        return client

    yield _factory
    for client in clients:
        client.close()
