"""Configuration for jirabridge.

:class:`JiraBridgeConfig` is a dataclass that captures every tuneable knob of
the bridge: the Jira site and credentials, HTTP retry and pacing behaviour,
search pagination, attachment download location, the pod alias table used
when expanding JQL, and the markers that identify automated comments during
ticket analysis.

:meth:`JiraBridgeConfig.from_env` builds an instance from the process
environment (after loading a ``.env`` file, if present).
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

from jirabridge.errors import JiraConfigError

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_POD_ALIASES: dict[str, str] = {
    "workflow": "Pod 1 Workflow",
    "pod1": "Pod 1 Workflow",
    "pod 1": "Pod 1 Workflow",
    "growth": "Pod 2 Growth",
    "pod2": "Pod 2 Growth",
    "pod 2": "Pod 2 Growth",
    "platform": "Platform Pod",
    "siteops": "Pod SiteOps",
    "site ops": "Pod SiteOps",
    "ai": "AI Pod",
    "ds": "DS Pod",
    "design": "DS Pod",
    "scale": "Scale Pod",
}
"""Shorthand pod names (lower-case) mapped to the full Jira ``Pod`` value."""

DEFAULT_AUTOMATED_COMMENT_MARKERS: list[str] = [
    "🤖 AI-Assisted Investigation",
    "Claude Code",
    "This investigation was conducted by",
]
"""Comment body substrings that mark a comment as machine-generated."""

REQUIRED_ENV_VARS: tuple[str, ...] = ("JIRA_URL", "JIRA_EMAIL", "JIRA_API_TOKEN")


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class JiraBridgeConfig:
    """Complete configuration for a jirabridge client.

    Parameters
    ----------
    jira_url:
        Site root, e.g. ``https://example.atlassian.net``.  A trailing slash
        is stripped.
    email:
        Account e-mail used for HTTP Basic auth.
    api_token:
        Atlassian API token.  Never logged.
    api_path:
        REST API prefix appended to *jira_url*.
    retry_max_attempts:
        Maximum number of attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Randomly scale backoff intervals to 50-100 % of their value.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    search_page_size:
        Largest page requested from ``/search/jql``.  Jira caps this at 100.
    download_dir:
        Default directory for downloaded attachments.  ``None`` means the
        current working directory at download time.
    pod_aliases:
        Lower-case shorthand to full pod name, used by
        :func:`jirabridge.aliases.expand_pod_aliases`.
    automated_comment_authors:
        Lower-case substrings of author display names whose comments are
        excluded from ticket analysis.
    automated_comment_markers:
        Body substrings that mark a comment as machine-generated.
    metrics:
        Optional :class:`~jirabridge.observability.MetricsHook` backend.
    debug_dump_payload:
        Write the (redacted) request/response of every call to *stderr*.
    log_level:
        Optional level name (``DEBUG``, ``INFO`` ...) applied to the
        jirabridge loggers when the server starts.
    """

    # ── Core ────────────────────────────────────────────────────────────
    jira_url: str = ""

    email: str = ""

    api_token: str = ""

    api_path: str = "/rest/api/3"

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 3

    retry_base_delay: float = 1.0

    retry_max_delay: float = 30.0

    retry_jitter: bool = True

    rate_limit_rps: float = 5.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Search ──────────────────────────────────────────────────────────
    search_page_size: int = 100

    # ── Attachments ─────────────────────────────────────────────────────
    download_dir: str | None = None

    # ── Query aliases ───────────────────────────────────────────────────
    pod_aliases: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_POD_ALIASES),
    )

    # ── Ticket analysis ─────────────────────────────────────────────────
    automated_comment_authors: list[str] = field(default_factory=list)

    automated_comment_markers: list[str] = field(
        default_factory=lambda: list(DEFAULT_AUTOMATED_COMMENT_MARKERS),
    )

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    log_level: str | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        self.jira_url = self.jira_url.rstrip("/")
        if self.jira_url:
            parsed = urlparse(self.jira_url)
            if parsed.scheme not in ("http", "https"):
                raise ValueError(
                    f"jira_url must be an http(s) URL, got {self.jira_url!r}"
                )
            if parsed.scheme == "http" and parsed.hostname not in (
                "localhost",
                "127.0.0.1",
                "::1",
            ):
                raise ValueError(
                    f"jira_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                    "Use HTTPS to protect your API token, or target localhost for testing."
                )

        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if not 1 <= self.search_page_size <= 100:
            raise ValueError(
                f"search_page_size must be between 1 and 100, got {self.search_page_size}"
            )
        if self.log_level is not None:
            self.log_level = self.log_level.strip().upper()
            if not isinstance(logging.getLevelName(self.log_level), int):
                raise ValueError(
                    f"log_level must be a logging level name, got {self.log_level!r}"
                )

    @property
    def base_url(self) -> str:
        """Full REST API root, e.g. ``https://x.atlassian.net/rest/api/3``."""
        return f"{self.jira_url}{self.api_path}"

    @classmethod
    def from_env(cls, dotenv_path: str | None = None, **overrides: Any) -> JiraBridgeConfig:
        """Build a config from environment variables.

        A ``.env`` file is loaded first (existing variables win).  Reads
        ``JIRA_URL``, ``JIRA_EMAIL`` and ``JIRA_API_TOKEN`` (all required)
        plus the optional ``JIRA_DOWNLOAD_DIR``, ``JIRA_TIMEOUT`` and
        ``JIRA_LOG_LEVEL``.  Keyword *overrides* take precedence over the
        environment.

        Raises
        ------
        JiraConfigError
            If any required variable is missing or empty, or a value fails
            validation, for example a plain-HTTP remote URL or a zero
            timeout.
        """
        load_dotenv(dotenv_path)

        missing = [name for name in REQUIRED_ENV_VARS if not os.environ.get(name)]
        if missing:
            raise JiraConfigError(
                message=(
                    "Missing required environment variables: "
                    f"{', '.join(missing)}. Please set JIRA_URL, JIRA_EMAIL, "
                    "and JIRA_API_TOKEN"
                ),
                context={"missing": missing},
            )

        values: dict[str, Any] = {
            "jira_url": os.environ["JIRA_URL"],
            "email": os.environ["JIRA_EMAIL"],
            "api_token": os.environ["JIRA_API_TOKEN"],
        }
        if os.environ.get("JIRA_DOWNLOAD_DIR"):
            values["download_dir"] = os.environ["JIRA_DOWNLOAD_DIR"]
        if os.environ.get("JIRA_TIMEOUT"):
            try:
                values["timeout_seconds"] = float(os.environ["JIRA_TIMEOUT"])
            except ValueError as exc:
                raise JiraConfigError(
                    message=f"JIRA_TIMEOUT must be a number, got {os.environ['JIRA_TIMEOUT']!r}",
                    context={"variable": "JIRA_TIMEOUT"},
                    cause=exc,
                ) from exc
        if os.environ.get("JIRA_LOG_LEVEL"):
            values["log_level"] = os.environ["JIRA_LOG_LEVEL"]
        values.update(overrides)
        try:
            return cls(**values)
        except ValueError as exc:
            raise JiraConfigError(message=str(exc), cause=exc) from exc

    def __repr__(self) -> str:
        """Mask the API token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "api_token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"api_token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"JiraBridgeConfig({', '.join(parts)})"
