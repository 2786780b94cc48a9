"""Small helpers shared across jirabridge."""

from __future__ import annotations

from .redact import redact

__all__ = ["redact"]
