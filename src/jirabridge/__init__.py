"""jirabridge - Jira Cloud client and MCP server that speaks Markdown.

Public re-exports
-----------------

* **Client:** :class:`JiraBridgeClient`
* **Configuration:** :class:`JiraBridgeConfig`
* **Conversion:** :func:`tokenize`, :func:`convert`, :func:`markdown_to_adf`,
  :func:`adf_to_plain_text`
* **Errors:** Every :class:`JiraBridgeError` subclass and :class:`ErrorCode`
* **Models:** Inline runs, block nodes, documents and decoded field values

Usage::

    from jirabridge import JiraBridgeClient, JiraBridgeConfig

    client = JiraBridgeClient(JiraBridgeConfig.from_env())
    client.add_comment("PROJ-123", "## Root cause\\n\\n- stale **cache**")
"""

from __future__ import annotations

# ── Client ─────────────────────────────────────────────────────────────
from jirabridge.client import JiraBridgeClient

# ── Configuration ───────────────────────────────────────────────────────
from jirabridge.config import (
    DEFAULT_AUTOMATED_COMMENT_MARKERS,
    DEFAULT_POD_ALIASES,
    JiraBridgeConfig,
)

# ── Conversion ──────────────────────────────────────────────────────────
from jirabridge.converter import (
    adf_to_plain_text,
    convert,
    markdown_to_adf,
    to_adf,
    tokenize,
)

# ── Errors ──────────────────────────────────────────────────────────────
from jirabridge.errors import (
    AttachmentNotFoundError,
    ErrorCode,
    JiraAttachmentError,
    JiraAuthError,
    JiraBridgeError,
    JiraConfigError,
    JiraConflictError,
    JiraNetworkError,
    JiraNotFoundError,
    JiraPermissionError,
    JiraRateLimitError,
    JiraRetryExhaustedError,
    JiraValidationError,
)

# ── Models ──────────────────────────────────────────────────────────────
from jirabridge.models import (
    BlockNode,
    BulletList,
    CodeBlock,
    DocField,
    Document,
    EmptyField,
    FieldValue,
    Heading,
    ListField,
    Mark,
    MarkType,
    NamedField,
    OptionField,
    OrderedList,
    Paragraph,
    ScalarField,
    TextRun,
)

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Client
    "JiraBridgeClient",
    # Configuration
    "JiraBridgeConfig",
    "DEFAULT_POD_ALIASES",
    "DEFAULT_AUTOMATED_COMMENT_MARKERS",
    # Conversion
    "tokenize",
    "convert",
    "to_adf",
    "markdown_to_adf",
    "adf_to_plain_text",
    # Error base + code enum
    "JiraBridgeError",
    "ErrorCode",
    # Configuration / API / transport errors
    "JiraConfigError",
    "JiraValidationError",
    "JiraAuthError",
    "JiraPermissionError",
    "JiraNotFoundError",
    "JiraConflictError",
    "JiraRateLimitError",
    "JiraRetryExhaustedError",
    "JiraNetworkError",
    # Attachment errors
    "JiraAttachmentError",
    "AttachmentNotFoundError",
    # Models - inline
    "MarkType",
    "Mark",
    "TextRun",
    # Models - blocks
    "Paragraph",
    "Heading",
    "BulletList",
    "OrderedList",
    "CodeBlock",
    "BlockNode",
    "Document",
    # Models - custom field values
    "EmptyField",
    "DocField",
    "OptionField",
    "NamedField",
    "ListField",
    "ScalarField",
    "FieldValue",
]
