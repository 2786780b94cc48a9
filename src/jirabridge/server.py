"""MCP server exposing Jira operations as tools.

Each tool is a thin adapter: it takes camelCase arguments (``issueKey``,
``maxResults`` ...), calls one
:class:`~jirabridge.client.JiraBridgeClient` method and returns the result
as pretty-printed JSON.  Markdown in ``description`` and ``comment``
arguments is converted to Jira's rich-text format by the client.

Failures are logged and re-raised as :class:`ToolError`, which the MCP
layer reports to the caller as an error result.

Configuration comes from the environment (``.env`` supported):
``JIRA_URL``, ``JIRA_EMAIL``, ``JIRA_API_TOKEN``, and optionally
``JIRA_DOWNLOAD_DIR``, ``JIRA_TIMEOUT`` and ``JIRA_LOG_LEVEL``.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from jirabridge.aliases import expand_pod_aliases
from jirabridge.client import JiraBridgeClient
from jirabridge.config import JiraBridgeConfig
from jirabridge.errors import JiraConfigError
from jirabridge.observability import get_logger
from jirabridge.observability.logger import set_level

log = get_logger("jirabridge.server")

mcp = FastMCP(
    "jira-mcp-server",
    instructions=(
        "Jira issue tools. Descriptions and comments accept Markdown: "
        "headings, **bold**, *italic*, ~~strike~~, `code`, [links](url), "
        "- bullet and 1. numbered lists, and ``` fenced code blocks."
    ),
)

_client: JiraBridgeClient | None = None


def get_client() -> JiraBridgeClient:
    """Return the shared client, creating it from the environment on first use.

    Raises
    ------
    JiraConfigError
        If the required ``JIRA_*`` variables are missing or invalid.
    """
    global _client
    if _client is None:
        _client = JiraBridgeClient(JiraBridgeConfig.from_env())
    return _client


def _run_tool(name: str, call: Callable[[JiraBridgeClient], Any]) -> str:
    """Invoke *call* with the client and serialise its result."""
    try:
        result = call(get_client())
    except Exception as exc:
        log.error(
            "Tool call failed",
            extra={"extra_fields": {"op": name, "error": str(exc), "error_type": type(exc).__name__}},
        )
        raise ToolError(f"Error: {exc}") from exc
    return json.dumps(result, indent=2, default=str)


# ============================================================================
# Issues
# ============================================================================

@mcp.tool()
def get_issue(issueKey: str, fields: list[str] | None = None) -> str:
    """Get details of a Jira issue by key (e.g., PROJ-123).

    Use the fields parameter to limit response size, e.g.
    ["summary", "status", "description"]. If not provided, returns all fields.
    """
    return _run_tool("get_issue", lambda c: c.get_issue(issueKey, fields))


@mcp.tool()
def search_issues(jql: str, maxResults: int = 50) -> str:
    """Search for Jira issues using JQL (Jira Query Language).

    Example: "project = PROJ AND status = Open" or
    "Pod = 'workflow' AND created >= 2025-12-01". Pod aliases are supported:
    "workflow" for Pod 1 Workflow, "growth" for Pod 2 Growth, "platform" for
    Platform Pod, "siteops" for Pod SiteOps, "ai" for AI Pod, "ds" for DS Pod,
    "scale" for Scale Pod. maxResults defaults to 50.
    """

    def _search(c: JiraBridgeClient) -> Any:
        return c.search_issues(expand_pod_aliases(jql, c.config.pod_aliases), maxResults)

    return _run_tool("search_issues", _search)


@mcp.tool()
def create_issue(
    project: str,
    summary: str,
    issueType: str,
    description: str | None = None,
) -> str:
    """Create a new Jira issue.

    project is the project key (e.g., PROJ), issueType e.g. Task, Bug, Story.
    description is Markdown.
    """
    return _run_tool(
        "create_issue",
        lambda c: c.create_issue(project, summary, issueType, description),
    )


@mcp.tool()
def update_issue(
    issueKey: str,
    summary: str | None = None,
    description: str | None = None,
) -> str:
    """Update the summary and/or Markdown description of an existing Jira issue."""
    return _run_tool("update_issue", lambda c: c.update_issue(issueKey, summary, description))


@mcp.tool()
def get_comprehensive_issue(issueKey: str) -> str:
    """Get ALL details of a Jira issue in one call.

    Includes description, comments, custom fields (RCA templates, etc.),
    attachments, changelog, and complete field data.
    """
    return _run_tool("get_comprehensive_issue", lambda c: c.get_comprehensive_issue(issueKey))


@mcp.tool()
def analyze_ticket(issueKey: str) -> str:
    """Analyze a Jira ticket and return structured insights.

    Sections: ticket info, customer context, what the customer saw, how it
    happened, how it was fixed, human discussion, timeline, and additional info.
    """
    return _run_tool("analyze_ticket", lambda c: c.analyze_ticket(issueKey))


# ============================================================================
# Comments
# ============================================================================

@mcp.tool()
def add_comment(issueKey: str, comment: str, attachments: list[str] | None = None) -> str:
    """Add a Markdown comment to a Jira issue with optional file attachments.

    attachments is a list of absolute file paths to attach.
    """
    return _run_tool("add_comment", lambda c: c.add_comment(issueKey, comment, attachments))


@mcp.tool()
def delete_comment(issueKey: str, commentId: str) -> str:
    """Delete a comment from a Jira issue."""
    return _run_tool("delete_comment", lambda c: c.delete_comment(issueKey, commentId))


# ============================================================================
# Attachments
# ============================================================================

@mcp.tool()
def get_attachments(issueKey: str) -> str:
    """Get all attachments for a Jira issue, including metadata and download URLs."""
    return _run_tool("get_attachments", lambda c: c.get_attachments(issueKey))


@mcp.tool()
def download_attachment(attachmentId: str, outputDir: str | None = None) -> str:
    """Download an attachment and save it to disk.

    outputDir defaults to the configured download directory or the current
    directory.
    """
    return _run_tool(
        "download_attachment",
        lambda c: c.download_attachment(attachmentId, outputDir),
    )


@mcp.tool()
def add_attachment(issueKey: str, filePath: str) -> str:
    """Upload and attach a file (absolute path) to a Jira issue."""
    return _run_tool("add_attachment", lambda c: c.upload_attachment(issueKey, filePath))


def main() -> None:
    """Run the MCP server on stdio."""
    try:
        client = get_client()
    except JiraConfigError as exc:
        log.error(exc.message, extra={"extra_fields": {"missing": exc.context.get("missing")}})
        raise SystemExit(1) from exc

    if client.config.log_level:
        set_level(client.config.log_level)

    log.info("Jira MCP Server running on stdio")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
