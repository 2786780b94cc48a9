"""Synchronous Jira client.

:class:`JiraBridgeClient` combines the endpoint wrappers with the Markdown
converter and the payload decoders.  Every operation exposed as an MCP
tool has exactly one method here.

Usage::

    from jirabridge import JiraBridgeClient

    with JiraBridgeClient(
        jira_url="https://example.atlassian.net",
        email="me@example.com",
        api_token="xxx",
    ) as client:
        client.add_comment("PROJ-1", "Fixed in **v2**, see [notes](https://x.y)")
"""

from __future__ import annotations

import mimetypes
import re
from pathlib import Path
from typing import Any

import httpx

from jirabridge.analysis import analyze_ticket
from jirabridge.config import JiraBridgeConfig
from jirabridge.converter.adf import markdown_to_adf
from jirabridge.errors import AttachmentNotFoundError, JiraBridgeError
from jirabridge.fields import attachment_record, build_comprehensive_issue
from jirabridge.jira_api.attachments import AttachmentAPI
from jirabridge.jira_api.issues import COMPREHENSIVE_EXPAND, IssueAPI
from jirabridge.jira_api.transport import JiraTransport
from jirabridge.observability import get_logger

log = get_logger("jirabridge.client")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def safe_filename(filename: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9._-]`` with ``_``."""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)


class JiraBridgeClient:
    """Jira Cloud client speaking Markdown on the way in.

    Parameters
    ----------
    config:
        A ready :class:`JiraBridgeConfig`.  When omitted, *kwargs* are
        forwarded to :class:`JiraBridgeConfig`.
    http_client:
        Optional :class:`httpx.Client` handed to the transport (tests).
    """

    def __init__(
        self,
        config: JiraBridgeConfig | None = None,
        *,
        http_client: httpx.Client | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = config if config is not None else JiraBridgeConfig(**kwargs)
        self._transport = JiraTransport(self._config, client=http_client)
        self._issues = IssueAPI(self._transport)
        self._attachments = AttachmentAPI(self._transport)

    @property
    def config(self) -> JiraBridgeConfig:
        return self._config

    # ------------------------------------------------------------------
    # Reading issues
    # ------------------------------------------------------------------

    def get_issue(self, issue_key: str, fields: list[str] | None = None) -> dict[str, Any]:
        """Raw issue JSON, optionally limited to *fields*."""
        return self._issues.get(issue_key, fields=fields)

    def get_comprehensive_issue(self, issue_key: str) -> dict[str, Any]:
        """Everything about an issue in one structured dict.

        Description and comment bodies are flattened to plain text and
        custom fields are keyed by their display names.  See
        :func:`~jirabridge.fields.build_comprehensive_issue`.
        """
        issue = self._issues.get(issue_key, expand=COMPREHENSIVE_EXPAND)
        return build_comprehensive_issue(issue)

    def analyze_ticket(self, issue_key: str) -> dict[str, Any]:
        """Structured incident-review analysis of an issue."""
        return analyze_ticket(
            self.get_comprehensive_issue(issue_key),
            automated_authors=self._config.automated_comment_authors,
            automated_markers=self._config.automated_comment_markers,
        )

    def search_issues(self, jql: str, max_results: int = 50) -> dict[str, Any]:
        """Run a JQL search, following ``nextPageToken`` pagination.

        Pages of up to ``search_page_size`` issues are fetched until Jira
        reports the last page, returns an empty page or no continuation
        token, or *max_results* issues have been collected.

        Returns
        -------
        dict
            ``{"issues": [...], "total": <len(issues)>, "isLast": True}``.
        """
        issues: list[dict[str, Any]] = []
        next_page_token: str | None = None
        is_last = False

        while not is_last and len(issues) < max_results:
            data = self._issues.search_page(
                jql,
                max_results=min(self._config.search_page_size, max_results - len(issues)),
                next_page_token=next_page_token,
            )
            page = data.get("issues") or []
            issues.extend(page)
            is_last = data.get("isLast") is not False
            next_page_token = data.get("nextPageToken")

            if not page or (not next_page_token and not is_last):
                break

        issues = issues[:max_results]
        log.info(
            "Search complete",
            extra={"extra_fields": {"op": "search_issues", "jql": jql, "total": len(issues)}},
        )
        return {"issues": issues, "total": len(issues), "isLast": True}

    # ------------------------------------------------------------------
    # Writing issues
    # ------------------------------------------------------------------

    def create_issue(
        self,
        project: str,
        summary: str,
        issue_type: str,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Create an issue; *description* is Markdown."""
        fields: dict[str, Any] = {
            "project": {"key": project},
            "summary": summary,
            "issuetype": {"name": issue_type},
        }
        if description:
            fields["description"] = markdown_to_adf(description)
        result = self._issues.create(fields)
        log.info(
            "Issue created",
            extra={"extra_fields": {"op": "create_issue", "issue_key": result.get("key")}},
        )
        return result

    def update_issue(
        self,
        issue_key: str,
        summary: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Update summary and/or Markdown description; unset values are untouched."""
        fields: dict[str, Any] = {}
        if summary:
            fields["summary"] = summary
        if description:
            fields["description"] = markdown_to_adf(description)
        self._issues.update(issue_key, fields)
        return {"success": True, "message": f"Issue {issue_key} updated successfully"}

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def add_comment(
        self,
        issue_key: str,
        comment: str,
        attachments: list[str] | None = None,
    ) -> dict[str, Any]:
        """Add a Markdown comment, then upload any *attachments*.

        A file that fails to upload is logged and skipped; the comment and
        the remaining files are kept.  With attachments the result is
        ``{"comment": ..., "attachments": [...]}``, otherwise the comment
        object itself.
        """
        created = self._issues.add_comment(issue_key, markdown_to_adf(comment))
        if not attachments:
            return created

        uploaded: list[dict[str, Any]] = []
        for file_path in attachments:
            try:
                uploaded.extend(self.upload_attachment(issue_key, file_path))
            except (JiraBridgeError, OSError) as exc:
                log.error(
                    "Failed to upload attachment",
                    extra={
                        "extra_fields": {
                            "op": "add_comment",
                            "issue_key": issue_key,
                            "file_path": file_path,
                            "error": str(exc),
                        }
                    },
                )
        return {"comment": created, "attachments": uploaded}

    def delete_comment(self, issue_key: str, comment_id: str) -> dict[str, Any]:
        self._issues.delete_comment(issue_key, comment_id)
        return {
            "success": True,
            "message": f"Comment {comment_id} deleted successfully from issue {issue_key}",
        }

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def get_attachments(self, issue_key: str) -> list[dict[str, Any]]:
        """Metadata and download URLs of every attachment on an issue."""
        issue = self._issues.get(issue_key, fields=["attachment"])
        attachments = (issue.get("fields") or {}).get("attachment") or []
        return [attachment_record(att) for att in attachments]

    def download_attachment(
        self,
        attachment_id: str,
        output_dir: str | None = None,
    ) -> dict[str, Any]:
        """Save an attachment to disk.

        The file lands in *output_dir*, else the configured
        ``download_dir``, else the current directory; the directory is
        created if needed.  The filename is sanitized with
        :func:`safe_filename`.
        """
        meta = self._attachments.metadata(attachment_id)
        data = self._attachments.content(meta["content"])

        save_dir = Path(output_dir or self._config.download_dir or Path.cwd())
        save_dir.mkdir(parents=True, exist_ok=True)
        full_path = save_dir / safe_filename(meta["filename"])
        full_path.write_bytes(data)

        log.info(
            "Attachment downloaded",
            extra={
                "extra_fields": {
                    "op": "download_attachment",
                    "attachment_id": attachment_id,
                    "bytes": len(data),
                    "path": str(full_path),
                }
            },
        )
        return {
            "id": meta.get("id"),
            "filename": meta.get("filename"),
            "mimeType": meta.get("mimeType"),
            "size": meta.get("size"),
            "savedPath": str(full_path),
        }

    def upload_attachment(self, issue_key: str, file_path: str) -> list[dict[str, Any]]:
        """Attach a local file to an issue.

        Raises
        ------
        AttachmentNotFoundError
            If *file_path* does not exist.
        """
        path = Path(file_path)
        if not path.is_file():
            raise AttachmentNotFoundError(
                message=f"File not found: {file_path}",
                context={"file_path": file_path},
            )
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        with path.open("rb") as stream:
            created = self._attachments.upload(issue_key, path.name, stream, content_type)
        return [attachment_record(att) for att in created]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> JiraBridgeClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
