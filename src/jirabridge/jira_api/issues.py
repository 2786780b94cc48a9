"""Issue and comment endpoint wrappers.

:class:`IssueAPI` is a thin layer over ``/issue`` and ``/search/jql``: it
builds paths, query parameters and request bodies, and delegates auth,
retries and error mapping to :class:`~jirabridge.jira_api.transport.JiraTransport`.
Rich-text bodies are expected to be ADF dicts already.
"""

from __future__ import annotations

from typing import Any

from .transport import JiraTransport

COMPREHENSIVE_EXPAND = "names,schema,renderedFields,changelog"
SEARCH_FIELDS = "summary,status,assignee,reporter,created,updated,issuetype"


class IssueAPI:
    """Wrapper for the Jira issue, comment and search endpoints.

    Parameters
    ----------
    transport:
        A configured :class:`JiraTransport` instance.
    """

    def __init__(self, transport: JiraTransport) -> None:
        self._transport = transport

    def get(
        self,
        issue_key: str,
        fields: list[str] | None = None,
        expand: str | None = None,
    ) -> dict[str, Any]:
        """Fetch one issue.

        Parameters
        ----------
        issue_key:
            Issue key such as ``PROJ-123`` (or numeric id).
        fields:
            Limit the response to these field names.  All fields when
            empty or ``None``.
        expand:
            Comma-separated expansions, e.g. ``"names,changelog"``.
        """
        params: dict[str, Any] = {}
        if fields:
            params["fields"] = ",".join(fields)
        if expand:
            params["expand"] = expand
        return self._transport.request("GET", f"/issue/{issue_key}", params=params)

    def search_page(
        self,
        jql: str,
        max_results: int,
        next_page_token: str | None = None,
        fields: str = SEARCH_FIELDS,
    ) -> dict[str, Any]:
        """Fetch one page of ``/search/jql`` results.

        The response carries ``issues``, ``isLast`` and, when more results
        exist, ``nextPageToken``.
        """
        params: dict[str, Any] = {
            "jql": jql,
            "maxResults": max_results,
            "fields": fields,
        }
        if next_page_token:
            params["nextPageToken"] = next_page_token
        return self._transport.request("GET", "/search/jql", params=params)

    def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Create an issue; returns ``{"id", "key", "self"}``."""
        return self._transport.request("POST", "/issue", json={"fields": fields})

    def update(self, issue_key: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Update the given fields of an issue.  Jira answers ``204``."""
        return self._transport.request("PUT", f"/issue/{issue_key}", json={"fields": fields})

    def add_comment(self, issue_key: str, body: dict[str, Any]) -> dict[str, Any]:
        """Add a comment whose *body* is an ADF document."""
        return self._transport.request(
            "POST", f"/issue/{issue_key}/comment", json={"body": body},
        )

    def delete_comment(self, issue_key: str, comment_id: str) -> dict[str, Any]:
        return self._transport.request("DELETE", f"/issue/{issue_key}/comment/{comment_id}")
