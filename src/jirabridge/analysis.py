"""Structured ticket analysis built from a comprehensive issue view.

:func:`analyze_ticket` reorganises the output of
:func:`jirabridge.fields.build_comprehensive_issue` into sections that answer
the usual incident-review questions: what the customer saw, how it
happened, how it was fixed, and how long it took.  Comments written by
automation (matched by author or body markers from the config) are left
out of the discussion section.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from jirabridge.config import DEFAULT_AUTOMATED_COMMENT_MARKERS
from jirabridge.observability import get_logger

log = get_logger("jirabridge.analysis")

NOT_DOCUMENTED = "Not documented"
NOT_SPECIFIED = "Not specified"

_TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def time_to_resolution(created: str | None, resolved: str | None) -> str:
    """Whole days between *created* and *resolved*, e.g. ``"3 days"``."""
    if not resolved:
        return "Not resolved yet"
    start = _parse_timestamp(created)
    end = _parse_timestamp(resolved)
    if start is None or end is None:
        return "Unknown"
    if (start.tzinfo is None) != (end.tzinfo is None):
        start = start.replace(tzinfo=None)
        end = end.replace(tzinfo=None)
    return f"{(end - start).days} days"


def is_automated_comment(
    comment: Mapping[str, Any] | None,
    authors: Sequence[str] = (),
    markers: Sequence[str] = tuple(DEFAULT_AUTOMATED_COMMENT_MARKERS),
) -> bool:
    """Return ``True`` if *comment* was written by automation.

    *authors* are lower-case substrings matched against the author display
    name; *markers* are substrings matched against the body.
    """
    if not comment:
        return True
    author = str(comment.get("author") or "").lower()
    if author and any(a.lower() in author for a in authors):
        return True
    body = str(comment.get("body") or "")
    return bool(body) and any(marker in body for marker in markers)


def analyze_ticket(
    ticket: Mapping[str, Any],
    automated_authors: Sequence[str] = (),
    automated_markers: Sequence[str] = tuple(DEFAULT_AUTOMATED_COMMENT_MARKERS),
) -> dict[str, Any]:
    """Build the structured analysis of one ticket.

    Parameters
    ----------
    ticket:
        A comprehensive issue dict (see
        :func:`~jirabridge.fields.build_comprehensive_issue`).
    automated_authors, automated_markers:
        Filters identifying machine-written comments.

    Returns
    -------
    dict
        Sections ``ticketInfo``, ``customerContext``, ``whatCustomerSaw``,
        ``howItHappened``, ``howItWasFixed``, ``discussion``, ``timeline``
        and ``additionalInfo``.  If the ticket data is malformed an
        ``{"error", "message", "ticketKey"}`` dict is returned instead.
    """
    try:
        comments = ticket.get("comments")
        all_comments = comments if isinstance(comments, list) else []
        human_comments = [
            c for c in all_comments
            if not is_automated_comment(c, automated_authors, automated_markers)
        ]

        custom = ticket.get("customFields") or {}
        pod = custom.get("Pod") or []
        attachments = ticket.get("attachments") or []
        reporter = ticket.get("reporter") or {}
        assignee = ticket.get("assignee") or {}

        return {
            "ticketInfo": {
                "issueKey": ticket.get("issueKey"),
                "summary": ticket.get("summary"),
                "issueType": ticket.get("issueType"),
                "priority": ticket.get("priority"),
                "status": ticket.get("status"),
                "pod": pod if isinstance(pod, list) else [pod],
                "created": ticket.get("created"),
                "resolved": ticket.get("resolutionDate"),
                "dueDate": ticket.get("dueDate"),
            },
            "customerContext": {
                "organization": custom.get("Org Name") or NOT_SPECIFIED,
                "tier": custom.get("Customer Tier") or NOT_SPECIFIED,
                "platform": custom.get("Platform") or NOT_SPECIFIED,
                "affectedSection": custom.get("Sections from Sprinto App") or NOT_SPECIFIED,
            },
            "whatCustomerSaw": {
                "description": ticket.get("description") or "No description provided",
                "reportedBy": reporter.get("name") or "Unknown",
                "attachments": [
                    {
                        "filename": a.get("filename"),
                        "uploadedBy": a.get("author"),
                        "date": a.get("created"),
                    }
                    for a in attachments
                ],
            },
            "howItHappened": {
                "probableCause": custom.get("Probable Cause") or NOT_DOCUMENTED,
                "rootCause": custom.get("Root Cause") or NOT_DOCUMENTED,
                "isRegression": custom.get("Regression?") or NOT_DOCUMENTED,
            },
            "howItWasFixed": {
                "resolutionType": custom.get("Resolution Type") or NOT_DOCUMENTED,
                "assignedTo": assignee.get("name") or "Unassigned",
                "currentStatus": ticket.get("status"),
            },
            "discussion": {
                "totalComments": len(all_comments),
                "humanComments": len(human_comments),
                "comments": [
                    {
                        "author": c.get("author"),
                        "created": c.get("created"),
                        "body": c.get("body"),
                    }
                    for c in human_comments
                ],
            },
            "timeline": {
                "created": ticket.get("created"),
                "updated": ticket.get("updated"),
                "resolved": ticket.get("resolutionDate"),
                "timeToResolution": time_to_resolution(
                    ticket.get("created"), ticket.get("resolutionDate"),
                ),
            },
            "additionalInfo": {
                "totalAttachments": len(attachments),
                "developmentStartDate": custom.get("Development Start Date"),
                "releaseDate": custom.get("Release date"),
            },
        }
    except (AttributeError, TypeError) as exc:
        log.warning(
            "Ticket analysis failed",
            extra={"extra_fields": {"op": "analyze_ticket", "error": str(exc)}},
        )
        key = ticket.get("issueKey") if isinstance(ticket, Mapping) else None
        return {
            "error": "Failed to generate analysis",
            "message": str(exc),
            "ticketKey": key or "Unknown",
        }
