"""Attachment endpoint wrappers.

Uploads go to ``/issue/{key}/attachments`` as ``multipart/form-data`` and
must carry ``X-Atlassian-Token: no-check`` to pass Jira's XSRF check.
Downloads first read the metadata at ``/attachment/{id}`` and then fetch
the absolute ``content`` URL it points to.
"""

from __future__ import annotations

from typing import Any, BinaryIO

from .transport import JiraTransport

XSRF_HEADER = {"X-Atlassian-Token": "no-check"}


class AttachmentAPI:
    """Wrapper for the Jira attachment endpoints.

    Parameters
    ----------
    transport:
        A configured :class:`JiraTransport` instance.
    """

    def __init__(self, transport: JiraTransport) -> None:
        self._transport = transport

    def metadata(self, attachment_id: str) -> dict[str, Any]:
        """Return ``id``, ``filename``, ``mimeType``, ``size``, ``content`` (URL) ..."""
        return self._transport.request("GET", f"/attachment/{attachment_id}")

    def content(self, content_url: str) -> bytes:
        """Download the raw bytes behind an attachment ``content`` URL."""
        return self._transport.request_bytes("GET", content_url)

    def upload(
        self,
        issue_key: str,
        filename: str,
        stream: BinaryIO,
        content_type: str = "application/octet-stream",
    ) -> list[dict[str, Any]]:
        """Attach one file to an issue.

        Returns the list of created attachment objects (Jira always answers
        with a list, even for a single file).
        """
        result = self._transport.request(
            "POST",
            f"/issue/{issue_key}/attachments",
            files={"file": (filename, stream, content_type)},
            headers=XSRF_HEADER,
        )
        if isinstance(result, list):
            return result
        return [result] if result else []
