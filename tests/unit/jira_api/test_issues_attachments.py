"""Tests for the IssueAPI and AttachmentAPI endpoint wrappers.

The transport is replaced with a MagicMock so only path, parameter and body
construction is exercised here.
"""

import io
from unittest.mock import MagicMock

from jirabridge.jira_api.attachments import XSRF_HEADER, AttachmentAPI
from jirabridge.jira_api.issues import COMPREHENSIVE_EXPAND, SEARCH_FIELDS, IssueAPI


def make_issue_api(return_value=None):
    transport = MagicMock()
    transport.request.return_value = {} if return_value is None else return_value
    return IssueAPI(transport), transport


def make_attachment_api(return_value=None):
    transport = MagicMock()
    transport.request.return_value = {} if return_value is None else return_value
    return AttachmentAPI(transport), transport


class TestIssueGet:
    def test_all_fields(self):
        api, transport = make_issue_api({"key": "X-1"})
        assert api.get("X-1") == {"key": "X-1"}
        transport.request.assert_called_once_with("GET", "/issue/X-1", params={})

    def test_selected_fields_joined(self):
        api, transport = make_issue_api()
        api.get("X-1", fields=["summary", "status"])
        transport.request.assert_called_once_with(
            "GET", "/issue/X-1", params={"fields": "summary,status"},
        )

    def test_empty_field_list_means_all(self):
        api, transport = make_issue_api()
        api.get("X-1", fields=[])
        assert transport.request.call_args.kwargs["params"] == {}

    def test_expand(self):
        api, transport = make_issue_api()
        api.get("X-1", expand=COMPREHENSIVE_EXPAND)
        assert transport.request.call_args.kwargs["params"] == {
            "expand": "names,schema,renderedFields,changelog",
        }


class TestSearchPage:
    def test_first_page(self):
        api, transport = make_issue_api({"issues": [], "isLast": True})
        api.search_page("project = X", max_results=50)
        transport.request.assert_called_once_with(
            "GET",
            "/search/jql",
            params={"jql": "project = X", "maxResults": 50, "fields": SEARCH_FIELDS},
        )

    def test_continuation_token(self):
        api, transport = make_issue_api()
        api.search_page("project = X", max_results=10, next_page_token="tok-2")
        assert transport.request.call_args.kwargs["params"]["nextPageToken"] == "tok-2"


class TestIssueWrites:
    def test_create(self):
        api, transport = make_issue_api({"id": "1", "key": "X-1"})
        fields = {"project": {"key": "X"}, "summary": "s", "issuetype": {"name": "Bug"}}
        assert api.create(fields)["key"] == "X-1"
        transport.request.assert_called_once_with("POST", "/issue", json={"fields": fields})

    def test_update(self):
        api, transport = make_issue_api()
        api.update("X-1", {"summary": "new"})
        transport.request.assert_called_once_with(
            "PUT", "/issue/X-1", json={"fields": {"summary": "new"}},
        )

    def test_add_comment(self):
        api, transport = make_issue_api({"id": "100"})
        body = {"type": "doc", "version": 1, "content": []}
        api.add_comment("X-1", body)
        transport.request.assert_called_once_with(
            "POST", "/issue/X-1/comment", json={"body": body},
        )

    def test_delete_comment(self):
        api, transport = make_issue_api()
        api.delete_comment("X-1", "100")
        transport.request.assert_called_once_with("DELETE", "/issue/X-1/comment/100")


class TestAttachmentAPI:
    def test_metadata(self):
        api, transport = make_attachment_api({"id": "5", "filename": "a.txt"})
        assert api.metadata("5")["filename"] == "a.txt"
        transport.request.assert_called_once_with("GET", "/attachment/5")

    def test_content_uses_bytes_request(self):
        api, transport = make_attachment_api()
        transport.request_bytes.return_value = b"data"
        assert api.content("https://x/attachment/content/5") == b"data"
        transport.request_bytes.assert_called_once_with("GET", "https://x/attachment/content/5")

    def test_upload_sends_multipart_with_xsrf_header(self):
        api, transport = make_attachment_api([{"id": "7", "filename": "log.txt"}])
        stream = io.BytesIO(b"line")
        result = api.upload("X-1", "log.txt", stream, "text/plain")
        assert result == [{"id": "7", "filename": "log.txt"}]
        transport.request.assert_called_once_with(
            "POST",
            "/issue/X-1/attachments",
            files={"file": ("log.txt", stream, "text/plain")},
            headers={"X-Atlassian-Token": "no-check"},
        )
        assert XSRF_HEADER == {"X-Atlassian-Token": "no-check"}

    def test_upload_single_object_wrapped(self):
        api, _ = make_attachment_api({"id": "7"})
        assert api.upload("X-1", "a", io.BytesIO(b"")) == [{"id": "7"}]

    def test_upload_empty_response(self):
        api, _ = make_attachment_api({})
        assert api.upload("X-1", "a", io.BytesIO(b"")) == []
