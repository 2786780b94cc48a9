"""Tests for structured ticket analysis."""

import pytest

from jirabridge.analysis import (
    NOT_DOCUMENTED,
    NOT_SPECIFIED,
    analyze_ticket,
    is_automated_comment,
    time_to_resolution,
)


def make_ticket(**overrides):
    ticket = {
        "issueKey": "X-1",
        "summary": "Export broken",
        "issueType": "Bug",
        "status": "Done",
        "priority": "High",
        "description": "CSV export returns nothing",
        "reporter": {"name": "Rae", "email": "rae@x.y"},
        "assignee": {"name": "Ana", "email": "ana@x.y"},
        "created": "2025-03-01T09:00:00.000+0000",
        "updated": "2025-03-05T09:00:00.000+0000",
        "dueDate": None,
        "resolutionDate": "2025-03-04T10:00:00.000+0000",
        "comments": [],
        "attachments": [],
        "customFields": {},
    }
    ticket.update(overrides)
    return ticket


class TestTimeToResolution:
    def test_whole_days(self):
        assert time_to_resolution(
            "2025-03-01T09:00:00.000+0000", "2025-03-04T10:00:00.000+0000",
        ) == "3 days"

    def test_partial_day_rounds_down(self):
        assert time_to_resolution(
            "2025-03-01T09:00:00.000+0000", "2025-03-02T08:00:00.000+0000",
        ) == "0 days"

    def test_not_resolved(self):
        assert time_to_resolution("2025-03-01T09:00:00.000+0000", None) == "Not resolved yet"

    def test_unparseable(self):
        assert time_to_resolution("yesterday", "2025-03-04T10:00:00.000+0000") == "Unknown"

    def test_without_fraction(self):
        assert time_to_resolution("2025-03-01T00:00:00+0000", "2025-03-11T00:00:00+0000") == "10 days"


class TestIsAutomatedComment:
    def test_marker_in_body(self):
        comment = {"author": "Ana", "body": "🤖 AI-Assisted Investigation\nfindings"}
        assert is_automated_comment(comment)

    def test_author_match_is_case_insensitive(self):
        assert is_automated_comment({"author": "Release Bot", "body": "x"}, authors=["bot"])

    def test_human_comment(self):
        assert not is_automated_comment({"author": "Ana", "body": "fixed"}, authors=["bot"])

    def test_empty_comment_is_skipped(self):
        assert is_automated_comment({})
        assert is_automated_comment(None)

    def test_custom_markers(self):
        comment = {"author": "Ana", "body": "[auto] sync"}
        assert is_automated_comment(comment, markers=["[auto]"])
        assert not is_automated_comment(comment, markers=["[bot]"])


class TestAnalyzeTicket:
    def test_sections_present(self):
        analysis = analyze_ticket(make_ticket())
        assert set(analysis) == {
            "ticketInfo", "customerContext", "whatCustomerSaw", "howItHappened",
            "howItWasFixed", "discussion", "timeline", "additionalInfo",
        }

    def test_ticket_info_and_timeline(self):
        analysis = analyze_ticket(make_ticket())
        assert analysis["ticketInfo"]["issueKey"] == "X-1"
        assert analysis["ticketInfo"]["resolved"] == "2025-03-04T10:00:00.000+0000"
        assert analysis["timeline"]["timeToResolution"] == "3 days"

    def test_defaults_for_missing_custom_fields(self):
        analysis = analyze_ticket(make_ticket())
        assert analysis["customerContext"] == {
            "organization": NOT_SPECIFIED,
            "tier": NOT_SPECIFIED,
            "platform": NOT_SPECIFIED,
            "affectedSection": NOT_SPECIFIED,
        }
        assert analysis["howItHappened"]["rootCause"] == NOT_DOCUMENTED
        assert analysis["howItWasFixed"]["resolutionType"] == NOT_DOCUMENTED

    def test_custom_fields_mapped(self):
        analysis = analyze_ticket(make_ticket(customFields={
            "Org Name": "Acme",
            "Customer Tier": "Gold",
            "Pod": "Pod 2 Growth",
            "Root Cause": "Null join key",
            "Regression?": "Yes",
            "Resolution Type": "Code fix",
            "Release date": "2025-03-06",
        }))
        assert analysis["customerContext"]["organization"] == "Acme"
        assert analysis["ticketInfo"]["pod"] == ["Pod 2 Growth"]
        assert analysis["howItHappened"]["rootCause"] == "Null join key"
        assert analysis["howItHappened"]["isRegression"] == "Yes"
        assert analysis["howItWasFixed"]["resolutionType"] == "Code fix"
        assert analysis["additionalInfo"]["releaseDate"] == "2025-03-06"

    def test_pod_list_kept(self):
        analysis = analyze_ticket(make_ticket(customFields={"Pod": ["AI Pod", "DS Pod"]}))
        assert analysis["ticketInfo"]["pod"] == ["AI Pod", "DS Pod"]

    def test_people(self):
        analysis = analyze_ticket(make_ticket(assignee={"name": None}, reporter={}))
        assert analysis["howItWasFixed"]["assignedTo"] == "Unassigned"
        assert analysis["whatCustomerSaw"]["reportedBy"] == "Unknown"

    def test_automated_comments_filtered(self):
        comments = [
            {"author": "Ana", "created": "c1", "body": "repro'd"},
            {"author": "Ana", "created": "c2", "body": "This investigation was conducted by a tool"},
            {"author": "CI Bot", "created": "c3", "body": "build green"},
        ]
        analysis = analyze_ticket(make_ticket(comments=comments), automated_authors=["bot"])
        assert analysis["discussion"]["totalComments"] == 3
        assert analysis["discussion"]["humanComments"] == 1
        assert analysis["discussion"]["comments"] == [
            {"author": "Ana", "created": "c1", "body": "repro'd"},
        ]

    def test_attachments_listed(self):
        analysis = analyze_ticket(make_ticket(attachments=[
            {"filename": "a.png", "author": "Rae", "created": "c"},
        ]))
        assert analysis["whatCustomerSaw"]["attachments"] == [
            {"filename": "a.png", "uploadedBy": "Rae", "date": "c"},
        ]
        assert analysis["additionalInfo"]["totalAttachments"] == 1

    def test_missing_description(self):
        analysis = analyze_ticket(make_ticket(description=""))
        assert analysis["whatCustomerSaw"]["description"] == "No description provided"

    @pytest.mark.parametrize("bad", [
        {"issueKey": "X-2", "customFields": "not a dict"},
        {"issueKey": "X-2", "comments": ["not a dict"]},
    ])
    def test_malformed_ticket_returns_error(self, bad):
        analysis = analyze_ticket(bad)
        assert analysis["error"] == "Failed to generate analysis"
        assert analysis["ticketKey"] == "X-2"
        assert analysis["message"]
