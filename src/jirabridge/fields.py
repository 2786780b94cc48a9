"""Decode Jira issue payloads into readable structures.

Custom fields arrive in many shapes: plain scalars, option objects with a
``value`` key, user or version objects with a ``name`` key, arrays of any
of these, or whole ADF documents.  :func:`decode_field_value` classifies a
raw value exactly once into a :data:`~jirabridge.models.FieldValue`
variant; callers then use ``.plain()`` instead of probing keys ad hoc.

:func:`build_comprehensive_issue` assembles the full structured view of an
issue (people, dates, comments, attachments, custom fields) from the
response of ``GET /issue/{key}?expand=names,schema,renderedFields,changelog``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jirabridge.converter.plain_text import adf_to_plain_text, extract_description, is_adf_document
from jirabridge.models import (
    DocField,
    EmptyField,
    FieldValue,
    ListField,
    NamedField,
    OptionField,
    ScalarField,
)

CUSTOM_FIELD_PREFIX = "customfield_"


def decode_field_value(raw: Any) -> FieldValue:
    """Classify a raw custom-field value.

    Precedence: falsy -> :class:`EmptyField`; ADF document ->
    :class:`DocField`; mapping with a truthy ``value`` ->
    :class:`OptionField`; mapping with a truthy ``name`` ->
    :class:`NamedField`; list -> :class:`ListField` (each element decoded);
    anything else -> :class:`ScalarField`.
    """
    if not raw:
        return EmptyField()
    if isinstance(raw, Mapping):
        if is_adf_document(raw):
            return DocField(adf_to_plain_text(raw))
        if raw.get("value"):
            return OptionField(raw["value"])
        if raw.get("name"):
            return NamedField(raw["name"])
        return ScalarField(raw)
    if isinstance(raw, list):
        return ListField(tuple(decode_field_value(item) for item in raw))
    return ScalarField(raw)


def extract_custom_fields(
    fields: Mapping[str, Any],
    names: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Map every ``customfield_*`` entry to ``display name -> plain value``.

    *names* is the ``names`` expansion of the issue response; when a field
    has no display name its id is used as the key.
    """
    names = names or {}
    custom: dict[str, Any] = {}
    for field_id, raw in fields.items():
        if not field_id.startswith(CUSTOM_FIELD_PREFIX):
            continue
        custom[names.get(field_id) or field_id] = decode_field_value(raw).plain()
    return custom


def _display_name(person: Mapping[str, Any] | None) -> str | None:
    return (person or {}).get("displayName")


def extract_comments(comment_data: Mapping[str, Any] | None) -> list[dict[str, Any]]:
    """Flatten the ``comment`` field into ``id/author/created/updated/body`` dicts."""
    if not comment_data or not comment_data.get("comments"):
        return []
    return [
        {
            "id": comment.get("id"),
            "author": _display_name(comment.get("author")),
            "created": comment.get("created"),
            "updated": comment.get("updated"),
            "body": extract_description(comment.get("body")),
        }
        for comment in comment_data["comments"]
    ]


def extract_attachment_summaries(attachments: list[Mapping[str, Any]] | None) -> list[dict[str, Any]]:
    """Compact attachment metadata for the comprehensive issue view."""
    if not attachments:
        return []
    return [
        {
            "id": att.get("id"),
            "filename": att.get("filename"),
            "size": att.get("size"),
            "mimeType": att.get("mimeType"),
            "created": att.get("created"),
            "author": _display_name(att.get("author")),
        }
        for att in attachments
    ]


def attachment_record(att: Mapping[str, Any]) -> dict[str, Any]:
    """Full attachment record, including the download URL in ``content``."""
    author = att.get("author") or {}
    return {
        "id": att.get("id"),
        "filename": att.get("filename"),
        "author": {
            "displayName": author.get("displayName"),
            "emailAddress": author.get("emailAddress"),
        },
        "created": att.get("created"),
        "size": att.get("size"),
        "mimeType": att.get("mimeType"),
        "content": att.get("content"),
    }


def _person(person: Mapping[str, Any] | None) -> dict[str, Any]:
    person = person or {}
    return {"name": person.get("displayName"), "email": person.get("emailAddress")}


def _name_of(value: Mapping[str, Any] | None) -> str | None:
    return (value or {}).get("name")


def build_comprehensive_issue(issue: Mapping[str, Any]) -> dict[str, Any]:
    """Structure an expanded issue response for analysis.

    Parameters
    ----------
    issue:
        The JSON body of ``GET /issue/{key}`` with
        ``expand=names,schema,renderedFields,changelog``.

    Returns
    -------
    dict
        Keys: ``issueKey``, ``summary``, ``issueType``, ``status``,
        ``priority``, ``description``, ``reporter``, ``assignee``,
        ``created``, ``updated``, ``dueDate``, ``resolutionDate``,
        ``comments``, ``attachments``, ``customFields``, ``allFields``,
        ``fieldNames``, ``changelog``.
    """
    fields: Mapping[str, Any] = issue.get("fields") or {}
    names = issue.get("names")
    return {
        "issueKey": issue.get("key"),
        "summary": fields.get("summary"),
        "issueType": _name_of(fields.get("issuetype")),
        "status": _name_of(fields.get("status")),
        "priority": _name_of(fields.get("priority")),
        "description": extract_description(fields.get("description")),
        "reporter": _person(fields.get("reporter")),
        "assignee": _person(fields.get("assignee")),
        "created": fields.get("created"),
        "updated": fields.get("updated"),
        "dueDate": fields.get("duedate"),
        "resolutionDate": fields.get("resolutiondate"),
        "comments": extract_comments(fields.get("comment")),
        "attachments": extract_attachment_summaries(fields.get("attachment")),
        "customFields": extract_custom_fields(fields, names),
        "allFields": dict(fields),
        "fieldNames": names,
        "changelog": issue.get("changelog"),
    }
