"""Render stored ADF documents back to readable plain text.

Jira returns descriptions and comment bodies as ADF trees.  For tool output
these are flattened to text: paragraph text is concatenated, headings get a
``#`` prefix, list entries get ``- `` or ``N. `` prefixes, and code blocks
are fenced.  Marks are dropped.  Block types without a text rendering
(tables, panels, media) are skipped.
"""

from __future__ import annotations

from typing import Any


def _inline_text(node: dict[str, Any]) -> str:
    return "".join(child.get("text", "") or "" for child in node.get("content") or [])


def _list_lines(node: dict[str, Any], ordered: bool) -> list[str]:
    lines: list[str] = []
    number = 0
    for item in node.get("content") or []:
        if item.get("type") != "listItem" or not item.get("content"):
            continue
        for para in item["content"]:
            if not para.get("content"):
                continue
            number += 1
            prefix = f"{number}. " if ordered else "- "
            lines.append(prefix + _inline_text(para))
    return lines


def adf_to_plain_text(adf: dict[str, Any] | None) -> str:
    """Flatten an ADF ``doc`` dict to a plain-text string.

    Parameters
    ----------
    adf:
        An ADF document (``{"type": "doc", "content": [...]}``) or ``None``.

    Returns
    -------
    str
        One line (or fenced section) per supported block, joined by
        newlines.  Empty string when *adf* has no content.
    """
    if not adf or not adf.get("content"):
        return ""

    lines: list[str] = []
    for node in adf["content"]:
        node_type = node.get("type")
        if not node.get("content"):
            continue
        if node_type == "paragraph":
            lines.append(_inline_text(node))
        elif node_type == "codeBlock":
            lines.append("```\n" + _inline_text(node) + "\n```")
        elif node_type == "heading":
            level = (node.get("attrs") or {}).get("level") or 1
            lines.append("#" * level + " " + _inline_text(node))
        elif node_type == "bulletList":
            lines.extend(_list_lines(node, ordered=False))
        elif node_type == "orderedList":
            lines.extend(_list_lines(node, ordered=True))

    return "\n".join(lines)


def is_adf_document(value: Any) -> bool:
    """Return ``True`` if *value* looks like an ADF ``doc`` node."""
    return isinstance(value, dict) and value.get("type") == "doc"


def extract_description(value: Any) -> str:
    """Readable text for a description or comment body of unknown shape.

    Falsy values give ``""``, ADF documents are flattened with
    :func:`adf_to_plain_text`, and anything else is passed through ``str``.
    """
    if not value:
        return ""
    if is_adf_document(value):
        return adf_to_plain_text(value)
    return str(value)
