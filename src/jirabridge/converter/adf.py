"""Serialize a :class:`Document` into Atlassian Document Format (ADF).

ADF is the JSON tree Jira stores descriptions and comments in::

    {
        "type": "doc",
        "version": 1,
        "content": [
            {"type": "paragraph", "content": [
                {"type": "text", "text": "see "},
                {"type": "text", "text": "docs",
                 "marks": [{"type": "link", "attrs": {"href": "https://..."}}]}
            ]}
        ]
    }

Text nodes only carry a ``marks`` key when they have at least one mark, and
code blocks only carry a ``language`` attribute when one was given.
"""

from __future__ import annotations

from typing import Any

from jirabridge.converter.blocks import convert
from jirabridge.models import (
    BlockNode,
    BulletList,
    CodeBlock,
    Document,
    Heading,
    Mark,
    MarkType,
    OrderedList,
    Paragraph,
    TextRun,
)

ADF_VERSION = 1


def _mark_to_adf(mark: Mark) -> dict[str, Any]:
    if mark.type is MarkType.LINK:
        return {"type": "link", "attrs": {"href": mark.href}}
    return {"type": mark.type.value}


def runs_to_adf(runs: list[TextRun]) -> list[dict[str, Any]]:
    """Convert inline runs to ADF ``text`` nodes."""
    nodes: list[dict[str, Any]] = []
    for run in runs:
        node: dict[str, Any] = {"type": "text", "text": run.text}
        if run.marks:
            node["marks"] = [_mark_to_adf(m) for m in run.marks]
        nodes.append(node)
    return nodes


def _list_items(items: list[list[TextRun]]) -> list[dict[str, Any]]:
    return [
        {
            "type": "listItem",
            "content": [{"type": "paragraph", "content": runs_to_adf(item)}],
        }
        for item in items
    ]


def block_to_adf(block: BlockNode) -> dict[str, Any]:
    """Convert one block node to its ADF dict."""
    if isinstance(block, Paragraph):
        return {"type": "paragraph", "content": runs_to_adf(block.inline)}
    if isinstance(block, Heading):
        return {
            "type": "heading",
            "attrs": {"level": block.level},
            "content": runs_to_adf(block.inline),
        }
    if isinstance(block, BulletList):
        return {"type": "bulletList", "content": _list_items(block.items)}
    if isinstance(block, OrderedList):
        return {"type": "orderedList", "content": _list_items(block.items)}
    if isinstance(block, CodeBlock):
        return {
            "type": "codeBlock",
            "attrs": {"language": block.language} if block.language else {},
            "content": [{"type": "text", "text": block.code}],
        }
    raise TypeError(f"Unsupported block node: {type(block).__name__}")


def to_adf(document: Document) -> dict[str, Any]:
    """Convert a :class:`Document` to a complete ADF ``doc`` dict."""
    return {
        "type": "doc",
        "version": ADF_VERSION,
        "content": [block_to_adf(block) for block in document.blocks],
    }


def markdown_to_adf(text: str) -> dict[str, Any]:
    """Convert Markdown *text* straight to an ADF ``doc`` dict.

    This is the value handed to Jira as an issue ``description`` or a
    comment ``body``.
    """
    return to_adf(convert(text))
