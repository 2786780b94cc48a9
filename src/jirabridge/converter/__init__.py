"""Markdown ↔ Jira rich-text conversion.

Public API:

- :func:`tokenize`: one line of Markdown → inline :class:`TextRun` list.
- :class:`BlockStructurer` / :func:`convert`: Markdown text → :class:`Document`.
- :func:`to_adf`: :class:`Document` → Atlassian Document Format dict.
- :func:`markdown_to_adf`: Markdown text → ADF dict in one step.
- :func:`adf_to_plain_text`: stored ADF → readable plain text.
- :func:`extract_description`: description/comment body of any shape → text.
"""

from jirabridge.converter.adf import block_to_adf, markdown_to_adf, runs_to_adf, to_adf
from jirabridge.converter.blocks import BlockStructurer, convert
from jirabridge.converter.inline import plain_text, tokenize
from jirabridge.converter.plain_text import (
    adf_to_plain_text,
    extract_description,
    is_adf_document,
)

__all__ = [
    "BlockStructurer",
    "adf_to_plain_text",
    "block_to_adf",
    "convert",
    "extract_description",
    "is_adf_document",
    "markdown_to_adf",
    "plain_text",
    "runs_to_adf",
    "to_adf",
    "tokenize",
]
