"""Inline span tokenizer: one line of Markdown to a list of :class:`TextRun`.

A single combined pattern is scanned left to right.  Its alternatives are
tried in priority order at each position, so the first one that matches
wins:

1. link ``[label](href)``
2. inline code ```code```
3. bold ``**text**`` / ``__text__``
4. strikethrough ``~~text~~``
5. italic ``*text*`` / ``_text_``

Matched spans never nest or overlap; the inner text of a span is taken
verbatim.  Unmatched text, including stray delimiters, passes through as
plain runs.
"""

from __future__ import annotations

import re

from jirabridge.models import CODE, EM, STRIKE, STRONG, Mark, TextRun

_INLINE_RE = re.compile(
    r"\[(?P<label>[^\]]+)\]\((?P<href>[^)]+)\)"
    r"|`(?P<code>[^`]*)`"
    r"|\*\*(?P<bold_star>[^*]+)\*\*"
    r"|__(?P<bold_under>[^_]+)__"
    r"|~~(?P<strike>[^~]+)~~"
    r"|\*(?P<em_star>[^*]+)\*"
    r"|_(?P<em_under>[^_]+)_"
)

# Group name -> mark for the single-group alternatives.
_GROUP_MARKS: tuple[tuple[str, Mark], ...] = (
    ("code", CODE),
    ("bold_star", STRONG),
    ("bold_under", STRONG),
    ("strike", STRIKE),
    ("em_star", EM),
    ("em_under", EM),
)


def _span_run(match: re.Match[str]) -> TextRun:
    """Build the run for one matched span."""
    if match.group("label") is not None:
        return TextRun(match.group("label"), (Mark.link(match.group("href")),))
    for group, mark in _GROUP_MARKS:
        text = match.group(group)
        if text is not None:
            return TextRun(text, (mark,))
    # Every alternative sets exactly one of the groups above.
    raise AssertionError(f"unhandled inline match {match.group(0)!r}")


def tokenize(line: str) -> list[TextRun]:
    """Split *line* into plain and marked text runs.

    Parameters
    ----------
    line:
        A single line of text (no newline handling is performed).

    Returns
    -------
    list[TextRun]
        Runs in source order.  When nothing matches the result is exactly
        one plain run holding *line* unchanged, even for an empty string.

    Examples
    --------
    >>> tokenize("**bold**")
    [TextRun(text='bold', marks=(Mark(type=<MarkType.STRONG: 'strong'>, href=None),))]
    >>> tokenize("plain text")
    [TextRun(text='plain text', marks=())]
    """
    runs: list[TextRun] = []
    pos = 0

    for match in _INLINE_RE.finditer(line):
        if match.start() > pos:
            runs.append(TextRun(line[pos:match.start()]))
        runs.append(_span_run(match))
        pos = match.end()

    if pos < len(line):
        runs.append(TextRun(line[pos:]))

    if not runs:
        runs.append(TextRun(line))
    return runs


def plain_text(runs: list[TextRun]) -> str:
    """Concatenate the text of *runs*, dropping all marks."""
    return "".join(run.text for run in runs)
