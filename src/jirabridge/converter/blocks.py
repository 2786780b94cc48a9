"""Block structurer: Markdown text to a :class:`Document`.

The input is processed one line at a time by a small state machine.  Each
line is classified, in order, as a code fence, a line inside an open code
block, a blank line, a heading, a bullet item, an ordered item, or a plain
paragraph.  Consecutive list items of the same kind merge into one list
node; anything in between (other than blank lines) starts a new list.

Handled block types:

- ``# heading`` (levels 1-6) -> :class:`Heading`
- ``- item`` / ``* item`` / ``• item`` -> :class:`BulletList`
- ``1. item`` -> :class:`OrderedList`
- fenced code with optional language -> :class:`CodeBlock`
- everything else -> :class:`Paragraph`
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from jirabridge.converter.inline import tokenize
from jirabridge.models import (
    BlockNode,
    BulletList,
    CodeBlock,
    Document,
    Heading,
    OrderedList,
    Paragraph,
)

_FENCE = "```"
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_BULLET_RE = re.compile(r"^[-*•]\s")
_ORDERED_RE = re.compile(r"^[0-9]+\.\s")


@dataclass
class _ParseState:
    """Mutable accumulator owned by a single :meth:`BlockStructurer.convert` call."""

    blocks: list[BlockNode] = field(default_factory=list)
    in_code_block: bool = False
    code_buffer: list[str] = field(default_factory=list)
    code_language: str = ""

    def open_code(self, language: str) -> None:
        self.in_code_block = True
        self.code_language = language
        self.code_buffer = []

    def close_code(self) -> None:
        self.blocks.append(
            CodeBlock(
                code="\n".join(self.code_buffer),
                language=self.code_language or None,
            )
        )
        self.in_code_block = False
        self.code_buffer = []
        self.code_language = ""


class BlockStructurer:
    """Convert Markdown text into a block-level :class:`Document`.

    The structurer holds no state between calls; every :meth:`convert`
    builds and discards its own :class:`_ParseState`, so a single instance
    may be shared freely.

    Examples
    --------
    >>> doc = BlockStructurer().convert("# Title\\n\\nBody")
    >>> [type(b).__name__ for b in doc.blocks]
    ['Heading', 'Paragraph']
    """

    def convert(self, text: str) -> Document:
        """Convert *text* to a :class:`Document`.

        Never raises for string input.  Blank lines produce no blocks, an
        unterminated code fence is flushed at end of input, and text that
        yields no blocks at all becomes a single empty paragraph.
        """
        state = _ParseState()

        for line in text.split("\n"):
            self._handle_line(state, line)

        if state.in_code_block and state.code_buffer:
            state.close_code()

        if not state.blocks:
            return Document(blocks=[Paragraph(inline=[])])
        return Document(blocks=state.blocks)

    # ------------------------------------------------------------------
    # Line dispatch
    # ------------------------------------------------------------------

    def _handle_line(self, state: _ParseState, line: str) -> None:
        stripped = line.strip()

        if stripped.startswith(_FENCE):
            if state.in_code_block:
                state.close_code()
            else:
                state.open_code(stripped[len(_FENCE):].strip())
            return

        if state.in_code_block:
            state.code_buffer.append(line)
            return

        if not stripped:
            return

        heading = _HEADING_RE.match(line)
        if heading:
            state.blocks.append(
                Heading(level=len(heading.group(1)), inline=tokenize(heading.group(2)))
            )
            return

        if _BULLET_RE.match(stripped):
            self._add_list_item(state, BulletList, stripped[2:])
            return

        if _ORDERED_RE.match(stripped):
            self._add_list_item(state, OrderedList, _ORDERED_RE.sub("", stripped, count=1))
            return

        state.blocks.append(Paragraph(inline=tokenize(line)))

    @staticmethod
    def _add_list_item(
        state: _ParseState,
        list_type: type[BulletList] | type[OrderedList],
        item_text: str,
    ) -> None:
        """Append to the previous block if it is the same list type, else start one."""
        item = tokenize(item_text)
        if state.blocks and type(state.blocks[-1]) is list_type:
            state.blocks[-1].items.append(item)  # type: ignore[union-attr]
        else:
            state.blocks.append(list_type(items=[item]))


_DEFAULT_STRUCTURER = BlockStructurer()


def convert(text: str) -> Document:
    """Convert Markdown *text* to a :class:`Document`.

    Module-level shortcut for ``BlockStructurer().convert(text)``.
    """
    return _DEFAULT_STRUCTURER.convert(text)
