"""Data models for jirabridge.

Two families of types live here:

* The **document tree** produced by the Markdown converter:
  :class:`TextRun` leaves carrying :class:`Mark` attributes, the block
  variants (:class:`Paragraph`, :class:`Heading`, :class:`BulletList`,
  :class:`OrderedList`, :class:`CodeBlock`) and the :class:`Document` that
  holds them.  These are transient values created per conversion call.
* **Custom-field values** decoded from Jira issue payloads into a closed
  tagged variant (see :mod:`jirabridge.fields`).

All types are plain dataclasses with no behaviour beyond small accessors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


# ---------------------------------------------------------------------------
# Inline content
# ---------------------------------------------------------------------------

class MarkType(str, Enum):
    """Formatting attributes a text run can carry."""

    STRONG = "strong"
    EM = "em"
    STRIKE = "strike"
    CODE = "code"
    LINK = "link"


@dataclass(frozen=True)
class Mark:
    """A named formatting attribute on a :class:`TextRun`.

    Attributes
    ----------
    type:
        The kind of mark.
    href:
        Link target.  Set for ``MarkType.LINK`` only.
    """

    type: MarkType
    href: str | None = None

    @classmethod
    def link(cls, href: str) -> Mark:
        return cls(MarkType.LINK, href)


STRONG = Mark(MarkType.STRONG)
EM = Mark(MarkType.EM)
STRIKE = Mark(MarkType.STRIKE)
CODE = Mark(MarkType.CODE)


@dataclass(frozen=True)
class TextRun:
    """A leaf run of text.  Plain text has an empty *marks* tuple."""

    text: str
    marks: tuple[Mark, ...] = ()


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass
class Paragraph:
    inline: list[TextRun] = field(default_factory=list)


@dataclass
class Heading:
    level: int
    inline: list[TextRun] = field(default_factory=list)


@dataclass
class BulletList:
    """Unordered list.  Each item is the inline content of one entry."""

    items: list[list[TextRun]] = field(default_factory=list)


@dataclass
class OrderedList:
    """Ordered list.  Numbering is positional; source numbers are dropped."""

    items: list[list[TextRun]] = field(default_factory=list)


@dataclass
class CodeBlock:
    """Fenced code.  *code* is the raw text with no inline marks applied."""

    code: str
    language: str | None = None


BlockNode = Union[Paragraph, Heading, BulletList, OrderedList, CodeBlock]


@dataclass
class Document:
    """Ordered block sequence produced by one conversion.

    A document produced by :func:`jirabridge.converter.convert` is never
    empty: input with no content yields a single empty paragraph.
    """

    blocks: list[BlockNode] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Custom field values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EmptyField:
    """A missing, null or otherwise falsy field value."""

    def plain(self) -> None:
        return None


@dataclass(frozen=True)
class DocField:
    """A rich-text field stored as an ADF document, kept as plain text."""

    text: str

    def plain(self) -> str:
        return self.text


@dataclass(frozen=True)
class OptionField:
    """A select/option object, identified by its ``value`` key."""

    value: Any

    def plain(self) -> Any:
        return self.value


@dataclass(frozen=True)
class NamedField:
    """An object identified by its ``name`` key (user, version, component)."""

    name: Any

    def plain(self) -> Any:
        return self.name


@dataclass(frozen=True)
class ListField:
    """A multi-value field; every element is decoded on its own."""

    items: tuple[FieldValue, ...]

    def plain(self) -> list[Any]:
        return [item.plain() for item in self.items]


@dataclass(frozen=True)
class ScalarField:
    """Any other value (number, string, boolean, unrecognised object)."""

    value: Any

    def plain(self) -> Any:
        return self.value


FieldValue = Union[EmptyField, DocField, OptionField, NamedField, ListField, ScalarField]
