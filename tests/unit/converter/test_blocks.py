"""Tests for the Markdown block structurer (converter/blocks.py)."""

import pytest

from jirabridge.converter.blocks import BlockStructurer, convert
from jirabridge.models import (
    EM,
    STRONG,
    BulletList,
    CodeBlock,
    Document,
    Heading,
    OrderedList,
    Paragraph,
    TextRun,
)


def _types(doc: Document) -> list[str]:
    return [type(b).__name__ for b in doc.blocks]


def _item_texts(block) -> list[str]:
    return ["".join(r.text for r in item) for item in block.items]


# =========================================================================
# Empty input
# =========================================================================

class TestEmptyInput:
    def test_empty_string_gives_one_empty_paragraph(self):
        doc = convert("")
        assert doc.blocks == [Paragraph(inline=[])]

    @pytest.mark.parametrize("text", ["\n", "\n\n\n", "   ", " \t \n  "])
    def test_blank_only_input(self, text):
        assert convert(text).blocks == [Paragraph(inline=[])]

    def test_lone_open_fence_gives_empty_paragraph(self):
        assert convert("```").blocks == [Paragraph(inline=[])]

    def test_empty_closed_fence_is_a_code_block(self):
        assert convert("```\n```").blocks == [CodeBlock(code="", language=None)]


# =========================================================================
# Paragraphs
# =========================================================================

class TestParagraphs:
    def test_single_line(self):
        assert convert("hello").blocks == [Paragraph(inline=[TextRun("hello")])]

    def test_each_line_is_its_own_paragraph(self):
        doc = convert("one\ntwo")
        assert doc.blocks == [
            Paragraph(inline=[TextRun("one")]),
            Paragraph(inline=[TextRun("two")]),
        ]

    def test_blank_lines_produce_no_blocks(self):
        doc = convert("one\n\n\ntwo")
        assert _types(doc) == ["Paragraph", "Paragraph"]

    def test_inline_marks_applied(self):
        doc = convert("a **b**")
        assert doc.blocks == [Paragraph(inline=[TextRun("a "), TextRun("b", (STRONG,))])]

    def test_leading_whitespace_kept(self):
        [para] = convert("   indented").blocks
        assert para.inline == [TextRun("   indented")]


# =========================================================================
# Headings
# =========================================================================

class TestHeadings:
    def test_title_then_body(self):
        doc = convert("# Title\n\nBody")
        assert doc.blocks == [
            Heading(level=1, inline=[TextRun("Title")]),
            Paragraph(inline=[TextRun("Body")]),
        ]

    @pytest.mark.parametrize("level", [1, 2, 3, 4, 5, 6])
    def test_levels(self, level):
        [heading] = convert("#" * level + " H").blocks
        assert heading == Heading(level=level, inline=[TextRun("H")])

    def test_seven_hashes_is_paragraph(self):
        assert _types(convert("####### too deep")) == ["Paragraph"]

    def test_whitespace_after_hashes_required(self):
        assert _types(convert("#hashtag")) == ["Paragraph"]

    def test_hash_with_no_content_is_paragraph(self):
        assert _types(convert("# ")) == ["Paragraph"]

    def test_indented_hash_is_paragraph(self):
        assert _types(convert("  # not a heading")) == ["Paragraph"]

    def test_heading_content_is_tokenized(self):
        [heading] = convert("## *Why* it broke").blocks
        assert heading.inline == [TextRun("Why", (EM,)), TextRun(" it broke")]


# =========================================================================
# Lists
# =========================================================================

class TestBulletLists:
    def test_two_items_merge(self):
        doc = convert("- a\n- b")
        assert len(doc.blocks) == 1
        assert isinstance(doc.blocks[0], BulletList)
        assert _item_texts(doc.blocks[0]) == ["a", "b"]

    @pytest.mark.parametrize("marker", ["-", "*", "•"])
    def test_markers(self, marker):
        [block] = convert(f"{marker} item").blocks
        assert block == BulletList(items=[[TextRun("item")]])

    def test_mixed_markers_merge(self):
        [block] = convert("- a\n* b\n• c").blocks
        assert _item_texts(block) == ["a", "b", "c"]

    def test_indented_item_is_bullet(self):
        [block] = convert("   - nested looking").blocks
        assert _item_texts(block) == ["nested looking"]

    def test_blank_line_does_not_split_list(self):
        [block] = convert("- a\n\n- b").blocks
        assert _item_texts(block) == ["a", "b"]

    def test_paragraph_between_starts_new_list(self):
        doc = convert("- a\ntext\n- b")
        assert _types(doc) == ["BulletList", "Paragraph", "BulletList"]
        assert _item_texts(doc.blocks[0]) == ["a"]
        assert _item_texts(doc.blocks[2]) == ["b"]

    def test_item_text_is_tokenized(self):
        [block] = convert("- **done**").blocks
        assert block.items == [[TextRun("done", (STRONG,))]]

    def test_marker_without_space_is_paragraph(self):
        assert _types(convert("-dash")) == ["Paragraph"]

    def test_bold_line_is_not_a_bullet(self):
        assert _types(convert("**bold** start")) == ["Paragraph"]


class TestOrderedLists:
    def test_items_merge_and_numbers_dropped(self):
        [block] = convert("1. first\n2. second\n7. third").blocks
        assert isinstance(block, OrderedList)
        assert _item_texts(block) == ["first", "second", "third"]

    def test_multi_digit_marker(self):
        [block] = convert("10. ten").blocks
        assert _item_texts(block) == ["ten"]

    def test_decimal_number_is_paragraph(self):
        assert _types(convert("1.5 release")) == ["Paragraph"]

    def test_bullet_then_ordered_are_separate_lists(self):
        doc = convert("- a\n1. b\n- c")
        assert _types(doc) == ["BulletList", "OrderedList", "BulletList"]

    def test_heading_between_starts_new_list(self):
        doc = convert("1. a\n# H\n1. b")
        assert _types(doc) == ["OrderedList", "Heading", "OrderedList"]


# =========================================================================
# Code blocks
# =========================================================================

class TestCodeBlocks:
    def test_language_and_code(self):
        assert convert("```js\ncode()\n```").blocks == [CodeBlock(code="code()", language="js")]

    def test_no_language(self):
        [block] = convert("```\nx\n```").blocks
        assert block.language is None

    def test_lines_kept_verbatim(self):
        text = "```python\ndef f():\n    return **kw\n\n# comment\n```"
        [block] = convert(text).blocks
        assert block.code == "def f():\n    return **kw\n\n# comment"

    def test_language_tag_is_trimmed(self):
        [block] = convert("```  sql  \nselect 1\n```").blocks
        assert block.language == "sql"

    def test_indented_fence(self):
        [block] = convert("  ```\nx\n  ```").blocks
        assert block == CodeBlock(code="x", language=None)

    def test_unterminated_fence_is_flushed(self):
        assert convert("```\nx").blocks == [CodeBlock(code="x", language=None)]

    def test_unterminated_fence_keeps_all_lines(self):
        [block] = convert("```sh\nmake\nmake test").blocks
        assert block == CodeBlock(code="make\nmake test", language="sh")

    def test_blocks_around_code(self):
        doc = convert("Intro\n```\n- not a list\n```\n- a list")
        assert _types(doc) == ["Paragraph", "CodeBlock", "BulletList"]
        assert doc.blocks[1].code == "- not a list"

    def test_code_block_breaks_list(self):
        doc = convert("- a\n```\nx\n```\n- b")
        assert _types(doc) == ["BulletList", "CodeBlock", "BulletList"]


# =========================================================================
# Structurer instances
# =========================================================================

class TestStructurer:
    def test_instance_matches_module_function(self, structurer):
        text = "# T\n- a\n1. b\n```\nc\n```\nd"
        assert structurer.convert(text) == convert(text)

    def test_no_state_leaks_between_calls(self):
        structurer = BlockStructurer()
        structurer.convert("```\nunterminated")
        assert structurer.convert("plain").blocks == [Paragraph(inline=[TextRun("plain")])]

    def test_list_not_merged_across_calls(self):
        structurer = BlockStructurer()
        structurer.convert("- a")
        [block] = structurer.convert("- b").blocks
        assert _item_texts(block) == ["b"]
