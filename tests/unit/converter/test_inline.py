"""Tests for the inline span tokenizer (converter/inline.py)."""

import pytest

from jirabridge.converter.inline import plain_text, tokenize
from jirabridge.models import CODE, EM, STRIKE, STRONG, Mark, MarkType, TextRun


# =========================================================================
# Plain text
# =========================================================================

class TestPlainText:
    def test_plain_line_is_single_run(self):
        assert tokenize("plain text") == [TextRun("plain text")]

    def test_plain_run_has_no_marks(self):
        [run] = tokenize("plain text")
        assert run.marks == ()

    def test_empty_line(self):
        assert tokenize("") == [TextRun("")]

    def test_whitespace_preserved(self):
        assert tokenize("  indented  ") == [TextRun("  indented  ")]

    @pytest.mark.parametrize("line", [
        "a stray * star",
        "unclosed **bold",
        "half `code",
        "~single tilde~",
        "[label without link]",
        "(just parens)",
        "[label](",
    ])
    def test_unbalanced_delimiters_pass_through(self, line):
        assert tokenize(line) == [TextRun(line)]


# =========================================================================
# Single marks
# =========================================================================

class TestSingleMarks:
    def test_bold_star(self):
        assert tokenize("**bold**") == [TextRun("bold", (STRONG,))]

    def test_bold_underscore(self):
        assert tokenize("__bold__") == [TextRun("bold", (STRONG,))]

    def test_italic_star(self):
        assert tokenize("*it*") == [TextRun("it", (EM,))]

    def test_italic_underscore(self):
        assert tokenize("_it_") == [TextRun("it", (EM,))]

    def test_strikethrough(self):
        assert tokenize("~~gone~~") == [TextRun("gone", (STRIKE,))]

    def test_inline_code(self):
        assert tokenize("`x = 1`") == [TextRun("x = 1", (CODE,))]

    def test_link(self):
        [run] = tokenize("[go](http://example.com)")
        assert run.text == "go"
        assert run.marks == (Mark(MarkType.LINK, "http://example.com"),)

    def test_link_mark_carries_href(self):
        [run] = tokenize("[docs](https://x.y/z?a=1)")
        [mark] = run.marks
        assert mark.type is MarkType.LINK
        assert mark.href == "https://x.y/z?a=1"

    def test_empty_code_span(self):
        assert tokenize("``") == [TextRun("", (CODE,))]


# =========================================================================
# Mixed lines
# =========================================================================

class TestMixedRuns:
    def test_surrounding_plain_text(self):
        assert tokenize("a **b** c") == [
            TextRun("a "),
            TextRun("b", (STRONG,)),
            TextRun(" c"),
        ]

    def test_adjacent_spans_have_no_empty_gap(self):
        assert tokenize("**a**_b_") == [
            TextRun("a", (STRONG,)),
            TextRun("b", (EM,)),
        ]

    def test_order_is_preserved(self):
        runs = tokenize("see [docs](u), run `make`, ~~skip~~ *now*")
        assert [r.text for r in runs] == [
            "see ", "docs", ", run ", "make", ", ", "skip", " ", "now",
        ]
        assert [r.marks for r in runs] == [
            (), (Mark.link("u"),), (), (CODE,), (), (STRIKE,), (), (EM,),
        ]

    def test_trailing_text_after_last_match(self):
        runs = tokenize("`x` tail")
        assert runs[-1] == TextRun(" tail")


# =========================================================================
# Priority and non-nesting
# =========================================================================

class TestPriority:
    def test_double_star_is_bold_not_two_italics(self):
        assert tokenize("**x**") == [TextRun("x", (STRONG,))]

    def test_code_content_is_verbatim(self):
        assert tokenize("`**not bold**`") == [TextRun("**not bold**", (CODE,))]

    def test_link_label_is_not_rescanned(self):
        [run] = tokenize("[**label**](https://x.y)")
        assert run.text == "**label**"
        assert run.marks == (Mark.link("https://x.y"),)

    def test_bold_inner_text_is_literal(self):
        assert tokenize("__a `b` c__") == [TextRun("a `b` c", (STRONG,))]

    def test_strike_inner_text_is_literal(self):
        assert tokenize("~~a _b_ c~~") == [TextRun("a _b_ c", (STRIKE,))]

    def test_each_run_has_at_most_one_mark(self):
        runs = tokenize("**a** *b* `c` ~~d~~ [e](f) __g__ _h_")
        assert all(len(r.marks) <= 1 for r in runs)

    def test_underscores_inside_words_are_emphasis(self):
        assert tokenize("snake_case_name") == [
            TextRun("snake"),
            TextRun("case", (EM,)),
            TextRun("name"),
        ]


# =========================================================================
# plain_text
# =========================================================================

class TestPlainTextHelper:
    def test_strips_recognised_delimiters(self):
        line = "Fix **crash** in `parser` ([PR](https://x.y/1))"
        assert plain_text(tokenize(line)) == "Fix crash in parser (PR)"

    def test_plain_line_round_trips(self):
        assert plain_text(tokenize("no markup here")) == "no markup here"

    def test_empty(self):
        assert plain_text([]) == ""
