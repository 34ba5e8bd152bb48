"""Unit tests for the line-oriented content formatter."""

import pytest_check as check

from gemini_chat.parsing.content_formatter import (
    BlockType,
    ContentBlock,
    classify_line,
    format_content,
)


def blocks(text: str) -> list[tuple[BlockType, str]]:
    return [(block.type, block.text) for block in format_content(text)]


class TestLineClassification:
    """Tests for single-line classification."""

    def test_plain_line_is_paragraph(self) -> None:
        """Unmarked text renders as a paragraph."""
        assert blocks("Just some text") == [(BlockType.PARAGRAPH, "Just some text")]

    def test_bold_line_is_heading(self) -> None:
        """A line wrapped in ** renders as a heading without delimiters."""
        assert blocks("**Summary**") == [(BlockType.HEADING, "Summary")]

    def test_inline_bold_is_not_special(self) -> None:
        """Bold inside a line is left alone."""
        assert blocks("Some **bold** text") == [(BlockType.PARAGRAPH, "Some **bold** text")]

    def test_dash_prefix_is_unordered_item(self) -> None:
        """'- ' prefix renders as an unordered item with the prefix removed."""
        assert blocks("- apples") == [(BlockType.UNORDERED_ITEM, "apples")]

    def test_dash_without_space_is_paragraph(self) -> None:
        """A dash without the following space is plain text."""
        assert blocks("-apples") == [(BlockType.PARAGRAPH, "-apples")]

    def test_numbered_line_is_ordered_item(self) -> None:
        """Leading number, dot and whitespace are stripped."""
        check.equal(blocks("1. first"), [(BlockType.ORDERED_ITEM, "first")])
        check.equal(blocks("12.   twelfth"), [(BlockType.ORDERED_ITEM, "twelfth")])
        check.equal(blocks("3.no space"), [(BlockType.ORDERED_ITEM, "no space")])

    def test_blank_and_whitespace_lines_are_breaks(self) -> None:
        """Empty and whitespace-only lines render as line breaks."""
        assert blocks("a\n\n   \nb") == [
            (BlockType.PARAGRAPH, "a"),
            (BlockType.BREAK, ""),
            (BlockType.BREAK, ""),
            (BlockType.PARAGRAPH, "b"),
        ]

    def test_empty_content_is_single_break(self) -> None:
        assert blocks("") == [(BlockType.BREAK, "")]

    def test_bare_bold_delimiter_is_empty_heading(self) -> None:
        assert blocks("**") == [(BlockType.HEADING, "")]


class TestCodeFences:
    """Tests for fence handling with one line of lookback."""

    def test_fence_lines_are_suppressed(self) -> None:
        """Delimiter lines produce no block."""
        assert classify_line("```python", None) is None
        assert classify_line("```", "code") is None

    def test_line_after_fence_is_code(self) -> None:
        """Only the line directly after a fence becomes code."""
        assert blocks("```python\nprint('hi')\nsecond line\n```") == [
            (BlockType.CODE, "print('hi')"),
            (BlockType.PARAGRAPH, "second line"),
        ]

    def test_fence_adjacency_beats_other_rules(self) -> None:
        """A bold, list or blank line after a fence is still code."""
        check.equal(blocks("```\n**bold**"), [(BlockType.CODE, "**bold**")])
        check.equal(blocks("```\n- item"), [(BlockType.CODE, "- item")])
        check.equal(blocks("```\n1. step"), [(BlockType.CODE, "1. step")])
        check.equal(blocks("```\n"), [(BlockType.CODE, "")])

    def test_line_after_closing_fence_is_code(self) -> None:
        """Closing fences count as fences for the following line."""
        assert blocks("```\nx = 1\n```\nafter") == [
            (BlockType.CODE, "x = 1"),
            (BlockType.CODE, "after"),
        ]


class TestFormattedContent:
    """Tests for the lazy block sequence."""

    def test_iteration_is_restartable(self) -> None:
        """Iterating twice yields the same blocks."""
        formatted = format_content("**Title**\n- one\n- two")

        first = list(formatted)
        second = list(formatted)

        check.equal(first, second)
        check.equal(len(first), 3)

    def test_blocks_are_typed_models(self) -> None:
        block = next(iter(format_content("hello")))

        assert isinstance(block, ContentBlock)
        assert block.type is BlockType.PARAGRAPH

    def test_mixed_reply(self) -> None:
        """A typical model reply maps to the expected block sequence."""
        reply = "**Steps**\n1. Install\n2. Run\n\nDone - enjoy!"

        assert blocks(reply) == [
            (BlockType.HEADING, "Steps"),
            (BlockType.ORDERED_ITEM, "Install"),
            (BlockType.ORDERED_ITEM, "Run"),
            (BlockType.BREAK, ""),
            (BlockType.PARAGRAPH, "Done - enjoy!"),
        ]
