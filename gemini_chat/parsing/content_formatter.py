"""Line-oriented formatter turning message text into display blocks.

A best-effort single-pass heuristic, not a markdown parser. Each line is
classified with one lookback slot (the previous line), in this order:
fence delimiter, line after a fence, bold line, unordered item, ordered
item, blank line, paragraph.
"""

import re
from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict

# Constants
FENCE_DELIMITER = "```"
BOLD_DELIMITER = "**"
UNORDERED_PREFIX = "- "
_ORDERED_PATTERN = re.compile(r"^\d+\.")
_ORDERED_PREFIX = re.compile(r"^\d+\.\s*")


class BlockType(str, Enum):
    """Kinds of display block."""

    PARAGRAPH = "paragraph"
    HEADING = "heading"
    UNORDERED_ITEM = "unordered_item"
    ORDERED_ITEM = "ordered_item"
    CODE = "code"
    BREAK = "break"


class ContentBlock(BaseModel):
    """A single rendered line.

    Attributes:
        type: How the line should be displayed.
        text: Line text with any markup prefix or delimiters removed.
    """

    model_config = ConfigDict(frozen=True)

    type: BlockType
    text: str = ""


def classify_line(line: str, previous: str | None) -> ContentBlock | None:
    """Classify one line given the line before it.

    Args:
        line: The line to classify.
        previous: The preceding line, or None for the first line.

    Returns:
        The display block, or None for suppressed fence delimiters.
    """
    if line.startswith(FENCE_DELIMITER):
        return None
    if previous is not None and previous.startswith(FENCE_DELIMITER):
        return ContentBlock(type=BlockType.CODE, text=line)
    if line.startswith(BOLD_DELIMITER) and line.endswith(BOLD_DELIMITER):
        return ContentBlock(type=BlockType.HEADING, text=line[2:-2])
    if line.startswith(UNORDERED_PREFIX):
        return ContentBlock(type=BlockType.UNORDERED_ITEM, text=line[len(UNORDERED_PREFIX) :])
    if _ORDERED_PATTERN.match(line):
        return ContentBlock(type=BlockType.ORDERED_ITEM, text=_ORDERED_PREFIX.sub("", line, count=1))
    if line.strip() == "":
        return ContentBlock(type=BlockType.BREAK)
    return ContentBlock(type=BlockType.PARAGRAPH, text=line)


class FormattedContent:
    """Lazy, restartable sequence of blocks for a piece of text.

    Every iteration rescans the text from the start.
    """

    def __init__(self, content: str) -> None:
        self._content = content

    def __iter__(self) -> Iterator[ContentBlock]:
        previous: str | None = None
        for line in self._content.split("\n"):
            block = classify_line(line, previous)
            previous = line
            if block is not None:
                yield block

    def __repr__(self) -> str:
        return f"FormattedContent({self._content!r})"


def format_content(content: str) -> FormattedContent:
    """Format raw message text into display blocks.

    Args:
        content: Raw message text.

    Returns:
        An iterable of ContentBlock values; safe to iterate more than once.
    """
    return FormattedContent(content)
