"""Content formatting utilities for message display.

Transforms raw model output into typed display blocks through a
line-by-line classifier.

Responsibilities:
    - Code lines following a fence delimiter
    - Bold heading lines
    - Unordered and ordered list items
    - Line breaks and plain paragraphs

Output is presentation-neutral; the UI decides how each block is drawn.
"""

from gemini_chat.parsing.content_formatter import (
    BlockType,
    ContentBlock,
    FormattedContent,
    format_content,
)

__all__ = ["BlockType", "ContentBlock", "FormattedContent", "format_content"]
