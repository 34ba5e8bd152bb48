"""Unit tests for the chat page rendering helpers."""

from datetime import UTC, datetime

import pytest_check as check

from gemini_chat.constants import MAX_MESSAGE_LENGTH
from gemini_chat.models.chat import ChatSession, Message, Role
from gemini_chat.ui.chat_page import (
    content_to_html,
    counter_text,
    format_date,
    format_time,
    is_untouched,
    session_label,
)


class TestContentToHtml:
    """Tests for reply rendering."""

    def test_heading_and_list(self) -> None:
        rendered = content_to_html("**Steps**\n- one")

        check.is_in("<strong", rendered)
        check.is_in(">Steps</strong>", rendered)
        check.is_in(">one</li>", rendered)
        check.is_not_in("**", rendered)

    def test_code_line_after_fence(self) -> None:
        rendered = content_to_html("```python\nprint(1)\n```")

        assert "<code>print(1)</code>" in rendered
        assert "```" not in rendered

    def test_text_is_escaped(self) -> None:
        """Model output cannot inject markup."""
        rendered = content_to_html("<script>alert(1)</script>")

        check.is_not_in("<script>", rendered)
        check.is_in("&lt;script&gt;", rendered)

    def test_blank_line_is_break(self) -> None:
        assert content_to_html("a\n\nb").count("<br>") == 1


def test_counter_text() -> None:
    assert counter_text("hello") == f"5/{MAX_MESSAGE_LENGTH}"


def test_format_time_is_twelve_hour_clock() -> None:
    formatted = format_time(datetime(2024, 1, 1, 15, 4, tzinfo=UTC))

    assert formatted.endswith(("AM", "PM"))
    assert len(formatted) == len("03:04 PM")


def test_is_untouched() -> None:
    session = ChatSession(messages=[Message(role=Role.MODEL, content="Welcome")])

    check.is_true(is_untouched(None))
    check.is_true(is_untouched(session))
    session.messages.append(Message(role=Role.USER, content="Hi"))
    check.is_false(is_untouched(session))


class TestSessionLabel:
    """Tests for sidebar labels."""

    def test_title_wins(self) -> None:
        session = ChatSession(
            title="Trip plans",
            messages=[Message(role=Role.USER, content="Where should I go?")],
        )

        assert session_label(session) == "Trip plans"

    def test_untitled_falls_back_to_first_user_message(self) -> None:
        session = ChatSession(
            messages=[
                Message(role=Role.MODEL, content="Welcome"),
                Message(role=Role.USER, content="a" * 40),
                Message(role=Role.USER, content="later"),
            ]
        )

        assert session_label(session) == "a" * 30 + "..."

    def test_short_first_message_is_kept(self) -> None:
        session = ChatSession(messages=[Message(role=Role.USER, content="Hi")])

        assert session_label(session) == "Hi"

    def test_untitled_without_user_message(self) -> None:
        session = ChatSession(messages=[Message(role=Role.MODEL, content="Welcome")])

        assert session_label(session) == "New chat"


def test_format_date_is_month_and_day() -> None:
    # local timezone may shift the day by one
    formatted = format_date(datetime(2024, 3, 5, 12, 0, tzinfo=UTC))

    assert formatted in {"Mar 4", "Mar 5", "Mar 6"}
    assert formatted.startswith("Mar ")
