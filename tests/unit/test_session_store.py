"""Unit tests for SessionStore."""

import logging

import pytest
import pytest_check as check

from gemini_chat.chat.store import SessionNotFoundError, SessionStore, derive_title
from gemini_chat.constants import WELCOME_TEXT
from gemini_chat.models.chat import Message, Role


class TestCreateSession:
    """Tests for session creation."""

    def test_new_session_on_empty_store(self, store: SessionStore) -> None:
        """First session has the welcome message, no title, and is active."""
        session = store.create_session()

        check.equal(len(store), 1)
        check.equal(store.active_session_id, session.id)
        check.equal(session.title, "")
        check.equal(len(session.messages), 1)
        check.equal(session.messages[0].role, Role.MODEL)
        check.equal(session.messages[0].content, WELCOME_TEXT)
        check.is_false(session.messages[0].is_streaming)

    def test_new_sessions_are_prepended(self, store: SessionStore) -> None:
        first = store.create_session()
        second = store.create_session()

        assert [s.id for s in store.sessions] == [second.id, first.id]
        assert store.active_session_id == second.id

    def test_welcome_messages_get_fresh_ids(self, store: SessionStore) -> None:
        first = store.create_session()
        second = store.create_session()

        assert first.messages[0].id != second.messages[0].id


class TestSelectAndDelete:
    """Tests for the active pointer across select and delete."""

    def test_select_switches_active_without_reordering(self, store: SessionStore) -> None:
        older = store.create_session()
        newer = store.create_session()

        store.select(older.id)

        check.equal(store.active_session_id, older.id)
        check.equal([s.id for s in store.sessions], [newer.id, older.id])

    def test_select_unknown_raises(self, store: SessionStore) -> None:
        with pytest.raises(SessionNotFoundError):
            store.select("missing")

    def test_delete_active_falls_back_to_first(self, store: SessionStore) -> None:
        """Deleting the active session activates the first remaining one."""
        a = store.create_session()
        b = store.create_session()
        c = store.create_session()
        store.select(b.id)

        store.delete(b.id)

        check.equal([s.id for s in store.sessions], [c.id, a.id])
        check.equal(store.active_session_id, c.id)

    def test_delete_inactive_keeps_pointer(self, store: SessionStore) -> None:
        a = store.create_session()
        b = store.create_session()

        store.delete(a.id)

        assert store.active_session_id == b.id

    def test_delete_last_session_clears_pointer(self, store: SessionStore) -> None:
        only = store.create_session()

        store.delete(only.id)

        check.equal(len(store), 0)
        check.is_none(store.active_session_id)
        check.is_none(store.active_session)

    def test_delete_unknown_raises(self, store: SessionStore) -> None:
        with pytest.raises(SessionNotFoundError):
            store.delete("missing")

    def test_clear_empties_store(self, store: SessionStore) -> None:
        store.create_session()
        store.create_session()

        store.clear()

        check.equal(store.sessions, [])
        check.is_none(store.active_session_id)


class TestReplaceMessages:
    """Tests for message-list replacement and its invariants."""

    def test_replace_bumps_updated_at(self, store: SessionStore) -> None:
        session = store.create_session()
        created_at = session.created_at
        previous_update = session.updated_at

        store.replace_messages(
            session.id, [*session.messages, Message(role=Role.USER, content="Hi")]
        )

        check.equal(len(session.messages), 2)
        check.greater_equal(session.updated_at, previous_update)
        check.equal(session.created_at, created_at)

    def test_replace_on_removed_session_is_dropped(self, store: SessionStore) -> None:
        session = store.create_session()
        store.delete(session.id)

        assert store.replace_messages(session.id, [Message(role=Role.USER, content="x")]) is False

    def test_rejects_empty_message_list(self, store: SessionStore) -> None:
        session = store.create_session()

        with pytest.raises(ValueError, match="at least one"):
            store.replace_messages(session.id, [])

    def test_rejects_streaming_message_before_the_end(self, store: SessionStore) -> None:
        session = store.create_session()
        streaming = Message(role=Role.MODEL, is_streaming=True)

        with pytest.raises(ValueError, match="last message"):
            store.replace_messages(
                session.id, [streaming, Message(role=Role.USER, content="Hi")]
            )


class TestTitles:
    """Tests for one-time title derivation."""

    def test_title_set_once(self, store: SessionStore) -> None:
        """A second title attempt leaves the first title in place."""
        session = store.create_session()

        check.is_true(store.set_title_once(session.id, "First question"))
        check.is_false(store.set_title_once(session.id, "Second question"))
        check.equal(session.title, "First question")

    def test_long_title_is_truncated(self) -> None:
        text = "x" * 60

        assert derive_title(text) == "x" * 50 + "..."

    def test_title_at_limit_is_kept(self) -> None:
        assert derive_title("y" * 50) == "y" * 50


class TestListeners:
    """Tests for change notification."""

    def test_listener_called_on_mutations(self, store: SessionStore) -> None:
        calls: list[int] = []
        store.add_listener(lambda s: calls.append(len(s)))

        session = store.create_session()
        store.select(session.id)
        store.delete(session.id)

        assert calls == [1, 1, 0]

    def test_removed_listener_is_not_called(self, store: SessionStore) -> None:
        calls: list[int] = []

        def listener(s: SessionStore) -> None:
            calls.append(len(s))

        store.add_listener(listener)
        store.remove_listener(listener)
        store.create_session()

        assert calls == []

    def test_failing_listener_does_not_break_store(
        self, store: SessionStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        def broken(_: SessionStore) -> None:
            raise RuntimeError("view gone")

        store.add_listener(broken)

        with caplog.at_level(logging.ERROR):
            session = store.create_session()

        check.is_in(session.id, store)
        check.is_in("listener failed", caplog.text)
