"""In-memory session store.

Holds every chat session for the lifetime of its owner, in store order
(newest first), plus the active-session pointer. Nothing is persisted.
"""

import logging
from collections.abc import Callable, Sequence

from gemini_chat.constants import TITLE_MAX_LENGTH, WELCOME_TEXT
from gemini_chat.models.chat import ChatSession, Message, Role, SessionSummary, utcnow

logger = logging.getLogger(__name__)

StoreListener = Callable[["SessionStore"], None]


class SessionNotFoundError(KeyError):
    """Raised when a session id is not in the store."""


def derive_title(text: str) -> str:
    """Derive a session title from the first user message."""
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + "..."
    return text


def new_welcome_message() -> Message:
    return Message(role=Role.MODEL, content=WELCOME_TEXT)


def _check_messages(messages: Sequence[Message]) -> None:
    """Validate the message-list invariants before a replace."""
    if not messages:
        raise ValueError("A session must keep at least one message")
    if any(msg.is_streaming for msg in messages[:-1]):
        raise ValueError("Only the last message may be streaming")


class SessionStore:
    """Ordered collection of chat sessions with an active pointer.

    Listeners registered with add_listener are called after every mutation,
    so views can re-read the state they display.
    """

    def __init__(self) -> None:
        self._sessions: list[ChatSession] = []
        self._active_id: str | None = None
        self._listeners: list[StoreListener] = []

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return any(session.id == session_id for session in self._sessions)

    @property
    def sessions(self) -> list[ChatSession]:
        """Sessions in store order, newest first."""
        return list(self._sessions)

    @property
    def active_session_id(self) -> str | None:
        return self._active_id

    @property
    def active_session(self) -> ChatSession | None:
        if self._active_id is None:
            return None
        return self.find(self._active_id)

    def find(self, session_id: str) -> ChatSession | None:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    def get(self, session_id: str) -> ChatSession:
        """Return a session by id.

        Raises:
            SessionNotFoundError: If no session has this id.
        """
        session = self.find(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def summaries(self) -> list[SessionSummary]:
        return [SessionSummary.from_session(session) for session in self._sessions]

    def create_session(self) -> ChatSession:
        """Create a session seeded with the welcome message and make it active."""
        session = ChatSession(messages=[new_welcome_message()])
        self._sessions.insert(0, session)
        self._active_id = session.id
        logger.info(f"Created session {session.id}")
        self._notify()
        return session

    def select(self, session_id: str) -> ChatSession:
        session = self.get(session_id)
        self._active_id = session.id
        self._notify()
        return session

    def delete(self, session_id: str) -> ChatSession:
        """Remove a session.

        Deleting the active session activates the new first session, or
        leaves no active session when the store becomes empty.

        Raises:
            SessionNotFoundError: If no session has this id.
        """
        session = self.get(session_id)
        self._sessions.remove(session)
        if self._active_id == session_id:
            self._active_id = self._sessions[0].id if self._sessions else None
        logger.info(f"Deleted session {session_id}")
        self._notify()
        return session

    def clear(self) -> None:
        count = len(self._sessions)
        self._sessions.clear()
        self._active_id = None
        logger.info(f"Cleared {count} sessions")
        self._notify()

    def replace_messages(self, session_id: str, messages: Sequence[Message]) -> bool:
        """Replace a session's message list and bump its update time.

        Returns:
            False if the session no longer exists, True otherwise.

        Raises:
            ValueError: If the new list breaks the message invariants.
        """
        session = self.find(session_id)
        if session is None:
            logger.debug(f"Dropping update for removed session {session_id}")
            return False
        _check_messages(messages)
        session.messages = list(messages)
        session.updated_at = utcnow()
        self._notify()
        return True

    def set_title_once(self, session_id: str, text: str) -> bool:
        """Set the title from text unless the session already has one.

        Returns:
            True if the title was set by this call.
        """
        session = self.find(session_id)
        if session is None or session.title:
            return False
        session.title = derive_title(text)
        self._notify()
        return True

    def add_listener(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Session store listener failed")
