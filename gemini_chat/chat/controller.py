"""Streaming chat controller.

Drives one generation per outgoing user message through
IDLE -> SENDING -> STREAMING -> SETTLED and keeps the session store
consistent while fragments arrive.

Design notes:

1. **Acceptance before mutation** - Empty, over-length and busy sends are
   rejected with MessageRejectedError before the store is touched.

2. **Replace by reconstruction** - Every fragment rebuilds the message list
   from the history snapshot taken at send time plus a fresh copy of the
   reply. Earlier messages are never edited.

3. **Per-session in-flight markers** - A session with a generation in
   flight refuses new sends; other sessions are unaffected. A generation
   that start() opened but nobody streams must be passed to discard(),
   or its session stays busy.

4. **Errors stop here** - Backend failures are logged and turned into the
   fixed error reply. Partial text is discarded on failure, kept on
   cancellation.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from enum import Enum

from gemini_chat.chat.store import SessionStore
from gemini_chat.constants import (
    CANCELLED_TEXT,
    CONTEXT_WINDOW,
    DEFAULT_MODEL,
    DEFAULT_SYSTEM_INSTRUCTION,
    DEFAULT_TEMPERATURE,
    ERROR_TEXT,
    MAX_MESSAGE_LENGTH,
)
from gemini_chat.llm.gemini_service import GenerationClient, build_prompt, get_gemini_service
from gemini_chat.models.chat import (
    ChatSession,
    GeminiModel,
    GenerateContentRequest,
    Message,
    Role,
)

logger = logging.getLogger(__name__)


class RejectionReason(str, Enum):
    """Why a send was refused."""

    EMPTY = "empty"
    BUSY = "busy"
    TOO_LONG = "too_long"


class MessageRejectedError(Exception):
    """Raised when a message is refused before any state changes."""

    def __init__(self, reason: RejectionReason, detail: str) -> None:
        super().__init__(detail)
        self.reason = reason


class GenerationState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    SETTLED = "settled"


class SendOutcome(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass
class Generation:
    """One in-flight assistant reply.

    Attributes:
        session_id: Session receiving the reply.
        history: Messages up to and including the user message.
        reply: Latest version of the assistant message.
        request: Generation request sent to the client.
        cancel_event: Set to stop the stream before the next fragment.
        state: Position in the send lifecycle.
        outcome: How the generation settled, None until then.
    """

    session_id: str
    history: list[Message]
    reply: Message
    request: GenerateContentRequest
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event)
    state: GenerationState = GenerationState.SENDING
    outcome: SendOutcome | None = None

    @property
    def text(self) -> str:
        return self.reply.content


class ChatController:
    """Owns the session store and the request/stream lifecycle.

    Args:
        store: Session store to drive; a fresh empty store by default.
        client: Generation client; the shared Gemini service by default,
                resolved on first use.
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        client: GenerationClient | None = None,
        *,
        model: GeminiModel = DEFAULT_MODEL,
        system_instruction: str = DEFAULT_SYSTEM_INSTRUCTION,
        temperature: float = DEFAULT_TEMPERATURE,
        max_message_length: int = MAX_MESSAGE_LENGTH,
        context_window: int = CONTEXT_WINDOW,
    ) -> None:
        self.store = store if store is not None else SessionStore()
        self._client = client
        self.model = model
        self.system_instruction = system_instruction
        self.temperature = temperature
        self.max_message_length = max_message_length
        self.context_window = context_window
        self.draft = ""
        self._generations: dict[str, Generation] = {}

    @property
    def client(self) -> GenerationClient:
        if self._client is None:
            self._client = get_gemini_service()
        return self._client

    # --- session operations ---

    def new_session(self) -> ChatSession:
        return self.store.create_session()

    def select_session(self, session_id: str) -> ChatSession:
        return self.store.select(session_id)

    def delete_session(self, session_id: str) -> ChatSession:
        """Remove a session, stopping any generation running in it."""
        self.cancel(session_id)
        generation = self._generations.get(session_id)
        if generation is not None:
            self.discard(generation)
        return self.store.delete(session_id)

    def clear_all(self, confirm: bool = False) -> bool:
        """Remove every session.

        Args:
            confirm: Must be True; the call is a no-op otherwise.

        Returns:
            True if the store was cleared.
        """
        if not confirm:
            return False
        for generation in list(self._generations.values()):
            generation.cancel_event.set()
            self.discard(generation)
        self.store.clear()
        return True

    def select_model(self, model: GeminiModel) -> None:
        self.model = GeminiModel(model)

    # --- generation state ---

    def generation(self, session_id: str | None = None) -> Generation | None:
        session_id = session_id or self.store.active_session_id
        if session_id is None:
            return None
        return self._generations.get(session_id)

    def is_busy(self, session_id: str | None = None) -> bool:
        return self.generation(session_id) is not None

    def state(self, session_id: str | None = None) -> GenerationState:
        generation = self.generation(session_id)
        return generation.state if generation else GenerationState.IDLE

    def cancel(self, session_id: str | None = None) -> bool:
        """Ask the generation in a session to stop.

        Returns:
            True if a running generation was signalled.
        """
        generation = self.generation(session_id)
        if generation is None or generation.state is GenerationState.SETTLED:
            return False
        generation.cancel_event.set()
        logger.info(f"Cancellation requested for session {generation.session_id}")
        return True

    # --- send lifecycle ---

    def _validate(self, text: str, session_id: str | None) -> str:
        content = text.strip()
        if not content:
            raise MessageRejectedError(RejectionReason.EMPTY, "Message is empty")
        if session_id is not None and session_id in self._generations:
            raise MessageRejectedError(
                RejectionReason.BUSY, "A response is still being generated for this chat"
            )
        if len(content) > self.max_message_length:
            raise MessageRejectedError(
                RejectionReason.TOO_LONG,
                f"Message is too long. Maximum length is {self.max_message_length} characters.",
            )
        return content

    def start(self, text: str | None = None, session_id: str | None = None) -> Generation:
        """Accept a user message and open a generation for it.

        Appends the user message and an empty streaming placeholder to the
        target session, creating a session first when none is active.

        Args:
            text: Message text; the current draft when None.
            session_id: Target session; the active session when None.

        Returns:
            The new Generation, in SENDING state.

        Raises:
            MessageRejectedError: If the message is empty, too long, or the
                session is busy. Nothing is changed in that case.
            SessionNotFoundError: If session_id is unknown.
        """
        raw = self.draft if text is None else text
        if session_id is not None:
            self.store.get(session_id)
        else:
            session_id = self.store.active_session_id
        content = self._validate(raw, session_id)

        session = self.store.create_session() if session_id is None else self.store.get(session_id)

        user_message = Message(role=Role.USER, content=content)
        history = [*session.messages, user_message]
        self.store.replace_messages(session.id, history)
        self.store.set_title_once(session.id, content)
        self.draft = ""

        reply = Message(role=Role.MODEL, is_streaming=True)
        self.store.replace_messages(session.id, [*history, reply])

        request = GenerateContentRequest(
            prompt=build_prompt(history, self.context_window),
            model=self.model,
            system_instruction=self.system_instruction,
            temperature=self.temperature,
        )
        generation = Generation(
            session_id=session.id,
            history=history,
            reply=reply,
            request=request,
        )
        self._generations[session.id] = generation
        logger.info(f"Generation started in session {session.id} with {self.model.value}")
        return generation

    async def stream(self, generation: Generation) -> AsyncIterator[str]:
        """Stream a generation's reply into the store.

        Yields each fragment after it has been applied. The generation is
        always settled and released when this iterator finishes, fails,
        is closed early, or its task is cancelled.

        Args:
            generation: A generation returned by start().

        Yields:
            Text fragments in arrival order.
        """
        if generation.state is not GenerationState.SENDING:
            raise RuntimeError(f"Generation for session {generation.session_id} already ran")

        accumulated = ""
        try:
            stream = self.client.generate_content_stream(
                generation.request, cancel_event=generation.cancel_event
            )
            generation.state = GenerationState.STREAMING
            async for fragment in stream:
                if generation.cancel_event.is_set():
                    break
                if not fragment:
                    continue
                accumulated += fragment
                self._apply(generation, accumulated, is_streaming=True)
                yield fragment

            if generation.cancel_event.is_set():
                self._settle(generation, SendOutcome.CANCELLED, accumulated or CANCELLED_TEXT)
            else:
                self._settle(generation, SendOutcome.SUCCESS, accumulated)
        except Exception:
            logger.exception(f"Error generating response in session {generation.session_id}")
            self._settle(generation, SendOutcome.ERROR, ERROR_TEXT)
        finally:
            if generation.outcome is None:
                self._settle(generation, SendOutcome.CANCELLED, accumulated or CANCELLED_TEXT)
            self._release(generation)

    async def send(self, text: str | None = None, session_id: str | None = None) -> Generation:
        """Send a message and wait for the reply to settle.

        Args:
            text: Message text; the current draft when None.
            session_id: Target session; the active session when None.

        Returns:
            The settled Generation.

        Raises:
            MessageRejectedError: If the message was refused.
        """
        generation = self.start(text, session_id)
        async for _ in self.stream(generation):
            pass
        return generation

    def discard(self, generation: Generation) -> bool:
        """Settle a generation whose stream was never opened.

        The reply is marked cancelled and the session's in-flight marker is
        released. Generations that already started streaming are left to
        stream(), which settles them itself.

        Returns:
            True if the generation was settled here.
        """
        if generation.state is not GenerationState.SENDING:
            return False
        self._settle(generation, SendOutcome.CANCELLED, CANCELLED_TEXT)
        self._release(generation)
        return True

    def _apply(self, generation: Generation, content: str, is_streaming: bool) -> None:
        generation.reply = generation.reply.model_copy(
            update={"content": content, "is_streaming": is_streaming}
        )
        self.store.replace_messages(generation.session_id, [*generation.history, generation.reply])

    def _settle(self, generation: Generation, outcome: SendOutcome, content: str) -> None:
        self._apply(generation, content, is_streaming=False)
        generation.state = GenerationState.SETTLED
        generation.outcome = outcome
        logger.info(f"Generation in session {generation.session_id} settled: {outcome.value}")

    def _release(self, generation: Generation) -> None:
        if self._generations.get(generation.session_id) is generation:
            del self._generations[generation.session_id]
