"""Domain models for chat sessions and generation requests."""

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def generate_id() -> str:
    """Return a fresh opaque identifier."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    MODEL = "model"


class GeminiModel(str, Enum):
    """Supported Gemini model tiers."""

    FLASH = "gemini-2.5-flash"
    PRO = "gemini-2.5-pro"


class Message(BaseModel):
    """A single message in a chat session.

    Messages are immutable. Streaming updates replace the trailing
    message with a copy carrying the new content.

    Attributes:
        id: Unique message identifier.
        role: Who wrote the message.
        content: Message text.
        timestamp: Creation time, kept across content updates.
        is_streaming: True while an assistant reply is still arriving.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_id)
    role: Role
    content: str = ""
    timestamp: datetime = Field(default_factory=utcnow)
    is_streaming: bool = False


class ChatSession(BaseModel):
    """A conversation with its ordered message history.

    Attributes:
        id: Unique session identifier.
        title: Derived from the first user message, empty until then.
        messages: Ordered messages, never empty once created.
        created_at: Creation time.
        updated_at: Time of the last message-list change.
    """

    id: str = Field(default_factory=generate_id)
    title: str = ""
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def streaming_message(self) -> Message | None:
        """Return the trailing message if it is still streaming."""
        if self.messages and self.messages[-1].is_streaming:
            return self.messages[-1]
        return None


class SessionSummary(BaseModel):
    """Compact view of a session for list displays."""

    id: str
    title: str
    message_count: int = Field(ge=0)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: ChatSession) -> "SessionSummary":
        return cls(
            id=session.id,
            title=session.title,
            message_count=len(session.messages),
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class GenerateContentRequest(BaseModel):
    """Parameters for a single generation call.

    Attributes:
        prompt: Full prompt text sent to the model.
        model: Model tier to use; the client default when None.
        system_instruction: Optional system prompt.
        temperature: Sampling temperature; the client default (0.7) when None.
        max_output_tokens: Optional cap on generated tokens.
    """

    prompt: str = Field(..., min_length=1)
    model: GeminiModel | None = None
    system_instruction: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    max_output_tokens: int | None = Field(default=None, ge=1)
