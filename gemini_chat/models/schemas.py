from enum import Enum

from pydantic import BaseModel, Field, field_validator

from gemini_chat.constants import MAX_MESSAGE_LENGTH
from gemini_chat.models.chat import GeminiModel, SessionSummary


class StreamStatus(str, Enum):
    """Status values for streaming updates."""

    RECEIVED = "received"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"
    CANCELLED = "cancelled"


class ChatRequest(BaseModel):
    """Request payload for the chat streaming endpoint.

    Attributes:
        message: User's question or prompt.
        session_id: Optional session to continue; the active one is used otherwise.
        model: Optional model override for this and later requests.
    """

    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
    session_id: str | None = None
    model: GeminiModel | None = None

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class StreamChunk(BaseModel):
    """A chunk of streamed response data.

    Attributes:
        content: The text content of this chunk.
        done: Whether this is the final chunk.
        status: Current processing status.
        session_id: Session the reply belongs to.
        message_id: Id of the assistant message being streamed.
        error: Error message if something went wrong.
    """

    content: str
    done: bool
    status: StreamStatus | None = None
    session_id: str | None = None
    message_id: str | None = None
    error: str | None = None


class CancelRequest(BaseModel):
    """Request to stop an in-flight generation."""

    session_id: str | None = None


class CancelResponse(BaseModel):
    cancelled: bool


class SessionListResponse(BaseModel):
    """All sessions in store order with the active pointer."""

    sessions: list[SessionSummary]
    active_session_id: str | None = None


class GenerateResponse(BaseModel):
    """Single-shot generation result."""

    text: str
    model: GeminiModel
