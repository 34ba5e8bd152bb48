"""Pydantic models for chat state and API requests/responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message: Individual message in a conversation
    - ChatSession: Conversation with ordered message history
    - SessionSummary: Session details for list views
    - GenerateContentRequest: Parameters for a model call
    - ChatRequest / StreamChunk: Streaming chat endpoint payloads
"""

from gemini_chat.models.chat import (
    ChatSession,
    GeminiModel,
    GenerateContentRequest,
    Message,
    Role,
    SessionSummary,
    generate_id,
)

__all__ = [
    "ChatSession",
    "GeminiModel",
    "GenerateContentRequest",
    "Message",
    "Role",
    "SessionSummary",
    "generate_id",
]
