"""Gemini API access for response generation.

Responsibilities:
    - Client initialization from environment configuration
    - Single-shot and streaming generation
    - Conversation context formatting for prompts

Maintains clean separation from the chat state and HTTP layers.
"""

from gemini_chat.llm.config import GeminiConfig, get_gemini_config
from gemini_chat.llm.gemini_service import (
    GeminiService,
    GenerationClient,
    GenerationError,
    build_prompt,
    format_messages_for_context,
    get_gemini_service,
)

__all__ = [
    "GeminiConfig",
    "GeminiService",
    "GenerationClient",
    "GenerationError",
    "build_prompt",
    "format_messages_for_context",
    "get_gemini_config",
    "get_gemini_service",
]
