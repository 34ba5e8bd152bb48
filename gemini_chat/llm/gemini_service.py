"""Gemini generation client with streaming support.

Thin wrapper over the google-genai async client. Keeps the rest of the
application independent of the SDK: callers deal in GenerateContentRequest
objects and plain text fragments, and every backend failure arrives as a
single GenerationError.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from google import genai
from google.genai import types

from gemini_chat.constants import CONTEXT_WINDOW
from gemini_chat.llm.config import GeminiConfig, get_gemini_config
from gemini_chat.models.chat import GeminiModel, GenerateContentRequest, Message, Role

logger = logging.getLogger(__name__)

PROMPT_CUE = "\n\nAssistant:"


class GenerationError(Exception):
    """Raised when the model backend fails to produce a response."""


class GenerationClient(Protocol):
    """Capabilities the chat controller needs from a model backend."""

    async def generate_content(self, request: GenerateContentRequest) -> str: ...

    def generate_content_stream(
        self,
        request: GenerateContentRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[str]: ...


def format_messages_for_context(messages: Sequence[Message]) -> str:
    """Serialize messages as alternating User/Assistant blocks.

    Args:
        messages: Messages in conversation order.

    Returns:
        Blocks joined by blank lines, e.g. "User: A\\n\\nAssistant: B".
    """
    return "\n\n".join(
        f"{'User' if msg.role == Role.USER else 'Assistant'}: {msg.content}" for msg in messages
    )


def build_prompt(
    messages: Sequence[Message],
    window: int = CONTEXT_WINDOW,
    repeat_user_message: bool = True,
) -> str:
    """Build a prompt from the most recent messages plus the reply cue.

    Older history beyond the window is dropped. The latest user message is
    restated after the context so the model answers it directly:

        User: A\\n\\nAssistant: B\\n\\nUser: C\\n\\nUser: C\\n\\nAssistant:

    Args:
        messages: History ending with the message to answer.
        window: Number of most recent messages kept as context.
        repeat_user_message: Restate the latest user message before the cue.

    Returns:
        Prompt text ending with the "Assistant:" cue.
    """
    history = list(messages)
    prompt = format_messages_for_context(history[-window:])
    if repeat_user_message and history and history[-1].role == Role.USER:
        prompt += f"\n\nUser: {history[-1].content}"
    return prompt + PROMPT_CUE


class GeminiService:
    """Service for calling the Gemini API.

    Wraps the google-genai client with:
    - Config-driven defaults for model, temperature and output length
    - A plain-text streaming interface with cooperative cancellation
    - Centralized error translation to GenerationError
    """

    def __init__(self, config: GeminiConfig | None = None) -> None:
        """Initialize the service.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_gemini_config()
        self._client = genai.Client(api_key=self._config.api_key)

    def _resolve_model(self, request: GenerateContentRequest) -> GeminiModel:
        return request.model or self._config.default_model

    def _build_config(self, request: GenerateContentRequest) -> types.GenerateContentConfig:
        """Translate a request into SDK generation settings."""
        temperature = request.temperature
        if temperature is None:
            temperature = self._config.temperature
        max_output_tokens = request.max_output_tokens or self._config.max_output_tokens

        settings: dict[str, object] = {"temperature": temperature}
        if request.system_instruction:
            settings["system_instruction"] = request.system_instruction
        if max_output_tokens:
            settings["max_output_tokens"] = max_output_tokens
        return types.GenerateContentConfig(**settings)

    async def generate_content(self, request: GenerateContentRequest) -> str:
        """Get a complete response for a prompt.

        Args:
            request: Prompt and generation settings.

        Returns:
            Response text, or an empty string when the backend returns none.

        Raises:
            GenerationError: If the backend call fails.
        """
        model = self._resolve_model(request)
        try:
            response = await self._client.aio.models.generate_content(
                model=model.value,
                contents=request.prompt,
                config=self._build_config(request),
            )
        except Exception as e:
            logger.error(f"Generation failed on {model.value}: {e}")
            raise GenerationError(f"Generation failed: {e}") from e

        return response.text or ""

    async def generate_content_stream(
        self,
        request: GenerateContentRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[str]:
        """Stream response fragments for a prompt.

        Fragments without text are skipped. Setting cancel_event stops the
        stream before the next fragment is yielded.

        Args:
            request: Prompt and generation settings.
            cancel_event: Optional signal to stop pulling fragments.

        Yields:
            Non-empty text fragments in arrival order.

        Raises:
            GenerationError: If the backend fails at any point.
        """
        model = self._resolve_model(request)
        try:
            stream = await self._client.aio.models.generate_content_stream(
                model=model.value,
                contents=request.prompt,
                config=self._build_config(request),
            )
            async for chunk in stream:
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(f"Stream from {model.value} cancelled")
                    break
                if chunk.text:
                    yield chunk.text
        except Exception as e:
            logger.error(f"Streaming generation failed on {model.value}: {e}")
            raise GenerationError(f"Streaming generation failed: {e}") from e


# Module-level singleton instance
_gemini_service: GeminiService | None = None


def get_gemini_service() -> GeminiService:
    """Get or create the global Gemini service.

    Returns:
        The GeminiService instance.
    """
    global _gemini_service
    if _gemini_service is None:
        _gemini_service = GeminiService()
    return _gemini_service
