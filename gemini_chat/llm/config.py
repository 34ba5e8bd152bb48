"""Gemini client configuration with environment variable loading.

Pydantic-based configuration for the generation client.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from gemini_chat.constants import DEFAULT_MODEL, DEFAULT_TEMPERATURE
from gemini_chat.models.chat import GeminiModel

# Load environment variables from .env file
load_dotenv()


def _env_api_key() -> str:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY", "")


def _env_max_output_tokens() -> int | None:
    value = os.getenv("GEMINI_MAX_OUTPUT_TOKENS")
    return int(value) if value else None


class GeminiConfig(BaseModel):
    """Configuration for the Gemini generation client.

    Attributes:
        api_key: API key for model access.
        default_model: Model tier used when a request does not pick one.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_output_tokens: Optional cap on tokens in a generated response.
    """

    # Environment-derived defaults go through the same checks as explicit values
    model_config = ConfigDict(validate_default=True)

    api_key: str = Field(
        default_factory=_env_api_key,
        description="API key for the Gemini API",
    )
    default_model: GeminiModel = Field(
        default_factory=lambda: GeminiModel(os.getenv("GEMINI_MODEL", DEFAULT_MODEL.value)),
        description="Default model tier",
    )
    temperature: float = Field(
        default_factory=lambda: float(os.getenv("GEMINI_TEMPERATURE", str(DEFAULT_TEMPERATURE))),
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_output_tokens: int | None = Field(
        default_factory=_env_max_output_tokens,
        ge=1,
        description="Maximum tokens in generated response",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("API key required. Set GEMINI_API_KEY in .env")
        return v.strip()


def get_gemini_config() -> GeminiConfig:
    """Create Gemini configuration from environment.

    Returns:
        Configured GeminiConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return GeminiConfig()
