"""Application-wide constants for the chat client."""

from gemini_chat.models.chat import GeminiModel

DEFAULT_MODEL = GeminiModel.FLASH

MODEL_OPTIONS: dict[GeminiModel, tuple[str, str]] = {
    GeminiModel.FLASH: ("Gemini 2.5 Flash", "Fast and efficient for most tasks"),
    GeminiModel.PRO: ("Gemini 2.5 Pro", "Advanced reasoning and complex tasks"),
}

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are a helpful, friendly, and knowledgeable AI assistant. "
    "Provide clear, accurate, and concise responses."
)
DEFAULT_TEMPERATURE = 0.7

WELCOME_TEXT = "Hello! I'm Gemini, your AI assistant. How can I help you today?"
ERROR_TEXT = "Sorry, I encountered an error while generating a response. Please try again."
CANCELLED_TEXT = "Response generation was stopped."

EXAMPLE_PROMPTS = (
    "Explain quantum computing in simple terms",
    "Write a Python function to calculate fibonacci numbers",
    "What are the benefits of renewable energy?",
    "Help me brainstorm ideas for a mobile app",
)

MAX_MESSAGE_LENGTH = 4000
CONTEXT_WINDOW = 10  # most recent messages sent as context
TITLE_MAX_LENGTH = 50
SIDEBAR_LABEL_LENGTH = 30
