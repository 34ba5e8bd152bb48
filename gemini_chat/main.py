"""Gemini Chat server.

Serves the HTTP API and the NiceGUI chat page from one uvicorn process.
Settings are read from the environment or a .env file:

    GEMINI_API_KEY   required (GOOGLE_API_KEY and API_KEY also accepted)
    GEMINI_MODEL     default model tier
    HOST, PORT       bind address, default 0.0.0.0:8000
    LOG_LEVEL        default INFO
"""

import logging
import os
import sys

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from nicegui import ui

from gemini_chat.api.app import create_app
from gemini_chat.llm.config import GeminiConfig, get_gemini_config

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def load_config() -> GeminiConfig | None:
    """Validate Gemini settings before anything starts.

    Returns:
        The configuration, or None after logging what is wrong with it.
    """
    try:
        return get_gemini_config()
    except ValueError as e:
        logger.error(f"Invalid Gemini configuration: {e}")
        return None


def build_app() -> FastAPI:
    """Create the API app with the chat page mounted at /."""
    from gemini_chat.ui import chat_page  # noqa: F401 - registers the page

    app = create_app()
    ui.run_with(app, title="Gemini Chat", favicon="✨")
    return app


def main() -> None:
    """Start the server, exiting with status 1 on bad configuration."""
    config = load_config()
    if config is None:
        sys.exit(1)

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    app = build_app()

    logger.info(f"Default model: {config.default_model.value}")
    logger.info(f"Chat UI available at http://localhost:{port}/")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(app, host=host, port=port, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
