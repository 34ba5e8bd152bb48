"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gemini_chat import __version__
from gemini_chat.api.chat import router as chat_router
from gemini_chat.api.sessions import router as sessions_router
from gemini_chat.chat.controller import ChatController

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Sessions live in memory only, so shutdown stops any streaming replies
    and discards the store.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Gemini Chat API...")
    yield
    # Shutdown
    controller: ChatController = app.state.chat_controller
    controller.clear_all(confirm=True)
    logger.info("Shutting down Gemini Chat API...")


def create_app(controller: ChatController | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        controller: Optional chat controller; a fresh one with an empty
                    store and the shared Gemini service by default.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Gemini Chat API",
        description=(
            "Multi-session chat API for Google Gemini. Keeps chat sessions in "
            "memory, streams model replies as Server-Sent Events, and supports "
            "cancellation and single-shot generation."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.chat_controller = controller or ChatController()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(chat_router)
    application.include_router(sessions_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "gemini-chat"}

    return application


app = create_app()
