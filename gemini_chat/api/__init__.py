"""FastAPI endpoints for the chat client.

HTTP and streaming routes with async request handling.
Supports Server-Sent Events for real-time chat streaming.

Endpoints:
    - GET /health: Service health status
    - POST /chat/stream: Send a message and stream the reply
    - POST /chat/cancel: Stop a streaming reply
    - POST /generate: Single-shot generation
    - /sessions: List, create, select, delete and clear chat sessions
"""

from gemini_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
