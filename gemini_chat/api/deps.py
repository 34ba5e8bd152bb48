"""Shared FastAPI dependencies."""

from fastapi import Request

from gemini_chat.chat.controller import ChatController


def get_chat_controller(request: Request) -> ChatController:
    """Return the controller owned by the running application."""
    return request.app.state.chat_controller
