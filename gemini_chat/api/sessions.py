"""Session management endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from gemini_chat.api.deps import get_chat_controller
from gemini_chat.chat.controller import ChatController
from gemini_chat.chat.store import SessionNotFoundError
from gemini_chat.models.chat import ChatSession
from gemini_chat.models.schemas import SessionListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

Controller = Annotated[ChatController, Depends(get_chat_controller)]


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Session not found: {session_id}",
    )


@router.get("", response_model=SessionListResponse)
async def list_sessions(controller: Controller) -> SessionListResponse:
    """List sessions newest first, with the active session id."""
    return SessionListResponse(
        sessions=controller.store.summaries(),
        active_session_id=controller.store.active_session_id,
    )


@router.post("", response_model=ChatSession, status_code=status.HTTP_201_CREATED)
async def create_session(controller: Controller) -> ChatSession:
    """Start a new chat and make it active."""
    return controller.new_session()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_sessions(
    controller: Controller,
    confirm: Annotated[bool, Query(description="Must be true to delete every session")] = False,
) -> Response:
    """Delete every session.

    Raises:
        400: confirm was not set.
    """
    if not controller.clear_all(confirm=confirm):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Clearing all chats requires confirm=true",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{session_id}", response_model=ChatSession)
async def get_session(session_id: str, controller: Controller) -> ChatSession:
    try:
        return controller.store.get(session_id)
    except SessionNotFoundError as e:
        raise _not_found(session_id) from e


@router.post("/{session_id}/select", response_model=ChatSession)
async def select_session(session_id: str, controller: Controller) -> ChatSession:
    try:
        return controller.select_session(session_id)
    except SessionNotFoundError as e:
        raise _not_found(session_id) from e


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, controller: Controller) -> Response:
    """Delete a session, stopping any reply streaming into it."""
    try:
        controller.delete_session(session_id)
    except SessionNotFoundError as e:
        raise _not_found(session_id) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
