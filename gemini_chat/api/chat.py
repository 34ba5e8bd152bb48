"""Chat endpoints: SSE streaming, cancellation and single-shot generation."""

import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from gemini_chat.api.deps import get_chat_controller
from gemini_chat.chat.controller import (
    ChatController,
    Generation,
    GenerationState,
    MessageRejectedError,
    RejectionReason,
    SendOutcome,
)
from gemini_chat.chat.store import SessionNotFoundError
from gemini_chat.constants import ERROR_TEXT
from gemini_chat.llm.gemini_service import GenerationError
from gemini_chat.models.chat import GenerateContentRequest
from gemini_chat.models.schemas import (
    CancelRequest,
    CancelResponse,
    ChatRequest,
    GenerateResponse,
    StreamChunk,
    StreamStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

Controller = Annotated[ChatController, Depends(get_chat_controller)]

_FINAL_STATUS = {
    SendOutcome.SUCCESS: StreamStatus.COMPLETE,
    SendOutcome.ERROR: StreamStatus.ERROR,
    SendOutcome.CANCELLED: StreamStatus.CANCELLED,
}


def _sse(chunk: StreamChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


async def _event_stream(
    controller: ChatController,
    generation: Generation,
) -> AsyncGenerator[str]:
    """Forward a generation as Server-Sent Events.

    Emits a RECEIVED chunk, one GENERATING chunk per fragment, then a
    final chunk with done=true carrying the settled status. If the client
    goes away before streaming starts, the generation is discarded so the
    session does not stay busy.
    """
    ids = {"session_id": generation.session_id, "message_id": generation.reply.id}
    try:
        yield _sse(StreamChunk(content="", done=False, status=StreamStatus.RECEIVED, **ids))

        # delete_session/clear_all may have settled it already
        if generation.state is GenerationState.SENDING:
            async with aclosing(controller.stream(generation)) as fragments:
                async for fragment in fragments:
                    yield _sse(
                        StreamChunk(
                            content=fragment, done=False, status=StreamStatus.GENERATING, **ids
                        )
                    )

        outcome = generation.outcome or SendOutcome.CANCELLED
        yield _sse(
            StreamChunk(
                content="",
                done=True,
                status=_FINAL_STATUS[outcome],
                error=ERROR_TEXT if outcome is SendOutcome.ERROR else None,
                **ids,
            )
        )
    finally:
        if controller.discard(generation):
            logger.info(f"Client left before streaming in session {generation.session_id}")


@router.post("/chat/stream")
async def chat_stream(payload: ChatRequest, controller: Controller) -> StreamingResponse:
    """Send a message and stream the reply.

    Args:
        payload: Message, optional session id and optional model.

    Returns:
        text/event-stream of StreamChunk JSON lines.

    Raises:
        404: Unknown session id.
        409: A reply is already streaming in the session.
        422: Empty or over-length message.
    """
    if payload.model is not None:
        controller.select_model(payload.model)

    try:
        generation = controller.start(payload.message, payload.session_id)
    except SessionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {payload.session_id}",
        ) from e
    except MessageRejectedError as e:
        logger.warning(f"Rejected message: {e}")
        code = (
            status.HTTP_409_CONFLICT
            if e.reason is RejectionReason.BUSY
            else status.HTTP_422_UNPROCESSABLE_ENTITY
        )
        raise HTTPException(status_code=code, detail=str(e)) from e

    return StreamingResponse(
        _event_stream(controller, generation),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


@router.post("/chat/cancel", response_model=CancelResponse)
async def cancel_chat(payload: CancelRequest, controller: Controller) -> CancelResponse:
    """Stop the reply streaming in a session (the active one by default)."""
    return CancelResponse(cancelled=controller.cancel(payload.session_id))


@router.post("/generate", response_model=GenerateResponse)
async def generate(payload: GenerateContentRequest, controller: Controller) -> GenerateResponse:
    """Run a single-shot generation outside any session.

    Raises:
        502: The model backend failed.
    """
    request = payload.model_copy(update={"model": payload.model or controller.model})
    try:
        text = await controller.client.generate_content(request)
    except GenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Model backend failed to generate a response",
        ) from e

    return GenerateResponse(text=text, model=request.model)
