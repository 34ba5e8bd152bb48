"""Chat session state and the streaming update loop.

Responsibilities:
    - In-memory session collection with an active pointer
    - Message validation and title derivation
    - Request/stream/settle lifecycle per outgoing message
    - Cancellation and per-session in-flight guarding

Mutated only from the event loop that owns the controller.
"""

from gemini_chat.chat.controller import (
    ChatController,
    Generation,
    GenerationState,
    MessageRejectedError,
    RejectionReason,
    SendOutcome,
)
from gemini_chat.chat.store import SessionNotFoundError, SessionStore, derive_title

__all__ = [
    "ChatController",
    "Generation",
    "GenerationState",
    "MessageRejectedError",
    "RejectionReason",
    "SendOutcome",
    "SessionNotFoundError",
    "SessionStore",
    "derive_title",
]
