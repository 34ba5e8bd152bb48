"""NiceGUI interface - thin visualization layer for chat interactions.

Delivers a responsive web UI with real-time streaming updates.

Responsibilities:
    - Chat message display with streaming support
    - Session list with new, select and delete actions
    - Model selection and a length-capped input with a live counter
    - Confirmation before clearing all chats

Contains minimal business logic. Delegates all state changes to the
chat controller.
"""
