"""Gemini Chat - a multi-session chat client for the Gemini API.

Combines FastAPI for HTTP streaming, google-genai for model access,
NiceGUI for the chat interface, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and streaming responses
    - chat: Session store and streaming controller
    - llm: Gemini generation client and configuration
    - parsing: Content formatting for message display
    - ui: Web interface for chat interactions
    - models: Domain models and request/response schemas
"""

__version__ = "0.1.0"
