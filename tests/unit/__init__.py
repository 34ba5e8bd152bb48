"""Unit tests for individual components in isolation.

Coverage:
    - parsing/: Line classification of model replies
    - llm/: Client configuration, prompt building and SDK wrapping
    - chat/: Session store invariants and the streaming controller

The google-genai SDK is mocked; the controller runs against the fake client.
"""
