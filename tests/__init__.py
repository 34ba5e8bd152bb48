"""Test package for Gemini Chat.

Unit tests cover isolated components; integration tests drive the FastAPI
app over HTTP.

Structure:
    - unit/: Individual function and class tests
    - integration/: API workflow tests
    - fakes.py: Scripted stand-in for the Gemini client

No test calls the real Gemini API. Leverages pytest with pytest-check for
soft assertions.
"""
