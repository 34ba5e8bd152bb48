"""Integration tests for the HTTP API.

Coverage:
    - SSE chat streaming, rejection codes and cancellation
    - Session create, list, select, delete and clear
    - Single-shot generation and health check

Requests go through httpx ASGITransport against the real app, with the
fake generation client in place of Gemini.
"""
