"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_client: Scripted generation client streaming "Hello there"
    - store: Empty session store
    - controller: Chat controller wired to the store and fake client
    - async_client: HTTPX client for API testing against the controller
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from gemini_chat.api.app import create_app
from gemini_chat.chat.controller import ChatController
from gemini_chat.chat.store import SessionStore
from tests.fakes import FakeGenerationClient


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment settings out of config defaults."""
    for name in ("GEMINI_MODEL", "GEMINI_TEMPERATURE", "GEMINI_MAX_OUTPUT_TOKENS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient(["Hello", " there"], text="One-shot answer")


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def controller(store: SessionStore, fake_client: FakeGenerationClient) -> ChatController:
    return ChatController(store, fake_client)


@pytest.fixture
async def async_client(controller: ChatController) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient bound to an app that uses the controller fixture.
    """
    transport = ASGITransport(app=create_app(controller))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
