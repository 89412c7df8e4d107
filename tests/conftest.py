"""Pytest configuration and shared fixtures."""
from typing import Dict

import jwt
import pytest
from fastapi.testclient import TestClient

from chat_backend.config import Settings
from chat_backend.main import create_app
from chat_backend.services.chat_store import InMemoryChatStore
from chat_backend.services.completion import CompletionBridge

JWT_SECRET = "test-secret-0123456789-abcdefghijklmnop"


class StubCompletionBridge(CompletionBridge):
    """Completion bridge returning a fixed reply and recording every call."""

    def __init__(self, reply: str = "hello"):
        self.reply = reply
        self.calls: list[list[Dict[str, str]]] = []

    def complete(self, messages):
        self.calls.append(list(messages))
        return self.reply


class FailingCompletionBridge(CompletionBridge):
    """Completion bridge that always raises, like an unreachable API."""

    def complete(self, messages):
        raise ConnectionError("completion API unreachable")


def make_token(user_id: str, secret: str = JWT_SECRET) -> str:
    return jwt.encode({"sub": user_id}, secret, algorithm="HS256")


@pytest.fixture
def settings():
    """Return settings isolated from the environment and `.env`."""
    return Settings(
        _env_file=None,
        AUTH_BACKEND="jwt",
        JWT_SECRET=JWT_SECRET,
        OPENAI_API_KEY="sk-test",
        RATE_LIMIT_PER_MINUTE=1000,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def chat_store():
    return InMemoryChatStore()


@pytest.fixture
def completion_bridge():
    return StubCompletionBridge(reply="hello")


@pytest.fixture
def app(settings, chat_store, completion_bridge):
    return create_app(settings, chat_store=chat_store, completion_bridge=completion_bridge)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Return a factory for Authorization headers of a given user."""

    def _headers(user_id: str = "user-1") -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _headers
