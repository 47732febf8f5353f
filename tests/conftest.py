# tests/conftest.py
# Pytest fixtures. Run: pytest tests/ -v
# The OpenAI call is never made for real: tests patch
# app.logic.ai_extractor._chat_once.

import pytest
from fastapi.testclient import TestClient

from main import app  # noqa: E402


@pytest.fixture(autouse=True)
def no_openai_key(monkeypatch):
    """Regex-only unless a test opts in with `ai_key`."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def ai_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-not-real")


@pytest.fixture
def client():
    return TestClient(app)
