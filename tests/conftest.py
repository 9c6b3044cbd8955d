from __future__ import annotations

from typing import Iterator

from fastapi.testclient import TestClient
import pytest

from app import app
from reasoning.llm_client import get_completion_client


class FakeCompletionClient:
    """Stands in for the provider; records every call it receives."""

    provider = "fake"
    credential_name = "GROQ_API_KEY"
    model = "fake-model"

    def __init__(self, reply: str = "", *, api_key: str = "test-key", error: Exception | None = None) -> None:
        self.api_key = api_key
        self.reply = reply
        self.error = error
        self.calls: list[list[dict[str, str]]] = []

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def complete(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient(
        '{"risk_score": 85, "risk_level": "High", '
        '"reasoning": ["Urgent tone", "Suspicious link"], '
        '"actions": ["Do not click the link", "Report the message"]}'
    )


@pytest.fixture
def api_client(fake_client: FakeCompletionClient) -> Iterator[TestClient]:
    app.dependency_overrides[get_completion_client] = lambda: fake_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
