"""Tests for the provider clients (HTTP is stubbed, nothing leaves the process)."""

from __future__ import annotations

from typing import Any

import pytest
import requests

from config.settings import Settings
from reasoning import llm_client
from reasoning.llm_client import (
    CompletionError,
    GeminiClient,
    OpenAICompatibleClient,
    build_completion_client,
)
from reasoning.prompt import build_messages


class _FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


def _client(**overrides: Any) -> OpenAICompatibleClient:
    kwargs = {
        "api_key": "gsk-test",
        "base_url": "https://api.groq.com/openai/v1/",
        "model": "llama-3.1-8b-instant",
        "temperature": 0.2,
        "timeout_s": 7.5,
    }
    kwargs.update(overrides)
    return OpenAICompatibleClient(**kwargs)


def _patch_post(monkeypatch: pytest.MonkeyPatch, result: Any) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []

    def fake_post(url: str, **kwargs: Any) -> _FakeResponse:
        calls.append({"url": url, **kwargs})
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(llm_client.requests, "post", fake_post)
    return calls


def test_complete_sends_single_chat_request(monkeypatch: pytest.MonkeyPatch) -> None:
    body = {"choices": [{"message": {"role": "assistant", "content": '{"risk_score": 12}'}}]}
    calls = _patch_post(monkeypatch, _FakeResponse(200, body))
    messages = build_messages("hello there")

    text = _client().complete(messages)

    assert text == '{"risk_score": 12}'
    assert len(calls) == 1
    call = calls[0]
    assert call["url"] == "https://api.groq.com/openai/v1/chat/completions"
    assert call["timeout"] == 7.5
    assert call["headers"]["Authorization"] == "Bearer gsk-test"
    assert call["json"] == {"model": "llama-3.1-8b-instant", "temperature": 0.2, "messages": messages}


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"choices": []},
        {"choices": [{}]},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {"content": None}}]},
        {"choices": [{"message": {"content": 42}}]},
        ["not", "a", "dict"],
    ],
)
def test_missing_content_becomes_empty_string(monkeypatch: pytest.MonkeyPatch, body: Any) -> None:
    _patch_post(monkeypatch, _FakeResponse(200, body))
    assert _client().complete(build_messages("x")) == ""


def test_non_success_status_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_post(monkeypatch, _FakeResponse(503, {"error": "overloaded"}, text="overloaded"))
    with pytest.raises(CompletionError, match="503"):
        _client().complete(build_messages("x"))


@pytest.mark.parametrize(
    "exc",
    [requests.ConnectionError("connection refused"), requests.Timeout("read timed out")],
)
def test_transport_errors_raise_completion_error(monkeypatch: pytest.MonkeyPatch, exc: Exception) -> None:
    _patch_post(monkeypatch, exc)
    with pytest.raises(CompletionError):
        _client().complete(build_messages("x"))


def test_undecodable_body_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_post(monkeypatch, _FakeResponse(200, ValueError("bad json"), text="<html>"))
    with pytest.raises(CompletionError):
        _client().complete(build_messages("x"))


def test_non_positive_timeout_uses_default() -> None:
    assert _client(timeout_s=0).timeout_s == 15.0


def test_is_configured_tracks_api_key() -> None:
    assert _client().is_configured
    assert not _client(api_key="").is_configured


def test_build_client_defaults_to_openai_compatible() -> None:
    cfg = Settings()
    cfg.LLM_PROVIDER = "groq"
    cfg.GROQ_API_KEY = "gsk-1"
    cfg.LLM_MODEL_NAME = "llama-3.1-8b-instant"

    client = build_completion_client(cfg)

    assert isinstance(client, OpenAICompatibleClient)
    assert client.api_key == "gsk-1"
    assert client.credential_name == "GROQ_API_KEY"


def test_build_client_for_gemini() -> None:
    cfg = Settings()
    cfg.LLM_PROVIDER = "Gemini"
    cfg.GEMINI_API_KEY = ""
    cfg.GEMINI_MODEL_NAME = "gemini-1.5-flash"

    client = build_completion_client(cfg)

    assert isinstance(client, GeminiClient)
    assert client.model == "models/gemini-1.5-flash"
    assert client.credential_name == "GEMINI_API_KEY"
    assert not client.is_configured


def test_gemini_sdk_failure_raises_completion_error(monkeypatch: pytest.MonkeyPatch) -> None:
    client = GeminiClient(api_key="g-key", model="gemini-1.5-flash", temperature=0.2, timeout_s=5)

    def broken_model(system_instruction: str) -> Any:
        raise RuntimeError("quota exceeded")

    monkeypatch.setattr(client, "_build_model", broken_model)
    with pytest.raises(CompletionError, match="quota exceeded"):
        client.complete(build_messages("x"))


def test_gemini_returns_response_text(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, str] = {}

    class _Model:
        def generate_content(self, text: str) -> Any:
            seen["user"] = text

            class _Resp:
                text = '{"risk_score": 5}'

            return _Resp()

    def fake_build(system_instruction: str) -> Any:
        seen["system"] = system_instruction
        return _Model()

    client = GeminiClient(api_key="g-key", model="gemini-1.5-flash", temperature=0.2, timeout_s=5)
    monkeypatch.setattr(client, "_build_model", fake_build)

    assert client.complete(build_messages("is this real?")) == '{"risk_score": 5}'
    assert seen["user"] == "is this real?"
    assert "TruthLens" in seen["system"]
