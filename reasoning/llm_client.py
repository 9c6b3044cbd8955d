from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from functools import lru_cache
import logging
from typing import Any, Protocol

import requests

from config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

_GENAI_CONFIGURED_KEYS: set[str] = set()

_GEMINI_EXECUTOR = ThreadPoolExecutor(max_workers=4)


class CompletionError(RuntimeError):
    """The provider call failed (network, status, timeout, undecodable body, SDK error)."""


class CompletionClient(Protocol):
    provider: str
    credential_name: str
    api_key: str
    model: str

    @property
    def is_configured(self) -> bool: ...

    def complete(self, messages: list[dict[str, str]]) -> str: ...


def _first_choice_content(data: Any) -> str:
    """
    choices[0].message.content, or "" when any level is missing or mistyped.
    """
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    if not isinstance(content, str):
        return ""
    return content


def _split_messages(messages: list[dict[str, str]]) -> tuple[str, str]:
    system_parts = [m.get("content", "") for m in messages if m.get("role") == "system"]
    user_parts = [m.get("content", "") for m in messages if m.get("role") != "system"]
    return "\n\n".join(system_parts), "\n\n".join(user_parts)


class OpenAICompatibleClient:
    """
    Chat completions over plain HTTP (Groq by default).
    One request per call, bounded by `timeout_s`; never retries.
    """

    provider = "groq"
    credential_name = "GROQ_API_KEY"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float,
        timeout_s: float,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout_s = timeout_s if timeout_s > 0 else 15.0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def complete(self, messages: list[dict[str, str]]) -> str:
        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": messages,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
                timeout=self.timeout_s,
            )
        except requests.Timeout as e:
            raise CompletionError(f"{self.provider} request timed out after {self.timeout_s}s") from e
        except requests.RequestException as e:
            raise CompletionError(f"{self.provider} request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise CompletionError(
                f"{self.provider} returned {response.status_code}: {(response.text or '')[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CompletionError(f"{self.provider} returned a non-JSON body") from e

        return _first_choice_content(data)


class GeminiClient:
    """
    Gemini via google-generativeai. The SDK call is blocking, so it runs on a
    shared executor and is abandoned after `timeout_s`.
    """

    provider = "gemini"
    credential_name = "GEMINI_API_KEY"

    def __init__(self, *, api_key: str, model: str, temperature: float, timeout_s: float) -> None:
        self.api_key = api_key
        name = (model or "").strip()
        if name and not name.startswith("models/"):
            name = f"models/{name}"
        self.model = name
        self.temperature = temperature
        self.timeout_s = timeout_s if timeout_s > 0 else 15.0

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_model(self, system_instruction: str) -> Any:
        import google.generativeai as genai  # type: ignore

        if self.api_key not in _GENAI_CONFIGURED_KEYS:
            genai.configure(api_key=self.api_key)
            _GENAI_CONFIGURED_KEYS.add(self.api_key)

        return genai.GenerativeModel(
            self.model,
            system_instruction=system_instruction or None,
            generation_config={"temperature": self.temperature},
        )

    def complete(self, messages: list[dict[str, str]]) -> str:
        system_instruction, user_text = _split_messages(messages)

        try:
            model = self._build_model(system_instruction)
            future = _GEMINI_EXECUTOR.submit(model.generate_content, user_text)
            response = future.result(timeout=self.timeout_s)
        except FuturesTimeoutError as e:
            raise CompletionError(f"{self.provider} request timed out after {self.timeout_s}s") from e
        except Exception as e:
            raise CompletionError(f"{self.provider} request failed: {e}") from e

        try:
            text = response.text
        except ValueError:
            # Blocked or empty candidates: the SDK raises instead of returning "".
            return ""
        return text if isinstance(text, str) else ""


def build_completion_client(cfg: Settings) -> CompletionClient:
    provider = (cfg.LLM_PROVIDER or "").strip().lower()

    if provider == "gemini":
        return GeminiClient(
            api_key=cfg.GEMINI_API_KEY,
            model=cfg.GEMINI_MODEL_NAME,
            temperature=cfg.LLM_TEMPERATURE,
            timeout_s=cfg.LLM_REQUEST_TIMEOUT_SECONDS,
        )

    if provider not in ("groq", "openai"):
        logger.warning("Unknown LLM_PROVIDER %r, using the OpenAI-compatible client", cfg.LLM_PROVIDER)

    return OpenAICompatibleClient(
        api_key=cfg.GROQ_API_KEY,
        base_url=cfg.LLM_BASE_URL,
        model=cfg.LLM_MODEL_NAME,
        temperature=cfg.LLM_TEMPERATURE,
        timeout_s=cfg.LLM_REQUEST_TIMEOUT_SECONDS,
    )


@lru_cache(maxsize=1)
def get_completion_client() -> CompletionClient:
    """
    Process-wide client, built from settings on first use.
    FastAPI dependency; tests swap it via app.dependency_overrides.
    """
    return build_completion_client(default_settings)
