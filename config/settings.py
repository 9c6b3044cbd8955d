import os
from dotenv import load_dotenv

# --------------------------------------------------
# Load environment variables ONCE
# --------------------------------------------------
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Centralized configuration.
    This file must NOT import any logic or SDK modules.
    """

    SERVICE_NAME: str = "truthlens"
    VERSION: str = "1.0.0"

    # ---------------------------
    # LLM Provider Configuration
    # ---------------------------

    # "groq" (any OpenAI-compatible chat completions endpoint) or "gemini"
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "groq")

    # Groq / OpenAI-compatible endpoint
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1")
    LLM_MODEL_NAME: str = os.getenv("LLM_MODEL_NAME", "llama-3.1-8b-instant")

    # Gemini
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL_NAME: str = os.getenv("GEMINI_MODEL_NAME", "gemini-1.5-flash")

    # Low temperature keeps scoring close to deterministic.
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.2"))

    # Hard timeout for the single provider request (seconds).
    # If exceeded, /analyze answers with the fallback assessment.
    LLM_REQUEST_TIMEOUT_SECONDS: float = float(
        os.getenv("LLM_REQUEST_TIMEOUT_SECONDS", "15")
    )

    # ---------------------------
    # HTTP
    # ---------------------------
    _CORS_ALLOW_ORIGINS_RAW: str = os.getenv("CORS_ALLOW_ORIGINS", "*")
    CORS_ALLOW_ORIGINS: list[str] = [
        x.strip() for x in _CORS_ALLOW_ORIGINS_RAW.split(",") if x.strip()
    ]
    CORS_ALLOW_CREDENTIALS: bool = _env_bool("CORS_ALLOW_CREDENTIALS", "false")

    # ---------------------------
    # Logging
    # ---------------------------
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # ---------------------------
    # Operator scripts (check_message.py / scenario_check.py)
    # ---------------------------
    TRUTHLENS_API_URL: str = os.getenv("TRUTHLENS_API_URL", "http://localhost:8000")


# --------------------------------------------------
# Singleton settings object
# --------------------------------------------------
settings = Settings()
