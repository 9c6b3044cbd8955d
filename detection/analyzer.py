from __future__ import annotations

import logging

from detection.normalizer import normalize_completion
from models.schemas import RiskAssessment
from reasoning.llm_client import CompletionClient
from reasoning.prompt import build_messages

logger = logging.getLogger(__name__)


def analyze_message(message: str, client: CompletionClient) -> RiskAssessment:
    """
    Single-attempt risk assessment.

    Input:
        message (str): the user's message, sent to the provider unmodified
        client: configured completion client (one call, no retry)

    Output:
        RiskAssessment, the fixed fallback when the call fails or the output
        cannot be parsed. Never raises.
    """
    messages = build_messages(message)

    try:
        raw = client.complete(messages)
    except Exception as e:
        logger.warning("%s analyze error: %s", getattr(client, "provider", "llm"), e)
        return normalize_completion(None, call_failed=True)

    return normalize_completion(raw)
