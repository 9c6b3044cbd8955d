from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
import logging
import math
import re
from typing import Any

from models.schemas import VALID_RISK_LEVELS, RiskAssessment

logger = logging.getLogger(__name__)

DEFAULT_RISK_SCORE = 50
NO_REASONING_FALLBACK = "No reasoning provided."
DEFAULT_ACTION = "Verify sender manually"

FALLBACK_SCORE = 50
FALLBACK_LEVEL = "Medium"
FALLBACK_REASONING = ("Unable to fully analyze message safely",)
FALLBACK_ACTIONS = (DEFAULT_ACTION,)

_FENCE_PATTERN = re.compile(r"```json|```", flags=re.IGNORECASE)
# ASCII digits only; capped so int() never sees an oversized string.
_LEADING_INT = re.compile(r"\s*([+-]?)0*([0-9]+)")
_MAX_SCORE_DIGITS = 3

# Integer literals longer than this parse as floats, like any other JSON number
# beyond double precision.
_MAX_JSON_INT_DIGITS = 21

_UNPARSED = object()


class ParseStage(str, Enum):
    DIRECT = "direct"
    FENCE_STRIPPED = "fence_stripped"
    FAILED = "failed"


@dataclass(frozen=True)
class ParseOutcome:
    stage: ParseStage
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.stage is not ParseStage.FAILED


def fallback_assessment() -> RiskAssessment:
    """
    The fixed result used when no trustworthy assessment exists.
    """
    return RiskAssessment(
        riskScore=FALLBACK_SCORE,
        riskLevel=FALLBACK_LEVEL,
        reasoning=list(FALLBACK_REASONING),
        actions=list(FALLBACK_ACTIONS),
    )


def derive_risk_level(score: int) -> str:
    if score >= 70:
        return "High"
    if score >= 31:
        return "Medium"
    return "Low"


# --------------------------------------------------
# Two-stage parse: direct -> fence-stripped -> failed
# --------------------------------------------------
def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_json_int(literal: str) -> int | float:
    if len(literal.lstrip("-")) > _MAX_JSON_INT_DIGITS:
        return float(literal)
    return int(literal)


def _loads(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant, parse_int=_parse_json_int)
    except (ValueError, RecursionError):
        return _UNPARSED


def strip_code_fences(text: str) -> str:
    return _FENCE_PATTERN.sub("", text).strip()


def parse_completion(raw: Any) -> ParseOutcome:
    if not isinstance(raw, str):
        return ParseOutcome(ParseStage.FAILED)

    stage = ParseStage.DIRECT
    candidate = raw
    while stage is not ParseStage.FAILED:
        value = _loads(candidate)
        if value is not _UNPARSED:
            return ParseOutcome(stage, value)

        if stage is ParseStage.DIRECT:
            stage = ParseStage.FENCE_STRIPPED
            candidate = strip_code_fences(raw)
        else:
            stage = ParseStage.FAILED

    return ParseOutcome(ParseStage.FAILED)


def _is_empty_document(value: Any) -> bool:
    # null, false, 0 and "" carry nothing to coerce; {} and [] still do.
    if value is None or value == "":
        return True
    return isinstance(value, (int, float)) and value == 0


# --------------------------------------------------
# Field coercion
# --------------------------------------------------
def _first_present(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _score_text(value: Any) -> str:
    """
    Text form of a JSON value as a JavaScript String() would print it,
    so [80] reads "80" and {"a": 1} reads "[object Object]".
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return "NaN"
        if value == 0 or 1e-6 <= abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    if isinstance(value, list):
        return ",".join("" if x is None else _score_text(x) for x in value)
    return "[object Object]"


def _coerce_score(value: Any) -> int:
    """
    Leading integer of the value's text form ("85%" -> 85, 80.7 -> 80, [80] -> 80).
    Anything without leading digits falls back to 50. Result is clamped to [0, 100].
    """
    m = _LEADING_INT.match(_score_text(value)) if value is not None else None
    if m is None:
        return DEFAULT_RISK_SCORE

    sign, digits = m.groups()
    if len(digits) > _MAX_SCORE_DIGITS:
        return 0 if sign == "-" else 100

    score = int(digits)
    if sign == "-":
        score = -score
    return max(0, min(100, score))


def _non_blank_strings(items: list[Any]) -> list[str]:
    return [x for x in items if isinstance(x, str) and x.strip()]


def _coerce_reasoning(value: Any) -> list[str]:
    if isinstance(value, str):
        reasoning = [value.strip()] if value.strip() else []
    elif isinstance(value, list):
        reasoning = _non_blank_strings(value)
    else:
        reasoning = []
    return reasoning or [NO_REASONING_FALLBACK]


def _coerce_actions(value: Any) -> list[str]:
    actions = _non_blank_strings(value) if isinstance(value, list) else []
    return actions or [DEFAULT_ACTION]


def _coerce_level(value: Any, score: int) -> str:
    # A recognised label wins even if it disagrees with the score band.
    if isinstance(value, str) and value in VALID_RISK_LEVELS:
        return value
    return derive_risk_level(score)


def normalize_payload(payload: dict[str, Any]) -> RiskAssessment:
    """
    Convert a parsed (but untrusted) model payload into a valid RiskAssessment.

    Each field is defaulted on its own; a bad field never discards the others.
    """
    score = _coerce_score(_first_present(payload, "risk_score", "riskScore"))
    level = _coerce_level(_first_present(payload, "risk_level", "riskLevel"), score)

    return RiskAssessment(
        riskScore=score,
        riskLevel=level,
        reasoning=_coerce_reasoning(payload.get("reasoning")),
        actions=_coerce_actions(payload.get("actions")),
    )


def normalize_completion(raw: Any, *, call_failed: bool = False) -> RiskAssessment:
    """
    Raw provider output (or a failed call) -> RiskAssessment. Never raises.

    Terminal outcomes:
    - call failed                    -> fallback
    - parse failed twice             -> fallback
    - parsed to null/false/0/""      -> fallback
    - parsed                         -> coerced assessment
    """
    if call_failed:
        return fallback_assessment()

    outcome = parse_completion(raw)
    if not outcome.ok or _is_empty_document(outcome.value):
        logger.warning("Unparseable completion, returning fallback (type=%s)", type(raw).__name__)
        return fallback_assessment()

    logger.debug("Raw completion payload (%s): %s", outcome.stage.value, outcome.value)
    # A bare number, string or array has no named fields: every field defaults.
    payload = outcome.value if isinstance(outcome.value, dict) else {}
    return normalize_payload(payload)
