"""
Display helpers for a RiskAssessment.

Purely cosmetic: nothing here feeds back into the API response.
"""

from __future__ import annotations

from typing import Literal

from models.schemas import RiskAssessment

ReasonType = Literal["alert", "safe"]

# ==================================================
# Reasoning line classification (substring match, case-insensitive)
# ==================================================
SAFE_PHRASES = [
    "no suspicious",
    "no direct payment",
    "no payment request",
    "no suspicious link",
    "legitimate",
    "normal context",
    "personal connection",
    "clear expectation",
    "specific budget",
    "suggesting a personal",
    "benign",
    "low risk",
    "no urgency",
    "no links",
    "no urgent",
    "no impersonation",
    "no scam",
    "no phishing",
    "no malicious",
    "no fraud",
    "safe",
    "routine",
    "expected",
    "reasonable",
]

ALERT_PHRASES = [
    "suspicious",
    "phishing",
    "urgent",
    "warning",
    "impersonation",
    "verify account",
    "payment request",
    "malicious",
    "scam",
    "fraud",
    "risk",
    "threat",
    "coercive",
    "pressure",
    "fake",
    "fraudulent",
    "danger",
]

RISK_BANDS = {
    "High": (
        "High Risk",
        "This message shows strong indicators of being a scam. Do not interact with it.",
    ),
    "Medium": (
        "Medium Risk",
        "This message has some suspicious elements. Proceed with caution.",
    ),
    "Low": (
        "Low Risk",
        "This message appears to be safe, but always stay vigilant.",
    ),
}


def reason_type(text: str) -> ReasonType:
    """
    "safe" only when a benign phrase is present and no risk phrase is.
    Note that benign phrases like "no suspicious" also contain risk phrases,
    so most negated findings still read as alerts.
    """
    tl = (text or "").lower()
    has_safe = any(p in tl for p in SAFE_PHRASES)
    has_alert = any(p in tl for p in ALERT_PHRASES)
    if has_safe and not has_alert:
        return "safe"
    return "alert"


def risk_band_summary(level: str) -> tuple[str, str]:
    return RISK_BANDS.get(level, RISK_BANDS["Medium"])


def render_assessment(assessment: RiskAssessment) -> str:
    label, description = risk_band_summary(assessment.riskLevel)

    lines = [
        f"{label}: {assessment.riskScore}/100",
        description,
        "",
        f"AI Reasoning ({len(assessment.reasoning)} flags)",
    ]
    for reason in assessment.reasoning:
        tag = "[ok]" if reason_type(reason) == "safe" else "[!!]"
        lines.append(f"  {tag} {reason}")

    lines.append("")
    lines.append("Recommended Actions")
    for i, action in enumerate(assessment.actions, start=1):
        lines.append(f"  {i}. {action}")

    return "\n".join(lines)
