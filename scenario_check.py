#!/usr/bin/env python3
"""
Scenario check against a live TruthLens API (real provider, real scores).

Reports how many scenarios land in their expected score range and how many
responses have a level consistent with the canonical band of their score.
"""
from __future__ import annotations

from dataclasses import dataclass
import sys

import requests

from check_message import request_assessment
from config.settings import settings
from detection.normalizer import derive_risk_level


@dataclass(frozen=True)
class Scenario:
    name: str
    message: str
    expect_level: str
    min_score: int | None = None
    max_score: int | None = None

    def score_in_range(self, score: int) -> bool:
        if self.min_score is not None and score < self.min_score:
            return False
        if self.max_score is not None and score > self.max_score:
            return False
        return True


SCENARIOS = [
    Scenario(
        name="Obvious scam (urgent + fake link + account suspended)",
        message=(
            "URGENT! Your bank account has been suspended. Click here immediately to verify: "
            "http://secure-bank-login.com or you will lose access forever!"
        ),
        expect_level="High",
        min_score=70,
    ),
    Scenario(
        name="Phishing / impersonation",
        message=(
            "Hi, this is Microsoft Support. We detected suspicious activity on your account. "
            "Call this number now to avoid permanent lockout: 1-800-555-0199"
        ),
        expect_level="High",
        min_score=70,
    ),
    Scenario(
        name="Low risk - normal message",
        message="Hey, are we still on for coffee tomorrow at 3pm? Let me know!",
        expect_level="Low",
        max_score=30,
    ),
    Scenario(
        name="Ambiguous (delivery + link + request for info)",
        message=(
            "Your package could not be delivered. Visit the link in our previous email to reschedule. "
            "Reply with your phone number for callback."
        ),
        expect_level="Medium",
        min_score=31,
        max_score=69,
    ),
    Scenario(
        name="Too good to be true / advance fee",
        message=(
            "Congratulations! You've won $1,000,000 in the Nigerian lottery! "
            "Send your bank details to claim your prize within 24 hours."
        ),
        expect_level="High",
        min_score=70,
    ),
    Scenario(
        name="Safe professional email",
        message="Hi team, please find the Q4 report attached. Let me know if you have questions. Best, Sarah",
        expect_level="Low",
        max_score=30,
    ),
]


def _rating(range_pct: int, consistent_pct: int) -> str:
    if range_pct >= 80 and consistent_pct >= 80:
        return "GOOD - scoring and consistency look correct."
    if range_pct >= 60 or consistent_pct >= 60:
        return "FAIR - some scenarios or consistency need improvement."
    return "NEEDS WORK - scoring or consistency often wrong."


def run(base_url: str) -> int:
    print("TruthLens AI - Scenario tests")
    print(f"Backend: {base_url}")
    print("-" * 50)

    in_range = 0
    consistent = 0

    for s in SCENARIOS:
        try:
            out = request_assessment(s.message, base_url=base_url)
        except (requests.RequestException, RuntimeError, ValueError) as e:
            print(f"[ERROR] {s.name}: {e}")
            continue

        score_ok = s.score_in_range(out.riskScore)
        level_ok = out.riskLevel == derive_risk_level(out.riskScore)
        in_range += int(score_ok)
        consistent += int(level_ok)

        print(f"{'OK  ' if score_ok else 'FAIL'} {s.name}")
        print(
            f"     score={out.riskScore} level={out.riskLevel} (expected {s.expect_level}) "
            f"score<->level={'yes' if level_ok else 'no'} "
            f"reasons={len(out.reasoning)} actions={len(out.actions)}"
        )
        print(f"     reasoning sample: {out.reasoning[0][:80]}")

    total = len(SCENARIOS)
    range_pct = round(in_range / total * 100) if total else 0
    consistent_pct = round(consistent / total * 100) if total else 0

    print("-" * 50)
    print(f"Score in expected range: {in_range}/{total} ({range_pct}%)")
    print(f"Score <-> level consistent: {consistent}/{total} ({consistent_pct}%)")
    print(f"Overall: {_rating(range_pct, consistent_pct)}")
    return 0 if in_range == total else 1


if __name__ == "__main__":
    sys.exit(run(sys.argv[1] if len(sys.argv) > 1 else settings.TRUTHLENS_API_URL))
