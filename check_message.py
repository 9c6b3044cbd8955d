#!/usr/bin/env python3
"""
Terminal client for a running TruthLens API.

    python check_message.py "Your account is suspended, click here"
    python check_message.py            # interactive, type 'exit' to stop
"""
from __future__ import annotations

import sys

import requests

from config.settings import settings
from models.schemas import RiskAssessment
from presentation.reasoning_view import render_assessment


def request_assessment(message: str, base_url: str | None = None, timeout: float = 30) -> RiskAssessment:
    url = f"{(base_url or settings.TRUTHLENS_API_URL).rstrip('/')}/analyze"
    resp = requests.post(url, json={"message": message}, timeout=timeout)
    if resp.status_code != 200:
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        raise RuntimeError(f"Backend request failed: {resp.status_code} - {detail}")
    return RiskAssessment.model_validate(resp.json())


def _check(message: str) -> int:
    try:
        assessment = request_assessment(message)
    except (requests.RequestException, RuntimeError, ValueError) as e:
        print(f"We couldn't analyze this message right now: {e}")
        return 1
    print(render_assessment(assessment))
    return 0


def main(argv: list[str]) -> int:
    if argv:
        return _check(" ".join(argv))

    print("=" * 70)
    print("TRUTHLENS AI - MESSAGE CHECK")
    print("=" * 70)
    print("Paste a message. Type 'exit' to stop.\n")

    while True:
        message = input("> ").strip()
        if message.lower() in {"exit", "quit"}:
            return 0
        if not message:
            print("Please paste a message before analyzing.\n")
            continue
        _check(message)
        print()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
