from detection.analyzer import analyze_message
from reasoning.llm_client import CompletionError

from conftest import FakeCompletionClient


def test_analyze_message_normalizes_provider_output() -> None:
    client = FakeCompletionClient('{"risk_score": "72", "reasoning": "Lottery win claim", "actions": []}')

    result = analyze_message("You won!", client)

    assert result.riskScore == 72
    assert result.riskLevel == "High"
    assert result.reasoning == ["Lottery win claim"]
    assert result.actions == ["Verify sender manually"]
    assert len(client.calls) == 1


def test_analyze_message_absorbs_provider_errors() -> None:
    for error in (CompletionError("timed out"), ValueError("odd"), TimeoutError()):
        client = FakeCompletionClient(error=error)
        result = analyze_message("hello", client)
        assert result.riskScore == 50
        assert result.reasoning == ["Unable to fully analyze message safely"]
        assert len(client.calls) == 1


def test_empty_completion_returns_fallback() -> None:
    result = analyze_message("hello", FakeCompletionClient(""))
    assert result.riskLevel == "Medium"
    assert result.actions == ["Verify sender manually"]
