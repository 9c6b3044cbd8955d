from pydantic import BaseModel, Field, field_validator
from typing import List, Literal


RiskLevel = Literal["Low", "Medium", "High"]

VALID_RISK_LEVELS: tuple[str, ...] = ("Low", "Medium", "High")

INVALID_MESSAGE_DETAIL = "Invalid input. 'message' must be a non-empty string."


class AnalyzeRequest(BaseModel):
    """
    Input contract for POST /analyze.
    The message is forwarded to the provider verbatim; only blankness is checked.
    """
    message: str = Field(..., description="Raw message text to assess")

    @field_validator("message", mode="before")
    @classmethod
    def _require_non_blank(cls, v: object) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError(INVALID_MESSAGE_DETAIL)
        return v


class RiskAssessment(BaseModel):
    """
    Normalized result returned to clients.
    Every instance satisfies the invariants below; the normalizer guarantees it.
    """
    riskScore: int = Field(..., ge=0, le=100, description="Risk score between 0 and 100")
    riskLevel: RiskLevel = Field(..., description="Qualitative band (Low, Medium, High)")
    reasoning: List[str] = Field(..., min_length=1, description="Reasoning points, never empty")
    actions: List[str] = Field(..., min_length=1, description="Recommended actions, never empty")


class ErrorResponse(BaseModel):
    detail: str
