from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.logging_setup import configure_logging
from config.settings import settings
from detection.analyzer import analyze_message
from models.schemas import INVALID_MESSAGE_DETAIL, AnalyzeRequest, ErrorResponse, RiskAssessment
from reasoning.llm_client import CompletionClient, get_completion_client

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("truthlens")

app = FastAPI(
    title="TruthLens AI - Message Risk Assessment API",
    description=(
        "Accepts a free-text message, asks an LLM for a scam risk assessment, "
        "and returns a validated score, level, reasoning and recommended actions."
    ),
    version=settings.VERSION,
)

# --------------------------------------------------
# CORS (the web UI calls this API from another origin)
# --------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS or ["*"],
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --------------------------------------------------
# Client input errors -> 400 with a single readable message
# --------------------------------------------------
@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        detail = "Invalid JSON body."
    else:
        detail = INVALID_MESSAGE_DETAIL
    return JSONResponse(status_code=400, content={"detail": detail})


# --------------------------------------------------
# Provider credential (checked before any provider call)
# --------------------------------------------------
def require_configured_client(
    client: CompletionClient = Depends(get_completion_client),
) -> CompletionClient:
    if not client.is_configured:
        logger.error("%s is not configured; refusing /analyze", client.credential_name)
        raise HTTPException(
            status_code=500,
            detail=f"{client.credential_name} is not configured. Add it to the server environment.",
        )
    return client


@app.post(
    "/analyze",
    response_model=RiskAssessment,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def analyze(req: AnalyzeRequest, client: CompletionClient = Depends(require_configured_client)) -> RiskAssessment:
    """
    Always 200 once input and configuration are valid: provider and parse
    failures come back as the fallback assessment.
    """
    return analyze_message(req.message, client)


@app.get("/")
def root_get() -> dict:
    # Uptime checks often use GET /.
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": app.version}


@app.get("/health")
def health() -> dict:
    return {"status": "healthy", "version": app.version}
