"""Map pipeline failures to HTTP status codes and client-facing payloads."""

from fastapi import HTTPException

from config import settings
from models.responses import ErrorResponse
from services.errors import AIServiceError, AIUnavailableError, AnalysisFailedError


def _remediation(provider: str, timed_out: bool) -> str:
    if timed_out:
        return " Try a faster model or try again in a moment."
    if provider == "ollama":
        return f" Ensure Ollama is running at {settings.ollama_base_url} and the model is pulled."
    return " Check the provider API key and status."


def error_response(exc: Exception, provider: str) -> tuple[int, ErrorResponse]:
    """Status code and payload for a pipeline exception."""
    timed_out = getattr(exc, "timed_out", False)

    if isinstance(exc, AIUnavailableError):
        return (504 if timed_out else 503), ErrorResponse(
            code="AI_TIMEOUT" if timed_out else "AI_UNAVAILABLE",
            message=f"{exc}{_remediation(provider, timed_out)}",
        )
    if isinstance(exc, AnalysisFailedError):
        if timed_out:
            return 504, ErrorResponse(code="AI_TIMEOUT", message=f"{exc}{_remediation(provider, True)}")
        return 502, ErrorResponse(code="ANALYSIS_FAILED", message=str(exc))
    if isinstance(exc, AIServiceError):
        return 503, ErrorResponse(
            code="PROVIDER_ERROR",
            message=f"{exc}{_remediation(provider, timed_out)}",
        )
    return 500, ErrorResponse(code="INTERNAL_ERROR", message="Unexpected error during analysis")


def to_http_exception(exc: Exception, provider: str) -> HTTPException:
    status, payload = error_response(exc, provider)
    return HTTPException(status_code=status, detail=payload.model_dump(exclude_none=True))
