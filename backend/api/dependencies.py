"""Shared dependencies for API routes."""

from fastapi import HTTPException, Request
from slowapi.util import get_remote_address

from models.responses import ErrorResponse
from services.rate_limiter import check_rate_limit


def get_user_id(request: Request) -> str:
    """Caller identity; authentication happens upstream and forwards X-User-Id."""
    return request.headers.get("X-User-Id") or get_remote_address(request)


def enforce_user_rate_limit(request: Request) -> str:
    user_id = get_user_id(request)
    result = check_rate_limit(user_id)
    if not result.allowed:
        retry_after = max(1, -(-result.reset_in_ms // 1000))
        payload = ErrorResponse(
            code="RATE_LIMITED",
            message=f"Too many analysis requests. Try again in {retry_after} seconds.",
            reset_in_ms=result.reset_in_ms,
        )
        raise HTTPException(
            status_code=429,
            detail=payload.model_dump(),
            headers={"Retry-After": str(retry_after)},
        )
    return user_id
