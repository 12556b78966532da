"""
Rate limiting using slowapi.
Keeps a single client from flooding the judge queues with submissions or
restarts.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, Response
from fastapi.responses import JSONResponse

from onlinejudge.config import get_settings

settings = get_settings()


def get_user_identifier(request: Request) -> str:
    """
    Get a unique identifier for rate limiting.
    Uses the bearer token if present, otherwise falls back to IP address.
    """
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:]
        return f"token:{hash(token)}"

    return f"ip:{get_remote_address(request)}"


# In-memory storage by default, or shared storage (e.g. Redis) if configured
limiter = Limiter(
    key_func=get_user_identifier,
    storage_uri=settings.rate_limit_storage_url or "memory://",
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Custom handler for rate limit exceeded errors."""
    limit_value = str(exc.detail) if hasattr(exc, "detail") else "Rate limit exceeded"

    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "detail": limit_value,
        },
        headers={"Retry-After": "60"},
    )


def submissions_limit() -> str:
    """Get rate limit string for submission creation."""
    return f"{settings.rate_limit_submissions_per_minute}/minute"


def restart_limit() -> str:
    """Get rate limit string for single submission restarts."""
    return f"{settings.rate_limit_restart_per_minute}/minute"
