"""
Rate limiting configuration for the Wellness API.

Rate limits are configurable via environment variables.
Format: "number/period" where period can be: second, minute, hour, day
"""
import hashlib
import os
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("wellness-api.rate_limiter")

DEFAULT_RATE_LIMIT = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
DATA_ACCESS_RATE_LIMIT = os.getenv("RATE_LIMIT_DATA_ACCESS", "30/minute")
SEARCH_RATE_LIMIT = os.getenv("RATE_LIMIT_SEARCH", "30/minute")
TIP_RATE_LIMIT = os.getenv("RATE_LIMIT_TIP", "10/minute")

logger.info(f"Rate limiting configured - Default: {DEFAULT_RATE_LIMIT}, "
            f"Data: {DATA_ACCESS_RATE_LIMIT}, Search: {SEARCH_RATE_LIMIT}, Tip: {TIP_RATE_LIMIT}")


def bearer_token_from_request(request: Request) -> str:
    authorization = request.headers.get("authorization") or ""
    if not authorization.lower().startswith("bearer "):
        return ""
    return authorization.split(" ", 1)[1].strip()


def get_rate_limit_key(request: Request) -> str:
    """
    Identify the caller for rate limiting.

    Authenticated callers are keyed by a hash of their bearer token so that
    limits follow the user across IPs; anonymous callers by client IP.
    """
    token = bearer_token_from_request(request)
    if token:
        return f"token:{hashlib.sha256(token.encode()).hexdigest()[:16]}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    default_limits=[DEFAULT_RATE_LIMIT],
    storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", "memory://"),
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom handler for rate limit exceeded responses.

    Returns:
        JSONResponse with 429 status code and a Retry-After header
    """
    logger.warning(
        f"Rate limit exceeded for {get_rate_limit_key(request)} "
        f"on path {request.url.path}"
    )

    retry_after = getattr(exc, 'retry_after', 60)
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please slow down and try again later.",
            "detail": str(exc.detail) if hasattr(exc, 'detail') else "Rate limit exceeded",
            "retry_after": retry_after,
        },
        headers={"Retry-After": str(retry_after)}
    )
