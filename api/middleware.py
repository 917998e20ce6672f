# api/middleware.py
"""
Custom middleware for observability and request tracking.
"""
import time
import uuid
import hashlib
import logging
from typing import Callable, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("wellness-api.middleware")


def caller_hash(request: Request) -> Optional[str]:
    """Short hash of the bearer token, so requests of one caller can be correlated."""
    authorization = request.headers.get("authorization") or ""
    if not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        return None
    return hashlib.sha256(token.encode()).hexdigest()[:8]


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add observability features:
    - Request ID generation and tracking
    - Request timing
    - Caller hashing for privacy-preserving logging
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        user_hash = caller_hash(request)
        start_time = time.time()

        request.state.request_id = request_id
        request.state.user_hash = user_hash

        logger.info(
            f"Request started: request_id={request_id}, method={request.method}, "
            f"path={request.url.path}, user_hash={user_hash or 'none'}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: request_id={request_id}, "
                f"error={str(e)}, "
                f"duration={duration_ms:.2f}ms, "
                f"user_hash={user_hash or 'none'}",
                exc_info=True
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        logger.info(
            f"Request completed: request_id={request_id}, "
            f"status={response.status_code}, "
            f"duration={duration_ms:.2f}ms, "
            f"user_hash={user_hash or 'none'}"
        )
        if hasattr(request.state, 'metrics'):
            logger.info(f"Request metrics: request_id={request_id}, {request.state.metrics}")

        return response


def add_request_metrics(request: Request, **metrics):
    """
    Attach custom metrics to the request; logged when the request completes.

    Example:
        add_request_metrics(request, cache_hit=True, items=12)
    """
    if not hasattr(request.state, 'metrics'):
        request.state.metrics = {}
    request.state.metrics.update(metrics)


def get_request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')
