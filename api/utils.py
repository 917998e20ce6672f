# api/utils.py
"""
Utility functions for the API.
"""
import hashlib
import logging
from datetime import date, datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import HTTPException
from postgrest.exceptions import APIError
from pydantic import ValidationError

logger = logging.getLogger("wellness-api.utils")

DEFAULT_TIMEZONE = "UTC"


def hash_user_id_for_logging(user_id: str) -> str:
    """
    Hash a user ID for privacy-preserving logging.

    Args:
        user_id: The user ID to hash

    Returns:
        First 8 characters of SHA-256 hash
    """
    return hashlib.sha256(user_id.encode()).hexdigest()[:8]


def parse_day_or_400(value: str, param_name: str = "day") -> date:
    """
    Parse an ISO calendar day (YYYY-MM-DD).

    Raises:
        HTTPException: 400 Bad Request if the value is not a valid date
    """
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid date format for {param_name}: {value}"
        )


def resolve_timezone_or_400(tz: Optional[str]) -> ZoneInfo:
    """IANA timezone name to ZoneInfo; blank means UTC."""
    name = (tz or "").strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid timezone: {name}")


def today_in_timezone(tz: Optional[str], now: Optional[datetime] = None) -> date:
    """The user's local calendar day."""
    zone = resolve_timezone_or_400(tz)
    if now is None:
        return datetime.now(zone).date()
    return now.astimezone(zone).date()


def handle_postgrest_error(e: Union[APIError, Exception], user_id: str) -> None:
    """
    Handles PostgREST API errors and raises appropriate HTTPExceptions.

    Maps 401/403 errors to the matching HTTP exceptions and converts
    everything else to 500. The user id is only logged hashed.

    Raises:
        HTTPException: 401, 403, or 500 depending on the error
    """
    error_msg = str(e)
    error_code = getattr(e, "code", None) if isinstance(e, APIError) else None
    user_hash = hash_user_id_for_logging(user_id) if user_id else "-"

    if error_code == "401" or "401" in error_msg:
        logger.error(f"PostgREST Auth Error (401) for user={user_hash}: {e}")
        raise HTTPException(
            status_code=401,
            detail="Unauthorized: Database access denied. Check API configuration."
        )

    if error_code == "403" or "403" in error_msg:
        logger.error(f"PostgREST Permission Error (403) for user={user_hash}: {e}")
        raise HTTPException(
            status_code=403,
            detail="Forbidden: Insufficient permissions for this operation."
        )

    if isinstance(e, ValidationError) or "validation error" in error_msg.lower():
        logger.error(f"Validation Error processing DB response for user={user_hash}: {e}")
        raise HTTPException(
            status_code=500,
            detail="Internal Server Error: Failed to process database response."
        )

    logger.exception(f"PostgREST APIError for user={user_hash}: {e}")

    detail = "Database error"
    if getattr(e, "details", None):
        detail = f"Database error: {e.details}"
    elif getattr(e, "message", None):
        detail = f"Database error: {e.message}"

    raise HTTPException(status_code=500, detail=detail)
