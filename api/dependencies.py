import os
import logging
import threading
from typing import Optional
from fastapi import Depends, HTTPException, Header
from pydantic import BaseModel
from supabase import create_client, Client

from services.score_store import ScoreStore
from services.search_cache import get_search_cache
from services.tip_client import TipClient
from services.youtube_client import YouTubeClient

logger = logging.getLogger("wellness-api.dependencies")

__all__ = [
    "AuthenticatedUser",
    "get_supabase_anon_client",
    "get_supabase_service_role_client",
    "get_current_user",
    "get_score_store",
    "get_youtube_client",
    "get_tip_client",
    "get_search_cache",
    "create_supabase_client",
    "reset_caches_for_testing",
]

_cached_anon_client: Optional[Client] = None
_cached_service_client: Optional[Client] = None
_cached_youtube_client: Optional[YouTubeClient] = None
_cached_tip_client: Optional[TipClient] = None

_client_initialization_lock = threading.Lock()

# Sanity heuristics for truncated keys
MIN_SERVICE_KEY_LENGTH = 180
MIN_ANON_KEY_LENGTH = 100


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None


def reset_caches_for_testing():
    """
    Reset global client caches between tests.
    Not for production code.
    """
    global _cached_anon_client, _cached_service_client, _cached_youtube_client, _cached_tip_client
    _cached_anon_client = None
    _cached_service_client = None
    _cached_youtube_client = None
    _cached_tip_client = None


def create_supabase_client(url: str, key: str) -> Client:
    """Build a sync Supabase client; the single patch point for tests."""
    return create_client(url, key)


def get_supabase_anon_client() -> Client:
    """
    ANON client (RLS applied). Used for token validation (auth.get_user).
    Thread-safe with double-checked locking.
    """
    global _cached_anon_client
    if _cached_anon_client is None:
        with _client_initialization_lock:
            if _cached_anon_client is None:
                url = os.getenv("SUPABASE_URL")
                anon_key = os.getenv("SUPABASE_ANON_KEY", "").strip()

                if not url or not anon_key:
                    logger.error("SUPABASE_URL or SUPABASE_ANON_KEY missing.")
                    raise HTTPException(status_code=500, detail="Supabase configuration incomplete (ANON).")

                if len(anon_key) < MIN_ANON_KEY_LENGTH:
                    logger.error("ANON KEY invalid/truncated (len=%d).", len(anon_key))
                    raise HTTPException(status_code=500, detail="SUPABASE_ANON_KEY invalid or truncated.")

                logger.info("Initializing ANON client (sync) key=%s...%s", anon_key[:5], anon_key[-5:])
                _cached_anon_client = create_supabase_client(url, anon_key)
    return _cached_anon_client


def get_supabase_service_role_client() -> Client:
    """
    SERVICE ROLE client (bypasses RLS). Used for score persistence, always
    scoped explicitly by the authenticated user's id.
    Thread-safe with double-checked locking.
    """
    global _cached_service_client
    if _cached_service_client is None:
        with _client_initialization_lock:
            if _cached_service_client is None:
                url = os.getenv("SUPABASE_URL")
                service_key = os.getenv("SUPABASE_SERVICE_KEY", "").strip()

                if not url or not service_key:
                    logger.error("SUPABASE_URL or SUPABASE_SERVICE_KEY missing.")
                    raise HTTPException(status_code=500, detail="Supabase configuration incomplete (SERVICE).")

                if len(service_key) < MIN_SERVICE_KEY_LENGTH:
                    logger.error("SERVICE KEY invalid/truncated (len=%d).", len(service_key))
                    raise HTTPException(status_code=500, detail="SUPABASE_SERVICE_KEY invalid or truncated.")

                logger.info("Initializing SERVICE client (sync) key=%s...%s", service_key[:5], service_key[-5:])
                _cached_service_client = create_supabase_client(url, service_key)
    return _cached_service_client


async def get_current_user(authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    """
    Validate the Bearer token with Supabase auth and return the user.

    The header is checked before any client is created, so a missing or
    malformed credential fails with 401 without any outbound call.

    Raises:
        HTTPException: 401 if the token is missing, malformed or rejected
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        logger.warning("Authorization header missing or malformed")
        raise HTTPException(status_code=401, detail="Authorization required. Provide a valid JWT token.")

    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Empty token")

    supabase = get_supabase_anon_client()
    try:
        user_response = supabase.auth.get_user(token)
        user = getattr(user_response, "user", None)
    except Exception as e:
        logger.error("Supabase auth failure: %s", str(e)[:200])
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if not user or not getattr(user, "id", None):
        logger.warning("Token did not resolve to a user")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return AuthenticatedUser(id=str(user.id), email=getattr(user, "email", None))


def get_score_store(client: Client = Depends(get_supabase_service_role_client)) -> ScoreStore:
    return ScoreStore(client)


def get_youtube_client() -> YouTubeClient:
    global _cached_youtube_client
    if _cached_youtube_client is None:
        _cached_youtube_client = YouTubeClient()
    return _cached_youtube_client


def get_tip_client() -> TipClient:
    global _cached_tip_client
    if _cached_tip_client is None:
        _cached_tip_client = TipClient()
    return _cached_tip_client
