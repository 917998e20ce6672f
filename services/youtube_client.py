# services/youtube_client.py
"""
YouTube Data API client for the education video search.

Environment Variables Required:
- GOOGLE_YT_API_KEY: YouTube Data API v3 key

Single attempt per request with a timeout; no retries.
"""
import json
import logging
import os
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger("wellness-api.youtube")

BASE_URL = "https://www.googleapis.com/youtube/v3"

UPLOADS_PLAYLISTS: Dict[str, str] = {
    "vision": "UUU1eFGW-UcdUhg3DlTafLOg",
    "other": "UUoquIFLN9kHo2HNKb5JSoqA",
}

CHANNELS: Dict[str, str] = {
    "vision": "UCxB-mlL9MoYZbw8B7vXZb3g",
    "other": "UCN2pD4zVw3u3qcsqY1o7JhA",
}

PLAYLIST_PAGE_SIZE = 50
SEARCH_PAGE_SIZE = 12


class YouTubeError(Exception):
    """Base exception for YouTube API errors; carries the HTTP status to surface."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class YouTubeConfigError(YouTubeError):
    """API key missing (500)."""


class YouTubeUpstreamError(YouTubeError):
    """Non-2xx answer from YouTube; status and message are passed through."""


class YouTubeTransportError(YouTubeError):
    """Network failure or timeout reaching YouTube (502)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=502)


class YouTubeClient:
    """
    Thin async wrapper over the two YouTube endpoints the education page uses.

    Args:
        api_key: YouTube Data API key (defaults to GOOGLE_YT_API_KEY)
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests inject httpx.MockTransport)
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else os.getenv("GOOGLE_YT_API_KEY", "")
        self.timeout = timeout
        self._transport = transport
        if not self.api_key:
            logger.warning("GOOGLE_YT_API_KEY not configured")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json() if response.content else {}
        except json.JSONDecodeError:
            body = {}

        if 200 <= response.status_code < 300:
            return body if isinstance(body, dict) else {}

        error = body.get("error") if isinstance(body, dict) else None
        message = error.get("message") if isinstance(error, dict) else None
        logger.warning(f"YouTube API error ({response.status_code}): {message}")
        raise YouTubeUpstreamError(message or "YouTube API error", status_code=response.status_code)

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.is_configured:
            raise YouTubeConfigError("Missing GOOGLE_YT_API_KEY")

        query = {"key": self.api_key, **{k: v for k, v in params.items() if v is not None}}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(f"{BASE_URL}{path}", params=query)
        except httpx.HTTPError as e:
            logger.error(f"YouTube request to {path} failed: {type(e).__name__}")
            raise YouTubeTransportError("Failed to reach YouTube") from e
        return self._handle_response(response)

    async def list_uploads(self, topic: str, page_token: Optional[str] = None) -> Dict[str, Any]:
        """One page (up to 50 entries) of the topic channel's uploads playlist."""
        playlist_id = UPLOADS_PLAYLISTS["other" if topic == "other" else "vision"]
        return await self._get("/playlistItems", {
            "part": "snippet",
            "maxResults": PLAYLIST_PAGE_SIZE,
            "playlistId": playlist_id,
            "pageToken": page_token or None,
        })

    async def search_channel(
        self, topic: str, query: str = "", page_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """Newest-first video search within the topic's channel."""
        channel_id = CHANNELS["vision" if topic == "vision" else "other"]
        return await self._get("/search", {
            "part": "snippet",
            "channelId": channel_id,
            "maxResults": SEARCH_PAGE_SIZE,
            "order": "date",
            "type": "video",
            "q": query.strip() or None,
            "pageToken": page_token or None,
        })
