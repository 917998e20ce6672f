# api/education.py
"""
Education video search over the two curated YouTube channels.

Both endpoints fetch one upstream page, map it to SearchItems, optionally
keep only exact-word title matches, drop ids the client has already shown
and rank the rest by relevance to the query.
"""
import logging
from typing import Any, Callable, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from api.dependencies import get_search_cache, get_youtube_client
from api.middleware import add_request_metrics
from api.rate_limiter import limiter, SEARCH_RATE_LIMIT
from api.schemas import VideoSearchRequest, VideoSearchResponse
from scoring.ranking import (
    SearchItem,
    dedupe_items,
    item_from_playlist_entry,
    item_from_search_entry,
    matches_exact_words,
    rank_items,
)
from services.search_cache import SearchCache
from services.youtube_client import YouTubeClient, YouTubeError

logger = logging.getLogger("wellness-api.education")

router = APIRouter(prefix="/education", tags=["Education"])


async def _fetch_page(
    request: Request,
    cache: SearchCache,
    endpoint: str,
    body: VideoSearchRequest,
    fetch: Callable,
) -> Dict[str, Any]:
    """Upstream page from the cache or YouTube; upstream failures become HTTP errors."""
    key = SearchCache.make_key(endpoint, body.topic, body.query, body.pageToken)
    cached = await cache.get(key)
    if cached is not None:
        add_request_metrics(request, cache_hit=True)
        return cached

    try:
        page = await fetch()
    except YouTubeError as e:
        logger.warning(f"Video search failed on {endpoint}: status={e.status_code} message={e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    add_request_metrics(request, cache_hit=False)
    await cache.set(key, page)
    return page


def _build_response(
    page: Dict[str, Any],
    mapper: Callable[[Dict[str, Any]], Optional[SearchItem]],
    body: VideoSearchRequest,
    exact_words: bool,
) -> VideoSearchResponse:
    entries = page.get("items") if isinstance(page.get("items"), list) else []
    items: List[SearchItem] = [item for item in map(mapper, entries) if item is not None]
    if exact_words and body.query.strip():
        items = [item for item in items if matches_exact_words(item.title, body.query)]
    items = dedupe_items(items, set(body.seenIds))
    next_token = page.get("nextPageToken")
    return VideoSearchResponse(
        items=rank_items(items, body.query),
        nextPageToken=next_token if isinstance(next_token, str) and next_token else None,
    )


@router.post("/youtube-search", response_model=VideoSearchResponse)
@limiter.limit(SEARCH_RATE_LIMIT)
async def search_channel(
    request: Request,
    body: VideoSearchRequest,
    youtube: YouTubeClient = Depends(get_youtube_client),
    cache: SearchCache = Depends(get_search_cache),
):
    """Newest-first channel search (12 videos per page)."""
    page = await _fetch_page(
        request, cache, "search", body,
        lambda: youtube.search_channel(body.topic, body.query, body.pageToken),
    )
    response = _build_response(page, item_from_search_entry, body, bool(body.exactWords))
    add_request_metrics(request, items=len(response.items))
    return response


@router.post("/edu-search", response_model=VideoSearchResponse)
@limiter.limit(SEARCH_RATE_LIMIT)
async def search_uploads(
    request: Request,
    body: VideoSearchRequest,
    youtube: YouTubeClient = Depends(get_youtube_client),
    cache: SearchCache = Depends(get_search_cache),
):
    """Search one page (50 videos) of the topic channel's uploads playlist."""
    page = await _fetch_page(
        request, cache, "uploads", body,
        lambda: youtube.list_uploads(body.topic, body.pageToken),
    )
    exact = True if body.exactWords is None else body.exactWords
    response = _build_response(page, item_from_playlist_entry, body, exact)
    add_request_metrics(request, items=len(response.items))
    return response
