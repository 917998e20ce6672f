"""
Relevance ranking for educational video search results.
"""
import re
from typing import Any, Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
UNAVAILABLE_TITLES = {"private video", "deleted video"}

EXACT_TITLE_BONUS = 1500
PHRASE_BONUS = 1000
PREFIX_BONUS = 200
WORD_BONUS = 50
SUBSTRING_BONUS = 10


class SearchItem(BaseModel):
    """
    One video result.

    ``relevance`` and ``published_at`` are internal ranking keys and are
    excluded when the item is serialized for a response.
    """
    id: str
    title: str
    thumbnail: str = ""
    url: str = ""
    relevance: float = Field(default=0.0, exclude=True)
    published_at: str = Field(default="", exclude=True)


def _words(query: str) -> List[str]:
    return [w for w in query.lower().split() if w]


def _has_whole_word(text: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}\b", text, flags=re.IGNORECASE) is not None


def relevance_score(title: str, query: str) -> int:
    """
    Integer relevance of a title for a query; 0 for a blank query.

    Exact match and prefix bonuses are case-insensitive. The phrase bonus
    applies when the whole query appears as a word-bounded phrase. Every
    query word then adds 50 as a whole word or 10 as a bare substring.
    """
    q = (query or "").strip().lower()
    t = (title or "").lower()
    if not q:
        return 0
    score = 0
    if t == q:
        score += EXACT_TITLE_BONUS
    if t.startswith(q):
        score += PREFIX_BONUS
    if _has_whole_word(t, q):
        score += PHRASE_BONUS
    for word in _words(q):
        if _has_whole_word(t, word):
            score += WORD_BONUS
        elif word in t:
            score += SUBSTRING_BONUS
    return score


def matches_exact_words(title: str, query: str) -> bool:
    """True when every query word appears in the title as a whole word."""
    words = _words(query or "")
    return all(_has_whole_word(title or "", w) for w in words)


def rank_items(items: Iterable[SearchItem], query: str) -> List[SearchItem]:
    """
    Drop incomplete items and order the rest by relevance.

    A blank query keeps the input order. Otherwise items sort by relevance
    descending, ties broken by publish time descending; equal keys keep
    their input order.
    """
    valid = [item for item in items if item.id and item.title]
    if not (query or "").strip():
        return valid
    for item in valid:
        item.relevance = relevance_score(item.title, query)
    # Two stable passes: secondary key first.
    by_date = sorted(valid, key=lambda i: i.published_at or "", reverse=True)
    return sorted(by_date, key=lambda i: i.relevance, reverse=True)


def dedupe_items(items: Iterable[SearchItem], seen_ids: Set[str]) -> List[SearchItem]:
    """Drop items whose id is already in ``seen_ids``; newly kept ids are added to it."""
    kept = []
    for item in items:
        if item.id in seen_ids:
            continue
        seen_ids.add(item.id)
        kept.append(item)
    return kept


def best_thumbnail(thumbnails: Optional[Dict[str, Any]]) -> str:
    thumbnails = thumbnails or {}
    for size in ("high", "medium", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


def _build_item(video_id: Optional[str], snippet: Dict[str, Any]) -> Optional[SearchItem]:
    title = (snippet.get("title") or "").strip()
    if not video_id or not title or title.lower() in UNAVAILABLE_TITLES:
        return None
    return SearchItem(
        id=video_id,
        title=title,
        thumbnail=best_thumbnail(snippet.get("thumbnails")),
        url=WATCH_URL.format(video_id=video_id),
        published_at=snippet.get("publishedAt") or "",
    )


def item_from_playlist_entry(entry: Dict[str, Any]) -> Optional[SearchItem]:
    """Map a playlistItems resource; None for private, deleted or incomplete entries."""
    snippet = entry.get("snippet") or {}
    video_id = (snippet.get("resourceId") or {}).get("videoId") or (entry.get("contentDetails") or {}).get("videoId")
    return _build_item(video_id, snippet)


def item_from_search_entry(entry: Dict[str, Any]) -> Optional[SearchItem]:
    """Map a search resource; non-video results map to None."""
    entry_id = entry.get("id")
    video_id = entry_id.get("videoId") if isinstance(entry_id, dict) else None
    return _build_item(video_id, entry.get("snippet") or {})
