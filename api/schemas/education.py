"""
Pydantic schemas for the education video search.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from scoring.ranking import SearchItem


class VideoSearchRequest(BaseModel):
    """
    Attributes:
        topic: "vision" (eye health channel) or "other" (general health channel)
        query: Free-text query; blank keeps upstream order
        pageToken: Upstream page token from the previous response
        seenIds: Video ids already shown on earlier pages
        exactWords: Keep only titles containing every query word (default:
            on for the uploads playlist, off for channel search)
    """
    topic: Literal["vision", "other"] = "vision"
    query: str = Field("", max_length=200)
    pageToken: Optional[str] = None
    seenIds: List[str] = Field(default_factory=list, max_length=1000)
    exactWords: Optional[bool] = None


class VideoSearchResponse(BaseModel):
    items: List[SearchItem]
    nextPageToken: Optional[str] = None
