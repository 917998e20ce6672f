# api/scores.py
"""
Stored scores: per-day reads, reset, report series and the wellness wheel.
"""
import logging
from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from postgrest.exceptions import APIError

from api.dependencies import AuthenticatedUser, get_current_user, get_score_store
from api.rate_limiter import limiter, DATA_ACCESS_RATE_LIMIT
from api.schemas import DayScoresResponse, DaysResponse, ReportResponse, ResetResponse, WheelRequest
from api.utils import (
    handle_postgrest_error,
    hash_user_id_for_logging,
    parse_day_or_400,
    today_in_timezone,
)
from scoring.questions import VISION_WELLNESS
from scoring.report import build_topic_series, build_vision_series
from scoring.wheel import WheelLayout, layout_wheel
from services.score_store import ScoreStore

logger = logging.getLogger("wellness-api.scores")

router = APIRouter(prefix="/scores", tags=["Scores"])


@router.get("/day/{day}", response_model=DayScoresResponse)
@limiter.limit(DATA_ACCESS_RATE_LIMIT)
async def get_day_scores(
    request: Request,
    day: str,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ScoreStore = Depends(get_score_store),
):
    """Topic -> score map for one day (empty when nothing was recorded)."""
    parsed = parse_day_or_400(day)
    try:
        scores = store.scores_for_day(user.id, parsed)
    except APIError as e:
        handle_postgrest_error(e, user.id)
    return DayScoresResponse(day=parsed.isoformat(), scores=scores)


@router.get("/days", response_model=DaysResponse)
@limiter.limit(DATA_ACCESS_RATE_LIMIT)
async def get_filled_days(
    request: Request,
    start: Optional[str] = Query(None, description="First ISO day (inclusive)"),
    end: Optional[str] = Query(None, description="Last ISO day (inclusive)"),
    user: AuthenticatedUser = Depends(get_current_user),
    store: ScoreStore = Depends(get_score_store),
):
    """Days that have at least one score, for the calendar."""
    start_day = parse_day_or_400(start, "start") if start else None
    end_day = parse_day_or_400(end, "end") if end else None
    try:
        days = store.list_days(user.id, start_day, end_day)
    except APIError as e:
        handle_postgrest_error(e, user.id)
    return DaysResponse(days=days)


@router.delete("/day/{day}", response_model=ResetResponse)
@limiter.limit(DATA_ACCESS_RATE_LIMIT)
async def reset_day(
    request: Request,
    day: str,
    tz: Optional[str] = Query(None, description="IANA timezone of the user"),
    user: AuthenticatedUser = Depends(get_current_user),
    store: ScoreStore = Depends(get_score_store),
):
    """
    Delete every score of a day.

    Only the user's current day may be reset; past days are history.
    """
    parsed = parse_day_or_400(day)
    today = today_in_timezone(tz)
    if parsed != today:
        raise HTTPException(status_code=400, detail="Only today's scores can be reset")

    try:
        deleted = store.delete_day(user.id, parsed)
    except APIError as e:
        handle_postgrest_error(e, user.id)

    logger.info("Reset day=%s user=%s deleted=%d", parsed.isoformat(), hash_user_id_for_logging(user.id), deleted)
    return ResetResponse(day=parsed.isoformat(), deleted=deleted)


@router.get("/report", response_model=ReportResponse)
@limiter.limit(DATA_ACCESS_RATE_LIMIT)
async def get_report(
    request: Request,
    groupBy: Literal["day", "month", "year"] = Query("day"),
    user: AuthenticatedUser = Depends(get_current_user),
    store: ScoreStore = Depends(get_score_store),
):
    """Per-topic and vision series averaged per day, month or year."""
    try:
        rows = store.list_all(user.id)
    except APIError as e:
        handle_postgrest_error(e, user.id)

    logger.debug("Building report for user=%s rows=%d", hash_user_id_for_logging(user.id), len(rows))
    return ReportResponse(
        groupBy=groupBy,
        topics=build_topic_series(rows, groupBy),
        vision=build_vision_series(rows, groupBy),
    )


@router.get("/wheel/{day}", response_model=WheelLayout)
@limiter.limit(DATA_ACCESS_RATE_LIMIT)
async def get_day_wheel(
    request: Request,
    day: str,
    size: float = Query(600, gt=0, le=4096),
    user: AuthenticatedUser = Depends(get_current_user),
    store: ScoreStore = Depends(get_score_store),
):
    """Wheel geometry for a stored day."""
    parsed = parse_day_or_400(day)
    try:
        scores = store.scores_for_day(user.id, parsed)
    except APIError as e:
        handle_postgrest_error(e, user.id)
    return layout_wheel(scores, size=size)


@router.post("/wheel", response_model=WheelLayout)
def compute_wheel(body: WheelRequest):
    """Wheel geometry for scores supplied by the caller."""
    return layout_wheel(body.scores, size=body.size, center_topic=body.centerTopic or VISION_WELLNESS)
