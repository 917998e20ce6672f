# api/vision.py
"""
Vision test scoring and submission.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request
from postgrest.exceptions import APIError

from api.dependencies import AuthenticatedUser, get_current_user, get_score_store
from api.rate_limiter import limiter, DEFAULT_RATE_LIMIT
from api.schemas import VisionScoreResponse, VisionTestRequest
from api.utils import handle_postgrest_error, hash_user_id_for_logging, today_in_timezone
from scoring.vision import SNELLEN, OSDI_QUESTIONS, VisionScores, evaluate_vision
from services.score_store import ScoreStore

logger = logging.getLogger("wellness-api.vision")

router = APIRouter(prefix="/vision", tags=["Vision Wellness"])


def _evaluate(body: VisionTestRequest) -> VisionScores:
    return evaluate_vision(body.prescription, body.readings, body.osdi)


def _response(scores: VisionScores, day: Optional[str] = None) -> VisionScoreResponse:
    return VisionScoreResponse(
        overall=scores.overall,
        prescription=scores.prescription,
        acuity=scores.acuity,
        osdi=scores.osdi,
        acuityDetail=scores.acuity_detail,
        day=day,
    )


@router.get("/chart")
def get_chart():
    """Snellen chart lines and the OSDI questions, in test order."""
    return {
        "lines": [line.model_dump() for line in SNELLEN],
        "osdiQuestions": OSDI_QUESTIONS,
    }


@router.post("/score", response_model=VisionScoreResponse)
def score_vision(body: VisionTestRequest):
    """Score a vision test without storing it."""
    return _response(_evaluate(body))


@router.post("/submit", response_model=VisionScoreResponse)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def submit_vision(
    request: Request,
    body: VisionTestRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ScoreStore = Depends(get_score_store),
):
    """Score a vision test and upsert its four rows as today's scores."""
    day = today_in_timezone(body.tz)
    scores = _evaluate(body)

    try:
        store.upsert_scores(user.id, day, scores.as_topic_rows())
    except APIError as e:
        handle_postgrest_error(e, user.id)

    logger.info(
        "Submitted vision test overall=%.3f user=%s day=%s",
        scores.overall, hash_user_id_for_logging(user.id), day.isoformat()
    )
    return _response(scores, day.isoformat())
