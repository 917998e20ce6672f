# api/questionnaire.py
"""
Questionnaire catalog, scoring and submission.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from postgrest.exceptions import APIError

from api.dependencies import AuthenticatedUser, get_current_user, get_score_store
from api.rate_limiter import limiter, DEFAULT_RATE_LIMIT
from api.schemas import (
    AnswerSubmission,
    QuestionSetResponse,
    SubmissionResponse,
    TopicListResponse,
    TopicSummary,
)
from api.utils import handle_postgrest_error, hash_user_id_for_logging, today_in_timezone
from scoring.questions import TOPICS, VISION_WELLNESS, questions_for, resolve_topic
from scoring.topic_scorer import TopicScore, clean_answers, evaluate_topic
from services.score_store import ScoreStore

logger = logging.getLogger("wellness-api.questionnaire")

router = APIRouter(prefix="/questionnaire", tags=["Questionnaire"])


def _topic_or_404(topic: str) -> str:
    resolved = resolve_topic(topic)
    if resolved is None:
        raise HTTPException(status_code=404, detail=f"Unknown topic: {topic}")
    return resolved


def _questionnaire_topic_or_400(topic: str) -> str:
    resolved = _topic_or_404(topic)
    if resolved == VISION_WELLNESS:
        raise HTTPException(status_code=400, detail="Vision Wellness is scored by the vision test")
    return resolved


@router.get("/topics", response_model=TopicListResponse)
def list_topics():
    """All topics in report order with their question counts."""
    return TopicListResponse(topics=[
        TopicSummary(
            topic=topic,
            questionCount=len(questions_for(topic)),
            scoredBy="vision" if topic == VISION_WELLNESS else "questionnaire",
        )
        for topic in TOPICS
    ])


@router.get("/{topic}", response_model=QuestionSetResponse)
def get_questions(topic: str):
    resolved = _topic_or_404(topic)
    return QuestionSetResponse(topic=resolved, questions=questions_for(resolved))


@router.post("/{topic}/score", response_model=TopicScore)
def score_answers(topic: str, body: AnswerSubmission):
    """Score a submission without storing it."""
    resolved = _questionnaire_topic_or_400(topic)
    return evaluate_topic(resolved, clean_answers(body.answers))


@router.post("/{topic}/submit", response_model=SubmissionResponse)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def submit_answers(
    request: Request,
    topic: str,
    body: AnswerSubmission,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ScoreStore = Depends(get_score_store),
):
    """
    Score a submission and upsert it as today's score for the topic.

    "Today" is the user's local day in ``tz``; resubmitting overwrites.
    """
    resolved = _questionnaire_topic_or_400(topic)
    day = today_in_timezone(body.tz)
    result = evaluate_topic(resolved, clean_answers(body.answers))

    try:
        store.upsert_scores(user.id, day, [result.model_dump()])
    except APIError as e:
        handle_postgrest_error(e, user.id)

    logger.info(
        "Submitted topic=%s score=%.3f user=%s day=%s",
        resolved, result.score, hash_user_id_for_logging(user.id), day.isoformat()
    )
    return SubmissionResponse(day=day.isoformat(), **result.model_dump())
