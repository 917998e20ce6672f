# api/smart_tip.py
"""
Personalized wellness tip with a product call to action.
"""
import logging
from fastapi import APIRouter, Depends, Request
from postgrest.exceptions import APIError

from api.dependencies import AuthenticatedUser, get_current_user, get_score_store, get_tip_client
from api.middleware import add_request_metrics
from api.rate_limiter import limiter, TIP_RATE_LIMIT
from api.schemas import SmartTipRequest
from api.utils import handle_postgrest_error, hash_user_id_for_logging, parse_day_or_400, today_in_timezone
from services.score_store import ScoreStore
from services.tip_client import TipClient, TipResult

logger = logging.getLogger("wellness-api.smart_tip")

router = APIRouter(tags=["Smart Tip"])


@router.post("/smart-tip", response_model=TipResult)
@limiter.limit(TIP_RATE_LIMIT)
async def smart_tip(
    request: Request,
    body: SmartTipRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ScoreStore = Depends(get_score_store),
    tips: TipClient = Depends(get_tip_client),
):
    """
    Generate one tip from the user's profile and the scores of a day.

    Authentication is resolved before any outbound call. A failing or
    unconfigured language model yields the canned tip with ``fallback=true``.
    """
    day = parse_day_or_400(body.day) if body.day else today_in_timezone(body.tz)
    try:
        scores = store.scores_for_day(user.id, day)
    except APIError as e:
        handle_postgrest_error(e, user.id)

    result = await tips.generate(body.profile, scores)
    add_request_metrics(request, tip_fallback=result.fallback)
    logger.info(
        "Smart tip for user=%s day=%s topics=%d fallback=%s",
        hash_user_id_for_logging(user.id), day.isoformat(), len(scores), result.fallback
    )
    return result
