# services/score_store.py
"""
Persistence of per-user, per-day, per-topic wellness scores.

Backed by the ``wellness_scores`` table, unique on (user_id, day, topic).
Writes are upserts, so resubmitting a topic on the same day overwrites it.
PostgREST errors propagate to the caller (routers map them with
api.utils.handle_postgrest_error).
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from supabase import Client

from api.utils import hash_user_id_for_logging

logger = logging.getLogger("wellness-api.scores")

TABLE = "wellness_scores"
CONFLICT_COLUMNS = "user_id,day,topic"
REPORT_COLUMNS = "day,topic,score,raw_points,max_points"


class ScoreStore:
    """Thin repository over the Supabase client (service role)."""

    def __init__(self, client: Client):
        self._client = client

    def upsert_scores(self, user_id: str, day: date, scores: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Upsert one row per topic for a day.

        Args:
            user_id: Owner of the scores
            day: Calendar day (user's local date)
            scores: Dicts with ``topic`` and ``score`` and optionally
                ``raw_points``/``max_points``

        Returns:
            Rows returned by the database
        """
        payload = [
            {
                "user_id": user_id,
                "day": day.isoformat(),
                "topic": item["topic"],
                "score": float(item["score"]),
                "raw_points": item.get("raw_points"),
                "max_points": item.get("max_points"),
            }
            for item in scores
        ]
        if not payload:
            return []
        response = self._client.table(TABLE)\
            .upsert(payload, on_conflict=CONFLICT_COLUMNS)\
            .execute()
        logger.info(
            "Upserted %d score(s) for user=%s day=%s",
            len(payload), hash_user_id_for_logging(user_id), day.isoformat()
        )
        return response.data or []

    def scores_for_day(self, user_id: str, day: date) -> Dict[str, float]:
        """Topic -> score for one day."""
        response = self._client.table(TABLE)\
            .select("topic,score")\
            .eq("user_id", user_id)\
            .eq("day", day.isoformat())\
            .execute()
        return {row["topic"]: float(row["score"]) for row in (response.data or [])}

    def list_days(self, user_id: str, start: Optional[date] = None, end: Optional[date] = None) -> List[str]:
        """Distinct ISO days having at least one score, ascending."""
        query = self._client.table(TABLE)\
            .select("day")\
            .eq("user_id", user_id)
        if start is not None:
            query = query.gte("day", start.isoformat())
        if end is not None:
            query = query.lte("day", end.isoformat())
        response = query.execute()
        return sorted({str(row["day"])[:10] for row in (response.data or [])})

    def delete_day(self, user_id: str, day: date) -> int:
        """Delete every score of one day; returns the number of rows removed."""
        response = self._client.table(TABLE)\
            .delete()\
            .eq("user_id", user_id)\
            .eq("day", day.isoformat())\
            .execute()
        deleted = len(response.data or [])
        logger.info(
            "Deleted %d score(s) for user=%s day=%s",
            deleted, hash_user_id_for_logging(user_id), day.isoformat()
        )
        return deleted

    def list_all(self, user_id: str) -> List[Dict[str, Any]]:
        """Every stored row for the report, oldest first."""
        response = self._client.table(TABLE)\
            .select(REPORT_COLUMNS)\
            .eq("user_id", user_id)\
            .order("day")\
            .execute()
        return response.data or []
