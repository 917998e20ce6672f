"""
Health report aggregation.

Groups persisted wellness_scores rows by day, month or year and averages
them per topic, producing the series the report charts are drawn from.
"""
from typing import Any, Dict, List, Literal, Optional, Sequence

import pandas as pd
from pydantic import BaseModel

from scoring.questions import FUNCTIONAL_FOOD, TOPICS
from scoring.topic_scorer import FUNCTIONAL_FOOD_MAX_POINTS

GroupBy = Literal["day", "month", "year"]

_KEY_FORMATS = {"day": "%Y-%m-%d", "month": "%Y-%m", "year": "%Y"}

# Current topic names first, then names used by older clients.
VISION_CATEGORIES: Dict[str, List[str]] = {
    "overall": ["Vision Wellness", "Vision Wellness: Overall"],
    "prescription": ["Vision Wellness: Prescription", "Vision Rx", "Prescription"],
    "acuity": ["Vision Wellness: Acuity", "Visual Acuity", "Acuity"],
    "osdi": ["Vision Wellness: OSDI", "OSDI", "Dry Eye OSDI"],
}


class SeriesPoint(BaseModel):
    key: str
    label: str
    value: float


class VisionPoint(BaseModel):
    key: str
    label: str
    values: Dict[str, Optional[float]]


def period_label(key: str, group_by: GroupBy) -> str:
    """Human label for a period key: "Mar 5", "March 2024" or "2024"."""
    if group_by == "day":
        ts = pd.Timestamp(key)
        return f"{ts.strftime('%b')} {ts.day}"
    if group_by == "month":
        return pd.Timestamp(f"{key}-01").strftime("%B %Y")
    return key


def _frame(rows: Sequence[Dict[str, Any]], group_by: GroupBy) -> pd.DataFrame:
    if group_by not in _KEY_FORMATS:
        raise ValueError(f"Unsupported grouping: {group_by}")
    df = pd.DataFrame(list(rows)).reindex(columns=["day", "topic", "score", "raw_points"])
    if df.empty:
        return df.assign(key=pd.Series(dtype=str))
    df["day"] = pd.to_datetime(df["day"].astype(str).str.slice(0, 10), format="%Y-%m-%d", errors="coerce")
    df["score"] = pd.to_numeric(df["score"], errors="coerce")
    df["raw_points"] = pd.to_numeric(df["raw_points"], errors="coerce")
    df = df.dropna(subset=["day", "score"])
    df["key"] = df["day"].dt.strftime(_KEY_FORMATS[group_by])
    return df


def build_topic_series(
    rows: Sequence[Dict[str, Any]],
    group_by: GroupBy = "day",
    topics: Sequence[str] = TOPICS,
) -> Dict[str, List[SeriesPoint]]:
    """
    Average each topic's scores per period.

    Functional Food is reported on its point scale: stored raw points, or
    the score rescaled to 400 when raw points are missing, clamped to
    [0, 400]. Every other topic reports its score clamped to [0, 1].

    Returns:
        Topic -> chronologically ordered points; topics without rows map to []
    """
    df = _frame(rows, group_by)
    series: Dict[str, List[SeriesPoint]] = {topic: [] for topic in topics}
    if df.empty:
        return series

    df = df[df["topic"].isin(list(topics))].copy()
    is_ff = df["topic"] == FUNCTIONAL_FOOD
    ff_value = df["raw_points"].fillna((df["score"] * FUNCTIONAL_FOOD_MAX_POINTS).round())
    df["value"] = df["score"].clip(0, 1).where(~is_ff, ff_value.clip(0, FUNCTIONAL_FOOD_MAX_POINTS))

    grouped = df.groupby(["topic", "key"])["value"].mean().reset_index().sort_values("key")
    for record in grouped.itertuples(index=False):
        series[record.topic].append(
            SeriesPoint(key=record.key, label=period_label(record.key, group_by), value=float(record.value))
        )
    return series


def _vision_category(topic: str) -> Optional[str]:
    for category, aliases in VISION_CATEGORIES.items():
        if topic in aliases:
            return category
    return None


def build_vision_series(rows: Sequence[Dict[str, Any]], group_by: GroupBy = "day") -> List[VisionPoint]:
    """
    Average the four vision categories per period.

    Categories with no rows in a period are reported as None.
    """
    df = _frame(rows, group_by)
    if df.empty:
        return []
    df = df.assign(category=df["topic"].map(lambda t: _vision_category(str(t))))
    df = df.dropna(subset=["category"])
    if df.empty:
        return []
    df["value"] = df["score"].clip(0, 1)

    table = df.pivot_table(index="key", columns="category", values="value", aggfunc="mean").sort_index()
    points = []
    for key, row in table.iterrows():
        values = {
            category: (float(row[category]) if category in row.index and pd.notna(row[category]) else None)
            for category in VISION_CATEGORIES
        }
        points.append(VisionPoint(key=key, label=period_label(key, group_by), values=values))
    return points
