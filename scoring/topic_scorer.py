"""
Topic scoring: turns one questionnaire submission into a normalized score.
"""
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from scoring.normalizers import normalize, parse_number, score_choice, score_free_text
from scoring.questions import (
    FUNCTIONAL_FOOD,
    ChoiceQuestion,
    FreeTextQuestion,
    NumericQuestion,
    questions_for,
)

AnyQuestion = Union[NumericQuestion, ChoiceQuestion, FreeTextQuestion]

FUNCTIONAL_FOOD_MAX_POINTS = 400.0
# Weekly servings of two products used at the maximum recommended intensity.
FUNCTIONAL_FOOD_WEEKLY_CEILING = 56.0
FUNCTIONAL_FOOD_TOP_N = 2

FUNCTIONAL_FOOD_PAIRS: List[Tuple[str, str]] = [
    ("ff_servings_sightc", "ff_frequency_days_sightc"),
    ("ff_servings_blueberry", "ff_frequency_days_blueberry"),
    ("ff_servings_adaptogenx", "ff_frequency_days_adaptogenx"),
    ("ff_servings_superfood", "ff_frequency_days_superfood"),
    ("ff_servings_veggiecookies", "ff_frequency_days_veggiecookies"),
]


class TopicScore(BaseModel):
    """
    Result of scoring one topic.

    Attributes:
        topic: Topic name
        score: Normalized score in [0, 1]
        raw_points: Point-scale score (Functional Food only)
        max_points: Maximum of the point scale (Functional Food only)
    """
    topic: str
    score: float = Field(..., ge=0.0, le=1.0)
    raw_points: Optional[float] = None
    max_points: Optional[float] = None


def score_question(question: AnyQuestion, raw: Optional[str]) -> float:
    """Contribution of one answer; a missing or empty answer contributes 0."""
    if raw is None or raw == "":
        return 0.0
    if isinstance(question, NumericQuestion):
        return normalize(question.id, raw)
    if isinstance(question, ChoiceQuestion):
        return score_choice(raw, question.options)
    if isinstance(question, FreeTextQuestion):
        return score_free_text(raw)
    raise TypeError(f"Unsupported question type: {type(question).__name__}")


def score_topic(topic: str, questions: Sequence[AnyQuestion], answers: Mapping[str, str]) -> float:
    """
    Average the per-question contributions of a topic.

    Args:
        topic: Topic name (kept for symmetry with evaluate_topic)
        questions: Ordered question set
        answers: Question id -> raw answer

    Returns:
        Arithmetic mean of contributions clamped to [0, 1]; 0 for an empty set
    """
    if not questions:
        return 0.0
    total = sum(score_question(q, answers.get(q.id)) for q in questions)
    return max(0.0, min(1.0, total / len(questions)))


def _answer_number(answers: Mapping[str, str], key: str) -> float:
    value = parse_number(answers.get(key) or 0)
    return value if value is not None else 0.0


def weekly_totals(answers: Mapping[str, str]) -> List[float]:
    """Servings x days per product; days clamped to [0, 7], servings to >= 0."""
    totals = []
    for servings_key, days_key in FUNCTIONAL_FOOD_PAIRS:
        servings = max(0.0, _answer_number(answers, servings_key))
        days = max(0.0, min(7.0, _answer_number(answers, days_key)))
        totals.append(servings * days)
    return totals


def functional_food_points(answers: Mapping[str, str]) -> float:
    """
    Functional Food score on its 0-400 point scale.

    Only the two highest weekly product totals count; their sum is measured
    against a ceiling of 56 and capped at 1 before scaling to 400 points.
    """
    totals = sorted(weekly_totals(answers), reverse=True)
    top = sum(totals[:FUNCTIONAL_FOOD_TOP_N])
    ratio = min(1.0, top / FUNCTIONAL_FOOD_WEEKLY_CEILING)
    return ratio * FUNCTIONAL_FOOD_MAX_POINTS


def evaluate_topic(
    topic: str,
    answers: Mapping[str, str],
    questions: Optional[Sequence[AnyQuestion]] = None,
) -> TopicScore:
    """Score a submission, using the point scale for Functional Food."""
    if topic == FUNCTIONAL_FOOD:
        points = functional_food_points(answers)
        return TopicScore(
            topic=topic,
            score=points / FUNCTIONAL_FOOD_MAX_POINTS,
            raw_points=points,
            max_points=FUNCTIONAL_FOOD_MAX_POINTS,
        )
    if questions is None:
        questions = questions_for(topic)
    return TopicScore(topic=topic, score=score_topic(topic, questions, answers))


def clean_answers(answers: Mapping[str, object]) -> Dict[str, str]:
    """Coerce an incoming answer map to strings, dropping null values."""
    return {str(k): str(v) for k, v in answers.items() if v is not None}
