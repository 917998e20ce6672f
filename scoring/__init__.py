"""Pure scoring engine: normalizers, topic scores, vision, ranking, wheel and report."""
from .normalizers import (
    MetricPolicy,
    PolicyKind,
    in_range,
    less_is_better,
    more_is_better,
    normalize,
    peak_at,
    score_choice,
    score_free_text,
)
from .questions import FUNCTIONAL_FOOD, QUESTIONS, TOPICS, VISION_WELLNESS, questions_for
from .ranking import SearchItem, dedupe_items, rank_items, relevance_score
from .topic_scorer import TopicScore, evaluate_topic, functional_food_points, score_topic
from .vision import evaluate_vision
from .wheel import WHEEL_TOPICS, WheelLayout, layout_wheel

__all__ = [
    "MetricPolicy",
    "PolicyKind",
    "in_range",
    "less_is_better",
    "more_is_better",
    "normalize",
    "peak_at",
    "score_choice",
    "score_free_text",
    "FUNCTIONAL_FOOD",
    "QUESTIONS",
    "TOPICS",
    "VISION_WELLNESS",
    "questions_for",
    "SearchItem",
    "dedupe_items",
    "rank_items",
    "relevance_score",
    "TopicScore",
    "evaluate_topic",
    "functional_food_points",
    "score_topic",
    "evaluate_vision",
    "WHEEL_TOPICS",
    "WheelLayout",
    "layout_wheel",
]
