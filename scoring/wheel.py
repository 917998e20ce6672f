"""
Wellness wheel geometry.

Lays out one ring wedge per topic whose inner edge moves inward as the
topic score falls, plus a center disc sized by the overview score. Output
is plain geometry (SVG path strings, positions, font sizes) so any client
can draw it.
"""
import math
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from scoring.questions import FUNCTIONAL_FOOD, VISION_WELLNESS, topic_slug
from scoring.topic_scorer import FUNCTIONAL_FOOD_MAX_POINTS

# Clockwise from 12 o'clock.
WHEEL_TOPICS: List[str] = [
    "Outdoor",
    "Indoor Lighting",
    "Reading",
    "Medical History",
    "General Health",
    "Mental Health",
    FUNCTIONAL_FOOD,
    "Sleep",
    "Nutrition & Diet",
    "Sports",
]

SLICE_COLORS: List[str] = [
    "#FFE975",
    "#F7A556",
    "#94D86F",
    "#EE4C40",
    "#B77BEA",
    "#FFF7D9",
    "#B4D97A",
    "#559A94",
    "#FFF25E",
    "#F28B33",
]

START_ANGLE = -90.0
OUTER_FACTOR = 0.5
BASE_INNER_FACTOR = 0.2
MAX_INNER_FACTOR = 0.38
BASE_CENTER_FACTOR = 0.1
MAX_CENTER_FACTOR = 0.2
WHITE_DONUT_FACTOR = 0.22

LABEL_FACTOR_FULL = 0.68
LABEL_FACTOR_INSET = 0.62
LABEL_FACTOR_INSET_FUNCTIONAL_FOOD = 0.66
FULL_SCORE_THRESHOLD = 0.99
COMPACT_LABEL_TOPICS = {FUNCTIONAL_FOOD, "Nutrition & Diet", "Reading"}
BASE_FONT = 16.0
COMPACT_BASE_FONT = 14.0
MIN_FONT = 12.0
LINE_GAP = 1.05
METRIC_FONT = 16.0
METRIC_BAND_T = 0.6
METRIC_BAND_T_WIDE = 2.05


class Point(BaseModel):
    x: float
    y: float


class Label(BaseModel):
    position: Point
    rotation: float
    font_size: float
    line_height: float
    lines: List[str]


class Metric(BaseModel):
    text: str
    position: Point
    font_size: float


class Wedge(BaseModel):
    topic: str
    slug: str
    color: str
    score: Optional[float] = None
    start_angle: float
    end_angle: float
    inner_radius: float
    outer_radius: float
    path: str
    label: Label
    metric: Optional[Metric] = None


class CenterDisc(BaseModel):
    topic: str
    radius: float
    score: Optional[float] = None
    text: Optional[str] = None


class WheelLayout(BaseModel):
    size: float
    center: Point
    white_donut_radius: float
    wedges: List[Wedge]
    center_disc: CenterDisc


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def polar_to_cartesian(cx: float, cy: float, r: float, angle_deg: float) -> Tuple[float, float]:
    a = math.radians(angle_deg)
    return cx + r * math.cos(a), cy + r * math.sin(a)


def ring_wedge_path(
    cx: float, cy: float, r_inner: float, r_outer: float, start_angle: float, end_angle: float
) -> str:
    """SVG path of an annular sector: outer arc clockwise, inner arc back."""
    large_arc = 1 if end_angle - start_angle > 180 else 0
    x1, y1 = polar_to_cartesian(cx, cy, r_outer, start_angle)
    x2, y2 = polar_to_cartesian(cx, cy, r_outer, end_angle)
    x3, y3 = polar_to_cartesian(cx, cy, r_inner, end_angle)
    x4, y4 = polar_to_cartesian(cx, cy, r_inner, start_angle)
    return " ".join([
        f"M {x1} {y1}",
        f"A {r_outer} {r_outer} 0 {large_arc} 1 {x2} {y2}",
        f"L {x3} {y3}",
        f"A {r_inner} {r_inner} 0 {large_arc} 0 {x4} {y4}",
        "Z",
    ])


def inner_radius(score: Optional[float], size: float) -> float:
    base = BASE_INNER_FACTOR * size
    if score is None:
        return base
    return base + (MAX_INNER_FACTOR * size - base) * (1 - _clamp01(score))


def center_radius(score: Optional[float], size: float) -> float:
    """Center disc grows with the overview score; an absent score shows the full disc."""
    base = BASE_CENTER_FACTOR * size
    top = MAX_CENTER_FACTOR * size
    if score is None:
        return top
    return base + (top - base) * _clamp01(score)


def label_font_size(topic: str, thickness: float, label_r: float, slice_rad: float) -> float:
    words = topic.split(" ")
    longest = max(len(w) for w in words)
    base = COMPACT_BASE_FONT if topic in COMPACT_LABEL_TOPICS else BASE_FONT
    radial_limit = (thickness * 0.9) / (1 + (len(words) - 1) * LINE_GAP)
    width_limit = (label_r * slice_rad * 0.9) / max(1.0, 0.6 * longest)
    return max(MIN_FONT, min(base, radial_limit, width_limit))


def _metric_text(topic: str, score: float) -> str:
    if topic == FUNCTIONAL_FOOD:
        return str(round(score * FUNCTIONAL_FOOD_MAX_POINTS))
    return f"{round(score * 100)}%"


def _layout_wedge(
    index: int, topic: str, score: Optional[float], size: float, slice_angle: float
) -> Wedge:
    cx = cy = size / 2
    outer_r = OUTER_FACTOR * size
    white_donut_r = WHITE_DONUT_FACTOR * size
    start = START_ANGLE + index * slice_angle
    end = start + slice_angle
    mid = (start + end) / 2
    r_inner = inner_radius(score, size)
    is_ff = topic == FUNCTIONAL_FOOD

    s = _clamp01(score) if score is not None else None
    if s is not None and s < FULL_SCORE_THRESHOLD:
        factor = LABEL_FACTOR_INSET_FUNCTIONAL_FOOD if is_ff else LABEL_FACTOR_INSET
    else:
        factor = LABEL_FACTOR_FULL
    label_r = r_inner + (outer_r - r_inner) * factor
    lx, ly = polar_to_cartesian(cx, cy, label_r, mid)
    mid_norm = mid % 360
    flip = 90 < mid_norm < 270
    font = label_font_size(topic, outer_r - r_inner, label_r, math.radians(slice_angle))
    label = Label(
        position=Point(x=lx, y=ly),
        rotation=mid + 180 if flip else mid,
        font_size=font,
        line_height=font * LINE_GAP,
        lines=topic.split(" "),
    )

    metric = None
    if score is not None:
        text = _metric_text(topic, score)
        band_inner = white_donut_r + 6
        band_outer = max(band_inner + 6, r_inner - 8)
        t = METRIC_BAND_T
        if is_ff and len(text.lstrip("-")) >= 3:
            t = METRIC_BAND_T_WIDE
        mx, my = polar_to_cartesian(cx, cy, band_inner + (band_outer - band_inner) * t, mid)
        metric = Metric(
            text=text,
            position=Point(x=mx, y=my),
            font_size=min(METRIC_FONT, font) if is_ff else METRIC_FONT,
        )

    return Wedge(
        topic=topic,
        slug=topic_slug(topic),
        color=SLICE_COLORS[index % len(SLICE_COLORS)],
        score=score,
        start_angle=start,
        end_angle=end,
        inner_radius=r_inner,
        outer_radius=outer_r,
        path=ring_wedge_path(cx, cy, r_inner, outer_r, start, end),
        label=label,
        metric=metric,
    )


def layout_wheel(
    scores: Dict[str, float],
    size: float = 600,
    topics: Sequence[str] = WHEEL_TOPICS,
    center_topic: str = VISION_WELLNESS,
) -> WheelLayout:
    """
    Compute the wheel for a topic -> score map.

    Args:
        scores: Normalized scores; topics missing from the map, or whose
            score is NaN or infinite, are drawn at full thickness without
            a metric
        size: Width and height of the square canvas
        topics: Wedge order, clockwise from 12 o'clock
        center_topic: Topic whose score sizes the center disc

    Returns:
        WheelLayout with one wedge per topic
    """
    if not topics:
        raise ValueError("topics must not be empty")
    scores = {t: s for t, s in scores.items() if s is not None and math.isfinite(s)}
    slice_angle = 360 / len(topics)
    wedges = [
        _layout_wedge(i, topic, scores.get(topic), size, slice_angle)
        for i, topic in enumerate(topics)
    ]
    overview = scores.get(center_topic)
    return WheelLayout(
        size=size,
        center=Point(x=size / 2, y=size / 2),
        white_donut_radius=WHITE_DONUT_FACTOR * size,
        wedges=wedges,
        center_disc=CenterDisc(
            topic=center_topic,
            radius=center_radius(overview, size),
            score=overview,
            text=f"{round(_clamp01(overview) * 100)}%" if overview is not None else None,
        ),
    )
