"""
Metric normalizers for questionnaire answers.

Every function here maps a raw answer onto a [0, 1] wellness contribution
(1 = best). Malformed input never raises: it is coerced to the nearest
defined edge value (0, 0.5 or 1).
"""
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple


class PolicyKind(str, Enum):
    """How a numeric metric maps onto a wellness contribution."""
    MORE_IS_BETTER = "more_is_better"
    LESS_IS_BETTER = "less_is_better"
    PEAK_AT_TARGET = "peak_at_target"
    IN_RANGE = "in_range"


@dataclass(frozen=True)
class MetricPolicy:
    """
    Normalization policy for one numeric metric.

    Attributes:
        kind: Curve family to apply
        k: Half-saturation constant for the more/less-is-better curves
        target: Ideal value for PEAK_AT_TARGET
        width: Falloff width for PEAK_AT_TARGET
        lo: Lower bound of the healthy band for IN_RANGE
        hi: Upper bound of the healthy band for IN_RANGE
    """
    kind: PolicyKind
    k: float = 2.0
    target: Optional[float] = None
    width: float = 1.5
    lo: Optional[float] = None
    hi: Optional[float] = None


MORE = MetricPolicy(PolicyKind.MORE_IS_BETTER)
LESS = MetricPolicy(PolicyKind.LESS_IS_BETTER)

NEUTRAL_CHOICE_SCORE = 0.5
FREE_TEXT_SCORE = 0.6


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def more_is_better(x: float, k: float = 2.0) -> float:
    """Saturating curve x / (x + k); approaches but never reaches 1."""
    if not math.isfinite(x) or x <= 0:
        return 0.0
    return min(1.0, x / (x + k))


def less_is_better(x: float, k: float = 2.0) -> float:
    """Inverse of more_is_better for metrics where higher raw values are worse."""
    return 1.0 - more_is_better(x, k)


def peak_at(x: float, target: float, width: float = 1.5) -> float:
    """Gaussian falloff around an ideal value (e.g. 8 hours of sleep)."""
    if not math.isfinite(x):
        return 0.0
    z = (x - target) / width
    return _clamp01(math.exp(-0.5 * z * z))


def in_range(x: float, lo: float, hi: float) -> float:
    """
    Full credit inside [lo, hi]; 80%-scaled linear falloff outside it.

    Args:
        x: Raw value (e.g. light intensity in lux)
        lo: Lower bound of the healthy band
        hi: Upper bound of the healthy band

    Returns:
        1.0 inside the band, otherwise 0.8 * (x / lo) below it or
        0.8 * (hi / x) above it. Non-finite or non-positive values score 0.
    """
    if not math.isfinite(x) or x <= 0:
        return 0.0
    if x < lo:
        return _clamp01(x / lo) * 0.8
    if x > hi:
        return _clamp01(hi / x) * 0.8
    return 1.0


# Keyword fragments that historically marked a metric as "less is better".
# Only consulted for metric ids missing from METRIC_POLICIES.
LEGACY_BAD_KEYWORDS: Tuple[str, ...] = (
    "er_", "hospital", "surgery", "surger", "rx_", "otc_", "wake_", "diff_", "aids",
    "sugary", "processed", "sat_fat", "added_sugar", "alcohol", "screen", "stress",
    "depression", "anxiety", "fatigue",
)


def is_legacy_bad_metric(metric_id: str) -> bool:
    return any(fragment in metric_id for fragment in LEGACY_BAD_KEYWORDS)


# Explicit per-metric policies for every numeric question in the catalog.
# out_fitness_per_week and gh_water_servings are LESS because the legacy "er_"
# fragment matched them; kept until the intended semantics are confirmed.
METRIC_POLICIES: Dict[str, MetricPolicy] = {
    # Outdoor
    "out_hours_day": MORE,
    "out_lux": MetricPolicy(PolicyKind.IN_RANGE, lo=3000, hi=5000),
    "out_direct_sun_min": MORE,
    "out_green_min": MORE,
    "out_fitness_per_week": LESS,
    # Indoor Lighting
    "in_hours_artificial": MORE,
    "in_lux": MetricPolicy(PolicyKind.IN_RANGE, lo=3000, hi=5000),
    "in_hours_natural": MORE,
    "in_screen_hours": LESS,
    "in_focused_tasks_week": MORE,
    # Reading
    "read_print_hours": MORE,
    "read_days_week": MORE,
    "read_electronic_minutes": MORE,
    "read_eye_fatigue_week": LESS,
    # Medical History
    "mh_chronic_count": MORE,
    "mh_hospitalizations_year": LESS,
    "mh_surgeries_lifetime": LESS,
    "mh_rx_count": LESS,
    "mh_otc_count": LESS,
    "mh_er_visits_year": LESS,
    "mh_specialist_year": MORE,
    "mh_pregnancies": MORE,
    "mh_live_births": MORE,
    # General Health
    "gh_overall_1_10": MORE,
    "gh_mvpa_days": MORE,
    "gh_stress_days": LESS,
    "gh_depression_days": LESS,
    "gh_sleep_weekdays": MORE,
    "gh_sleep_weekends": MORE,
    "gh_water_servings": LESS,
    "gh_relax_freq": MORE,
    # Mental Health
    "mth_overall_1_10": MORE,
    "mth_depression_days_month": LESS,
    "mth_sleep_hours": MORE,
    # Functional Food
    "ff_servings_sightc": MORE,
    "ff_frequency_days_sightc": MORE,
    "ff_servings_blueberry": MORE,
    "ff_frequency_days_blueberry": MORE,
    "ff_servings_adaptogenx": MORE,
    "ff_frequency_days_adaptogenx": MORE,
    "ff_servings_superfood": MORE,
    "ff_frequency_days_superfood": MORE,
    "ff_servings_veggiecookies": MORE,
    "ff_frequency_days_veggiecookies": MORE,
    "ff_hair_pro_days_week": MORE,
    "ff_substitute_meals_week": MORE,
    "ff_repurchase_month": MORE,
    # Sleep
    "sleep_hours": MetricPolicy(PolicyKind.PEAK_AT_TARGET, target=8),
    "sleep_diff_fall_week": LESS,
    "sleep_wake_midnight_week": LESS,
    "sleep_early_wake_week": LESS,
    "sleep_aids_week": LESS,
    "sleep_nap_week": MORE,
    # Nutrition & Diet
    "nd_fruit_veg_servings": MORE,
    "nd_processed_fast_food": LESS,
    "nd_sugary_bev_week": LESS,
    "nd_whole_grain_servings": MORE,
    "nd_lean_protein_servings": MORE,
    "nd_sat_fat_week": LESS,
    "nd_added_sugar_week": LESS,
    "nd_alcohol_week": LESS,
    # Sports
    "sport_hours_week": MORE,
    "sport_moderate_days": MORE,
    "sport_vigorous_days": MORE,
    "sport_strength_min_day": MORE,
    "sport_stretch_min_day": MORE,
    "sport_rpe_1_10": MORE,
    "sport_steps_day": MORE,
    "sport_hand_eye_week": MORE,
}


def policy_for(metric_id: str) -> MetricPolicy:
    """Look up a metric's policy, falling back to the legacy keyword rule."""
    policy = METRIC_POLICIES.get(metric_id)
    if policy is not None:
        return policy
    return LESS if is_legacy_bad_metric(metric_id) else MORE


def parse_number(raw) -> Optional[float]:
    """Parse a raw answer as a finite float; None when that is not possible."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return 0.0
        try:
            value = float(text)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def apply_policy(x: float, policy: MetricPolicy) -> float:
    if policy.kind is PolicyKind.PEAK_AT_TARGET:
        return peak_at(x, policy.target, policy.width)
    if policy.kind is PolicyKind.IN_RANGE:
        return in_range(x, policy.lo, policy.hi)
    if policy.kind is PolicyKind.LESS_IS_BETTER:
        return less_is_better(x, policy.k)
    return more_is_better(x, policy.k)


def normalize(metric_id: str, raw_value, policy: Optional[MetricPolicy] = None) -> float:
    """
    Normalize a numeric answer for the given metric.

    Args:
        metric_id: Question identifier used to select the policy
        raw_value: Raw answer (string or number)
        policy: Explicit policy; looked up from METRIC_POLICIES when omitted

    Returns:
        Score in [0, 1]; non-finite or unparseable values score 0
    """
    x = parse_number(raw_value)
    if x is None:
        return 0.0
    return _clamp01(apply_policy(x, policy or policy_for(metric_id)))


_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def leading_number(label: str) -> Optional[float]:
    match = _LEADING_NUMBER.match(label or "")
    return float(match.group(1)) if match else None


def score_choice(raw: str, options: Optional[Sequence[str]]) -> float:
    """
    Score a choice answer by its ordinal position.

    Digit-led option labels ("1 Very poor" ... "7 Excellent") are scored as
    the chosen number over the last label's number. Other labels score
    index / (count - 1), with a single option scoring 1. An answer that
    matches no option scores 0.5.
    """
    if not options:
        return NEUTRAL_CHOICE_SCORE
    options = list(options)
    if leading_number(options[0].strip()) is not None:
        top = leading_number(options[-1]) or 1.0
        chosen = leading_number(raw) or 0.0
        return _clamp01(chosen / top)
    try:
        idx = options.index(raw)
    except ValueError:
        return NEUTRAL_CHOICE_SCORE
    if len(options) == 1:
        return 1.0
    return idx / (len(options) - 1)


def score_free_text(raw: str) -> float:
    """Presence, not content, is rewarded."""
    return FREE_TEXT_SCORE if raw and raw.strip() else 0.0


__all__: List[str] = [
    "PolicyKind",
    "MetricPolicy",
    "METRIC_POLICIES",
    "LEGACY_BAD_KEYWORDS",
    "more_is_better",
    "less_is_better",
    "peak_at",
    "in_range",
    "is_legacy_bad_metric",
    "policy_for",
    "parse_number",
    "normalize",
    "leading_number",
    "score_choice",
    "score_free_text",
]
