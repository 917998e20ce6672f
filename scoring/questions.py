"""
Static questionnaire catalog.

Questions are a closed union of three variants discriminated by ``kind``:
numeric, choice (ordered option labels) and free text.
"""
import re
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class NumericQuestion(BaseModel):
    kind: Literal["number"] = "number"
    id: str
    text: str

    model_config = {"frozen": True}


class ChoiceQuestion(BaseModel):
    kind: Literal["choice"] = "choice"
    id: str
    text: str
    options: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class FreeTextQuestion(BaseModel):
    kind: Literal["text"] = "text"
    id: str
    text: str

    model_config = {"frozen": True}


Question = Annotated[
    Union[NumericQuestion, ChoiceQuestion, FreeTextQuestion],
    Field(discriminator="kind"),
]


def _n(qid: str, text: str) -> NumericQuestion:
    return NumericQuestion(id=qid, text=text)


def _c(qid: str, text: str, options: List[str]) -> ChoiceQuestion:
    return ChoiceQuestion(id=qid, text=text, options=options)


def _t(qid: str, text: str) -> FreeTextQuestion:
    return FreeTextQuestion(id=qid, text=text)


FUNCTIONAL_FOOD = "Functional Food"
VISION_WELLNESS = "Vision Wellness"

# Topic order used by the report views; Vision Wellness is scored by the vision test.
TOPICS: List[str] = [
    "Nutrition & Diet",
    "Sleep",
    FUNCTIONAL_FOOD,
    "Mental Health",
    "General Health",
    "Medical History",
    "Reading",
    "Indoor Lighting",
    "Outdoor",
    "Sports",
    VISION_WELLNESS,
]

_FREQUENCY = ["Rarely", "Occasionally", "Often", "Almost always"]


def _scale(low: str, high: str) -> List[str]:
    return [f"1 {low}", "2", "3", "4", "5", "6", f"7 {high}"]


QUESTIONS: Dict[str, List[Union[NumericQuestion, ChoiceQuestion, FreeTextQuestion]]] = {
    "Outdoor": [
        _n("out_hours_day", "On average, how many hours per day do you spend outdoors?"),
        _n("out_lux", "What is the intensity of outdoor light you experience (Lux)? (3,000-5,000 Lux is healthy)"),
        _t("out_activity_type", "What type of outdoor activities do you engage in?"),
        _n("out_direct_sun_min", "How many minutes per day in direct sunlight without sunglasses?"),
        _c("out_nature_freq", "How often do you visit natural environments (parks, forests, beaches)?",
           ["Rarely", "1-2x/week", "3-4x/week", "5-6x/week", "Daily"]),
        _n("out_green_min", "How many minutes per day do you spend in nature or green spaces?"),
        _n("out_fitness_per_week", "How many times per week do you do outdoor fitness (boot camps, nature-based classes)?"),
        _c("out_region", "Which geographic region are you in?",
           ["Tropical", "Temperate", "Polar", "Mediterranean", "Desert", "Subtropical", "Coastal"]),
    ],
    "Indoor Lighting": [
        _n("in_hours_artificial", "Average hours/day in indoor environments with artificial lighting"),
        _n("in_lux", "Indoor lighting intensity (Lux)? (3,000-5,000 Lux is healthy)"),
        _c("in_cct", "Color temperature of indoor lighting",
           ["Very warm", "Warm", "Neutral", "Slightly cool", "Cool", "Very cool", "Blue-rich"]),
        _n("in_hours_natural", "Hours/day in indoor spaces with natural lighting (near windows/skylights)"),
        _n("in_screen_hours", "Hours/day using electronic devices with backlit screens"),
        _c("in_lighting_type", "Primary lighting type at home",
           ["LED", "Fluorescent", "Incandescent", "Halogen", "Mixed/Other"]),
        _c("in_quality", "Overall indoor lighting quality", _scale("Very poor", "Excellent")),
        _n("in_focused_tasks_week", "Times per week doing focused visual tasks under artificial lighting"),
    ],
    "Reading": [
        _n("read_print_hours", "Hours/day reading printed materials (books, newspapers, magazines)"),
        _n("read_days_week", "Days/week you read for leisure or education"),
        _t("read_session_len", "Typical amount per reading session (pages/chapters or minutes)"),
        _c("read_light_quality", "Lighting while reading printed materials", _scale("Very dim", "Very bright")),
        _c("read_contrast", "Text/background contrast while reading", _scale("Very low", "Very high")),
        _n("read_electronic_minutes", "Minutes/day reading from backlit electronic devices"),
        _c("read_env_comfort", "Reading environment comfort (seating/temperature)",
           _scale("Very uncomfortable", "Very comfortable")),
        _n("read_eye_fatigue_week", "Times per week you experience eye fatigue while reading"),
    ],
    "Medical History": [
        _n("mh_chronic_count", "How many chronic medical conditions have you been diagnosed with?"),
        _n("mh_hospitalizations_year", "Times hospitalized in the past year"),
        _n("mh_surgeries_lifetime", "Total surgeries in your lifetime"),
        _n("mh_rx_count", "How many prescription medications are you taking now?"),
        _n("mh_otc_count", "How many OTC meds or supplements do you use regularly?"),
        _n("mh_er_visits_year", "Emergency department visits in the past year"),
        _n("mh_specialist_year", "Specialist consultations in the past year"),
        _t("mh_treatments_year", "Medical treatments for specific conditions in the past year - list with dates if possible"),
        _n("mh_pregnancies", "How many pregnancies have you had? (leave 0 if not applicable)"),
        _n("mh_live_births", "How many live births have you had? (leave 0 if not applicable)"),
        _c("mh_menstruating", "Are you currently menstruating?",
           ["Yes", "No", "Menopause / Post-menopause", "Prefer not to say"]),
    ],
    "General Health": [
        _n("gh_overall_1_10", "Overall health (1-10, 10 = excellent)"),
        _n("gh_mvpa_days", "Days/week with >=30 minutes of moderate-vigorous activity"),
        _n("gh_stress_days", "Days/week you experience stress or anxiety symptoms"),
        _n("gh_depression_days", "Days/week you experience depression/low mood"),
        _n("gh_sleep_weekdays", "Typical hours/night of sleep on weekdays"),
        _n("gh_sleep_weekends", "Typical hours/night of sleep on weekends"),
        _n("gh_water_servings", "How many glasses of water or hydrating beverages per day?"),
        _n("gh_relax_freq", "Times/week you do relaxation or mindfulness practices"),
    ],
    "Mental Health": [
        _n("mth_overall_1_10", "Overall mental well-being (1-10)"),
        _c("mth_stress_freq", "How often do you feel overwhelmed by stress?", _FREQUENCY),
        _n("mth_depression_days_month", "Days in the past month with depression symptoms"),
        _c("mth_anxiety_freq", "How frequently do you experience anxiety symptoms?", _FREQUENCY),
        _n("mth_sleep_hours", "How many hours of quality sleep do you typically get per night?"),
        _c("mth_relax_techniques", "How often do you do relaxation techniques (breathing/meditation)?", _FREQUENCY),
        _c("mth_accomplishment", "How often do you feel a sense of accomplishment?", _FREQUENCY),
        _c("mth_joy_activities", "How frequently do you do activities that bring you joy?", _FREQUENCY),
    ],
    FUNCTIONAL_FOOD: [
        _n("ff_servings_sightc", "Average daily servings of SightC"),
        _n("ff_frequency_days_sightc", "How many days per week do you take SightC?"),
        _n("ff_servings_blueberry", "Average daily servings of Blueberry Gummies"),
        _n("ff_frequency_days_blueberry", "How many days per week do you take Blueberry Gummies?"),
        _n("ff_servings_adaptogenx", "Average daily servings of AdaptogenX"),
        _n("ff_frequency_days_adaptogenx", "How many days per week do you take AdaptogenX?"),
        _n("ff_servings_superfood", "Cups/day of Superfoods Wellness Tea"),
        _n("ff_frequency_days_superfood", "How many days per week do you take Superfood Wellness Blend?"),
        _n("ff_servings_veggiecookies", "Average daily servings of Veggie Cookies"),
        _n("ff_frequency_days_veggiecookies", "How many days per week do you eat Veggie Cookies?"),
        _n("ff_hair_pro_days_week", "Days/week you follow recommended serving size for products"),
        _n("ff_substitute_meals_week", "Times/week you substitute snacks/meals with functional foods"),
        _n("ff_repurchase_month", "Times/month you repurchase functional food products"),
        _t("ff_other", "Any other health foods, medications, or lifestyle medicine?"),
    ],
    "Sleep": [
        _n("sleep_hours", "Average hours of sleep per night"),
        _n("sleep_diff_fall_week", "Times/week you have difficulty falling asleep"),
        _n("sleep_wake_midnight_week", "Times/week you wake during the night and can't return to sleep"),
        _n("sleep_early_wake_week", "Times/week you wake earlier than desired and cannot fall back asleep"),
        _c("sleep_quality", "Overall sleep quality", _scale("Very poor", "Excellent")),
        _c("sleep_day_sleepiness", "Daytime sleepiness/fatigue", _scale("Not at all", "Extremely")),
        _n("sleep_aids_week", "Times/week you use sleep aids or medications"),
        _n("sleep_nap_week", "Times/week you nap in the daytime/afternoon"),
        _c("sleep_bedtime", "Usual bedtime",
           ["Before 9:30 pm", "9:30-11:00 pm", "11:00 pm-1:00 am", "After 1:00 am"]),
        _c("sleep_waketime", "Usual wake-up time",
           ["Before 5:00 am", "5:30-7:00 am", "7:00-9:00 am", "After 9:00 am"]),
    ],
    "Nutrition & Diet": [
        _n("nd_fruit_veg_servings", "Servings of fruits & vegetables per day"),
        _n("nd_processed_fast_food", "Times per week you eat processed or fast food"),
        _n("nd_sugary_bev_week", "Sugary beverages per week"),
        _c("nd_diet_type", "Diet preference", ["Everything", "Vegetarian", "Vegan"]),
        _t("nd_disliked_produce", "Which fruits/vegetables do you not enjoy? (list)"),
        _n("nd_whole_grain_servings", "Servings of whole grains per day"),
        _n("nd_lean_protein_servings", "Servings of lean protein per day"),
        _n("nd_sat_fat_week", "Times/week you eat foods high in saturated fats"),
        _n("nd_added_sugar_week", "Times/week you eat foods high in added sugars"),
        _n("nd_alcohol_week", "Alcoholic beverages per week"),
    ],
    "Sports": [
        _n("sport_hours_week", "Average hours/week in physical activities or sports"),
        _n("sport_moderate_days", "Days/week of moderate-intensity aerobic activity"),
        _n("sport_vigorous_days", "Days/week of vigorous-intensity aerobic activity"),
        _n("sport_strength_min_day", "Minutes/day of strength training"),
        _n("sport_stretch_min_day", "Minutes/day of stretching/flexibility work"),
        _n("sport_rpe_1_10", "Perceived exertion during activity (1-10)"),
        _n("sport_steps_day", "Average steps per day"),
        _n("sport_hand_eye_week", "Times/week you play hand-eye coordination sports (tennis, basketball, racquetball)"),
    ],
}


def questions_for(topic: str) -> List[Union[NumericQuestion, ChoiceQuestion, FreeTextQuestion]]:
    """Question set for a topic; empty for unknown topics and Vision Wellness."""
    return QUESTIONS.get(topic, [])


def is_known_topic(topic: str) -> bool:
    return topic in TOPICS


def topic_slug(topic: str) -> str:
    """URL anchor for a topic ("Nutrition & Diet" -> "nutrition-diet")."""
    return re.sub(r"[^a-z0-9]+", "-", topic.lower()).strip("-")


def resolve_topic(name: str) -> Optional[str]:
    """Canonical topic name for an exact name or its slug; None when unknown."""
    if name in TOPICS:
        return name
    slug = topic_slug(name)
    for topic in TOPICS:
        if topic_slug(topic) == slug:
            return topic
    return None
