"""
Tests for the questionnaire endpoints.
"""
from postgrest.exceptions import APIError

from api.utils import today_in_timezone
from scoring.questions import FUNCTIONAL_FOOD, TOPICS
from conftest import AUTH_HEADERS, TEST_USER_ID


def test_list_topics(client):
    response = client.get("/questionnaire/topics")
    assert response.status_code == 200
    topics = response.json()["topics"]
    assert [t["topic"] for t in topics] == TOPICS
    vision = topics[-1]
    assert vision["scoredBy"] == "vision"
    assert vision["questionCount"] == 0
    sleep = next(t for t in topics if t["topic"] == "Sleep")
    assert sleep == {"topic": "Sleep", "questionCount": 10, "scoredBy": "questionnaire"}


def test_get_questions_by_name_and_slug(client):
    by_slug = client.get("/questionnaire/nutrition-diet")
    assert by_slug.status_code == 200
    body = by_slug.json()
    assert body["topic"] == "Nutrition & Diet"
    assert {q["kind"] for q in body["questions"]} <= {"number", "choice", "text"}

    by_name = client.get("/questionnaire/Sleep")
    assert by_name.json()["topic"] == "Sleep"


def test_get_questions_unknown_topic(client):
    response = client.get("/questionnaire/astrology")
    assert response.status_code == 404
    assert "Unknown topic" in response.json()["detail"]


def test_score_without_storing(client, mock_supabase):
    response = client.post("/questionnaire/sports/score", json={"answers": {"sport_hours_week": "2"}})
    assert response.status_code == 200
    body = response.json()
    assert body["topic"] == "Sports"
    assert 0.0 < body["score"] < 1.0
    assert mock_supabase.builders == []


def test_score_functional_food_reports_points(client):
    answers = {"ff_servings_sightc": "2", "ff_frequency_days_sightc": 7}
    body = client.post("/questionnaire/functional-food/score", json={"answers": answers}).json()
    assert body["topic"] == FUNCTIONAL_FOOD
    assert body["max_points"] == 400.0
    assert body["raw_points"] == 100.0
    assert body["score"] == 0.25


def test_vision_wellness_is_not_a_questionnaire(client):
    response = client.post("/questionnaire/vision-wellness/score", json={"answers": {}})
    assert response.status_code == 400


def test_submit_upserts_todays_score(client, mock_supabase):
    response = client.post(
        "/questionnaire/sleep/submit",
        json={"answers": {"sleep_hours": "8"}, "tz": "UTC"},
        headers=AUTH_HEADERS,
    )
    assert response.status_code == 200
    body = response.json()
    today = today_in_timezone("UTC").isoformat()
    assert body["day"] == today
    assert body["topic"] == "Sleep"

    upserts = mock_supabase.calls("upsert")
    assert len(upserts) == 1
    payload = upserts[0][1][0]
    assert payload == [{
        "user_id": TEST_USER_ID,
        "day": today,
        "topic": "Sleep",
        "score": body["score"],
        "raw_points": None,
        "max_points": None,
    }]
    assert upserts[0][2] == {"on_conflict": "user_id,day,topic"}


def test_submit_rejects_invalid_timezone(client, mock_supabase):
    response = client.post(
        "/questionnaire/sleep/submit",
        json={"answers": {}, "tz": "Mars/Olympus"},
        headers=AUTH_HEADERS,
    )
    assert response.status_code == 400
    assert "Invalid timezone" in response.json()["detail"]
    assert mock_supabase.calls("upsert") == []


def test_submit_maps_database_errors(client, mock_supabase):
    mock_supabase.error = APIError({"message": "boom", "code": "XX000", "details": None, "hint": None})
    response = client.post("/questionnaire/sleep/submit", json={"answers": {}}, headers=AUTH_HEADERS)
    assert response.status_code == 500
    assert response.json()["detail"] == "Database error: boom"


def test_submit_requires_auth(anonymous_client):
    response = anonymous_client.post("/questionnaire/sleep/submit", json={"answers": {}})
    assert response.status_code == 401


def test_submit_rejects_malformed_header(anonymous_client):
    response = anonymous_client.post(
        "/questionnaire/sleep/submit", json={"answers": {}}, headers={"Authorization": "Token abc"}
    )
    assert response.status_code == 401
