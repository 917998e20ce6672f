#!/usr/bin/env python3
"""
Seed test wellness scores for a specific user in Supabase database.

Generates randomized questionnaire answers and a vision test for each of
the last N days, scores them with the scoring engine and upserts the rows
into wellness_scores. It prompts for confirmation before writing.

Requirements:
    - SUPABASE_URL environment variable
    - SUPABASE_SERVICE_KEY environment variable

Usage (from the repository root):
    export SUPABASE_URL="https://your-project.supabase.co"
    export SUPABASE_SERVICE_KEY="your-service-role-key"
    python -m tools.seed_scores <user_id> <num_days>

Example:
    python -m tools.seed_scores 6f1c...-uuid 14
"""

import os
import sys
import random
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from supabase import create_client, Client

from scoring.questions import QUESTIONS, ChoiceQuestion, FreeTextQuestion
from scoring.topic_scorer import evaluate_topic
from scoring.vision import SNELLEN, EyeValues, LineReading, Prescription, evaluate_vision
from services.score_store import ScoreStore

SAMPLE_TEXT = ["Walking", "Yoga and cycling", "Vitamin D", "None", ""]


def get_supabase_client() -> Client:
    """
    Create and return a Supabase client using environment variables.

    Raises:
        SystemExit: If required environment variables are not set
    """
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_SERVICE_KEY")

    if not url or not key:
        print("ERROR: Missing required environment variables", file=sys.stderr)
        print("Please set SUPABASE_URL and SUPABASE_SERVICE_KEY", file=sys.stderr)
        sys.exit(1)

    return create_client(url, key)


def random_answers(topic: str, rng: random.Random) -> Dict[str, str]:
    """Plausible answers for every question of a topic."""
    answers = {}
    for question in QUESTIONS[topic]:
        if isinstance(question, ChoiceQuestion):
            answers[question.id] = rng.choice(question.options)
        elif isinstance(question, FreeTextQuestion):
            answers[question.id] = rng.choice(SAMPLE_TEXT)
        elif question.id == "sleep_hours":
            answers[question.id] = str(round(rng.uniform(5.0, 10.0), 1))
        elif question.id.endswith("_lux"):
            answers[question.id] = str(rng.randint(500, 8000))
        elif "frequency_days" in question.id or question.id.endswith("_days"):
            answers[question.id] = str(rng.randint(0, 7))
        else:
            answers[question.id] = str(rng.randint(0, 6))
    return answers


def random_vision_rows(rng: random.Random) -> List[Dict[str, float]]:
    rx = Prescription(
        od=EyeValues(sph=str(round(rng.uniform(-4, 1), 2)), cyl=str(round(rng.uniform(-1.5, 0), 2))),
        os=EyeValues(sph=str(round(rng.uniform(-4, 1), 2)), cyl=str(round(rng.uniform(-1.5, 0), 2))),
        pd=str(rng.randint(56, 70)),
    )
    last_line = rng.randint(3, len(SNELLEN) - 1)
    readings = [LineReading(line=line.label, letters=line.letters) for line in SNELLEN[:last_line + 1]]
    osdi: List[Optional[int]] = [rng.randint(1, 8) for _ in range(12)]
    return evaluate_vision(rx, readings, osdi).as_topic_rows()


def build_day_rows(rng: random.Random) -> List[dict]:
    rows = [evaluate_topic(topic, random_answers(topic, rng)).model_dump() for topic in QUESTIONS]
    rows.extend(random_vision_rows(rng))
    return rows


def confirm_action(message: str) -> bool:
    """Prompt user for yes/no confirmation."""
    while True:
        response = input(f"{message} (yes/no): ").strip().lower()
        if response in ['yes', 'y']:
            return True
        elif response in ['no', 'n']:
            return False
        else:
            print("Please answer 'yes' or 'no'")


def seed_scores(user_id: str, num_days: int, seed: Optional[int] = None):
    """
    Upsert N days of scores for a user after confirmation.

    Args:
        user_id: The user ID to create scores for
        num_days: Number of days, ending today (UTC)
        seed: Optional random seed for reproducible data
    """
    rng = random.Random(seed)
    today = datetime.now(timezone.utc).date()
    plan: Dict[date, List[dict]] = {
        today - timedelta(days=i): build_day_rows(rng) for i in range(num_days)
    }

    print(f"\nPreparing to seed {num_days} day(s) of scores for user: {user_id}")
    print("-" * 60)
    print(f"\nPreview of {today.isoformat()}:")
    for row in plan[today]:
        print(f"  {row['topic']:<32} {row['score']:.2f}")
    print("-" * 60)

    if not confirm_action(f"\nUpsert {sum(len(r) for r in plan.values())} score rows into the database?"):
        print("Operation cancelled.")
        return

    print("\nConnecting to Supabase...")
    store = ScoreStore(get_supabase_client())

    try:
        written = 0
        for day, rows in sorted(plan.items()):
            written += len(store.upsert_scores(user_id, day, rows))
        print(f"\nSuccessfully upserted {written} score rows for user {user_id}")
    except Exception as e:
        print(f"\nERROR: Failed to upsert scores: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """Main entry point for the script."""
    if len(sys.argv) not in (3, 4):
        print("Usage: python -m tools.seed_scores <user_id> <num_days> [seed]", file=sys.stderr)
        sys.exit(1)

    user_id = sys.argv[1]

    try:
        num_days = int(sys.argv[2])
        if num_days <= 0:
            raise ValueError("Number of days must be positive")
        seed = int(sys.argv[3]) if len(sys.argv) == 4 else None
    except ValueError as e:
        print(f"ERROR: Invalid arguments: {e}", file=sys.stderr)
        sys.exit(1)

    seed_scores(user_id, num_days, seed)


if __name__ == "__main__":
    main()
