"""Pytest fixtures for healthtrend tests."""

from __future__ import annotations

import json
from datetime import date, timedelta

import pytest
import yaml

from healthtrend.profiles.body_calc import Sex
from healthtrend.tracking.models import HealthEntry, UserProfile


def make_entries(
    start: date,
    weights=None,
    calories=None,
    sleep=None,
    exercise=None,
    days: int = None,
) -> list[HealthEntry]:
    """Build consecutive daily entries from parallel value lists.

    Any list may be omitted or contain None for a missing field.
    """
    columns = [c for c in (weights, calories, sleep, exercise) if c is not None]
    if days is None:
        days = max((len(c) for c in columns), default=0)

    def pick(values, i):
        if values is None or i >= len(values):
            return None
        return values[i]

    return [
        HealthEntry(
            date=start + timedelta(days=i),
            weight_kg=pick(weights, i),
            calorie_intake=pick(calories, i),
            sleep_hours=pick(sleep, i),
            exercise_minutes=pick(exercise, i),
        )
        for i in range(days)
    ]


@pytest.fixture
def profile() -> UserProfile:
    """A 30-year-old male, 175 cm, 70 kg heading for 65 kg."""
    return UserProfile(
        age=30,
        sex=Sex.MALE,
        height_cm=175,
        weight_kg=70,
        starting_weight_kg=75,
        goal_weight_kg=65,
        username="tester",
    )


@pytest.fixture
def losing_entries() -> list[HealthEntry]:
    """Six weeks of steady loss from 80 kg with a ~500 kcal deficit."""
    days = 42
    return make_entries(
        date(2025, 1, 5),
        weights=[80 - 0.05 * i for i in range(days)],
        calories=[2100] * days,
        sleep=[7 + (i % 3) * 0.5 for i in range(days)],
        exercise=[20 + (i % 4) * 10 for i in range(days)],
    )


@pytest.fixture
def entries_file(tmp_path, losing_entries):
    """Write losing_entries to a JSON file and return its path."""
    path = tmp_path / "entries.json"
    payload = [
        {
            "date": e.date.isoformat(),
            "weight_kg": e.weight_kg,
            "calorie_intake": e.calorie_intake,
            "sleep_hours": e.sleep_hours,
            "exercise_minutes": e.exercise_minutes,
            "data_source": "csv_import",
        }
        for e in losing_entries
    ]
    path.write_text(json.dumps(payload))
    return path


@pytest.fixture
def profile_file(tmp_path):
    """Profile YAML using imperial fields."""
    path = tmp_path / "profile.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "username": "tester",
                "age": 30,
                "gender": "male",
                "height_ft": 5,
                "height_in": 9,
                "starting_weight_lbs": 180,
                "goal_weight_lbs": 160,
            }
        )
    )
    return path


@pytest.fixture
def entry_factory():
    """Return the make_entries builder."""
    return make_entries
