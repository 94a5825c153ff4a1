"""Load entry histories and profiles from disk for the CLI.

Entries are a JSON list of objects, one per day:

    [{"date": "2025-01-01", "weight_kg": 80.2, "calorie_intake": 1900,
      "sleep_hours": 7.5, "exercise_minutes": 30, "data_source": "manual"}]

Weights may be given as weight_lbs instead of weight_kg. Duplicate dates are
merged and the result is sorted by date, as the data-access layer does.

Profiles are YAML mappings with the UserProfile fields. Masses may use a
_lbs suffix and height may be given as height_ft/height_in.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from healthtrend.profiles.units import feet_inches_to_cm, to_metric_weight
from healthtrend.tracking.merge import merge_entries
from healthtrend.tracking.models import HealthEntry, UserProfile

_WEIGHT_FIELDS = ("weight", "starting_weight", "goal_weight")


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def entry_from_dict(data: dict[str, Any]) -> HealthEntry:
    """Build a HealthEntry from a decoded JSON object."""
    if "date" not in data:
        raise ValueError(f"entry is missing 'date': {data}")

    weight_kg = data.get("weight_kg")
    if weight_kg is None and data.get("weight_lbs") is not None:
        weight_kg = to_metric_weight(float(data["weight_lbs"]), ndigits=2)

    calories = data.get("calorie_intake")
    exercise = data.get("exercise_minutes")
    sleep = data.get("sleep_hours")
    return HealthEntry(
        date=_parse_date(data["date"]),
        weight_kg=float(weight_kg) if weight_kg is not None else None,
        calorie_intake=round(float(calories)) if calories is not None else None,
        sleep_hours=float(sleep) if sleep is not None else None,
        exercise_minutes=round(float(exercise)) if exercise is not None else None,
        data_source=data.get("data_source") or "manual",
    )


def load_entries(path: Path) -> list[HealthEntry]:
    """Read, merge and date-sort entries from a JSON file."""
    with open(path) as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON list of entries")
    return merge_entries(entry_from_dict(item) for item in raw)


def profile_from_dict(data: dict[str, Any]) -> UserProfile:
    """Build a UserProfile, converting imperial fields where present."""
    values = dict(data)

    for name in _WEIGHT_FIELDS:
        lbs = values.pop(f"{name}_lbs", None)
        if f"{name}_kg" not in values and lbs is not None:
            values[f"{name}_kg"] = to_metric_weight(float(lbs), ndigits=2)

    if "height_cm" not in values and "height_ft" in values:
        values["height_cm"] = feet_inches_to_cm(
            values.pop("height_ft"), values.pop("height_in", 0)
        )
    values.pop("height_ft", None)
    values.pop("height_in", None)

    if "gender" in values and "sex" not in values:
        values["sex"] = values.pop("gender")
    if "weight_kg" not in values and "starting_weight_kg" in values:
        values["weight_kg"] = values["starting_weight_kg"]

    try:
        return UserProfile(**values)
    except TypeError as e:
        raise ValueError(f"invalid profile: {e}") from e


def load_profile(path: Path) -> UserProfile:
    """Read a UserProfile from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a YAML mapping")
    return profile_from_dict(data)
