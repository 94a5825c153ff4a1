"""Energy expenditure model.

Calculates BMR (Basal Metabolic Rate) with the Mifflin-St Jeor equation and
scales it by an activity multiplier to estimate TDEE (Total Daily Energy
Expenditure).
"""

from __future__ import annotations

from enum import Enum


class Sex(Enum):
    """Selects the Mifflin-St Jeor formula branch."""
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(Enum):
    """Documented activity presets. Any positive multiplier is accepted."""
    SEDENTARY = "sedentary"          # Little or no exercise
    LIGHT = "light"                  # Light exercise 1-3 days/week
    MODERATE = "moderate"            # Moderate exercise 3-5 days/week
    VERY_ACTIVE = "very_active"      # Hard exercise 6-7 days/week
    EXTRA_ACTIVE = "extra_active"    # Very hard exercise, physical job


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}

DEFAULT_ACTIVITY_MULTIPLIER = ACTIVITY_MULTIPLIERS[ActivityLevel.MODERATE]

# Tokens accepted for each formula branch. "other" selects the non-male
# branch explicitly; anything else is rejected.
_SEX_TOKENS = {
    "male": Sex.MALE,
    "female": Sex.FEMALE,
    "other": Sex.FEMALE,
}


def parse_sex(value: str | Sex) -> Sex:
    """Parse a sex/gender token into a formula branch.

    Args:
        value: "male", "female" or "other" (case-insensitive), or a Sex

    Returns:
        Sex enum member

    Raises:
        ValueError: If the token is not recognized
    """
    if isinstance(value, Sex):
        return value
    token = str(value).strip().lower()
    if token not in _SEX_TOKENS:
        raise ValueError(
            f"sex must be one of {tuple(_SEX_TOKENS)}, got '{value}'"
        )
    return _SEX_TOKENS[token]


def resolve_activity_multiplier(level: str | float) -> float:
    """Turn a preset name or a raw number into a positive multiplier."""
    if isinstance(level, (int, float)):
        multiplier = float(level)
    else:
        try:
            multiplier = ACTIVITY_MULTIPLIERS[ActivityLevel(str(level).lower())]
        except ValueError:
            multiplier = float(level)
    if multiplier <= 0:
        raise ValueError(f"activity multiplier must be positive, got {multiplier}")
    return multiplier


def calculate_bmr(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Sex,
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters
        age: Age in years
        sex: Formula branch

    Returns:
        BMR in calories per day
    """
    if sex == Sex.MALE:
        bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age) + 5
    else:
        bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age) - 161

    return bmr


def calculate_tdee(
    bmr: float,
    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
) -> int:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate
        activity_multiplier: Activity factor, 1.55 (moderate) by default

    Returns:
        TDEE in whole calories per day
    """
    return round(bmr * activity_multiplier)


def estimate_tdee(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: str | Sex,
    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
) -> int:
    """BMR and activity scaling in one call.

    Example:
        >>> estimate_tdee(70, 175, 30, "male")
        2556
    """
    bmr = calculate_bmr(weight_kg, height_cm, age, parse_sex(sex))
    return calculate_tdee(bmr, activity_multiplier)
