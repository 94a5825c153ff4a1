"""Imperial/metric conversion for body weight and height.

Mass is stored in kilograms and height in centimeters. Conversion to pounds
and feet/inches happens only when values are shown to a user.

Precision:
    - mass: 1 decimal place (pass ndigits=None for the raw value)
    - height: whole feet, whole inches, whole centimeters
"""

from __future__ import annotations

from typing import Optional

LBS_PER_KG = 2.20462
CM_PER_INCH = 2.54

IMPERIAL = "imperial"
METRIC = "metric"
VALID_UNITS = (IMPERIAL, METRIC)


def to_imperial_weight(kg: float, ndigits: Optional[int] = 1) -> float:
    """Convert kilograms to pounds.

    Args:
        kg: Mass in kilograms
        ndigits: Decimal places to round to, or None for no rounding

    Returns:
        Mass in pounds
    """
    lbs = kg * LBS_PER_KG
    return lbs if ndigits is None else round(lbs, ndigits)


def to_metric_weight(lbs: float, ndigits: Optional[int] = 1) -> float:
    """Convert pounds to kilograms.

    Args:
        lbs: Mass in pounds
        ndigits: Decimal places to round to, or None for no rounding

    Returns:
        Mass in kilograms
    """
    kg = lbs / LBS_PER_KG
    return kg if ndigits is None else round(kg, ndigits)


def cm_to_feet_inches(cm: float) -> tuple[int, int]:
    """Convert centimeters to (feet, inches).

    The height is rounded to whole inches before splitting into feet, so
    182.8 cm is (6, 0) rather than (5, 12).
    """
    feet, inches = divmod(round(cm / CM_PER_INCH), 12)
    return int(feet), int(inches)


def feet_inches_to_cm(feet: float, inches: float) -> int:
    """Convert feet and inches to whole centimeters."""
    return round((feet * 12 + inches) * CM_PER_INCH)


def convert_weight(kg: float, units: str, ndigits: Optional[int] = 1) -> float:
    """Express a canonical kilogram value in the requested display units."""
    if units == IMPERIAL:
        return to_imperial_weight(kg, ndigits)
    if units == METRIC:
        return kg if ndigits is None else round(kg, ndigits)
    raise ValueError(f"units must be one of {VALID_UNITS}, got '{units}'")


def weight_unit_label(units: str) -> str:
    """Short unit suffix for display."""
    return "lbs" if units == IMPERIAL else "kg"


def format_weight(kg: float, units: str = IMPERIAL) -> str:
    """Render a mass for display, e.g. '176.4 lbs'."""
    return f"{convert_weight(kg, units):.1f} {weight_unit_label(units)}"
