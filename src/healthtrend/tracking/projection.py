"""Goal-date projection from the observed calorie deficit.

The projection converts the remaining weight to lose into calories using a
kcal-per-lb constant, then divides by the weekly deficit:

    weeks = ceil(weight_to_go_lbs × kcal_per_lb / (avg_deficit × 7))

The kcal-per-lb constant comes from a DeficitModel. The standard model uses
the textbook 3500 kcal/lb. The empirical model learns the ratio from a user's
own history of deficits and losses, which corrects for metabolic adaptation
and logging bias.

No projection is made (weeks and date are None) unless the user is in a
caloric deficit. Projecting a goal date while maintaining or gaining weight
is meaningless.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Protocol, Sequence

from healthtrend.profiles.units import to_imperial_weight
from healthtrend.tracking.models import (
    DeficitEfficiency,
    HealthEntry,
    Projection,
    WeeklyBucket,
)

logger = logging.getLogger(__name__)

# Standard approximation: 3500 kcal = 1 lb of body weight
STANDARD_KCAL_PER_LB = 3500.0

DEFAULT_TRAILING_WINDOW = 30


class DeficitModel(Protocol):
    """Strategy for how many kcal of deficit move the scale by one pound."""

    name: str

    def kcal_per_lb(self) -> float:
        ...


@dataclass(frozen=True)
class StandardDeficitModel:
    """Fixed 3500 kcal/lb."""

    name: str = "standard"

    def kcal_per_lb(self) -> float:
        return STANDARD_KCAL_PER_LB


@dataclass(frozen=True)
class EmpiricalDeficitModel:
    """
    Per-user kcal/lb learned from observed (deficit, loss) pairs.

    The ratio is total observed deficit over total observed loss. Scaled
    against the standard constant this is the same as multiplying the
    expected loss by (actual ratio / standard ratio).

    Falls back to the standard constant when there are fewer than
    min_pairs observations, or when the totals are not a net loss under a
    net deficit (the ratio would be negative or undefined).

    Attributes:
        history: (deficit_kcal, loss_lbs) pairs, loss positive when losing
        min_pairs: Minimum observations before trusting the ratio
    """

    history: tuple[tuple[float, float], ...] = field(default_factory=tuple)
    min_pairs: int = 2
    name: str = "empirical"

    def kcal_per_lb(self) -> float:
        if len(self.history) < self.min_pairs:
            logger.debug(
                "Only %d deficit observations; using standard constant",
                len(self.history),
            )
            return STANDARD_KCAL_PER_LB

        total_deficit = sum(deficit for deficit, _ in self.history)
        total_loss = sum(loss for _, loss in self.history)
        if total_deficit <= 0 or total_loss <= 0:
            logger.debug(
                "History is not a net loss under a net deficit "
                "(deficit=%.0f, loss=%.2f); using standard constant",
                total_deficit,
                total_loss,
            )
            return STANDARD_KCAL_PER_LB

        return total_deficit / total_loss


def observed_deficit_and_loss(
    week: WeeklyBucket,
    tdee: float,
) -> Optional[tuple[float, float]]:
    """
    Calorie deficit and weight loss observed within one week.

    The deficit covers only the days between the week's first and last
    weigh-in, matching the span the loss was measured over. Averages and
    weights are unrounded.

    Args:
        week: Weekly bucket with its entries
        tdee: Daily energy expenditure used as the baseline

    Returns:
        (deficit_kcal, loss_lbs) with loss positive when losing, or None
        without two weigh-ins on different days and some logged intake
    """
    weighed = [e for e in week.entries if e.weight_kg is not None]
    intakes = [e.calorie_intake for e in week.entries if e.calorie_intake is not None]
    if len(weighed) < 2 or not intakes:
        return None

    span_days = (weighed[-1].date - weighed[0].date).days
    if span_days <= 0:
        return None

    avg_calories = sum(intakes) / len(intakes)
    loss_lbs = to_imperial_weight(weighed[0].weight_kg - weighed[-1].weight_kg, ndigits=None)
    return (tdee - avg_calories) * span_days, loss_lbs


def history_from_weeks(
    weeks: Sequence[WeeklyBucket],
    tdee: float,
) -> tuple[tuple[float, float], ...]:
    """
    Build (deficit_kcal, loss_lbs) pairs from weekly buckets.

    Weeks without two weigh-ins or without logged calories are skipped.

    Args:
        weeks: Weekly buckets with their entries
        tdee: Daily energy expenditure used as the baseline

    Returns:
        Tuple of pairs suitable for EmpiricalDeficitModel
    """
    pairs = []
    for week in weeks:
        pair = observed_deficit_and_loss(week, tdee)
        if pair is not None:
            pairs.append(pair)
    return tuple(pairs)


def deficit_efficiency(
    week: WeeklyBucket,
    tdee: float,
    model: Optional[DeficitModel] = None,
) -> Optional[DeficitEfficiency]:
    """
    Compare a week's actual loss with the loss its deficit predicts.

    Example: a 500 kcal/day deficit over a 6-day weigh-in span predicts
    3000 / 3500 = 0.86 lbs. Losing 0.43 lbs is 50% efficiency.

    Returns:
        DeficitEfficiency, or None when the week lacks the data for an
        observed pair. Efficiency itself is None when the week was not
        in a deficit, since no loss was expected.
    """
    pair = observed_deficit_and_loss(week, tdee)
    if pair is None:
        return None
    if model is None:
        model = StandardDeficitModel()

    deficit_kcal, actual_loss = pair
    expected_loss = deficit_kcal / model.kcal_per_lb()
    efficiency = actual_loss / expected_loss * 100 if expected_loss > 0 else None
    return DeficitEfficiency(
        week_start=week.week_start,
        expected_loss_lbs=expected_loss,
        actual_loss_lbs=actual_loss,
        efficiency=efficiency,
    )


def trailing_average_calories(
    entries: Sequence[HealthEntry],
    window: int = DEFAULT_TRAILING_WINDOW,
) -> float:
    """
    Average intake over the last `window` entries that logged calories.

    This counts entries, not calendar days. With fewer than `window`
    qualifying entries all of them are used; with none the average is 0.
    """
    intakes = [e.calorie_intake for e in entries if e.calorie_intake is not None]
    recent = intakes[-window:] if window > 0 else intakes
    if not recent:
        return 0.0
    return sum(recent) / len(recent)


def weeks_to_goal(
    weight_to_go_lbs: float,
    avg_deficit: float,
    kcal_per_lb: float = STANDARD_KCAL_PER_LB,
) -> Optional[int]:
    """
    Whole weeks needed to lose the remaining weight at the current deficit.

    Returns:
        None when avg_deficit <= 0, 0 when the goal is already reached,
        otherwise the rounded-up number of weeks
    """
    if avg_deficit <= 0:
        return None
    if weight_to_go_lbs <= 0:
        return 0
    return math.ceil((weight_to_go_lbs * kcal_per_lb) / (avg_deficit * 7))


def project_goal(
    current_weight_kg: float,
    goal_weight_kg: float,
    avg_calories: float,
    tdee: int,
    today: date,
    model: Optional[DeficitModel] = None,
) -> Projection:
    """
    Project when the goal weight will be reached.

    Args:
        current_weight_kg: Latest known weight
        goal_weight_kg: Target weight
        avg_calories: Average daily intake over the trailing window
        tdee: Estimated daily energy expenditure
        today: Reference date for the projected calendar date
        model: Deficit model, StandardDeficitModel by default

    Returns:
        Projection; weeks_to_goal and projected_date are None when the
        user is not in a deficit
    """
    if model is None:
        model = StandardDeficitModel()

    kcal_per_lb = model.kcal_per_lb()
    avg_deficit = tdee - avg_calories
    weight_to_go_lbs = to_imperial_weight(current_weight_kg - goal_weight_kg, ndigits=None)

    weeks = weeks_to_goal(weight_to_go_lbs, avg_deficit, kcal_per_lb)
    projected = today + timedelta(days=weeks * 7) if weeks is not None else None

    return Projection(
        tdee=tdee,
        avg_calories=avg_calories,
        avg_deficit=avg_deficit,
        weeks_to_goal=weeks,
        projected_date=projected,
        kcal_per_lb=kcal_per_lb,
        model=model.name,
    )


def predict_weight(
    current_weight_lbs: float,
    daily_deficit: float,
    weeks: float,
    model: Optional[DeficitModel] = None,
) -> float:
    """
    Expected weight after holding a daily deficit for a number of weeks.

    Example:
        >>> predict_weight(200.0, 500, 4)  # 14000 kcal / 3500
        196.0
    """
    if model is None:
        model = StandardDeficitModel()
    expected_loss = (daily_deficit * 7 * weeks) / model.kcal_per_lb()
    return current_weight_lbs - expected_loss
