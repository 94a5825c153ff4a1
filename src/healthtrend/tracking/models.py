"""Data models for daily health entries and analytics results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Optional

from healthtrend.profiles.body_calc import Sex, parse_sex


class DataSource(Enum):
    """Where an entry came from."""
    MANUAL = "manual"
    CSV_IMPORT = "csv_import"
    APPLE_HEALTH = "apple_health"


# Fields that may be absent on an entry, in display order
METRIC_FIELDS = ("weight_kg", "calorie_intake", "sleep_hours", "exercise_minutes")


@dataclass
class HealthEntry:
    """One day of logged data for a user."""

    date: date
    weight_kg: Optional[float] = None
    calorie_intake: Optional[int] = None
    sleep_hours: Optional[float] = None
    exercise_minutes: Optional[int] = None
    data_source: DataSource = DataSource.MANUAL

    def __post_init__(self) -> None:
        if not isinstance(self.data_source, DataSource):
            self.data_source = DataSource(self.data_source)
        if self.weight_kg is not None and self.weight_kg <= 0:
            raise ValueError(f"weight_kg must be positive, got {self.weight_kg}")
        if self.calorie_intake is not None and self.calorie_intake < 0:
            raise ValueError(
                f"calorie_intake must be non-negative, got {self.calorie_intake}"
            )
        if self.sleep_hours is not None and not 0 <= self.sleep_hours <= 24:
            raise ValueError(f"sleep_hours must be within 0-24, got {self.sleep_hours}")
        if self.exercise_minutes is not None and self.exercise_minutes < 0:
            raise ValueError(
                f"exercise_minutes must be non-negative, got {self.exercise_minutes}"
            )


@dataclass
class UserProfile:
    """Body metrics and goal for one user. Masses are in kilograms."""

    age: int
    sex: Sex
    height_cm: float
    weight_kg: float  # fallback when no entry has a weight
    starting_weight_kg: float
    goal_weight_kg: float
    username: str = ""
    activity_multiplier: Optional[float] = None

    def __post_init__(self) -> None:
        self.sex = parse_sex(self.sex)
        if self.age <= 0:
            raise ValueError(f"age must be positive, got {self.age}")
        if self.height_cm <= 0:
            raise ValueError(f"height_cm must be positive, got {self.height_cm}")
        for name in ("weight_kg", "starting_weight_kg", "goal_weight_kg"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.goal_weight_kg >= self.starting_weight_kg:
            raise ValueError(
                "goal_weight_kg must be less than starting_weight_kg for a loss goal"
            )
        if self.activity_multiplier is not None and self.activity_multiplier <= 0:
            raise ValueError(
                f"activity_multiplier must be positive, got {self.activity_multiplier}"
            )


@dataclass(frozen=True)
class TrendResult:
    """Least-squares line through a series, indexed by position."""

    slope: float
    intercept: float

    @property
    def is_losing(self) -> bool:
        return self.slope < 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "slope": round(self.slope, 4),
            "intercept": round(self.intercept, 4),
            "isLosing": self.is_losing,
        }


@dataclass(frozen=True)
class Projection:
    """Goal-date projection from the current calorie deficit."""

    tdee: int
    avg_calories: float
    avg_deficit: float
    weeks_to_goal: Optional[int]
    projected_date: Optional[date]
    kcal_per_lb: float
    model: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "tdee": self.tdee,
            "avgDeficit": round(self.avg_deficit),
            "weeksToGoal": self.weeks_to_goal,
            "projectedDate": self.projected_date.isoformat() if self.projected_date else None,
            "kcalPerLb": round(self.kcal_per_lb, 1),
            "deficitModel": self.model,
        }


@dataclass
class WeeklyBucket:
    """Entries for one Sunday-to-Saturday week and their summary values."""

    week_start: date
    entries: list[HealthEntry] = field(default_factory=list)
    avg_calories: float = 0
    avg_sleep: float = 0
    avg_exercise: float = 0
    weight_change: Optional[float] = None  # lbs, last minus first

    @property
    def days_logged(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekStart": self.week_start.isoformat(),
            "daysLogged": self.days_logged,
            "avgCalories": self.avg_calories,
            "avgSleep": self.avg_sleep,
            "avgExercise": self.avg_exercise,
            "weightChange": self.weight_change,
        }


@dataclass(frozen=True)
class DeficitEfficiency:
    """Actual versus expected loss for one week's calorie deficit.

    Attributes:
        week_start: Sunday that starts the week
        expected_loss_lbs: Deficit over the weigh-in span / kcal per lb
        actual_loss_lbs: First minus last weigh-in of the week
        efficiency: actual / expected × 100, None when no deficit was expected
    """

    week_start: date
    expected_loss_lbs: float
    actual_loss_lbs: float
    efficiency: Optional[float]

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekStart": self.week_start.isoformat(),
            "expectedLoss": round(self.expected_loss_lbs, 2),
            "actualLoss": round(self.actual_loss_lbs, 2),
            "efficiencyPercent": (
                round(self.efficiency, 1) if self.efficiency is not None else None
            ),
        }


@dataclass
class WeeklyReport:
    """Chronological week buckets plus the standout weeks.

    When built against a TDEE, `efficiencies` holds the deficit efficiency
    of every week that has enough data, keyed by week start.
    """

    weeks: list[WeeklyBucket]
    best: Optional[WeeklyBucket] = None
    worst: Optional[WeeklyBucket] = None
    tdee: Optional[int] = None
    efficiencies: dict[date, DeficitEfficiency] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "weeks": [week.to_dict() for week in self.weeks],
            "bestWeek": self.best.week_start.isoformat() if self.best else None,
            "worstWeek": self.worst.week_start.isoformat() if self.worst else None,
        }
        if self.tdee is not None:
            data["tdee"] = self.tdee
            data["deficitEfficiency"] = [
                self.efficiencies[week.week_start].to_dict()
                for week in self.weeks
                if week.week_start in self.efficiencies
            ]
        return data


@dataclass(frozen=True)
class CorrelationResult:
    """A named Pearson correlation with its strength label."""

    name: str
    value: float
    interpretation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": round(self.value, 3),
            "interpretation": self.interpretation,
        }


@dataclass
class CorrelationReport:
    """Correlation view result. Empty with a message when data is too thin."""

    correlations: list[CorrelationResult]
    sample_size: int
    message: Optional[str] = None

    @property
    def sufficient(self) -> bool:
        return self.message is None

    def to_dict(self) -> dict[str, Any]:
        if not self.sufficient:
            return {"message": self.message, "correlations": []}
        return {
            "correlations": [c.to_dict() for c in self.correlations],
            "sampleSize": self.sample_size,
        }
