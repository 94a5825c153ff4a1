"""Assemble the dashboard result from a profile and entry history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Sequence

from healthtrend.analytics.aggregator import (
    DashboardSummary,
    dashboard_summary,
)
from healthtrend.config.settings import Settings
from healthtrend.profiles.units import cm_to_feet_inches, convert_weight, weight_unit_label
from healthtrend.tracking.models import HealthEntry, Projection, TrendResult, UserProfile
from healthtrend.tracking.projection import DeficitModel
from healthtrend.tracking.stats import moving_average


@dataclass(frozen=True)
class GoalProgress:
    """Starting, current and goal weights in kilograms."""

    starting_weight_kg: float
    current_weight_kg: float
    goal_weight_kg: float

    @property
    def lost_kg(self) -> float:
        return self.starting_weight_kg - self.current_weight_kg

    @property
    def to_go_kg(self) -> float:
        return self.current_weight_kg - self.goal_weight_kg

    @property
    def progress_percent(self) -> float:
        total = self.starting_weight_kg - self.goal_weight_kg
        if total == 0:
            return 0.0
        return self.lost_kg / total * 100


@dataclass
class Dashboard:
    """Everything the dashboard view shows for one user."""

    profile: UserProfile
    summary: DashboardSummary
    goals: GoalProgress
    weight_data: list[tuple[date, float, float]] = field(default_factory=list)
    units: str = "imperial"
    precision: int = 1

    @property
    def projection(self) -> Projection:
        return self.summary.projection

    def to_dict(self) -> dict[str, Any]:
        """JSON-shaped result for the presentation layer."""
        p = self.precision
        units = self.units
        height_ft, height_in = cm_to_feet_inches(self.profile.height_cm)

        def weight(kg: float) -> float:
            return convert_weight(kg, units, p)

        # Trend is fitted in kg
        trend = TrendResult(
            slope=convert_weight(self.summary.trend.slope, units, ndigits=None),
            intercept=convert_weight(self.summary.trend.intercept, units, ndigits=None),
        )

        return {
            "user": {
                "username": self.profile.username,
                "age": self.profile.age,
                "gender": self.profile.sex.value,
                "heightCm": self.profile.height_cm,
                "heightFt": height_ft,
                "heightIn": height_in,
            },
            "current": {
                "weight": weight(self.goals.current_weight_kg),
                "avgCalories": round(self.summary.avg_calories),
                "avgSleep": round(self.summary.avg_sleep, p),
                "avgExercise": round(self.summary.avg_exercise),
            },
            "goals": {
                "units": weight_unit_label(units),
                "startingWeight": weight(self.goals.starting_weight_kg),
                "goalWeight": weight(self.goals.goal_weight_kg),
                "weightLost": weight(self.goals.lost_kg),
                "weightToGo": weight(self.goals.to_go_kg),
                "progressPercent": round(self.goals.progress_percent, p),
            },
            "predictions": self.summary.projection.to_dict(),
            "weightData": [
                {
                    "date": day.isoformat(),
                    "weight": weight(kg),
                    "movingAverage": weight(smoothed),
                }
                for day, kg, smoothed in self.weight_data
            ],
            "trend": trend.to_dict(),
            "dataQuality": self.summary.data_quality.to_dict(),
        }


def build_dashboard(
    profile: UserProfile,
    entries: Sequence[HealthEntry],
    today: Optional[date] = None,
    settings: Optional[Settings] = None,
    model: Optional[DeficitModel] = None,
) -> Dashboard:
    """
    Compose the dashboard for one user.

    Args:
        profile: User profile
        entries: Full entry history sorted ascending by date
        today: Reference date for the projection (defaults to date.today())
        settings: Analytics settings (defaults to Settings())
        model: Deficit model override; otherwise chosen from settings

    Returns:
        Dashboard; identical input (including today) gives identical output
    """
    if settings is None:
        settings = Settings()
    cfg = settings.analytics

    summary = dashboard_summary(entries, profile, today=today, settings=settings, model=model)

    weighed = [e for e in entries if e.weight_kg is not None]
    smoothed = moving_average(
        [e.weight_kg for e in weighed],
        cfg.moving_average_window,
        strict=cfg.strict_contracts,
    )

    return Dashboard(
        profile=profile,
        summary=summary,
        goals=GoalProgress(
            starting_weight_kg=profile.starting_weight_kg,
            current_weight_kg=summary.current_weight_kg,
            goal_weight_kg=profile.goal_weight_kg,
        ),
        weight_data=[(e.date, e.weight_kg, s) for e, s in zip(weighed, smoothed)],
        units=settings.defaults.display_units,
        precision=cfg.precision,
    )
