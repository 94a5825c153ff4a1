"""Aggregate a user's entry history into summary views.

All functions expect entries sorted ascending by date. They do not re-sort:
out-of-order input gives a wrong trend or week grouping rather than an
error, and sorting is the data-access layer's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional, Sequence

from healthtrend.config.settings import Settings
from healthtrend.profiles.body_calc import DEFAULT_ACTIVITY_MULTIPLIER, estimate_tdee
from healthtrend.profiles.units import to_imperial_weight
from healthtrend.tracking.models import (
    METRIC_FIELDS,
    CorrelationReport,
    CorrelationResult,
    HealthEntry,
    Projection,
    TrendResult,
    UserProfile,
    WeeklyBucket,
    WeeklyReport,
)
from healthtrend.tracking.projection import (
    DeficitModel,
    EmpiricalDeficitModel,
    StandardDeficitModel,
    deficit_efficiency,
    history_from_weeks,
    project_goal,
    trailing_average_calories,
)
from healthtrend.tracking.stats import correlation, interpret_correlation, trend_line

MIN_CORRELATION_SAMPLES = 10


@dataclass(frozen=True)
class DataQuality:
    """How often each field was logged."""

    total_days: int
    days_with: dict[str, int]
    percent_with: dict[str, float]
    completeness: float  # days logged / days between first and last entry

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalDays": self.total_days,
            "daysWithWeight": self.days_with["weight_kg"],
            "daysWithCalories": self.days_with["calorie_intake"],
            "daysWithSleep": self.days_with["sleep_hours"],
            "daysWithExercise": self.days_with["exercise_minutes"],
            "percentWithWeight": self.percent_with["weight_kg"],
            "percentWithCalories": self.percent_with["calorie_intake"],
            "percentWithSleep": self.percent_with["sleep_hours"],
            "percentWithExercise": self.percent_with["exercise_minutes"],
            "completenessPercent": self.completeness,
        }


@dataclass(frozen=True)
class DashboardSummary:
    """Trailing averages, weight trend, data quality and goal projection."""

    avg_calories: float
    avg_sleep: float
    avg_exercise: float
    trend: TrendResult  # kg per entry
    data_quality: DataQuality
    current_weight_kg: float
    tdee: int
    projection: Projection


def average_field(entries: Sequence[HealthEntry], name: str) -> float:
    """Mean of a field over entries that have it; 0 when none do."""
    values = [getattr(e, name) for e in entries if getattr(e, name) is not None]
    if not values:
        return 0.0
    return sum(values) / len(values)


def data_completeness(entries: Sequence[HealthEntry], precision: int = 1) -> float:
    """
    Percentage of calendar days between the first and last entry that were logged.

    The span is inclusive, so a single entry is 100% complete.
    """
    if not entries:
        return 0.0
    span_days = (entries[-1].date - entries[0].date).days + 1
    if span_days <= 0:
        return 0.0
    return round(len(entries) / span_days * 100, precision)


def data_quality(entries: Sequence[HealthEntry], precision: int = 1) -> DataQuality:
    """Count and percentage of entries carrying each field."""
    total = len(entries)
    days_with = {
        name: sum(1 for e in entries if getattr(e, name) is not None)
        for name in METRIC_FIELDS
    }
    percent_with = {
        name: round(count / total * 100, precision) if total else 0.0
        for name, count in days_with.items()
    }
    return DataQuality(
        total_days=total,
        days_with=days_with,
        percent_with=percent_with,
        completeness=data_completeness(entries, precision),
    )


def weight_series_kg(entries: Sequence[HealthEntry]) -> list[float]:
    """Logged weights in kilograms, in entry order."""
    return [e.weight_kg for e in entries if e.weight_kg is not None]


def current_weight_kg(profile: UserProfile, entries: Sequence[HealthEntry]) -> float:
    """Latest logged weight, or the profile weight if none was logged."""
    for entry in reversed(entries):
        if entry.weight_kg is not None:
            return entry.weight_kg
    return profile.weight_kg


def profile_tdee(
    profile: UserProfile,
    entries: Sequence[HealthEntry],
    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER,
) -> int:
    """
    TDEE at the user's current weight.

    The profile's own activity multiplier wins over `activity_multiplier`.
    """
    multiplier = profile.activity_multiplier or activity_multiplier
    return estimate_tdee(
        current_weight_kg(profile, entries),
        profile.height_cm,
        profile.age,
        profile.sex,
        multiplier,
    )


def select_deficit_model(
    settings: Settings,
    entries: Sequence[HealthEntry],
    tdee: int,
) -> DeficitModel:
    """Build the deficit model named in settings."""
    if settings.analytics.deficit_model == "empirical":
        report = weekly_summary(entries)
        return EmpiricalDeficitModel(history=history_from_weeks(report.weeks, tdee))
    return StandardDeficitModel()


def dashboard_summary(
    entries: Sequence[HealthEntry],
    profile: UserProfile,
    today: Optional[date] = None,
    settings: Optional[Settings] = None,
    model: Optional[DeficitModel] = None,
) -> DashboardSummary:
    """
    Summarize recent behaviour, the weight trend and the goal projection.

    Averages cover the last `trailing_window` entries, skipping entries that
    did not log the field. The trend uses every weighed entry, in kilograms
    per entry. TDEE is estimated at the current weight and the projection
    averages intake over the last `trailing_window` entries that logged it.

    Args:
        entries: Entries sorted ascending by date
        profile: User profile
        today: Reference date for the projection (defaults to date.today())
        settings: Analytics settings (defaults to Settings())
        model: Deficit model override; otherwise chosen from settings

    Returns:
        DashboardSummary
    """
    if today is None:
        today = date.today()
    if settings is None:
        settings = Settings()
    cfg = settings.analytics
    window = cfg.trailing_window

    recent = list(entries[-window:]) if window > 0 else list(entries)
    current_kg = current_weight_kg(profile, entries)
    tdee = profile_tdee(profile, entries, cfg.activity_multiplier)
    if model is None:
        model = select_deficit_model(settings, entries, tdee)

    return DashboardSummary(
        avg_calories=average_field(recent, "calorie_intake"),
        avg_sleep=average_field(recent, "sleep_hours"),
        avg_exercise=average_field(recent, "exercise_minutes"),
        trend=trend_line(weight_series_kg(entries)),
        data_quality=data_quality(entries, cfg.precision),
        current_weight_kg=current_kg,
        tdee=tdee,
        projection=project_goal(
            current_weight_kg=current_kg,
            goal_weight_kg=profile.goal_weight_kg,
            avg_calories=trailing_average_calories(entries, window),
            tdee=tdee,
            today=today,
            model=model,
        ),
    )


def week_start(day: date) -> date:
    """The Sunday on or before `day`."""
    # date.weekday() is Monday=0; shift so Sunday=0
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _summarize_bucket(bucket: WeeklyBucket) -> WeeklyBucket:
    entries = bucket.entries
    bucket.avg_calories = round(average_field(entries, "calorie_intake"))
    bucket.avg_sleep = round(average_field(entries, "sleep_hours"), 1)
    bucket.avg_exercise = round(average_field(entries, "exercise_minutes"))

    weighed = [e for e in entries if e.weight_kg is not None]
    if len(weighed) >= 2:
        change_kg = weighed[-1].weight_kg - weighed[0].weight_kg
        bucket.weight_change = to_imperial_weight(change_kg)
    else:
        bucket.weight_change = None
    return bucket


def group_by_week(entries: Sequence[HealthEntry]) -> list[WeeklyBucket]:
    """Bucket entries by Sunday-start week, in order of first appearance."""
    buckets: dict[date, WeeklyBucket] = {}
    for entry in entries:
        start = week_start(entry.date)
        if start not in buckets:
            buckets[start] = WeeklyBucket(week_start=start)
        buckets[start].entries.append(entry)
    return list(buckets.values())


def best_worst_weeks(
    weeks: Sequence[WeeklyBucket],
) -> tuple[Optional[WeeklyBucket], Optional[WeeklyBucket]]:
    """
    Weeks with the most weight lost and the most gained (or least lost).

    Weeks without a weight change are ignored.
    """
    measured = [w for w in weeks if w.weight_change is not None]
    if not measured:
        return None, None
    ordered = sorted(measured, key=lambda w: w.weight_change)
    return ordered[0], ordered[-1]


def weekly_summary(
    entries: Sequence[HealthEntry],
    weeks: Optional[int] = None,
    today: Optional[date] = None,
    fill_gaps: bool = False,
    tdee: Optional[int] = None,
    model: Optional[DeficitModel] = None,
) -> WeeklyReport:
    """
    Per-week averages and weight change.

    Args:
        entries: Entries sorted ascending by date
        weeks: If given, keep only the last `weeks` calendar weeks ending
               with the week containing `today`; later entries are dropped
        today: Reference date for `weeks` (defaults to date.today())
        fill_gaps: Insert empty buckets for weeks with no entries
        tdee: If given, report each week's deficit efficiency against it
        model: Deficit model for the efficiency, StandardDeficitModel by default

    Returns:
        WeeklyReport with buckets in chronological order
    """
    selected = list(entries)
    if weeks is not None:
        if today is None:
            today = date.today()
        current_week = week_start(today)
        cutoff = current_week - timedelta(days=7 * (weeks - 1))
        end = current_week + timedelta(days=7)
        selected = [e for e in selected if cutoff <= e.date < end]

    buckets = group_by_week(selected)
    buckets.sort(key=lambda b: b.week_start)

    if fill_gaps and buckets:
        present = {b.week_start: b for b in buckets}
        filled = []
        current = buckets[0].week_start
        while current <= buckets[-1].week_start:
            filled.append(present.get(current, WeeklyBucket(week_start=current)))
            current += timedelta(days=7)
        buckets = filled

    summarized = [_summarize_bucket(b) for b in buckets]
    best, worst = best_worst_weeks(summarized)
    report = WeeklyReport(weeks=summarized, best=best, worst=worst)

    if tdee is not None:
        report.tdee = tdee
        for week in summarized:
            result = deficit_efficiency(week, tdee, model)
            if result is not None:
                report.efficiencies[week.week_start] = result
    return report


def _named_correlation(name: str, x: list[float], y: list[float]) -> CorrelationResult:
    r = correlation(x, y)
    return CorrelationResult(name=name, value=r, interpretation=interpret_correlation(r))


def correlation_report(
    entries: Sequence[HealthEntry],
    min_samples: int = MIN_CORRELATION_SAMPLES,
) -> CorrelationReport:
    """
    Correlations between sleep, exercise and calorie intake.

    Sleep vs Exercise uses entries that logged both. Sleep vs Calorie Intake
    is added when at least `min_samples` of those entries also logged
    calories, and is computed on that subset only.
    """
    complete = [
        e for e in entries
        if e.sleep_hours is not None and e.exercise_minutes is not None
    ]
    if len(complete) < min_samples:
        return CorrelationReport(
            correlations=[],
            sample_size=len(complete),
            message=(
                f"Need at least {min_samples} complete days of data "
                f"for correlation analysis"
            ),
        )

    correlations = [
        _named_correlation(
            "Sleep vs Exercise",
            [e.sleep_hours for e in complete],
            [e.exercise_minutes for e in complete],
        )
    ]

    with_calories = [e for e in complete if e.calorie_intake is not None]
    if len(with_calories) >= min_samples:
        correlations.append(
            _named_correlation(
                "Sleep vs Calorie Intake",
                [e.sleep_hours for e in with_calories],
                [e.calorie_intake for e in with_calories],
            )
        )

    return CorrelationReport(correlations=correlations, sample_size=len(complete))
