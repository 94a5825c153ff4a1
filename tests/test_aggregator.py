"""Tests for weekly, correlation and dashboard summaries."""

from __future__ import annotations

from datetime import date

import pytest

from healthtrend.analytics.aggregator import (
    average_field,
    best_worst_weeks,
    correlation_report,
    dashboard_summary,
    data_completeness,
    data_quality,
    week_start,
    weekly_summary,
)
from healthtrend.config.settings import Settings
from healthtrend.tracking.models import HealthEntry

TODAY = date(2025, 3, 1)


class TestWeekStart:
    """Tests for Sunday-start week keys."""

    def test_wednesday(self):
        assert week_start(date(2025, 1, 1)) == date(2024, 12, 29)

    def test_saturday_same_week(self):
        assert week_start(date(2025, 1, 4)) == date(2024, 12, 29)

    def test_sunday_starts_new_week(self):
        assert week_start(date(2025, 1, 5)) == date(2025, 1, 5)


class TestWeeklySummary:
    """Tests for weekly_summary."""

    def test_wednesday_and_sunday_in_different_buckets(self):
        entries = [HealthEntry(date=date(2025, 1, 1)), HealthEntry(date=date(2025, 1, 5))]
        report = weekly_summary(entries)
        assert [w.week_start for w in report.weeks] == [date(2024, 12, 29), date(2025, 1, 5)]

    def test_wednesday_and_saturday_share_bucket(self):
        entries = [HealthEntry(date=date(2025, 1, 1)), HealthEntry(date=date(2025, 1, 4))]
        report = weekly_summary(entries)
        assert len(report.weeks) == 1
        assert report.weeks[0].week_start == date(2024, 12, 29)
        assert report.weeks[0].days_logged == 2

    def test_weight_change_in_lbs(self):
        entries = [
            HealthEntry(date=date(2025, 1, 1), weight_kg=80),
            HealthEntry(date=date(2025, 1, 4), weight_kg=79),
        ]
        week = weekly_summary(entries).weeks[0]
        assert week.weight_change == pytest.approx(-2.2)

    def test_weight_change_needs_two_weighings(self):
        entries = [
            HealthEntry(date=date(2025, 1, 1), weight_kg=80),
            HealthEntry(date=date(2025, 1, 8), weight_kg=79),
        ]
        report = weekly_summary(entries)
        assert len(report.weeks) == 2
        assert all(w.weight_change is None for w in report.weeks)

    def test_averages(self):
        entries = [
            HealthEntry(date=date(2025, 1, 5), calorie_intake=2000, sleep_hours=7.0),
            HealthEntry(date=date(2025, 1, 6), calorie_intake=2101, sleep_hours=8.0,
                        exercise_minutes=45),
            HealthEntry(date=date(2025, 1, 7)),
        ]
        week = weekly_summary(entries).weeks[0]
        assert week.avg_calories == 2050  # round(2050.5) with half-to-even
        assert week.avg_sleep == 7.5
        assert week.avg_exercise == 45

    def test_empty_fields_average_to_zero(self):
        week = weekly_summary([HealthEntry(date=date(2025, 1, 5))]).weeks[0]
        assert (week.avg_calories, week.avg_sleep, week.avg_exercise) == (0, 0, 0)

    def test_chronological_order(self, entry_factory):
        entries = entry_factory(date(2025, 1, 1), weights=[80] * 20)
        starts = [w.week_start for w in weekly_summary(entries).weeks]
        assert starts == sorted(starts)

    def test_gaps_not_filled_by_default(self):
        entries = [HealthEntry(date=date(2025, 1, 5)), HealthEntry(date=date(2025, 1, 26))]
        assert len(weekly_summary(entries).weeks) == 2

    def test_fill_gaps(self):
        entries = [HealthEntry(date=date(2025, 1, 5)), HealthEntry(date=date(2025, 1, 26))]
        weeks = weekly_summary(entries, fill_gaps=True).weeks
        assert [w.week_start for w in weeks] == [
            date(2025, 1, 5),
            date(2025, 1, 12),
            date(2025, 1, 19),
            date(2025, 1, 26),
        ]
        assert weeks[1].days_logged == 0
        assert weeks[1].weight_change is None

    def test_recent_weeks_only(self, entry_factory):
        entries = entry_factory(date(2025, 1, 5), weights=[80] * 70)
        report = weekly_summary(entries, weeks=8, today=date(2025, 3, 15))
        assert len(report.weeks) == 8
        assert report.weeks[0].week_start == date(2025, 1, 19)
        assert report.weeks[-1].week_start == date(2025, 3, 9)

    def test_recent_weeks_drop_future_entries(self, entry_factory):
        """Entries after the week containing today add no extra weeks."""
        entries = entry_factory(date(2025, 1, 5), weights=[80] * 70)
        report = weekly_summary(entries, weeks=2, today=date(2025, 1, 15))
        assert [w.week_start for w in report.weeks] == [date(2025, 1, 5), date(2025, 1, 12)]
        assert report.weeks[-1].entries[-1].date == date(2025, 1, 18)

    def test_empty(self):
        report = weekly_summary([])
        assert report.weeks == []
        assert report.to_dict() == {"weeks": [], "bestWeek": None, "worstWeek": None}

    def test_to_dict(self):
        entries = [
            HealthEntry(date=date(2025, 1, 1), weight_kg=80, calorie_intake=1800),
            HealthEntry(date=date(2025, 1, 4), weight_kg=79, sleep_hours=6.5),
        ]
        assert weekly_summary(entries).to_dict()["weeks"] == [
            {
                "weekStart": "2024-12-29",
                "daysLogged": 2,
                "avgCalories": 1800,
                "avgSleep": 6.5,
                "avgExercise": 0,
                "weightChange": -2.2,
            }
        ]


class TestBestWorstWeeks:
    """Tests for best_worst_weeks."""

    def test_best_and_worst(self):
        entries = [
            HealthEntry(date=date(2025, 1, 5), weight_kg=80),
            HealthEntry(date=date(2025, 1, 11), weight_kg=79),
            HealthEntry(date=date(2025, 1, 12), weight_kg=79),
            HealthEntry(date=date(2025, 1, 18), weight_kg=79.5),
            HealthEntry(date=date(2025, 1, 19), weight_kg=79.5),
        ]
        report = weekly_summary(entries)
        assert report.best.week_start == date(2025, 1, 5)
        assert report.worst.week_start == date(2025, 1, 12)
        assert report.to_dict()["bestWeek"] == "2025-01-05"

    def test_no_weight_changes(self):
        assert best_worst_weeks([]) == (None, None)


class TestCorrelationReport:
    """Tests for correlation_report."""

    def test_nine_entries_insufficient(self, entry_factory):
        entries = entry_factory(
            date(2025, 1, 1),
            sleep=[6, 7, 8, 6, 7, 8, 6, 7, 8],
            exercise=[10, 20, 30, 10, 20, 30, 10, 20, 30],
        )
        report = correlation_report(entries)
        assert not report.sufficient
        assert report.to_dict() == {
            "message": "Need at least 10 complete days of data for correlation analysis",
            "correlations": [],
        }

    def test_ten_entries_populated(self, entry_factory):
        entries = entry_factory(
            date(2025, 1, 1),
            sleep=[6, 7, 8, 6, 7, 8, 6, 7, 8, 9],
            exercise=[10, 20, 30, 10, 20, 30, 10, 20, 30, 40],
        )
        report = correlation_report(entries)
        data = report.to_dict()
        assert data["sampleSize"] == 10
        assert len(data["correlations"]) == 1
        first = data["correlations"][0]
        assert first["name"] == "Sleep vs Exercise"
        assert first["value"] == pytest.approx(1.0)
        assert first["interpretation"] == "Strong"

    def test_entries_missing_either_field_excluded(self, entry_factory):
        sleep = [7.0] * 5 + [None] * 5 + [6, 7, 8, 9, 6]
        exercise = [None] * 5 + [30] * 5 + [10, 20, 30, 40, 10]
        entries = entry_factory(date(2025, 1, 1), sleep=sleep, exercise=exercise)
        report = correlation_report(entries)
        assert not report.sufficient
        assert report.sample_size == 5

    def test_calorie_correlation_uses_own_subset(self, entry_factory):
        sleep = [6, 7, 8, 9, 6, 7, 8, 9, 6, 7, 8, 9]
        exercise = [30, 10, 40, 20, 30, 10, 40, 20, 30, 10, 40, 20]
        calories = [None, None] + [2400, 2200, 2500, 2300, 2400, 2200, 2500, 2300, 2400, 2200]
        entries = entry_factory(
            date(2025, 1, 1), sleep=sleep, exercise=exercise, calories=calories
        )
        report = correlation_report(entries)
        assert report.sample_size == 12
        names = [c.name for c in report.correlations]
        assert names == ["Sleep vs Exercise", "Sleep vs Calorie Intake"]
        # Only the last 10 entries have calories; sleep is aligned to them
        # (sleep 8, 9, 6, 7, ... vs calories 2400, 2200, 2500, 2300, ...)
        calorie_r = report.correlations[1].value
        assert -1.0 <= calorie_r <= 1.0
        assert calorie_r != 0.0

    def test_calorie_correlation_skipped_below_threshold(self, entry_factory):
        sleep = [6, 7, 8, 9, 6, 7, 8, 9, 6, 7]
        exercise = [30, 10, 40, 20, 30, 10, 40, 20, 30, 10]
        calories = [2000] * 9
        entries = entry_factory(
            date(2025, 1, 1), sleep=sleep, exercise=exercise, calories=calories
        )
        names = [c.name for c in correlation_report(entries).correlations]
        assert names == ["Sleep vs Exercise"]

    def test_min_samples_configurable(self, entry_factory):
        entries = entry_factory(date(2025, 1, 1), sleep=[6, 7, 8], exercise=[10, 20, 35])
        assert correlation_report(entries, min_samples=3).sufficient


class TestDashboardSummary:
    """Tests for dashboard_summary and its helpers."""

    def test_average_field_ignores_missing(self):
        entries = [
            HealthEntry(date=date(2025, 1, 1), sleep_hours=6.0),
            HealthEntry(date=date(2025, 1, 2)),
            HealthEntry(date=date(2025, 1, 3), sleep_hours=8.0),
        ]
        assert average_field(entries, "sleep_hours") == 7.0

    def test_average_field_empty_is_zero(self):
        assert average_field([], "calorie_intake") == 0

    def test_zero_is_a_logged_value(self):
        entries = [
            HealthEntry(date=date(2025, 1, 1), exercise_minutes=0),
            HealthEntry(date=date(2025, 1, 2), exercise_minutes=60),
        ]
        assert average_field(entries, "exercise_minutes") == 30

    def test_trailing_window(self, profile, entry_factory):
        entries = entry_factory(date(2025, 1, 1), calories=[1000] * 10 + [2000] * 30)
        summary = dashboard_summary(entries, profile, today=TODAY)
        assert summary.avg_calories == 2000

    def test_trend_over_all_weights(self, profile, entry_factory):
        entries = entry_factory(date(2025, 1, 1), weights=[80, None, 79, 78])
        summary = dashboard_summary(entries, profile, today=TODAY)
        assert summary.trend.is_losing
        # index-based: 3 weighed entries, 1 kg apart
        assert summary.trend.slope == pytest.approx(-1.0)

    def test_data_quality(self, entry_factory):
        entries = entry_factory(
            date(2025, 1, 1),
            weights=[80, None, 79],
            calories=[2000, 2000, 2000],
        )
        quality = data_quality(entries)
        assert quality.total_days == 3
        assert quality.days_with["weight_kg"] == 2
        assert quality.percent_with["weight_kg"] == 66.7
        assert quality.percent_with["calorie_intake"] == 100.0
        assert quality.percent_with["sleep_hours"] == 0.0

    def test_data_quality_precision(self, entry_factory):
        entries = entry_factory(date(2025, 1, 1), weights=[80, None, 79])
        assert data_quality(entries, precision=0).percent_with["weight_kg"] == 67.0

    def test_empty_history(self, profile):
        summary = dashboard_summary([], profile, today=TODAY)
        assert summary.avg_calories == 0
        assert summary.trend.slope == 0
        assert summary.data_quality.total_days == 0
        assert summary.data_quality.percent_with["weight_kg"] == 0.0

    def test_completeness(self):
        entries = [
            HealthEntry(date=date(2025, 1, 1)),
            HealthEntry(date=date(2025, 1, 2)),
            HealthEntry(date=date(2025, 1, 4)),
            HealthEntry(date=date(2025, 1, 5)),
        ]
        assert data_completeness(entries) == 80.0
        assert data_completeness(entries[:1]) == 100.0
        assert data_completeness([]) == 0.0

    def test_idempotent(self, profile, losing_entries):
        first = dashboard_summary(losing_entries, profile, today=TODAY)
        assert first == dashboard_summary(losing_entries, profile, today=TODAY)

    def test_energy_and_projection(self, profile, entry_factory):
        entries = entry_factory(date(2025, 2, 1), weights=[71, 70], calories=[2056, 2056])
        summary = dashboard_summary(entries, profile, today=TODAY)
        # TDEE at the current 70 kg with the default 1.55 multiplier
        assert summary.current_weight_kg == 70
        assert summary.tdee == 2556
        assert summary.projection.avg_deficit == 500
        assert summary.projection.weeks_to_goal == 12
        assert summary.projection.model == "standard"

    def test_settings_drive_window_and_multiplier(self, profile, entry_factory):
        entries = entry_factory(date(2025, 1, 1), calories=[1000] * 10 + [2000] * 5)
        settings = Settings()
        settings.analytics.trailing_window = 10
        settings.analytics.activity_multiplier = 1.2
        summary = dashboard_summary(entries, profile, today=TODAY, settings=settings)
        assert summary.avg_calories == 1500
        assert summary.tdee == round(1648.75 * 1.2)


class TestWeeklyDeficitEfficiency:
    """Tests for deficit efficiency in the weekly report."""

    def test_efficiency_per_week(self, entry_factory):
        # 1 kg lost over 6 days at a 500 kcal/day deficit
        entries = entry_factory(
            date(2025, 1, 5),
            weights=[80, None, None, None, None, None, 79],
            calories=[2000] * 7,
        )
        report = weekly_summary(entries, tdee=2500)
        efficiency = report.efficiencies[date(2025, 1, 5)]
        assert efficiency.expected_loss_lbs == pytest.approx(3000 / 3500)
        assert efficiency.efficiency == pytest.approx(2.20462 / (3000 / 3500) * 100)
        data = report.to_dict()
        assert data["tdee"] == 2500
        assert data["deficitEfficiency"][0]["weekStart"] == "2025-01-05"

    def test_weeks_without_data_are_left_out(self, entry_factory):
        entries = entry_factory(date(2025, 1, 5), weights=[80] + [None] * 7, calories=[2000] * 8)
        report = weekly_summary(entries, tdee=2500)
        assert report.efficiencies == {}
        assert report.to_dict()["deficitEfficiency"] == []

    def test_absent_without_tdee(self, entry_factory):
        entries = entry_factory(date(2025, 1, 5), weights=[80, 79], calories=[2000] * 2)
        assert "deficitEfficiency" not in weekly_summary(entries).to_dict()
