"""Tests for correlation, trend line and moving average."""

from __future__ import annotations

import logging

import pytest

from healthtrend.tracking.stats import (
    ContractViolation,
    correlation,
    interpret_correlation,
    moving_average,
    trend_line,
)


class TestCorrelation:
    """Tests for Pearson correlation."""

    @pytest.mark.parametrize(
        "x",
        [
            [3.0, 1.5, 4.2, 7.7, 2.0],
            [0.1, 0.2, 0.3],
            [7.5, 6.0, 8.0, 5.5, 7.0, 6.5, 9.25],
            [1e6 + 0.1, 1e6 + 0.7, 1e6 - 0.3],
        ],
    )
    def test_self_correlation_is_exactly_one(self, x):
        assert correlation(x, x) == 1.0

    def test_perfect_negative(self):
        assert correlation([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_constant_series_gives_zero(self):
        assert correlation([1, 2, 3, 4], [5, 5, 5, 5]) == 0.0
        assert correlation([0.1, 0.1, 0.1], [1, 2, 3]) == 0.0

    def test_symmetric(self):
        x = [7.5, 6.0, 8.0, 5.5, 7.0, 6.5]
        y = [30, 45, 20, 60, 25, 40]
        assert correlation(x, y) == correlation(y, x)

    def test_empty_gives_zero(self):
        assert correlation([], []) == 0.0

    def test_known_value(self):
        # x = 1..5, y = [2, 4, 5, 4, 5] -> r = 6 / sqrt(10 * 6)
        r = correlation([1, 2, 3, 4, 5], [2, 4, 5, 4, 5])
        assert r == pytest.approx(6 / (10 * 6) ** 0.5)

    def test_mismatched_lengths_degrade_to_zero(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert correlation([1, 2, 3], [1, 2]) == 0.0
        assert "equal lengths" in caplog.text

    def test_mismatched_lengths_strict_raises(self):
        with pytest.raises(ContractViolation):
            correlation([1, 2, 3], [1, 2], strict=True)

    def test_contract_violation_is_value_error(self):
        assert issubclass(ContractViolation, ValueError)


class TestInterpretCorrelation:
    """Tests for correlation strength labels."""

    @pytest.mark.parametrize(
        "r,label",
        [
            (0.85, "Strong"),
            (-0.71, "Strong"),
            (0.7, "Moderate"),
            (-0.5, "Moderate"),
            (0.4, "Weak"),
            (0.25, "Weak"),
            (0.2, "Very Weak"),
            (-0.05, "Very Weak"),
            (0.0, "Very Weak"),
        ],
    )
    def test_bands(self, r, label):
        assert interpret_correlation(r) == label


class TestTrendLine:
    """Tests for index-based least squares."""

    def test_empty(self):
        result = trend_line([])
        assert (result.slope, result.intercept) == (0, 0)

    def test_single_point(self):
        result = trend_line([5])
        assert result.slope == 0
        assert result.intercept == 5

    def test_perfect_decrease(self):
        result = trend_line([10, 8, 6, 4, 2])
        assert result.slope == -2
        assert result.intercept == 10
        assert result.is_losing

    def test_increase_is_not_losing(self):
        assert not trend_line([1, 2, 4]).is_losing

    def test_flat_series(self):
        result = trend_line([3, 3, 3])
        assert result.slope == 0
        assert result.intercept == pytest.approx(3)

    def test_two_points(self):
        result = trend_line([100, 99])
        assert result.slope == pytest.approx(-1)
        assert result.intercept == pytest.approx(100)

    def test_to_dict(self):
        assert trend_line([10, 8, 6]).to_dict() == {
            "slope": -2.0,
            "intercept": 10.0,
            "isLosing": True,
        }


class TestMovingAverage:
    """Tests for the trailing moving average."""

    def test_window_shrinks_at_start(self):
        assert moving_average([1, 2, 3, 4], 2) == pytest.approx([1.0, 1.5, 2.5, 3.5])

    def test_window_larger_than_series(self):
        assert moving_average([2, 4, 6], 10) == pytest.approx([2.0, 3.0, 4.0])

    def test_window_of_one_is_identity(self):
        assert moving_average([5, 7, 9], 1) == pytest.approx([5, 7, 9])

    def test_empty(self):
        assert moving_average([], 3) == []

    def test_invalid_window_degrades_to_one(self):
        assert moving_average([5, 7], 0) == pytest.approx([5, 7])

    def test_invalid_window_strict_raises(self):
        with pytest.raises(ContractViolation):
            moving_average([5, 7], 0, strict=True)
