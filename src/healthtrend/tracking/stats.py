"""Statistics primitives: Pearson correlation, linear trend, moving average.

Degenerate input produces neutral values instead of exceptions:

- empty or constant series give a correlation of 0.0
- fewer than two points give a flat trend line
- a series with one point has that point as its intercept

A correlation of 0.0 is therefore not evidence of "no relationship" on its
own. Check the sample size alongside it.

Calling with mismatched lengths or a non-positive window breaks the caller
contract. With strict=True that raises ContractViolation. Otherwise a warning
is logged and the safe default is returned, so one bad series cannot fail a
whole dashboard request.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from healthtrend.tracking.models import TrendResult

logger = logging.getLogger(__name__)

# Lower bounds (exclusive) on |r| for each strength label
CORRELATION_BANDS = (
    (0.7, "Strong"),
    (0.4, "Moderate"),
    (0.2, "Weak"),
)


class ContractViolation(ValueError):
    """A caller passed arguments that break a documented precondition."""


def _violation(message: str, strict: bool) -> None:
    if strict:
        raise ContractViolation(message)
    logger.warning("%s; returning safe default", message)


def correlation(
    x: Sequence[float],
    y: Sequence[float],
    strict: bool = False,
) -> float:
    """
    Pearson correlation coefficient of two equal-length series.

    Args:
        x: First series
        y: Second series, same length as x
        strict: Raise ContractViolation on mismatched lengths instead of
                returning 0.0

    Returns:
        r in [-1, 1], or 0.0 for empty, mismatched or zero-variance input

    Example:
        >>> correlation([1, 2, 3], [2, 4, 6])
        1.0
        >>> correlation([1, 2, 3], [5, 5, 5])
        0.0
    """
    if len(x) != len(y):
        _violation(f"correlation needs equal lengths, got {len(x)} and {len(y)}", strict)
        return 0.0
    if len(x) == 0:
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)

    # Constant series have no variance; rounding in the mean can otherwise
    # leave a tiny nonzero spread.
    if np.all(xs == xs[0]) or np.all(ys == ys[0]):
        return 0.0

    dx = xs - xs.mean()
    dy = ys - ys.mean()
    denominator = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if denominator == 0:
        return 0.0
    return float(np.clip(np.sum(dx * dy) / denominator, -1.0, 1.0))


def interpret_correlation(r: float) -> str:
    """Label the strength of a correlation, ignoring its sign."""
    magnitude = abs(r)
    for threshold, label in CORRELATION_BANDS:
        if magnitude > threshold:
            return label
    return "Very Weak"


def trend_line(series: Sequence[float]) -> TrendResult:
    """
    Ordinary least-squares line of series[i] against i.

    The index is the independent variable, not the calendar date, so gaps
    between logged days are ignored. Callers comparing slopes across users
    with different logging habits should keep that in mind.

    Args:
        series: Values in chronological order

    Returns:
        TrendResult with slope per entry and intercept at index 0
    """
    n = len(series)
    if n == 0:
        return TrendResult(slope=0.0, intercept=0.0)
    if n == 1:
        return TrendResult(slope=0.0, intercept=float(series[0]))

    ys = np.asarray(series, dtype=float)
    xs = np.arange(n, dtype=float)

    dx = xs - xs.mean()
    slope = np.sum(dx * (ys - ys.mean())) / np.sum(dx * dx)
    intercept = ys.mean() - slope * xs.mean()
    return TrendResult(slope=float(slope), intercept=float(intercept))


def moving_average(
    series: Sequence[float],
    window_size: int,
    strict: bool = False,
) -> list[float]:
    """
    Trailing moving average with a window that shrinks near the start.

    result[i] averages series[max(0, i - window_size + 1) .. i].

    Example:
        >>> moving_average([1, 2, 3, 4], 2)
        [1.0, 1.5, 2.5, 3.5]
    """
    if window_size < 1:
        _violation(f"moving_average window must be >= 1, got {window_size}", strict)
        window_size = 1

    values = np.asarray(series, dtype=float)
    result = []
    for i in range(len(values)):
        start = max(0, i - window_size + 1)
        result.append(float(values[start : i + 1].mean()))
    return result
