"""Health entry tracking: data models, statistics and goal projection.

Key components:
- HealthEntry/UserProfile models and same-day entry merging
- Pearson correlation, index-based trend line, trailing moving average
- Goal projection with pluggable kcal-per-lb deficit models
"""

from __future__ import annotations

from healthtrend.tracking.models import (
    DataSource,
    DeficitEfficiency,
    HealthEntry,
    Projection,
    TrendResult,
    UserProfile,
    WeeklyBucket,
)
from healthtrend.tracking.projection import (
    DeficitModel,
    EmpiricalDeficitModel,
    StandardDeficitModel,
    deficit_efficiency,
    project_goal,
)
from healthtrend.tracking.stats import (
    ContractViolation,
    correlation,
    moving_average,
    trend_line,
)

__all__ = [
    "ContractViolation",
    "DataSource",
    "DeficitEfficiency",
    "DeficitModel",
    "EmpiricalDeficitModel",
    "HealthEntry",
    "Projection",
    "StandardDeficitModel",
    "TrendResult",
    "UserProfile",
    "WeeklyBucket",
    "correlation",
    "deficit_efficiency",
    "moving_average",
    "project_goal",
    "trend_line",
]
