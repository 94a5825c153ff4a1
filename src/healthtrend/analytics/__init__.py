"""Summary views over a user's entry history."""

from healthtrend.analytics.aggregator import (
    correlation_report,
    dashboard_summary,
    weekly_summary,
)
from healthtrend.analytics.dashboard import Dashboard, build_dashboard

__all__ = [
    "Dashboard",
    "build_dashboard",
    "correlation_report",
    "dashboard_summary",
    "weekly_summary",
]
