"""Output formatters for analytics results."""

from __future__ import annotations

import json
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from healthtrend.analytics.dashboard import Dashboard
from healthtrend.tracking.models import CorrelationReport, DeficitEfficiency, WeeklyReport


def _dash(value: Any) -> str:
    return "-" if value is None else str(value)


def _efficiency_cell(result: Optional[DeficitEfficiency]) -> str:
    if result is None or result.efficiency is None:
        return "-"
    return f"{result.efficiency:.1f}%"


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format_dashboard(self, dashboard: Dashboard) -> None:
        """Print the dashboard as a header panel and summary tables."""
        data = dashboard.to_dict()
        user = data["user"]
        current = data["current"]
        goals = data["goals"]
        predictions = data["predictions"]
        trend = data["trend"]
        unit = goals["units"]

        header_lines = [
            f"[bold]{user['username'] or 'Dashboard'}[/bold]",
            f"Age {user['age']} | {user['heightFt']}'{user['heightIn']}\" "
            f"({user['heightCm']:.0f} cm)",
        ]
        trend_color = "green" if trend["isLosing"] else "yellow"
        header_lines.append(
            f"Trend: [{trend_color}]{'losing' if trend['isLosing'] else 'gaining'}[/{trend_color}]"
            f" ({trend['slope']:+.4f} {unit}/entry)"
        )
        self.console.print(Panel("\n".join(header_lines), title="Health Dashboard"))

        current_table = Table(title="Last 30 Entries")
        current_table.add_column("Metric", style="cyan")
        current_table.add_column("Value", justify="right")
        current_table.add_row("Weight", f"{current['weight']:.1f} {unit}")
        current_table.add_row("Avg calories", f"{current['avgCalories']} kcal")
        current_table.add_row("Avg sleep", f"{current['avgSleep']} h")
        current_table.add_row("Avg exercise", f"{current['avgExercise']} min")
        self.console.print(current_table)

        goal_table = Table(title="Goal Progress")
        goal_table.add_column("Starting", justify="right")
        goal_table.add_column("Goal", justify="right")
        goal_table.add_column("Lost", justify="right", style="green")
        goal_table.add_column("To go", justify="right")
        goal_table.add_column("Progress", justify="right")
        goal_table.add_row(
            f"{goals['startingWeight']:.1f}",
            f"{goals['goalWeight']:.1f}",
            f"{goals['weightLost']:.1f}",
            f"{goals['weightToGo']:.1f}",
            f"{goals['progressPercent']:.1f}%",
        )
        self.console.print(goal_table)

        prediction_lines = [
            f"TDEE: {predictions['tdee']} kcal/day",
            f"Average deficit: {predictions['avgDeficit']} kcal/day",
            f"Deficit model: {predictions['deficitModel']} "
            f"({predictions['kcalPerLb']:.0f} kcal/lb)",
        ]
        if predictions["weeksToGoal"] is None:
            prediction_lines.append("[yellow]No projection: not in a calorie deficit[/yellow]")
        else:
            prediction_lines.append(
                f"Goal in {predictions['weeksToGoal']} weeks ({predictions['projectedDate']})"
            )
        self.console.print(Panel("\n".join(prediction_lines), title="Projection"))

        quality = data["dataQuality"]
        self.console.print(
            f"[dim]{quality['totalDays']} days logged | "
            f"weight {quality['percentWithWeight']}% | "
            f"calories {quality['percentWithCalories']}% | "
            f"sleep {quality['percentWithSleep']}% | "
            f"exercise {quality['percentWithExercise']}% | "
            f"completeness {quality['completenessPercent']}%[/dim]"
        )

    def format_weekly(self, report: WeeklyReport) -> None:
        """Print one row per week."""
        table = Table(title="Weekly Summary")
        table.add_column("Week of", style="cyan")
        table.add_column("Days", justify="right")
        table.add_column("Calories", justify="right")
        table.add_column("Sleep", justify="right")
        table.add_column("Exercise", justify="right")
        table.add_column("Change (lbs)", justify="right")
        if report.tdee is not None:
            table.add_column("Efficiency", justify="right")

        for week in report.weeks:
            row_style = None
            if week is report.best:
                row_style = "green"
            elif week is report.worst:
                row_style = "red"
            cells = [
                week.week_start.isoformat(),
                str(week.days_logged),
                str(week.avg_calories),
                str(week.avg_sleep),
                str(week.avg_exercise),
                _dash(week.weight_change),
            ]
            if report.tdee is not None:
                cells.append(_efficiency_cell(report.efficiencies.get(week.week_start)))
            table.add_row(*cells, style=row_style)

        self.console.print(table)
        if report.tdee is not None:
            self.console.print(
                f"[dim]Efficiency: actual / expected loss at TDEE {report.tdee} kcal/day[/dim]"
            )

    def format_correlations(self, report: CorrelationReport) -> None:
        """Print correlations, or the reason none were computed."""
        if not report.sufficient:
            self.console.print(f"[yellow]{report.message}[/yellow]")
            return

        table = Table(title=f"Correlations (n={report.sample_size})")
        table.add_column("Pair", style="cyan")
        table.add_column("r", justify="right")
        table.add_column("Strength")
        for item in report.correlations:
            table.add_row(item.name, f"{item.value:+.3f}", item.interpretation)
        self.console.print(table)


class JSONFormatter:
    """Format results as JSON for programmatic use."""

    def format(self, result: Any, indent: int = 2) -> str:
        """Serialize any result exposing to_dict(), or a plain dict."""
        data = result.to_dict() if hasattr(result, "to_dict") else result
        return json.dumps({"success": True, **data}, indent=indent)
