"""CLI interface using Typer."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler

from healthtrend.analytics.aggregator import (
    correlation_report,
    profile_tdee,
    weekly_summary,
)
from healthtrend.analytics.dashboard import build_dashboard
from healthtrend.config import get_settings, reload_settings
from healthtrend.data.loader import load_entries, load_profile
from healthtrend.export.formatters import JSONFormatter, TableFormatter
from healthtrend.profiles.body_calc import (
    calculate_bmr,
    calculate_tdee,
    parse_sex,
    resolve_activity_multiplier,
)
from healthtrend.profiles.units import (
    cm_to_feet_inches,
    feet_inches_to_cm,
    to_imperial_weight,
    to_metric_weight,
)

app = typer.Typer(
    help="Trend, correlation and goal-projection analytics for health logs",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("healthtrend")

DATE_FORMATS = ["%Y-%m-%d"]


# ============================================================================
# Helpers
# ============================================================================


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    err_console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


def use_json(json_output: bool) -> bool:
    """JSON output if requested on the command line or in settings."""
    return json_output or get_settings().defaults.output_format == "json"


def load_or_fail(loader, path: Path):
    """Run a file loader, turning bad input into a clean CLI error."""
    try:
        return loader(path)
    except FileNotFoundError:
        fail(f"File not found: {path}")
    except (ValueError, yaml.YAMLError) as e:
        fail(f"Could not read {path}: {e}")


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging and load settings before any command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    try:
        reload_settings(config)
    except (ValueError, yaml.YAMLError) as e:
        fail(f"Invalid configuration: {e}")
    logger.debug("Settings loaded from %s", config or "default location")


# ============================================================================
# Analytics commands
# ============================================================================


@app.command()
def dashboard(
    entries_path: Path = typer.Option(..., "--entries", "-e", help="Entries JSON file"),
    profile_path: Path = typer.Option(..., "--profile", "-p", help="Profile YAML file"),
    today: Optional[datetime] = typer.Option(
        None, "--today", formats=DATE_FORMATS, help="Reference date for projections"
    ),
    units: Optional[str] = typer.Option(None, "--units", help="imperial or metric"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show trends, averages and the goal projection."""
    settings = get_settings()
    if units is not None:
        if units not in ("imperial", "metric"):
            fail(f"--units must be 'imperial' or 'metric', got '{units}'")
        settings.defaults.display_units = units

    entries = load_or_fail(load_entries, entries_path)
    profile = load_or_fail(load_profile, profile_path)
    logger.debug("Loaded %d entries", len(entries))

    result = build_dashboard(
        profile,
        entries,
        today=today.date() if today else None,
        settings=settings,
    )

    if use_json(json_output):
        print(JSONFormatter().format(result))
    else:
        TableFormatter(console).format_dashboard(result)


@app.command()
def weekly(
    entries_path: Path = typer.Option(..., "--entries", "-e", help="Entries JSON file"),
    profile_path: Optional[Path] = typer.Option(
        None, "--profile", "-p", help="Profile YAML file; adds deficit efficiency"
    ),
    weeks: Optional[int] = typer.Option(
        None, "--weeks", "-w", min=1, help="Number of recent weeks (default from config)"
    ),
    all_weeks: bool = typer.Option(False, "--all", help="Include every week"),
    fill_gaps: bool = typer.Option(False, "--fill-gaps", help="Show weeks with no entries"),
    today: Optional[datetime] = typer.Option(
        None, "--today", formats=DATE_FORMATS, help="Reference date for --weeks"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Summarize entries week by week (weeks start on Sunday)."""
    settings = get_settings()
    entries = load_or_fail(load_entries, entries_path)

    tdee = None
    if profile_path is not None:
        profile = load_or_fail(load_profile, profile_path)
        tdee = profile_tdee(profile, entries, settings.analytics.activity_multiplier)
        logger.debug("Weekly deficit efficiency against TDEE %d", tdee)

    if all_weeks:
        weeks = None
    elif weeks is None:
        weeks = settings.analytics.weekly_history_weeks

    report = weekly_summary(
        entries,
        weeks=weeks,
        today=today.date() if today else None,
        fill_gaps=fill_gaps,
        tdee=tdee,
    )

    if use_json(json_output):
        print(JSONFormatter().format(report))
    else:
        TableFormatter(console).format_weekly(report)


@app.command()
def correlations(
    entries_path: Path = typer.Option(..., "--entries", "-e", help="Entries JSON file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Correlate sleep with exercise and calorie intake."""
    entries = load_or_fail(load_entries, entries_path)
    report = correlation_report(
        entries, min_samples=get_settings().analytics.min_correlation_samples
    )

    if use_json(json_output):
        print(JSONFormatter().format(report))
    else:
        TableFormatter(console).format_correlations(report)


@app.command()
def tdee(
    weight_kg: float = typer.Option(..., "--weight-kg", help="Body weight in kg"),
    height_cm: float = typer.Option(..., "--height-cm", help="Height in cm"),
    age: int = typer.Option(..., "--age", help="Age in years"),
    sex: str = typer.Option(..., "--sex", help="male, female or other"),
    activity: Optional[str] = typer.Option(
        None,
        "--activity",
        "-a",
        help="Preset (sedentary, light, moderate, very_active, extra_active) or multiplier",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate BMR and TDEE with Mifflin-St Jeor."""
    try:
        sex_enum = parse_sex(sex)
        multiplier = resolve_activity_multiplier(
            activity if activity is not None else get_settings().analytics.activity_multiplier
        )
    except ValueError as e:
        fail(str(e))

    bmr = calculate_bmr(weight_kg, height_cm, age, sex_enum)
    result = {
        "bmr": round(bmr),
        "activityMultiplier": multiplier,
        "tdee": calculate_tdee(bmr, multiplier),
    }

    if use_json(json_output):
        print(JSONFormatter().format(result))
    else:
        console.print(f"BMR:  {result['bmr']} kcal/day")
        console.print(f"TDEE: [bold]{result['tdee']}[/bold] kcal/day (x{multiplier})")


# ============================================================================
# Unit conversion
# ============================================================================


@app.command("convert-weight")
def convert_weight_cmd(
    value: float = typer.Argument(..., help="Weight to convert"),
    to: str = typer.Option("lbs", "--to", help="Target unit: lbs or kg"),
) -> None:
    """Convert a weight between kilograms and pounds."""
    if to == "lbs":
        console.print(f"{value} kg = {to_imperial_weight(value)} lbs")
    elif to == "kg":
        console.print(f"{value} lbs = {to_metric_weight(value)} kg")
    else:
        fail(f"--to must be 'lbs' or 'kg', got '{to}'")


@app.command("convert-height")
def convert_height_cmd(
    cm: Optional[float] = typer.Option(None, "--cm", help="Height in centimeters"),
    feet: Optional[int] = typer.Option(None, "--ft", help="Feet"),
    inches: float = typer.Option(0, "--in", help="Inches"),
) -> None:
    """Convert a height between centimeters and feet/inches."""
    if cm is not None:
        ft, inch = cm_to_feet_inches(cm)
        console.print(f"{cm} cm = {ft}' {inch}\"")
    elif feet is not None:
        console.print(f"{feet}' {inches}\" = {feet_inches_to_cm(feet, inches)} cm")
    else:
        fail("Provide --cm or --ft/--in")


if __name__ == "__main__":
    app()
