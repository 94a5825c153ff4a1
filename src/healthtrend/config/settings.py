"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from healthtrend.profiles.body_calc import DEFAULT_ACTIVITY_MULTIPLIER


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".healthtrend"


@dataclass
class AnalyticsConfig:
    """Analytics engine parameters."""

    activity_multiplier: float = DEFAULT_ACTIVITY_MULTIPLIER
    trailing_window: int = 30  # entries, not calendar days
    min_correlation_samples: int = 10
    moving_average_window: int = 7
    weekly_history_weeks: int = 8
    deficit_model: str = "standard"  # "standard" or "empirical"
    strict_contracts: bool = False
    precision: int = 1


@dataclass
class DefaultsConfig:
    """Default values for presentation."""

    display_units: str = "imperial"  # "imperial" or "metric"
    output_format: str = "table"  # "table" or "json"


@dataclass
class Settings:
    """Main application settings."""

    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.healthtrend/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse analytics config
        if "analytics" in data:
            an_data = data["analytics"] or {}
            if "activity_multiplier" in an_data:
                settings.analytics.activity_multiplier = float(an_data["activity_multiplier"])
            if "trailing_window" in an_data:
                settings.analytics.trailing_window = int(an_data["trailing_window"])
            if "min_correlation_samples" in an_data:
                settings.analytics.min_correlation_samples = int(
                    an_data["min_correlation_samples"]
                )
            if "moving_average_window" in an_data:
                settings.analytics.moving_average_window = int(
                    an_data["moving_average_window"]
                )
            if "weekly_history_weeks" in an_data:
                settings.analytics.weekly_history_weeks = int(an_data["weekly_history_weeks"])
            if "deficit_model" in an_data:
                settings.analytics.deficit_model = an_data["deficit_model"]
            if "strict_contracts" in an_data:
                settings.analytics.strict_contracts = bool(an_data["strict_contracts"])
            if "precision" in an_data:
                settings.analytics.precision = int(an_data["precision"])

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            if "display_units" in def_data:
                settings.defaults.display_units = def_data["display_units"]
            if "output_format" in def_data:
                settings.defaults.output_format = def_data["output_format"]

        settings.validate()
        return settings

    def validate(self) -> None:
        """Reject values the engine cannot work with."""
        if self.analytics.activity_multiplier <= 0:
            raise ValueError("analytics.activity_multiplier must be positive")
        if self.analytics.deficit_model not in ("standard", "empirical"):
            raise ValueError(
                f"analytics.deficit_model must be 'standard' or 'empirical', "
                f"got '{self.analytics.deficit_model}'"
            )
        if self.defaults.display_units not in ("imperial", "metric"):
            raise ValueError(
                f"defaults.display_units must be 'imperial' or 'metric', "
                f"got '{self.defaults.display_units}'"
            )

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.healthtrend/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "analytics": {
                "activity_multiplier": self.analytics.activity_multiplier,
                "trailing_window": self.analytics.trailing_window,
                "min_correlation_samples": self.analytics.min_correlation_samples,
                "moving_average_window": self.analytics.moving_average_window,
                "weekly_history_weeks": self.analytics.weekly_history_weeks,
                "deficit_model": self.analytics.deficit_model,
                "strict_contracts": self.analytics.strict_contracts,
                "precision": self.analytics.precision,
            },
            "defaults": {
                "display_units": self.defaults.display_units,
                "output_format": self.defaults.output_format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
