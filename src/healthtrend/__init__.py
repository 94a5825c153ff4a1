"""Analytics and prediction engine for personal health logs."""

__version__ = "0.1.0"
