"""Body metrics: unit conversion and energy expenditure."""
