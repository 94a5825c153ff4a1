"""Input loading for the command-line interface."""
