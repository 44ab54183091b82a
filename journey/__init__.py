"""Learning Journey: goal and daily-progress tracking."""

__version__ = "1.0.0"
