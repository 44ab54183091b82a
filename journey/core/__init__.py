"""Core state machine and session controller."""

from journey.core.goal_tracker import DayStatus, Duration, Goal, GoalTracker, day_key

__all__ = ["DayStatus", "Duration", "Goal", "GoalTracker", "day_key"]
