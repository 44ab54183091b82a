"""
Goal Tracker - the learned/frozen day state machine.

Tracks which calendar days were logged as learned or frozen for one goal,
enforces the per-duration freeze quota, and reports goal completion.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Set

logger = logging.getLogger(__name__)


class Duration(Enum):
    """Target window for a goal."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def title(self) -> str:
        return self.value.capitalize()

    @property
    def freeze_limit(self) -> int:
        return _FREEZE_LIMITS[self]

    @property
    def target_days(self) -> int:
        return _TARGET_DAYS[self]

    @classmethod
    def parse(cls, value: Any) -> "Duration":
        """Accept a Duration or its case-insensitive name ("week", "Month")."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown duration {value!r} (expected one of: {choices})")


_FREEZE_LIMITS = {Duration.WEEK: 2, Duration.MONTH: 8, Duration.YEAR: 96}
_TARGET_DAYS = {Duration.WEEK: 7, Duration.MONTH: 30, Duration.YEAR: 365}


class DayStatus(Enum):
    """Status of a single calendar day."""

    UNSET = "unset"
    LEARNED = "learned"
    FROZEN = "frozen"


@dataclass(frozen=True)
class Goal:
    """Learning topic plus chosen duration. Replaced, never mutated."""

    topic: str
    duration: Duration = Duration.WEEK


def day_key(day: date) -> date:
    """Truncate a date or datetime to its calendar day."""
    # datetime is a subclass of date, so check it first
    if isinstance(day, datetime):
        return day.date()
    if isinstance(day, date):
        return day
    raise TypeError(f"Expected date or datetime, got {type(day).__name__}")


class GoalTracker:
    """
    Owns one goal and its progress.

    Keeps two disjoint sets of days (learned and frozen). Frozen days are
    capped at the duration's freeze limit; both kinds count toward the
    target.
    """

    def __init__(self, goal: Goal) -> None:
        self.goal = goal
        self._learned: Set[date] = set()
        self._frozen: Set[date] = set()

    # -- read surface ------------------------------------------------------

    @property
    def duration(self) -> Duration:
        return self.goal.duration

    @property
    def learned_count(self) -> int:
        return len(self._learned)

    @property
    def frozen_count(self) -> int:
        return len(self._frozen)

    @property
    def freeze_limit(self) -> int:
        return self.goal.duration.freeze_limit

    @property
    def target_days(self) -> int:
        return self.goal.duration.target_days

    @property
    def freezes_remaining(self) -> int:
        return max(0, self.freeze_limit - self.frozen_count)

    @property
    def can_freeze(self) -> bool:
        return self.frozen_count < self.freeze_limit

    @property
    def learned_days(self) -> List[date]:
        return sorted(self._learned)

    @property
    def frozen_days(self) -> List[date]:
        return sorted(self._frozen)

    def status(self, day: date) -> DayStatus:
        """Return the status of a day."""
        key = day_key(day)
        if key in self._learned:
            return DayStatus.LEARNED
        if key in self._frozen:
            return DayStatus.FROZEN
        return DayStatus.UNSET

    def is_complete(self) -> bool:
        """True once learned + frozen days reach the target."""
        return self.learned_count + self.frozen_count >= self.target_days

    # -- transitions -------------------------------------------------------

    def toggle_learned(self, day: date) -> None:
        """Log or un-log a day as learned. Learned overrides frozen."""
        key = day_key(day)
        if key in self._learned:
            self._learned.discard(key)
            logger.debug("Un-logged learned day %s", key)
            return
        self._learned.add(key)
        self._frozen.discard(key)
        logger.debug("Logged learned day %s", key)

    def toggle_frozen(self, day: date) -> bool:
        """
        Freeze or un-freeze a day.

        Un-freezing always succeeds. Freezing a new day only happens while
        the quota has room; otherwise nothing changes.

        Returns:
            True if state changed, False if the freeze was rejected
        """
        key = day_key(day)
        if key in self._frozen:
            self._frozen.discard(key)
            logger.debug("Un-froze day %s", key)
            return True
        if not self.can_freeze:
            logger.debug(
                "Freeze rejected for %s: %d of %d freezes used",
                key, self.frozen_count, self.freeze_limit,
            )
            return False
        self._frozen.add(key)
        self._learned.discard(key)
        logger.debug("Froze day %s", key)
        return True

    def reset_progress(self) -> None:
        """Clear all learned and frozen days."""
        self._learned.clear()
        self._frozen.clear()
        logger.info("Progress reset for goal %r", self.goal.topic)

    def change_goal(self, topic: str, duration: Duration, reset_progress: bool) -> None:
        """Replace the goal; optionally clear progress."""
        self.goal = Goal(topic=topic, duration=Duration.parse(duration))
        logger.info(
            "Goal changed to %r (%s), reset=%s",
            topic, self.goal.duration.value, reset_progress,
        )
        if reset_progress:
            self.reset_progress()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "topic": self.goal.topic,
            "duration": self.goal.duration.value,
            "learned_count": self.learned_count,
            "frozen_count": self.frozen_count,
            "freeze_limit": self.freeze_limit,
            "target_days": self.target_days,
            "is_complete": self.is_complete(),
            "learned_days": [d.isoformat() for d in self.learned_days],
            "frozen_days": [d.isoformat() for d in self.frozen_days],
        }
