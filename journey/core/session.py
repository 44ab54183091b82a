"""
Activity Session - the screen controller around one GoalTracker.

Holds the selected day, drives the goal-edit and goal-completed flows,
and pushes a snapshot of the current state to subscribers after every
change. Presentation layers either subscribe or poll ``snapshot()``.
"""

import logging
from datetime import date, timedelta
from typing import Any, Callable, Dict, List, Optional

from journey.core import calendar_grid
from journey.core.goal_tracker import DayStatus, Duration, Goal, GoalTracker, day_key
from journey.core.logger import ActionLogger

logger = logging.getLogger(__name__)

Subscriber = Callable[[Dict[str, Any]], None]

_DAY_LABELS = {
    DayStatus.LEARNED: "Learned Today",
    DayStatus.FROZEN: "Day Frozen",
    DayStatus.UNSET: "Log as Learned",
}


class JourneyError(Exception):
    """Base class for session-level misuse."""


class GoalEditError(JourneyError):
    """Raised when a goal edit is confirmed without being requested."""


class ActivitySession:
    """
    One user's active goal plus the state of the activity screen.

    Editing the goal always resets progress: ``request_goal_edit()`` raises
    the warning, ``confirm_goal_edit()`` applies the new goal with a reset.
    """

    def __init__(
        self,
        goal: Goal,
        first_weekday: Optional[int] = None,
        action_logger: Optional[ActionLogger] = None,
        today: Optional[date] = None,
    ) -> None:
        if first_weekday is None:
            from journey.utils.config import get_calendar_config

            first_weekday = get_calendar_config()["first_weekday"]
        self.tracker = GoalTracker(goal)
        self.first_weekday = first_weekday
        self.selected_date = day_key(today or date.today())
        self.edit_pending = False
        self._action_logger = action_logger
        self._subscribers: List[Subscriber] = []
        logger.info(
            "Session started: %r for a %s",
            goal.topic, goal.duration.title.lower(),
        )

    @classmethod
    def start(cls, topic: str, duration: Any = Duration.WEEK, **kwargs: Any) -> "ActivitySession":
        """Onboarding: build a session from a topic and a duration name."""
        return cls(Goal(topic=topic, duration=Duration.parse(duration)), **kwargs)

    @property
    def goal(self) -> Goal:
        return self.tracker.goal

    # -- subscribers -------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self) -> None:
        state = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception as e:
                logger.error("Subscriber %r failed: %s", callback, e, exc_info=True)

    def _record(self, action_type: str, parameters: Dict[str, Any], result: str = "success") -> None:
        if self._action_logger is not None:
            self._action_logger.log_action(
                action_type=action_type, parameters=parameters, result=result,
            )
        self._notify()

    # -- day selection -----------------------------------------------------

    def select_date(self, day: date) -> None:
        self.selected_date = day_key(day)
        self._notify()

    def change_week(self, offset: int) -> None:
        """Move the selection by whole weeks (negative goes back).

        Raises OverflowError, with the selection unchanged, when the move
        would leave the supported date range.
        """
        try:
            new_date = self.selected_date + timedelta(weeks=offset)
        except OverflowError:
            logger.warning(
                "Week offset %s from %s is out of range", offset, self.selected_date,
            )
            raise
        self.selected_date = new_date
        self._notify()

    def week_days(self) -> List[Optional[date]]:
        return calendar_grid.week_days(self.selected_date, self.first_weekday)

    # -- logging days ------------------------------------------------------

    def log_learned(self, day: Optional[date] = None) -> DayStatus:
        """Toggle learned on the given day (default: the selected day)."""
        key = day_key(day) if day is not None else self.selected_date
        self.tracker.toggle_learned(key)
        status = self.tracker.status(key)
        self._record("log_learned", {"date": key.isoformat(), "status": status.value})
        return status

    def log_frozen(self, day: Optional[date] = None) -> bool:
        """Toggle frozen on the given day. Returns False if over quota."""
        key = day_key(day) if day is not None else self.selected_date
        changed = self.tracker.toggle_frozen(key)
        if not changed:
            logger.info(
                "Freeze quota reached (%d of %d), %s not frozen",
                self.tracker.frozen_count, self.tracker.freeze_limit, key,
            )
        self._record(
            "log_frozen",
            {"date": key.isoformat(), "status": self.tracker.status(key).value},
            result="success" if changed else "rejected",
        )
        return changed

    # -- goal editing ------------------------------------------------------

    def request_goal_edit(self) -> str:
        """Raise the reset warning. Returns the current topic as a draft."""
        self.edit_pending = True
        self._notify()
        return self.goal.topic

    def cancel_goal_edit(self) -> None:
        self.edit_pending = False
        self._notify()

    def confirm_goal_edit(self, topic: str, duration: Any) -> None:
        """Apply an edit the user was warned about. Always resets progress."""
        if not self.edit_pending:
            raise GoalEditError("No goal edit was requested")
        self.edit_pending = False
        new_duration = Duration.parse(duration)
        self.tracker.change_goal(topic, new_duration, reset_progress=True)
        self._record("edit_goal", {"topic": topic, "duration": new_duration.value})

    def restart_same_goal(self) -> None:
        """Keep topic and duration, start counting from zero."""
        self.tracker.reset_progress()
        self._record("restart_goal", {"topic": self.goal.topic})

    def start_new_goal(self, topic: str, duration: Any) -> None:
        new_duration = Duration.parse(duration)
        self.edit_pending = False
        self.tracker.change_goal(topic, new_duration, reset_progress=True)
        self._record("new_goal", {"topic": topic, "duration": new_duration.value})

    # -- display -----------------------------------------------------------

    def freeze_usage_label(self) -> str:
        return f"{self.tracker.frozen_count} out of {self.tracker.freeze_limit} Freezes used"

    def day_label(self, day: Optional[date] = None) -> str:
        key = day_key(day) if day is not None else self.selected_date
        return _DAY_LABELS[self.tracker.status(key)]

    def snapshot(self) -> Dict[str, Any]:
        """Everything a presentation layer needs to draw the activity screen."""
        tracker = self.tracker
        return {
            "topic": self.goal.topic,
            "duration": self.goal.duration.value,
            "learned_count": tracker.learned_count,
            "frozen_count": tracker.frozen_count,
            "freeze_limit": tracker.freeze_limit,
            "target_days": tracker.target_days,
            "is_complete": tracker.is_complete(),
            "can_freeze": tracker.can_freeze,
            "freeze_usage": self.freeze_usage_label(),
            "edit_pending": self.edit_pending,
            "selected_date": self.selected_date.isoformat(),
            "selected_status": tracker.status(self.selected_date).value,
            "week": [
                None if d is None else {"date": d.isoformat(), "status": tracker.status(d).value}
                for d in self.week_days()
            ],
        }
