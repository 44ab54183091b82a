"""
Tests for the learned/frozen day state machine.

Validates:
- Duration constants (freeze limit, target days) and name parsing
- toggle_learned is its own inverse and overrides frozen
- toggle_frozen respects the freeze quota silently
- learned and frozen days never overlap
- is_complete() follows learned + frozen >= target for every duration
- reset_progress() / change_goal() clear state as requested
"""

import itertools
import os
import sys
from datetime import date, datetime, timedelta

import pytest

# Ensure project root is on the path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from journey.core.goal_tracker import DayStatus, Duration, Goal, GoalTracker, day_key

D0 = date(2026, 10, 1)


def _days(n, start=D0):
    return [start + timedelta(days=i) for i in range(n)]


def _tracker(duration=Duration.WEEK, topic="Swift"):
    return GoalTracker(Goal(topic=topic, duration=duration))


def _assert_invariants(tracker):
    assert not set(tracker.learned_days) & set(tracker.frozen_days)
    assert tracker.frozen_count <= tracker.freeze_limit


# ── Duration ───────────────────────────────────────────────────────────


class TestDuration:

    @pytest.mark.parametrize("duration,limit,target", [
        (Duration.WEEK, 2, 7),
        (Duration.MONTH, 8, 30),
        (Duration.YEAR, 96, 365),
    ])
    def test_constants(self, duration, limit, target):
        assert duration.freeze_limit == limit
        assert duration.target_days == target

    def test_parse_is_case_insensitive(self):
        assert Duration.parse("Month") is Duration.MONTH
        assert Duration.parse(" year ") is Duration.YEAR
        assert Duration.parse(Duration.WEEK) is Duration.WEEK

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError, match="decade"):
            Duration.parse("decade")

    def test_title(self):
        assert [d.title for d in Duration] == ["Week", "Month", "Year"]


# ── Day normalization ──────────────────────────────────────────────────


class TestDayKey:

    def test_datetime_truncated_to_day(self):
        assert day_key(datetime(2026, 10, 1, 23, 59, 59)) == date(2026, 10, 1)

    def test_date_unchanged(self):
        assert day_key(D0) == D0

    def test_non_date_rejected(self):
        with pytest.raises(TypeError):
            day_key("2026-10-01")

    def test_times_on_same_day_share_status(self):
        tracker = _tracker()
        tracker.toggle_learned(datetime(2026, 10, 1, 8, 0))
        assert tracker.status(datetime(2026, 10, 1, 21, 30)) is DayStatus.LEARNED
        tracker.toggle_learned(datetime(2026, 10, 1, 12, 0))
        assert tracker.status(D0) is DayStatus.UNSET


# ── toggle_learned ─────────────────────────────────────────────────────


class TestToggleLearned:

    def test_initial_status_is_unset(self):
        assert _tracker().status(D0) is DayStatus.UNSET

    def test_toggle_twice_returns_to_unset(self):
        tracker = _tracker()
        tracker.toggle_learned(D0)
        assert tracker.status(D0) is DayStatus.LEARNED
        tracker.toggle_learned(D0)
        assert tracker.status(D0) is DayStatus.UNSET
        assert tracker.learned_count == 0

    def test_toggle_twice_on_frozen_day_unfreezes_it(self):
        """Learned overrides frozen, so a double toggle leaves the day unset."""
        tracker = _tracker()
        tracker.toggle_frozen(D0)
        tracker.toggle_learned(D0)
        tracker.toggle_learned(D0)
        assert tracker.status(D0) is DayStatus.UNSET

    def test_overrides_frozen(self):
        tracker = _tracker()
        tracker.toggle_frozen(D0)
        tracker.toggle_learned(D0)
        assert tracker.status(D0) is DayStatus.LEARNED
        assert tracker.frozen_count == 0
        assert tracker.learned_count == 1

    def test_past_and_future_days_accepted(self):
        tracker = _tracker()
        tracker.toggle_learned(date(1999, 1, 1))
        tracker.toggle_learned(date(2099, 12, 31))
        assert tracker.learned_count == 2


# ── toggle_frozen ──────────────────────────────────────────────────────


class TestToggleFrozen:

    def test_freeze_then_unfreeze(self):
        tracker = _tracker()
        assert tracker.toggle_frozen(D0) is True
        assert tracker.status(D0) is DayStatus.FROZEN
        assert tracker.toggle_frozen(D0) is True
        assert tracker.status(D0) is DayStatus.UNSET

    def test_freeze_replaces_learned(self):
        tracker = _tracker()
        tracker.toggle_learned(D0)
        tracker.toggle_frozen(D0)
        assert tracker.status(D0) is DayStatus.FROZEN
        assert tracker.learned_count == 0

    def test_month_quota_rejects_ninth_freeze(self):
        tracker = _tracker(Duration.MONTH)
        results = [tracker.toggle_frozen(d) for d in _days(9)]
        assert results == [True] * 8 + [False]
        assert tracker.frozen_count == 8
        assert tracker.status(_days(9)[-1]) is DayStatus.UNSET

    def test_rejected_freeze_keeps_learned_day(self):
        tracker = _tracker()
        for d in _days(2):
            tracker.toggle_frozen(d)
        learned_day = D0 + timedelta(days=5)
        tracker.toggle_learned(learned_day)
        assert tracker.toggle_frozen(learned_day) is False
        assert tracker.status(learned_day) is DayStatus.LEARNED

    def test_unfreeze_allowed_at_quota(self):
        tracker = _tracker()
        first, second = _days(2)
        tracker.toggle_frozen(first)
        tracker.toggle_frozen(second)
        assert not tracker.can_freeze
        assert tracker.toggle_frozen(second) is True
        assert tracker.frozen_count == 1
        assert tracker.can_freeze

    def test_freezes_remaining(self):
        tracker = _tracker()
        assert tracker.freezes_remaining == 2
        tracker.toggle_frozen(D0)
        assert tracker.freezes_remaining == 1


# ── Invariants over arbitrary sequences ────────────────────────────────


class TestInvariants:

    def test_all_short_action_sequences_keep_invariants(self):
        """Every sequence of 5 actions over 3 days keeps the sets disjoint and under quota."""
        days = _days(3)
        actions = [(kind, d) for kind in ("learned", "frozen") for d in days]
        for sequence in itertools.product(actions, repeat=5):
            tracker = _tracker()
            for kind, d in sequence:
                if kind == "learned":
                    tracker.toggle_learned(d)
                else:
                    tracker.toggle_frozen(d)
                _assert_invariants(tracker)

    @pytest.mark.parametrize("prior", ["unset", "learned", "frozen"])
    def test_frozen_then_learned_ends_learned(self, prior):
        tracker = _tracker()
        if prior == "learned":
            tracker.toggle_learned(D0)
        elif prior == "frozen":
            tracker.toggle_frozen(D0)
        tracker.toggle_frozen(D0)
        tracker.toggle_learned(D0)
        assert D0 in tracker.learned_days
        assert D0 not in tracker.frozen_days

    def test_frozen_then_learned_ends_learned_at_quota(self):
        tracker = _tracker()
        for d in _days(2, start=date(2026, 1, 1)):
            tracker.toggle_frozen(d)
        tracker.toggle_frozen(D0)  # rejected
        tracker.toggle_learned(D0)
        assert tracker.status(D0) is DayStatus.LEARNED


# ── Completion ─────────────────────────────────────────────────────────


class TestCompletion:

    def test_week_scenario(self):
        tracker = _tracker(Duration.WEEK)
        days = _days(8)
        for d in days[:5]:
            tracker.toggle_learned(d)
        assert not tracker.is_complete()
        tracker.toggle_frozen(days[5])
        tracker.toggle_frozen(days[6])
        assert tracker.is_complete()
        assert tracker.toggle_frozen(days[7]) is False
        assert tracker.frozen_count == 2

    @pytest.mark.parametrize("duration", list(Duration))
    def test_complete_iff_counts_reach_target(self, duration):
        target = duration.target_days
        limit = duration.freeze_limit
        for frozen in sorted({0, 1, limit}):
            for learned in sorted({0, target - frozen - 1, target - frozen, target + 1}):
                if learned < 0:
                    continue
                tracker = _tracker(duration)
                for d in _days(frozen):
                    tracker.toggle_frozen(d)
                for d in _days(learned, start=D0 + timedelta(days=frozen)):
                    tracker.toggle_learned(d)
                assert tracker.is_complete() == (learned + frozen >= target)

    def test_completion_not_sticky(self):
        tracker = _tracker()
        for d in _days(7):
            tracker.toggle_learned(d)
        assert tracker.is_complete()
        tracker.toggle_learned(D0)
        assert not tracker.is_complete()


# ── Reset and goal change ──────────────────────────────────────────────


class TestResetAndChangeGoal:

    def _filled(self):
        tracker = _tracker()
        for d in _days(5):
            tracker.toggle_learned(d)
        tracker.toggle_frozen(D0 + timedelta(days=10))
        return tracker

    def test_reset_clears_everything(self):
        tracker = self._filled()
        tracker.reset_progress()
        assert tracker.learned_count == 0
        assert tracker.frozen_count == 0
        assert not tracker.is_complete()

    def test_change_goal_with_reset(self):
        tracker = self._filled()
        tracker.change_goal("Kotlin", Duration.MONTH, reset_progress=True)
        assert tracker.goal == Goal("Kotlin", Duration.MONTH)
        assert tracker.learned_count == 0
        assert tracker.freeze_limit == 8

    def test_change_goal_without_reset_keeps_days(self):
        tracker = self._filled()
        tracker.change_goal("Swift", Duration.YEAR, reset_progress=False)
        assert tracker.learned_count == 5
        assert tracker.frozen_count == 1
        assert tracker.target_days == 365

    def test_empty_topic_allowed(self):
        tracker = _tracker(topic="")
        tracker.toggle_learned(D0)
        assert tracker.to_dict()["topic"] == ""

    def test_to_dict(self):
        tracker = _tracker()
        tracker.toggle_learned(date(2026, 10, 2))
        tracker.toggle_frozen(date(2026, 10, 1))
        data = tracker.to_dict()
        assert data["duration"] == "week"
        assert data["learned_days"] == ["2026-10-02"]
        assert data["frozen_days"] == ["2026-10-01"]
        assert data["is_complete"] is False
