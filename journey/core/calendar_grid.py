"""
Calendar layout helpers for the week strip and the month grid.

Weekdays follow the ``calendar`` module convention: 0=Monday .. 6=Sunday.
Cells that fall outside ``date.min``..``date.max`` are None.
"""

import calendar
from datetime import date
from typing import List, Optional

from journey.core.goal_tracker import day_key

_WEEKDAY_ABBR = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")
_MIN_ORDINAL = date.min.toordinal()
_MAX_ORDINAL = date.max.toordinal()


def week_days(anchor: date, first_weekday: int = calendar.SUNDAY) -> List[Optional[date]]:
    """Return the 7 days of the week containing anchor."""
    day = day_key(anchor)
    start = day.toordinal() - (day.weekday() - first_weekday) % 7
    return [
        date.fromordinal(o) if _MIN_ORDINAL <= o <= _MAX_ORDINAL else None
        for o in range(start, start + 7)
    ]


def weekday_headers(first_weekday: int = calendar.SUNDAY) -> List[str]:
    return [_WEEKDAY_ABBR[(first_weekday + i) % 7] for i in range(7)]


def month_grid(anchor: date, first_weekday: int = calendar.SUNDAY) -> List[List[Optional[date]]]:
    """
    Lay out the month containing anchor as rows of 7 cells.

    Cells belonging to the neighbouring months are None, so the first row
    may start with leading blanks and the last row may end with trailing
    ones.
    """
    day = day_key(anchor)
    cal = calendar.Calendar(firstweekday=first_weekday)
    # monthdayscalendar marks other months with 0 and never builds their dates
    return [
        [date(day.year, day.month, d) if d else None for d in week]
        for week in cal.monthdayscalendar(day.year, day.month)
    ]


def shift_month(anchor: date, offset: int) -> date:
    """Move anchor by whole months, clamping the day to the month length.

    Raises OverflowError when the result is outside the supported years.
    """
    day = day_key(anchor)
    index = day.year * 12 + (day.month - 1) + offset
    year, month = divmod(index, 12)
    month += 1
    if not date.min.year <= year <= date.max.year:
        raise OverflowError("date value out of range")
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last))


def month_title(anchor: date) -> str:
    day = day_key(anchor)
    return f"{calendar.month_name[day.month]} {day.year}"
