"""Date arithmetic shared by the leave calendar, the feed widgets and reports."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date in the inclusive range ``[start, end]``."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive date ranges overlap when each starts before the other ends."""
    return a_start <= b_end and b_start <= a_end


def business_days(start: date, end: date, holidays: Iterable[date] = ()) -> int:
    """Count Monday-Friday dates in ``[start, end]`` that are not holidays."""
    if end < start:
        return 0
    closed = set(holidays)
    return sum(1 for d in iter_days(start, end) if not is_weekend(d) and d not in closed)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def trailing_window(now: datetime, days: int) -> tuple[datetime, datetime]:
    """``[now - days, now]``; used for the weekly report."""
    return now - timedelta(days=days), now


def last_n_days(today: date, n: int) -> list[date]:
    """The ``n`` days ending with ``today``, oldest first."""
    return [today - timedelta(days=n - 1 - i) for i in range(n)]


def sunday_first_weekday(day: date) -> int:
    """Weekday with Sunday = 0 (calendar grids start on Sunday)."""
    return (day.weekday() + 1) % 7


def month_bounds(year: int, month: int) -> tuple[date, date]:
    days = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, days)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
