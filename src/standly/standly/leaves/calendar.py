"""Leave calendar views: the month grid, team announcements and the member overview."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from ..common.date_windows import is_weekend, iter_days, month_bounds, shift_month, sunday_first_weekday
from ..core.constants import ANNOUNCEMENT_LIMIT, ANNOUNCEMENT_LOOKAHEAD_DAYS
from ..core.enums import LeaveType
from ..users.model import Profile, person_view
from .model import Holiday, Leave


def leave_type_label(leave_type: LeaveType) -> str:
    return f"{leave_type.value} leave"


def short_date(day: date) -> str:
    return f"{day:%b} {day.day}"


def month_calendar(
    year: int,
    month: int,
    *,
    leaves: Sequence[Leave],
    profiles: Mapping[int, Profile],
    today: date,
    holidays: Iterable[Holiday] = (),
    hovered_user_id: Optional[int] = None,
) -> dict:
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")

    first, last = month_bounds(year, month)
    holiday_names = {h.date: h.name for h in holidays}

    cells = []
    for day in iter_days(first, last):
        day_leaves = [l for l in leaves if l.covers(day)]
        cells.append(
            {
                "date": day.isoformat(),
                "day": day.day,
                "is_today": day == today,
                "is_weekend": is_weekend(day),
                "holiday": holiday_names.get(day),
                "hovered_on_leave": hovered_user_id is not None
                and any(l.user_id == hovered_user_id for l in day_leaves),
                "leaves": [
                    {
                        "id": l.leave_id,
                        "user": person_view(l.user_id, profiles),
                        "type": l.type.value,
                        "is_hovered": l.user_id == hovered_user_id,
                    }
                    for l in day_leaves
                ],
            }
        )

    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return {
        "year": year,
        "month": month,
        "title": f"{first:%B} {year}",
        "days_in_month": last.day,
        "first_weekday": sunday_first_weekday(first),
        "days": cells,
        "previous": {"year": prev_year, "month": prev_month},
        "next": {"year": next_year, "month": next_month},
    }


def announcements(leaves: Sequence[Leave], profiles: Mapping[int, Profile], today: date) -> list[dict]:
    """Leaves in progress today or starting within the lookahead window, soonest first."""
    horizon = today + timedelta(days=ANNOUNCEMENT_LOOKAHEAD_DAYS)

    picked = [
        l
        for l in leaves
        if l.user_id in profiles and (l.covers(today) or today < l.start_date <= horizon)
    ]
    picked.sort(key=lambda l: (l.start_date, l.leave_id))

    out = []
    for l in picked[:ANNOUNCEMENT_LIMIT]:
        user = profiles[l.user_id]
        active = l.covers(today)
        label = "Currently away" if active else f"Starting {short_date(l.start_date)}"
        if l.end_date != l.start_date:
            label += f" - {short_date(l.end_date)}"
        out.append(
            {
                "id": l.leave_id,
                "user": person_view(l.user_id, profiles),
                "first_name": user.first_name,
                "type": l.type.value,
                "type_label": leave_type_label(l.type),
                "is_active": active,
                "label": label,
                "start_date": l.start_date.isoformat(),
                "end_date": l.end_date.isoformat(),
            }
        )
    return out


def team_overview(leaves: Sequence[Leave], profiles: Sequence[Profile], today: date) -> list[dict]:
    by_id = {p.user_id: p for p in profiles}
    return [
        {
            "user": person_view(p.user_id, by_id),
            "upcoming_leaves": sum(1 for l in leaves if l.user_id == p.user_id and l.end_date >= today),
        }
        for p in profiles
    ]
