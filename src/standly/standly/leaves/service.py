from __future__ import annotations

import logging
from datetime import MAXYEAR, MINYEAR, date, time
from typing import Optional

from ..common.date_windows import business_days, month_bounds, ranges_overlap
from ..common.datetime_utils import iso, now_local, parse_iso_date, parse_optional_time
from ..common.validators import optional_text, require_non_empty
from ..core.enums import LeaveType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Profile, person_view
from ..users.repository import ProfileRepository
from . import calendar
from .model import Holiday, Leave
from .repository import HolidayRepository, LeaveRepository

logger = logging.getLogger(__name__)


def parse_leave_type(value: Optional[str]) -> LeaveType:
    try:
        return LeaveType((value or LeaveType.VACATION.value).strip().lower())
    except ValueError:
        raise ValidationError("Unknown leave type")


def validate_leave_window(start: date, end: date, start_time: Optional[time], end_time: Optional[time]) -> None:
    if end < start:
        raise ValidationError("End date must be on or after start date")
    if start == end and start_time and end_time and end_time <= start_time:
        raise ValidationError("End time must be after start time")


class LeaveService:
    def __init__(self, leaves: LeaveRepository, holidays: HolidayRepository, profiles: ProfileRepository):
        self._leaves = leaves
        self._holidays = holidays
        self._profiles = profiles

    def _require_owner(self, leave_id: int, user_id: int) -> Leave:
        l = self._leaves.get(int(leave_id))
        if not l:
            raise NotFoundError("Leave not found")
        if l.user_id != int(user_id):
            raise AuthorizationError("You can only change your own leaves")
        return l

    def _check_overlap(self, user_id: int, start: date, end: date, *, ignore_id: Optional[int] = None) -> None:
        for other in self._leaves.list_for_user(int(user_id)):
            if other.leave_id == ignore_id:
                continue
            if ranges_overlap(start, end, other.start_date, other.end_date):
                raise ValidationError(
                    f"Overlaps an existing leave ({other.start_date.isoformat()} to {other.end_date.isoformat()})"
                )

    def _holiday_dates(self) -> list[date]:
        return [h.date for h in self._holidays.list_all()]

    def _profiles_by_id(self) -> dict[int, Profile]:
        return {p.user_id: p for p in self._profiles.list_all()}

    def _view(self, l: Leave, profiles: dict[int, Profile], holidays: list[date]) -> dict:
        return {
            "id": l.leave_id,
            "user": person_view(l.user_id, profiles),
            "start_date": l.start_date.isoformat(),
            "end_date": l.end_date.isoformat(),
            "type": l.type.value,
            "reason": l.reason,
            "start_time": l.start_time.strftime("%H:%M") if l.start_time else None,
            "end_time": l.end_time.strftime("%H:%M") if l.end_time else None,
            "business_days": business_days(l.start_date, l.end_date, holidays),
            "created_at": iso(l.created_at),
        }

    # ---- writes ----
    def create(
        self,
        *,
        user_id: int,
        start_date: str,
        end_date: str,
        leave_type: Optional[str] = None,
        reason: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> int:
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date) if end_date else start
        t_start = parse_optional_time(start_time)
        t_end = parse_optional_time(end_time)

        validate_leave_window(start, end, t_start, t_end)
        self._check_overlap(user_id, start, end)

        leave_id = self._leaves.create(
            user_id=int(user_id),
            start_date=start,
            end_date=end,
            leave_type=parse_leave_type(leave_type),
            reason=optional_text(reason),
            start_time=t_start,
            end_time=t_end,
        )
        logger.info("Leave %s filed by user_id=%s (%s to %s)", leave_id, user_id, start, end)
        return leave_id

    def update(self, *, leave_id: int, user_id: int, changes: dict) -> None:
        current = self._require_owner(leave_id, user_id)

        start = parse_iso_date(changes["start_date"]) if changes.get("start_date") else current.start_date
        end = parse_iso_date(changes["end_date"]) if changes.get("end_date") else current.end_date
        t_start = parse_optional_time(changes["start_time"]) if "start_time" in changes else current.start_time
        t_end = parse_optional_time(changes["end_time"]) if "end_time" in changes else current.end_time

        validate_leave_window(start, end, t_start, t_end)
        self._check_overlap(current.user_id, start, end, ignore_id=current.leave_id)

        updates: dict = {"start_date": start, "end_date": end, "start_time": t_start, "end_time": t_end}
        if changes.get("type"):
            updates["type"] = parse_leave_type(changes["type"])
        if "reason" in changes:
            updates["reason"] = optional_text(changes.get("reason"))
        self._leaves.update(current.leave_id, updates)

    def delete(self, *, leave_id: int, user_id: int) -> None:
        current = self._require_owner(leave_id, user_id)
        self._leaves.delete(current.leave_id)

    # ---- reads ----
    def list_all(self) -> list[dict]:
        profiles = self._profiles_by_id()
        holidays = self._holiday_dates()
        return [self._view(l, profiles, holidays) for l in self._leaves.list_all()]

    def business_days(self, start: date, end: date) -> int:
        return business_days(start, end, self._holiday_dates())

    def month_calendar(
        self,
        *,
        year: int,
        month: int,
        today: Optional[date] = None,
        hovered_user_id: Optional[int] = None,
    ) -> dict:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if not MINYEAR <= int(year) <= MAXYEAR:
            raise ValidationError(f"Year must be between {MINYEAR} and {MAXYEAR}")
        first, last = month_bounds(int(year), int(month))
        return calendar.month_calendar(
            int(year),
            int(month),
            leaves=self._leaves.list_between(first, last),
            profiles=self._profiles_by_id(),
            today=today or now_local().date(),
            holidays=[h for h in self._holidays.list_all() if first <= h.date <= last],
            hovered_user_id=hovered_user_id,
        )

    def announcements(self, *, today: Optional[date] = None) -> list[dict]:
        return calendar.announcements(self._leaves.list_all(), self._profiles_by_id(), today or now_local().date())

    def team_overview(self, *, today: Optional[date] = None) -> list[dict]:
        return calendar.team_overview(
            self._leaves.list_all(),
            list(self._profiles.list_all()),
            today or now_local().date(),
        )


class HolidayService:
    """Public holidays; writes are admin only (checked by the caller)."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    @staticmethod
    def _view(h: Holiday) -> dict:
        return {"id": h.holiday_id, "date": h.date.isoformat(), "name": h.name}

    def _require(self, holiday_id: int) -> Holiday:
        h = self._holidays.get(int(holiday_id))
        if not h:
            raise NotFoundError("Holiday not found")
        return h

    def _check_free(self, day: date, *, ignore_id: Optional[int] = None) -> None:
        existing = self._holidays.get_by_date(day)
        if existing and existing.holiday_id != ignore_id:
            raise ValidationError(f"A holiday already exists on {day.isoformat()} ({existing.name})")

    def add(self, *, day: str, name: str) -> int:
        if not (day or "").strip():
            raise ValidationError("Date is required")
        d = parse_iso_date(day)
        label = require_non_empty(name, "Name")
        self._check_free(d)
        return self._holidays.create(day=d, name=label)

    def update(self, *, holiday_id: int, day: str, name: str) -> None:
        current = self._require(holiday_id)
        d = parse_iso_date(day) if (day or "").strip() else current.date
        label = require_non_empty(name, "Name") if (name or "").strip() else current.name
        self._check_free(d, ignore_id=current.holiday_id)
        self._holidays.update(current.holiday_id, day=d, name=label)

    def delete(self, *, holiday_id: int) -> None:
        self._require(holiday_id)
        self._holidays.delete(int(holiday_id))

    def list_all(self) -> list[dict]:
        return [self._view(h) for h in sorted(self._holidays.list_all(), key=lambda h: h.date)]

    def search(self, query: str) -> list[dict]:
        q = (query or "").strip().lower()
        if not q:
            return self.list_all()
        return [v for v in self.list_all() if q in v["name"].lower() or q in v["date"]]
