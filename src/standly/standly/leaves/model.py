from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import LeaveType


@dataclass(frozen=True)
class Leave:
    """An inclusive ``[start_date, end_date]`` absence, optionally time-boxed."""

    leave_id: int
    user_id: int
    start_date: date
    end_date: date
    type: LeaveType
    reason: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    created_at: Optional[datetime] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    date: date
    name: str
