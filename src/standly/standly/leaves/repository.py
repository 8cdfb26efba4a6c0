from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveType
from .model import Holiday, Leave


class LeaveRepository(Protocol):
    def list_all(self) -> Sequence[Leave]:
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[Leave]:
        """Leaves intersecting the inclusive range."""

        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Leave]:
        raise NotImplementedError

    def get(self, leave_id: int) -> Optional[Leave]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: LeaveType,
        reason: Optional[str],
        start_time: Optional[time],
        end_time: Optional[time],
    ) -> int:
        raise NotImplementedError

    def update(self, leave_id: int, updates: dict) -> bool:
        raise NotImplementedError

    def delete(self, leave_id: int) -> bool:
        raise NotImplementedError


class HolidayRepository(Protocol):
    def list_all(self) -> Sequence[Holiday]:
        raise NotImplementedError

    def get(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def get_by_date(self, day: date) -> Optional[Holiday]:
        raise NotImplementedError

    def create(self, *, day: date, name: str) -> int:
        raise NotImplementedError

    def update(self, holiday_id: int, *, day: date, name: str) -> bool:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
