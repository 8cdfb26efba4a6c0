from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Holiday, Leave
from .repository import HolidayRepository, LeaveRepository

_LEAVE_COLUMNS = "leave_id, user_id, start_date, end_date, type, reason, start_time, end_time, created_at"
_UPDATABLE = {"start_date", "end_date", "type", "reason", "start_time", "end_time"}


def _to_leave(r: dict) -> Leave:
    return Leave(
        leave_id=int(r["leave_id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        type=LeaveType(r["type"]),
        reason=r.get("reason"),
        start_time=normalize_mysql_time(r.get("start_time")),
        end_time=normalize_mysql_time(r.get("end_time")),
        created_at=r.get("created_at"),
    )


def _to_holiday(r: dict) -> Holiday:
    return Holiday(holiday_id=int(r["holiday_id"]), date=r["date"], name=r["name"])


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves ORDER BY start_date, leave_id")
            return [_to_leave(r) for r in fetchall(cur)]

    def list_between(self, start: date, end: date) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leaves
                WHERE start_date <= %s AND end_date >= %s
                ORDER BY start_date, leave_id
                """,
                (end, start),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE user_id=%s ORDER BY start_date",
                (int(user_id),),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def get(self, leave_id: int) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE leave_id=%s", (int(leave_id),))
            row = fetchone(cur)
            return _to_leave(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves (user_id, start_date, end_date, type, reason, start_time, end_time)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (int(user_id), start_date, end_date, leave_type.value, reason, start_time, end_time),
            )
            return int(cur.lastrowid)

    def update(self, leave_id: int, updates: dict) -> bool:
        columns = [c for c in updates if c in _UPDATABLE]
        if not columns:
            return False
        values = tuple(updates[c].value if c == "type" else updates[c] for c in columns)
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE leaves SET {assignments} WHERE leave_id=%s", values + (int(leave_id),))
            return cur.rowcount > 0

    def delete(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leaves WHERE leave_id=%s", (int(leave_id),))
            return cur.rowcount > 0


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id, date, name FROM holidays ORDER BY date")
            return [_to_holiday(r) for r in fetchall(cur)]

    def get(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id, date, name FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            row = fetchone(cur)
            return _to_holiday(row) if row else None

    def get_by_date(self, day: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT holiday_id, date, name FROM holidays WHERE date=%s", (day,))
            row = fetchone(cur)
            return _to_holiday(row) if row else None

    def create(self, *, day: date, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO holidays (date, name) VALUES (%s, %s)", (day, name))
            return int(cur.lastrowid)

    def update(self, holiday_id: int, *, day: date, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE holidays SET date=%s, name=%s WHERE holiday_id=%s", (day, name, int(holiday_id)))
            return cur.rowcount > 0

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
