from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import TaskStatus, TaskType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Task
from .repository import TaskRepository

_COLUMNS = "task_id, title, description, status, assignee_id, creator_id, due_date, type, release_link, created_at"
_UPDATABLE = {"title", "description", "status", "assignee_id", "due_date", "release_link"}


def _to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        title=r["title"],
        description=r.get("description"),
        status=TaskStatus(r["status"]),
        assignee_id=int(r["assignee_id"]),
        creator_id=int(r["creator_id"]),
        due_date=r["due_date"],
        type=TaskType(r["type"]),
        release_link=r.get("release_link"),
        created_at=r.get("created_at"),
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_by_type(self, task_type: TaskType, *, exclude: bool = False) -> Sequence[Task]:
        op = "<>" if exclude else "="
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE type {op} %s ORDER BY due_date, task_id",
                (task_type.value,),
            )
            return [_to_task(r) for r in fetchall(cur)]

    def list_deadlines_between(self, start: datetime, end: datetime) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM tasks
                WHERE type=%s AND due_date >= %s AND due_date <= %s
                ORDER BY due_date, task_id
                """,
                (TaskType.DEADLINE.value, start, end),
            )
            return [_to_task(r) for r in fetchall(cur)]

    def get(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (int(task_id),))
            row = fetchone(cur)
            return _to_task(row) if row else None

    def create(
        self,
        *,
        title: str,
        description: Optional[str],
        status: TaskStatus,
        assignee_id: int,
        creator_id: int,
        due_date: datetime,
        task_type: TaskType,
        release_link: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks (title, description, status, assignee_id, creator_id, due_date, type, release_link)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    title,
                    description,
                    status.value,
                    int(assignee_id),
                    int(creator_id),
                    due_date,
                    task_type.value,
                    release_link,
                ),
            )
            return int(cur.lastrowid)

    def update(self, task_id: int, updates: dict) -> bool:
        columns = [c for c in updates if c in _UPDATABLE]
        if not columns:
            return False
        values = tuple(updates[c].value if c == "status" else updates[c] for c in columns)
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE tasks SET {assignments} WHERE task_id=%s", values + (int(task_id),))
            return cur.rowcount > 0

    def delete(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (int(task_id),))
            return cur.rowcount > 0
