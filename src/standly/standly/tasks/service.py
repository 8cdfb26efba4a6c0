from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Mapping, Optional

from ..common.date_windows import end_of_day, start_of_day
from ..common.datetime_utils import iso, now_local, parse_iso_datetime
from ..common.validators import optional_text, require_int, require_non_empty, require_url
from ..core.constants import DEADLINE_LOOKAHEAD_DAYS, DEADLINE_WIDGET_LIMIT, TASK_DUE_SOON_DAYS
from ..core.enums import TaskStatus, TaskType
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Profile, person_view
from ..users.repository import ProfileRepository
from .model import Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)


def parse_status(value: Optional[str]) -> TaskStatus:
    try:
        return TaskStatus((value or "").strip().lower())
    except ValueError:
        raise ValidationError("Status must be one of: todo, in-progress, done")


class TaskService:
    def __init__(self, tasks: TaskRepository, profiles: ProfileRepository):
        self._tasks = tasks
        self._profiles = profiles

    def _require(self, task_id: int) -> Task:
        t = self._tasks.get(int(task_id))
        if not t:
            raise NotFoundError("Task not found")
        return t

    def _profiles_by_id(self) -> dict[int, Profile]:
        return {p.user_id: p for p in self._profiles.list_all()}

    def _view(self, t: Task, profiles: Mapping[int, Profile], now: datetime) -> dict:
        return {
            "id": t.task_id,
            "title": t.title,
            "description": t.description,
            "status": t.status.value,
            "type": t.type.value,
            "due_date": iso(t.due_date),
            "release_link": t.release_link,
            "assignee": person_view(t.assignee_id, profiles),
            "creator": person_view(t.creator_id, profiles),
            "is_overdue": t.due_date < now,
            "is_due_soon": not t.is_done and t.due_date < now + timedelta(days=TASK_DUE_SOON_DAYS),
        }

    # ---- writes ----
    def add_task(
        self,
        *,
        creator_id: int,
        title: str,
        assignee_id: Optional[int] = None,
        due_date: Optional[str] = None,
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        now = now or now_local()
        task_id = self._tasks.create(
            title=require_non_empty(title, "Title"),
            description=optional_text(description),
            status=TaskStatus.TODO,
            assignee_id=require_int(assignee_id, "Assignee") if assignee_id else int(creator_id),
            creator_id=int(creator_id),
            due_date=parse_iso_datetime(due_date, now=now) if due_date else now,
            task_type=TaskType.TASK,
        )
        logger.info("Task %s created by user_id=%s", task_id, creator_id)
        return task_id

    def add_deadline(
        self,
        *,
        creator_id: int,
        title: str,
        due_date: str,
        description: Optional[str] = None,
        release_link: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        link = optional_text(release_link)
        return self._tasks.create(
            title=require_non_empty(title, "Title"),
            description=optional_text(description),
            status=TaskStatus.TODO,
            assignee_id=int(creator_id),
            creator_id=int(creator_id),
            due_date=parse_iso_datetime(due_date, now=now),
            task_type=TaskType.DEADLINE,
            release_link=require_url(link, "Release link") if link else None,
        )

    def update(self, *, task_id: int, changes: dict, now: Optional[datetime] = None) -> None:
        self._require(task_id)

        updates: dict = {}
        if changes.get("title") and str(changes["title"]).strip():
            updates["title"] = str(changes["title"]).strip()
        if "description" in changes:
            updates["description"] = optional_text(changes.get("description"))
        if changes.get("status"):
            updates["status"] = parse_status(changes["status"])
        if changes.get("assignee_id"):
            updates["assignee_id"] = require_int(changes["assignee_id"], "Assignee")
        if changes.get("due_date"):
            updates["due_date"] = parse_iso_datetime(changes["due_date"], now=now)
        if "release_link" in changes:
            link = optional_text(changes.get("release_link"))
            updates["release_link"] = require_url(link, "Release link") if link else None

        if updates:
            self._tasks.update(int(task_id), updates)

    def update_status(self, *, task_id: int, status: str) -> None:
        self._require(task_id)
        self._tasks.update(int(task_id), {"status": parse_status(status)})

    def toggle_done(self, *, task_id: int) -> str:
        t = self._require(task_id)
        new_status = TaskStatus.IN_PROGRESS if t.is_done else TaskStatus.DONE
        self._tasks.update(t.task_id, {"status": new_status})
        return new_status.value

    def delete(self, *, task_id: int) -> None:
        self._require(task_id)
        self._tasks.delete(int(task_id))

    # ---- reads ----
    def list_tasks(self, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or now_local()
        profiles = self._profiles_by_id()
        return [self._view(t, profiles, now) for t in self._tasks.list_by_type(TaskType.DEADLINE, exclude=True)]

    def list_deadlines(self, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or now_local()
        profiles = self._profiles_by_id()
        return [self._view(t, profiles, now) for t in self._tasks.list_by_type(TaskType.DEADLINE)]

    def upcoming_deadlines(self, *, now: Optional[datetime] = None) -> list[dict]:
        """Deadlines from the start of today through the end of the lookahead window."""
        now = now or now_local()
        start = start_of_day(now.date())
        end = end_of_day(now.date() + timedelta(days=DEADLINE_LOOKAHEAD_DAYS))

        profiles = self._profiles_by_id()
        rows = sorted(self._tasks.list_deadlines_between(start, end), key=lambda t: (t.due_date, t.task_id))
        return [self._view(t, profiles, now) for t in rows[:DEADLINE_WIDGET_LIMIT]]

    def deadline_timeline(self, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or now_local()
        profiles = self._profiles_by_id()

        out = []
        for t in self._tasks.list_by_type(TaskType.DEADLINE):
            item = self._view(t, profiles, now)
            item["phase"] = "completed" if t.due_date < now else "active"
            item["creator_name"] = item["creator"]["name"]
            out.append(item)
        return out
