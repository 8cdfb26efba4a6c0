from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TaskStatus, TaskType
from .model import Task


class TaskRepository(Protocol):
    def list_by_type(self, task_type: TaskType, *, exclude: bool = False) -> Sequence[Task]:
        """Tasks of ``task_type`` (or of every other type when ``exclude``), due date ascending."""

        raise NotImplementedError

    def list_deadlines_between(self, start: datetime, end: datetime) -> Sequence[Task]:
        raise NotImplementedError

    def get(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, task_id: int, updates: dict) -> bool:
        raise NotImplementedError

    def delete(self, task_id: int) -> bool:
        raise NotImplementedError
