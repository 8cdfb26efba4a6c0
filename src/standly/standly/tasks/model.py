from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import TaskStatus, TaskType


@dataclass(frozen=True)
class Task:
    """A team task or a release deadline (``type`` tells them apart)."""

    task_id: int
    title: str
    status: TaskStatus
    assignee_id: int
    creator_id: int
    due_date: datetime
    type: TaskType = TaskType.TASK
    description: Optional[str] = None
    release_link: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE
