from __future__ import annotations

from datetime import datetime

import pytest

from src.standly.standly.core.enums import TaskStatus, TaskType
from src.standly.standly.core.exceptions import NotFoundError, ValidationError
from src.standly.standly.tasks.service import TaskService

from tests.fakes import InMemoryProfiles, InMemoryTasks

NOW = datetime(2026, 3, 4, 15, 0)


@pytest.fixture()
def env():
    profiles = InMemoryProfiles()
    sarah = profiles.add("Sarah Chen", "sarah@team.io")
    rob = profiles.add("Rob Stone", "rob@team.io")
    repo = InMemoryTasks()
    return TaskService(repo, profiles), repo, sarah, rob


def test_add_task_defaults(env):
    service, repo, sarah, _ = env
    tid = service.add_task(creator_id=sarah.user_id, title="  Write docs ", now=NOW)
    t = repo.get(tid)

    assert t.title == "Write docs"
    assert t.status == TaskStatus.TODO
    assert t.type == TaskType.TASK
    assert t.assignee_id == sarah.user_id
    assert t.due_date == NOW


def test_add_task_requires_title(env):
    service, _, sarah, _ = env
    with pytest.raises(ValidationError):
        service.add_task(creator_id=sarah.user_id, title="   ", now=NOW)


def test_add_deadline_validates_release_link(env):
    service, repo, sarah, _ = env
    with pytest.raises(ValidationError):
        service.add_deadline(creator_id=sarah.user_id, title="v2", due_date="2026-03-10", release_link="ftp://x")

    tid = service.add_deadline(
        creator_id=sarah.user_id,
        title="v2",
        due_date="2026-03-10T12:00:00",
        release_link="https://releases.example.com/v2",
    )
    t = repo.get(tid)
    assert t.type == TaskType.DEADLINE
    assert t.assignee_id == sarah.user_id


def test_toggle_done_round_trip(env):
    service, repo, sarah, _ = env
    tid = service.add_task(creator_id=sarah.user_id, title="x", now=NOW)

    assert service.toggle_done(task_id=tid) == "done"
    assert service.toggle_done(task_id=tid) == "in-progress"
    assert repo.get(tid).status == TaskStatus.IN_PROGRESS


def test_update_status_rejects_unknown(env):
    service, _, sarah, _ = env
    tid = service.add_task(creator_id=sarah.user_id, title="x", now=NOW)
    with pytest.raises(ValidationError):
        service.update_status(task_id=tid, status="blocked")
    with pytest.raises(NotFoundError):
        service.update_status(task_id=999, status="done")


def test_update_is_partial(env):
    service, repo, sarah, rob = env
    tid = service.add_task(creator_id=sarah.user_id, title="x", description="keep", now=NOW)

    service.update(task_id=tid, changes={"title": "", "assignee_id": rob.user_id, "status": "in-progress"})
    t = repo.get(tid)
    assert t.title == "x"
    assert t.description == "keep"
    assert t.assignee_id == rob.user_id
    assert t.status == TaskStatus.IN_PROGRESS


def test_list_tasks_flags(env):
    service, _, sarah, rob = env
    service.add_task(creator_id=sarah.user_id, title="late", due_date="2026-03-01T09:00:00", now=NOW)
    service.add_task(creator_id=sarah.user_id, title="soon", due_date="2026-03-05T09:00:00", now=NOW)
    service.add_task(creator_id=sarah.user_id, title="later", due_date="2026-03-20T09:00:00", assignee_id=rob.user_id, now=NOW)
    service.add_deadline(creator_id=sarah.user_id, title="release", due_date="2026-03-06T09:00:00")

    items = service.list_tasks(now=NOW)
    assert [t["title"] for t in items] == ["late", "soon", "later"]
    assert items[0]["is_overdue"] is True
    assert items[1]["is_due_soon"] is True and items[1]["is_overdue"] is False
    assert items[2]["is_due_soon"] is False
    assert items[2]["assignee"]["name"] == "Rob Stone"


def test_done_tasks_are_not_due_soon(env):
    service, _, sarah, _ = env
    tid = service.add_task(creator_id=sarah.user_id, title="soon", due_date="2026-03-05T09:00:00", now=NOW)
    service.toggle_done(task_id=tid)
    assert service.list_tasks(now=NOW)[0]["is_due_soon"] is False


def test_upcoming_deadlines_window_and_limit(env):
    service, _, sarah, _ = env
    for due in [
        "2026-03-03T23:00:00",  # yesterday
        "2026-03-04T08:00:00",  # earlier today still counts
        "2026-03-05T09:00:00",
        "2026-03-07T23:59:00",  # end of today + 3
        "2026-03-08T00:30:00",  # outside
    ]:
        service.add_deadline(creator_id=sarah.user_id, title=due, due_date=due)
    service.add_deadline(creator_id=sarah.user_id, title="2026-03-06", due_date="2026-03-06T10:00:00")

    titles = [d["title"] for d in service.upcoming_deadlines(now=NOW)]
    assert titles == ["2026-03-04T08:00:00", "2026-03-05T09:00:00", "2026-03-06"]


def test_deadline_timeline_phases(env):
    service, _, sarah, _ = env
    service.add_deadline(creator_id=sarah.user_id, title="past", due_date="2026-03-01T10:00:00")
    service.add_deadline(creator_id=sarah.user_id, title="future", due_date="2026-04-01T10:00:00")

    timeline = service.deadline_timeline(now=NOW)
    assert [(d["title"], d["phase"]) for d in timeline] == [("past", "completed"), ("future", "active")]
    assert timeline[0]["creator_name"] == "Sarah Chen"
