from __future__ import annotations

from flask import Flask

from ..common.http import current_user_id, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    tasks = container.task_service

    @app.route("/api/tasks", methods=["GET"], endpoint="list_tasks")
    @login_required
    def list_tasks():
        return ok(tasks=tasks.list_tasks())

    @app.route("/api/tasks", methods=["POST"], endpoint="add_task")
    @login_required
    def add_task():
        data = json_body()
        task_id = tasks.add_task(
            creator_id=current_user_id(),
            title=data.get("title", ""),
            assignee_id=data.get("assignee_id"),
            due_date=data.get("due_date"),
            description=data.get("description"),
        )
        return ok(201, task_id=task_id)

    @app.route("/api/tasks/<int:task_id>", methods=["PATCH"], endpoint="update_task")
    @login_required
    def update_task(task_id: int):
        data = json_body()
        if set(data) == {"status"}:
            tasks.update_status(task_id=task_id, status=data["status"])
        else:
            tasks.update(task_id=task_id, changes=data)
        return ok()

    @app.route("/api/tasks/<int:task_id>", methods=["DELETE"], endpoint="delete_task")
    @login_required
    def delete_task(task_id: int):
        tasks.delete(task_id=task_id)
        return ok()

    @app.route("/api/tasks/<int:task_id>/toggle", methods=["POST"], endpoint="toggle_task")
    @login_required
    def toggle_task(task_id: int):
        return ok(status=tasks.toggle_done(task_id=task_id))

    @app.route("/api/deadlines", methods=["GET"], endpoint="list_deadlines")
    @login_required
    def list_deadlines():
        return ok(deadlines=tasks.list_deadlines())

    @app.route("/api/deadlines", methods=["POST"], endpoint="add_deadline")
    @login_required
    def add_deadline():
        data = json_body()
        task_id = tasks.add_deadline(
            creator_id=current_user_id(),
            title=data.get("title", ""),
            due_date=data.get("due_date", ""),
            description=data.get("description"),
            release_link=data.get("release_link"),
        )
        return ok(201, task_id=task_id)

    @app.route("/api/deadlines/upcoming", methods=["GET"], endpoint="upcoming_deadlines")
    @login_required
    def upcoming_deadlines():
        return ok(deadlines=tasks.upcoming_deadlines())

    @app.route("/api/deadlines/timeline", methods=["GET"], endpoint="deadline_timeline")
    @login_required
    def deadline_timeline():
        return ok(deadlines=tasks.deadline_timeline())
