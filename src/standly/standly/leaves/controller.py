from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import admin_required, current_user_id, json_body, login_required, ok
from ..core.exceptions import ValidationError
from ..container import Container


def _today():
    return parse_iso_date(request.args["today"]) if request.args.get("today") else now_local().date()


def register(app: Flask, container: Container) -> None:
    leaves = container.leave_service
    holidays = container.holiday_service

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @login_required
    def list_leaves():
        return ok(leaves=leaves.list_all())

    @app.route("/api/leaves", methods=["POST"], endpoint="create_leave")
    @login_required
    def create_leave():
        data = json_body()
        leave_id = leaves.create(
            user_id=current_user_id(),
            start_date=data.get("start_date", ""),
            end_date=data.get("end_date", ""),
            leave_type=data.get("type"),
            reason=data.get("reason"),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
        )
        return ok(201, leave_id=leave_id)

    @app.route("/api/leaves/<int:leave_id>", methods=["PATCH"], endpoint="update_leave")
    @login_required
    def update_leave(leave_id: int):
        leaves.update(leave_id=leave_id, user_id=current_user_id(), changes=json_body())
        return ok()

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="delete_leave")
    @login_required
    def delete_leave(leave_id: int):
        leaves.delete(leave_id=leave_id, user_id=current_user_id())
        return ok()

    @app.route("/api/leaves/calendar", methods=["GET"], endpoint="leave_calendar")
    @login_required
    def leave_calendar():
        today = _today()
        try:
            year = int(request.args.get("year", today.year))
            month = int(request.args.get("month", today.month))
            hovered = request.args.get("hovered_user_id")
            hovered_user_id = int(hovered) if hovered else None
        except ValueError:
            raise ValidationError("year, month and hovered_user_id must be numbers")

        return ok(
            calendar=leaves.month_calendar(year=year, month=month, today=today, hovered_user_id=hovered_user_id)
        )

    @app.route("/api/leaves/announcements", methods=["GET"], endpoint="leave_announcements")
    @login_required
    def leave_announcements():
        return ok(announcements=leaves.announcements(today=_today()))

    @app.route("/api/leaves/overview", methods=["GET"], endpoint="leave_overview")
    @login_required
    def leave_overview():
        return ok(members=leaves.team_overview(today=_today()))

    @app.route("/api/holidays", methods=["GET"], endpoint="list_holidays")
    @login_required
    def list_holidays():
        return ok(holidays=holidays.search(request.args.get("q", "")))

    @app.route("/api/holidays", methods=["POST"], endpoint="add_holiday")
    @admin_required
    def add_holiday():
        data = json_body()
        holiday_id = holidays.add(day=data.get("date", ""), name=data.get("name", ""))
        return ok(201, holiday_id=holiday_id)

    @app.route("/api/holidays/<int:holiday_id>", methods=["PATCH"], endpoint="update_holiday")
    @admin_required
    def update_holiday(holiday_id: int):
        data = json_body()
        holidays.update(holiday_id=holiday_id, day=data.get("date", ""), name=data.get("name", ""))
        return ok()

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="delete_holiday")
    @admin_required
    def delete_holiday(holiday_id: int):
        holidays.delete(holiday_id=holiday_id)
        return ok()
