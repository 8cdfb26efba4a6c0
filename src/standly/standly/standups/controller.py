from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import current_user_id, json_body, login_required, ok
from ..common.validators import require_int
from ..container import Container
from .mentions import active_mention_query, mention_suggestions


def register(app: Flask, container: Container) -> None:
    standups = container.standup_service

    @app.route("/api/standups", methods=["GET"], endpoint="list_standups")
    @login_required
    def list_standups():
        return ok(standups=standups.feed(viewer_id=current_user_id()))

    @app.route("/api/standups", methods=["POST"], endpoint="create_standup")
    @login_required
    def create_standup():
        data = json_body()
        standup_id = standups.create(
            user_id=current_user_id(),
            date_value=data.get("date", ""),
            yesterday=data.get("yesterday", ""),
            today=data.get("today", ""),
            blockers=data.get("blockers", ""),
            mood=data.get("mood"),
            jira_links=data.get("jira_links") or [],
        )
        return ok(201, standup_id=standup_id)

    @app.route("/api/standups/<int:standup_id>", methods=["PATCH"], endpoint="update_standup")
    @login_required
    def update_standup(standup_id: int):
        standups.update(standup_id=standup_id, user_id=current_user_id(), changes=json_body())
        return ok(standup=standups.feed_item(standup_id=standup_id, viewer_id=current_user_id()))

    @app.route("/api/standups/<int:standup_id>", methods=["DELETE"], endpoint="delete_standup")
    @login_required
    def delete_standup(standup_id: int):
        standups.delete(standup_id=standup_id, user_id=current_user_id())
        return ok()

    @app.route("/api/standups/calendar", methods=["GET"], endpoint="standup_calendar")
    @login_required
    def standup_calendar():
        today = parse_iso_date(request.args["today"]) if request.args.get("today") else now_local().date()
        return ok(days=standups.calendar_strip(user_id=current_user_id(), today=today))

    @app.route("/api/standups/on/<day>", methods=["GET"], endpoint="standup_on_date")
    @login_required
    def standup_on_date(day: str):
        return ok(standup=standups.find_for_date(user_id=current_user_id(), day=parse_iso_date(day)))

    @app.route("/api/standups/<int:standup_id>/reactions", methods=["POST"], endpoint="react_to_standup")
    @login_required
    def react_to_standup(standup_id: int):
        reaction = standups.react(
            standup_id=standup_id,
            user_id=current_user_id(),
            reaction_type=json_body().get("type", ""),
        )
        return ok(my_reaction=reaction)

    @app.route("/api/standups/<int:standup_id>/comments", methods=["POST"], endpoint="comment_on_standup")
    @login_required
    def comment_on_standup(standup_id: int):
        data = json_body()
        parent_id = data.get("parent_id")
        comment_id = standups.comment(
            standup_id=standup_id,
            user_id=current_user_id(),
            text=data.get("text", ""),
            parent_id=require_int(parent_id, "parent_id") if parent_id is not None else None,
        )
        # The author has seen everything up to and including their own comment.
        standups.mark_read(standup_id=standup_id, user_id=current_user_id())
        return ok(201, comment_id=comment_id)

    @app.route("/api/standups/<int:standup_id>/views", methods=["POST"], endpoint="view_standup")
    @login_required
    def view_standup(standup_id: int):
        recorded = standups.record_view(standup_id=standup_id, viewer_id=current_user_id())
        return ok(recorded=recorded)

    @app.route("/api/standups/<int:standup_id>/read", methods=["POST"], endpoint="read_standup")
    @login_required
    def read_standup(standup_id: int):
        return ok(read_count=standups.mark_read(standup_id=standup_id, user_id=current_user_id()))

    @app.route("/api/comments/<int:comment_id>", methods=["PATCH"], endpoint="edit_comment")
    @login_required
    def edit_comment(comment_id: int):
        standups.edit_comment(comment_id=comment_id, user_id=current_user_id(), text=json_body().get("text", ""))
        return ok()

    @app.route("/api/comments/<int:comment_id>", methods=["DELETE"], endpoint="delete_comment")
    @login_required
    def delete_comment(comment_id: int):
        standups.delete_comment(comment_id=comment_id, user_id=current_user_id())
        return ok()

    @app.route("/api/mentions/suggest", methods=["POST"], endpoint="suggest_mentions")
    @login_required
    def suggest_mentions():
        data = json_body()
        query = data.get("query")
        if query is None:
            query = active_mention_query(
                data.get("text", ""),
                require_int(data["cursor"], "cursor") if data.get("cursor") is not None else None,
            )
        if query is None:
            return ok(query=None, suggestions=[])
        suggestions = mention_suggestions(
            query,
            container.profile_service.list_all(),
            current_user_id(),
        )
        return ok(query=query, suggestions=suggestions)
