from __future__ import annotations

import json
from datetime import timedelta

from flask import Flask, request, session

from ..common.http import current_user_id, fail, json_body, login_required, ok
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import UserRole
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/api/auth/signup", methods=["POST"], endpoint="sign_up")
    def sign_up():
        data = json_body()
        user_id = container.auth_service.sign_up(
            email=data.get("email", ""),
            password=data.get("password", ""),
            name=data.get("name", ""),
            role=data.get("role") or UserRole.DEVELOPER.value,
            access_code=data.get("code"),
        )
        return ok(201, user_id=user_id)

    @app.route("/api/auth/signin", methods=["POST"], endpoint="sign_in")
    def sign_in():
        data = json_body()
        s_user = container.auth_service.sign_in(
            email=data.get("email", ""),
            password=data.get("password", ""),
            access_code=data.get("code"),
        )

        session.clear()
        session.permanent = bool(data.get("remember_me", True))
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["is_admin"] = s_user.is_admin

        return ok(user=container.profile_service.get_current_user(s_user.user_id))

    @app.route("/api/auth/signout", methods=["POST"], endpoint="sign_out")
    def sign_out():
        session.clear()
        return ok()

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    def me():
        user = container.profile_service.get_current_user(session.get("user_id"))
        if not user:
            session.clear()
            return fail("Not signed in", 401)
        return ok(user=user)

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    @login_required
    def list_users():
        return ok(users=container.profile_service.list_all())

    @app.route("/api/roles", methods=["GET"], endpoint="list_roles")
    def list_roles():
        return ok(roles=[r.value for r in UserRole])

    @app.route("/api/profile", methods=["PATCH"], endpoint="update_profile")
    @login_required
    def update_profile():
        data = json_body()
        user = container.profile_service.update_profile(
            user_id=current_user_id(),
            name=data.get("name"),
            role=data.get("role"),
            avatar=data.get("avatar"),
        )
        session["name"] = user["name"]
        return ok(user=user)

    @app.route("/api/profile/avatar", methods=["POST"], endpoint="upload_avatar")
    @login_required
    def upload_avatar():
        upload = request.files.get("file")
        if upload is None:
            raise ValidationError("No file uploaded")

        crop = None
        if request.form.get("crop"):
            try:
                crop = json.loads(request.form["crop"])
            except ValueError:
                raise ValidationError("Invalid crop area")

        user = container.profile_service.upload_avatar(
            user_id=current_user_id(),
            filename=upload.filename or "",
            data=upload.read(),
            crop=crop,
        )
        return ok(user=user)
