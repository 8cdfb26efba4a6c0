from __future__ import annotations

from flask import Flask, request

from ..common.http import current_user_id, json_body, login_required, ok
from ..core.enums import QuickLinkCategory
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    links = container.link_service

    @app.route("/api/links", methods=["GET"], endpoint="list_links")
    @login_required
    def list_links():
        return ok(groups=links.list_grouped(), categories=[c.value for c in QuickLinkCategory])

    @app.route("/api/links", methods=["POST"], endpoint="create_link")
    @login_required
    def create_link():
        data = json_body()
        link_id = links.create(
            user_id=current_user_id(),
            title=data.get("title", ""),
            url=data.get("url", ""),
            category=data.get("category"),
            icon_url=data.get("icon_url"),
        )
        return ok(201, link_id=link_id)

    @app.route("/api/links/<int:link_id>", methods=["PATCH"], endpoint="update_link")
    @login_required
    def update_link(link_id: int):
        return ok(link=links.update(link_id=link_id, changes=json_body()))

    @app.route("/api/links/<int:link_id>", methods=["DELETE"], endpoint="delete_link")
    @login_required
    def delete_link(link_id: int):
        links.delete(link_id=link_id)
        return ok()

    @app.route("/api/links/icon", methods=["POST"], endpoint="upload_link_icon")
    @login_required
    def upload_link_icon():
        upload = request.files.get("file")
        if upload is None:
            raise ValidationError("No file uploaded")
        url = links.upload_icon(filename=upload.filename or "", data=upload.read())
        return ok(201, icon_url=url)

    @app.route("/api/virtual-office", methods=["GET"], endpoint="virtual_office")
    @login_required
    def virtual_office():
        return ok(office=links.virtual_office())
