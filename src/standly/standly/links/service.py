from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import optional_text, require_non_empty, require_url
from ..core.enums import QuickLinkCategory
from ..core.exceptions import NotFoundError, ValidationError
from ..storage.local_storage import FileStorage
from .model import QuickLink
from .repository import QuickLinkRepository

logger = logging.getLogger(__name__)


def parse_category(value: Optional[str]) -> QuickLinkCategory:
    if not (value or "").strip():
        return QuickLinkCategory.GENERAL
    for c in QuickLinkCategory:
        if c.value.lower() == value.strip().lower():
            return c
    raise ValidationError("Unknown link category")


class QuickLinkService:
    """Team bookmarks grouped by category, plus the shared virtual office details."""

    def __init__(
        self,
        links: QuickLinkRepository,
        storage: Optional[FileStorage] = None,
        *,
        virtual_office_url: str = "",
        virtual_office_password: str = "",
    ):
        self._links = links
        self._storage = storage
        self._office_url = virtual_office_url
        self._office_password = virtual_office_password

    def _require(self, link_id: int) -> QuickLink:
        link = self._links.get(int(link_id))
        if not link:
            raise NotFoundError("Link not found")
        return link

    def create(
        self,
        *,
        user_id: int,
        title: str,
        url: str,
        category: Optional[str] = None,
        icon_url: Optional[str] = None,
    ) -> int:
        link_id = self._links.create(
            title=require_non_empty(title, "Title"),
            url=require_url(url),
            category=parse_category(category),
            icon_url=optional_text(icon_url),
            created_by=int(user_id),
        )
        logger.info("Quick link %s added by user_id=%s", link_id, user_id)
        return link_id

    def update(self, *, link_id: int, changes: dict) -> dict:
        self._require(link_id)

        updates: dict = {}
        if changes.get("title") and str(changes["title"]).strip():
            updates["title"] = str(changes["title"]).strip()
        if changes.get("url"):
            updates["url"] = require_url(changes["url"])
        if changes.get("category"):
            updates["category"] = parse_category(changes["category"])
        # An empty icon field keeps the current icon.
        if optional_text(changes.get("icon_url")):
            updates["icon_url"] = optional_text(changes["icon_url"])

        if updates:
            self._links.update(int(link_id), updates)
        return self._require(link_id).to_view()

    def delete(self, *, link_id: int) -> None:
        self._require(link_id)
        self._links.delete(int(link_id))

    def upload_icon(self, *, filename: str, data: bytes) -> str:
        if self._storage is None:
            raise ValidationError("File uploads are not configured")
        return self._storage.save("link-icons", filename, data)

    def list_grouped(self) -> list[dict]:
        """Non-empty categories in display order, each with its links."""
        links = list(self._links.list_all())
        groups = []
        for category in QuickLinkCategory:
            members = [l.to_view() for l in links if l.category == category]
            if members:
                groups.append({"category": category.value, "links": members})
        return groups

    def virtual_office(self) -> dict:
        return {"url": self._office_url, "password": self._office_password}
