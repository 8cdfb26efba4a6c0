from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import QuickLinkCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import QuickLink
from .repository import QuickLinkRepository

_COLUMNS = "link_id, title, url, category, icon_url, created_by, created_at"
_UPDATABLE = {"title", "url", "category", "icon_url"}


def _to_link(r: dict) -> QuickLink:
    return QuickLink(
        link_id=int(r["link_id"]),
        title=r["title"],
        url=r["url"],
        category=QuickLinkCategory(r["category"]),
        icon_url=r.get("icon_url"),
        created_by=int(r["created_by"]) if r.get("created_by") is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLQuickLinkRepository(QuickLinkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[QuickLink]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM quick_links ORDER BY created_at, link_id")
            return [_to_link(r) for r in fetchall(cur)]

    def get(self, link_id: int) -> Optional[QuickLink]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM quick_links WHERE link_id=%s", (int(link_id),))
            row = fetchone(cur)
            return _to_link(row) if row else None

    def create(
        self,
        *,
        title: str,
        url: str,
        category: QuickLinkCategory,
        icon_url: Optional[str],
        created_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO quick_links (title, url, category, icon_url, created_by) VALUES (%s, %s, %s, %s, %s)",
                (title, url, category.value, icon_url, created_by),
            )
            return int(cur.lastrowid)

    def update(self, link_id: int, updates: dict) -> bool:
        columns = [c for c in updates if c in _UPDATABLE]
        if not columns:
            return False
        values = tuple(updates[c].value if c == "category" else updates[c] for c in columns)
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE quick_links SET {assignments} WHERE link_id=%s", values + (int(link_id),))
            return cur.rowcount > 0

    def delete(self, link_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM quick_links WHERE link_id=%s", (int(link_id),))
            return cur.rowcount > 0
