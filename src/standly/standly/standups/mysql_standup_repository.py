from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..core.enums import Mood, ReactionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, load_json_list
from .model import Comment, Reaction, Standup, StandupView
from .repository import StandupRepository

_STANDUP_COLUMNS = "standup_id, user_id, date, yesterday, today, blockers, mood, jira_links, created_at"
_COMMENT_COLUMNS = "comment_id, standup_id, user_id, parent_id, text, created_at, updated_at"
_UPDATABLE = {"date", "yesterday", "today", "blockers", "mood", "jira_links"}


def _to_standup(r: dict) -> Standup:
    return Standup(
        standup_id=int(r["standup_id"]),
        user_id=int(r["user_id"]),
        date=r["date"],
        yesterday=r["yesterday"],
        today=r["today"],
        blockers=r.get("blockers") or "",
        mood=Mood(r["mood"]),
        jira_links=tuple(load_json_list(r.get("jira_links"))),
        created_at=r.get("created_at"),
    )


def _to_comment(r: dict) -> Comment:
    return Comment(
        comment_id=int(r["comment_id"]),
        standup_id=int(r["standup_id"]),
        user_id=int(r["user_id"]),
        text=r["text"],
        parent_id=int(r["parent_id"]) if r.get("parent_id") is not None else None,
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
    )


def _to_reaction(r: dict) -> Reaction:
    return Reaction(
        reaction_id=int(r["reaction_id"]),
        standup_id=int(r["standup_id"]),
        user_id=int(r["user_id"]),
        type=ReactionType(r["type"]),
        created_at=r.get("created_at"),
    )


def _db_value(column: str, value):
    if column == "mood":
        return Mood(value).value
    if column == "jira_links":
        return json.dumps(list(value or []))
    return value


class MySQLStandupRepository(StandupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Standups --------
    def list_all(self) -> Sequence[Standup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STANDUP_COLUMNS} FROM standups ORDER BY date DESC, standup_id DESC")
            return [_to_standup(r) for r in fetchall(cur)]

    def list_between(self, start: datetime, end: datetime) -> Sequence[Standup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STANDUP_COLUMNS}
                FROM standups
                WHERE date >= %s AND date <= %s
                ORDER BY date DESC
                """,
                (start, end),
            )
            return [_to_standup(r) for r in fetchall(cur)]

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[Standup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STANDUP_COLUMNS}
                FROM standups
                WHERE user_id=%s AND date >= %s AND date < %s
                ORDER BY date
                """,
                (int(user_id), start, end + timedelta(days=1)),
            )
            return [_to_standup(r) for r in fetchall(cur)]

    def get(self, standup_id: int) -> Optional[Standup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STANDUP_COLUMNS} FROM standups WHERE standup_id=%s", (int(standup_id),))
            row = fetchone(cur)
            return _to_standup(row) if row else None

    def find_for_user_and_date(self, user_id: int, day: date) -> Optional[Standup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_STANDUP_COLUMNS}
                FROM standups
                WHERE user_id=%s AND DATE(date)=%s
                ORDER BY date DESC
                LIMIT 1
                """,
                (int(user_id), day),
            )
            row = fetchone(cur)
            return _to_standup(row) if row else None

    def create(
        self,
        *,
        user_id: int,
        date: datetime,
        yesterday: str,
        today: str,
        blockers: str,
        mood: Mood,
        jira_links: Sequence[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO standups (user_id, date, yesterday, today, blockers, mood, jira_links)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (int(user_id), date, yesterday, today, blockers, mood.value, json.dumps(list(jira_links))),
            )
            return int(cur.lastrowid)

    def update(self, standup_id: int, updates: dict) -> bool:
        columns = [c for c in updates if c in _UPDATABLE]
        if not columns:
            return False
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE standups SET {assignments} WHERE standup_id=%s",
                tuple(_db_value(c, updates[c]) for c in columns) + (int(standup_id),),
            )
            return cur.rowcount > 0

    def delete(self, standup_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM standups WHERE standup_id=%s", (int(standup_id),))
            return cur.rowcount > 0

    # -------- Comments --------
    def list_comments(self, standup_ids: Sequence[int]) -> Sequence[Comment]:
        ids = [int(i) for i in standup_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COMMENT_COLUMNS}
                FROM standup_comments
                WHERE standup_id IN ({in_clause(ids)})
                ORDER BY created_at, comment_id
                """,
                tuple(ids),
            )
            return [_to_comment(r) for r in fetchall(cur)]

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COMMENT_COLUMNS} FROM standup_comments WHERE comment_id=%s", (int(comment_id),))
            row = fetchone(cur)
            return _to_comment(row) if row else None

    def create_comment(self, *, standup_id: int, user_id: int, text: str, parent_id: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO standup_comments (standup_id, user_id, parent_id, text) VALUES (%s, %s, %s, %s)",
                (int(standup_id), int(user_id), parent_id, text),
            )
            return int(cur.lastrowid)

    def update_comment(self, comment_id: int, text: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE standup_comments SET text=%s, updated_at=CURRENT_TIMESTAMP(6) WHERE comment_id=%s",
                (text, int(comment_id)),
            )
            return cur.rowcount > 0

    def delete_comment(self, comment_id: int) -> bool:
        # Replies go through ON DELETE CASCADE on parent_id.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM standup_comments WHERE comment_id=%s", (int(comment_id),))
            return cur.rowcount > 0

    # -------- Reactions --------
    def list_reactions(self, standup_ids: Sequence[int]) -> Sequence[Reaction]:
        ids = [int(i) for i in standup_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT reaction_id, standup_id, user_id, type, created_at
                FROM standup_reactions
                WHERE standup_id IN ({in_clause(ids)})
                ORDER BY created_at, reaction_id
                """,
                tuple(ids),
            )
            return [_to_reaction(r) for r in fetchall(cur)]

    def get_user_reaction(self, standup_id: int, user_id: int) -> Optional[Reaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT reaction_id, standup_id, user_id, type, created_at
                FROM standup_reactions
                WHERE standup_id=%s AND user_id=%s
                """,
                (int(standup_id), int(user_id)),
            )
            row = fetchone(cur)
            return _to_reaction(row) if row else None

    def add_reaction(self, *, standup_id: int, user_id: int, reaction_type: ReactionType) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO standup_reactions (standup_id, user_id, type) VALUES (%s, %s, %s)",
                (int(standup_id), int(user_id), reaction_type.value),
            )
            return int(cur.lastrowid)

    def set_reaction_type(self, reaction_id: int, reaction_type: ReactionType) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE standup_reactions SET type=%s, created_at=CURRENT_TIMESTAMP WHERE reaction_id=%s",
                (reaction_type.value, int(reaction_id)),
            )
            return cur.rowcount > 0

    def delete_reaction(self, reaction_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM standup_reactions WHERE reaction_id=%s", (int(reaction_id),))
            return cur.rowcount > 0

    # -------- Views & read markers --------
    def list_views(self, standup_ids: Sequence[int]) -> Sequence[StandupView]:
        ids = [int(i) for i in standup_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT standup_id, viewer_id, viewed_at
                FROM standup_views
                WHERE standup_id IN ({in_clause(ids)})
                ORDER BY viewed_at
                """,
                tuple(ids),
            )
            return [
                StandupView(standup_id=int(r["standup_id"]), viewer_id=int(r["viewer_id"]), viewed_at=r.get("viewed_at"))
                for r in fetchall(cur)
            ]

    def add_view(self, standup_id: int, viewer_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO standup_views (standup_id, viewer_id) VALUES (%s, %s)",
                (int(standup_id), int(viewer_id)),
            )
            return cur.rowcount > 0

    def get_read_counts(self, user_id: int, standup_ids: Sequence[int]) -> dict[int, int]:
        ids = [int(i) for i in standup_ids]
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT standup_id, read_count
                FROM standup_reads
                WHERE user_id=%s AND standup_id IN ({in_clause(ids)})
                """,
                (int(user_id), *ids),
            )
            return {int(r["standup_id"]): int(r["read_count"]) for r in fetchall(cur)}

    def set_read_count(self, standup_id: int, user_id: int, read_count: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO standup_reads (standup_id, user_id, read_count)
                VALUES (%s, %s, %s)
                ON DUPLICATE KEY UPDATE read_count=VALUES(read_count)
                """,
                (int(standup_id), int(user_id), int(read_count)),
            )
