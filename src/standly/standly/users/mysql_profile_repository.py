from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = "user_id, name, email, password_hash, role, avatar, is_admin, created_at"
_UPDATABLE = {"name", "role", "avatar"}


def _to_profile(row: dict) -> Profile:
    return Profile(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=row["role"],
        avatar=row.get("avatar"),
        is_admin=bool(row.get("is_admin", False)),
        created_at=row.get("created_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_all(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles ORDER BY name")
            return [_to_profile(r) for r in fetchall(cur)]

    def create_profile(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        is_admin: bool = False,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles (name, email, password_hash, role, is_admin)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (name, email, password_hash, role, int(bool(is_admin))),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, updates: dict) -> bool:
        columns = [c for c in updates if c in _UPDATABLE]
        if not columns:
            return False
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE profiles SET {assignments} WHERE user_id=%s",
                tuple(updates[c] for c in columns) + (int(user_id),),
            )
            return cur.rowcount > 0
