from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional
from urllib.parse import quote

from ..core.constants import AVATAR_FALLBACK_URL


def fallback_avatar(name: str) -> str:
    return AVATAR_FALLBACK_URL.format(name=quote(name or "User", safe=""))


@dataclass(frozen=True)
class Profile:
    """Domain entity: a team member's profile.

    Note: plain data object, no DB access here.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: str
    avatar: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""

    @property
    def avatar_url(self) -> str:
        return self.avatar or fallback_avatar(self.name)

    def to_view(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar_url,
            "role": self.role,
            "is_admin": self.is_admin,
        }


def person_view(user_id: int, profiles: Mapping[int, Profile]) -> dict:
    """Compact author/assignee view; unknown ids render as ``Unknown``."""
    p = profiles.get(user_id)
    if not p:
        return {"id": user_id, "name": "Unknown", "avatar": fallback_avatar("User"), "role": ""}
    return {"id": p.user_id, "name": p.name, "avatar": p.avatar_url, "role": p.role}
