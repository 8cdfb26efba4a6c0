from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Profile


class ProfileRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def create_profile(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        is_admin: bool = False,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, updates: dict) -> bool:
        """Apply a column -> value mapping; returns False when nothing matched."""

        raise NotImplementedError
