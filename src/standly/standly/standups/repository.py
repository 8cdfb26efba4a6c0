from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Mood, ReactionType
from .model import Comment, Reaction, Standup, StandupView


class StandupRepository(Protocol):
    # Standups
    def list_all(self) -> Sequence[Standup]:
        """Newest first."""

        raise NotImplementedError

    def list_between(self, start: datetime, end: datetime) -> Sequence[Standup]:
        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[Standup]:
        raise NotImplementedError

    def get(self, standup_id: int) -> Optional[Standup]:
        raise NotImplementedError

    def find_for_user_and_date(self, user_id: int, day: date) -> Optional[Standup]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, standup_id: int, updates: dict) -> bool:
        raise NotImplementedError

    def delete(self, standup_id: int) -> bool:
        raise NotImplementedError

    # Comments
    def list_comments(self, standup_ids: Sequence[int]) -> Sequence[Comment]:
        """Oldest first."""

        raise NotImplementedError

    def get_comment(self, comment_id: int) -> Optional[Comment]:
        raise NotImplementedError

    def create_comment(self, *, standup_id: int, user_id: int, text: str, parent_id: Optional[int]) -> int:
        raise NotImplementedError

    def update_comment(self, comment_id: int, text: str) -> bool:
        raise NotImplementedError

    def delete_comment(self, comment_id: int) -> bool:
        """Deletes the comment and its replies."""

        raise NotImplementedError

    # Reactions
    def list_reactions(self, standup_ids: Sequence[int]) -> Sequence[Reaction]:
        raise NotImplementedError

    def get_user_reaction(self, standup_id: int, user_id: int) -> Optional[Reaction]:
        raise NotImplementedError

    def add_reaction(self, *, standup_id: int, user_id: int, reaction_type: ReactionType) -> int:
        raise NotImplementedError

    def set_reaction_type(self, reaction_id: int, reaction_type: ReactionType) -> bool:
        raise NotImplementedError

    def delete_reaction(self, reaction_id: int) -> bool:
        raise NotImplementedError

    # Views & read markers
    def list_views(self, standup_ids: Sequence[int]) -> Sequence[StandupView]:
        raise NotImplementedError

    def add_view(self, standup_id: int, viewer_id: int) -> bool:
        """Returns False when the viewer was already recorded."""

        raise NotImplementedError

    def get_read_counts(self, user_id: int, standup_ids: Sequence[int]) -> dict[int, int]:
        raise NotImplementedError

    def set_read_count(self, standup_id: int, user_id: int, read_count: int) -> None:
        raise NotImplementedError
