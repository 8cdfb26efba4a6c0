from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import Mood, ReactionType


@dataclass(frozen=True)
class Standup:
    standup_id: int
    user_id: int
    date: datetime
    yesterday: str
    today: str
    blockers: str
    mood: Mood
    jira_links: tuple[str, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Comment:
    comment_id: int
    standup_id: int
    user_id: int
    text: str
    parent_id: Optional[int]
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Reaction:
    reaction_id: int
    standup_id: int
    user_id: int
    type: ReactionType
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StandupView:
    standup_id: int
    viewer_id: int
    viewed_at: Optional[datetime] = None
