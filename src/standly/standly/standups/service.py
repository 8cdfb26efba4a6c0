from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.date_windows import is_weekend, last_n_days
from ..common.datetime_utils import iso, now_local, parse_iso_datetime
from ..common.validators import require_non_empty, require_url
from ..core.constants import CALENDAR_STRIP_DAYS
from ..core.enums import CalendarDayStatus, Mood, ReactionType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Profile
from ..users.repository import ProfileRepository
from .feed import build_feed, build_feed_item
from .model import Comment, Standup
from .repository import StandupRepository

logger = logging.getLogger(__name__)


def parse_mood(value: Optional[str]) -> Mood:
    try:
        return Mood((value or Mood.HAPPY.value).strip().lower())
    except ValueError:
        raise ValidationError("Mood must be one of: happy, neutral, stressed")


def parse_reaction(value: Optional[str]) -> ReactionType:
    try:
        return ReactionType((value or "").strip().lower())
    except ValueError:
        raise ValidationError("Unknown reaction type")


def clean_links(links: Optional[Sequence[str]]) -> list[str]:
    out: list[str] = []
    for link in links or []:
        if link and link.strip():
            out.append(require_url(link, "Jira link"))
    return out


class StandupService:
    """Daily standups and their feed: comments, reactions, views and read markers."""

    def __init__(self, standups: StandupRepository, profiles: ProfileRepository):
        self._standups = standups
        self._profiles = profiles

    # ---- lookups ----
    def _require(self, standup_id: int) -> Standup:
        s = self._standups.get(int(standup_id))
        if not s:
            raise NotFoundError("Standup not found")
        return s

    def _require_owner(self, standup_id: int, user_id: int) -> Standup:
        s = self._require(standup_id)
        if s.user_id != int(user_id):
            raise AuthorizationError("You can only change your own standups")
        return s

    def _require_comment(self, comment_id: int) -> Comment:
        c = self._standups.get_comment(int(comment_id))
        if not c:
            raise NotFoundError("Comment not found")
        return c

    def _profiles_by_id(self) -> dict[int, Profile]:
        return {p.user_id: p for p in self._profiles.list_all()}

    # ---- standups ----
    def create(
        self,
        *,
        user_id: int,
        date_value: str,
        yesterday: str,
        today: str,
        blockers: str = "",
        mood: Optional[str] = None,
        jira_links: Optional[Sequence[str]] = None,
        now: Optional[datetime] = None,
    ) -> int:
        when = parse_iso_datetime(date_value or (now or now_local()).date().isoformat(), now=now)
        standup_id = self._standups.create(
            user_id=int(user_id),
            date=when,
            yesterday=require_non_empty(yesterday, "Yesterday"),
            today=require_non_empty(today, "Today"),
            blockers=(blockers or "").strip(),
            mood=parse_mood(mood),
            jira_links=clean_links(jira_links),
        )
        logger.info("Standup %s posted by user_id=%s", standup_id, user_id)
        return standup_id

    def update(self, *, standup_id: int, user_id: int, changes: dict, now: Optional[datetime] = None) -> None:
        self._require_owner(standup_id, user_id)

        updates: dict = {}
        if changes.get("date"):
            updates["date"] = parse_iso_datetime(changes["date"], now=now)
        for field in ("yesterday", "today", "blockers"):
            value = changes.get(field)
            if value and str(value).strip():
                updates[field] = str(value).strip()
        if changes.get("mood"):
            updates["mood"] = parse_mood(changes["mood"])
        if "jira_links" in changes:
            updates["jira_links"] = clean_links(changes.get("jira_links"))

        if updates:
            self._standups.update(int(standup_id), updates)

    def delete(self, *, standup_id: int, user_id: int) -> None:
        self._require_owner(standup_id, user_id)
        if not self._standups.delete(int(standup_id)):
            raise ValidationError("Failed to delete standup")

    def find_for_date(self, *, user_id: int, day: date) -> Optional[dict]:
        s = self._standups.find_for_user_and_date(int(user_id), day)
        if not s:
            return None
        return {
            "id": s.standup_id,
            "date": iso(s.date),
            "yesterday": s.yesterday,
            "today": s.today,
            "blockers": s.blockers,
            "mood": s.mood.value,
            "jira_links": list(s.jira_links),
        }

    def calendar_strip(self, *, user_id: int, today: Optional[date] = None, days: int = CALENDAR_STRIP_DAYS) -> list[dict]:
        today = today or now_local().date()
        window = last_n_days(today, days)
        posted = {s.date.date() for s in self._standups.list_for_user_between(int(user_id), window[0], window[-1])}

        out = []
        for d in window:
            if d in posted:
                status = CalendarDayStatus.PRESENT
            elif is_weekend(d):
                status = CalendarDayStatus.WEEKEND
            elif d == today:
                status = CalendarDayStatus.PENDING
            else:
                status = CalendarDayStatus.MISSED
            out.append({"date": d.isoformat(), "status": status.value, "weekday": d.strftime("%a")[0]})
        return out

    # ---- feed ----
    def feed(self, *, viewer_id: int) -> list[dict]:
        standups = list(self._standups.list_all())
        ids = [s.standup_id for s in standups]
        profiles = self._profiles_by_id()
        return build_feed(
            standups,
            comments=self._standups.list_comments(ids),
            reactions=self._standups.list_reactions(ids),
            views=self._standups.list_views(ids),
            profiles=profiles,
            viewer=profiles.get(int(viewer_id)),
            read_counts=self._standups.get_read_counts(int(viewer_id), ids),
        )

    def feed_item(self, *, standup_id: int, viewer_id: int) -> dict:
        s = self._require(standup_id)
        ids = [s.standup_id]
        profiles = self._profiles_by_id()
        return build_feed_item(
            s,
            comments=self._standups.list_comments(ids),
            reactions=self._standups.list_reactions(ids),
            views=self._standups.list_views(ids),
            profiles=profiles,
            viewer=profiles.get(int(viewer_id)),
            read_count=self._standups.get_read_counts(int(viewer_id), ids).get(s.standup_id, 0),
        )

    # ---- reactions ----
    def react(self, *, standup_id: int, user_id: int, reaction_type: str) -> Optional[str]:
        """Toggle the caller's reaction; returns the reaction now in place (or None)."""
        self._require(standup_id)
        rtype = parse_reaction(reaction_type)

        existing = self._standups.get_user_reaction(int(standup_id), int(user_id))
        if existing and existing.type == rtype:
            self._standups.delete_reaction(existing.reaction_id)
            return None
        if existing:
            self._standups.set_reaction_type(existing.reaction_id, rtype)
        else:
            self._standups.add_reaction(standup_id=int(standup_id), user_id=int(user_id), reaction_type=rtype)
        return rtype.value

    # ---- comments ----
    def comment(self, *, standup_id: int, user_id: int, text: str, parent_id: Optional[int] = None) -> int:
        self._require(standup_id)
        text = require_non_empty(text, "Comment")

        root_id: Optional[int] = None
        if parent_id is not None:
            parent = self._require_comment(parent_id)
            if parent.standup_id != int(standup_id):
                raise ValidationError("Reply must belong to the same standup")
            # Replies are one level deep: replying to a reply targets its root.
            root_id = parent.parent_id if parent.parent_id is not None else parent.comment_id

        return self._standups.create_comment(
            standup_id=int(standup_id),
            user_id=int(user_id),
            text=text,
            parent_id=root_id,
        )

    def edit_comment(self, *, comment_id: int, user_id: int, text: str) -> None:
        c = self._require_comment(comment_id)
        if c.user_id != int(user_id):
            raise AuthorizationError("You can only edit your own comments")
        self._standups.update_comment(c.comment_id, require_non_empty(text, "Comment"))

    def delete_comment(self, *, comment_id: int, user_id: int) -> None:
        c = self._require_comment(comment_id)
        if c.user_id != int(user_id):
            raise AuthorizationError("You can only delete your own comments")
        self._standups.delete_comment(c.comment_id)

    # ---- views & read state ----
    def record_view(self, *, standup_id: int, viewer_id: int) -> bool:
        s = self._require(standup_id)
        if s.user_id == int(viewer_id):
            return False
        return self._standups.add_view(s.standup_id, int(viewer_id))

    def mark_read(self, *, standup_id: int, user_id: int) -> int:
        s = self._require(standup_id)
        count = len(self._standups.list_comments([s.standup_id]))
        self._standups.set_read_count(s.standup_id, int(user_id), count)
        return count
