"""Reconcile standup rows and their joined children into nested feed view models."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import iso
from ..core.enums import ReactionType
from ..users.model import Profile, person_view as author_view
from .mentions import is_user_mentioned, render_segments
from .model import Comment, Reaction, Standup, StandupView


def group_reactions(reactions: Iterable[Reaction], profiles: Mapping[int, Profile]) -> list[dict]:
    """``[{type, count, users}]`` in display order; types nobody used are left out."""
    by_type: dict[ReactionType, list[dict]] = defaultdict(list)
    for r in reactions:
        by_type[r.type].append(author_view(r.user_id, profiles))

    return [
        {"type": t.value, "count": len(by_type[t]), "users": by_type[t]}
        for t in ReactionType
        if by_type.get(t)
    ]


def build_comment_tree(
    comments: Sequence[Comment],
    profiles: Mapping[int, Profile],
    *,
    viewer: Optional[Profile] = None,
    read_count: int = 0,
) -> list[dict]:
    """Root comments (oldest first), each with its replies.

    ``comments`` must be in chronological order: a comment's position in that
    list decides whether the viewer has read it. Replies whose parent is gone
    are shown as roots.
    """
    names = [p.name for p in profiles.values()]
    ids = {c.comment_id for c in comments}

    nodes: dict[int, dict] = {}
    for index, c in enumerate(comments):
        is_unread = index >= read_count
        mentioned = bool(viewer) and is_user_mentioned(c.text, viewer.name)
        nodes[c.comment_id] = {
            "id": c.comment_id,
            "parent_id": c.parent_id,
            "author": author_view(c.user_id, profiles),
            "text": c.text,
            "segments": render_segments(c.text, names),
            "created_at": iso(c.created_at),
            "edited": c.updated_at is not None,
            "is_mine": bool(viewer) and c.user_id == viewer.user_id,
            "is_unread": is_unread,
            "mentions_me": mentioned,
            "highlight": is_unread and mentioned,
            "replies": [],
        }

    roots: list[dict] = []
    for c in comments:
        node = nodes[c.comment_id]
        if c.parent_id is not None and c.parent_id in ids:
            nodes[c.parent_id]["replies"].append(node)
        else:
            roots.append(node)
    return roots


def build_feed_item(
    standup: Standup,
    *,
    comments: Sequence[Comment],
    reactions: Sequence[Reaction],
    views: Sequence[StandupView],
    profiles: Mapping[int, Profile],
    viewer: Optional[Profile],
    read_count: int = 0,
) -> dict:
    viewer_id = viewer.user_id if viewer else None
    my_reaction = next((r.type.value for r in reactions if r.user_id == viewer_id), None)
    viewers = [author_view(v.viewer_id, profiles) for v in views if v.viewer_id in profiles]

    return {
        "id": standup.standup_id,
        "author": author_view(standup.user_id, profiles),
        "is_owner": standup.user_id == viewer_id,
        "date": iso(standup.date),
        "created_at": iso(standup.created_at),
        "yesterday": standup.yesterday,
        "today": standup.today,
        "blockers": standup.blockers,
        "mood": standup.mood.value,
        "jira_links": list(standup.jira_links),
        "reactions": group_reactions(reactions, profiles),
        "my_reaction": my_reaction,
        "comments": build_comment_tree(comments, profiles, viewer=viewer, read_count=read_count),
        "comment_count": len(comments),
        "unread_count": max(len(comments) - read_count, 0),
        "views": viewers,
    }


def build_feed(
    standups: Sequence[Standup],
    *,
    comments: Sequence[Comment],
    reactions: Sequence[Reaction],
    views: Sequence[StandupView],
    profiles: Mapping[int, Profile],
    viewer: Optional[Profile],
    read_counts: Mapping[int, int],
) -> list[dict]:
    comments_by: dict[int, list[Comment]] = defaultdict(list)
    for c in comments:
        comments_by[c.standup_id].append(c)
    reactions_by: dict[int, list[Reaction]] = defaultdict(list)
    for r in reactions:
        reactions_by[r.standup_id].append(r)
    views_by: dict[int, list[StandupView]] = defaultdict(list)
    for v in views:
        views_by[v.standup_id].append(v)

    ordered = sorted(standups, key=lambda s: s.date, reverse=True)
    return [
        build_feed_item(
            s,
            comments=sorted(comments_by[s.standup_id], key=lambda c: (c.created_at, c.comment_id)),
            reactions=reactions_by[s.standup_id],
            views=views_by[s.standup_id],
            profiles=profiles,
            viewer=viewer,
            read_count=read_counts.get(s.standup_id, 0),
        )
        for s in ordered
    ]
