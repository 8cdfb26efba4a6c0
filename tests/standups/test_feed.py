from __future__ import annotations

from datetime import datetime

from src.standly.standly.core.enums import Mood, ReactionType
from src.standly.standly.standups.feed import build_comment_tree, build_feed, group_reactions
from src.standly.standly.standups.model import Comment, Reaction, Standup, StandupView
from src.standly.standly.users.model import Profile


def _profile(uid, name):
    return Profile(user_id=uid, name=name, email=f"{uid}@team.io", password_hash="x", role="Developer")


PROFILES = {1: _profile(1, "Sarah Chen"), 2: _profile(2, "Rob Stone")}


def _standup(sid, uid, when):
    return Standup(
        standup_id=sid,
        user_id=uid,
        date=when,
        yesterday="y",
        today="t",
        blockers="",
        mood=Mood.HAPPY,
        created_at=when,
    )


def _comment(cid, uid, text, minute, parent_id=None, standup_id=1):
    return Comment(
        comment_id=cid,
        standup_id=standup_id,
        user_id=uid,
        text=text,
        parent_id=parent_id,
        created_at=datetime(2026, 3, 2, 12, minute),
    )


COMMENTS = [
    _comment(1, 2, "@Sarah look at this", 0),
    _comment(2, 1, "on it", 1, parent_id=1),
    _comment(3, 2, "ok", 2),
    _comment(4, 2, "lost reply", 3, parent_id=99),
]


def test_comment_tree_nests_replies_and_promotes_orphans():
    roots = build_comment_tree(COMMENTS, PROFILES, viewer=PROFILES[1], read_count=1)

    assert [r["id"] for r in roots] == [1, 3, 4]
    assert [r["id"] for r in roots[0]["replies"]] == [2]
    assert roots[0]["author"]["name"] == "Rob Stone"


def test_unread_and_highlight_follow_read_count():
    roots = build_comment_tree(COMMENTS, PROFILES, viewer=PROFILES[1], read_count=1)

    first = roots[0]
    assert first["mentions_me"] is True
    assert first["is_unread"] is False
    assert first["highlight"] is False

    roots = build_comment_tree(COMMENTS, PROFILES, viewer=PROFILES[1], read_count=0)
    assert roots[0]["highlight"] is True
    assert roots[0]["replies"][0]["is_mine"] is True


def test_group_reactions_in_display_order():
    reactions = [
        Reaction(reaction_id=1, standup_id=1, user_id=1, type=ReactionType.LOVE),
        Reaction(reaction_id=2, standup_id=1, user_id=2, type=ReactionType.LIKE),
    ]
    groups = group_reactions(reactions, PROFILES)
    assert [(g["type"], g["count"]) for g in groups] == [("like", 1), ("love", 1)]
    assert groups[1]["users"][0]["name"] == "Sarah Chen"


def test_build_feed_newest_first_with_counts():
    standups = [_standup(1, 1, datetime(2026, 3, 2, 10, 0)), _standup(2, 2, datetime(2026, 3, 3, 10, 0))]
    reactions = [Reaction(reaction_id=1, standup_id=1, user_id=1, type=ReactionType.LOVE)]
    views = [StandupView(standup_id=1, viewer_id=2), StandupView(standup_id=1, viewer_id=77)]

    feed = build_feed(
        standups,
        comments=list(reversed(COMMENTS)),
        reactions=reactions,
        views=views,
        profiles=PROFILES,
        viewer=PROFILES[1],
        read_counts={1: 1},
    )

    assert [item["id"] for item in feed] == [2, 1]
    older = feed[1]
    assert older["is_owner"] is True
    assert older["my_reaction"] == "love"
    assert older["comment_count"] == 4
    assert older["unread_count"] == 3
    assert [v["name"] for v in older["views"]] == ["Rob Stone"]
    assert feed[0]["comments"] == []
    assert feed[0]["unread_count"] == 0


def test_unknown_author_renders_as_unknown():
    feed = build_feed(
        [_standup(1, 42, datetime(2026, 3, 2, 10, 0))],
        comments=[],
        reactions=[],
        views=[],
        profiles=PROFILES,
        viewer=None,
        read_counts={},
    )
    assert feed[0]["author"]["name"] == "Unknown"
    assert feed[0]["my_reaction"] is None
