from __future__ import annotations

from src.standly.standly.standups.mentions import (
    active_mention_query,
    insert_mention,
    is_user_mentioned,
    mention_suggestions,
    render_segments,
    split_mentions,
)

NAMES = ["Sarah Chen", "Rob Stone", "Alex Rivera"]


def test_is_user_mentioned_full_and_first_name():
    assert is_user_mentioned("thanks @Sarah Chen!", "Sarah Chen")
    assert is_user_mentioned("ping @sarah", "Sarah Chen")
    assert not is_user_mentioned("no mention here", "Sarah Chen")


def test_is_user_mentioned_respects_word_boundary():
    assert not is_user_mentioned("hey @Robert", "Rob Stone")
    assert is_user_mentioned("hey @Rob, look", "Rob Stone")


def test_everyone_mentions_all():
    assert is_user_mentioned("@Everyone standup moved", "Anyone")
    assert not is_user_mentioned("@everyoneelse", "Anyone")


def test_names_are_regex_escaped():
    assert is_user_mentioned("cc @Ana.B please", "Ana.B Cruz")
    assert not is_user_mentioned("cc @AnaxB please", "Ana.B Cruz")


def test_split_mentions_prefers_full_name_and_keeps_trailing_text():
    segments = split_mentions("hi @Sarah Chen can you check", NAMES)
    assert segments == [
        {"kind": "text", "value": "hi "},
        {"kind": "mention", "value": "@Sarah Chen"},
        {"kind": "text", "value": " can you check"},
    ]


def test_split_mentions_everyone_and_unknown():
    segments = split_mentions("@everyone sync @Nobody", NAMES)
    assert segments[0] == {"kind": "everyone", "value": "@everyone"}
    assert segments[1] == {"kind": "text", "value": " sync "}
    assert segments[2] == {"kind": "text", "value": "@Nobody"}


def test_render_segments_extracts_links():
    segments = render_segments("see https://jira.example.com/PRJ-1 now", NAMES)
    assert {"kind": "link", "value": "https://jira.example.com/PRJ-1"} in segments


def test_active_mention_query():
    assert active_mention_query("hello @sa") == "sa"
    assert active_mention_query("hello @sa there", cursor=9) == "sa"
    assert active_mention_query("hello there") is None


def test_mention_suggestions_excludes_self_and_appends_everyone():
    users = [{"id": 1, "name": "Sarah Chen"}, {"id": 2, "name": "Samir Patel"}, {"id": 3, "name": "Alex"}]
    out = mention_suggestions("sa", users, current_user_id=1)
    assert [u["name"] for u in out] == ["Samir Patel"]

    out = mention_suggestions("ev", users, current_user_id=1)
    assert out[-1]["is_everyone"] is True


def test_insert_mention_uses_first_name():
    assert insert_mention("thanks @sa", "sa", "Sarah Chen") == "thanks @Sarah "
    assert insert_mention("@ev", "ev", "everyone", is_everyone=True) == "@everyone "
