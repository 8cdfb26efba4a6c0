from __future__ import annotations

from datetime import date, datetime

import pytest

from src.standly.standly.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.standly.standly.standups.service import StandupService

from tests.fakes import InMemoryProfiles, InMemoryStandups

NOW = datetime(2026, 3, 4, 9, 30, 15)


@pytest.fixture()
def env():
    profiles = InMemoryProfiles()
    sarah = profiles.add("Sarah Chen", "sarah@team.io")
    rob = profiles.add("Rob Stone", "rob@team.io")
    repo = InMemoryStandups()
    return StandupService(repo, profiles), repo, sarah, rob


def _post(service, user_id, day="2026-03-04", **extra):
    return service.create(
        user_id=user_id,
        date_value=day,
        yesterday="Fixed login bug",
        today="Write tests",
        now=NOW,
        **extra,
    )


def test_create_combines_bare_date_with_current_time(env):
    service, repo, sarah, _ = env
    sid = _post(service, sarah.user_id, day="2026-03-02")
    assert repo.get(sid).date == datetime(2026, 3, 2, 9, 30)


def test_create_keeps_full_iso_datetime(env):
    service, repo, sarah, _ = env
    sid = _post(service, sarah.user_id, day="2026-03-02T17:45:00")
    assert repo.get(sid).date == datetime(2026, 3, 2, 17, 45)


def test_create_validates_fields(env):
    service, _, sarah, _ = env
    with pytest.raises(ValidationError):
        service.create(user_id=sarah.user_id, date_value="2026-03-04", yesterday=" ", today="x", now=NOW)
    with pytest.raises(ValidationError):
        _post(service, sarah.user_id, mood="ecstatic")
    with pytest.raises(ValidationError):
        _post(service, sarah.user_id, jira_links=["jira.example.com/PRJ-1"])


def test_create_defaults_mood_and_drops_blank_links(env):
    service, repo, sarah, _ = env
    sid = _post(service, sarah.user_id, jira_links=["https://jira.example.com/PRJ-1", "  "])
    s = repo.get(sid)
    assert s.mood.value == "happy"
    assert s.jira_links == ("https://jira.example.com/PRJ-1",)


def test_update_and_delete_are_owner_only(env):
    service, repo, sarah, rob = env
    sid = _post(service, sarah.user_id)

    with pytest.raises(AuthorizationError):
        service.update(standup_id=sid, user_id=rob.user_id, changes={"today": "hijack"})
    with pytest.raises(AuthorizationError):
        service.delete(standup_id=sid, user_id=rob.user_id)

    service.update(standup_id=sid, user_id=sarah.user_id, changes={"today": "Ship it", "yesterday": ""})
    assert repo.get(sid).today == "Ship it"
    assert repo.get(sid).yesterday == "Fixed login bug"

    service.delete(standup_id=sid, user_id=sarah.user_id)
    assert repo.get(sid) is None
    with pytest.raises(NotFoundError):
        service.delete(standup_id=sid, user_id=sarah.user_id)


def test_find_for_date(env):
    service, _, sarah, _ = env
    _post(service, sarah.user_id, day="2026-03-03")
    assert service.find_for_date(user_id=sarah.user_id, day=date(2026, 3, 3))["today"] == "Write tests"
    assert service.find_for_date(user_id=sarah.user_id, day=date(2026, 3, 4)) is None


def test_calendar_strip_statuses(env):
    service, _, sarah, _ = env
    # 2026-03-04 is a Wednesday; 2026-02-28/03-01 is a weekend.
    _post(service, sarah.user_id, day="2026-03-02")

    strip = service.calendar_strip(user_id=sarah.user_id, today=date(2026, 3, 4))
    by_date = {d["date"]: d["status"] for d in strip}

    assert len(strip) == 14
    assert strip[0]["date"] == "2026-02-19"
    assert strip[-1]["date"] == "2026-03-04"
    assert by_date["2026-03-02"] == "present"
    assert by_date["2026-03-01"] == "weekend"
    assert by_date["2026-03-03"] == "missed"
    assert by_date["2026-03-04"] == "pending"


def test_react_toggles_and_replaces(env):
    service, repo, sarah, rob = env
    sid = _post(service, sarah.user_id)

    assert service.react(standup_id=sid, user_id=rob.user_id, reaction_type="like") == "like"
    assert service.react(standup_id=sid, user_id=rob.user_id, reaction_type="love") == "love"
    assert len(repo.reactions) == 1
    assert service.react(standup_id=sid, user_id=rob.user_id, reaction_type="love") is None
    assert repo.reactions == {}

    with pytest.raises(ValidationError):
        service.react(standup_id=sid, user_id=rob.user_id, reaction_type="meh")


def test_reply_to_reply_attaches_to_root(env):
    service, repo, sarah, rob = env
    sid = _post(service, sarah.user_id)

    root = service.comment(standup_id=sid, user_id=rob.user_id, text="Nice")
    reply = service.comment(standup_id=sid, user_id=sarah.user_id, text="Thanks", parent_id=root)
    nested = service.comment(standup_id=sid, user_id=rob.user_id, text="np", parent_id=reply)

    assert repo.get_comment(nested).parent_id == root


def test_comment_parent_must_belong_to_same_standup(env):
    service, _, sarah, rob = env
    s1 = _post(service, sarah.user_id)
    s2 = _post(service, rob.user_id)
    root = service.comment(standup_id=s1, user_id=rob.user_id, text="hi")

    with pytest.raises(ValidationError):
        service.comment(standup_id=s2, user_id=rob.user_id, text="x", parent_id=root)
    with pytest.raises(ValidationError):
        service.comment(standup_id=s1, user_id=rob.user_id, text="   ")


def test_edit_and_delete_comment_author_only(env):
    service, repo, sarah, rob = env
    sid = _post(service, sarah.user_id)
    root = service.comment(standup_id=sid, user_id=rob.user_id, text="Nice")
    service.comment(standup_id=sid, user_id=sarah.user_id, text="Thanks", parent_id=root)

    with pytest.raises(AuthorizationError):
        service.edit_comment(comment_id=root, user_id=sarah.user_id, text="edited")

    service.edit_comment(comment_id=root, user_id=rob.user_id, text="Very nice")
    assert repo.get_comment(root).text == "Very nice"

    service.delete_comment(comment_id=root, user_id=rob.user_id)
    assert repo.list_comments([sid]) == []


def test_record_view_skips_author_and_is_idempotent(env):
    service, repo, sarah, rob = env
    sid = _post(service, sarah.user_id)

    assert service.record_view(standup_id=sid, viewer_id=sarah.user_id) is False
    assert service.record_view(standup_id=sid, viewer_id=rob.user_id) is True
    assert service.record_view(standup_id=sid, viewer_id=rob.user_id) is False
    assert len(repo.views) == 1


def test_mark_read_clears_unread_and_highlight(env):
    service, _, sarah, rob = env
    sid = _post(service, sarah.user_id)
    service.comment(standup_id=sid, user_id=rob.user_id, text="@Sarah can you review?")
    service.comment(standup_id=sid, user_id=rob.user_id, text="also this")

    item = service.feed(viewer_id=sarah.user_id)[0]
    assert item["unread_count"] == 2
    assert item["comments"][0]["highlight"] is True

    assert service.mark_read(standup_id=sid, user_id=sarah.user_id) == 2

    item = service.feed_item(standup_id=sid, viewer_id=sarah.user_id)
    assert item["unread_count"] == 0
    assert item["comments"][0]["highlight"] is False
