from __future__ import annotations

import pytest

from src.standly.standly.core.exceptions import NotFoundError, ValidationError
from src.standly.standly.links.service import QuickLinkService

from tests.fakes import InMemoryLinks, MemoryStorage


@pytest.fixture()
def env():
    repo = InMemoryLinks()
    storage = MemoryStorage()
    service = QuickLinkService(
        repo,
        storage,
        virtual_office_url="https://office.example.test/play",
        virtual_office_password="s3cret",
    )
    return service, repo, storage


def test_create_defaults_to_general_and_validates_url(env):
    service, repo, _ = env
    lid = service.create(user_id=1, title="Docs", url="https://docs.example.com")
    assert repo.get(lid).category.value == "General"

    with pytest.raises(ValidationError):
        service.create(user_id=1, title="Bad", url="docs.example.com")
    with pytest.raises(ValidationError):
        service.create(user_id=1, title="Bad", url="https://x.io", category="Games")


def test_update_keeps_icon_unless_replaced(env):
    service, repo, _ = env
    lid = service.create(user_id=1, title="Figma", url="https://figma.com", category="design", icon_url="/i/a.png")

    view = service.update(link_id=lid, changes={"title": "Figma Team", "icon_url": ""})
    assert view["icon_url"] == "/i/a.png"
    assert view["category"] == "Design"

    view = service.update(link_id=lid, changes={"icon_url": "/i/b.png"})
    assert view["icon_url"] == "/i/b.png"

    with pytest.raises(NotFoundError):
        service.update(link_id=999, changes={"title": "x"})


def test_list_grouped_in_category_order(env):
    service, _, _ = env
    service.create(user_id=1, title="Slack", url="https://slack.com", category="Social")
    service.create(user_id=1, title="Jira", url="https://jira.example.com", category="Development")
    service.create(user_id=1, title="Wiki", url="https://wiki.example.com")

    groups = service.list_grouped()
    assert [g["category"] for g in groups] == ["General", "Development", "Social"]
    assert groups[1]["links"][0]["title"] == "Jira"


def test_upload_icon_stores_under_link_icons(env):
    service, _, storage = env
    url = service.upload_icon(filename="logo.png", data=b"\x89PNG")
    assert url.startswith("/uploads/link-icons/")
    assert storage.saved[0][0] == "link-icons"


def test_virtual_office(env):
    service, _, _ = env
    assert service.virtual_office() == {"url": "https://office.example.test/play", "password": "s3cret"}
