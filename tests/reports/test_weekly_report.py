from __future__ import annotations

import io
from datetime import datetime

import httpx
import pandas as pd
import pytest

from src.standly.standly.core.enums import Mood, TaskStatus, TaskType
from src.standly.standly.reports.providers import GeminiProvider
from src.standly.standly.reports.service import (
    DRAFT_FAILED,
    DRAFT_NOT_CONFIGURED,
    SUMMARY_FAILED,
    SUMMARY_NOT_CONFIGURED,
    ReportService,
    weekly_window,
)

from tests.fakes import FakeProvider, InMemoryProfiles, InMemoryStandups, InMemoryTasks

NOW = datetime(2026, 3, 8, 18, 0)


@pytest.fixture()
def repos():
    profiles = InMemoryProfiles()
    sarah = profiles.add("Sarah Chen", "sarah@team.io")
    standups = InMemoryStandups()
    tasks = InMemoryTasks()

    def post(user_id, when, today):
        standups.create(
            user_id=user_id,
            date=when,
            yesterday="y",
            today=today,
            blockers="",
            mood=Mood.NEUTRAL,
            jira_links=["https://jira.example.com/PRJ-1"],
        )

    post(sarah.user_id, datetime(2026, 3, 2, 9, 0), "in window")
    post(sarah.user_id, datetime(2026, 2, 28, 9, 0), "too old")
    post(99, datetime(2026, 3, 5, 9, 0), "ghost author")

    tasks.create(
        title="v2 release",
        description="cut the branch",
        status=TaskStatus.TODO,
        assignee_id=sarah.user_id,
        creator_id=sarah.user_id,
        due_date=datetime(2026, 3, 12, 12, 0),
        task_type=TaskType.DEADLINE,
    )
    return standups, profiles, tasks


def test_weekly_window():
    assert weekly_window(NOW) == (datetime(2026, 3, 1, 18, 0), NOW)


def test_collect_filters_window_and_names_authors(repos):
    service = ReportService(*repos)
    collected = service.collect(now=NOW)

    assert [s["today"] for s in collected["standups"]] == ["in window", "ghost author"]
    assert collected["standups"][1]["name"] == "Unknown"
    assert collected["deadlines"] == [
        {"title": "v2 release", "description": "cut the branch", "date": datetime(2026, 3, 12, 12, 0), "status": "todo"}
    ]


def test_summary_not_configured(repos):
    assert ReportService(*repos).generate_weekly_summary(now=NOW) == SUMMARY_NOT_CONFIGURED
    unavailable = FakeProvider(available=False)
    assert ReportService(*repos, summary_provider=unavailable).generate_weekly_summary(now=NOW) == SUMMARY_NOT_CONFIGURED
    assert unavailable.calls == []


def test_summary_uses_provider_with_standups_in_prompt(repos):
    provider = FakeProvider("All good")
    service = ReportService(*repos, summary_provider=provider)

    assert service.generate_weekly_summary(now=NOW) == "All good"
    prompt = provider.calls[0][-1].content
    assert "Sarah Chen (2026-03-02)" in prompt
    assert "v2 release (Due: 2026-03-12, Status: todo) - cut the branch" in prompt
    assert "too old" not in prompt


def test_summary_failure_falls_back(repos):
    provider = FakeProvider(error=httpx.ConnectError("boom"))
    assert ReportService(*repos, summary_provider=provider).generate_weekly_summary(now=NOW) == SUMMARY_FAILED


def test_malformed_gemini_reply_falls_back(repos):
    provider = GeminiProvider(
        "key", "gemini-test", transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[]))
    )
    service = ReportService(*repos, summary_provider=provider)
    assert service.generate_weekly_summary(now=NOW) == SUMMARY_FAILED
    assert service.suggest_today_plan(previous_tasks=["a"]) == DRAFT_FAILED


def test_draft_plan_paths(repos):
    assert ReportService(*repos).suggest_today_plan(previous_tasks=["a"]) == DRAFT_NOT_CONFIGURED

    failing = FakeProvider(error=ValueError("no candidates"))
    service = ReportService(*repos, summary_provider=FakeProvider(), draft_provider=failing)
    assert service.suggest_today_plan(previous_tasks=["a"], blockers="none") == DRAFT_FAILED

    ok = FakeProvider("- Finish API")
    service = ReportService(*repos, draft_provider=ok)
    assert service.suggest_today_plan(previous_tasks=["Fix login", " "], blockers="CI flaky") == "- Finish API"
    assert '["Fix login"]' in ok.calls[0][-1].content


def test_export_weekly_report_workbook(repos):
    data = ReportService(*repos).export_weekly_report(now=NOW)

    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, engine="openpyxl")
    assert set(sheets) == {"Standups", "Deadlines"}
    standups = sheets["Standups"]
    assert list(standups.columns) == ["Date", "Name", "Mood", "Yesterday", "Today", "Blockers", "Jira Links"]
    assert list(standups["Today"]) == ["in window", "ghost author"]
    assert standups["Date"].iloc[0] == "2026-03-02 09:00"
    assert sheets["Deadlines"]["Title"].iloc[0] == "v2 release"
