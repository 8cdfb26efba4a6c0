from __future__ import annotations

import io
import json
import logging
from datetime import datetime
from typing import Mapping, Optional, Sequence

import httpx
import pandas as pd

from ..common.date_windows import trailing_window
from ..common.datetime_utils import now_local
from ..core.constants import WEEKLY_REPORT_DAYS
from ..core.enums import TaskType
from ..standups.model import Standup
from ..standups.repository import StandupRepository
from ..tasks.model import Task
from ..tasks.repository import TaskRepository
from ..users.model import Profile
from ..users.repository import ProfileRepository
from .providers import AbstractAIProvider, ChatMessage

logger = logging.getLogger(__name__)

SUMMARY_NOT_CONFIGURED = (
    "Weekly Summary Preview: Access to the Gemini API is required to generate a comprehensive "
    "weekly report. Please ensure your API key is configured correctly."
)
SUMMARY_EMPTY = "Could not generate weekly summary."
SUMMARY_FAILED = "Error generating summary. Please try again later."

DRAFT_NOT_CONFIGURED = (
    "Suggestion: Focus on completing the API integration modules and reviewing the new PRs "
    "pending from the QA team."
)
DRAFT_EMPTY = "Could not generate summary."
DRAFT_FAILED = "Draft: Continue working on previous sprint items."

EXPORT_COLUMNS = ["Date", "Name", "Mood", "Yesterday", "Today", "Blockers", "Jira Links"]


def weekly_window(now: datetime) -> tuple[datetime, datetime]:
    return trailing_window(now, WEEKLY_REPORT_DAYS)


def collect(
    standups: Sequence[Standup],
    profiles: Mapping[int, Profile],
    deadlines: Sequence[Task],
    now: datetime,
) -> dict:
    """Standups inside the weekly window (with author names) and every deadline."""
    start, end = weekly_window(now)
    week = sorted((s for s in standups if start <= s.date <= end), key=lambda s: s.date)

    return {
        "window": {"start": start.isoformat(), "end": end.isoformat()},
        "standups": [
            {
                "name": profiles[s.user_id].name if s.user_id in profiles else "Unknown",
                "date": s.date,
                "yesterday": s.yesterday,
                "today": s.today,
                "blockers": s.blockers,
                "mood": s.mood.value,
                "jira_links": list(s.jira_links),
            }
            for s in week
        ],
        "deadlines": [
            {"title": d.title, "description": d.description, "date": d.due_date, "status": d.status.value}
            for d in deadlines
        ],
    }


def build_weekly_prompt(collected: dict) -> list[ChatMessage]:
    standup_lines = "\n".join(
        f"- {s['name']} ({s['date']:%Y-%m-%d}): Yesterday: {s['yesterday']}, "
        f"Today: {s['today']}, Blockers: {s['blockers'] or 'None'}"
        for s in collected["standups"]
    )
    deadline_lines = "\n".join(
        f"- {d['title']} (Due: {d['date']:%Y-%m-%d}, Status: {d['status']})"
        + (f" - {d['description']}" if d.get("description") else "")
        for d in collected["deadlines"]
    )

    return [
        ChatMessage(role="system", content="You are a Project Manager Assistant."),
        ChatMessage(
            role="user",
            content=(
                "Here are the daily standup updates from the team for this week:\n"
                f"{standup_lines or '- (none)'}\n\n"
                "Here are the key deadlines and milestones:\n"
                f"{deadline_lines or '- (none)'}\n\n"
                "Please provide a concise Weekly Summary (max 150 words) highlighting:\n"
                "1. Key achievements (What was done).\n"
                "2. Major blockers identified (and if they persist).\n"
                "3. Status of upcoming deadlines.\n"
                "4. Overall team sentiment/progress.\n\n"
                "Format with clear headings or bullet points."
            ),
        ),
    ]


def build_draft_prompt(previous_tasks: Sequence[str], blockers: str) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content="You are an agile coach helper."),
        ChatMessage(
            role="user",
            content=(
                f"Based on these finished tasks from yesterday: {json.dumps(list(previous_tasks))}\n"
                f"And these current blockers: {blockers or 'None'}\n\n"
                'Generate a professional, concise "Today" plan for a daily standup meeting. '
                "Keep it under 3 bullet points."
            ),
        ),
    ]


class ReportService:
    """Weekly standup digest: AI summary, today-plan drafts and the Excel export."""

    def __init__(
        self,
        standups: StandupRepository,
        profiles: ProfileRepository,
        tasks: TaskRepository,
        *,
        summary_provider: Optional[AbstractAIProvider] = None,
        draft_provider: Optional[AbstractAIProvider] = None,
    ):
        self._standups = standups
        self._profiles = profiles
        self._tasks = tasks
        self._summary_provider = summary_provider
        self._draft_provider = draft_provider or summary_provider

    def collect(self, *, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        start, end = weekly_window(now)
        return collect(
            self._standups.list_between(start, end),
            {p.user_id: p for p in self._profiles.list_all()},
            self._tasks.list_by_type(TaskType.DEADLINE),
            now,
        )

    @staticmethod
    def _complete(provider: AbstractAIProvider, messages: list[ChatMessage], *, empty: str, failed: str) -> str:
        try:
            response = provider.chat_completion(messages)
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error("AI provider %s failed: %s", provider.model_name, e, exc_info=True)
            return failed
        return response.content or empty

    def generate_weekly_summary(self, *, now: Optional[datetime] = None) -> str:
        provider = self._summary_provider
        if provider is None or not provider.is_available():
            return SUMMARY_NOT_CONFIGURED

        messages = build_weekly_prompt(self.collect(now=now))
        return self._complete(provider, messages, empty=SUMMARY_EMPTY, failed=SUMMARY_FAILED)

    def suggest_today_plan(self, *, previous_tasks: Sequence[str], blockers: str = "") -> str:
        provider = self._draft_provider
        if provider is None or not provider.is_available():
            return DRAFT_NOT_CONFIGURED

        messages = build_draft_prompt([t for t in previous_tasks if t and t.strip()], blockers)
        return self._complete(provider, messages, empty=DRAFT_EMPTY, failed=DRAFT_FAILED)

    def export_weekly_report(self, *, now: Optional[datetime] = None) -> bytes:
        """xlsx bytes with a ``Standups`` sheet and a ``Deadlines`` sheet."""
        collected = self.collect(now=now)

        standups_df = pd.DataFrame(
            [
                [s["date"], s["name"], s["mood"], s["yesterday"], s["today"], s["blockers"], ", ".join(s["jira_links"])]
                for s in collected["standups"]
            ],
            columns=EXPORT_COLUMNS,
        )
        standups_df["Date"] = pd.to_datetime(standups_df["Date"]).dt.strftime("%Y-%m-%d %H:%M")

        deadlines_df = pd.DataFrame(
            [[d["date"], d["title"], d["status"], d["description"] or ""] for d in collected["deadlines"]],
            columns=["Due", "Title", "Status", "Description"],
        )
        deadlines_df["Due"] = pd.to_datetime(deadlines_df["Due"]).dt.strftime("%Y-%m-%d %H:%M")

        out = io.BytesIO()
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            standups_df.to_excel(writer, index=False, sheet_name="Standups")
            deadlines_df.to_excel(writer, index=False, sheet_name="Deadlines")
        logger.info("Weekly report exported: %d standups, %d deadlines", len(standups_df), len(deadlines_df))
        return out.getvalue()
