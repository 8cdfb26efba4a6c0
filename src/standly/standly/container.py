from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any, Optional

from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLHolidayRepository, MySQLLeaveRepository
from .leaves.repository import HolidayRepository, LeaveRepository
from .leaves.service import HolidayService, LeaveService
from .links.mysql_link_repository import MySQLQuickLinkRepository
from .links.repository import QuickLinkRepository
from .links.service import QuickLinkService
from .reports.providers import AbstractAIProvider, GeminiProvider
from .reports.service import ReportService
from .standups.mysql_standup_repository import MySQLStandupRepository
from .standups.repository import StandupRepository
from .standups.service import StandupService
from .storage.local_storage import FileStorage, LocalFileStorage
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .users.mysql_profile_repository import MySQLProfileRepository
from .users.repository import ProfileRepository
from .users.service import AuthService, ProfileService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    storage: Optional[FileStorage]

    profiles_repo: ProfileRepository
    standups_repo: StandupRepository
    tasks_repo: TaskRepository
    leaves_repo: LeaveRepository
    holidays_repo: HolidayRepository
    links_repo: QuickLinkRepository

    auth_service: AuthService
    profile_service: ProfileService
    standup_service: StandupService
    task_service: TaskService
    leave_service: LeaveService
    holiday_service: HolidayService
    link_service: QuickLinkService
    report_service: ReportService


def _setting(settings: Any, name: str, default: Any = None) -> Any:
    if settings is None:
        return default
    if isinstance(settings, dict):
        return settings.get(name, default)
    return getattr(settings, name, default)


def wire_services(
    *,
    profiles_repo: ProfileRepository,
    standups_repo: StandupRepository,
    tasks_repo: TaskRepository,
    leaves_repo: LeaveRepository,
    holidays_repo: HolidayRepository,
    links_repo: QuickLinkRepository,
    storage: Optional[FileStorage] = None,
    settings: ModuleType | dict | None = None,
    summary_provider: Optional[AbstractAIProvider] = None,
    draft_provider: Optional[AbstractAIProvider] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services over the given repositories (MySQL in the app, fakes in tests)."""
    return Container(
        conn=conn,
        storage=storage,
        profiles_repo=profiles_repo,
        standups_repo=standups_repo,
        tasks_repo=tasks_repo,
        leaves_repo=leaves_repo,
        holidays_repo=holidays_repo,
        links_repo=links_repo,
        auth_service=AuthService(profiles_repo, access_code=_setting(settings, "ACCESS_CODE", "")),
        profile_service=ProfileService(profiles_repo, storage),
        standup_service=StandupService(standups_repo, profiles_repo),
        task_service=TaskService(tasks_repo, profiles_repo),
        leave_service=LeaveService(leaves_repo, holidays_repo, profiles_repo),
        holiday_service=HolidayService(holidays_repo),
        link_service=QuickLinkService(
            links_repo,
            storage,
            virtual_office_url=_setting(settings, "VIRTUAL_OFFICE_URL", ""),
            virtual_office_password=_setting(settings, "VIRTUAL_OFFICE_PASSWORD", ""),
        ),
        report_service=ReportService(
            standups_repo,
            profiles_repo,
            tasks_repo,
            summary_provider=summary_provider,
            draft_provider=draft_provider,
        ),
    )


def build_container(*, db_config: dict, settings: ModuleType | dict | None = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    api_key = _setting(settings, "GEMINI_API_KEY", "")
    storage = LocalFileStorage(
        _setting(settings, "UPLOAD_DIR", "uploads"),
        public_url=_setting(settings, "PUBLIC_UPLOAD_URL", "/uploads"),
        max_bytes=_setting(settings, "MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
    )

    return wire_services(
        profiles_repo=MySQLProfileRepository(conn),
        standups_repo=MySQLStandupRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        links_repo=MySQLQuickLinkRepository(conn),
        storage=storage,
        settings=settings,
        summary_provider=GeminiProvider(api_key, _setting(settings, "GEMINI_MODEL")),
        draft_provider=GeminiProvider(api_key, _setting(settings, "GEMINI_DRAFT_MODEL")),
        conn=conn,
    )
