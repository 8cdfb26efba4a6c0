"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the rules live in the services.
"""

import importlib

from config import get_settings_module

from src.standly.standly.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    print(container.standup_service.calendar_strip(user_id=1))
    for item in container.leave_service.announcements():
        print(f"{item['first_name']} will be on {item['type_label']}: {item['label']}")
    print(container.task_service.upcoming_deadlines())


if __name__ == "__main__":
    main()
