"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6

CALENDAR_STRIP_DAYS = 14

DEADLINE_LOOKAHEAD_DAYS = 3
DEADLINE_WIDGET_LIMIT = 3
TASK_DUE_SOON_DAYS = 2

ANNOUNCEMENT_LOOKAHEAD_DAYS = 7
ANNOUNCEMENT_LIMIT = 5

WEEKLY_REPORT_DAYS = 7

AVATAR_FALLBACK_URL = "https://ui-avatars.com/api/?name={name}"
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp"})
