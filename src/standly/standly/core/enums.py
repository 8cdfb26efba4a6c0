from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Preset team positions offered at sign-up (custom text is also accepted)."""

    DEVELOPER = "Developer"
    QA = "Quality Assurance"
    PRODUCT_OWNER = "Product Owner"
    PRODUCT_MANAGER = "Product Manager"


class Mood(str, Enum):
    HAPPY = "happy"
    NEUTRAL = "neutral"
    STRESSED = "stressed"


class ReactionType(str, Enum):
    """Feed reactions, in display order."""

    LIKE = "like"
    LOVE = "love"
    HAHA = "haha"
    WOW = "wow"
    SAD = "sad"
    ANGRY = "angry"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskType(str, Enum):
    TASK = "task"
    DEADLINE = "deadline"


class LeaveType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    WELLNESS = "wellness"
    BIRTHDAY = "birthday"


class QuickLinkCategory(str, Enum):
    GENERAL = "General"
    DEVELOPMENT = "Development"
    DESIGN = "Design"
    RESOURCES = "Resources"
    SOCIAL = "Social"
    TOOLS = "Tools"


class CalendarDayStatus(str, Enum):
    """State of one day in a user's standup strip."""

    PRESENT = "present"
    WEEKEND = "weekend"
    MISSED = "missed"
    PENDING = "pending"
