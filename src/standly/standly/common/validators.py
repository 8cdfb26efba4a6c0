from __future__ import annotations

import re

from ..core.exceptions import ValidationError

EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")
URL_REGEX = re.compile(r"^https?://\S+$", re.IGNORECASE)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    email = (value or "").strip().lower()
    if not EMAIL_REGEX.match(email):
        raise ValidationError("Invalid email address")
    return email


def require_url(value: str, field_name: str = "URL") -> str:
    url = require_non_empty(value, field_name)
    if not URL_REGEX.match(url):
        raise ValidationError(f"{field_name} must start with http:// or https://")
    return url


def optional_text(value: str | None) -> str | None:
    v = (value or "").strip()
    return v or None


def require_int(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
