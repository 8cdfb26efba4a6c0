from __future__ import annotations

from datetime import date, datetime, time

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    A trailing time part (``T...`` or `` ...``) is accepted and dropped.
    """
    v = (value or "").strip()
    if len(v) > 10 and v[10] in "T ":
        v = v[:10]
    try:
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def parse_iso_datetime(value: str, *, now: datetime | None = None) -> datetime:
    """Parse an ISO datetime, or a bare date combined with the current time of day.

    Timezone-aware values are converted to naive local time, which is what the
    database stores.
    """
    v = (value or "").strip()
    if not v:
        raise ValidationError("Date is required")

    if len(v) == 10:
        now = now or now_local()
        return datetime.combine(parse_iso_date(v), now.time().replace(second=0, microsecond=0))

    try:
        parsed = datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid datetime: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_optional_time(value: str | None) -> time | None:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.strptime(v[:5], "%H:%M").time()
    except ValueError:
        raise ValidationError("Invalid time (HH:MM)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iso(value: date | datetime | time | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()
