from __future__ import annotations

from datetime import date, datetime

import pytest

from src.standly.standly.common.datetime_utils import parse_iso_date, parse_iso_datetime
from src.standly.standly.core.exceptions import ValidationError


def test_parse_iso_date_accepts_date_and_datetime_strings():
    assert parse_iso_date(" 2026-10-17 ") == date(2026, 10, 17)
    assert parse_iso_date("2026-10-17T09:30:00") == date(2026, 10, 17)
    assert parse_iso_date("2026-10-17 09:30") == date(2026, 10, 17)


@pytest.mark.parametrize("value", ["2026-10-17garbage", "2026-13-01", "17/10/2026", "", None])
def test_parse_iso_date_rejects_junk(value):
    with pytest.raises(ValidationError):
        parse_iso_date(value)


def test_bare_date_takes_current_time_of_day():
    now = datetime(2026, 3, 4, 9, 15, 42)
    assert parse_iso_datetime("2026-03-05", now=now) == datetime(2026, 3, 5, 9, 15)
    assert parse_iso_datetime("2026-03-05T18:00:00", now=now) == datetime(2026, 3, 5, 18, 0)
