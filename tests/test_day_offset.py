from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from daystamp.core.services.day_offset import day_offset, format_watermark_text, utc_calendar_date

TARGET = date(2024, 10, 3)


@pytest.mark.parametrize("k", [0, 1, 2, 30, 365, 1000])
@pytest.mark.parametrize("hour,minute", [(0, 0), (12, 30), (23, 59)])
def test_offset_counts_calendar_days(k, hour, minute):
    start = datetime(2024, 10, 3, 6, 15, tzinfo=timezone.utc)
    observed = datetime(2024, 10, 3, hour, minute, tzinfo=timezone.utc) + timedelta(days=k)
    assert day_offset(start, observed) == k


def test_same_utc_day_is_zero_regardless_of_time():
    assert day_offset(TARGET, datetime(2024, 10, 3, 0, 0, 1, tzinfo=timezone.utc)) == 0
    assert day_offset(TARGET, datetime(2024, 10, 3, 23, 59, 59, tzinfo=timezone.utc)) == 0


def test_before_target_is_negative():
    assert day_offset(TARGET, datetime(2024, 10, 1, 18, 0, tzinfo=timezone.utc)) == -2
    assert day_offset(TARGET, date(2023, 10, 3)) == -366


def test_crosses_month_and_year_boundaries():
    assert day_offset(date(2024, 12, 31), date(2025, 1, 1)) == 1
    assert day_offset(date(2024, 2, 28), date(2024, 3, 1)) == 2


def test_aware_timestamps_are_truncated_in_utc():
    # 01:00 in UTC+2 on the 4th is still the 3rd in UTC.
    observed = datetime(2024, 10, 4, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    assert utc_calendar_date(observed) == date(2024, 10, 3)
    assert day_offset(TARGET, observed) == 0


def test_naive_datetime_is_taken_as_utc():
    assert day_offset(TARGET, datetime(2024, 10, 5, 23, 0)) == 2


def test_format_watermark_text():
    ts = datetime(2024, 10, 10, 8, 5, 9, tzinfo=timezone.utc)
    assert format_watermark_text(ts, 7) == "2024-10-10 08:05:09 (7)"
    assert format_watermark_text(ts, -3) == "2024-10-10 08:05:09 (-3)"
