"""Tests for utils/dt_utils.py - pure date/time helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from custom_components.habitquest.utils import dt_utils

CHICAGO = ZoneInfo("America/Chicago")


class TestTodayAndNow:
    """Tests for current date/time helpers."""

    @freeze_time("2026-03-10 03:30:00", tz_offset=0)
    def test_today_uses_timezone(self) -> None:
        """Test 03:30 UTC is still the previous day in Chicago."""
        assert dt_utils.dt_today_local(ZoneInfo("UTC")) == date(2026, 3, 10)
        assert dt_utils.dt_today_local(CHICAGO) == date(2026, 3, 9)

    @freeze_time("2026-03-10 12:00:00", tz_offset=0)
    def test_now_is_aware(self) -> None:
        """Test now helpers return aware datetimes."""
        assert dt_utils.dt_now_local().tzinfo is not None
        assert dt_utils.dt_now_local(CHICAGO).hour == 7
        assert dt_utils.dt_now_iso(ZoneInfo("UTC")) == "2026-03-10T12:00:00+00:00"


class TestAsLocal:
    """Tests for as_local."""

    def test_naive_is_treated_as_local(self) -> None:
        """Test naive datetimes keep their wall-clock time."""
        result = dt_utils.as_local(datetime(2026, 3, 10, 6, 30), CHICAGO)

        assert result.hour == 6
        assert result.tzinfo == CHICAGO

    def test_aware_is_converted(self) -> None:
        """Test aware datetimes are converted to the local zone."""
        result = dt_utils.as_local(datetime(2026, 3, 10, 12, 0, tzinfo=UTC), CHICAGO)

        assert result.hour == 7  # CDT, UTC-5


class TestParsing:
    """Tests for dt_parse_date and dt_parse."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2026-03-10", date(2026, 3, 10)),
            ("2026-03-10T08:00:00+00:00", date(2026, 3, 10)),
            (date(2026, 3, 10), date(2026, 3, 10)),
            (datetime(2026, 3, 10, 23, 0), date(2026, 3, 10)),
            ("", None),
            (None, None),
            ("not a date", None),
            (12345, None),
        ],
    )
    def test_parse_date(self, value: object, expected: date | None) -> None:
        """Test accepted and rejected date inputs."""
        assert dt_utils.dt_parse_date(value) == expected  # type: ignore[arg-type]

    def test_parse_datetime(self) -> None:
        """Test ISO strings become aware local datetimes."""
        parsed = dt_utils.dt_parse("2026-03-10T12:00:00+00:00", CHICAGO)

        assert parsed is not None
        assert parsed.tzinfo == CHICAGO
        assert parsed.hour == 7

    def test_parse_datetime_invalid(self) -> None:
        """Test garbage yields None."""
        assert dt_utils.dt_parse("yesterday") is None
        assert dt_utils.dt_parse(None) is None


class TestCalendarArithmetic:
    """Tests for dt_days_between and dt_months_before."""

    def test_days_between(self) -> None:
        """Test signed whole-day differences."""
        assert dt_utils.dt_days_between(date(2026, 1, 1), date(2026, 1, 3)) == 2
        assert dt_utils.dt_days_between(date(2026, 1, 3), date(2026, 1, 1)) == -2
        assert dt_utils.dt_days_between(date(2026, 2, 28), date(2026, 3, 1)) == 1

    def test_months_before_clamps_month_end(self) -> None:
        """Test 31 March minus one month is 28 February."""
        assert dt_utils.dt_months_before(date(2026, 3, 31), 1) == date(2026, 2, 28)
        assert dt_utils.dt_months_before(date(2026, 3, 10), 1) == date(2026, 2, 10)
        assert dt_utils.dt_months_before(date(2026, 1, 15), 1) == date(2025, 12, 15)
