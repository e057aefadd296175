import os
import time
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from dashboard.pipeline.exceptions import ValidationError
from dashboard.pipeline.time_window import (
    format_for_input,
    format_timestamp,
    last_day_window,
    normalize_window,
    resolve_timezone,
)


@pytest.fixture()
def london_system_zone():
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "Europe/London"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()


class TestNormalizeWindow:
    def test_converts_local_inputs_to_utc(self) -> None:
        window = normalize_window(
            "2024-01-01T05:30", "2024-01-02T05:30", ZoneInfo("Asia/Kolkata")
        )
        assert window.start == datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
        assert window.end == datetime(2024, 1, 2, 0, 0, tzinfo=timezone.utc)

    def test_iso_bounds_use_milliseconds_and_z(self, utc: timezone) -> None:
        window = normalize_window("2024-01-01T00:00", "2024-01-01T12:00", utc)
        assert window.start_iso == "2024-01-01T00:00:00.000Z"
        assert window.end_iso == "2024-01-01T12:00:00.000Z"

    def test_equal_bounds_are_allowed(self, utc: timezone) -> None:
        window = normalize_window("2024-01-01T00:00", "2024-01-01T00:00", utc)
        assert window.start == window.end

    def test_start_after_end_raises(self, utc: timezone) -> None:
        with pytest.raises(ValidationError, match="Start date must be before end date"):
            normalize_window("2024-01-01T00:00", "2023-12-31T00:00", utc)

    @pytest.mark.parametrize(("start", "end"), [("", "2024-01-01T00:00"), ("2024-01-01T00:00", None)])
    def test_missing_input_raises(self, start: str | None, end: str | None, utc: timezone) -> None:
        with pytest.raises(ValidationError, match="both start and end"):
            normalize_window(start, end, utc)

    def test_unparseable_input_raises(self, utc: timezone) -> None:
        with pytest.raises(ValidationError, match="Invalid start date"):
            normalize_window("yesterday", "2024-01-01T00:00", utc)

    def test_named_zone_applies_dst_per_date(self) -> None:
        london = ZoneInfo("Europe/London")
        winter = normalize_window("2024-01-15T12:00", "2024-01-15T13:00", london)
        summer = normalize_window("2024-07-15T12:00", "2024-07-15T13:00", london)
        assert winter.start_iso == "2024-01-15T12:00:00.000Z"
        assert summer.start_iso == "2024-07-15T11:00:00.000Z"


class TestSystemLocalZone:
    def test_resolves_to_none(self) -> None:
        assert resolve_timezone("") is None

    @pytest.mark.usefixtures("london_system_zone")
    def test_winter_and_summer_inputs_use_their_own_offsets(self) -> None:
        tz = resolve_timezone("")
        winter = normalize_window("2024-01-15T12:00", "2024-01-15T13:00", tz)
        summer = normalize_window("2024-07-15T12:00", "2024-07-15T13:00", tz)
        assert winter.start_iso == "2024-01-15T12:00:00.000Z"
        assert summer.start_iso == "2024-07-15T11:00:00.000Z"

    @pytest.mark.usefixtures("london_system_zone")
    def test_timestamps_carry_the_dated_abbreviation(self) -> None:
        winter = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        summer = datetime(2024, 7, 15, 11, 0, tzinfo=timezone.utc)
        assert format_timestamp(winter, None) == "01/15/2024, 12:00:00 PM GMT"
        assert format_timestamp(summer, None) == "07/15/2024, 12:00:00 PM BST"

    @pytest.mark.usefixtures("london_system_zone")
    def test_last_day_window_across_dst_change(self) -> None:
        now = datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc)
        assert last_day_window(now, None) == ("2024-03-30T12:00", "2024-03-31T13:00")


class TestHelpers:
    def test_last_day_window(self, utc: timezone) -> None:
        now = datetime(2024, 3, 2, 15, 45, tzinfo=utc)
        assert last_day_window(now, utc) == ("2024-03-01T15:45", "2024-03-02T15:45")

    def test_last_day_window_in_named_zone(self) -> None:
        now = datetime(2024, 3, 2, 0, 0, tzinfo=timezone.utc)
        assert last_day_window(now, ZoneInfo("Asia/Kolkata")) == (
            "2024-03-01T05:30",
            "2024-03-02T05:30",
        )

    def test_format_for_input(self) -> None:
        assert format_for_input(datetime(2024, 1, 5, 7, 3)) == "2024-01-05T07:03"

    def test_format_timestamp_includes_zone_abbreviation(self, utc: timezone) -> None:
        value = datetime(2024, 1, 2, 15, 4, 5, tzinfo=utc)
        assert format_timestamp(value, utc) == "01/02/2024, 03:04:05 PM UTC"

    def test_format_timestamp_converts_zone(self) -> None:
        value = datetime(2024, 1, 2, 0, 0, tzinfo=timezone.utc)
        text = format_timestamp(value, ZoneInfo("Asia/Kolkata"))
        assert text == "01/02/2024, 05:30:00 AM IST"

    def test_resolve_named_timezone(self) -> None:
        assert resolve_timezone("Asia/Kolkata") == ZoneInfo("Asia/Kolkata")

    def test_unknown_timezone_raises(self) -> None:
        with pytest.raises(ValidationError, match="Unknown timezone"):
            resolve_timezone("Mars/Olympus")

    def test_window_spans_one_day(self, utc: timezone) -> None:
        start, end = last_day_window(datetime(2024, 1, 1, tzinfo=utc), utc)
        window = normalize_window(start, end, utc)
        assert window.end - window.start == timedelta(days=1)
