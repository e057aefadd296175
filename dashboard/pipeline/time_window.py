"""Conversion of operator-entered local date-times into UTC query bounds."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dashboard.pipeline.exceptions import ValidationError

INPUT_FORMAT = "%Y-%m-%dT%H:%M"


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive UTC range: start <= created_at <= end."""

    start: datetime
    end: datetime

    @property
    def start_iso(self) -> str:
        return _to_iso(self.start)

    @property
    def end_iso(self) -> str:
        return _to_iso(self.end)


def _to_iso(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def resolve_timezone(name: str = "") -> tzinfo | None:
    """Return the named IANA zone, or None for the machine's local zone.

    None is passed straight to ``datetime.astimezone``, which applies the
    system's rules (including DST) for each individual date.
    """
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Unknown timezone '{name}'") from exc


def _parse_local(value: str, tz: tzinfo | None, label: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {label} date '{value}'") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz) if tz is not None else parsed.astimezone()
    return parsed.astimezone(timezone.utc)


def normalize_window(
    start: str | None, end: str | None, tz: tzinfo | None
) -> TimeWindow:
    """Validate the operator's start/end strings and convert them to UTC bounds.

    Args:
        start: Local date-time such as ``2024-01-01T00:00``.
        end: Local date-time, same format.
        tz: Zone used for inputs without an explicit offset; None means the
            machine's local zone.

    Raises:
        ValidationError: if either value is empty or unparseable, or start is after end.
    """
    start = (start or "").strip()
    end = (end or "").strip()
    if not start or not end:
        raise ValidationError("Please select both start and end dates")

    start_utc = _parse_local(start, tz, "start")
    end_utc = _parse_local(end, tz, "end")
    if start_utc > end_utc:
        raise ValidationError("Start date must be before end date")
    return TimeWindow(start=start_utc, end=end_utc)


def format_for_input(value: datetime) -> str:
    return value.strftime(INPUT_FORMAT)


def last_day_window(now: datetime, tz: tzinfo | None) -> tuple[str, str]:
    """Input strings covering the 24 hours up to the aware instant now, shown in tz."""
    start = (now - timedelta(hours=24)).astimezone(tz)
    return format_for_input(start), format_for_input(now.astimezone(tz))


def format_timestamp(value: datetime, tz: tzinfo | None) -> str:
    """Display form, e.g. ``01/02/2024, 03:04:05 PM UTC``."""
    return value.astimezone(tz).strftime("%m/%d/%Y, %I:%M:%S %p %Z")
