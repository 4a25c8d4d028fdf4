"""DateTime resolution and display formatting for icsprint.

Resolution turns iCalendar DTSTART/DTEND/DURATION values into timezone-aware
instants. Formatting turns instants into English display strings; month and
weekday names come from fixed tables so output does not depend on the process
locale.
"""

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

EN_DASH = "–"
MIDDLE_DOT = "·"


class DateTimeParser:
    """Resolve iCalendar date/time properties to aware datetimes."""

    def __init__(self, default_timezone: tzinfo):
        """Initialize datetime parser.

        Args:
            default_timezone: Zone used for floating times and DATE values
        """
        self.default_timezone = default_timezone

    def parse_datetime(self, dt_prop: Any) -> tuple[datetime, bool]:
        """Resolve a DTSTART/DTEND property.

        Args:
            dt_prop: iCalendar property with a ``.dt`` attribute

        Returns:
            Tuple of (aware datetime, is_date_value)

        Raises:
            ValueError: If the value is not a date or date-time
        """
        value = getattr(dt_prop, "dt", dt_prop)

        if isinstance(value, datetime):
            if value.tzinfo is None:
                logger.debug("Floating time %s interpreted in %s", value, self.default_timezone)
                return value.replace(tzinfo=self.default_timezone), False
            return value, False

        if isinstance(value, date):
            return datetime.combine(value, time.min, tzinfo=self.default_timezone), True

        raise ValueError(f"unsupported date/time value {value!r}")

    def parse_datetime_optional(self, dt_prop: Any) -> Optional[datetime]:
        """Resolve an optional property, returning None when absent."""
        if dt_prop is None:
            return None
        return self.parse_datetime(dt_prop)[0]

    def parse_duration(self, duration_prop: Any) -> Optional[timedelta]:
        """Resolve a DURATION property, returning None when absent."""
        if duration_prop is None:
            return None
        value = getattr(duration_prop, "dt", duration_prop)
        if not isinstance(value, timedelta):
            raise ValueError(f"unsupported duration value {value!r}")
        return value


def format_month_year(dt: datetime, tz: tzinfo) -> str:
    """Format an instant as e.g. ``"March 2025"`` in the given zone."""
    local = dt.astimezone(tz)
    return f"{MONTH_NAMES[local.month - 1]} {local.year:04d}"


def format_clock(dt: datetime) -> str:
    """Format a local datetime as a 12-hour clock time, e.g. ``"7:05 PM"``."""
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_short_date(dt: datetime) -> str:
    """Format a local datetime as e.g. ``"Mar 15"``."""
    return f"{MONTH_NAMES[dt.month - 1][:3]} {dt.day}"


def format_long_date(dt: datetime) -> str:
    """Format a local datetime as e.g. ``"Saturday, March 15, 2025"``."""
    return f"{WEEKDAY_NAMES[dt.weekday()]}, {MONTH_NAMES[dt.month - 1]} {dt.day}, {dt.year}"


def format_heading(start: Optional[datetime], tz: tzinfo, is_all_day: bool = False) -> Optional[str]:
    """Format the date heading for an event entry.

    Returns None when the start is absent so the caller can use its placeholder.
    """
    if start is None:
        return None
    local = start.astimezone(tz)
    if is_all_day:
        return format_long_date(local)
    return f"{format_long_date(local)} {MIDDLE_DOT} {format_clock(local)}"


def _format_side(dt: datetime, is_all_day: bool) -> str:
    return format_short_date(dt) if is_all_day else format_clock(dt)


def format_time_range(
    start: Optional[datetime],
    end: Optional[datetime],
    tz: tzinfo,
    is_all_day: bool = False,
) -> Optional[str]:
    """Format a start/end pair as ``"start – end"``.

    Either side may be missing, in which case only the other side is returned.
    Returns None when both are missing.

    Examples:
        >>> from datetime import timezone
        >>> s = datetime(2025, 3, 15, 19, 0, tzinfo=timezone.utc)
        >>> format_time_range(s, s + timedelta(hours=2), timezone.utc)
        '7:00 PM – 9:00 PM'
    """
    local_start = start.astimezone(tz) if start is not None else None
    local_end = end.astimezone(tz) if end is not None else None

    if local_start is None and local_end is None:
        return None
    if local_end is None:
        return _format_side(local_start, is_all_day)
    if local_start is None:
        return _format_side(local_end, is_all_day)

    if is_all_day:
        # DTEND of an all-day event is exclusive
        last_day = local_end - timedelta(days=1)
        if last_day.date() <= local_start.date():
            return "All day"
        return f"{format_short_date(local_start)} {EN_DASH} {format_short_date(last_day)}"

    if local_start.date() == local_end.date():
        return f"{format_clock(local_start)} {EN_DASH} {format_clock(local_end)}"
    return (
        f"{format_short_date(local_start)}, {format_clock(local_start)} {EN_DASH} "
        f"{format_short_date(local_end)}, {format_clock(local_end)}"
    )
