"""iCalendar parsing into normalized CalendarEvent records.

Each top-level VEVENT is decoded on its own. A block that fails to decode
becomes a ``ParseFailure``; lenient parsing drops it with a warning, strict
parsing raises ``EventDecodeError``. Only input that is not iCalendar text at
all fails the whole parse.
"""

import logging
from datetime import datetime, tzinfo
from typing import Any, Optional, Union

from icalendar import Calendar, Event as ICalEvent

from .datetime_utils import DateTimeParser
from .exceptions import CalendarParseError, EventDecodeError
from .models import CalendarEvent, ParseFailure, ParseFailureReason, ParseResult
from .timezone_utils import get_local_timezone

logger = logging.getLogger(__name__)

EventOutcome = Union[CalendarEvent, ParseFailure]


def _text_property(component: Any, name: str) -> Optional[str]:
    """Return a text property as str, or None when absent.

    Repeated properties come back from icalendar as a list; the first wins.
    """
    value = component.get(name)
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None
    return str(value)


def _locate_bad_line(text: str) -> Optional[int]:
    """Find the first physical line that cannot be a content line."""
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or line[0] in (" ", "\t"):
            continue
        if ":" not in line:
            return number
    return None


class ICSParser:
    """Parser for iCalendar documents."""

    def __init__(
        self,
        default_timezone: Optional[tzinfo] = None,
        strict: bool = False,
        log: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize ICS parser.

        Args:
            default_timezone: Zone for floating times and all-day dates
                (host local zone when None)
            strict: Raise on the first undecodable VEVENT instead of dropping it
            log: Logger for diagnostics (module logger when None)
        """
        self.default_timezone = default_timezone or get_local_timezone()
        self.strict = strict
        self.log = log or logger
        self._datetime_parser = DateTimeParser(self.default_timezone)

    def parse(self, ics_content: str) -> ParseResult:
        """Parse iCalendar text into events.

        Args:
            ics_content: Raw iCalendar text

        Returns:
            ParseResult with events in source order and any block failures

        Raises:
            CalendarParseError: If the text is not an iCalendar document
            EventDecodeError: If strict and a VEVENT fails to decode
        """
        calendar = self._load_calendar(ics_content)

        result = ParseResult(
            calendar_name=_text_property(calendar, "X-WR-CALNAME"),
            total_components=len(calendar.subcomponents),
        )

        blocks = [c for c in calendar.subcomponents if c.name == "VEVENT"]
        for index, component in enumerate(blocks):
            outcome = self.parse_event_component(component, index)
            if isinstance(outcome, CalendarEvent):
                result.events.append(outcome)
                continue

            if self.strict:
                raise EventDecodeError(outcome)
            self.log.warning("Dropping undecodable event: %s", outcome)
            result.failures.append(outcome)

        self.log.debug(
            "Parsed %d events from %d VEVENT blocks (%d dropped)",
            len(result.events),
            len(blocks),
            len(result.failures),
        )
        return result

    def _load_calendar(self, ics_content: str) -> Calendar:
        if not ics_content or "BEGIN:VCALENDAR" not in ics_content.upper():
            raise CalendarParseError("Input is not iCalendar data: missing BEGIN:VCALENDAR", 1)

        try:
            calendar = Calendar.from_ical(ics_content)
        except (ValueError, KeyError, IndexError) as e:
            raise CalendarParseError(
                f"Unable to parse iCalendar data: {e}", _locate_bad_line(ics_content)
            ) from e

        if calendar.name != "VCALENDAR":
            raise CalendarParseError(f"Expected VCALENDAR root component, found {calendar.name}")
        return calendar

    def parse_event_component(self, component: ICalEvent, index: int = 0) -> EventOutcome:
        """Decode a single VEVENT.

        Args:
            component: iCalendar VEVENT component
            index: Position of the block among the calendar's VEVENTs

        Returns:
            CalendarEvent, or ParseFailure describing why it was rejected
        """
        uid = _text_property(component, "UID") or None

        def failure(reason: ParseFailureReason, message: str) -> ParseFailure:
            return ParseFailure(index=index, uid=uid, reason=reason, message=message)

        errors = getattr(component, "errors", None)
        if errors:
            details = "; ".join(f"{name}: {err}" for name, err in errors)
            return failure(ParseFailureReason.INVALID_PROPERTY, details)

        try:
            start, end, is_all_day = self._parse_event_times(component)
        except ValueError as e:
            # Values decoded but are not a date, date-time or duration
            return failure(ParseFailureReason.INVALID_STRUCTURE, str(e))

        if start is not None and end is not None and end < start:
            self.log.warning(
                "VEVENT %s: DTEND %s is before DTSTART %s, ignoring end",
                uid or f"#{index}",
                end.isoformat(),
                start.isoformat(),
            )
            end = None

        try:
            return CalendarEvent(
                uid=uid,
                summary=_text_property(component, "SUMMARY") or "",
                description=_text_property(component, "DESCRIPTION") or "",
                location=_text_property(component, "LOCATION") or "",
                start=start,
                end=end,
                is_all_day=is_all_day,
            )
        except ValueError as e:
            # pydantic.ValidationError is a ValueError
            return failure(ParseFailureReason.UNEXPECTED, str(e))

    def _parse_event_times(
        self, component: ICalEvent
    ) -> tuple[Optional[datetime], Optional[datetime], bool]:
        """Resolve start, end and the all-day flag.

        End comes from DTEND, else DTSTART + DURATION, else is absent.
        """
        dtstart = component.get("DTSTART")
        if dtstart is None:
            start, is_all_day = None, False
        else:
            start, is_all_day = self._datetime_parser.parse_datetime(dtstart)

        end = self._datetime_parser.parse_datetime_optional(component.get("DTEND"))
        if end is None and start is not None:
            duration = self._datetime_parser.parse_duration(component.get("DURATION"))
            if duration is not None:
                end = start + duration

        return start, end, is_all_day


def parse_ics(
    ics_content: str,
    default_timezone: Optional[tzinfo] = None,
    strict: bool = False,
    log: Optional[logging.Logger] = None,
) -> ParseResult:
    """Parse iCalendar text with a one-off ``ICSParser``."""
    return ICSParser(default_timezone, strict=strict, log=log).parse(ics_content)
