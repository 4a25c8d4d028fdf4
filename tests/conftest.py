"""Shared fixtures for icsprint tests."""

from collections.abc import Generator
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

import pytest

from icsprint.models import CalendarEvent, RenderOptions


@pytest.fixture
def display_tz() -> ZoneInfo:
    """Return a deterministic display time zone.

    Using a fixed zone avoids host-local differences which would make
    month grouping and heading tests flaky.
    """
    return ZoneInfo("America/New_York")


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Keep ICSPRINT_* variables from leaking into tests."""
    for name in (
        "ICSPRINT_URL",
        "ICSPRINT_TIMEZONE",
        "ICSPRINT_LOG_LEVEL",
        "ICSPRINT_DEBUG",
        "ICSPRINT_BEARER_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Return a builder for CalendarEvent with UTC start/end shortcuts."""

    def builder(
        summary: str = "",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        **kwargs: Any,
    ) -> CalendarEvent:
        if start is not None and start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        if end is not None and end.tzinfo is None:
            end = end.replace(tzinfo=timezone.utc)
        return CalendarEvent(summary=summary, start=start, end=end, **kwargs)

    return builder


@pytest.fixture
def all_toggles() -> RenderOptions:
    """Options with every content toggle enabled."""
    return RenderOptions(
        title="Test Calendar",
        include_summary=True,
        include_meta=True,
        include_desc=True,
        include_uid=True,
    )


# ==================== ICS Test Data Fixtures ====================


@pytest.fixture
def sample_ics_simple() -> str:
    """
    Return a simple ICS calendar string with a single event.

    Returns:
        RFC 5545 compliant ICS string with one event:
        - Event: "Team Meeting" on 2024-01-15 10:00-11:00 UTC
        - Includes DTSTART, DTEND, SUMMARY, LOCATION, DESCRIPTION
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//icsprint Test//EN
CALSCALE:GREGORIAN
X-WR-CALNAME:Team
BEGIN:VEVENT
UID:test-event-001@icsprint.test
DTSTART:20240115T100000Z
DTEND:20240115T110000Z
SUMMARY:Team Meeting
LOCATION:Conference Room A
DESCRIPTION:Weekly team sync meeting
DTSTAMP:20240115T090000Z
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_season() -> str:
    """
    Return a three-event calendar.

    - "Practice" in March 2025 with only a location (no DTEND)
    - "Home Game vs Rivals" in March 2025 with start and end
    - "Team Party" with no DTSTART
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//icsprint Test//EN
BEGIN:VEVENT
UID:practice-1@icsprint.test
DTSTAMP:20250101T000000Z
DTSTART:20250310T220000Z
SUMMARY:Practice
LOCATION:North Field
END:VEVENT
BEGIN:VEVENT
UID:game-1@icsprint.test
DTSTAMP:20250101T000000Z
DTSTART:20250315T230000Z
DTEND:20250316T010000Z
SUMMARY:Home Game vs Rivals
LOCATION:Main Stadium
DESCRIPTION:Bring a jersey
END:VEVENT
BEGIN:VEVENT
UID:party-1@icsprint.test
DTSTAMP:20250101T000000Z
SUMMARY:Team Party
DESCRIPTION:Date to be announced
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_with_bad_event() -> str:
    """
    Return a calendar whose second VEVENT has an unparseable DTSTART.
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//icsprint Test//EN
BEGIN:VEVENT
UID:good-1@icsprint.test
DTSTAMP:20250101T000000Z
DTSTART:20250401T150000Z
SUMMARY:Good One
END:VEVENT
BEGIN:VEVENT
UID:bad-1@icsprint.test
DTSTAMP:20250101T000000Z
DTSTART:not-a-date
SUMMARY:Broken
END:VEVENT
BEGIN:VEVENT
UID:good-2@icsprint.test
DTSTAMP:20250101T000000Z
DTSTART:20250402T150000Z
SUMMARY:Good Two
END:VEVENT
END:VCALENDAR
"""
