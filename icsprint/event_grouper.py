"""Month grouping of sorted events."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import tzinfo
from typing import Optional

from .datetime_utils import format_month_year
from .models import CalendarEvent, EventGroup
from .timezone_utils import get_local_timezone

logger = logging.getLogger(__name__)

UNKNOWN_GROUP_KEY = "Unknown"


def month_key(event: CalendarEvent, tz: tzinfo) -> str:
    """Return the group label for an event, e.g. ``"March 2025"``."""
    if event.start is None:
        return UNKNOWN_GROUP_KEY
    return format_month_year(event.start, tz)


def group_events(
    events: Iterable[CalendarEvent],
    tz: Optional[tzinfo] = None,
    log: Optional[logging.Logger] = None,
) -> list[EventGroup]:
    """Split an already sorted sequence into runs of equal month keys.

    A new group starts whenever the key changes, so equal keys that are not
    adjacent produce separate groups. Empty input gives no groups.
    """
    tz = tz or get_local_timezone()
    groups: list[EventGroup] = []

    for event in events:
        key = month_key(event, tz)
        if not groups or groups[-1].key != key:
            groups.append(EventGroup(key=key))
        groups[-1].events.append(event)

    (log or logger).debug("Formed %d groups in %s", len(groups), tz)
    return groups
