"""Regex event filtering for icsprint."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Optional

from .exceptions import InvalidPatternError
from .models import CalendarEvent, RenderOptions

logger = logging.getLogger(__name__)


class EventMatcher:
    """Compiled filter predicate over an event's summary, description and location."""

    def __init__(self, pattern: str, case_sensitive: bool = False, invert: bool = False):
        """Compile the pattern.

        Args:
            pattern: Regular expression searched anywhere in the haystack
            case_sensitive: Match case exactly (default is case-insensitive)
            invert: Keep events that do NOT match

        Raises:
            InvalidPatternError: If the pattern does not compile
        """
        flags = 0 if case_sensitive else re.IGNORECASE
        try:
            self._regex = re.compile(pattern, flags)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e

        self.pattern = pattern
        self.case_sensitive = case_sensitive
        self.invert = invert

    def matches(self, event: CalendarEvent) -> bool:
        """Return True if the pattern is found in the event's haystack."""
        return self._regex.search(event.haystack) is not None

    def __call__(self, event: CalendarEvent) -> bool:
        """Return True if the event should be kept."""
        return self.matches(event) != self.invert

    def __repr__(self) -> str:
        return (
            f"EventMatcher(pattern={self.pattern!r}, case_sensitive={self.case_sensitive}, "
            f"invert={self.invert})"
        )


def build_matcher(options: RenderOptions) -> Optional[EventMatcher]:
    """Build the matcher for a run, or None when no pattern is configured."""
    if not options.pattern:
        return None
    return EventMatcher(options.pattern, options.case_sensitive, options.invert)


def filter_events(
    events: Iterable[CalendarEvent],
    matcher: Optional[EventMatcher],
    log: Optional[logging.Logger] = None,
) -> list[CalendarEvent]:
    """Keep the events accepted by the matcher, preserving order.

    A ``None`` matcher keeps every event.
    """
    log = log or logger
    events = list(events)
    if matcher is None:
        return events

    kept = [e for e in events if matcher(e)]
    log.debug("%r kept %d of %d events", matcher, len(kept), len(events))
    return kept
