"""Chronological ordering of events."""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable
from typing import Optional

from .models import CalendarEvent

logger = logging.getLogger(__name__)

SortKey = tuple[int, float, tuple[str, str, str]]


def collation_key(text: str) -> tuple[str, str, str]:
    """Locale-style ordering key that does not depend on the process locale.

    Compares letters first, ignoring case and accents, then accents, then
    case with lowercase first, so ``"apple" < "Banana" < "éclair" < "zebra"``.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    # swapcase puts lowercase before uppercase on the final tie-break
    return (base.casefold(), decomposed.casefold(), text.swapcase())


def event_sort_key(event: CalendarEvent) -> SortKey:
    """Sort key: dated events by instant, then undated events by summary."""
    if event.start is None:
        return (1, 0.0, collation_key(event.summary))
    return (0, event.start.timestamp(), ("", "", ""))


def sort_events(
    events: Iterable[CalendarEvent],
    log: Optional[logging.Logger] = None,
) -> list[CalendarEvent]:
    """Return events in display order.

    Events with a start come first, ascending by instant. Events without a
    start follow, ordered by summary. The sort is stable, so events with equal
    keys keep their input order.
    """
    ordered = sorted(events, key=event_sort_key)
    (log or logger).debug("Sorted %d events", len(ordered))
    return ordered
