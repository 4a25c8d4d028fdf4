"""Calendar-to-document pipeline.

    raw text -> parse -> filter -> sort -> group/render -> document

``render_calendar`` runs the pure, synchronous part on text that has already
been fetched. ``generate_document`` validates the filter pattern, awaits the
fetch once, then hands the text to ``render_calendar``. No stage keeps state
between runs; each accepts an optional logger.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any, Optional

import httpx

from .event_filter import EventMatcher, build_matcher, filter_events
from .event_grouper import group_events
from .event_sorter import sort_events
from .fetcher import ICSFetcher
from .html_renderer import HTMLRenderer
from .ics_parser import ICSParser
from .models import ICSSource, RenderOptions, RenderOutcome
from .timezone_utils import get_display_timezone

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Calendar"


def render_calendar(
    ics_content: str,
    options: RenderOptions,
    display_timezone: Optional[tzinfo] = None,
    strict: bool = False,
    log: Optional[logging.Logger] = None,
    matcher: Optional[EventMatcher] = None,
) -> RenderOutcome:
    """Turn iCalendar text into a rendered document.

    Args:
        ics_content: Fully fetched iCalendar text
        options: Filter and render options
        display_timezone: Zone for grouping and display (host local zone when None)
        strict: Fail on the first undecodable event instead of dropping it
        log: Logger passed to every stage (module logger when None)
        matcher: Pre-built matcher; built from ``options`` when None

    Returns:
        RenderOutcome with the document and considered/kept counts

    Raises:
        InvalidPatternError: If ``options.pattern`` does not compile
        CalendarParseError: If the text is not iCalendar data
        EventDecodeError: If strict and an event fails to decode
    """
    log = log or logger
    if matcher is None:
        matcher = build_matcher(options)
    tz = display_timezone or get_display_timezone()

    parsed = ICSParser(tz, strict=strict, log=log).parse(ics_content)
    kept = filter_events(parsed.events, matcher, log=log)
    ordered = sort_events(kept, log=log)

    # An explicit title wins over the feed's X-WR-CALNAME
    title = options.title or parsed.calendar_name or DEFAULT_TITLE
    groups = group_events(ordered, tz, log=log)
    document = HTMLRenderer(tz, log=log).render_groups(title, groups, options)

    outcome = RenderOutcome(
        document=document,
        events_total=len(parsed.events),
        events_kept=len(ordered),
        group_count=len(groups),
        parse_failures=parsed.failures,
    )
    log.info("Kept %d of %d events", outcome.events_kept, outcome.events_total)
    if parsed.failures:
        log.warning("%d event(s) could not be decoded and were dropped", len(parsed.failures))
    return outcome


async def generate_document(
    source: ICSSource,
    options: RenderOptions,
    settings: Any = None,
    display_timezone: Optional[tzinfo] = None,
    strict: bool = False,
    log: Optional[logging.Logger] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> RenderOutcome:
    """Fetch a calendar and render it.

    The filter pattern is compiled before any network work so an invalid
    pattern fails immediately.

    Args:
        source: Calendar subscription to fetch
        options: Filter and render options
        settings: Fetch retry settings (``max_retries``, ``retry_backoff_factor``)
        display_timezone: Zone for grouping and display (host local zone when None)
        strict: Fail on the first undecodable event
        log: Logger passed to every stage
        client: Optional shared httpx client

    Returns:
        RenderOutcome for the fetched calendar
    """
    log = log or logger
    matcher = build_matcher(options)
    tz = display_timezone or get_display_timezone()

    async with ICSFetcher(settings, client=client, log=log) as fetcher:
        ics_content = await fetcher.fetch_ics(source)

    return render_calendar(ics_content, options, tz, strict=strict, log=log, matcher=matcher)
