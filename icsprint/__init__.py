"""icsprint - turn a calendar subscription into a printable HTML document.

The pipeline is a chain of pure stages: parse, filter, sort, group, render.
``render_calendar`` runs it on text already in hand; ``generate_document``
fetches the subscription first.
"""

__version__ = "1.0.0"

from .exceptions import (
    CalendarParseError,
    EventDecodeError,
    ICSFetchError,
    ICSPrintError,
    InvalidPatternError,
    InvalidTimezoneError,
)
from .models import CalendarEvent, EventGroup, ICSSource, RenderOptions, RenderOutcome
from .pipeline import generate_document, render_calendar

__all__ = [
    "CalendarEvent",
    "CalendarParseError",
    "EventDecodeError",
    "EventGroup",
    "ICSFetchError",
    "ICSPrintError",
    "ICSSource",
    "InvalidPatternError",
    "InvalidTimezoneError",
    "RenderOptions",
    "RenderOutcome",
    "__version__",
    "generate_document",
    "render_calendar",
]
