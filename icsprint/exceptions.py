"""Exception hierarchy for icsprint.

Input errors (bad pattern, unreadable calendar text, unknown time zone) and
collaborator errors (fetch failures) are raised to the caller and end the run.
Per-event decode problems are not exceptions in lenient mode; they are
reported as ``ParseFailure`` records instead.
"""

from typing import Optional


class ICSPrintError(Exception):
    """Base exception for all icsprint errors."""


class InvalidPatternError(ICSPrintError):
    """Filter pattern failed to compile as a regular expression."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid filter pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class CalendarParseError(ICSPrintError):
    """Input is not recognizable as iCalendar text at all."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class EventDecodeError(ICSPrintError):
    """A single VEVENT failed to decode while parsing in strict mode."""

    def __init__(self, failure: object):
        super().__init__(str(failure))
        self.failure = failure


class InvalidTimezoneError(ICSPrintError):
    """Display time zone name is not a known IANA zone."""


class ICSFetchError(ICSPrintError):
    """Base exception for ICS fetch errors."""


class ICSAuthError(ICSFetchError):
    """Authentication error during ICS fetch."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ICSHTTPError(ICSFetchError):
    """Server answered with a non-success status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ICSNetworkError(ICSFetchError):
    """Network error during ICS fetch."""


class ICSTimeoutError(ICSFetchError):
    """Timeout error during ICS fetch."""
