"""Display time zone resolution for icsprint."""

from __future__ import annotations

import datetime
import logging
import os
import time
from pathlib import Path
from typing import ClassVar, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import InvalidTimezoneError

logger = logging.getLogger(__name__)

LOCALTIME_PATH = Path("/etc/localtime")


def resolve_timezone(name: str) -> ZoneInfo:
    """Look up an IANA zone by name.

    Raises:
        InvalidTimezoneError: If the name is empty or unknown
    """
    if not name or not name.strip():
        raise InvalidTimezoneError("Empty time zone name")
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(f"Unknown time zone {name!r}") from e


class TimezoneDetector:
    """Detects the host's local time zone using several fallback strategies."""

    TZ_ABBREV_MAP: ClassVar[dict[str, str]] = {
        "UTC": "UTC",
        "GMT": "Europe/London",
        "PST": "America/Los_Angeles",
        "PDT": "America/Los_Angeles",
        "MST": "America/Denver",
        "MDT": "America/Denver",
        "CST": "America/Chicago",
        "CDT": "America/Chicago",
        "EST": "America/New_York",
        "EDT": "America/New_York",
        "CET": "Europe/Paris",
        "CEST": "Europe/Paris",
    }

    def __init__(self, localtime_path: Path = LOCALTIME_PATH):
        self.localtime_path = localtime_path

    def detect_name(self) -> Optional[str]:
        """Return the local zone as an IANA identifier, or None if unknown."""
        # Strategy 1: TZ environment variable
        tz_env = os.environ.get("TZ", "").lstrip(":").strip()
        if tz_env:
            try:
                ZoneInfo(tz_env)
                return tz_env
            except (ZoneInfoNotFoundError, ValueError):
                logger.debug("TZ=%r is not an IANA zone name", tz_env)

        # Strategy 2: /etc/localtime symlink into the zoneinfo database
        try:
            target = str(self.localtime_path.resolve())
        except OSError:
            target = ""
        if "zoneinfo/" in target:
            candidate = target.split("zoneinfo/", 1)[1]
            try:
                ZoneInfo(candidate)
                return candidate
            except (ZoneInfoNotFoundError, ValueError):
                logger.debug("Could not use %s as a zone name", candidate)

        # Strategy 3: abbreviation reported by the C library
        abbrev = time.tzname[time.daylight] if time.daylight else time.tzname[0]
        return self.TZ_ABBREV_MAP.get(abbrev)

    def get_local_timezone(self) -> datetime.tzinfo:
        """Return the host's local zone, falling back to its current fixed offset."""
        name = self.detect_name()
        if name:
            return ZoneInfo(name)

        fixed = datetime.datetime.now().astimezone().tzinfo
        logger.warning("Could not detect an IANA local time zone, using fixed offset %s", fixed)
        return fixed or datetime.timezone.utc


def get_local_timezone() -> datetime.tzinfo:
    """Return the host's local time zone."""
    return TimezoneDetector().get_local_timezone()


def get_display_timezone(name: Optional[str] = None) -> datetime.tzinfo:
    """Resolve the display time zone.

    Order: explicit name, ``ICSPRINT_TIMEZONE`` environment variable, host local zone.
    """
    name = name or os.environ.get("ICSPRINT_TIMEZONE")
    if name:
        return resolve_timezone(name)
    return get_local_timezone()
