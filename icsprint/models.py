"""Data models for ICS calendar printing."""

import base64
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthType(str, Enum):
    """Supported authentication types for ICS sources."""

    NONE = "none"
    BASIC = "basic"
    BEARER = "bearer"


class ICSAuth(BaseModel):
    """Authentication configuration for ICS sources."""

    type: AuthType = AuthType.NONE
    username: Optional[str] = None
    password: Optional[str] = None
    bearer_token: Optional[str] = None

    def get_headers(self) -> dict[str, str]:
        """Get HTTP headers for authentication."""
        headers = {}

        if self.type == AuthType.BASIC and self.username and self.password:
            credentials = f"{self.username}:{self.password}"
            encoded = base64.b64encode(credentials.encode()).decode()
            headers["Authorization"] = f"Basic {encoded}"

        elif self.type == AuthType.BEARER and self.bearer_token:
            headers["Authorization"] = f"Bearer {self.bearer_token}"

        return headers


class ICSSource(BaseModel):
    """A calendar subscription to fetch."""

    url: str = Field(..., description="ICS calendar URL")
    auth: ICSAuth = Field(default_factory=ICSAuth, description="Authentication configuration")
    timeout: int = Field(default=30, description="HTTP timeout in seconds")
    custom_headers: dict[str, str] = Field(default_factory=dict, description="Custom HTTP headers")

    model_config = ConfigDict(use_enum_values=True)


class CalendarEvent(BaseModel):
    """A normalized VEVENT.

    ``start`` and ``end`` are timezone-aware instants or ``None`` when the
    source block has no resolvable value. Text fields are never ``None``.
    """

    uid: Optional[str] = Field(default=None, description="Event UID, if present")
    summary: str = Field(default="", description="Display text")
    description: str = Field(default="", description="Free-text description")
    location: str = Field(default="", description="Free-text location")
    start: Optional[datetime] = Field(default=None, description="Start instant")
    end: Optional[datetime] = Field(default=None, description="End instant")
    is_all_day: bool = Field(default=False, description="DTSTART was a DATE value")

    model_config = ConfigDict(frozen=True)

    @field_validator("start", "end")
    @classmethod
    def _require_aware(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            raise ValueError("event instants must be timezone-aware")
        return value

    @property
    def haystack(self) -> str:
        """Searchable text used by the filter."""
        return "\n".join((self.summary, self.description, self.location))


class EventGroup(BaseModel):
    """Contiguous run of sorted events sharing a display key."""

    key: str
    events: list[CalendarEvent] = Field(default_factory=list)


class RenderOptions(BaseModel):
    """Filtering and rendering options for a single run."""

    output: Optional[str] = Field(default=None, description="Output target, opaque to the pipeline")
    pattern: Optional[str] = Field(default=None, description="Regular expression filter")
    invert: bool = Field(default=False, description="Keep events that do NOT match")
    case_sensitive: bool = Field(default=False, description="Case-sensitive matching")
    title: Optional[str] = Field(
        default=None, description="Document title; falls back to the calendar name"
    )

    include_summary: bool = Field(default=False, description="Show event summaries")
    include_meta: bool = Field(default=False, description="Show location and time range")
    include_desc: bool = Field(default=False, description="Show event descriptions")
    include_uid: bool = Field(default=False, description="Show event UIDs")

    model_config = ConfigDict(frozen=True)


class ParseFailureReason(str, Enum):
    """Why a VEVENT block was not turned into an event."""

    INVALID_PROPERTY = "invalid_property"
    INVALID_STRUCTURE = "invalid_structure"
    UNEXPECTED = "unexpected"


class ParseFailure(BaseModel):
    """A VEVENT block that could not be decoded."""

    index: int = Field(..., description="Position of the block among VEVENTs")
    uid: Optional[str] = None
    reason: ParseFailureReason
    message: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        label = self.uid or f"#{self.index}"
        return f"VEVENT {label}: {self.reason.value}: {self.message}"


class ParseResult(BaseModel):
    """Result of parsing one calendar document."""

    events: list[CalendarEvent] = Field(default_factory=list)
    failures: list[ParseFailure] = Field(default_factory=list)
    calendar_name: Optional[str] = None
    total_components: int = 0


class RenderOutcome(BaseModel):
    """Rendered document plus counts for the caller to report."""

    document: str
    events_total: int = Field(..., description="Events considered by the filter")
    events_kept: int = Field(..., description="Events retained after filtering")
    group_count: int = 0
    parse_failures: list[ParseFailure] = Field(default_factory=list)
