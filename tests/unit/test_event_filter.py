"""Unit tests for event_filter module."""

from typing import Callable

import pytest

from icsprint.event_filter import EventMatcher, build_matcher, filter_events
from icsprint.exceptions import InvalidPatternError
from icsprint.models import CalendarEvent, RenderOptions

pytestmark = pytest.mark.unit


@pytest.fixture
def events(make_event: Callable[..., CalendarEvent]) -> list[CalendarEvent]:
    return [
        make_event("Home Game", location="Stadium"),
        make_event("Practice", description="Bring water"),
        make_event("Party", location="Game Room"),
        make_event("Meeting"),
    ]


class TestEventMatcher:
    """Tests for EventMatcher class."""

    def test_matches_summary_case_insensitive_by_default(
        self, make_event: Callable[..., CalendarEvent]
    ) -> None:
        matcher = EventMatcher("game")

        assert matcher(make_event("Home GAME")) is True
        assert matcher(make_event("Practice")) is False

    def test_case_sensitive_matching(self, make_event: Callable[..., CalendarEvent]) -> None:
        matcher = EventMatcher("game", case_sensitive=True)

        assert matcher(make_event("Home Game")) is False
        assert matcher(make_event("pregame show")) is True

    def test_haystack_covers_description_and_location(
        self, make_event: Callable[..., CalendarEvent]
    ) -> None:
        matcher = EventMatcher("water|stadium")

        assert matcher(make_event("A", description="Bring water")) is True
        assert matcher(make_event("B", location="Stadium")) is True
        assert matcher(make_event("C")) is False

    def test_haystack_fields_joined_with_separator(
        self, make_event: Callable[..., CalendarEvent]
    ) -> None:
        event = make_event("Home", description="Game")

        assert event.haystack == "Home\nGame\n"
        assert EventMatcher("HomeGame")(event) is False
        assert EventMatcher(r"^Game$", case_sensitive=True).matches(event) is False

    def test_invert_flips_result(self, make_event: Callable[..., CalendarEvent]) -> None:
        matcher = EventMatcher("game", invert=True)

        assert matcher(make_event("Home Game")) is False
        assert matcher(make_event("Practice")) is True
        assert matcher.matches(make_event("Home Game")) is True

    def test_invalid_pattern_fails_fast_naming_pattern(self) -> None:
        with pytest.raises(InvalidPatternError, match=r"'\(unclosed'") as exc_info:
            EventMatcher("(unclosed")

        assert exc_info.value.pattern == "(unclosed"
        assert exc_info.value.reason


class TestFilterEvents:
    """Tests for filter_events and build_matcher."""

    def test_no_pattern_is_identity(self, events: list[CalendarEvent]) -> None:
        matcher = build_matcher(RenderOptions())

        assert matcher is None
        assert filter_events(events, matcher) == events

    def test_empty_pattern_is_identity(self, events: list[CalendarEvent]) -> None:
        assert build_matcher(RenderOptions(pattern="")) is None

    @pytest.mark.smoke
    def test_filter_keeps_matches_in_order(self, events: list[CalendarEvent]) -> None:
        matcher = build_matcher(RenderOptions(pattern="game"))

        kept = filter_events(events, matcher)

        assert [e.summary for e in kept] == ["Home Game", "Party"]

    def test_filter_inverted_keeps_non_matches(self, events: list[CalendarEvent]) -> None:
        matcher = build_matcher(RenderOptions(pattern="game", invert=True))

        kept = filter_events(events, matcher)

        assert [e.summary for e in kept] == ["Practice", "Meeting"]

    def test_filter_and_inverse_partition_input(self, events: list[CalendarEvent]) -> None:
        kept = filter_events(events, EventMatcher("a"))
        dropped = filter_events(events, EventMatcher("a", invert=True))

        assert len(kept) + len(dropped) == len(events)
        assert not set(e.summary for e in kept) & set(e.summary for e in dropped)

    def test_build_matcher_raises_for_invalid_pattern(self) -> None:
        with pytest.raises(InvalidPatternError):
            build_matcher(RenderOptions(pattern="[a-"))
