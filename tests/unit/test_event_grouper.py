"""Unit tests for event_grouper module."""

from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

import pytest

from icsprint.event_grouper import UNKNOWN_GROUP_KEY, group_events, month_key
from icsprint.event_sorter import sort_events
from icsprint.models import CalendarEvent

pytestmark = [pytest.mark.unit, pytest.mark.fast]


class TestMonthKey:
    """Tests for month_key."""

    def test_key_is_month_name_and_year(
        self, make_event: Callable[..., CalendarEvent], display_tz: ZoneInfo
    ) -> None:
        event = make_event("A", datetime(2025, 3, 15, 18))

        assert month_key(event, display_tz) == "March 2025"

    def test_key_uses_display_timezone(self, make_event: Callable[..., CalendarEvent]) -> None:
        # 02:00 UTC on April 1 is still March 31 in New York
        event = make_event("Late", datetime(2025, 4, 1, 2))

        assert month_key(event, ZoneInfo("America/New_York")) == "March 2025"
        assert month_key(event, timezone.utc) == "April 2025"

    def test_key_pads_year_to_four_digits(self, make_event: Callable[..., CalendarEvent]) -> None:
        event = make_event("Ancient", datetime(999, 6, 1, 12))

        assert month_key(event, timezone.utc) == "June 0999"

    def test_missing_start_is_unknown(self, make_event: Callable[..., CalendarEvent]) -> None:
        assert month_key(make_event("TBD"), timezone.utc) == UNKNOWN_GROUP_KEY == "Unknown"


class TestGroupEvents:
    """Tests for group_events."""

    def test_empty_input_gives_no_groups(self, display_tz: ZoneInfo) -> None:
        assert group_events([], display_tz) == []

    @pytest.mark.smoke
    def test_consecutive_months_form_groups(
        self, make_event: Callable[..., CalendarEvent], display_tz: ZoneInfo
    ) -> None:
        events = sort_events(
            [
                make_event("Mar 1", datetime(2025, 3, 5, 15)),
                make_event("Mar 2", datetime(2025, 3, 20, 15)),
                make_event("Apr 1", datetime(2025, 4, 10, 15)),
                make_event("Undated"),
            ]
        )

        groups = group_events(events, display_tz)

        assert [g.key for g in groups] == ["March 2025", "April 2025", "Unknown"]
        assert [len(g.events) for g in groups] == [2, 1, 1]

    def test_non_adjacent_equal_keys_are_not_merged(
        self, make_event: Callable[..., CalendarEvent]
    ) -> None:
        # Deliberately unsorted input: grouping is a single linear pass
        events = [
            make_event("Mar", datetime(2025, 3, 5)),
            make_event("Apr", datetime(2025, 4, 5)),
            make_event("Mar again", datetime(2025, 3, 6)),
        ]

        groups = group_events(events, timezone.utc)

        assert [g.key for g in groups] == ["March 2025", "April 2025", "March 2025"]

    def test_concatenated_groups_reproduce_input(
        self, make_event: Callable[..., CalendarEvent], display_tz: ZoneInfo
    ) -> None:
        events = sort_events(
            [make_event(f"E{i}", datetime(2025, 1 + i % 4, 1 + i, 12)) for i in range(10)]
            + [make_event("X"), make_event("Y")]
        )

        groups = group_events(events, display_tz)

        assert [e for g in groups for e in g.events] == events
        for left, right in zip(groups, groups[1:]):
            assert left.key != right.key

    def test_same_month_different_year_splits(
        self, make_event: Callable[..., CalendarEvent]
    ) -> None:
        events = [
            make_event("2024", datetime(2024, 3, 1, 12)),
            make_event("2025", datetime(2025, 3, 1, 12)),
        ]

        groups = group_events(events, timezone.utc)

        assert [g.key for g in groups] == ["March 2024", "March 2025"]

    def test_default_timezone_is_host_local(
        self, make_event: Callable[..., CalendarEvent], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "icsprint.event_grouper.get_local_timezone", lambda: ZoneInfo("Asia/Tokyo")
        )
        # 20:00 UTC on Jan 31 is Feb 1 in Tokyo
        events = [make_event("Edge", datetime(2025, 1, 31, 20))]

        assert group_events(events)[0].key == "February 2025"
