"""
Unit tests for calendar event reconciliation.

Tests the half-coverage hiding rule and the symmetric overlap sets.
"""

import pytest

from tests.fixtures.builders import make_entry, make_event
from timejournal.models.records import EntryStatus
from timejournal.timeline.reconciliation import find_hidden_event_ids, find_overlapping_ids, is_event_covered


class TestEventCoverage:
    """Test suite for hiding events already logged"""

    @pytest.mark.unit
    def test_exact_half_coverage_hides(self):
        event = make_event("e", "10:00", "11:00")

        assert is_event_covered(event, [make_entry("a", "10:30", "12:00")])

    @pytest.mark.unit
    def test_less_than_half_stays_visible(self):
        event = make_event("e", "10:00", "11:00")

        assert not is_event_covered(event, [make_entry("a", "10:31", "12:00")])

    @pytest.mark.unit
    def test_coverage_is_relative_to_the_event(self):
        """A long entry fully containing a short event hides it"""
        event = make_event("e", "10:00", "10:15")

        assert is_event_covered(event, [make_entry("a", "08:00", "18:00")])

    @pytest.mark.unit
    def test_single_entry_must_cover(self):
        """Two entries each covering 40% do not add up"""
        event = make_event("e", "10:00", "11:40")
        entries = [make_entry("a", "10:00", "10:40"), make_entry("b", "11:00", "11:40")]

        assert not is_event_covered(event, entries)

    @pytest.mark.unit
    def test_pending_entries_never_hide(self):
        event = make_event("e", "10:00", "11:00")

        assert not is_event_covered(event, [make_entry("a", "10:00", "11:00", status=EntryStatus.PENDING)])

    @pytest.mark.unit
    def test_untimed_entries_never_hide(self):
        event = make_event("e", "10:00", "11:00")

        assert not is_event_covered(event, [make_entry("a", duration=600)])

    @pytest.mark.unit
    def test_all_day_and_zero_length_events_never_hidden(self):
        entries = [make_entry("a", "00:00", "24:00")]

        assert not is_event_covered(make_event("all_day", is_all_day=True), entries)
        assert not is_event_covered(make_event("instant", "10:00", "10:00"), entries)

    @pytest.mark.unit
    def test_custom_threshold(self):
        event = make_event("e", "10:00", "11:00")
        entries = [make_entry("a", "10:30", "12:00")]

        assert not is_event_covered(event, entries, threshold=0.75)

    @pytest.mark.unit
    def test_find_hidden_event_ids(self):
        events = [make_event("covered", "09:00", "10:00"), make_event("free", "13:00", "14:00")]

        hidden = find_hidden_event_ids(events, [make_entry("a", "09:00", "10:00")])

        assert hidden == frozenset({"covered"})


class TestOverlapSets:
    """Test suite for side-by-side rendering flags"""

    @pytest.mark.unit
    def test_any_intersection_flags_both(self):
        events = [make_event("e", "10:00", "11:00")]
        entries = [make_entry("a", "10:50", "11:30")]

        entry_ids, event_ids = find_overlapping_ids(events, entries)

        assert entry_ids == frozenset({"a"})
        assert event_ids == frozenset({"e"})

    @pytest.mark.unit
    def test_touching_intervals_do_not_overlap(self):
        entry_ids, event_ids = find_overlapping_ids(
            [make_event("e", "10:00", "11:00")], [make_entry("a", "11:00", "12:00")]
        )

        assert entry_ids == frozenset()
        assert event_ids == frozenset()

    @pytest.mark.unit
    def test_symmetry(self):
        events = [make_event("e1", "09:00", "10:00"), make_event("e2", "15:00", "16:00")]
        entries = [make_entry("a", "09:30", "09:45"), make_entry("b", "12:00", "13:00"),
                   make_entry("c", "15:30", "17:00")]

        entry_ids, event_ids = find_overlapping_ids(events, entries)

        assert entry_ids == frozenset({"a", "c"})
        assert event_ids == frozenset({"e1", "e2"})

    @pytest.mark.unit
    def test_pending_and_all_day_ignored(self):
        events = [make_event("e", "10:00", "11:00"), make_event("holiday", is_all_day=True)]
        entries = [make_entry("p", "10:00", "11:00", status=EntryStatus.PENDING)]

        assert find_overlapping_ids(events, entries) == (frozenset(), frozenset())
