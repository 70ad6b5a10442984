"""
Unit tests for logged entry and imported event records.
"""

import pytest

from tests.fixtures.sample_data import SAMPLE_ENTRY_RECORDS, SAMPLE_EVENT_RECORDS
from timejournal.core.error_handler import RecordError
from timejournal.models.records import EntryStatus, ImportedEvent, LoggedEntry


class TestLoggedEntry:
    """Test suite for storage row conversion"""

    @pytest.mark.unit
    def test_from_record(self):
        entry = LoggedEntry.from_record(SAMPLE_ENTRY_RECORDS[0])

        assert entry.id == "entry_001"
        assert entry.start_time == "09:00"
        assert entry.end_time == "09:15"
        assert entry.duration_minutes == 15
        assert entry.category == "meetings"
        assert entry.is_timed
        assert entry.is_confirmed

    @pytest.mark.unit
    def test_untimed_and_pending(self):
        untimed = LoggedEntry.from_record(SAMPLE_ENTRY_RECORDS[2])
        pending = LoggedEntry.from_record(SAMPLE_ENTRY_RECORDS[3])

        assert not untimed.is_timed
        assert untimed.start_time is None
        assert pending.status is EntryStatus.PENDING
        assert not pending.is_confirmed

    @pytest.mark.unit
    def test_status_defaults_to_confirmed(self):
        entry = LoggedEntry.from_record(
            {"id": "e", "date": "2024-01-15", "activity": "Reading", "duration_minutes": "30"}
        )

        assert entry.status is EntryStatus.CONFIRMED
        assert entry.duration_minutes == 30

    @pytest.mark.unit
    def test_blank_times_are_missing(self):
        entry = LoggedEntry.from_record(
            {"id": "e", "date": "2024-01-15", "activity": "Reading", "duration_minutes": 30,
             "start_time": "", "end_time": "  "}
        )

        assert entry.start_time is None
        assert entry.end_time is None

    @pytest.mark.unit
    @pytest.mark.parametrize("changes", [
        {"activity": ""},
        {"duration_minutes": None},
        {"duration_minutes": "long"},
        {"duration_minutes": -5},
        {"status": "archived"},
    ])
    def test_malformed_records_raise(self, changes):
        record = dict(SAMPLE_ENTRY_RECORDS[0], **changes)

        with pytest.raises(RecordError) as exc_info:
            LoggedEntry.from_record(record)
        assert exc_info.value.record_id == "entry_001"

    @pytest.mark.unit
    @pytest.mark.parametrize("changes", [
        {"start_time": "9am"},
        {"end_time": "25:00"},
    ])
    def test_malformed_times_become_untimed(self, changes):
        record = dict(SAMPLE_ENTRY_RECORDS[0], **changes)

        entry = LoggedEntry.from_record(record)

        assert entry.id == "entry_001"
        assert entry.duration_minutes == 15
        assert not entry.is_timed
        assert None in (entry.start_time, entry.end_time)

    @pytest.mark.unit
    def test_entries_are_immutable(self):
        entry = LoggedEntry.from_record(SAMPLE_ENTRY_RECORDS[0])

        with pytest.raises(AttributeError):
            entry.start_time = "10:00"


class TestImportedEvent:
    """Test suite for calendar import conversion"""

    @pytest.mark.unit
    def test_from_camel_case_record(self):
        event = ImportedEvent.from_record(SAMPLE_EVENT_RECORDS[0])

        assert event.id == "event_001"
        assert event.start_time == "10:00"
        assert event.end_time == "11:00"
        assert event.is_timed

    @pytest.mark.unit
    def test_from_snake_case_record(self):
        event = ImportedEvent.from_record(
            {"id": "x", "title": "Dentist", "start_time": "16:00", "end_time": "16:30"}
        )

        assert event.is_timed
        assert not event.is_all_day

    @pytest.mark.unit
    def test_all_day_event_is_not_timed(self):
        event = ImportedEvent.from_record(SAMPLE_EVENT_RECORDS[2])

        assert event.is_all_day
        assert not event.is_timed

    @pytest.mark.unit
    def test_malformed_time_is_dropped(self):
        event = ImportedEvent.from_record({"id": "x", "title": "Standup", "startTime": "24:30", "endTime": "10:00"})

        assert event.start_time is None
        assert event.end_time == "10:00"
        assert not event.is_timed

    @pytest.mark.unit
    def test_missing_id_raises(self):
        with pytest.raises(RecordError):
            ImportedEvent.from_record({"title": "No id"})
