"""
Unit tests for the Developer strategy.

Runs the fixture-backed strategy end to end through the package API.
"""

import json
from datetime import datetime, timezone

import pytest

import omnievent
from omnievent.builder import Builder
from omnievent.schemas.event import EventHash
from omnievent.strategies.developer import FIXTURE_PATH, Developer, format_time
from omnievent.strategy import Operation
from omnievent.validators import parse_time


@pytest.fixture
def raw_events():
    return json.loads(FIXTURE_PATH.read_text(encoding="utf-8"))["events"]


@pytest.fixture(autouse=True)
def developer(context):
    Builder(context).provider("developer")


class TestListEvents:
    """Tests for listing fixture events."""

    def test_returns_event_hashes(self, raw_events):
        events = omnievent.list_events("developer")
        assert len(events) == len(raw_events) == 2
        assert all(isinstance(event, EventHash) for event in events)

    def test_events_are_valid(self):
        events = omnievent.list_events("developer")
        for event in events:
            assert event.valid() is True, event.invalid

    def test_virtual_entry_point(self):
        """The second event should carry its video entry point."""
        second = omnievent.list_events("developer")[1]
        assert second.associated_data.virtual_location.entry_points[0].type == "video"
        assert second.data.virtual is True

    def test_metadata(self, raw_events):
        """The raw id should be carried only as metadata.uid."""
        first = omnievent.list_events("developer")[0]
        assert first.provider == "developer"
        assert first.metadata.uid == raw_events[0]["id"]
        assert "id" not in first.metadata

    def test_location_mapping(self, raw_events):
        """Camel-cased location keys should be normalized and address parts joined."""
        location = omnievent.list_events("developer")[0].associated_data.location
        raw_location = raw_events[0]["location"]
        assert location.country == raw_location["countryCode"]
        assert location.postal_code == raw_location["postalCode"]
        assert location.address == f"{raw_location['address1']} {raw_location['address2']}"
        assert "countryCode" not in location

    def test_times_are_iso8601(self):
        for event in omnievent.list_events("developer"):
            assert parse_time(event.data.start_time) is not None
            assert parse_time(event.metadata.created_at) is not None

    def test_from_time(self):
        """Events starting strictly before from_time should be excluded."""
        from_time = datetime(2022, 7, 1, tzinfo=timezone.utc)
        events = omnievent.list_events("developer", from_time=from_time)
        assert [event.metadata.uid for event in events] == [1002]
        for event in events:
            assert parse_time(event.data.start_time) >= from_time

    def test_from_time_equal_to_start_is_kept(self):
        start = parse_time("2022-07-20T10:00:00Z")
        events = omnievent.list_events("developer", from_time=start)
        assert [event.metadata.uid for event in events] == [1002]

    def test_to_time(self):
        to_time = datetime(2022, 7, 1, tzinfo=timezone.utc)
        events = omnievent.list_events("developer", to_time=to_time)
        assert [event.metadata.uid for event in events] == [1001]

    def test_naive_from_time_treated_as_utc(self):
        events = omnievent.list_events("developer", from_time=datetime(2022, 7, 1))
        assert len(events) == 1

    def test_match_name(self):
        events = omnievent.list_events("developer", match_name="WEBINAR")
        assert [event.data.name for event in events] == ["Event Data Webinar"]

    def test_invalid_from_time(self):
        with pytest.raises(ValueError):
            omnievent.list_events("developer", from_time="2022-07-01")

    def test_custom_uri(self, context, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(
            json.dumps(
                {"events": [{"id": "x1", "name": "Local", "start_time": "2023-01-01T10:00:00Z"}]}
            )
        )
        Builder(context).provider("developer", uri=str(path))
        events = omnievent.list_events("developer")
        assert [event.metadata.uid for event in events] == ["x1"]
        assert events[0].valid() is True


class TestWriteOperations:
    def test_create_event(self, make_event):
        event = make_event(provider="somewhere_else")
        created = omnievent.create_event("developer", event=event)
        assert created.provider == "developer"
        assert created.metadata.uid != event.metadata.uid
        assert created.data.name == event.data.name
        assert event.provider == "somewhere_else"

    def test_update_event(self, sample_event):
        updated = omnievent.update_event("developer", event=sample_event)
        assert updated.provider == "developer"
        assert updated.metadata.updated_at != sample_event.metadata.updated_at
        assert parse_time(updated.metadata.updated_at) is not None

    def test_destroy_known_event(self, make_event):
        event = make_event(metadata={"uid": 1002})
        assert omnievent.destroy_event("developer", event=event) is True

    def test_destroy_unknown_event(self, make_event):
        event = make_event(metadata={"uid": "9999"})
        assert omnievent.destroy_event("developer", event=event) is False


class TestHelpers:
    def test_format_time(self):
        assert format_time("2022-06-12T18:30:00+08:00") == "2022-06-12T18:30:00+08:00"
        assert format_time("2022-07-20T10:00:00Z") == "2022-07-20T10:00:00+00:00"
        assert format_time("soon") == "soon"

    def test_defaults(self):
        developer = Developer()
        assert developer.name == "developer"
        assert developer.options.token == "developer"
        assert developer.capabilities == frozenset(Operation)
