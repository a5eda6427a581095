"""
Unit tests for the event schema.

Tests for EventHash and its sections:
- Section coercion
- Required attributes and the allow-list
- Per-attribute validators
- Associated data shapes (location, virtual location, organizer, registrations)
"""

import pytest

from omnievent.schemas.event import (
    AssociatedDataHash,
    DataHash,
    EventHash,
    EventHashBase,
    MetadataHash,
    is_blank,
)
from omnievent.store import KeyStore


def video_entry_point(uri="https://video-conference.com/12345", **extra):
    return {"type": "video", "uri": uri, **extra}


class TestIsBlank:
    def test_blank_values(self):
        for value in (None, "", [], {}, KeyStore()):
            assert is_blank(value) is True

    def test_falsy_values_that_are_not_blank(self):
        """False and 0 carry information and should not count as blank."""
        assert is_blank(False) is False
        assert is_blank(0) is False


class TestSectionCoercion:
    """Mappings assigned to sections should come back typed."""

    def test_constructor_sections(self, sample_event):
        assert isinstance(sample_event.data, DataHash)
        assert isinstance(sample_event.metadata, MetadataHash)
        assert isinstance(sample_event.associated_data, AssociatedDataHash)

    def test_assigned_sections(self):
        event = EventHash()
        event.data = {"name": "Demo"}
        event["metadata"] = {"uid": "1"}
        event.update(associated_data={"location": {"city": "Perth"}})
        assert isinstance(event.data, DataHash)
        assert isinstance(event.metadata, MetadataHash)
        assert isinstance(event.associated_data, AssociatedDataHash)
        assert type(event.associated_data.location) is KeyStore

    def test_other_keys_stay_generic(self):
        event = EventHash(extra={"a": 1})
        assert type(event.extra) is KeyStore


class TestEventHashValidity:
    """Tests for EventHash.valid()."""

    def test_sample_event_is_valid(self, sample_event):
        assert sample_event.valid() is True
        assert sample_event.invalid == []

    @pytest.mark.parametrize("provider", [None, "", 42])
    def test_provider_required(self, make_event, provider):
        """An empty provider should invalidate the event whatever its sections."""
        event = make_event()
        event.provider = provider
        assert event.valid() is False
        assert "provider" in event.invalid

    def test_data_required(self, make_event):
        event = make_event()
        del event.data
        assert event.valid() is False

    def test_optional_sections_may_be_absent(self, make_event):
        event = make_event()
        del event.metadata
        del event.associated_data
        assert event.valid() is True

    def test_invalid_optional_section(self, make_event):
        event = make_event(metadata={"uid": "1", "language": "klingon"})
        assert event.valid() is False
        assert event.invalid == ["metadata.language"]


class TestDataHash:
    """Tests for the data section."""

    @pytest.mark.parametrize("attribute", ["start_time", "name"])
    def test_required_attributes(self, sample_event, attribute):
        """Removing a required attribute should invalidate the section and event."""
        del sample_event.data[attribute]
        assert sample_event.data.valid() is False
        assert sample_event.data.invalid == [attribute]
        assert sample_event.valid() is False

    def test_blank_required_attribute(self, sample_event):
        sample_event.data.name = ""
        assert sample_event.data.valid() is False

    def test_unpermitted_key(self, sample_event):
        """Any key outside the allow-list should invalidate the section."""
        sample_event.data.capacity = 100
        assert sample_event.data.valid() is False
        assert sample_event.data.invalid == ["capacity"]
        assert sample_event.valid() is False

    def test_minimal_data(self):
        data = DataHash(start_time="2022-06-12", name="Demo")
        assert data.valid() is True

    @pytest.mark.parametrize(
        "attribute, value",
        [
            ("start_time", "next tuesday"),
            ("end_time", "2022-13-01"),
            ("timezone", "Perth"),
            ("name", 42),
            ("description", ["not", "a", "string"]),
            ("status", "postponed"),
            ("url", "meetups.example.com/1001"),
            ("virtual", "yes"),
        ],
    )
    def test_invalid_attribute_values(self, sample_event, attribute, value):
        sample_event.data[attribute] = value
        assert sample_event.data.valid() is False
        assert sample_event.data.invalid == [attribute]

    def test_blank_optional_attributes_are_skipped(self, sample_event):
        sample_event.data.description = ""
        sample_event.data.url = None
        assert sample_event.data.valid() is True

    def test_virtual_false_is_validated(self, sample_event):
        sample_event.data.virtual = False
        assert sample_event.data.valid() is True


class TestMetadataHash:
    def test_valid_metadata(self):
        metadata = MetadataHash(
            uid=1001,
            id="abc",
            created_at="2022-05-01T09:15:00Z",
            locale="en",
            language="deu",
            taxonomies=["music"],
        )
        assert metadata.valid() is True

    def test_taxonomies_must_be_strings(self):
        assert MetadataHash(taxonomies=["music", 1]).valid() is False
        assert MetadataHash(taxonomies="music").valid() is False

    def test_uid_must_not_be_boolean(self):
        assert MetadataHash(uid=True).valid() is False


class TestLocation:
    """Tests for associated_data.location."""

    def test_valid_location(self, sample_event):
        assert sample_event.associated_data.valid() is True

    def test_coordinates_in_range(self):
        data = AssociatedDataHash(location={"latitude": "31.9529", "longitude": "115.8546"})
        assert data.valid() is True

    def test_latitude_out_of_range(self):
        data = AssociatedDataHash(location={"latitude": "190.9529"})
        assert data.valid() is False
        assert data.invalid == ["location"]

    def test_numeric_coordinates_rejected(self):
        """Coordinates must be strings, not floats."""
        data = AssociatedDataHash(location={"latitude": 31.9529})
        assert data.valid() is False

    def test_country_code(self):
        assert AssociatedDataHash(location={"country": "AU"}).valid() is True
        assert AssociatedDataHash(location={"country": "Australia"}).valid() is False

    def test_unknown_location_key(self):
        data = AssociatedDataHash(location={"city": "Perth", "venue_size": "big"})
        assert data.valid() is False

    def test_unknown_associated_key(self):
        data = AssociatedDataHash(sponsors=[{"name": "ACME"}])
        assert data.valid() is False
        assert data.invalid == ["sponsors"]


class TestVirtualLocation:
    """Tests for associated_data.virtual_location."""

    def test_video_with_absolute_url(self):
        data = AssociatedDataHash(virtual_location={"entry_points": [video_entry_point()]})
        assert data.valid() is True

    def test_video_with_malformed_url(self):
        """A video entry point needs an absolute URI."""
        data = AssociatedDataHash(
            virtual_location={
                "entry_points": [video_entry_point("httpsvideo-conference.com/12345")]
            }
        )
        assert data.valid() is False
        assert data.invalid == ["virtual_location"]

    def test_unrecognized_type(self):
        entry_point = {"type": "zoom", "uri": "https://video-conference.com/12345"}
        data = AssociatedDataHash(virtual_location={"entry_points": [entry_point]})
        assert data.valid() is False

    def test_phone_uri_may_be_any_string(self):
        entry_point = {"type": "phone", "uri": "+61 8 9000 0000", "code": "1234"}
        data = AssociatedDataHash(virtual_location={"entry_points": [entry_point]})
        assert data.valid() is True

    def test_label_and_code_optional(self):
        data = AssociatedDataHash(
            virtual_location={"entry_points": [video_entry_point(label="Join", code="42")]}
        )
        assert data.valid() is True

    def test_missing_uri(self):
        data = AssociatedDataHash(virtual_location={"entry_points": [{"type": "sip"}]})
        assert data.valid() is False

    def test_unknown_entry_point_key(self):
        data = AssociatedDataHash(
            virtual_location={"entry_points": [video_entry_point(password="secret")]}
        )
        assert data.valid() is False

    def test_unknown_virtual_location_key(self):
        data = AssociatedDataHash(virtual_location={"uid": "v1", "platform": "zoom"})
        assert data.valid() is False

    def test_one_bad_entry_point_invalidates_all(self):
        entry_points = [video_entry_point(), {"type": "fax", "uri": "123"}]
        data = AssociatedDataHash(virtual_location={"entry_points": entry_points})
        assert data.valid() is False


class TestOrganizer:
    def test_valid_organizer(self):
        data = AssociatedDataHash(
            organizer={
                "uid": "o1",
                "name": "Perth Python",
                "email": "organizers@perthpython.org",
                "uris": ["https://perthpython.org"],
            }
        )
        assert data.valid() is True

    def test_invalid_email(self):
        data = AssociatedDataHash(organizer={"email": "organizers-at-perthpython"})
        assert data.valid() is False

    def test_uris_must_be_strings(self):
        data = AssociatedDataHash(organizer={"uris": [1, 2]})
        assert data.valid() is False


class TestRegistrations:
    """Tests for associated_data.registrations."""

    def test_email_and_status_suffice(self):
        data = AssociatedDataHash(
            registrations=[{"email": "ada@lovelace.org", "status": "confirmed"}]
        )
        assert data.valid() is True

    def test_missing_status(self):
        data = AssociatedDataHash(registrations=[{"email": "ada@lovelace.org"}])
        assert data.valid() is False
        assert data.invalid == ["registrations"]

    def test_missing_email(self):
        data = AssociatedDataHash(registrations=[{"status": "confirmed"}])
        assert data.valid() is False

    def test_unknown_status(self):
        data = AssociatedDataHash(
            registrations=[{"email": "ada@lovelace.org", "status": "rejected"}]
        )
        assert data.valid() is False

    def test_registrations_must_be_a_list(self):
        data = AssociatedDataHash(
            registrations={"email": "ada@lovelace.org", "status": "confirmed"}
        )
        assert data.valid() is False


class TestSectionDeclaration:
    """Tests for declaring new section types."""

    def test_validator_required_for_each_permitted_attribute(self):
        """Declaring an attribute without a validator should fail at class creation."""
        with pytest.raises(TypeError, match="capacity"):

            class Incomplete(EventHashBase):
                permitted_attributes = ("capacity",)

    def test_custom_section(self):
        class Tickets(EventHashBase):
            required_attributes = ("price",)
            permitted_attributes = ("price",)

            def price_valid(self):
                return isinstance(self.price, int) and self.price >= 0

        assert Tickets(price=10).valid() is True
        assert Tickets(price=-1).valid() is False
        assert Tickets().valid() is False

    def test_nested_permitted_names(self):
        names = AssociatedDataHash.permitted_names("virtual_location", "entry_points")
        assert set(names) == {"uri", "type", "label", "code"}
