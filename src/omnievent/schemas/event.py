"""
Canonical Event Schema for OmniEvent.

Every strategy returns its events as an EventHash, whatever the shape of
the provider's payload:

    EventHash
    ├── provider           name of the strategy that produced the event
    ├── data               DataHash: the event facts (start_time, name, ...)
    ├── metadata           MetadataHash: provenance (uid, created_at, ...)
    └── associated_data    AssociatedDataHash: location, organizer, ...

Each section declares, at class level, its required attributes, its
permitted attributes (the allow-list) and one ``<attribute>_valid``
method per permitted attribute. ``valid()`` is advisory: nothing here
raises on invalid data.
"""

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel, ValidationError

from omnievent import validators
from omnievent.schemas.shapes import (
    EntryPointShape,
    LocationShape,
    OrganizerShape,
    RegistrationShape,
    VirtualLocationShape,
)
from omnievent.store import KeyStore

logger = logging.getLogger(__name__)


def is_blank(value: Any) -> bool:
    """None and empty strings/collections are blank; False and 0 are not."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value) == 0
    return False


# ============================================================================
# SECTION BASE
# ============================================================================


class EventHashBase(KeyStore):
    """
    Schema engine shared by all event sections.

    A section is valid when:
    1. every required attribute has a non-blank value
    2. every key present is in the allow-list
    3. every non-blank permitted attribute passes its ``<attribute>_valid``

    Failing attribute names are kept in ``invalid`` for inspection.
    """

    subkey_class = KeyStore
    required_attributes: ClassVar[Tuple[str, ...]] = ()
    permitted_attributes: ClassVar[Union[Sequence[str], Mapping[str, Any]]] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        missing = [
            attribute
            for attribute in cls.permitted_names()
            if not callable(getattr(cls, f"{attribute}_valid", None))
        ]
        if missing:
            raise TypeError(
                f"{cls.__name__} permits {missing} without a matching '<attribute>_valid' method"
            )

    @classmethod
    def permitted_names(
        cls,
        attribute: Optional[str] = None,
        sub_attribute: Optional[str] = None,
    ) -> List[str]:
        """Allow-list at the top level, or nested under an attribute."""
        permitted: Any = cls.permitted_attributes
        if attribute:
            permitted = permitted[attribute]
        if sub_attribute:
            permitted = permitted[sub_attribute]
        if isinstance(permitted, Mapping):
            return list(permitted.keys())
        return list(permitted)

    def permitted(
        self,
        keys: Any,
        attribute: Optional[str] = None,
        sub_attribute: Optional[str] = None,
    ) -> bool:
        """True when every key is in the (possibly nested) allow-list."""
        return not set(keys) - set(self.permitted_names(attribute, sub_attribute))

    @property
    def invalid(self) -> List[str]:
        """Attributes that failed the last ``valid()`` call."""
        if "_invalid" not in self.__dict__:
            self._invalid = []
        return self._invalid

    def valid(self) -> bool:
        """Tells you if this is considered to be a valid section."""
        self._invalid = []

        for attribute in self.required_attributes:
            if is_blank(self.get(attribute)):
                self._invalid.append(attribute)
                return False

        if not self.permitted(self.keys()):
            self._invalid.extend(sorted(set(self.keys()) - set(self.permitted_names())))
            return False

        for attribute in self.permitted_names():
            if is_blank(self.get(attribute)):
                continue
            if not getattr(self, f"{attribute}_valid")():
                self._invalid.append(attribute)
                return False

        return True

    def _conforms(self, value: Any, shape: Type[BaseModel], attribute: str) -> bool:
        plain = value.to_dict() if isinstance(value, KeyStore) else value
        try:
            shape.model_validate(plain)
        except ValidationError as e:
            logger.debug(f"{type(self).__name__}.{attribute} rejected: {e}")
            return False
        return True


# ============================================================================
# DATA
# ============================================================================


class DataHash(EventHashBase):
    """The event facts."""

    required_attributes = ("start_time", "name")
    permitted_attributes = (
        "start_time",
        "end_time",
        "timezone",
        "name",
        "description",
        "status",
        "url",
        "virtual",
    )
    permitted_statuses: ClassVar[Tuple[str, ...]] = ("draft", "cancelled", "confirmed")

    def start_time_valid(self) -> bool:
        return validators.valid_time(self.start_time)

    def end_time_valid(self) -> bool:
        return validators.valid_time(self.end_time)

    def timezone_valid(self) -> bool:
        return validators.valid_timezone(self.timezone)

    def name_valid(self) -> bool:
        return validators.valid_type(self.name, "string")

    def description_valid(self) -> bool:
        return validators.valid_type(self.description, "string")

    def status_valid(self) -> bool:
        return self.status in self.permitted_statuses

    def url_valid(self) -> bool:
        return validators.valid_url(self.url)

    def virtual_valid(self) -> bool:
        return validators.valid_type(self.virtual, "boolean")


# ============================================================================
# METADATA
# ============================================================================


class MetadataHash(EventHashBase):
    """Provenance of the event at its provider."""

    permitted_attributes = (
        "uid",
        "id",
        "created_at",
        "updated_at",
        "locale",
        "language",
        "taxonomies",
    )

    def uid_valid(self) -> bool:
        return validators.valid_uid(self.uid)

    def id_valid(self) -> bool:
        return validators.valid_uid(self.id)

    def created_at_valid(self) -> bool:
        return validators.valid_time(self.created_at)

    def updated_at_valid(self) -> bool:
        return validators.valid_time(self.updated_at)

    def locale_valid(self) -> bool:
        return validators.valid_language_code(self.locale)

    def language_valid(self) -> bool:
        return validators.valid_language_code(self.language)

    def taxonomies_valid(self) -> bool:
        return validators.all_valid_type(self.taxonomies, "string")


# ============================================================================
# ASSOCIATED DATA
# ============================================================================


class AssociatedDataHash(EventHashBase):
    """
    Entities related to the event.

    The nested allow-lists come straight from the shape models in
    omnievent.schemas.shapes.
    """

    permitted_attributes = {
        "location": list(LocationShape.model_fields),
        "virtual_location": {
            "uid": [],
            "entry_points": list(EntryPointShape.model_fields),
        },
        "organizer": list(OrganizerShape.model_fields),
        "registrations": list(RegistrationShape.model_fields),
    }

    def location_valid(self) -> bool:
        location = self.location
        if not isinstance(location, Mapping):
            return False
        if not self.permitted(location.keys(), "location"):
            return False
        return self._conforms(location, LocationShape, "location")

    def virtual_location_valid(self) -> bool:
        virtual_location = self.virtual_location
        if not isinstance(virtual_location, Mapping):
            return False
        if not self.permitted(virtual_location.keys(), "virtual_location"):
            return False

        entry_points = virtual_location.get("entry_points") or []
        if not isinstance(entry_points, list):
            return False
        for entry_point in entry_points:
            if not isinstance(entry_point, Mapping):
                return False
            if not self.permitted(entry_point.keys(), "virtual_location", "entry_points"):
                return False

        return self._conforms(virtual_location, VirtualLocationShape, "virtual_location")

    def organizer_valid(self) -> bool:
        organizer = self.organizer
        if not isinstance(organizer, Mapping):
            return False
        if not self.permitted(organizer.keys(), "organizer"):
            return False
        return self._conforms(organizer, OrganizerShape, "organizer")

    def registrations_valid(self) -> bool:
        registrations = self.registrations
        if not isinstance(registrations, list):
            return False
        for registration in registrations:
            if not isinstance(registration, Mapping):
                return False
            if not self.permitted(registration.keys(), "registrations"):
                return False
            if not self._conforms(registration, RegistrationShape, "registrations"):
                return False
        return True


# ============================================================================
# EVENT
# ============================================================================


class EventHash(KeyStore):
    """
    The normalized event returned by all OmniEvent strategies.

    Mappings assigned to ``data``, ``metadata`` and ``associated_data`` are
    converted to their section types; anything else nests as a KeyStore.

    Example:
        >>> event = EventHash(
        ...     provider="developer",
        ...     data={"start_time": "2022-06-12T12:41:13+02:00", "name": "Meetup"},
        ... )
        >>> type(event.data).__name__
        'DataHash'
        >>> event.valid()
        True
    """

    subkey_class = KeyStore
    key_classes: ClassVar[Dict[str, Type[KeyStore]]] = {
        "data": DataHash,
        "metadata": MetadataHash,
        "associated_data": AssociatedDataHash,
    }
    merge_atomic = True

    def valid(self) -> bool:
        """Tells you if this is considered to be a valid EventHash."""
        provider = self.provider
        if not isinstance(provider, str) or not provider:
            return False
        if not isinstance(self.data, DataHash) or not self.data.valid():
            return False
        for section in ("metadata", "associated_data"):
            value = self.get(section)
            if value is None:
                continue
            if not isinstance(value, self.key_classes[section]) or not value.valid():
                return False
        return True

    @property
    def invalid(self) -> List[str]:
        """
        Dotted names of the attributes that failed the last ``valid()`` call.

        Example: ``["provider"]`` or ``["data.start_time"]``.
        """
        names = []
        provider = self.provider
        if not isinstance(provider, str) or not provider:
            names.append("provider")
        for section in self.key_classes:
            value = self.get(section)
            if isinstance(value, EventHashBase):
                names.extend(f"{section}.{attribute}" for attribute in value.invalid)
        return names
