"""
Structured shapes nested inside an event's associated data.

Each shape is a strict pydantic model that forbids unknown keys, so the
model fields double as the allow-list for the attribute. Format checks
delegate to omnievent.validators.
"""

from typing import Any, Callable, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from omnievent.validators import (
    valid_coordinate,
    valid_country_code,
    valid_email,
    valid_uid,
    valid_url,
)

Uid = Union[str, int, UUID]

ENTRY_POINT_TYPES = ("video", "phone", "sip")
REGISTRATION_STATUSES = ("confirmed", "declined", "tentative")


def _check(value: Any, predicate: Callable[[Any], bool], message: str) -> Any:
    if value is not None and not predicate(value):
        raise ValueError(message)
    return value


class Shape(BaseModel):
    """Base for associated-data shapes: strict types, no extra keys."""

    model_config = ConfigDict(extra="forbid", strict=True)

    @field_validator("uid", check_fields=False)
    @classmethod
    def validate_uid(cls, v):
        return _check(v, valid_uid, "uid must be a non-empty string, integer or UUID")


# ============================================================================
# LOCATION
# ============================================================================


class LocationShape(Shape):
    """
    Physical venue of an event.

    Coordinates are numeric strings ("31.9529"), not floats.
    """

    uid: Optional[Uid] = None
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    url: Optional[str] = None

    @field_validator("country")
    @classmethod
    def validate_country(cls, v):
        return _check(v, valid_country_code, "country must be an ISO 3166-1 alpha-2 code")

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v):
        return _check(v, lambda c: valid_coordinate(c, "latitude"), "latitude out of range")

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v):
        return _check(v, lambda c: valid_coordinate(c, "longitude"), "longitude out of range")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        return _check(v, valid_url, "url must be an absolute http(s) URL")


# ============================================================================
# VIRTUAL LOCATION
# ============================================================================


class EntryPointShape(Shape):
    """
    One way of joining a virtual event.

    A "video" entry point needs an absolute URL; "phone" and "sip" take any
    string (a number, a SIP address).
    """

    uri: str
    type: str
    label: Optional[str] = None
    code: Optional[str] = None

    @model_validator(mode="after")
    def validate_uri_for_type(self):
        if self.type not in ENTRY_POINT_TYPES:
            raise ValueError(f"unsupported entry point type '{self.type}'")
        if self.type == "video" and not valid_url(self.uri):
            raise ValueError("video entry points need an absolute http(s) URL")
        return self


class VirtualLocationShape(Shape):
    """Online location: an optional uid and its entry points."""

    uid: Optional[Uid] = None
    entry_points: Optional[List[EntryPointShape]] = None


# ============================================================================
# PEOPLE
# ============================================================================


class OrganizerShape(Shape):
    """Who runs the event."""

    uid: Optional[Uid] = None
    name: Optional[str] = None
    email: Optional[str] = None
    uris: Optional[List[str]] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check(v, valid_email, "email is not a valid address")


class RegistrationShape(Shape):
    """An attendee's registration; email and status are mandatory."""

    uid: Optional[Uid] = None
    name: Optional[str] = None
    email: str
    status: Literal["confirmed", "declined", "tentative"]

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check(v, valid_email, "email is not a valid address")
