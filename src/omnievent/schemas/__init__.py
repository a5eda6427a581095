"""
Event schemas.

EventHash is the normalized record every strategy produces; the shapes
module holds the pydantic models for structured associated data.
"""

from .event import (
    AssociatedDataHash,
    DataHash,
    EventHash,
    EventHashBase,
    MetadataHash,
    is_blank,
)
from .shapes import (
    EntryPointShape,
    LocationShape,
    OrganizerShape,
    RegistrationShape,
    VirtualLocationShape,
)

__all__ = [
    "EventHash",
    "EventHashBase",
    "DataHash",
    "MetadataHash",
    "AssociatedDataHash",
    "is_blank",
    "LocationShape",
    "EntryPointShape",
    "VirtualLocationShape",
    "OrganizerShape",
    "RegistrationShape",
]
