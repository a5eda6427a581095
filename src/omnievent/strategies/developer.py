"""
Developer strategy.

Fixture-backed strategy for trying OmniEvent out and for testing. It reads
events from a bundled JSON file (or any file given as the ``uri`` option)
and maps them into EventHash records the way a real provider adapter would.

Usage:
    from omnievent import Builder, list_events

    Builder().provider("developer")
    events = list_events("developer", match_name="meetup")
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from omnievent.schemas.event import DataHash, EventHash, MetadataHash
from omnievent.strategy import Strategy
from omnievent.validators import parse_time

logger = logging.getLogger(__name__)

FIXTURE_PATH = Path(__file__).parent / "fixtures" / "list_events.json"

# Raw location key -> normalized location key; address parts are joined
LOCATION_KEY_MAP = {
    "name": "name",
    "countryCode": "country",
    "latitude": "latitude",
    "longitude": "longitude",
    "address1": "address",
    "address2": "address",
    "address3": "address",
    "city": "city",
    "postalCode": "postal_code",
}

TIME_ATTRIBUTES = {
    "data": ("start_time", "end_time"),
    "metadata": ("created_at", "updated_at"),
}


def format_time(value: Any) -> Any:
    """Normalize a parseable timestamp to ISO-8601; leave anything else alone."""
    parsed = parse_time(value)
    if parsed is None:
        return value
    return parsed.isoformat()


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class Developer(Strategy):
    """
    Strategy serving events from a local JSON fixture.

    Options:
        uri: Path of the JSON file ({"events": [...]})
        from_time: Drop events starting before this datetime
        to_time: Drop events starting after this datetime
        match_name: Keep events whose name contains this text (case-insensitive)
        event: EventHash to create, update or destroy
    """

    default_config = {
        "name": "developer",
        "token": "developer",
        "uri": str(FIXTURE_PATH),
    }

    def after_initialize(self) -> None:
        self._raw_data: Optional[Dict[str, Any]] = None

    # ========================================================================
    # RAW DATA
    # ========================================================================

    @property
    def raw_data(self) -> Dict[str, Any]:
        if self._raw_data is None:
            path = Path(self.options.uri)
            self._raw_data = json.loads(path.read_text(encoding="utf-8"))
            logger.debug(f"Loaded fixture events from {path}")
        return self._raw_data

    @property
    def raw_events(self) -> List[Dict[str, Any]]:
        return self.raw_data.get("events", [])

    # ========================================================================
    # MAPPING
    # ========================================================================

    def event_hash(self, raw_event: Mapping[str, Any]) -> EventHash:
        """Map one raw fixture event to an EventHash."""
        event = EventHash(
            provider=self.name,
            data={
                key: value
                for key, value in raw_event.items()
                if key in DataHash.permitted_names()
            },
            # the raw id is carried once, as metadata.uid
            metadata={
                key: value
                for key, value in raw_event.items()
                if key in MetadataHash.permitted_names() and key != "id"
            },
            associated_data={
                "location": self.map_location(raw_event.get("location") or {}),
                "virtual_location": raw_event.get("virtual_location"),
                "organizer": raw_event.get("organizer"),
            },
        )

        for section, attributes in TIME_ATTRIBUTES.items():
            for attribute in attributes:
                value = event[section].get(attribute)
                if value is not None:
                    event[section][attribute] = format_time(value)
        event.metadata.uid = raw_event.get("id")

        return event

    def map_location(self, raw_location: Mapping[str, Any]) -> Dict[str, Any]:
        location: Dict[str, Any] = {}
        for raw_key, raw_value in raw_location.items():
            key = LOCATION_KEY_MAP.get(raw_key)
            if key is None:
                continue
            if key == "address" and location.get(key):
                location[key] = f"{location[key]} {raw_value}"
            else:
                location[key] = raw_value
        return location

    # ========================================================================
    # OPERATIONS
    # ========================================================================

    def list_events(self) -> List[EventHash]:
        events = [self.event_hash(raw_event) for raw_event in self.raw_events]
        events = [event for event in events if self._matches(event)]
        self.log(logging.DEBUG, f"Listed {len(events)} of {len(self.raw_events)} events")
        return events

    def create_event(self) -> EventHash:
        event = self._stamped_event()
        event.metadata.uid = str(uuid.uuid4())
        return event

    def update_event(self) -> EventHash:
        event = self._stamped_event()
        event.metadata.updated_at = datetime.now(timezone.utc).isoformat()
        return event

    def destroy_event(self) -> bool:
        event = self.options.event
        uid = event.get_path("metadata.uid") if event is not None else None
        if uid is None:
            return False
        return any(str(raw_event.get("id")) == str(uid) for raw_event in self.raw_events)

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _stamped_event(self) -> EventHash:
        event = self.options.event.deep_copy()
        event.provider = self.name
        if event.metadata is None:
            event.metadata = {}
        return event

    def _matches(self, event: EventHash) -> bool:
        start_time = parse_time(event.data.start_time)
        from_time = self.options.from_time
        to_time = self.options.to_time

        if from_time is not None:
            if start_time is None or _aware(start_time) < _aware(from_time):
                return False
        if to_time is not None:
            if start_time is None or _aware(start_time) > _aware(to_time):
                return False

        match_name = self.options.match_name
        if match_name:
            name = event.data.name or ""
            if str(match_name).lower() not in name.lower():
                return False
        return True
