"""
Shared pytest fixtures for the OmniEvent test suite.

Every test runs against a fresh default context, so strategies activated
in one test never leak into another.
"""

import copy
import logging
from typing import Any, Dict, Optional

import pytest

from omnievent.configs.settings import get_settings
from omnievent.context import Context, reset_context
from omnievent.schemas.event import EventHash

SAMPLE_EVENT: Dict[str, Any] = {
    "provider": "developer",
    "data": {
        "start_time": "2022-06-12T18:30:00+08:00",
        "end_time": "2022-06-12T21:00:00+08:00",
        "timezone": "Australia/Perth",
        "name": "Perth Python Meetup",
        "description": "Monthly meetup of the Perth Python community.",
        "status": "confirmed",
        "url": "https://meetups.example.com/perth-python/1001",
        "virtual": False,
    },
    "metadata": {
        "uid": "1001",
        "created_at": "2022-05-01T09:15:00+08:00",
        "updated_at": "2022-05-20T11:00:00+08:00",
        "language": "en",
        "taxonomies": ["technology", "python"],
    },
    "associated_data": {
        "location": {
            "name": "Spacecubed",
            "address": "Level 2 45 St Georges Terrace",
            "city": "Perth",
            "postal_code": "6000",
            "country": "AU",
            "latitude": "31.9529",
            "longitude": "115.8546",
        },
        "organizer": {
            "name": "Perth Python",
            "email": "organizers@perthpython.org",
            "uris": ["https://perthpython.org"],
        },
    },
}


@pytest.fixture(autouse=True)
def context():
    """
    Install a fresh default context for the test.

    Yields the context so tests can register or activate strategies on it.
    """
    get_settings.cache_clear()
    fresh = Context()
    reset_context(fresh)
    yield fresh
    reset_context(None)
    get_settings.cache_clear()
    package_logger = logging.getLogger("omnievent")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_omnievent_handler", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_event():
    """
    Return a function that creates EventHash objects with sensible defaults.

    Sections given as keyword arguments replace the defaults wholesale;
    ``provider=None`` drops the provider.

    Example:
        event = make_event(data={"start_time": "2022-06-12", "name": "Demo"})
    """

    def _make_event(provider: Optional[str] = "developer", **sections) -> EventHash:
        values = copy.deepcopy(SAMPLE_EVENT)
        values.update(sections)
        if provider is None:
            values.pop("provider")
        else:
            values["provider"] = provider
        return EventHash(values)

    return _make_event


@pytest.fixture
def sample_event(make_event):
    """Return a single valid event."""
    return make_event()
