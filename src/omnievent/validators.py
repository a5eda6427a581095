"""
Attribute validators for the event schema.

Every validator is a total predicate: it returns a bool and never raises,
so a section's validity check is a plain fold over its attributes.

URLs and emails go through pydantic's HttpUrl / EmailStr types, language
and country codes through pycountry, timezones through zoneinfo.
"""

import re
import uuid
from datetime import datetime
from functools import lru_cache
from typing import Any, Optional, Set
from zoneinfo import available_timezones

import pycountry
from pydantic import EmailStr, HttpUrl, TypeAdapter, ValidationError

LATITUDE_PATTERN = re.compile(r"-?([1-8]?\d(?:\.\d+)?|90(?:\.0{1,6})?)", re.ASCII)
LONGITUDE_PATTERN = re.compile(r"-?((?:1[0-7]|[1-9])?\d(?:\.\d+)?|180(?:\.0+)?)", re.ASCII)

_URL_ADAPTER = TypeAdapter(HttpUrl)
_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def parse_time(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp.

    Accepts what ``datetime.fromisoformat`` accepts, e.g. "2022-06-12",
    "2022-06-12T12:41", "2022-06-12T12:41:13.250Z", "2022-06-12T12:41:13+0200"
    or "2022-06-12T12:41:13+02". Non-ASCII digits and surrounding whitespace
    are rejected.

    Args:
        value: Candidate timestamp string

    Returns:
        datetime (timezone-aware when an offset is given) or None
    """
    if not isinstance(value, str) or not value.isascii() or value != value.strip():
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def valid_time(value: Any) -> bool:
    """Value is an ISO-8601 timestamp string."""
    return parse_time(value) is not None


@lru_cache(maxsize=1)
def _timezone_identifiers() -> Set[str]:
    return available_timezones()


def valid_timezone(value: Any) -> bool:
    """Value is an IANA timezone identifier, e.g. "Europe/Copenhagen"."""
    return isinstance(value, str) and value in _timezone_identifiers()


def valid_language_code(value: Any) -> bool:
    """
    Value is an ISO-639 language code.

    Two-letter ISO 639-1 codes are accepted, as are three-letter ISO 639-2
    codes (terminologic or bibliographic) of languages that also carry a
    639-1 code. Codes must be lowercase.
    """
    if not isinstance(value, str) or value != value.lower():
        return False
    try:
        if len(value) == 2:
            return pycountry.languages.get(alpha_2=value) is not None
        if len(value) == 3:
            language = pycountry.languages.get(alpha_3=value)
            if language is None:
                language = pycountry.languages.get(bibliographic=value)
            return language is not None and hasattr(language, "alpha_2")
    except LookupError:
        return False
    return False


def valid_country_code(value: Any) -> bool:
    """Value is an uppercase ISO 3166-1 alpha-2 country code, e.g. "AU"."""
    if not isinstance(value, str) or len(value) != 2 or value != value.upper():
        return False
    try:
        return pycountry.countries.get(alpha_2=value) is not None
    except LookupError:
        return False


def valid_coordinate(value: Any, kind: str) -> bool:
    """
    Value is a numeric string within the range for ``kind``.

    Args:
        value: Coordinate as a string, e.g. "31.9529"
        kind: "latitude" ([-90, 90]) or "longitude" ([-180, 180])
    """
    if not isinstance(value, str):
        return False
    if kind == "latitude":
        return LATITUDE_PATTERN.fullmatch(value) is not None
    if kind == "longitude":
        return LONGITUDE_PATTERN.fullmatch(value) is not None
    return False


def valid_email(value: Any) -> bool:
    """Value is a syntactically valid mailbox address."""
    if not isinstance(value, str):
        return False
    try:
        _EMAIL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def valid_url(value: Any) -> bool:
    """Value is an absolute http(s) URL."""
    if not isinstance(value, str):
        return False
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def valid_uid(value: Any) -> bool:
    """Value is a non-empty string, an integer or a UUID."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, uuid.UUID)):
        return True
    return isinstance(value, str) and bool(value.strip())


def valid_type(value: Any, kind: str) -> bool:
    """Structural type check for kind "boolean", "string" or "array"."""
    if kind == "boolean":
        return isinstance(value, bool)
    if kind == "string":
        return isinstance(value, str)
    if kind == "array":
        return isinstance(value, list)
    return False


def all_valid_type(array: Any, kind: str) -> bool:
    """Value is an array whose every element passes ``valid_type(kind)``."""
    return valid_type(array, "array") and all(valid_type(item, kind) for item in array)
