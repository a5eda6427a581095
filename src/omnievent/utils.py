"""String casing helpers used to turn provider keys into adapter class names."""

import re
from typing import Mapping, Optional

_CAMEL_PART = re.compile(r"(?:^|_)(.)")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def camelize(
    word: str,
    camelizations: Optional[Mapping[str, str]] = None,
    first_letter_in_uppercase: bool = True,
) -> str:
    """
    Convert a snake_case key to CamelCase.

    An entry in ``camelizations`` wins over the default transform, which lets
    keys such as "eventbrite_v3" map to "EventbriteV3" or any other name.

    Example:
        >>> camelize("example_strategy")
        'ExampleStrategy'
        >>> camelize("meetup", {"meetup": "MeetupGraphQL"})
        'MeetupGraphQL'
    """
    word = str(word)
    if camelizations and word in camelizations:
        return camelizations[word]

    result = _CAMEL_PART.sub(lambda match: match.group(1).upper(), word)
    if not first_letter_in_uppercase and result:
        result = result[0].lower() + result[1:]
    return result


def underscore(word: str) -> str:
    """
    Convert CamelCase to snake_case.

    Example:
        >>> underscore("ExampleStrategy")
        'example_strategy'
    """
    word = _ACRONYM_BOUNDARY.sub(r"\1_\2", str(word))
    word = _WORD_BOUNDARY.sub(r"\1_\2", word)
    return word.replace("-", "_").lower()
