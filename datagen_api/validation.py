"""Query parameter parsing for the data handlers."""

from __future__ import annotations

import re

from datagen_api.errors import InvalidParameter

MAX_COUNT = 50
LOREM_MAX_COUNT = 10

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")  # ASCII digits only


def parse_leading_int(raw: str) -> int | None:
    """Parse the leading base-10 integer of ``raw``.

    Surrounding whitespace and trailing characters are ignored, so ``"12abc"``
    gives 12. Returns None when ``raw`` does not start with digits.
    """
    match = _LEADING_INT.match(raw)
    if match is None:
        return None
    return int(match.group(1))


def parse_count(raw: str | None, maximum: int = MAX_COUNT, name: str = "count") -> int:
    """Validate a requested result count.

    Absent means 1. Otherwise the value must be a number in ``1..maximum``.
    """
    if raw is None:
        return 1

    parsed = parse_leading_int(raw)
    if parsed is None:
        raise InvalidParameter(f"Invalid {name} parameter: '{raw}'. Must be a number.")
    if parsed <= 0:
        raise InvalidParameter(f"Invalid {name} parameter: '{parsed}'. Must be greater than 0.")
    if parsed > maximum:
        raise InvalidParameter(
            f"Invalid {name} parameter: '{parsed}'. Maximum allowed {name} is {maximum}."
        )
    return parsed
