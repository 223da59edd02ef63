"""Pure validators for the bounded numeric parameters."""

import re
from typing import Any

INTENSITY_MIN = 0
INTENSITY_MAX = 100
DURATION_MIN_MS = 300
DURATION_MAX_MS = 30000

_INTEGER_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$")


def parse_int(value: Any) -> int | None:
    """Parse an integer from an int, an integral float or a decimal string.

    Returns None for anything else (including bools), never raises.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER_PATTERN.match(value):
        try:
            return int(value)
        except ValueError:
            # Longer than the interpreter allows for str to int conversion
            return None
    return None


def is_valid_intensity(value: Any) -> bool:
    """Return True if value is an integer within 0..100."""
    number = parse_int(value)
    return number is not None and INTENSITY_MIN <= number <= INTENSITY_MAX


def is_valid_duration(value: Any) -> bool:
    """Return True if value is an integer number of milliseconds within 300..30000."""
    number = parse_int(value)
    return number is not None and DURATION_MIN_MS <= number <= DURATION_MAX_MS


def is_missing(value: Any) -> bool:
    """Return True if a request parameter was not provided."""
    return value is None or (isinstance(value, str) and not value.strip())
