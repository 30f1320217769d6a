"""Entity uid parsing for the HTTP boundary.

Raw form values are turned into positive integers here, once. Services and
repositories only ever receive validated ints that fit the INTEGER uid column.
"""

from typing import Any

from .exceptions import ValidationError

MAX_UID = 2**31 - 1


def parse_uid(raw: Any, kind: str) -> int:
    """Parse a raw uid value into a positive integer.

    Missing, empty, zero, negative, non-numeric and out-of-range values all
    fail with ``ValidationError("No <kind> UID specified")``. Only ASCII
    digits count as numeric.
    """
    if raw is None or isinstance(raw, bool):
        raise ValidationError(f"No {kind} UID specified")

    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not (text.isascii() and text.isdigit()):
            raise ValidationError(f"No {kind} UID specified")
        value = int(text)

    if value <= 0 or value > MAX_UID:
        raise ValidationError(f"No {kind} UID specified")
    return value


def parse_optional_uid(raw: Any, kind: str) -> int | None:
    """Like `parse_uid`, but an empty value means "not set"."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    return parse_uid(raw, kind)
