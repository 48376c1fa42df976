# src/objectstore/serialization.py
"""
Serialization helpers shared by every store.

Values leave the process as strings: either JSON text, or (for plain strings
when date handling is off) the string itself. ``datetime`` values are always
written in the UTC millisecond form ``YYYY-MM-DDTHH:MM:SS.mmmZ`` so they can
be recognised again on the way back in.

Reviving dates is a pattern match on string values. Any string anywhere in
the payload that happens to look exactly like a UTC timestamp with
milliseconds comes back as a ``datetime``; this is a known and accepted
imprecision.

Usage:
    from objectstore import serialization

    text = serialization.serialize({"when": datetime.now(timezone.utc)})
    value = serialization.deserialize(text)
    assert isinstance(value["when"], datetime)
"""

from __future__ import annotations

import json
import re
from datetime import date, datetime, timezone
from typing import Any

from .exceptions import SerializationError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def is_string(value: Any) -> bool:
    """Return True for ``str`` instances, including subclasses of ``str``."""
    return isinstance(value, str)


def is_serialized_date(value: Any) -> bool:
    """Check whether ``value`` is a string in the serialized date format.

    Dates are serialized in UTC, e.g. ``'1981-12-20T04:00:14.000Z'``.
    """
    return is_string(value) and DATE_PATTERN.fullmatch(value) is not None


def format_date(value: datetime) -> str:
    """Format a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Naive datetimes are taken to be UTC already. Sub-millisecond precision
    is truncated.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    # strftime("%Y") does not zero-pad years below 1000 on every platform
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def parse_date(value: str) -> datetime:
    """Parse a serialized date string into an aware UTC datetime."""
    return datetime.strptime(value, "%Y-%m-%dT%H:%M:%S.%fZ").replace(tzinfo=timezone.utc)


def date_reviver(value: Any) -> Any:
    """Turn serialized date strings back into datetimes, leave anything else alone."""
    if is_serialized_date(value):
        return parse_date(value)
    return value


def _encode_default(value: Any) -> Any:
    # datetime is a subclass of date, so it must be checked first
    if isinstance(value, datetime):
        return format_date(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _revive(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _revive(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_revive(v) for v in value]
    return date_reviver(value)


def serialize(value: Any, dates: bool = True) -> str:
    """Encode a value for storage in an external tier.

    Args:
        value: Any JSON-encodable value; datetimes are allowed anywhere.
        dates: When False, strings are returned unchanged instead of being
            JSON-quoted.

    Returns:
        The string form of ``value``.

    Raises:
        SerializationError: If the value cannot be JSON encoded.
    """
    if not dates and is_string(value):
        return value
    try:
        return json.dumps(value, default=_encode_default)
    except (TypeError, ValueError) as e:
        raise SerializationError(message=f"Cannot encode value as JSON: {e}") from e


def deserialize(text: str, dates: bool = True) -> Any:
    """Decode a string written by :func:`serialize`.

    Text that is not valid JSON is a raw string stored without encoding and
    is returned as-is.

    Args:
        text: The stored string.
        dates: Revive strings in the serialized date format as datetimes.

    Returns:
        The decoded value.
    """
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return text
    if dates:
        return _revive(value)
    return value


__all__ = [
    "DATE_PATTERN",
    "date_reviver",
    "deserialize",
    "format_date",
    "is_serialized_date",
    "is_string",
    "parse_date",
    "serialize",
]
