"""Timestamp normalization for records read from heterogeneous stores.

Reservation dates arrive as plain ``datetime``/``date`` objects, as SDK
timestamp wrappers (Firestore, protobuf, pandas), as serialized
``{"seconds": ..., "nanoseconds": ...}`` mappings, as epoch milliseconds or as
ISO-8601 strings. Everything is reduced to a naive wall-clock ``datetime`` in
one timezone so that downstream arithmetic never mixes naive and aware values.
"""

import logging
from collections.abc import Mapping
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any

logger = logging.getLogger(__name__)

# Conversion methods exposed by timestamp wrappers, tried in order
_CONVERSION_ACCESSORS = ("to_datetime", "ToDatetime", "to_pydatetime", "toDate")


def _convert_wrapper(value: Any) -> Any:
    for accessor in _CONVERSION_ACCESSORS:
        convert = getattr(value, accessor, None)
        if callable(convert):
            return convert()
    return value


def _from_mapping(value: Mapping) -> datetime | None:
    seconds = value.get("seconds", value.get("_seconds"))
    nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
    if seconds is None:
        return None
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    try:
        return epoch + timedelta(seconds=int(seconds), microseconds=int(nanos) // 1000)
    except (TypeError, ValueError, OverflowError):
        return None


def _from_epoch_millis(value: int | float) -> datetime | None:
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _from_string(value: str) -> datetime | None:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _interpret(value: Any, tz: tzinfo | None) -> datetime | None:
    value = _convert_wrapper(value)

    if isinstance(value, datetime):
        result: datetime | None = value
    elif isinstance(value, date):
        result = datetime.combine(value, time.min)
    elif isinstance(value, Mapping):
        result = _from_mapping(value)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        result = _from_epoch_millis(value)
    elif isinstance(value, str):
        result = _from_string(value)
    else:
        return None

    if result is not None and result.tzinfo is not None:
        # Overflows for aware values within a day of datetime.min or datetime.max
        result = result.astimezone(tz or timezone.utc).replace(tzinfo=None)
    return result


def normalize_timestamp(value: Any, tz: tzinfo | None = None) -> datetime | None:
    """Return ``value`` as a naive wall-clock datetime in ``tz``.

    Aware values are converted to ``tz`` (UTC when ``tz`` is ``None``) before
    the offset is dropped; naive values are assumed to already be in ``tz``.
    Values that cannot be interpreted, including wrappers whose conversion
    method fails and instants that fall outside the ``datetime`` range once
    shifted, give ``None`` and a warning, never an exception.
    """
    if value is None:
        return None

    try:
        result = _interpret(value, tz)
    except (OverflowError, ValueError, TypeError):
        result = None

    if result is None:
        logger.warning("Could not interpret timestamp value %r (%s)", value, type(value).__name__)
    return result
