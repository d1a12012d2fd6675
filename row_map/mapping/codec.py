"""Value codec.

Converts between store scalars (text, driver-native values, or None) and
typed entity field values. Timestamps travel as ``YYYY-MM-DD HH:MM:SS``
text in UTC.

Decoding ``None`` into a non-nullable field yields the kind's zero value
(0, 0.0, "", or the epoch) instead of failing.

Decoded timestamps are always timezone-aware UTC. Naive driver values are
read as UTC, but entity timestamps passed to ``encode`` must be aware.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from row_map.core.enums import FieldKind
from row_map.core.exceptions import MalformedScalarError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_ZERO_VALUES: dict[FieldKind, Any] = {
    FieldKind.INT32: 0,
    FieldKind.INT64: 0,
    FieldKind.FLOAT: 0.0,
    FieldKind.TEXT: "",
    FieldKind.TIMESTAMP: EPOCH,
}


def zero_value(kind: FieldKind) -> Any:
    """Value a non-nullable field takes when the store returns NULL."""
    return _ZERO_VALUES[kind]


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DD HH:MM:SS`` in UTC."""
    return _as_utc(value).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse ``YYYY-MM-DD HH:MM:SS`` text as a UTC datetime.

    An empty string yields the epoch.

    Raises:
        MalformedScalarError: If the text does not match the format.
    """
    if not text:
        return EPOCH
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        raise MalformedScalarError(FieldKind.TIMESTAMP, text) from None


# --- Decoding ---


def _decode_int(kind: FieldKind, value: Any) -> int:
    if isinstance(value, bool):
        raise MalformedScalarError(kind, value)
    if isinstance(value, int):
        result = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise MalformedScalarError(kind, value)
        result = int(value)
    elif isinstance(value, Decimal):
        if not value.is_finite() or value != value.to_integral_value():
            raise MalformedScalarError(kind, value)
        result = int(value)
    elif isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        try:
            result = int(text.strip())
        except ValueError:
            raise MalformedScalarError(kind, value) from None
    else:
        raise MalformedScalarError(kind, value)

    if kind is FieldKind.INT32 and not _INT32_MIN <= result <= _INT32_MAX:
        raise MalformedScalarError(kind, value)
    return result


def _decode_float(value: Any) -> float:
    if isinstance(value, bool):
        raise MalformedScalarError(FieldKind.FLOAT, value)
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        try:
            return float(text.strip())
        except ValueError:
            raise MalformedScalarError(FieldKind.FLOAT, value) from None
    raise MalformedScalarError(FieldKind.FLOAT, value)


def _decode_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            raise MalformedScalarError(FieldKind.TEXT, value) from None
    if isinstance(value, datetime):
        return format_timestamp(value)
    return str(value)


def _decode_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        return parse_timestamp(value.strip())
    raise MalformedScalarError(FieldKind.TIMESTAMP, value)


def decode(kind: FieldKind, value: Any, nullable: bool = False) -> Any:
    """Decode a store scalar into the native value for ``kind``.

    Raises:
        MalformedScalarError: If the scalar cannot represent ``kind``.
    """
    if value is None:
        return None if nullable else zero_value(kind)

    if kind.is_integer:
        return _decode_int(kind, value)
    if kind is FieldKind.FLOAT:
        return _decode_float(value)
    if kind is FieldKind.TEXT:
        return _decode_text(value)
    return _decode_timestamp(value)


# --- Encoding ---


def encode(kind: FieldKind, value: Any) -> Any:
    """Encode a native field value as a scalar for statement binding.

    Raises:
        MalformedScalarError: If the value cannot be represented as ``kind``.
    """
    if value is None:
        return None

    if kind is FieldKind.TIMESTAMP:
        if isinstance(value, str):
            # Validate and normalise text timestamps.
            return format_timestamp(parse_timestamp(value))
        # Entity timestamps must be timezone-aware; decoding always yields UTC.
        if not isinstance(value, datetime) or value.tzinfo is None:
            raise MalformedScalarError(kind, value)
        return format_timestamp(value)

    return decode(kind, value)
