"""
Read-side coercion from raw hstore values to typed Python values.

hstore keeps only strings, so every typed attribute is rebuilt from the
value's string form on read. Numeric and boolean casts are forgiving and
never raise; date and datetime casts raise DataFormatError on garbage.
"""

import re
from datetime import datetime, date
from decimal import Decimal, InvalidOperation

from hstore_attrs.registry import DataFormatError, InvalidTypeTag


_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def to_str(value) -> str:
    """String form of a value, as it would be stored in an hstore."""
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def to_integer(value) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        try:
            return int(value)
        except (ValueError, OverflowError, InvalidOperation):
            return 0
    m = _INT_PREFIX.match(to_str(value))
    if not m:
        return 0
    try:
        return int(m.group(1))
    except ValueError:
        # digit strings past sys.get_int_max_str_digits()
        return 0


def to_float(value) -> float:
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return float(value)
    m = _FLOAT_PREFIX.match(to_str(value))
    return float(m.group(1)) if m else 0.0


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    m = _FLOAT_PREFIX.match(to_str(value))
    return Decimal(m.group(1)) if m else Decimal("0")


def to_boolean(value) -> bool:
    # "0" is truthy here; only blank and "false" are false
    s = to_str(value)
    return not (s == "" or s == "false")


def to_datetime(value):
    if isinstance(value, datetime):
        return value
    s = to_str(value).strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s)
    except ValueError as exc:
        raise DataFormatError(f"Invalid datetime: {s!r}") from exc


def to_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = to_str(value).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(s).date()
    except ValueError as exc:
        raise DataFormatError(f"Invalid date: {s!r}") from exc


CASTS = {
    "integer": to_integer,
    "float": to_float,
    "decimal": to_decimal,
    "boolean": to_boolean,
    "bool": to_boolean,
    "string": to_str,
    "datetime": to_datetime,
    "date": to_date,
}


def cast(attr, value):
    """Coerce a raw bucket value according to attr.type.

    No type returns the raw value unchanged; a callable type is invoked
    with the raw value. Raises InvalidTypeTag for anything else.
    """
    type_tag = attr.type
    if type_tag is None:
        return value
    if isinstance(type_tag, str) and type_tag in CASTS:
        return CASTS[type_tag](value)
    if callable(type_tag):
        return type_tag(value)
    raise InvalidTypeTag(attr.name, type_tag)
