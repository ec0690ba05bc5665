"""
Bucket codec — normalises hstore buckets handed over by the host.

A bucket may arrive as None (new record), a mapping (hstore registered on
the psycopg2 connection), or the raw hstore text literal psycopg2 returns
when the extension type is not registered:

    '"age"=>"42", "admin"=>NULL'

load_bucket() turns any of these into a fresh dict with str keys.
dump_bucket() turns a bucket into the str/None values PostgreSQL stores.
"""

from collections.abc import Mapping

import psycopg2
from psycopg2.extras import HstoreAdapter

from hstore_attrs.casting import to_str
from hstore_attrs.registry import DataFormatError


def parse_hstore(text: str) -> dict:
    """Parse an hstore text literal into a dict.

    Raises DataFormatError if the literal is malformed.
    """
    try:
        return HstoreAdapter.parse(text, None) or {}
    except psycopg2.InterfaceError as exc:
        raise DataFormatError(f"Invalid hstore literal: {exc}") from exc


def load_bucket(raw) -> dict:
    """Return a new str-keyed dict for a raw bucket value."""
    if raw is None:
        return {}
    if isinstance(raw, str):
        return parse_hstore(raw)
    if isinstance(raw, Mapping):
        return {str(k): v for k, v in raw.items()}
    raise TypeError(
        f"hstore bucket must be a mapping, a string or None, "
        f"got {type(raw).__name__}"
    )


def dump_bucket(bucket) -> dict:
    """String form of every value; None stays None."""
    return {
        str(k): (None if v is None else to_str(v))
        for k, v in load_bucket(bucket).items()
    }
