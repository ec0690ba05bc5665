"""
Typed overlay engine — reads and writes virtual attributes on a record.

The record only has to expose each bucket as a plain attribute:
getattr(record, bucket) returns the raw bucket (or None) and
setattr(record, bucket, mapping) stages a whole-map replacement. Coercion
happens on read only; writes store the value as given.

    registry = AttributeRegistry()
    registry.register("age", "data", "integer", 0)

    apply_defaults(record, registry)     # record.data == {"age": 0}
    write(record, "age", "42", registry)
    read(record, "age", registry)        # 42
"""

import logging

from hstore_attrs.casting import cast
from hstore_attrs.codec import load_bucket


logger = logging.getLogger(__name__)


def _get_bucket(record, bucket):
    return getattr(record, bucket, None)


def apply_defaults(record, registry):
    """Insert defaults for every attribute missing from its bucket.

    Each bucket is loaded once, all of its attributes are folded in, and
    it is written back once. Values already present are never replaced.
    Returns the record.
    """
    for bucket in registry.buckets():
        data = load_bucket(_get_bucket(record, bucket))
        for attr in registry.for_bucket(bucket):
            data.setdefault(attr.name, attr.default)
        setattr(record, bucket, data)
        logger.debug("applied hstore defaults to %s.%s",
                     type(record).__name__, bucket)
    return record


def read(record, name, registry):
    """Typed value of a virtual attribute.

    Returns None when the bucket itself is absent. Raises UnknownAttribute
    for unregistered names and InvalidTypeTag for unusable type tags.
    """
    attr = registry.lookup(name)
    raw_bucket = _get_bucket(record, attr.bucket)
    if raw_bucket is None:
        return None
    value = load_bucket(raw_bucket).get(attr.name)
    return cast(attr, value)


def is_blank(value) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return not value
    return False


def present(record, name, registry) -> bool:
    """True unless the typed value is None, False, blank or empty."""
    return not is_blank(read(record, name, registry))


def write(record, name, value, registry):
    """Store value uncoerced and replace the whole bucket. Returns the record."""
    attr = registry.lookup(name)
    data = load_bucket(_get_bucket(record, attr.bucket))
    data[attr.name] = value
    setattr(record, attr.bucket, data)
    return record
