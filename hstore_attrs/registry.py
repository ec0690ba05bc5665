"""
Attribute Registry — per-model catalog of hstore-backed virtual attributes.

Every virtual attribute must be registered here before it can be read or
written on a record. One registry exists per model class; subclasses merge
the entries of every parent registry and never mutate the parents'.

AttributeDef captures:
  - name:    logical attribute name (canonical string form)
  - bucket:  hstore column on the record that holds the raw value
  - type:    type tag from TYPE_TAGS, a one-argument callable, or None
  - default: value inserted into the bucket for new records
"""

import logging
import dataclasses
from typing import Any, Callable, Optional, Union


logger = logging.getLogger(__name__)


# Recognised type tags ("bool" is an alias of "boolean")
TYPE_TAGS = (
    "integer", "float", "decimal", "boolean", "bool",
    "string", "datetime", "date",
)


# ── Errors ────────────────────────────────────────────────────────

class HstoreAttributeError(Exception):
    """Base class for all hstore attribute errors."""


class RegistryError(HstoreAttributeError):
    """Raised when an attribute registration or lookup fails."""


class UnknownAttribute(RegistryError, AttributeError):
    """Raised when an attribute name was never registered."""

    def __init__(self, name, owner=None):
        where = f" on {owner}" if owner else ""
        super().__init__(f"Attribute '{name}' is not registered{where}")
        # AttributeError.__init__ resets .name, so set it afterwards
        self.name = name
        self.owner = owner


class InvalidTypeTag(RegistryError):
    """Raised when a type tag is neither a known tag nor a callable."""

    def __init__(self, name, type_tag):
        self.name = name
        self.type_tag = type_tag
        super().__init__(
            f"Attribute '{name}': cannot cast to type {type_tag!r}. "
            f"Use one of {list(TYPE_TAGS)} or pass a callable taking "
            f"one argument to perform custom casts"
        )


class DataFormatError(HstoreAttributeError, ValueError):
    """Raised when stored data cannot be parsed (dates, hstore literals)."""


def is_valid_type(type_tag) -> bool:
    """True for None, a recognised tag, or a callable."""
    return type_tag is None or type_tag in TYPE_TAGS or callable(type_tag)


# ── Definitions ───────────────────────────────────────────────────

@dataclasses.dataclass(frozen=True)
class AttributeDef:
    """Canonical definition of a single hstore-backed attribute."""

    name: str
    bucket: str
    type: Union[str, Callable[[Any], Any], None] = None
    default: Any = None


class AttributeRegistry:
    """
    Ordered catalog of AttributeDefs for one model class.

    Iteration follows registration order. Re-registering a name replaces
    its definition but keeps its original position.
    """

    def __init__(self, strict: bool = False, owner: Optional[str] = None):
        self.strict = strict
        self.owner = owner
        self._attributes: dict[str, AttributeDef] = {}

    # ── Register ──────────────────────────────────────────────────

    def register(self, name, bucket, type=None, default=None) -> AttributeDef:
        """Register (or overwrite) an attribute.

        Raises RegistryError if name or bucket is empty.
        Raises InvalidTypeTag in strict mode if the type tag is unusable;
        otherwise the check happens on first read.
        """
        name = str(name)
        bucket = str(bucket)
        if not name:
            raise RegistryError("Attribute name must not be empty")
        if not bucket:
            raise RegistryError(f"Attribute '{name}': bucket must not be empty")
        if self.strict and not is_valid_type(type):
            raise InvalidTypeTag(name, type)

        attr = AttributeDef(name=name, bucket=bucket, type=type, default=default)
        if name in self._attributes:
            logger.debug("overwriting hstore attribute %s on %s", name, self.owner)
        else:
            logger.debug("registered hstore attribute %s -> %s on %s",
                         name, bucket, self.owner)
        self._attributes[name] = attr
        return attr

    # ── Lookup ────────────────────────────────────────────────────

    def lookup(self, name) -> AttributeDef:
        """Get an attribute definition by name.

        Raises UnknownAttribute if not found.
        """
        name = str(name)
        try:
            return self._attributes[name]
        except KeyError:
            raise UnknownAttribute(name, self.owner) from None

    def has(self, name) -> bool:
        return str(name) in self._attributes

    def __contains__(self, name) -> bool:
        return self.has(name)

    def __iter__(self):
        return iter(list(self._attributes.values()))

    def __len__(self) -> int:
        return len(self._attributes)

    # ── Introspection ─────────────────────────────────────────────

    def names(self) -> list:
        return list(self._attributes)

    def buckets(self) -> list:
        """Distinct bucket names, in order of first use."""
        seen = []
        for attr in self._attributes.values():
            if attr.bucket not in seen:
                seen.append(attr.bucket)
        return seen

    def for_bucket(self, bucket) -> list:
        """AttributeDefs stored in the given bucket."""
        bucket = str(bucket)
        return [a for a in self._attributes.values() if a.bucket == bucket]

    # ── Inheritance ───────────────────────────────────────────────

    def merge(self, other: "AttributeRegistry") -> "AttributeRegistry":
        """Take over every entry of another registry, overwriting same names.

        The other registry is left untouched. Returns self.
        """
        self._attributes.update(other._attributes)
        return self

    def __repr__(self):
        return f"AttributeRegistry(owner={self.owner!r}, names={self.names()!r})"
