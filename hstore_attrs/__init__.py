"""
Typed virtual attributes stored in PostgreSQL hstore columns.
"""

from hstore_attrs.base import HstoreAttribute, HstoreModel
from hstore_attrs.registry import (
    AttributeDef,
    AttributeRegistry,
    DataFormatError,
    HstoreAttributeError,
    InvalidTypeTag,
    RegistryError,
    UnknownAttribute,
)
