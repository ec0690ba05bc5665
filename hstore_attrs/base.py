"""
HstoreModel base class — typed virtual attributes stored in hstore columns.

hstore loses types (every value comes back as a string) and offers no
column defaults. Subclasses declare virtual attributes with a bucket, a
type hint and a default; reads are cast back to the declared type and new
records get the defaults filled in.

    @dataclass
    class User(HstoreModel):
        hstore_columns = ("data",)

        name: str = ""
        data: Optional[dict] = None

        age = HstoreAttribute("data", "integer")
        salary = HstoreAttribute("data", "float", 1234.56)
        admin = HstoreAttribute("data", "boolean", False)
        icq = HstoreAttribute(
            "data", lambda n: "UIN: n/a" if not n else f"UIN: #{n}")

    user = User(name="alice")   # user.data == {"age": None, "salary": 1234.56, ...}
    user.age = "42"
    user.age                    # 42
    user.hstore_attribute_present("admin")  # False

Buckets are plain attributes on the record. For dataclasses the defaults
are applied by __post_init__; other hosts call apply_hstore_defaults()
once after loading the buckets.
"""

from typing import Optional

from hstore_attrs import overlay
from hstore_attrs.codec import dump_bucket
from hstore_attrs.registry import AttributeRegistry, RegistryError


class HstoreAttribute:
    """Data descriptor for one virtual attribute declared in a class body."""

    def __init__(self, bucket, type=None, default=None):
        self.bucket = bucket
        self.type = type
        self.default = default
        self.name: Optional[str] = None

    def __set_name__(self, owner, name):
        # Registration happens in HstoreModel.__init_subclass__, which runs
        # after __set_name__ and after the subclass registry exists.
        self.name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return obj.read_hstore_attribute(self.name)

    def __set__(self, obj, value):
        obj.write_hstore_attribute(self.name, value)

    def __repr__(self):
        return (f"HstoreAttribute(name={self.name!r}, bucket={self.bucket!r}, "
                f"type={self.type!r}, default={self.default!r})")


class HstoreModel:
    """
    Mixin for models with hstore columns.

    Class-level settings:
      hstore_columns       names of the bucket attributes on the record
      hstore_strict_types  reject bad type tags at registration time
                           instead of on first read

    Each subclass owns its own hstore_attributes registry, merged from
    the registries of all its HstoreModel bases.
    """

    hstore_columns: tuple = ()
    hstore_strict_types: bool = False

    # Replaced per subclass in __init_subclass__
    hstore_attributes: AttributeRegistry = AttributeRegistry(owner="HstoreModel")

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        registry = AttributeRegistry(
            strict=cls.hstore_strict_types, owner=cls.__qualname__,
        )
        # Most derived base last, so it wins on name clashes
        for base in reversed(cls.__mro__[1:]):
            inherited = base.__dict__.get("hstore_attributes")
            if isinstance(inherited, AttributeRegistry):
                registry.merge(inherited)
        cls.hstore_attributes = registry
        for attr_name, value in list(cls.__dict__.items()):
            if isinstance(value, HstoreAttribute):
                cls.hstore_attributes.register(
                    attr_name, value.bucket, value.type, value.default,
                )

    # ── Class-level setup ─────────────────────────────────────────

    @classmethod
    def has_hstore_columns(cls) -> bool:
        return bool(cls.hstore_columns)

    @classmethod
    def hstore_attr_accessor(cls, attribute_name, hstore_column,
                             type=None, default=None):
        """Register a virtual attribute and install its descriptor."""
        attr = cls.hstore_attributes.register(
            attribute_name, hstore_column, type, default,
        )
        descriptor = HstoreAttribute(attr.bucket, attr.type, attr.default)
        descriptor.name = attr.name
        setattr(cls, attr.name, descriptor)
        return attr

    @classmethod
    def hstore_accessor(cls, hstore_column):
        """Registration function bound to one bucket.

            data_accessor = User.hstore_accessor("data")
            data_accessor("nickname", "string", "")

        Raises RegistryError if hstore_columns is declared and does not
        list the bucket.
        """
        hstore_column = str(hstore_column)
        if cls.hstore_columns and hstore_column not in cls.hstore_columns:
            raise RegistryError(
                f"{cls.__name__}: '{hstore_column}' is not an hstore column "
                f"(expected one of {list(cls.hstore_columns)})"
            )

        def accessor(attribute_name, type=None, default=None):
            return cls.hstore_attr_accessor(
                attribute_name, hstore_column, type, default,
            )

        accessor.__name__ = f"{hstore_column}_hstore_accessor"
        return accessor

    # ── Lifecycle ─────────────────────────────────────────────────

    def __post_init__(self):
        self.apply_hstore_defaults()

    def apply_hstore_defaults(self):
        return overlay.apply_defaults(self, type(self).hstore_attributes)

    # ── Attribute access ──────────────────────────────────────────

    def read_hstore_attribute(self, attribute_name):
        return overlay.read(self, attribute_name, type(self).hstore_attributes)

    def write_hstore_attribute(self, attribute_name, value):
        """Store value in its bucket without coercion. Returns self."""
        return overlay.write(
            self, attribute_name, value, type(self).hstore_attributes,
        )

    def hstore_attribute_present(self, attribute_name) -> bool:
        return overlay.present(
            self, attribute_name, type(self).hstore_attributes,
        )

    def hstore_dump(self, hstore_column) -> dict:
        """Bucket with every value in the string form hstore stores."""
        return dump_bucket(getattr(self, hstore_column, None))
