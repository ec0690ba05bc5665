"""
Tests for the Attribute Registry — per-model catalog of hstore attributes.

Covers:
- Registration and overwrite
- Lookup and UnknownAttribute
- Lenient vs strict type tag validation
- Introspection (names, buckets, for_bucket)
- Merging registries for subclasses and mixins
"""

import pytest

from hstore_attrs.registry import (
    AttributeRegistry, AttributeDef, RegistryError, UnknownAttribute,
    InvalidTypeTag, TYPE_TAGS, is_valid_type,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def reg():
    """Fresh registry for each test."""
    return AttributeRegistry(owner="Person")


@pytest.fixture
def person_reg():
    """Registry with attributes spread over two buckets."""
    r = AttributeRegistry(owner="Person")
    r.register("employer", "work_details", "string", "")
    r.register("salary", "work_details", "integer", 0)
    r.register("street", "address", "string", "")
    r.register("city", "address", "string", "")
    return r


# ===========================================================================
# A. Registration
# ===========================================================================

class TestRegister:

    def test_register_basic(self, reg):
        attr = reg.register("age", "data", "integer", 18)
        assert attr.name == "age"
        assert attr.bucket == "data"
        assert attr.type == "integer"
        assert attr.default == 18

    def test_register_returns_attributedef(self, reg):
        assert isinstance(reg.register("age", "data"), AttributeDef)

    def test_register_without_type_or_default(self, reg):
        attr = reg.register("nickname", "data")
        assert attr.type is None
        assert attr.default is None

    def test_names_are_normalised_to_str(self, reg):
        class Key:
            def __str__(self):
                return "age"

        reg.register(Key(), "data", "integer")
        assert reg.has("age")
        assert reg.lookup(Key()).name == "age"

    def test_empty_name_raises(self, reg):
        with pytest.raises(RegistryError, match="must not be empty"):
            reg.register("", "data")

    def test_empty_bucket_raises(self, reg):
        with pytest.raises(RegistryError, match="bucket must not be empty"):
            reg.register("age", "")

    def test_reregister_overwrites(self, reg):
        reg.register("age", "data", "integer", 0)
        reg.register("age", "profile", "string", "n/a")
        attr = reg.lookup("age")
        assert attr.bucket == "profile"
        assert attr.type == "string"
        assert len(reg) == 1

    def test_reregister_keeps_position(self, reg):
        reg.register("a", "data")
        reg.register("b", "data")
        reg.register("a", "data", "integer")
        assert reg.names() == ["a", "b"]

    def test_attributedef_is_immutable(self, reg):
        attr = reg.register("age", "data", "integer")
        with pytest.raises(AttributeError):
            attr.default = 5

    def test_callable_type(self, reg):
        attr = reg.register("icq", "data", lambda v: f"UIN: #{v}")
        assert callable(attr.type)


# ===========================================================================
# B. Lookup
# ===========================================================================

class TestLookup:

    def test_lookup_existing(self, person_reg):
        assert person_reg.lookup("salary").bucket == "work_details"

    def test_lookup_missing_raises(self, person_reg):
        with pytest.raises(UnknownAttribute, match="doesNotExist.*not registered"):
            person_reg.lookup("doesNotExist")

    def test_unknown_attribute_is_registry_and_attribute_error(self, person_reg):
        with pytest.raises(RegistryError):
            person_reg.lookup("nope")
        with pytest.raises(AttributeError):
            person_reg.lookup("nope")

    def test_unknown_attribute_carries_name_and_owner(self, person_reg):
        with pytest.raises(UnknownAttribute) as exc_info:
            person_reg.lookup("nope")
        assert exc_info.value.name == "nope"
        assert exc_info.value.owner == "Person"

    def test_has_and_contains(self, person_reg):
        assert person_reg.has("city")
        assert "city" in person_reg
        assert "country" not in person_reg


# ===========================================================================
# C. Type Tag Validation
# ===========================================================================

class TestTypeTags:

    @pytest.mark.parametrize("tag", TYPE_TAGS)
    def test_known_tags_valid(self, tag):
        assert is_valid_type(tag)

    def test_none_and_callable_valid(self):
        assert is_valid_type(None)
        assert is_valid_type(str.upper)

    def test_unknown_tag_invalid(self):
        assert not is_valid_type("money")
        assert not is_valid_type(42)

    def test_lenient_registry_accepts_bad_tag(self, reg):
        attr = reg.register("price", "data", "money")
        assert attr.type == "money"

    def test_strict_registry_rejects_bad_tag(self):
        reg = AttributeRegistry(strict=True)
        with pytest.raises(InvalidTypeTag, match="money"):
            reg.register("price", "data", "money")
        assert "price" not in reg

    def test_strict_registry_accepts_good_tags(self):
        reg = AttributeRegistry(strict=True)
        reg.register("price", "data", "decimal")
        reg.register("icq", "data", lambda v: v)
        assert len(reg) == 2

    def test_invalid_type_tag_message_lists_tags(self):
        err = InvalidTypeTag("price", "money")
        assert "integer" in str(err)
        assert "callable" in str(err)


# ===========================================================================
# D. Introspection
# ===========================================================================

class TestIntrospection:

    def test_iteration_in_registration_order(self, person_reg):
        assert [a.name for a in person_reg] == [
            "employer", "salary", "street", "city",
        ]

    def test_buckets(self, person_reg):
        assert person_reg.buckets() == ["work_details", "address"]

    def test_for_bucket(self, person_reg):
        names = [a.name for a in person_reg.for_bucket("address")]
        assert names == ["street", "city"]

    def test_for_unknown_bucket_empty(self, person_reg):
        assert person_reg.for_bucket("nope") == []


# ===========================================================================
# E. Merge
# ===========================================================================

class TestMerge:

    def test_merge_takes_parent_entries(self, person_reg):
        child = AttributeRegistry(owner="Employee").merge(person_reg)
        assert child.names() == person_reg.names()
        assert child.owner == "Employee"

    def test_merged_registry_is_independent(self, person_reg):
        child = AttributeRegistry().merge(person_reg)
        child.register("title", "work_details", "string")
        child.register("salary", "work_details", "float")
        assert "title" not in person_reg
        assert person_reg.lookup("salary").type == "integer"

    def test_later_merge_wins_on_clash(self):
        first = AttributeRegistry()
        first.register("level", "data", "integer", 1)
        first.register("a", "data")
        second = AttributeRegistry()
        second.register("level", "data", "string", "high")
        second.register("b", "data")
        merged = AttributeRegistry().merge(first).merge(second)
        assert merged.names() == ["level", "a", "b"]
        assert merged.lookup("level").default == "high"

    def test_merge_keeps_own_strictness(self):
        lenient = AttributeRegistry()
        lenient.register("price", "data", "money")
        merged = AttributeRegistry(strict=True).merge(lenient)
        assert merged.strict is True
        assert merged.lookup("price").type == "money"
