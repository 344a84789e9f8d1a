"""Unit tests for type coercion."""

import pytest

from docsync.schema_sync.coercion import CoercionRule, TypeCoercion
from docsync.schema_sync.types import FieldKind, FieldType


def t(tag):
    return FieldType.parse(tag)


class TestTypeCoercion:
    """Test coercion between field types."""

    def test_initialization(self):
        """Test default rules are registered."""
        coercion = TypeCoercion()
        assert FieldKind.INT32 in coercion.rules
        assert FieldKind.STRING not in coercion.rules

    @pytest.mark.parametrize("old, new", [
        ("int32", "int64"),
        ("int64", "int32"),
        ("int16", "double"),
        ("float", "double"),
        ("boolean", "int32"),
        ("char", "int32"),
        ("enum:OrderStatus", "int32"),
        ("decimal", "boolean"),
    ])
    def test_value_conversions(self, old, new):
        """Test value-type changes whose default survives."""
        result = TypeCoercion().try_convert(t(old), t(new))
        assert result.convertible
        assert result

    @pytest.mark.parametrize("old, new", [
        ("int32", "datetime"),
        ("int32", "guid"),
        ("double", "char"),
        ("char", "boolean"),
        ("boolean", "char"),
        ("datetime", "int64"),
        ("guid", "string"),
        ("timespan", "int64"),
        ("datetime_offset", "string"),
        ("int32", "string"),
        ("datetime", "string"),
        ("boolean", "string"),
    ])
    def test_failed_value_conversions(self, old, new):
        """Test value-type changes that lose data."""
        assert not TypeCoercion().can_convert(t(old), t(new))

    def test_reference_types_never_convert(self):
        """Test string and complex old types are always lossy."""
        coercion = TypeCoercion()
        assert not coercion.can_convert(t("string"), t("int32"))
        assert not coercion.can_convert(t("complex:Address"), t("complex:PostalAddress"))
        assert not coercion.can_convert(t("complex:Address"), t("string"))

    def test_unknown_types(self):
        """Test a missing type is never convertible."""
        coercion = TypeCoercion()
        assert not coercion.can_convert(None, t("int32"))
        assert not coercion.can_convert(t("int32"), None)
        assert coercion.try_convert(None, None).reason == "unknown type"

    def test_nullable_target_is_unwrapped(self):
        """Test conversion into a nullable target uses the underlying type."""
        coercion = TypeCoercion()
        assert coercion.can_convert(t("int32"), t("int64?"))
        assert coercion.can_convert(t("int32"), t("int32?"))
        assert not coercion.can_convert(t("int32"), t("guid?"))

    def test_nullable_source(self):
        """Test null converts to nullable targets only."""
        coercion = TypeCoercion()
        assert coercion.can_convert(t("int32?"), t("int64?"))
        assert coercion.can_convert(t("guid?"), t("datetime?"))
        assert not coercion.can_convert(t("int32?"), t("int32"))
        assert not coercion.can_convert(t("int32?"), t("int64"))

    def test_distinct_enums_are_lossy(self):
        """Test two enumerations never convert into each other."""
        coercion = TypeCoercion()
        assert not coercion.can_convert(t("enum:OrderStatus"), t("enum:ShippingStatus"))
        assert coercion.can_convert(t("enum:OrderStatus"), t("enum:OrderStatus?"))

    def test_custom_rules(self):
        """Test replacing the rule table."""
        coercion = TypeCoercion(rules=[
            CoercionRule(source_kind=FieldKind.INT32, target_kinds=frozenset({FieldKind.INT64})),
        ])
        assert coercion.can_convert(t("int32"), t("int64"))
        assert not coercion.can_convert(t("int32"), t("string"))
        assert not coercion.can_convert(t("int16"), t("int64"))

    def test_add_rule_replaces_existing(self):
        """Test adding a rule for an existing source kind."""
        coercion = TypeCoercion()
        coercion.add_rule(CoercionRule(source_kind=FieldKind.INT32, target_kinds=frozenset({FieldKind.DATETIME})))
        assert coercion.can_convert(t("int32"), t("datetime"))
        assert not coercion.can_convert(t("int32"), t("int64"))

    def test_rules_cannot_allow_reference_targets(self):
        """Test string and complex targets stay lossy whatever the rules say."""
        coercion = TypeCoercion()
        coercion.add_rule(CoercionRule(source_kind=FieldKind.GUID, target_kinds=frozenset({FieldKind.STRING})))
        assert not coercion.can_convert(t("guid"), t("string"))

    @pytest.mark.parametrize("old, new", [
        ("int32?", "string?"),
        ("int32?", "complex:Address?"),
        ("guid?", "string?"),
        ("int32", "string?"),
        ("enum:OrderStatus?", "enum:ShippingStatus?"),
    ])
    def test_nullable_reference_targets_are_lossy(self, old, new):
        """Test null does not carry over into string, complex or other named types."""
        result = TypeCoercion().try_convert(t(old), t(new))
        assert not result.convertible
