"""Type coercion rules for deciding whether a retyped field keeps its data."""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional

from .types import FieldKind, FieldType

INTEGRAL_KINDS = frozenset({
    FieldKind.SBYTE,
    FieldKind.BYTE,
    FieldKind.INT16,
    FieldKind.UINT16,
    FieldKind.INT32,
    FieldKind.UINT32,
    FieldKind.INT64,
    FieldKind.UINT64,
})

FLOATING_KINDS = frozenset({FieldKind.FLOAT, FieldKind.DOUBLE, FieldKind.DECIMAL})

NUMERIC_KINDS = INTEGRAL_KINDS | FLOATING_KINDS


@dataclass(frozen=True)
class CoercionRule:
    """Target kinds the default value of a source kind converts to."""

    source_kind: FieldKind
    target_kinds: FrozenSet[FieldKind]


@dataclass(frozen=True)
class CoercionResult:
    """Outcome of a coercion probe."""

    convertible: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.convertible


class TypeCoercion:
    """Decides whether an old field type can be represented as a new one.

    A retype is convertible when the default value of the old type survives a
    change of representation into the new type. Only value-like old types are
    considered; string and complex types never convert. Targets are value
    kinds only: a string target changes how the payload encodes the value.
    """

    def __init__(self, rules: Optional[Iterable[CoercionRule]] = None):
        self.rules: Dict[FieldKind, CoercionRule] = {}
        if rules is None:
            self._setup_default_rules()
        else:
            for rule in rules:
                self.add_rule(rule)

    def _setup_default_rules(self) -> None:
        """Set up the change-representation table for default values."""

        # Zero converts to any number, to false and to the null character
        for kind in INTEGRAL_KINDS | {FieldKind.ENUM}:
            self.add_rule(CoercionRule(
                source_kind=kind,
                target_kinds=NUMERIC_KINDS | {FieldKind.BOOLEAN, FieldKind.CHAR},
            ))

        # Floating zero has no character representation
        for kind in FLOATING_KINDS:
            self.add_rule(CoercionRule(
                source_kind=kind,
                target_kinds=NUMERIC_KINDS | {FieldKind.BOOLEAN},
            ))

        self.add_rule(CoercionRule(
            source_kind=FieldKind.BOOLEAN,
            target_kinds=NUMERIC_KINDS,
        ))

        self.add_rule(CoercionRule(
            source_kind=FieldKind.CHAR,
            target_kinds=INTEGRAL_KINDS,
        ))

        # datetime, datetime_offset, timespan and guid have no conversions

    def add_rule(self, rule: CoercionRule) -> None:
        """Add or replace the rule for a source kind."""
        self.rules[rule.source_kind] = rule

    def try_convert(self, old_type: Optional[FieldType], new_type: Optional[FieldType]) -> CoercionResult:
        """Check whether data stored as ``old_type`` remains valid as ``new_type``."""
        if old_type is None or new_type is None:
            return CoercionResult(False, "unknown type")

        if not old_type.kind.is_value_like:
            return CoercionResult(False, f"{old_type} is not a value type")

        target = new_type.underlying()

        # A string or complex target changes how the payload encodes the value
        if not target.kind.is_value_like:
            return CoercionResult(False, f"{new_type} is not a value type")

        if old_type.kind == target.kind and old_type.name != target.name:
            return CoercionResult(False, f"{old_type} and {target} are distinct types")

        # The default of a nullable type is null
        if old_type.nullable:
            if new_type.nullable:
                return CoercionResult(True, "null converts to a nullable type")
            return CoercionResult(False, f"null cannot be represented as {new_type}")

        if old_type.kind == target.kind:
            return CoercionResult(True, "same representation")

        rule = self.rules.get(old_type.kind)
        if rule is None or target.kind not in rule.target_kinds:
            return CoercionResult(False, f"no conversion from {old_type} to {target}")

        return CoercionResult(True, f"{old_type} converts to {target}")

    def can_convert(self, old_type: Optional[FieldType], new_type: Optional[FieldType]) -> bool:
        return self.try_convert(old_type, new_type).convertible
