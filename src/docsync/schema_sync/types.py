"""Types and enums for document schema synchronization."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4


class FieldKind(Enum):
    """Closed set of semantic field types a document can declare."""

    BOOLEAN = "boolean"
    CHAR = "char"
    SBYTE = "sbyte"
    BYTE = "byte"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    DATETIME_OFFSET = "datetime_offset"
    TIMESPAN = "timespan"
    GUID = "guid"
    ENUM = "enum"

    # Reference types
    STRING = "string"
    COMPLEX = "complex"

    @property
    def is_value_like(self) -> bool:
        """Whether values of this kind are plain values rather than references."""
        return self not in (FieldKind.STRING, FieldKind.COMPLEX)

    @property
    def is_named(self) -> bool:
        """Whether this kind carries a type name (enum and complex types)."""
        return self in (FieldKind.ENUM, FieldKind.COMPLEX)


@dataclass(frozen=True)
class FieldType:
    """Semantic type tag of a document field.

    The textual form is ``<kind>[:<name>][?]``, for example ``int32``,
    ``int64?``, ``enum:OrderStatus`` or ``complex:Address``.
    """

    kind: FieldKind
    nullable: bool = False
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.name is not None and not self.kind.is_named:
            raise ValueError(f"Field kind '{self.kind.value}' does not take a type name")

    @classmethod
    def parse(cls, text: str) -> "FieldType":
        """Parse a textual type tag."""
        raw = text.strip()
        nullable = raw.endswith("?")
        if nullable:
            raw = raw[:-1]

        kind_text, _, name = raw.partition(":")
        try:
            kind = FieldKind(kind_text.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown field type: '{text}'") from None

        return cls(kind=kind, nullable=nullable, name=name.strip() or None)

    def underlying(self) -> "FieldType":
        """Return the non-nullable form of this type."""
        if not self.nullable:
            return self
        return FieldType(kind=self.kind, name=self.name)

    def __str__(self) -> str:
        text = self.kind.value
        if self.name:
            text += f":{self.name}"
        if self.nullable:
            text += "?"
        return text


@dataclass(frozen=True)
class FieldDescriptor:
    """A field declared by a live document type."""

    name: str
    type: FieldType


@dataclass(frozen=True)
class DuplicatedField:
    """A field mirrored into its own physical column next to the payload."""

    name: str
    type: FieldType
    column_name: str


@dataclass(frozen=True)
class DocumentMapping:
    """Live description of a document type and where it is stored."""

    name: str
    qualified_table_name: str
    fields: List[FieldDescriptor]
    duplicated_fields: List[DuplicatedField] = field(default_factory=list)
    payload_column: str = "data"

    def find_duplicated_field(self, name: str, field_type: FieldType) -> Optional[DuplicatedField]:
        """Find the duplicated field backing a member with this name and type."""
        for duplicated in self.duplicated_fields:
            if duplicated.name == name and duplicated.type == field_type:
                return duplicated
        return None


@dataclass
class ModelSnapshotProperty:
    """Last reconciled name and type of a document field."""

    name: str
    type: FieldType

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": str(self.type)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelSnapshotProperty":
        return cls(name=data["name"], type=FieldType.parse(data["type"]))


@dataclass
class ModelSnapshot:
    """Last known shape of a document type, keyed by its name."""

    name: str
    properties: List[ModelSnapshotProperty] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)

    @classmethod
    def from_mapping(cls, mapping: DocumentMapping) -> "ModelSnapshot":
        """Build a snapshot mirroring every field the document type declares."""
        return cls(
            name=mapping.name,
            properties=[ModelSnapshotProperty(name=f.name, type=f.type) for f in mapping.fields],
        )

    def get_property(self, name: str) -> Optional[ModelSnapshotProperty]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def remove_property(self, name: str) -> None:
        self.properties = [prop for prop in self.properties if prop.name != name]


class ChangeType(Enum):
    """Classification of a single discrepancy between snapshot and live type."""

    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


@dataclass
class SchemaDiff:
    """Classified changes for one document type."""

    add: List[FieldDescriptor] = field(default_factory=list)
    update: List[FieldDescriptor] = field(default_factory=list)
    remove: List[ModelSnapshotProperty] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.add or self.update or self.remove)

    def counts(self) -> Dict[ChangeType, int]:
        return {
            ChangeType.ADD: len(self.add),
            ChangeType.UPDATE: len(self.update),
            ChangeType.REMOVE: len(self.remove),
        }


@dataclass(frozen=True)
class Statement:
    """A data-manipulation statement and its bound parameters."""

    sql: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SyncPlan:
    """What a sync call would do for one document type."""

    document_type: str
    created: bool
    diff: SchemaDiff
    statements: List[Statement] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return self.created or not self.diff.is_empty
