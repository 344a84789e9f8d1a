"""Snapshot-based drift detection and reconciliation for document types."""

from .coercion import CoercionResult, CoercionRule, TypeCoercion
from .config import SyncOptions
from .differ import TypeDiffEngine
from .mutator import SchemaMutator
from .synchronizer import SchemaSynchronizer, sync_data
from .types import (
    ChangeType,
    DocumentMapping,
    DuplicatedField,
    FieldDescriptor,
    FieldKind,
    FieldType,
    ModelSnapshot,
    ModelSnapshotProperty,
    SchemaDiff,
    SyncPlan,
)

__all__ = [
    "CoercionResult",
    "CoercionRule",
    "TypeCoercion",
    "SyncOptions",
    "TypeDiffEngine",
    "SchemaMutator",
    "SchemaSynchronizer",
    "sync_data",
    "ChangeType",
    "DocumentMapping",
    "DuplicatedField",
    "FieldDescriptor",
    "FieldKind",
    "FieldType",
    "ModelSnapshot",
    "ModelSnapshotProperty",
    "SchemaDiff",
    "SyncPlan",
]
