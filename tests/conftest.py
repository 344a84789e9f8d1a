"""Test configuration for docsync."""

import copy
import os
from typing import Any, Callable, Dict, List, Optional

import pytest

os.environ["DOCSYNC_ENVIRONMENT"] = "test"

from docsync.schema_sync.types import (  # noqa: E402
    DocumentMapping,
    DuplicatedField,
    FieldDescriptor,
    FieldType,
    ModelSnapshot,
    ModelSnapshotProperty,
)


def field(name: str, type_tag: str) -> FieldDescriptor:
    return FieldDescriptor(name=name, type=FieldType.parse(type_tag))


def prop(name: str, type_tag: str) -> ModelSnapshotProperty:
    return ModelSnapshotProperty(name=name, type=FieldType.parse(type_tag))


def snapshot_shape(snapshot: ModelSnapshot) -> Dict[str, str]:
    return {p.name: str(p.type) for p in snapshot.properties}


class RecordingSession:
    """In-memory sync session that records every statement."""

    def __init__(self, owner: "RecordingStore"):
        self._owner = owner
        self.statements: List[tuple] = []
        self._pending: Dict[str, ModelSnapshot] = {}
        self.closed = False
        self.rolled_back = False

    def query_snapshots(self) -> List[ModelSnapshot]:
        return [copy.deepcopy(s) for s in self._owner.snapshots.values()]

    def store(self, snapshot: ModelSnapshot) -> None:
        self._pending[snapshot.name] = copy.deepcopy(snapshot)

    def update(self, snapshot: ModelSnapshot) -> None:
        self._pending[snapshot.name] = copy.deepcopy(snapshot)

    def execute(self, statement: str, params: Optional[Dict[str, Any]] = None) -> None:
        if self._owner.fail_on_statement and self._owner.fail_on_statement(statement, params or {}):
            raise RuntimeError(f"statement failed: {statement}")
        self.statements.append((statement, params or {}))

    def save_changes(self) -> None:
        if self._owner.fail_on_commit:
            raise RuntimeError("could not serialize access due to concurrent update")
        self._owner.snapshots.update(self._pending)
        self._owner.executed.extend(self.statements)
        self._owner.commits += 1
        self._pending = {}
        self.statements = []

    def rollback(self) -> None:
        self.rolled_back = True
        self._pending = {}
        self.statements = []

    def close(self) -> None:
        self.closed = True


class RecordingStore:
    """In-memory document store for exercising the synchronizer."""

    def __init__(self, mappings: List[DocumentMapping], snapshots: Optional[List[ModelSnapshot]] = None):
        self._mappings = list(mappings)
        self.snapshots: Dict[str, ModelSnapshot] = {s.name: copy.deepcopy(s) for s in snapshots or []}
        self.executed: List[tuple] = []
        self.commits = 0
        self.sessions: List[RecordingSession] = []
        self.fail_on_commit = False
        self.fail_on_statement: Optional[Callable[[str, Dict[str, Any]], bool]] = None

    @property
    def document_mappings(self) -> List[DocumentMapping]:
        return self._mappings

    def open_session(self) -> RecordingSession:
        session = RecordingSession(self)
        self.sessions.append(session)
        return session


@pytest.fixture
def person_mapping():
    """Person document type with a duplicated Name column."""
    return DocumentMapping(
        name="Person",
        qualified_table_name="public.mt_doc_person",
        fields=[
            field("Id", "guid"),
            field("Name", "string"),
            field("Age", "int32"),
        ],
        duplicated_fields=[
            DuplicatedField(name="Name", type=FieldType.parse("string"), column_name="name"),
            DuplicatedField(name="Legacy", type=FieldType.parse("int32"), column_name="legacy"),
        ],
    )


@pytest.fixture
def order_mapping():
    """Order document type without duplicated fields."""
    return DocumentMapping(
        name="Order",
        qualified_table_name="public.mt_doc_order",
        fields=[
            field("Id", "guid"),
            field("Total", "decimal"),
            field("Status", "enum:OrderStatus"),
        ],
    )


@pytest.fixture
def sample_registry_file(tmp_path):
    """Create a sample registry file for testing."""
    registry_content = """
document_types:
  - name: "Person"
    table: "mt_doc_person"
    fields:
      - name: "Id"
        type: "guid"
      - name: "Name"
        type: "string"
      - name: "Age"
        type: "int32"
    duplicated_fields:
      - name: "Name"
        type: "string"
        column: "name"

  - name: "Order"
    table: "mt_doc_order"
    payload_column: "body"
    fields:
      - name: "Total"
        type: "decimal?"
      - name: "Status"
        type: "enum:OrderStatus"
"""

    registry_file = tmp_path / "registry.yaml"
    registry_file.write_text(registry_content)
    return registry_file
