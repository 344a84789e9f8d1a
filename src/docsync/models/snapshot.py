"""Persisted model snapshot records."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String, Uuid

from docsync.core.database import Base
from docsync.schema_sync.types import ModelSnapshot, ModelSnapshotProperty


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ModelSnapshotRecord(Base):
    """Last reconciled shape of a document type."""

    __tablename__ = "docsync_model_snapshots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)
    properties = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @classmethod
    def from_snapshot(cls, snapshot: ModelSnapshot) -> "ModelSnapshotRecord":
        return cls(
            id=snapshot.id,
            name=snapshot.name,
            properties=[prop.to_dict() for prop in snapshot.properties],
        )

    def to_snapshot(self) -> ModelSnapshot:
        return ModelSnapshot(
            id=self.id,
            name=self.name,
            properties=[ModelSnapshotProperty.from_dict(item) for item in self.properties or []],
        )

    def apply(self, snapshot: ModelSnapshot) -> None:
        """Copy the snapshot's property list onto this record."""
        self.properties = [prop.to_dict() for prop in snapshot.properties]

    def __repr__(self) -> str:
        return f"<ModelSnapshotRecord(name={self.name}, properties={len(self.properties or [])})>"
