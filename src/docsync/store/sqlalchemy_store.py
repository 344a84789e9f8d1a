"""SQLAlchemy-backed document store."""

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..core.database import create_tables
from ..models.snapshot import ModelSnapshotRecord
from ..schema_sync.types import DocumentMapping, ModelSnapshot


class SqlAlchemySyncSession:
    """Sync session over a SQLAlchemy ORM session."""

    def __init__(self, session: Session):
        self._session = session
        self._records: Dict[UUID, ModelSnapshotRecord] = {}

    def query_snapshots(self) -> List[ModelSnapshot]:
        records = self._session.scalars(select(ModelSnapshotRecord)).all()
        for record in records:
            self._records[record.id] = record
        return [record.to_snapshot() for record in records]

    def store(self, snapshot: ModelSnapshot) -> None:
        record = ModelSnapshotRecord.from_snapshot(snapshot)
        self._session.add(record)
        self._records[snapshot.id] = record

    def update(self, snapshot: ModelSnapshot) -> None:
        record = self._records.get(snapshot.id)
        if record is None:
            record = self._session.get(ModelSnapshotRecord, snapshot.id)
        if record is None:
            raise LookupError(f"No persisted snapshot for '{snapshot.name}'")

        record.apply(snapshot)
        self._records[snapshot.id] = record

    def execute(self, statement: str, params: Optional[Dict[str, Any]] = None) -> None:
        self._session.execute(text(statement), params or {})

    def save_changes(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()

    def close(self) -> None:
        self._records.clear()
        self._session.close()


class SqlAlchemyDocumentStore:
    """Document store persisting model snapshots through SQLAlchemy."""

    def __init__(self, engine: Engine, document_mappings: Iterable[DocumentMapping]):
        """Initialize the store.

        Args:
            engine: Engine for the database holding documents and snapshots
            document_mappings: Registered document types
        """
        self.engine = engine
        self._document_mappings = list(document_mappings)
        self._session_factory = sessionmaker(
            bind=engine.execution_options(isolation_level="SERIALIZABLE"),
            autoflush=False,
            expire_on_commit=False,
        )

    @property
    def document_mappings(self) -> List[DocumentMapping]:
        return self._document_mappings

    def open_session(self) -> SqlAlchemySyncSession:
        return SqlAlchemySyncSession(self._session_factory())

    def create_schema(self) -> None:
        """Create the snapshot table if it does not exist."""
        create_tables(self.engine)

    def load_snapshots(self) -> List[ModelSnapshot]:
        """Read the persisted snapshots in a short-lived session."""
        session = self.open_session()
        try:
            return session.query_snapshots()
        finally:
            session.rollback()
            session.close()
