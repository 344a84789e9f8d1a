"""Store interfaces consumed by schema synchronization."""

from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from ..schema_sync.types import DocumentMapping, ModelSnapshot


@runtime_checkable
class SyncSession(Protocol):
    """A transactional unit of work against the document store.

    Every call runs synchronously inside one serializable transaction that
    only ends with ``save_changes`` or ``rollback``.
    """

    def query_snapshots(self) -> List[ModelSnapshot]:
        """Return every persisted model snapshot."""
        ...

    def store(self, snapshot: ModelSnapshot) -> None:
        """Stage a new snapshot for insertion."""
        ...

    def update(self, snapshot: ModelSnapshot) -> None:
        """Stage the current state of an existing snapshot."""
        ...

    def execute(self, statement: str, params: Optional[Dict[str, Any]] = None) -> None:
        """Execute a data-manipulation statement on the session's connection."""
        ...

    def save_changes(self) -> None:
        """Persist staged snapshots and commit the transaction."""
        ...

    def rollback(self) -> None:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """A document store with registered document types."""

    @property
    def document_mappings(self) -> Sequence[DocumentMapping]:
        """Registered document types, in registration order."""
        ...

    def open_session(self) -> SyncSession:
        """Open a session at serializable isolation."""
        ...
