"""Snapshot reconciliation for every registered document type."""

import time
from typing import Dict, List, Optional, Tuple

import structlog

from ..monitoring.metrics import MetricsCollector
from ..store.base import DocumentStore, SyncSession
from .coercion import TypeCoercion
from .config import SyncOptions
from .differ import TypeDiffEngine
from .mutator import SchemaMutator
from .types import (
    DocumentMapping,
    ModelSnapshot,
    ModelSnapshotProperty,
    SchemaDiff,
    SyncPlan,
)

logger = structlog.get_logger(__name__)


class SchemaSynchronizer:
    """Brings persisted snapshots and document data in line with live types.

    A sync call runs in a single serializable session: either every snapshot
    change and storage cleanup commits, or none of them do.
    """

    def __init__(
        self,
        store: DocumentStore,
        options: Optional[SyncOptions] = None,
        type_coercion: Optional[TypeCoercion] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        """Initialize the synchronizer.

        Args:
            store: Document store providing sessions and document mappings
            options: Sync options (defaults read from the environment)
            type_coercion: Coercion rules used by the diff engine
            metrics: Optional metrics collector
        """
        self.store = store
        self.options = options if options is not None else SyncOptions()
        self.differ = TypeDiffEngine(type_coercion)
        self.mutator = SchemaMutator()
        self.metrics = metrics
        self.logger = logger.bind(component="schema_synchronizer")

    def sync(self) -> None:
        """Reconcile every document type and commit all changes together."""
        start_time = time.perf_counter()
        session = self.store.open_session()
        applied: List[Tuple[str, SchemaDiff]] = []

        try:
            snapshots = self._load_snapshots(session)

            for mapping in self.store.document_mappings:
                snapshot = snapshots.get(mapping.name)

                if snapshot is None:
                    snapshots[mapping.name] = self._create_snapshot(session, mapping)
                    continue

                diff = self._reconcile(session, mapping, snapshot)
                if not diff.is_empty:
                    applied.append((mapping.name, diff))

            session.save_changes()

        except Exception as e:
            self.logger.error("Schema synchronization failed, rolling back", error=str(e))
            session.rollback()
            self._record_sync("failed", start_time)
            raise

        finally:
            session.close()

        # Changes only count once committed
        if self.metrics:
            for document_type, diff in applied:
                for change_type, count in diff.counts().items():
                    self.metrics.record_changes(document_type, change_type.value, count)

        self._record_sync("succeeded", start_time)
        self.logger.info("Schema synchronization completed",
                         document_types=len(self.store.document_mappings),
                         duration_seconds=round(time.perf_counter() - start_time, 3))

    def plan(self) -> List[SyncPlan]:
        """Compute what ``sync`` would do without changing anything."""
        session = self.store.open_session()

        try:
            snapshots = self._load_snapshots(session)
            plans = []

            for mapping in self.store.document_mappings:
                snapshot = snapshots.get(mapping.name)

                if snapshot is None:
                    created = ModelSnapshot.from_mapping(mapping)
                    diff = SchemaDiff(add=list(mapping.fields))
                    plans.append(SyncPlan(document_type=mapping.name, created=True, diff=diff))
                    snapshots[mapping.name] = created
                    continue

                diff = self.differ.diff(snapshot.properties, mapping.fields)
                statements = []
                for prop in diff.remove:
                    statements.extend(self.mutator.build_cleanup_statements(mapping, prop, self.options))

                plans.append(SyncPlan(
                    document_type=mapping.name,
                    created=False,
                    diff=diff,
                    statements=statements,
                ))

            return plans

        finally:
            session.rollback()
            session.close()

    def _load_snapshots(self, session: SyncSession) -> Dict[str, ModelSnapshot]:
        snapshots = {}
        for snapshot in session.query_snapshots():
            snapshots.setdefault(snapshot.name, snapshot)
        return snapshots

    def _create_snapshot(self, session: SyncSession, mapping: DocumentMapping) -> ModelSnapshot:
        snapshot = ModelSnapshot.from_mapping(mapping)
        session.store(snapshot)

        self.logger.info("Created model snapshot",
                         document_type=mapping.name,
                         properties=len(snapshot.properties))
        return snapshot

    def _reconcile(self, session: SyncSession, mapping: DocumentMapping, snapshot: ModelSnapshot) -> SchemaDiff:
        diff = self.differ.diff(snapshot.properties, mapping.fields)

        if diff.is_empty:
            self.logger.debug("Model snapshot is current", document_type=mapping.name)
            return diff

        for live_field in diff.update:
            snapshot.get_property(live_field.name).type = live_field.type

        # Removals go first so a lossy retype never leaves two same-named properties
        for prop in diff.remove:
            self.logger.warning("Removing field data",
                                document_type=mapping.name,
                                field=prop.name,
                                type=str(prop.type))
            self.mutator.cleanup_removed(session, mapping, prop, self.options)
            snapshot.remove_property(prop.name)

        for live_field in diff.add:
            snapshot.properties.append(ModelSnapshotProperty(name=live_field.name, type=live_field.type))

        session.update(snapshot)

        self.logger.info("Reconciled model snapshot",
                         document_type=mapping.name,
                         added=len(diff.add),
                         updated=len(diff.update),
                         removed=len(diff.remove),
                         fields=self.differ.changed_names(diff))
        return diff

    def _record_sync(self, status: str, start_time: float) -> None:
        if self.metrics:
            self.metrics.record_sync(status, time.perf_counter() - start_time)


def sync_data(
    store: DocumentStore,
    options: Optional[SyncOptions] = None,
    metrics: Optional[MetricsCollector] = None,
) -> None:
    """Synchronize persisted document data with the store's live document types.

    Args:
        store: Document store to synchronize
        options: Sync options; duplicated columns are dropped by default
        metrics: Optional metrics collector

    Raises:
        Whatever the store raises; the transaction is rolled back first.
    """
    SchemaSynchronizer(store, options=options, metrics=metrics).sync()
