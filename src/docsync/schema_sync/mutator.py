"""Storage cleanup for fields whose data cannot be carried forward."""

from typing import List

import structlog

from ..store.base import SyncSession
from .config import SyncOptions
from .types import DocumentMapping, ModelSnapshotProperty, Statement

logger = structlog.get_logger(__name__)


def quote_identifier(identifier: str) -> str:
    """Quote a single SQL identifier."""
    return '"' + identifier.replace('"', '""') + '"'


class SchemaMutator:
    """Issues the data cleanup statements for lossy-removed properties."""

    def __init__(self):
        self.logger = logger.bind(component="schema_mutator")

    def build_cleanup_statements(
        self,
        mapping: DocumentMapping,
        removed_property: ModelSnapshotProperty,
        options: SyncOptions,
    ) -> List[Statement]:
        """Generate the statements that clean up a removed property.

        Args:
            mapping: Document type the property belonged to
            removed_property: Snapshot property being removed
            options: Sync options

        Returns:
            Payload key removal, followed by a column drop when the property
            backs a duplicated field and duplicated columns are dropped
        """
        payload = quote_identifier(mapping.payload_column)
        statements = [
            Statement(
                sql=f"UPDATE {mapping.qualified_table_name} SET {payload} = {payload} - :key",
                params={"key": removed_property.name},
            )
        ]

        if options.drop_duplicated_columns:
            duplicated = mapping.find_duplicated_field(removed_property.name, removed_property.type)
            if duplicated is not None:
                statements.append(Statement(
                    sql=(f"ALTER TABLE {mapping.qualified_table_name} "
                         f"DROP COLUMN IF EXISTS {quote_identifier(duplicated.column_name)}"),
                ))

        return statements

    def cleanup_removed(
        self,
        session: SyncSession,
        mapping: DocumentMapping,
        removed_property: ModelSnapshotProperty,
        options: SyncOptions,
    ) -> List[Statement]:
        """Remove a property's data from every stored document of a type.

        Failures propagate to the caller, which owns the transaction.
        """
        statements = self.build_cleanup_statements(mapping, removed_property, options)

        for statement in statements:
            self.logger.debug("Executing cleanup statement",
                              document_type=mapping.name,
                              field=removed_property.name,
                              sql=statement.sql)
            session.execute(statement.sql, statement.params)

        return statements
