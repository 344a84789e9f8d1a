"""Unit tests for removed-field cleanup."""

from unittest.mock import MagicMock

import pytest
from conftest import prop

from docsync.schema_sync.config import SyncOptions
from docsync.schema_sync.mutator import SchemaMutator, quote_identifier


class TestSchemaMutator:
    """Test cleanup statements for lossy removals."""

    def setup_method(self):
        """Set up test fixtures."""
        self.mutator = SchemaMutator()

    def test_payload_key_removal(self, person_mapping):
        """Test a removed property is subtracted from every payload."""
        statements = self.mutator.build_cleanup_statements(
            person_mapping, prop("Age", "int32"), SyncOptions(drop_duplicated_columns=True)
        )
        assert len(statements) == 1
        assert statements[0].sql == 'UPDATE public.mt_doc_person SET "data" = "data" - :key'
        assert statements[0].params == {"key": "Age"}

    def test_duplicated_column_dropped(self, person_mapping):
        """Test the backing column of a duplicated field is dropped."""
        statements = self.mutator.build_cleanup_statements(
            person_mapping, prop("Legacy", "int32"), SyncOptions(drop_duplicated_columns=True)
        )
        assert len(statements) == 2
        assert statements[1].sql == 'ALTER TABLE public.mt_doc_person DROP COLUMN IF EXISTS "legacy"'
        assert statements[1].params == {}

    def test_duplicated_column_kept_when_disabled(self, person_mapping):
        """Test duplicated columns survive when the option is off."""
        statements = self.mutator.build_cleanup_statements(
            person_mapping, prop("Legacy", "int32"), SyncOptions(drop_duplicated_columns=False)
        )
        assert [s.params for s in statements] == [{"key": "Legacy"}]

    def test_duplicated_field_must_match_type(self, person_mapping):
        """Test a duplicated field with the same name but another type is left alone."""
        statements = self.mutator.build_cleanup_statements(
            person_mapping, prop("Legacy", "int64"), SyncOptions(drop_duplicated_columns=True)
        )
        assert len(statements) == 1

    def test_cleanup_executes_statements(self, person_mapping):
        """Test statements run on the session in order."""
        session = MagicMock()

        statements = self.mutator.cleanup_removed(
            session, person_mapping, prop("Legacy", "int32"), SyncOptions(drop_duplicated_columns=True)
        )

        assert session.execute.call_count == 2
        first, second = session.execute.call_args_list
        assert first.args == (statements[0].sql, {"key": "Legacy"})
        assert second.args == (statements[1].sql, {})

    def test_cleanup_propagates_failures(self, person_mapping):
        """Test a failing statement is not swallowed."""
        session = MagicMock()
        session.execute.side_effect = RuntimeError("relation does not exist")

        with pytest.raises(RuntimeError, match="relation does not exist"):
            self.mutator.cleanup_removed(
                session, person_mapping, prop("Age", "int32"), SyncOptions()
            )

    def test_quote_identifier(self):
        """Test identifier quoting escapes embedded quotes."""
        assert quote_identifier("name") == '"name"'
        assert quote_identifier('we"ird') == '"we""ird"'
