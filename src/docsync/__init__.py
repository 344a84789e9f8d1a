"""
docsync: document schema synchronization

Reconciles the declared shape of stored document types against the last
recorded snapshot and applies the data and metadata changes needed to keep
storage in sync, without hand-written migrations.
"""

__version__ = "0.1.0"

from .schema_sync.config import SyncOptions
from .schema_sync.synchronizer import SchemaSynchronizer, sync_data

__all__ = ["SyncOptions", "SchemaSynchronizer", "sync_data"]
