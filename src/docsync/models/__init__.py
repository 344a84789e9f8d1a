"""Database models for docsync."""

from docsync.models.snapshot import ModelSnapshotRecord

__all__ = ["ModelSnapshotRecord"]
