"""Document store interfaces."""

from .base import DocumentStore, SyncSession

__all__ = ["DocumentStore", "SyncSession"]
