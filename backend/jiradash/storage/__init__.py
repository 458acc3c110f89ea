"""Storage for the connection registry and synced documents."""

from jiradash.storage.base import (
    ConnectionIndexError,
    NoActiveConnectionError,
    StorageError,
)
from jiradash.storage.connection_store import ConnectionStore, get_connection_store
from jiradash.storage.document_store import (
    SyncDocumentStore,
    document_filename,
    get_document_store,
    merge_documents,
)

__all__ = [
    "ConnectionIndexError",
    "ConnectionStore",
    "NoActiveConnectionError",
    "StorageError",
    "SyncDocumentStore",
    "document_filename",
    "get_connection_store",
    "get_document_store",
    "merge_documents",
]
