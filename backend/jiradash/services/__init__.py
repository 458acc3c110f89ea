"""Services for jiradash."""

from jiradash.services.sync_service import (
    ConnectionMismatchError,
    SyncService,
    get_sync_service,
)

__all__ = ["ConnectionMismatchError", "SyncService", "get_sync_service"]
