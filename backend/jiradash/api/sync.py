"""API routes for syncing Jira configuration and reading the results."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status

from jiradash.connectors.base import ConnectorError
from jiradash.models.sync import SyncDocument, SyncRequest
from jiradash.services.sync_service import (
    ConnectionMismatchError,
    SyncService,
    get_sync_service,
)
from jiradash.storage.base import NoActiveConnectionError, StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])

Service = Annotated[SyncService, Depends(get_sync_service)]


@router.post("", response_model=SyncDocument)
async def run_sync(data: SyncRequest, service: Service):
    """Fetch the selected categories and return the updated site document."""
    try:
        return await service.sync(data.categories(), domain=data.domain, email=data.email)
    except NoActiveConnectionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"No active connection: {e}",
        )
    except ConnectionMismatchError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ConnectorError as e:
        logger.error(f"Sync failed: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except StorageError as e:
        logger.error(f"Sync could not be saved: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error saving synced data: {e}",
        )


@router.get("/document")
async def get_document(service: Service, key: str | None = None) -> Any:
    """Return the current site's document, or one key of it when ``key`` is given."""
    try:
        document = await service.current_document()
    except NoActiveConnectionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"No active connection: {e}",
        )
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    if key is None:
        return document
    if key not in document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Key '{key}' not found in the synced data",
        )
    return document[key]
