"""API routes for managing saved Jira connections."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from jiradash.connectors.base import AuthenticationError, NetworkError
from jiradash.models.connection import (
    ConnectionsResponse,
    ConnectionStatusResponse,
    ConnectionTestRequest,
    ConnectionTestResponse,
)
from jiradash.storage.base import ConnectionIndexError, StorageError
from jiradash.storage.connection_store import ConnectionStore, get_connection_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/connections", tags=["connections"])

Store = Annotated[ConnectionStore, Depends(get_connection_store)]


def _storage_failure(e: StorageError) -> HTTPException:
    logger.error(f"Connection registry error: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Error reading or saving connections: {e}",
    )


@router.get("", response_model=ConnectionsResponse)
async def list_connections(store: Store):
    """List saved connections and the index of the current one."""
    try:
        registry = await store.list_all()
    except StorageError as e:
        raise _storage_failure(e)
    return ConnectionsResponse.from_registry(registry)


@router.get("/status", response_model=ConnectionStatusResponse)
async def connection_status(store: Store):
    """Report the current connection for the navbar."""
    try:
        registry = await store.get_status()
    except StorageError as e:
        raise _storage_failure(e)

    current = registry.current_connection()
    base = ConnectionsResponse.from_registry(registry)
    return ConnectionStatusResponse(
        **base.model_dump(),
        current_connection=current.masked() if current else None,
    )


@router.post("/test", response_model=ConnectionTestResponse)
async def test_connection(data: ConnectionTestRequest, store: Store):
    """Verify credentials against the site and save them as the current connection."""
    try:
        created = await store.test_and_upsert(data.domain, data.email, data.token)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except NetworkError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except StorageError as e:
        raise _storage_failure(e)

    message = "Connection verified and saved" if created else "Connection already saved"
    return ConnectionTestResponse(created=created, message=message)


@router.put("/current", response_model=ConnectionsResponse)
async def set_current_connection(store: Store, index: Annotated[int, Query()]):
    """Select the connection used for syncing."""
    try:
        registry = await store.set_current(index)
    except ConnectionIndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        raise _storage_failure(e)
    return ConnectionsResponse.from_registry(registry)


@router.delete("/{index}", response_model=ConnectionsResponse)
async def delete_connection(index: int, store: Store):
    """Delete a saved connection."""
    try:
        registry = await store.remove(index)
    except ConnectionIndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageError as e:
        raise _storage_failure(e)
    return ConnectionsResponse.from_registry(registry)
