"""File-backed registry of saved Jira connections.

The registry is a single JSON document::

    {"connections": [{"domain": ..., "email": ..., "token": ...}],
     "current": 0,
     "active": true}

Every mutation is a read-modify-write of that file, serialized by a lock held
by the store, so two requests cannot interleave their updates.
"""

import asyncio
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from jiradash.connectors.http import ClientFactory, JiraHttpClient
from jiradash.connectors.jira import JiraConnector
from jiradash.models.connection import Connection, ConnectionRegistry
from jiradash.storage.base import (
    DATA_DIR,
    ConnectionIndexError,
    NoActiveConnectionError,
    StorageError,
    write_json_atomic,
)

logger = logging.getLogger(__name__)

# Configuration
CONNECTIONS_FILE = Path(os.getenv("CONNECTIONS_FILE", str(DATA_DIR / "connections.json")))


class ConnectionStore:
    """Owns the connection registry document."""

    def __init__(
        self,
        path: Path | None = None,
        client_factory: ClientFactory | None = None,
    ):
        """Initialize the store.

        Args:
            path: Override the default registry file.
            client_factory: Builds the HTTP client used for connection tests.
        """
        self.path = path or CONNECTIONS_FILE
        self.client_factory = client_factory or JiraHttpClient
        self._lock = asyncio.Lock()

    def _read(self) -> ConnectionRegistry:
        """Load and validate the registry. A missing file is an empty registry."""
        if not self.path.exists():
            return ConnectionRegistry()
        try:
            return ConnectionRegistry.model_validate_json(self.path.read_bytes())
        except ValidationError as e:
            raise StorageError(f"Malformed connection registry {self.path}: {e}", self.path) from e
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}", self.path) from e

    def _write(self, registry: ConnectionRegistry) -> None:
        write_json_atomic(self.path, registry.model_dump(mode="json"))

    async def list_all(self) -> ConnectionRegistry:
        """Return the registry as stored."""
        async with self._lock:
            return self._read()

    async def get_status(self) -> ConnectionRegistry:
        """Return the registry, reporting ``active`` as false when it is empty."""
        registry = await self.list_all()
        if not registry.connections:
            registry.active = False
        return registry

    async def test_and_upsert(self, domain: str, email: str, token: str) -> bool:
        """Verify credentials against the site, then save them as current.

        The identity check runs before the registry is touched; on failure the
        registry is left unchanged.

        Returns:
            True if a new entry was appended, False if an existing
            ``(domain, email)`` entry was reused.

        Raises:
            AuthenticationError: If the identity check does not succeed
            NetworkError: If the site cannot be reached
            StorageError: If the registry cannot be read or written
        """
        async with self.client_factory(domain, email, token) as client:
            await JiraConnector(client).check_identity()

        async with self._lock:
            registry = self._read()
            index = registry.find(domain, email)
            created = index == -1
            if created:
                registry.connections.append(Connection(domain=domain, email=email, token=token))
                index = len(registry.connections) - 1
            elif registry.connections[index].token != token:
                registry.connections[index].token = token
                logger.info(f"Updated token for connection {index} ({domain})")
            registry.current = index
            registry.active = True
            self._write(registry)

        if created:
            logger.info(f"Saved new connection {index} for {email} at {domain}")
        return created

    async def set_current(self, index: int) -> ConnectionRegistry:
        """Select the connection used for syncing.

        Raises:
            ConnectionIndexError: If ``index`` is out of range
        """
        async with self._lock:
            registry = self._read()
            if not 0 <= index < len(registry.connections):
                raise ConnectionIndexError(index, len(registry.connections))
            registry.current = index
            registry.active = len(registry.connections) > 0
            self._write(registry)
        logger.info(f"Current connection set to {index}")
        return registry

    async def remove(self, index: int) -> ConnectionRegistry:
        """Delete a connection, keeping ``current`` on the same logical entry.

        Removing the current connection leaves no connection selected.

        Raises:
            ConnectionIndexError: If ``index`` is out of range
        """
        async with self._lock:
            registry = self._read()
            if not 0 <= index < len(registry.connections):
                raise ConnectionIndexError(index, len(registry.connections))
            del registry.connections[index]
            if index == registry.current or not registry.connections:
                registry.current = -1
                registry.active = False
            elif index < registry.current:
                registry.current -= 1
            self._write(registry)
        logger.info(f"Removed connection {index}")
        return registry

    async def current_credential(self) -> Connection:
        """Return the connection selected for syncing.

        Raises:
            NoActiveConnectionError: If there is none
        """
        registry = await self.list_all()
        connection = registry.current_connection()
        if connection is None:
            if not registry.connections:
                raise NoActiveConnectionError("No connections are saved")
            raise NoActiveConnectionError("No connection is selected")
        return connection


# Global instance for dependency injection
_connection_store: ConnectionStore | None = None


def get_connection_store() -> ConnectionStore:
    """Get the global connection store instance."""
    global _connection_store
    if _connection_store is None:
        _connection_store = ConnectionStore()
    return _connection_store
