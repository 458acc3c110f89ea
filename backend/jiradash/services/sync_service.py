"""Sync Jira configuration for the current connection into its site document.

A sync fetches each requested category in turn, one request at a time. If any
category fails, the whole sync fails and the stored document is not touched.
Only after every category succeeded is the fresh data merged into the stored
document (one top-level key per category) and written back.
"""

import logging
from collections.abc import Iterable
from typing import Any

from jiradash.connectors.http import ClientFactory, JiraHttpClient
from jiradash.connectors.jira import JiraConnector
from jiradash.connectors.pagination import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE
from jiradash.models.connection import Connection
from jiradash.models.jira import JiraRecord
from jiradash.models.sync import CATEGORY_ORDER, SyncCategory, SyncDocument
from jiradash.storage.connection_store import ConnectionStore, get_connection_store
from jiradash.storage.document_store import SyncDocumentStore, get_document_store

logger = logging.getLogger(__name__)


class ConnectionMismatchError(Exception):
    """The request names a site or account other than the current connection."""

    pass


def _to_documents(records: Iterable[JiraRecord]) -> list[dict[str, Any]]:
    return [record.to_document() for record in records]


class SyncService:
    """Runs syncs against the registry's current connection."""

    def __init__(
        self,
        connection_store: ConnectionStore | None = None,
        document_store: SyncDocumentStore | None = None,
        client_factory: ClientFactory | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
    ):
        self.connection_store = connection_store or get_connection_store()
        self.document_store = document_store or get_document_store()
        self.client_factory = client_factory or JiraHttpClient
        self.page_size = page_size
        self.max_pages = max_pages

    async def current_connection(
        self, domain: str | None = None, email: str | None = None
    ) -> Connection:
        """Resolve the connection to sync with.

        ``domain`` and ``email`` are optional expectations from the caller; if
        given they must match the current connection.

        Raises:
            NoActiveConnectionError: If no connection is selected
            ConnectionMismatchError: If an expectation does not match
        """
        connection = await self.connection_store.current_credential()
        if domain and domain != connection.domain:
            raise ConnectionMismatchError(
                f"Requested site {domain} is not the current connection ({connection.domain})"
            )
        if email and email != connection.email:
            raise ConnectionMismatchError(
                f"Requested account {email} is not the current connection's account"
            )
        return connection

    async def fetch(
        self, connection: Connection, categories: Iterable[SyncCategory]
    ) -> SyncDocument:
        """Fetch the requested categories from the site, in a fixed order.

        The first failing category aborts the fetch; nothing is returned for
        categories fetched before it.
        """
        requested = set(categories)
        fresh: SyncDocument = {}
        async with self.client_factory(
            connection.domain, connection.email, connection.token
        ) as client:
            connector = JiraConnector(client, page_size=self.page_size, max_pages=self.max_pages)
            for category in CATEGORY_ORDER:
                if category not in requested:
                    continue
                if category is SyncCategory.STATUSES:
                    records = await connector.fetch_statuses()
                elif category is SyncCategory.PROJECTS:
                    records = await connector.fetch_projects()
                else:
                    records = await connector.fetch_workflows()
                fresh[category.value] = _to_documents(records)
        return fresh

    async def sync(
        self,
        categories: Iterable[SyncCategory],
        domain: str | None = None,
        email: str | None = None,
    ) -> SyncDocument:
        """Fetch the requested categories and merge them into the site document.

        Returns:
            The merged document as persisted

        Raises:
            NoActiveConnectionError: If no connection is selected
            ConnectionMismatchError: If ``domain``/``email`` do not match it
            NetworkError, StatusError, DecodeError, PaginationLimitError:
                If fetching any category fails
            StorageError: If the document cannot be written
        """
        connection = await self.current_connection(domain, email)
        requested = set(categories)
        logger.info(
            f"Syncing {', '.join(sorted(c.value for c in requested)) or 'nothing'} "
            f"from {connection.domain}"
        )
        fresh = await self.fetch(connection, requested)
        return await self.document_store.update(connection.domain, fresh)

    async def current_document(self) -> SyncDocument:
        """Return the stored document of the current connection's site."""
        connection = await self.connection_store.current_credential()
        return await self.document_store.load(connection.domain)


# Global instance for dependency injection
_sync_service: SyncService | None = None


def get_sync_service() -> SyncService:
    """Get the global sync service instance."""
    global _sync_service
    if _sync_service is None:
        _sync_service = SyncService()
    return _sync_service
