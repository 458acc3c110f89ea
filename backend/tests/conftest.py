"""Pytest configuration and fixtures."""

import json
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from jiradash.connectors.http import JiraHttpClient
from jiradash.main import app
from jiradash.services.sync_service import SyncService, get_sync_service
from jiradash.storage.connection_store import ConnectionStore, get_connection_store
from jiradash.storage.document_store import SyncDocumentStore, get_document_store

DOMAIN = "https://acme.atlassian.net"
EMAIL = "dev@acme.test"
TOKEN = "token-1234"


def page(values: list[dict[str, Any]], is_last: bool) -> dict[str, Any]:
    """Build a Jira list page body."""
    return {"isLast": is_last, "values": values}


class FakeJira:
    """In-memory stand-in for a Jira site, served through httpx.MockTransport.

    Responses are queued per path and handed out in order; every request is
    recorded.
    """

    def __init__(self) -> None:
        self.responses: dict[str, list[httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, status_code: int = 200, body: Any = None, content: bytes | None = None) -> None:
        if content is None:
            content = json.dumps(body if body is not None else {}).encode("utf-8")
        self.responses.setdefault(path, []).append(
            httpx.Response(status_code, content=content, headers={"Content-Type": "application/json"})
        )

    def add_pages(self, path: str, pages: list[dict[str, Any]]) -> None:
        for body in pages:
            self.add(path, body=body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.responses.get(request.url.path)
        if not queue:
            return httpx.Response(404, json={"errorMessages": ["not found"]})
        return queue.pop(0)

    def client_factory(self, domain: str, email: str, token: str) -> JiraHttpClient:
        return JiraHttpClient(domain, email, token, transport=httpx.MockTransport(self.handler))

    def requests_for(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def fake_jira() -> FakeJira:
    return FakeJira()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def connection_store(data_dir: Path, fake_jira: FakeJira) -> ConnectionStore:
    return ConnectionStore(data_dir / "connections.json", client_factory=fake_jira.client_factory)


@pytest.fixture
def document_store(data_dir: Path) -> SyncDocumentStore:
    path = data_dir / "documents"
    path.mkdir()
    return SyncDocumentStore(path)


@pytest.fixture
def sync_service(
    connection_store: ConnectionStore,
    document_store: SyncDocumentStore,
    fake_jira: FakeJira,
) -> SyncService:
    return SyncService(
        connection_store=connection_store,
        document_store=document_store,
        client_factory=fake_jira.client_factory,
        page_size=50,
        max_pages=10,
    )


def write_registry(store: ConnectionStore, connections: list[tuple[str, str, str]], current: int, active: bool = True) -> None:
    """Write a registry file directly, bypassing the connection test."""
    store.path.write_text(
        json.dumps(
            {
                "connections": [
                    {"domain": d, "email": e, "token": t} for d, e, t in connections
                ],
                "current": current,
                "active": active,
            }
        )
    )


@pytest.fixture
async def client(
    connection_store: ConnectionStore,
    document_store: SyncDocumentStore,
    sync_service: SyncService,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client wired to the temporary stores."""
    app.dependency_overrides[get_connection_store] = lambda: connection_store
    app.dependency_overrides[get_document_store] = lambda: document_store
    app.dependency_overrides[get_sync_service] = lambda: sync_service
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
