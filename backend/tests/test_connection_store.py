"""Tests for the saved-connection registry."""

import json

import pytest

from conftest import DOMAIN, EMAIL, TOKEN, FakeJira, write_registry
from jiradash.connectors.base import AuthenticationError, NetworkError
from jiradash.models.connection import ConnectionRegistry, mask_token
from jiradash.storage.base import (
    ConnectionIndexError,
    NoActiveConnectionError,
    StorageError,
)
from jiradash.storage.connection_store import ConnectionStore

MYSELF = "/rest/api/3/myself"
OTHER_DOMAIN = "https://other.atlassian.net"


def assert_invariants(registry: ConnectionRegistry) -> None:
    if not registry.connections:
        assert registry.current == -1
    else:
        assert registry.current == -1 or 0 <= registry.current < len(registry.connections)
    if registry.current == -1:
        assert registry.active is False


def three_connections(store: ConnectionStore, current: int) -> None:
    write_registry(
        store,
        [
            (DOMAIN, "a@acme.test", "t-a"),
            (DOMAIN, "b@acme.test", "t-b"),
            (OTHER_DOMAIN, "c@other.test", "t-c"),
        ],
        current=current,
    )


class TestTestAndUpsert:
    """Tests for verifying and saving credentials."""

    @pytest.mark.asyncio
    async def test_creates_connection(self, connection_store: ConnectionStore, fake_jira: FakeJira):
        """A verified new pair is appended and becomes current."""
        fake_jira.add(MYSELF, body={"accountId": "1"})

        created = await connection_store.test_and_upsert(DOMAIN, EMAIL, TOKEN)

        registry = await connection_store.list_all()
        assert created is True
        assert len(registry.connections) == 1
        assert registry.connections[0].email == EMAIL
        assert registry.current == 0
        assert registry.active is True

    @pytest.mark.asyncio
    async def test_is_idempotent(self, connection_store: ConnectionStore, fake_jira: FakeJira):
        """Testing the same pair twice does not grow the registry."""
        fake_jira.add(MYSELF, body={})
        fake_jira.add(MYSELF, body={})
        fake_jira.add(MYSELF, body={})

        await connection_store.test_and_upsert(DOMAIN, EMAIL, TOKEN)
        await connection_store.test_and_upsert(OTHER_DOMAIN, EMAIL, TOKEN)
        created = await connection_store.test_and_upsert(DOMAIN, EMAIL, TOKEN)

        registry = await connection_store.list_all()
        assert created is False
        assert len(registry.connections) == 2
        assert registry.current == 0
        assert registry.active is True

    @pytest.mark.asyncio
    async def test_updates_token(self, connection_store: ConnectionStore, fake_jira: FakeJira):
        """A new token for a known pair replaces the stored one."""
        fake_jira.add(MYSELF, body={})
        fake_jira.add(MYSELF, body={})

        await connection_store.test_and_upsert(DOMAIN, EMAIL, TOKEN)
        await connection_store.test_and_upsert(DOMAIN, EMAIL, "rotated")

        registry = await connection_store.list_all()
        assert [c.token for c in registry.connections] == ["rotated"]

    @pytest.mark.asyncio
    async def test_unauthorized_leaves_registry_untouched(
        self, connection_store: ConnectionStore, fake_jira: FakeJira
    ):
        """A 401 from the identity check fails without saving anything."""
        three_connections(connection_store, current=1)
        before = connection_store.path.read_text()
        fake_jira.add(MYSELF, status_code=401, body={"message": "Unauthorized"})

        with pytest.raises(AuthenticationError) as exc_info:
            await connection_store.test_and_upsert(DOMAIN, "new@acme.test", "bad")

        assert exc_info.value.status_code == 401
        assert connection_store.path.read_text() == before

    @pytest.mark.asyncio
    async def test_unauthorized_does_not_create_file(
        self, connection_store: ConnectionStore, fake_jira: FakeJira
    ):
        """No registry file appears when the first test fails."""
        fake_jira.add(MYSELF, status_code=403, body={})

        with pytest.raises(AuthenticationError):
            await connection_store.test_and_upsert(DOMAIN, EMAIL, TOKEN)

        assert not connection_store.path.exists()

    @pytest.mark.asyncio
    async def test_unreachable_site(self, data_dir):
        """A site that cannot be reached is a network error, not an auth error."""
        store = ConnectionStore(data_dir / "connections.json")

        with pytest.raises(NetworkError):
            await store.test_and_upsert("http://127.0.0.1:1", EMAIL, TOKEN)

        assert not store.path.exists()

    @pytest.mark.asyncio
    async def test_malformed_domain(self, data_dir):
        """A domain with an unparsable port is rejected without touching the registry."""
        store = ConnectionStore(data_dir / "connections.json")

        with pytest.raises(NetworkError):
            await store.test_and_upsert("https://acme.atlassian.net:notaport", EMAIL, TOKEN)

        assert not store.path.exists()


class TestSetCurrent:
    """Tests for selecting the current connection."""

    @pytest.mark.asyncio
    async def test_sets_current_and_active(self, connection_store: ConnectionStore):
        """Selecting an entry marks the registry active."""
        three_connections(connection_store, current=-1)

        registry = await connection_store.set_current(2)

        assert registry.current == 2
        assert registry.active is True
        assert (await connection_store.list_all()).current == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", [-1, 3, 10])
    async def test_out_of_range(self, connection_store: ConnectionStore, index: int):
        """Indexes outside the list are rejected."""
        three_connections(connection_store, current=0)

        with pytest.raises(ConnectionIndexError):
            await connection_store.set_current(index)

        assert (await connection_store.list_all()).current == 0

    @pytest.mark.asyncio
    async def test_empty_registry(self, connection_store: ConnectionStore):
        """Nothing can be selected in an empty registry."""
        with pytest.raises(IndexError):
            await connection_store.set_current(0)


class TestRemove:
    """Tests for deleting connections."""

    @pytest.mark.asyncio
    async def test_remove_only_connection(self, connection_store: ConnectionStore):
        """Removing the last connection empties the registry."""
        write_registry(connection_store, [(DOMAIN, EMAIL, TOKEN)], current=0)

        registry = await connection_store.remove(0)

        assert registry.connections == []
        assert registry.current == -1
        assert registry.active is False

    @pytest.mark.asyncio
    async def test_remove_current(self, connection_store: ConnectionStore):
        """Removing the current connection deselects it."""
        three_connections(connection_store, current=1)

        registry = await connection_store.remove(1)

        assert len(registry.connections) == 2
        assert registry.current == -1
        assert registry.active is False

    @pytest.mark.asyncio
    async def test_remove_before_current(self, connection_store: ConnectionStore):
        """current keeps pointing at the same entry."""
        three_connections(connection_store, current=2)

        registry = await connection_store.remove(0)

        assert registry.current == 1
        assert registry.connections[1].email == "c@other.test"
        assert registry.active is True

    @pytest.mark.asyncio
    async def test_remove_after_current(self, connection_store: ConnectionStore):
        """Entries after current do not move it."""
        three_connections(connection_store, current=0)

        registry = await connection_store.remove(2)

        assert registry.current == 0
        assert registry.active is True

    @pytest.mark.asyncio
    async def test_out_of_range(self, connection_store: ConnectionStore):
        """Indexes outside the list are rejected and nothing changes."""
        three_connections(connection_store, current=0)

        with pytest.raises(ConnectionIndexError):
            await connection_store.remove(3)

        assert len((await connection_store.list_all()).connections) == 3

    @pytest.mark.asyncio
    async def test_invariants_hold_across_operations(self, connection_store: ConnectionStore):
        """current stays valid through a mix of selections and removals."""
        three_connections(connection_store, current=0)
        steps = [("set", 2), ("remove", 0), ("set", 0), ("remove", 1), ("remove", 0)]

        for op, index in steps:
            if op == "set":
                registry = await connection_store.set_current(index)
            else:
                registry = await connection_store.remove(index)
            assert_invariants(registry)

        assert registry.connections == []


class TestReadingRegistry:
    """Tests for loading the registry file."""

    @pytest.mark.asyncio
    async def test_missing_file_is_empty(self, connection_store: ConnectionStore):
        registry = await connection_store.list_all()

        assert registry.connections == []
        assert registry.current == -1
        assert registry.active is False

    @pytest.mark.asyncio
    async def test_status_reports_inactive_when_empty(self, connection_store: ConnectionStore):
        """An empty registry is never reported active."""
        write_registry(connection_store, [], current=-1, active=True)

        registry = await connection_store.get_status()

        assert registry.active is False

    @pytest.mark.asyncio
    async def test_accepts_legacy_email_key(self, connection_store: ConnectionStore):
        """Registries written with the "correo" key still load."""
        connection_store.path.write_text(
            json.dumps(
                {
                    "connections": [{"domain": DOMAIN, "correo": EMAIL, "token": TOKEN}],
                    "current": 0,
                    "active": True,
                }
            )
        )

        connection = await connection_store.current_credential()

        assert connection.email == EMAIL

    @pytest.mark.asyncio
    async def test_malformed_file(self, connection_store: ConnectionStore):
        """Garbage in the registry file is a storage error."""
        connection_store.path.write_text("{not json")

        with pytest.raises(StorageError):
            await connection_store.list_all()

    @pytest.mark.asyncio
    async def test_out_of_range_current_is_malformed(self, connection_store: ConnectionStore):
        write_registry(connection_store, [(DOMAIN, EMAIL, TOKEN)], current=4)

        with pytest.raises(StorageError):
            await connection_store.list_all()


class TestCurrentCredential:
    """Tests for resolving the connection to sync with."""

    @pytest.mark.asyncio
    async def test_returns_current(self, connection_store: ConnectionStore):
        three_connections(connection_store, current=2)

        connection = await connection_store.current_credential()

        assert connection.domain == OTHER_DOMAIN
        assert connection.token == "t-c"

    @pytest.mark.asyncio
    async def test_empty_registry(self, connection_store: ConnectionStore):
        with pytest.raises(NoActiveConnectionError):
            await connection_store.current_credential()

    @pytest.mark.asyncio
    async def test_nothing_selected(self, connection_store: ConnectionStore):
        three_connections(connection_store, current=-1)

        with pytest.raises(NoActiveConnectionError):
            await connection_store.current_credential()


class TestMaskToken:
    def test_keeps_last_four(self):
        assert mask_token("abcdefgh1234") == "********1234"

    def test_short_tokens_fully_hidden(self):
        assert mask_token("abc") == "***"
