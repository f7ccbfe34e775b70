"""Tests for table ids and table storage."""

import json
import time
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError

import api.session as session_module
from api.session import (
    InMemoryTableStore,
    RedisTableStore,
    TableIdSigner,
    get_signer,
    get_table_store,
    new_table_token,
    resolve_table_id,
)


class TestTableIdSigner:
    """Tests for TableIdSigner class."""

    def test_sign_and_unsign(self):
        signer = TableIdSigner(secret_key="test-secret")

        token = signer.sign("table-123")

        assert token != "table-123"
        assert signer.unsign(token, max_age=3600) == "table-123"

    def test_unsign_invalid_token_returns_none(self):
        signer = TableIdSigner(secret_key="test-secret")
        assert signer.unsign("invalid-token-data", max_age=3600) is None

    def test_unsign_wrong_secret_returns_none(self):
        token = TableIdSigner(secret_key="secret-one").sign("table")
        assert TableIdSigner(secret_key="secret-two").unsign(token, max_age=3600) is None

    def test_unsign_expired_token_returns_none(self):
        """Test that a token older than max_age is rejected."""
        signer = TableIdSigner(secret_key="test-secret")
        token = signer.sign("table")

        original_time = time.time
        with patch("time.time", lambda: original_time() + 7200):
            assert signer.unsign(token, max_age=3600) is None

    def test_get_signer_returns_singleton(self, monkeypatch):
        monkeypatch.setattr(session_module, "_signer", None)
        assert get_signer() is get_signer()


class TestTokens:
    """Tests for the module-level token helpers."""

    def test_new_token_resolves_to_uuid(self):
        table_id = resolve_table_id(new_table_token())

        assert len(table_id) == 36
        assert table_id.count("-") == 4

    def test_tokens_are_unique(self):
        assert new_table_token() != new_table_token()

    def test_forged_token(self):
        assert resolve_table_id("not-a-real-token") is None


class TestInMemoryTableStore:
    """Tests for InMemoryTableStore class."""

    @pytest_asyncio.fixture
    async def store(self):
        return InMemoryTableStore()

    @pytest.mark.asyncio
    async def test_save_and_load(self, store):
        await store.save("t1", {"phase": "IDLE"}, ttl=3600)

        assert await store.load("t1") == {"phase": "IDLE"}
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_load_missing_returns_none(self, store):
        assert await store.load("missing") is None

    @pytest.mark.asyncio
    async def test_overwrite(self, store):
        await store.save("t1", {"version": 1}, ttl=3600)
        await store.save("t1", {"version": 2}, ttl=3600)

        assert await store.load("t1") == {"version": 2}

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await store.save("t1", {}, ttl=3600)
        await store.delete("t1")
        await store.delete("never-stored")

        assert await store.load("t1") is None

    @pytest.mark.asyncio
    async def test_expiry_and_cleanup(self, store):
        await store.save("t1", {"n": 1}, ttl=1)
        await store.save("t2", {"n": 2}, ttl=1)
        await store.save("t3", {"n": 3}, ttl=3600)

        time.sleep(1.5)

        assert await store.load("t1") is None
        assert await store.cleanup_expired() == 1
        assert len(store) == 1
        assert await store.load("t3") == {"n": 3}

    @pytest.mark.asyncio
    async def test_save_evicts_abandoned_tables(self, store):
        """Test tables nobody loads again are dropped by a later save."""
        start = datetime(2024, 1, 1, 12, 0, 0)
        with patch("api.session.datetime") as mock_datetime:
            mock_datetime.now.return_value = start
            for i in range(100):
                await store.save(f"abandoned-{i}", {"n": i}, ttl=60)

            mock_datetime.now.return_value = start + timedelta(minutes=5)
            await store.save("fresh", {"n": -1}, ttl=60)

            assert len(store) == 1
            assert await store.load("fresh") == {"n": -1}


class TestRedisTableStore:
    """Tests for RedisTableStore against a mocked client."""

    @pytest.mark.asyncio
    async def test_save_uses_prefixed_key_and_ttl(self):
        client = AsyncMock()
        store = RedisTableStore(client)

        await store.save("t1", {"phase": "IDLE"}, ttl=60)

        client.setex.assert_awaited_once_with(
            "blackjack-vs-agent:table:t1", 60, json.dumps({"phase": "IDLE"})
        )

    @pytest.mark.asyncio
    async def test_load(self):
        client = AsyncMock()
        client.get.return_value = json.dumps({"phase": "ROUND_OVER"})

        assert await RedisTableStore(client).load("t1") == {"phase": "ROUND_OVER"}
        client.get.assert_awaited_once_with("blackjack-vs-agent:table:t1")

    @pytest.mark.asyncio
    async def test_load_missing(self):
        client = AsyncMock()
        client.get.return_value = None

        assert await RedisTableStore(client).load("t1") is None


class TestGetTableStore:
    """Tests for choosing a storage backend."""

    @pytest.mark.asyncio
    async def test_in_memory_when_redis_disabled(self, monkeypatch):
        monkeypatch.setattr(session_module, "_store", None)
        fake_config = MagicMock()
        fake_config.redis.enabled = False
        monkeypatch.setattr(session_module, "config", fake_config)

        store = await get_table_store()

        assert isinstance(store, InMemoryTableStore)
        assert await get_table_store() is store

    @pytest.mark.asyncio
    async def test_falls_back_when_redis_unreachable(self, monkeypatch):
        monkeypatch.setattr(session_module, "_store", None)
        fake_config = MagicMock()
        fake_config.redis.enabled = True
        fake_config.redis.url = "redis://localhost:6379/0"
        monkeypatch.setattr(session_module, "config", fake_config)

        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("refused")
        monkeypatch.setattr(session_module.redis, "from_url", lambda url: client)

        assert isinstance(await get_table_store(), InMemoryTableStore)

    @pytest.mark.asyncio
    async def test_uses_redis_when_reachable(self, monkeypatch):
        monkeypatch.setattr(session_module, "_store", None)
        fake_config = MagicMock()
        fake_config.redis.enabled = True
        monkeypatch.setattr(session_module, "config", fake_config)

        client = AsyncMock()
        monkeypatch.setattr(session_module.redis, "from_url", lambda url: client)

        assert isinstance(await get_table_store(), RedisTableStore)
