"""Table storage with in-memory and Redis backends."""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import redis.asyncio as redis
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from redis.exceptions import RedisError

from config import config

logger = logging.getLogger(__name__)


class TableIdSigner:
    """Sign and verify table ids handed to clients."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._serializer = URLSafeTimedSerializer(
            secret_key or config.security.secret_key,
            salt="table-id",
        )

    def sign(self, table_id: str) -> str:
        """Create a signed token from a table id."""
        return self._serializer.dumps(table_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify a token and extract its table id.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to table_ttl)

        Returns:
            The table id if valid, None otherwise
        """
        try:
            return self._serializer.loads(token, max_age=max_age or config.table_ttl)
        except (BadSignature, SignatureExpired):
            return None


_signer: TableIdSigner | None = None


def get_signer() -> TableIdSigner:
    """Get or create the table id signer."""
    global _signer
    if _signer is None:
        _signer = TableIdSigner()
    return _signer


class TableStore(ABC):
    """Stores serialized tables by id."""

    @abstractmethod
    async def load(self, table_id: str) -> dict[str, Any] | None:
        """Get stored table data."""
        ...

    @abstractmethod
    async def save(self, table_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        """Store table data, refreshing its expiry."""
        ...

    @abstractmethod
    async def delete(self, table_id: str) -> None:
        ...


class InMemoryTableStore(TableStore):
    """Process-local table store with expiry."""

    def __init__(self) -> None:
        self._tables: dict[str, tuple[dict[str, Any], datetime]] = {}

    async def load(self, table_id: str) -> dict[str, Any] | None:
        entry = self._tables.get(table_id)
        if entry is None:
            return None

        data, expiry = entry
        if expiry < datetime.now():
            await self.delete(table_id)
            return None
        return data

    async def save(self, table_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        # Abandoned tables are never loaded again, so evict them here
        await self.cleanup_expired()
        expiry = datetime.now() + timedelta(seconds=ttl or config.table_ttl)
        self._tables[table_id] = (data, expiry)

    async def delete(self, table_id: str) -> None:
        self._tables.pop(table_id, None)

    async def cleanup_expired(self) -> int:
        """Remove expired tables and return how many were dropped."""
        now = datetime.now()
        expired = [tid for tid, (_, expiry) in self._tables.items() if expiry < now]
        for tid in expired:
            del self._tables[tid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._tables)


class RedisTableStore(TableStore):
    """Redis-backed table store."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client
        self._prefix = "blackjack-vs-agent:table:"

    def _key(self, table_id: str) -> str:
        return f"{self._prefix}{table_id}"

    async def load(self, table_id: str) -> dict[str, Any] | None:
        data = await self._redis.get(self._key(table_id))
        if data is None:
            return None
        return json.loads(data)

    async def save(self, table_id: str, data: dict[str, Any], ttl: int | None = None) -> None:
        await self._redis.setex(
            self._key(table_id),
            ttl or config.table_ttl,
            json.dumps(data),
        )

    async def delete(self, table_id: str) -> None:
        await self._redis.delete(self._key(table_id))


_store: TableStore | None = None


async def get_table_store() -> TableStore:
    """
    Get or create the table store.

    Uses Redis when enabled and reachable, otherwise keeps tables in memory.
    """
    global _store

    if _store is not None:
        return _store

    if config.redis.enabled:
        client = redis.from_url(config.redis.url)
        try:
            await client.ping()
        except RedisError:
            logger.warning("Redis at %s unreachable, storing tables in memory", config.redis.url)
        else:
            _store = RedisTableStore(client)
            return _store

    _store = InMemoryTableStore()
    return _store


def new_table_token() -> str:
    """Create a signed token for a new table id."""
    return get_signer().sign(str(uuid4()))


def resolve_table_id(token: str) -> str | None:
    """Extract the table id from a signed token, or None if forged or expired."""
    return get_signer().unsign(token)
