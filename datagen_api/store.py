"""Key-value store holding API key records and rate-limit windows.

Two backends share the ``KeyStore`` protocol:

- ``RedisKeyStore`` for deployments (JSON values, native key expiry)
- ``InMemoryKeyStore`` for development and tests

Neither offers transactions. Callers doing read-modify-write accept that
concurrent writers may overwrite each other.
"""

from __future__ import annotations

import copy
import json
import logging
import time
from typing import Any, Callable, Mapping, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from datagen_api.config import ApiConfig

logger = logging.getLogger(__name__)


class KeyStoreError(Exception):
    """A store operation failed (connection, timeout, undecodable value)."""


class KeyStore(Protocol):
    async def get(self, key: str) -> dict[str, Any] | None: ...

    async def put(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...


class InMemoryKeyStore:
    """Process-local store with per-key expiry.

    Values are deep-copied in and out so callers can't mutate stored state
    by accident, the same as with a remote store.
    """

    def __init__(
        self,
        initial: Mapping[str, dict[str, Any]] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._data: dict[str, tuple[dict[str, Any], float | None]] = {}
        for key, value in (initial or {}).items():
            self._data[key] = (copy.deepcopy(value), None)

    async def get(self, key: str) -> dict[str, Any] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return copy.deepcopy(value)

    async def put(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._data[key] = (copy.deepcopy(value), expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._data.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._data


class RedisKeyStore:
    """Redis-backed store. Values are JSON objects, TTL maps to ``SET ... EX``."""

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyStore":
        return cls(aioredis.from_url(url, decode_responses=True))

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            raise KeyStoreError(f"GET failed: {e}") from e
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            raise KeyStoreError("Stored value is not JSON") from e
        if not isinstance(value, dict):
            raise KeyStoreError("Stored value is not a JSON object")
        return value

    async def put(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        try:
            await self._client.set(key, json.dumps(value), ex=ttl)
        except RedisError as e:
            raise KeyStoreError(f"SET failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as e:
            raise KeyStoreError(f"DEL failed: {e}") from e

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        await self._client.aclose()


# Global store instance
_store: KeyStore | None = None


async def init_store(config: ApiConfig) -> KeyStore:
    """Bind the process-wide store described by the config."""
    global _store
    if _store is None:
        if config.uses_memory_store:
            logger.warning("No redis_url configured, using in-memory key store")
            _store = InMemoryKeyStore(initial=config.bootstrap_api_keys)
            logger.info("Loaded %d bootstrap API keys", len(config.bootstrap_api_keys))
        else:
            logger.info("Connecting key store to Redis")
            _store = RedisKeyStore.from_url(config.redis_url)
    return _store


def get_key_store() -> KeyStore | None:
    """FastAPI dependency returning the bound store, or None if unbound."""
    return _store


async def close_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None
        logger.info("Key store closed")
