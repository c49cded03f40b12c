"""State buckets for remembered funding.

Session state is process-local and scoped through with_state(). The durable
remembered-funding set is per buyer and async: MemoryFundingStore backs tests
and single-process hosts, RedisFundingStore keeps one Redis set per buyer.

Usage:
    checked = session.with_state(lambda state: state.get("recently_checked_remembered", False))

    store = create_redis_store(settings, buyer_id="buyer-123")
    await store.add(["paypal"])
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol, TypeVar

import redis.asyncio as aioredis

from checkout_funding.config import Settings, settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

State = dict[str, Any]


# ── Session state ────────────────────────────────────────────────────


class StateStore(Protocol):
    """Scoped access to one named state bucket."""

    def with_state(self, handler: Callable[[State], T]) -> T: ...

    def clear(self) -> None: ...


class MemoryStateStore:
    """In-process state bucket."""

    def __init__(self, initial: State | None = None) -> None:
        self._state: State = dict(initial or {})

    def with_state(self, handler: Callable[[State], T]) -> T:
        return handler(self._state)

    def clear(self) -> None:
        self._state.clear()


# ── Durable remembered funding ───────────────────────────────────────


class FundingStore(Protocol):
    """Durable set of funding sources one buyer has used."""

    async def contains(self, source: str) -> bool: ...

    async def members(self) -> list[str]: ...

    async def add(self, sources: Iterable[str]) -> None: ...

    async def clear(self) -> None: ...


class MemoryFundingStore:
    """In-process remembered set. Keeps insertion order."""

    def __init__(self, initial: Iterable[str] | None = None) -> None:
        self._sources: list[str] = []
        for source in initial or ():
            if source not in self._sources:
                self._sources.append(source)

    async def contains(self, source: str) -> bool:
        return source in self._sources

    async def members(self) -> list[str]:
        return list(self._sources)

    async def add(self, sources: Iterable[str]) -> None:
        for source in sources:
            if source not in self._sources:
                self._sources.append(source)

    async def clear(self) -> None:
        self._sources.clear()


class RedisFundingStore:
    """Remembered set stored as a Redis set under a per-buyer key.

    SADD makes appends atomic across processes; lookups never write. The TTL
    is refreshed only when sources are added.
    """

    def __init__(self, client: aioredis.Redis, key: str, ttl_seconds: int | None = None) -> None:
        self._redis = client
        self._key = key
        self._ttl = ttl_seconds

    @property
    def key(self) -> str:
        return self._key

    async def contains(self, source: str) -> bool:
        return bool(await self._redis.sismember(self._key, source))

    async def members(self) -> list[str]:
        return sorted(await self._redis.smembers(self._key))

    async def add(self, sources: Iterable[str]) -> None:
        values = list(dict.fromkeys(sources))
        if not values:
            return
        await self._redis.sadd(self._key, *values)
        if self._ttl:
            await self._redis.expire(self._key, self._ttl)

    async def clear(self) -> None:
        await self._redis.delete(self._key)


def buyer_storage_key(config: Settings, buyer_id: str) -> str:
    """Redis key of one buyer's remembered set."""
    if not buyer_id:
        msg = "A buyer_id is required for durable remembered funding"
        raise ValueError(msg)
    return f"{config.storage.storage_key}:{buyer_id}"


def create_redis_store(
    config: Settings = settings,
    buyer_id: str = "",
    client: aioredis.Redis | None = None,
) -> RedisFundingStore:
    """Per-buyer durable store wired from StorageSettings."""
    key = buyer_storage_key(config, buyer_id)
    if client is None:
        client = aioredis.from_url(config.storage.redis_url, decode_responses=True)
    return RedisFundingStore(client, key, config.storage.storage_ttl_seconds)
