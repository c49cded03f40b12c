"""Remembered-funding cache, read-through over durable and session state.

Answers "has the buyer used this funding source before". Local state answers
first: a source present in the buyer's durable set is remembered, and once the
session has checked the metadata endpoint anything absent is not. Otherwise a
single metadata fetch is started and shared by every caller waiting on it.

Per-source queries move UNKNOWN -> FETCHING -> KNOWN (or FAILED when the fetch
fails). A query is resolved exactly once and then reused until reset().
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from checkout_funding.models.enums import FundingSource
from checkout_funding.remembered.state import FundingStore, State, StateStore
from checkout_funding.schemas.funding import RememberedFundingMetadata

logger = logging.getLogger(__name__)

RECENTLY_CHECKED_KEY = "recently_checked_remembered"

MetadataFetcher = Callable[[], Awaitable[RememberedFundingMetadata]]


class RememberedFundingError(RuntimeError):
    """Raised when remembered status is read with no local or remote answer."""


class QueryStatus(str, Enum):
    """Lifecycle of one source's remembered query."""

    UNKNOWN = "unknown"
    FETCHING = "fetching"
    KNOWN = "known"
    FAILED = "failed"


@dataclass
class PendingQuery:
    future: asyncio.Future[bool]
    status: QueryStatus = QueryStatus.UNKNOWN


def _key(source: str) -> str:
    return source.value if isinstance(source, Enum) else source


class RememberedFundingCache:
    """Memoized remembered-funding lookups with at most one fetch in flight."""

    def __init__(
        self,
        storage: FundingStore,
        session: StateStore,
        fetch_metadata: MetadataFetcher,
        is_venmo_supported_device: Callable[[], bool],
    ) -> None:
        self._storage = storage
        self._session = session
        self._fetch_metadata = fetch_metadata
        self._is_venmo_supported_device = is_venmo_supported_device
        self._queries: dict[str, PendingQuery] = {}
        self._fetch: asyncio.Task[None] | None = None
        self._fetch_error: Exception | None = None

    # ── Local state ──────────────────────────────────────────────────

    async def get_remembered_funding(self) -> list[str]:
        """The buyer's durable remembered list."""
        return await self._storage.members()

    @property
    def recently_checked(self) -> bool:
        """True once this session has a complete remembered list."""
        return bool(self._session.with_state(lambda state: state.get(RECENTLY_CHECKED_KEY, False)))

    def _mark_checked(self) -> None:
        def _set(state: State) -> None:
            state[RECENTLY_CHECKED_KEY] = True

        self._session.with_state(_set)

    async def _local_answer(self, key: str) -> bool | None:
        if await self._storage.contains(key):
            return True
        if self.recently_checked:
            return False
        return None

    async def has_local_answer(self, source: str) -> bool:
        return await self._local_answer(_key(source)) is not None

    async def is_remembered_locally(self, source: str) -> bool:
        key = _key(source)
        answer = await self._local_answer(key)
        if answer is None:
            msg = f"Can not find remembered funding result for {key}"
            raise RememberedFundingError(msg)
        return answer

    # ── Queries ──────────────────────────────────────────────────────

    def status(self, source: str) -> QueryStatus:
        query = self._queries.get(_key(source))
        return query.status if query is not None else QueryStatus.UNKNOWN

    def _query(self, key: str) -> PendingQuery:
        query = self._queries.get(key)
        if query is None:
            query = PendingQuery(future=asyncio.get_running_loop().create_future())
            self._queries[key] = query
        return query

    @staticmethod
    def _resolve(query: PendingQuery, remembered: bool) -> None:
        if query.future.done():
            return
        query.future.set_result(remembered)
        query.status = QueryStatus.KNOWN

    async def _flush(self) -> None:
        remembered = await self._storage.members()
        for key, query in self._queries.items():
            self._resolve(query, key in remembered)

    def _reject_pending(self, exc: Exception) -> None:
        for query in self._queries.values():
            if query.status is QueryStatus.FETCHING and not query.future.done():
                query.future.set_exception(exc)
                query.status = QueryStatus.FAILED

    async def is_funding_remembered(self, source: str = FundingSource.PAYPAL) -> bool:
        """Whether the buyer has used the source before."""
        key = _key(source)
        query = self._query(key)

        if not query.future.done() and query.status is not QueryStatus.FETCHING:
            answer = await self._local_answer(key)
            # Another caller may have settled the query while storage was read
            if query.future.done():
                pass
            elif answer is not None:
                self._resolve(query, answer)
            else:
                query.status = QueryStatus.FETCHING
                self._ensure_fetch()

        # Shielded: a cancelled caller must not cancel the shared future
        return await asyncio.shield(query.future)

    # ── Remote fetch ─────────────────────────────────────────────────

    def _ensure_fetch(self) -> None:
        if self._fetch is not None and not self._fetch.done():
            return
        if self._fetch_error is not None:
            self._reject_pending(self._fetch_error)
            return
        logger.debug("Fetching remembered funding metadata")
        self._fetch = asyncio.create_task(self._load_metadata())

    async def _load_metadata(self) -> None:
        try:
            metadata = await self._fetch_metadata()
            await self.remember_funding(metadata.remembered_funding)
        except Exception as exc:
            logger.warning("Remembered funding fetch failed: %s", exc)
            self._fetch_error = exc
            self._reject_pending(exc)

    async def precache_remembered_funding(self) -> None:
        """Load remembered funding ahead of the first query this session."""
        if self.recently_checked:
            return
        self._ensure_fetch()
        if self._fetch is not None:
            await asyncio.shield(self._fetch)
        if self._fetch_error is not None:
            raise self._fetch_error

    # ── Updates ──────────────────────────────────────────────────────

    async def remember_funding(self, sources: Iterable[str]) -> None:
        """Record used sources and release every pending query."""
        keys: list[str] = []
        for source in sources:
            key = _key(source)
            if key == FundingSource.VENMO.value and not self._is_venmo_supported_device():
                logger.debug("Not remembering venmo on an unsupported device")
                continue
            keys.append(key)

        await self._storage.add(keys)
        self._mark_checked()
        await self._flush()

    def reset(self) -> None:
        """Start a new session; queries still waiting on a fetch are kept."""
        self._queries = {
            key: query for key, query in self._queries.items() if query.status is QueryStatus.FETCHING
        }
        if self._fetch is not None and self._fetch.done():
            self._fetch = None
        self._fetch_error = None
