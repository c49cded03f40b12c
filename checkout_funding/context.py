"""Checkout context — the per-application owner of funding state.

Holds the funding config, the eligibility trace, the state stores and the
remembered-funding cache. The hosting application creates one context and
calls reset_session() at session boundaries.

Usage:
    context = CheckoutContext.from_settings(user_agent=request_ua, buyer_id=buyer.id, durable=True)

    context.validate_funding(selection)
    sources = context.determine_eligible_funding(selection, request)

    if await context.is_funding_remembered(FundingSource.VENMO):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from functools import partial

from checkout_funding.config import Settings, settings
from checkout_funding.device import is_device
from checkout_funding.eligibility.engine import determine_eligible_cards, determine_eligible_funding
from checkout_funding.eligibility.sources import FundingConfig, get_default_funding_config
from checkout_funding.eligibility.trace import EligibilityTrace
from checkout_funding.eligibility.validation import validate_funding
from checkout_funding.models.enums import CardBrand, FundingSource
from checkout_funding.remembered.cache import MetadataFetcher, RememberedFundingCache
from checkout_funding.remembered.metadata import MetadataClient
from checkout_funding.remembered.state import (
    FundingStore,
    MemoryFundingStore,
    MemoryStateStore,
    StateStore,
    create_redis_store,
)
from checkout_funding.schemas.funding import FundingSelection, Locale, RequestContext

logger = logging.getLogger(__name__)


class CheckoutContext:
    """Funding config, trace log and remembered-funding state for one host."""

    def __init__(
        self,
        config: FundingConfig | None = None,
        storage: FundingStore | None = None,
        session: StateStore | None = None,
        fetch_metadata: MetadataFetcher | None = None,
        is_venmo_supported_device: Callable[[], bool] | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.config = config or get_default_funding_config()
        self.trace = EligibilityTrace()
        self.storage = storage or MemoryFundingStore()
        self.session = session or MemoryStateStore()
        self.remembered = RememberedFundingCache(
            storage=self.storage,
            session=self.session,
            fetch_metadata=fetch_metadata or MetadataClient().fetch_remembered_funding,
            is_venmo_supported_device=is_venmo_supported_device or partial(is_device, user_agent),
        )

    @classmethod
    def from_settings(
        cls,
        config: Settings = settings,
        user_agent: str | None = None,
        buyer_id: str | None = None,
        durable: bool = False,
    ) -> CheckoutContext:
        """Build a context from Settings.

        durable=True keeps the remembered set in Redis under a key scoped to
        buyer_id, so a buyer_id is required in that mode.
        """
        funding_config = (
            FundingConfig.from_file(config.funding_config_path)
            if config.funding_config_path
            else get_default_funding_config()
        )
        client = MetadataClient(config.metadata.metadata_url, config.metadata.metadata_timeout)
        storage = create_redis_store(config, buyer_id or "") if durable else MemoryFundingStore()
        logger.info(
            "Checkout context created (env=%s, durable=%s, custom_config=%s)",
            config.environment,
            durable,
            bool(config.funding_config_path),
        )
        return cls(
            config=funding_config,
            storage=storage,
            fetch_metadata=client.fetch_remembered_funding,
            user_agent=user_agent,
        )

    # ── Eligibility ──────────────────────────────────────────────────

    def validate_funding(self, selection: FundingSelection) -> None:
        validate_funding(selection, self.config)

    def determine_eligible_funding(
        self,
        selection: FundingSelection,
        request: RequestContext,
    ) -> list[FundingSource]:
        return determine_eligible_funding(selection, request, self.config, self.trace)

    def determine_eligible_cards(self, selection: FundingSelection, locale: Locale) -> list[CardBrand]:
        return determine_eligible_cards(selection, locale, self.config)

    def dump_eligibility_trace(self) -> str:
        return self.trace.dump()

    async def with_remembered(self, selection: FundingSelection) -> FundingSelection:
        """Copy of the selection with the durable remembered list merged in."""
        stored = await self.remembered.get_remembered_funding()
        merged = list(selection.remembered)
        merged.extend(source for source in stored if source not in merged)
        return selection.model_copy(update={"remembered": merged})

    # ── Remembered funding ───────────────────────────────────────────

    async def is_funding_remembered(self, source: str = FundingSource.PAYPAL) -> bool:
        return await self.remembered.is_funding_remembered(source)

    async def remember_funding(self, sources: Iterable[str]) -> None:
        await self.remembered.remember_funding(sources)

    async def precache_remembered_funding(self) -> None:
        await self.remembered.precache_remembered_funding()

    # ── Lifecycle ────────────────────────────────────────────────────

    def reset_session(self) -> None:
        """Drop session state, the trace and memoized queries."""
        self.session.clear()
        self.trace.reset()
        self.remembered.reset()
        logger.debug("Checkout session reset")
