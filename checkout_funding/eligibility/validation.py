"""Contract checks on caller-supplied funding selections.

Not business rules: a failure means the integrating page passed an invalid
configuration, so errors are raised immediately rather than traced.
"""

from __future__ import annotations

from checkout_funding.eligibility.sources import CARD_PRIORITY, FundingConfig, get_default_funding_config
from checkout_funding.schemas.funding import FundingSelection


class FundingConfigError(ValueError):
    """Raised when a funding selection breaks the per-source policy."""


def _is_card(source: str) -> bool:
    return source in CARD_PRIORITY


def validate_funding(selection: FundingSelection, config: FundingConfig | None = None) -> None:
    """Reject unknown sources and opt-ins/opt-outs the policy does not permit.

    Card brands are skipped on both lists; cards are filtered by
    determine_eligible_cards instead.
    """
    config = config or get_default_funding_config()

    for source in selection.allowed:
        if _is_card(source):
            continue
        if not config.is_known(source):
            msg = f"Invalid funding source: {source}"
            raise FundingConfigError(msg)
        if not config.get_funding_config(source, "allow_opt_in"):
            msg = f"Can not allow funding source: {source}"
            raise FundingConfigError(msg)
        if source in selection.disallowed:
            msg = f"Can not allow and disallow funding source: {source}"
            raise FundingConfigError(msg)

    for source in selection.disallowed:
        if _is_card(source):
            continue
        if not config.is_known(source):
            msg = f"Invalid funding source: {source}"
            raise FundingConfigError(msg)
        if not config.get_funding_config(source, "allow_opt_out"):
            msg = f"Can not disallow funding source: {source}"
            raise FundingConfigError(msg)
