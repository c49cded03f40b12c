"""Eligibility engine — evaluates every funding source for one button render.

Pure Python orchestrator. No I/O; the only side effect is appending to the
EligibilityTrace the caller passes in.
"""

from __future__ import annotations

import logging

from checkout_funding.eligibility.rules import RuleInput, apply_rules
from checkout_funding.eligibility.sources import FundingConfig, get_default_funding_config
from checkout_funding.eligibility.trace import EligibilityTrace
from checkout_funding.models.enums import CardBrand, FundingSource
from checkout_funding.schemas.funding import (
    ButtonTrace,
    EligibilityDecision,
    EligibilityFactors,
    FundingReasonRecord,
    FundingSelection,
    Locale,
    RequestContext,
)

logger = logging.getLogger(__name__)


def evaluate_funding(
    source: str,
    request: RequestContext,
    selection: FundingSelection,
    config: FundingConfig | None = None,
) -> EligibilityDecision:
    """Run one source through the rule table."""
    rule_input = RuleInput(
        source=source,
        request=request,
        selection=selection,
        config=config or get_default_funding_config(),
    )
    return apply_rules(rule_input)


def _factors(request: RequestContext) -> EligibilityFactors:
    return EligibilityFactors(env=request.env, locale=str(request.locale), layout=request.layout)


def determine_eligible_funding(
    selection: FundingSelection,
    request: RequestContext,
    config: FundingConfig | None = None,
    trace: EligibilityTrace | None = None,
) -> list[FundingSource]:
    """Eligible sources in priority order, with the selected source first.

    Every candidate (eligible or not) is recorded in the trace.
    """
    config = config or get_default_funding_config()
    factors = _factors(request)

    reasons: dict[str, FundingReasonRecord] = {}
    eligible: list[FundingSource] = []

    for source in config.priority:
        decision = evaluate_funding(source, request, selection, config)
        reasons[source.value] = FundingReasonRecord(
            eligible=decision.eligible,
            reason=decision.reason,
            factors=factors,
        )
        if decision.eligible:
            eligible.append(source)

    if trace is not None:
        trace.record(ButtonTrace(reasons=reasons))

    # Pin the selected source first
    if request.selected in eligible:
        eligible.remove(request.selected)
        eligible.insert(0, request.selected)

    logger.debug(
        "Eligible funding for %s (%s, %s): %s",
        request.locale,
        request.env.value,
        request.layout.value,
        [source.value for source in eligible],
    )
    return eligible


def determine_eligible_cards(
    selection: FundingSelection,
    locale: Locale,
    config: FundingConfig | None = None,
) -> list[CardBrand]:
    """Country card priority minus any brand the caller disallowed."""
    config = config or get_default_funding_config()
    priority: tuple[CardBrand, ...] = config.get_card_config(locale.country, "priority")
    return [card for card in priority if card not in selection.disallowed]
