"""Funding-source eligibility and remembered-funding cache for checkout buttons."""

from checkout_funding.context import CheckoutContext
from checkout_funding.eligibility import (
    FundingConfigError,
    determine_eligible_cards,
    determine_eligible_funding,
    evaluate_funding,
    validate_funding,
)
from checkout_funding.models.enums import (
    ButtonLayout,
    CardBrand,
    EligibilityReason,
    Environment,
    FundingSource,
)
from checkout_funding.schemas.funding import FundingSelection, Locale, RequestContext

__all__ = [
    "CheckoutContext",
    "FundingConfigError",
    "determine_eligible_cards",
    "determine_eligible_funding",
    "evaluate_funding",
    "validate_funding",
    "ButtonLayout",
    "CardBrand",
    "EligibilityReason",
    "Environment",
    "FundingSource",
    "FundingSelection",
    "Locale",
    "RequestContext",
]
