"""Eligibility engine — rule-table evaluation of funding sources per button."""

from checkout_funding.eligibility.engine import (
    determine_eligible_cards,
    determine_eligible_funding,
    evaluate_funding,
)
from checkout_funding.eligibility.rules import ELIGIBILITY_RULES, EligibilityRule
from checkout_funding.eligibility.sources import (
    FUNDING_PRIORITY,
    FundingConfig,
    get_default_funding_config,
)
from checkout_funding.eligibility.trace import EligibilityTrace
from checkout_funding.eligibility.validation import FundingConfigError, validate_funding

__all__ = [
    "determine_eligible_cards",
    "determine_eligible_funding",
    "evaluate_funding",
    "validate_funding",
    "ELIGIBILITY_RULES",
    "EligibilityRule",
    "EligibilityTrace",
    "FUNDING_PRIORITY",
    "FundingConfig",
    "FundingConfigError",
    "get_default_funding_config",
]
