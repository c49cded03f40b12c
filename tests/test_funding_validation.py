"""Tests for checkout_funding.eligibility.validation — selection contract checks."""

from __future__ import annotations

import pytest

from checkout_funding.eligibility import FundingConfigError, validate_funding
from checkout_funding.schemas.funding import FundingSelection


class TestAllowed:
    def test_empty_selection_ok(self):
        validate_funding(FundingSelection())

    def test_opt_in_permitted(self):
        validate_funding(FundingSelection(allowed=["venmo", "credit", "sofort"]))

    def test_card_brand_skipped(self):
        validate_funding(FundingSelection(allowed=["visa", "jcb"]))

    def test_unknown_source(self):
        with pytest.raises(FundingConfigError, match="Invalid funding source: bitcoin"):
            validate_funding(FundingSelection(allowed=["bitcoin"]))

    def test_opt_in_not_permitted(self):
        with pytest.raises(FundingConfigError, match="Can not allow funding source: paypal"):
            validate_funding(FundingSelection(allowed=["paypal"]))

    @pytest.mark.parametrize("source", ["venmo", "credit", "ideal", "elv", "sofort"])
    def test_allowed_and_disallowed(self, source):
        with pytest.raises(FundingConfigError, match="Can not allow and disallow"):
            validate_funding(FundingSelection(allowed=[source], disallowed=[source]))


class TestDisallowed:
    def test_opt_out_permitted(self):
        validate_funding(FundingSelection(disallowed=["venmo", "card", "giropay"]))

    def test_card_brand_skipped(self):
        validate_funding(FundingSelection(disallowed=["amex", "discover"]))

    def test_unknown_source(self):
        with pytest.raises(FundingConfigError, match="Invalid funding source: wechatpay"):
            validate_funding(FundingSelection(disallowed=["wechatpay"]))

    def test_opt_out_not_permitted(self):
        with pytest.raises(FundingConfigError, match="Can not disallow funding source: paypal"):
            validate_funding(FundingSelection(disallowed=["paypal"]))

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validate_funding(FundingSelection(disallowed=["paypal"]))
