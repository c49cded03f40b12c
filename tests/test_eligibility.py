"""Tests for the eligibility engine.

Each test builds a FundingSelection and RequestContext and asserts the
eligible sources, their order, and the reason recorded for each candidate.
"""

from __future__ import annotations

import pytest

from checkout_funding.eligibility import (
    ELIGIBILITY_RULES,
    EligibilityTrace,
    FundingConfig,
    determine_eligible_cards,
    determine_eligible_funding,
    evaluate_funding,
)
from checkout_funding.eligibility.sources import CARD_CONFIG, FUNDING_POLICIES, FUNDING_PRIORITY
from checkout_funding.models.enums import (
    ButtonLayout,
    CardBrand,
    EligibilityReason,
    Environment,
    FundingSource,
)
from checkout_funding.schemas.funding import FundingPolicy, FundingSelection, Locale, RequestContext

F = FundingSource
R = EligibilityReason

ELIGIBLE_REASONS = {R.PRIMARY, R.DEFAULT_COUNTRY, R.DEFAULT, R.OPT_IN, R.REMEMBERED}


def _request(
    country: str = "US",
    layout: ButtonLayout = ButtonLayout.HORIZONTAL,
    env: Environment = Environment.PRODUCTION,
    selected: FundingSource = F.PAYPAL,
) -> RequestContext:
    return RequestContext(locale=Locale(country=country), env=env, layout=layout, selected=selected)


def _config(policies: dict[FundingSource, FundingPolicy], priority: tuple[FundingSource, ...]) -> FundingConfig:
    return FundingConfig(priority=priority, funding=policies, cards=CARD_CONFIG)


class TestUsHorizontal:
    """US buyer, horizontal layout, no preferences."""

    @pytest.fixture()
    def trace(self):
        return EligibilityTrace()

    @pytest.fixture()
    def result(self, trace):
        return determine_eligible_funding(FundingSelection(), _request(), trace=trace)

    def test_only_paypal(self, result):
        assert result == [F.PAYPAL]

    def test_venmo_needs_opt_in(self, result, trace):
        assert trace.buttons[0].reasons["venmo"].reason == R.NEED_OPT_IN

    def test_bank_redirects_not_secondary(self, result, trace):
        reasons = trace.buttons[0].reasons
        assert reasons["ideal"].reason == R.SECONDARY_DISALLOWED
        assert reasons["card"].reason == R.SECONDARY_DISALLOWED

    def test_credit_not_default_horizontally(self, result, trace):
        assert trace.buttons[0].reasons["credit"].reason == R.NEED_OPT_IN

    def test_mybank_not_enabled(self, result, trace):
        assert trace.buttons[0].reasons["mybank"].reason == R.NOT_ENABLED


class TestUsVertical:
    """US buyer, vertical layout — credit defaults on, card is allowed."""

    @pytest.fixture()
    def trace(self):
        return EligibilityTrace()

    @pytest.fixture()
    def result(self, trace):
        return determine_eligible_funding(
            FundingSelection(), _request(layout=ButtonLayout.VERTICAL), trace=trace,
        )

    def test_eligible_in_priority_order(self, result):
        assert result == [F.PAYPAL, F.CREDIT, F.CARD]

    def test_credit_default_vertical_country(self, result, trace):
        assert trace.buttons[0].reasons["credit"].reason == R.DEFAULT_COUNTRY

    def test_card_default(self, result, trace):
        assert trace.buttons[0].reasons["card"].reason == R.DEFAULT

    def test_ideal_disallowed_country(self, result, trace):
        assert trace.buttons[0].reasons["ideal"].reason == R.DISALLOWED_COUNTRY

    def test_every_candidate_traced(self, result, trace):
        assert list(trace.buttons[0].reasons) == [source.value for source in FUNDING_PRIORITY]


class TestGermanyVertical:
    """German buyer — ELV defaults on by country."""

    def test_elv_default_country(self):
        trace = EligibilityTrace()
        result = determine_eligible_funding(
            FundingSelection(), _request(country="DE", layout=ButtonLayout.VERTICAL), trace=trace,
        )
        assert result == [F.PAYPAL, F.ELV, F.CARD]
        assert trace.buttons[0].reasons["elv"].reason == R.DEFAULT_COUNTRY
        assert trace.buttons[0].reasons["venmo"].reason == R.DISALLOWED_COUNTRY

    def test_sofort_opt_in(self):
        result = determine_eligible_funding(
            FundingSelection(allowed=["sofort"]),
            _request(country="DE", layout=ButtonLayout.VERTICAL),
        )
        assert result == [F.PAYPAL, F.ELV, F.SOFORT, F.CARD]

    def test_elv_opt_out(self):
        decision = evaluate_funding(
            F.ELV,
            _request(country="DE", layout=ButtonLayout.VERTICAL),
            FundingSelection(disallowed=["elv"]),
        )
        assert decision.eligible is False
        assert decision.reason == R.OPT_OUT
        assert decision.rule == "opt_out"


class TestSelectedSource:
    def test_selected_pinned_first(self):
        result = determine_eligible_funding(
            FundingSelection(), _request(layout=ButtonLayout.VERTICAL, selected=F.CARD),
        )
        assert result == [F.CARD, F.PAYPAL, F.CREDIT]

    def test_selected_eligible_despite_policy(self):
        """Card is horizontal-disallowed but the selected source always renders."""
        decision = evaluate_funding(F.CARD, _request(selected=F.CARD), FundingSelection())
        assert decision.eligible is True
        assert decision.reason == R.PRIMARY

    def test_selected_eligible_despite_opt_out(self):
        result = determine_eligible_funding(
            FundingSelection(disallowed=["venmo"]), _request(selected=F.VENMO),
        )
        assert result[0] == F.VENMO

    def test_priority_example(self):
        """[A, B, C] with B selected, A not enabled, C default -> [B, C]."""
        config = _config(
            {
                F.EPS: FundingPolicy(enabled=False),
                F.GIROPAY: FundingPolicy(),
                F.CARD: FundingPolicy(default=True),
            },
            priority=(F.EPS, F.GIROPAY, F.CARD),
        )
        trace = EligibilityTrace()
        result = determine_eligible_funding(
            FundingSelection(), _request(selected=F.GIROPAY), config=config, trace=trace,
        )
        assert result == [F.GIROPAY, F.CARD]
        assert trace.buttons[0].reasons["eps"].eligible is False
        assert trace.buttons[0].reasons["eps"].reason == R.NOT_ENABLED


class TestVenmo:
    def test_opt_in(self):
        result = determine_eligible_funding(
            FundingSelection(allowed=["venmo"]), _request(layout=ButtonLayout.VERTICAL),
        )
        assert result == [F.PAYPAL, F.VENMO, F.CREDIT, F.CARD]

    def test_remembered(self):
        decision = evaluate_funding(F.VENMO, _request(), FundingSelection(remembered=["venmo"]))
        assert decision.eligible is True
        assert decision.reason == R.REMEMBERED

    def test_opt_out_carve_out(self):
        """Venmo opts out even when its policy forbids opting out."""
        config = _config(
            {F.PAYPAL: FUNDING_POLICIES[F.PAYPAL], F.VENMO: FundingPolicy(allow_opt_out=False)},
            priority=(F.PAYPAL, F.VENMO),
        )
        decision = evaluate_funding(
            F.VENMO, _request(), FundingSelection(disallowed=["venmo"], remembered=["venmo"]), config,
        )
        assert decision.eligible is False
        assert decision.reason == R.OPT_OUT
        assert decision.rule == "venmo_opt_out"

    def test_opt_out_flag_respected_for_others(self):
        """Without the carve-out, a non-opt-outable source ignores disallowed."""
        config = _config(
            {F.PAYPAL: FUNDING_POLICIES[F.PAYPAL], F.CREDIT: FundingPolicy(allow_opt_out=False, default=True)},
            priority=(F.PAYPAL, F.CREDIT),
        )
        decision = evaluate_funding(F.CREDIT, _request(), FundingSelection(disallowed=["credit"]), config)
        assert decision.eligible is True
        assert decision.reason == R.DEFAULT


class TestCountryAndPolicyRules:
    def test_disallowed_country_beats_opt_in(self):
        decision = evaluate_funding(
            F.IDEAL, _request(layout=ButtonLayout.VERTICAL), FundingSelection(allowed=["ideal"]),
        )
        assert decision.eligible is False
        assert decision.reason == R.DISALLOWED_COUNTRY

    def test_unrestricted_countries(self):
        config = _config({F.GIROPAY: FundingPolicy(default=True)}, priority=(F.GIROPAY,))
        decision = evaluate_funding(F.GIROPAY, _request(country="JP"), FundingSelection(), config)
        assert decision.reason == R.DEFAULT

    def test_remember_not_permitted(self):
        config = _config({F.GIROPAY: FundingPolicy(allow_remember=False)}, priority=(F.GIROPAY,))
        decision = evaluate_funding(
            F.GIROPAY, _request(), FundingSelection(remembered=["giropay"]), config,
        )
        assert decision.reason == R.NEED_OPT_IN

    def test_opt_in_not_permitted(self):
        config = _config({F.GIROPAY: FundingPolicy(allow_opt_in=False)}, priority=(F.GIROPAY,))
        decision = evaluate_funding(F.GIROPAY, _request(), FundingSelection(allowed=["giropay"]), config)
        assert decision.reason == R.NEED_OPT_IN

    def test_test_environment_override(self):
        request = _request(country="IT", layout=ButtonLayout.VERTICAL, env=Environment.TEST)
        decision = evaluate_funding(F.MYBANK, request, FundingSelection(allowed=["mybank"]))
        assert decision.eligible is True
        assert decision.reason == R.OPT_IN

    def test_production_ignores_test_flag(self):
        request = _request(country="IT", layout=ButtonLayout.VERTICAL)
        decision = evaluate_funding(F.MYBANK, request, FundingSelection(allowed=["mybank"]))
        assert decision.reason == R.NOT_ENABLED


class TestRuleTotality:
    @pytest.mark.parametrize("country", ["US", "DE", "NL", "IT", "JP"])
    @pytest.mark.parametrize("layout", list(ButtonLayout))
    @pytest.mark.parametrize("env", [Environment.PRODUCTION, Environment.TEST])
    def test_reason_matches_eligibility(self, country, layout, env):
        selection = FundingSelection(allowed=["sofort"], disallowed=["venmo"], remembered=["giropay"])
        request = _request(country=country, layout=layout, env=env)
        for source in FUNDING_PRIORITY:
            decision = evaluate_funding(source, request, selection)
            assert decision.reason in R
            assert decision.eligible is (decision.reason in ELIGIBLE_REASONS)

    @pytest.mark.parametrize("selected", list(FUNDING_PRIORITY))
    def test_no_duplicates_selected_first(self, selected):
        selection = FundingSelection(allowed=["venmo"], remembered=["credit"])
        result = determine_eligible_funding(selection, _request(layout=ButtonLayout.VERTICAL, selected=selected))
        assert result[0] == selected
        assert len(result) == len(set(result))

    def test_result_only_eligible(self):
        trace = EligibilityTrace()
        result = determine_eligible_funding(FundingSelection(), _request(country="NL"), trace=trace)
        for source in result:
            assert trace.buttons[0].reasons[source.value].eligible is True

    def test_last_rule_always_matches(self):
        assert ELIGIBILITY_RULES[-1].reason == R.NEED_OPT_IN
        assert ELIGIBILITY_RULES[-1].eligible is False


class TestEligibleCards:
    def test_us_cards(self):
        cards = determine_eligible_cards(FundingSelection(), Locale(country="US"))
        assert cards == [CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.AMEX, CardBrand.DISCOVER]

    def test_disallowed_brand_removed(self):
        cards = determine_eligible_cards(FundingSelection(disallowed=["amex"]), Locale(country="BR"))
        assert cards == [CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.HIPER, CardBrand.ELO]

    def test_unknown_country_falls_back(self):
        cards = determine_eligible_cards(FundingSelection(), Locale(country="FR"))
        assert cards == [CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.AMEX]
