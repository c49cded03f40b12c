"""Ordered eligibility rule table.

Each rule is a predicate plus the outcome it produces. Rules are evaluated
top to bottom and the first matching rule decides; the last rule always
matches, so every source gets exactly one reason.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from checkout_funding.eligibility.sources import FundingConfig
from checkout_funding.models.enums import ButtonLayout, EligibilityReason, Environment, FundingSource
from checkout_funding.schemas.funding import EligibilityDecision, FundingSelection, RequestContext


@dataclass(frozen=True)
class RuleInput:
    """Everything a rule predicate may look at for one candidate source."""

    source: str
    request: RequestContext
    selection: FundingSelection
    config: FundingConfig

    @property
    def country(self) -> str:
        return self.request.locale.country

    @property
    def is_vertical(self) -> bool:
        return self.request.layout == ButtonLayout.VERTICAL

    def policy(self, key: str, default: Any = None) -> Any:
        return self.config.get_funding_config(self.source, key, default)


@dataclass(frozen=True)
class EligibilityRule:
    """A named predicate -> outcome pair."""

    name: str
    applies: Callable[[RuleInput], bool]
    eligible: bool
    reason: EligibilityReason

    def decision(self) -> EligibilityDecision:
        return EligibilityDecision(eligible=self.eligible, reason=self.reason, rule=self.name)


# ── Predicates ─────────────────────────────────────────────────────────────


def _is_selected(i: RuleInput) -> bool:
    return i.source == i.request.selected


def _not_enabled(i: RuleInput) -> bool:
    if i.policy("enabled"):
        return False
    return not (i.request.env == Environment.TEST and i.policy("test"))


def _secondary_disallowed(i: RuleInput) -> bool:
    return not i.policy("allow_vertical" if i.is_vertical else "allow_horizontal")


def _opted_out(i: RuleInput) -> bool:
    return i.source in i.selection.disallowed and bool(i.policy("allow_opt_out"))


def _venmo_opted_out(i: RuleInput) -> bool:
    # Venmo can always be opted out, whatever its allow_opt_out flag says
    return i.source == FundingSource.VENMO and i.source in i.selection.disallowed


def _disallowed_country(i: RuleInput) -> bool:
    return i.country not in i.policy("allowed_countries", [i.country])


def _default_country(i: RuleInput) -> bool:
    return i.country in i.policy("default_countries", [])


def _default_vertical_country(i: RuleInput) -> bool:
    return i.is_vertical and i.country in i.policy("default_vertical_countries", [])


def _default(i: RuleInput) -> bool:
    return bool(i.policy("default"))


def _opted_in(i: RuleInput) -> bool:
    return i.source in i.selection.allowed and bool(i.policy("allow_opt_in"))


def _remembered(i: RuleInput) -> bool:
    return i.source in i.selection.remembered and bool(i.policy("allow_remember"))


def _always(_: RuleInput) -> bool:
    return True


# ── Rule table ─────────────────────────────────────────────────────────────

ELIGIBILITY_RULES: tuple[EligibilityRule, ...] = (
    EligibilityRule("primary", _is_selected, True, EligibilityReason.PRIMARY),
    EligibilityRule("not_enabled", _not_enabled, False, EligibilityReason.NOT_ENABLED),
    EligibilityRule("secondary_disallowed", _secondary_disallowed, False, EligibilityReason.SECONDARY_DISALLOWED),
    EligibilityRule("opt_out", _opted_out, False, EligibilityReason.OPT_OUT),
    EligibilityRule("venmo_opt_out", _venmo_opted_out, False, EligibilityReason.OPT_OUT),
    EligibilityRule("disallowed_country", _disallowed_country, False, EligibilityReason.DISALLOWED_COUNTRY),
    EligibilityRule("default_country", _default_country, True, EligibilityReason.DEFAULT_COUNTRY),
    EligibilityRule("default_vertical_country", _default_vertical_country, True, EligibilityReason.DEFAULT_COUNTRY),
    EligibilityRule("default", _default, True, EligibilityReason.DEFAULT),
    EligibilityRule("opt_in", _opted_in, True, EligibilityReason.OPT_IN),
    EligibilityRule("remembered", _remembered, True, EligibilityReason.REMEMBERED),
    EligibilityRule("need_opt_in", _always, False, EligibilityReason.NEED_OPT_IN),
)


def apply_rules(
    rule_input: RuleInput,
    rules: tuple[EligibilityRule, ...] = ELIGIBILITY_RULES,
) -> EligibilityDecision:
    """Return the decision of the first rule that applies."""
    for rule in rules:
        if rule.applies(rule_input):
            return rule.decision()
    msg = f"No eligibility rule matched funding source: {rule_input.source}"
    raise RuntimeError(msg)
