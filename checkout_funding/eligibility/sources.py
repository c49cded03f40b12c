"""Funding priority, per-source policies and card configuration.

The built-in tables are the production defaults. A JSON file with the same
shape (camelCase policy keys) can replace them via FundingConfig.from_file.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from checkout_funding.models.enums import CardBrand, FundingSource
from checkout_funding.schemas.funding import CardPolicy, FundingPolicy

DEFAULT_CARD_COUNTRY = "DEFAULT"

# Display precedence; the engine walks this order for every button
FUNDING_PRIORITY: tuple[FundingSource, ...] = (
    FundingSource.PAYPAL,
    FundingSource.VENMO,
    FundingSource.CREDIT,
    FundingSource.IDEAL,
    FundingSource.ELV,
    FundingSource.BANCONTACT,
    FundingSource.GIROPAY,
    FundingSource.EPS,
    FundingSource.SOFORT,
    FundingSource.MYBANK,
    FundingSource.CARD,
)

CARD_PRIORITY: tuple[CardBrand, ...] = tuple(CardBrand)

# Bank redirects are vertical-only and country-locked
_BANK_REDIRECT = {"allow_horizontal": False, "allow_vertical": True}

FUNDING_POLICIES: dict[FundingSource, FundingPolicy] = {
    FundingSource.PAYPAL: FundingPolicy(default=True, allow_opt_in=False, allow_opt_out=False),
    # Opt-out is honored for venmo even if a loaded config turns allow_opt_out off
    FundingSource.VENMO: FundingPolicy(allowed_countries=("US",)),
    FundingSource.CREDIT: FundingPolicy(
        allowed_countries=("US",),
        default_vertical_countries=("US",),
    ),
    FundingSource.CARD: FundingPolicy(default=True, allow_horizontal=False, allow_vertical=True),
    FundingSource.IDEAL: FundingPolicy(allowed_countries=("NL",), **_BANK_REDIRECT),
    FundingSource.ELV: FundingPolicy(
        allowed_countries=("DE", "AT"),
        default_countries=("DE", "AT"),
        **_BANK_REDIRECT,
    ),
    FundingSource.BANCONTACT: FundingPolicy(allowed_countries=("BE",), **_BANK_REDIRECT),
    FundingSource.GIROPAY: FundingPolicy(allowed_countries=("DE",), **_BANK_REDIRECT),
    FundingSource.EPS: FundingPolicy(allowed_countries=("AT",), **_BANK_REDIRECT),
    FundingSource.SOFORT: FundingPolicy(
        allowed_countries=("DE", "AT", "BE", "ES", "IT", "NL"),
        **_BANK_REDIRECT,
    ),
    # Not live yet, only rendered in the test environment
    FundingSource.MYBANK: FundingPolicy(
        enabled=False,
        test=True,
        allowed_countries=("IT",),
        **_BANK_REDIRECT,
    ),
}

CARD_CONFIG: dict[str, CardPolicy] = {
    DEFAULT_CARD_COUNTRY: CardPolicy(priority=(CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.AMEX)),
    "US": CardPolicy(priority=(CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.AMEX, CardBrand.DISCOVER)),
    "GB": CardPolicy(priority=(
        CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.AMEX, CardBrand.DISCOVER, CardBrand.MAESTRO,
    )),
    "BR": CardPolicy(priority=(
        CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.AMEX, CardBrand.HIPER, CardBrand.ELO,
    )),
    "JP": CardPolicy(priority=(CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.AMEX, CardBrand.JCB)),
    "CN": CardPolicy(priority=(CardBrand.VISA, CardBrand.MASTERCARD, CardBrand.AMEX, CardBrand.CUP)),
}


class FundingConfig(BaseModel):
    """Read-only configuration store consumed by the engine and validation."""

    model_config = ConfigDict(frozen=True)

    priority: tuple[FundingSource, ...] = FUNDING_PRIORITY
    funding: dict[FundingSource, FundingPolicy]
    cards: dict[str, CardPolicy]

    @model_validator(mode="after")
    def check_default_cards(self) -> FundingConfig:
        """Card lookups fall back to DEFAULT, so it must be present."""
        if DEFAULT_CARD_COUNTRY not in self.cards:
            msg = f"cards must define a {DEFAULT_CARD_COUNTRY!r} entry"
            raise ValueError(msg)
        return self

    @classmethod
    def from_file(cls, path: str | Path) -> FundingConfig:
        """Load a JSON funding config from disk."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))

    def is_known(self, source: str) -> bool:
        """True if the source has a policy entry."""
        member = as_funding_source(source)
        return member is not None and member in self.funding

    def policy(self, source: str) -> FundingPolicy:
        """Policy for a source, or the all-defaults policy for unknown ones."""
        member = as_funding_source(source)
        if member is None:
            return _DEFAULT_POLICY
        return self.funding.get(member, _DEFAULT_POLICY)

    def get_funding_config(self, source: str, key: str, default: Any = None) -> Any:
        """Read one policy flag, returning default when the flag is unset.

        key may be the field name (allow_opt_in) or its JSON alias (allowOptIn).
        """
        value = getattr(self.policy(source), _policy_field(key))
        return default if value is None else value

    def get_card_config(self, country: str, key: str) -> Any:
        """Read one card setting for a country, falling back to DEFAULT."""
        card_policy = self.cards.get(country.upper()) or self.cards[DEFAULT_CARD_COUNTRY]
        return getattr(card_policy, key)


_DEFAULT_POLICY = FundingPolicy()

_POLICY_FIELDS = {name: name for name in FundingPolicy.model_fields} | {
    to_camel(name): name for name in FundingPolicy.model_fields
}


def _policy_field(key: str) -> str:
    try:
        return _POLICY_FIELDS[key]
    except KeyError:
        msg = f"Unknown funding config key: {key}"
        raise KeyError(msg) from None


def as_funding_source(value: str) -> FundingSource | None:
    """Coerce a raw identifier to FundingSource, or None if it is not one."""
    try:
        return FundingSource(value)
    except ValueError:
        return None


@lru_cache(maxsize=1)
def get_default_funding_config() -> FundingConfig:
    """Built-in production funding config."""
    return FundingConfig(priority=FUNDING_PRIORITY, funding=FUNDING_POLICIES, cards=CARD_CONFIG)
