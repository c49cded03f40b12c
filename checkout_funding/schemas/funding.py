"""Pydantic schemas for funding policy, request state and eligibility output.

Pure data classes — no I/O. Policy models are frozen and accept the
camelCase keys used by JSON funding configs.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from checkout_funding.models.enums import (
    ButtonLayout,
    CardBrand,
    EligibilityReason,
    Environment,
    FundingSource,
)


# ---------------------------------------------------------------------------
# Funding policy
# ---------------------------------------------------------------------------


class FundingPolicy(BaseModel):
    """Per-source policy flags. Read-only once loaded."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    enabled: bool = True
    test: bool = False                 # enabled in the test environment even when disabled
    allow_vertical: bool = True
    allow_horizontal: bool = True
    allow_opt_in: bool = True
    allow_opt_out: bool = True
    allow_remember: bool = True
    default: bool = False
    allowed_countries: tuple[str, ...] | None = None  # None = unrestricted
    default_countries: tuple[str, ...] = ()
    default_vertical_countries: tuple[str, ...] = ()


class CardPolicy(BaseModel):
    """Card brands offered in a country, in display order."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    priority: tuple[CardBrand, ...]


# ---------------------------------------------------------------------------
# Request state
# ---------------------------------------------------------------------------


class Locale(BaseModel):
    """Buyer locale. Only the country drives eligibility."""

    model_config = ConfigDict(frozen=True)

    country: str
    lang: str = "en"

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v: str) -> str:
        """Strip whitespace and uppercase."""
        return v.strip().upper()

    @classmethod
    def parse(cls, value: str) -> Locale:
        """Parse "en_US" / "en-US" into a Locale."""
        lang, sep, country = value.replace("-", "_").partition("_")
        if not sep or not lang or not country:
            msg = f"Invalid locale: {value}"
            raise ValueError(msg)
        return cls(country=country, lang=lang.lower())

    def __str__(self) -> str:
        return f"{self.lang}_{self.country}"


class FundingSelection(BaseModel):
    """Caller-declared funding preferences.

    Plain strings rather than FundingSource: card brands and unknown values
    must survive until validate_funding rejects or skips them.
    """

    allowed: list[str] = Field(default_factory=list)
    disallowed: list[str] = Field(default_factory=list)
    remembered: list[str] = Field(default_factory=list)


class RequestContext(BaseModel):
    """Per-render inputs to the eligibility engine. Never persisted."""

    model_config = ConfigDict(frozen=True)

    locale: Locale
    env: Environment = Environment.PRODUCTION
    layout: ButtonLayout = ButtonLayout.HORIZONTAL
    selected: FundingSource = FundingSource.PAYPAL


# ---------------------------------------------------------------------------
# Eligibility output
# ---------------------------------------------------------------------------


class EligibilityDecision(BaseModel):
    """Outcome of the rule table for one source."""

    model_config = ConfigDict(frozen=True)

    eligible: bool
    reason: EligibilityReason
    rule: str                          # name of the rule that decided


class EligibilityFactors(BaseModel):
    """Request factors recorded alongside each decision."""

    env: Environment
    locale: str
    layout: ButtonLayout


class FundingReasonRecord(BaseModel):
    """Trace entry for one candidate source."""

    eligible: bool
    reason: EligibilityReason
    factors: EligibilityFactors


class ButtonTrace(BaseModel):
    """All candidate decisions for a single button render, in priority order."""

    reasons: dict[str, FundingReasonRecord] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Remembered funding metadata
# ---------------------------------------------------------------------------


class RememberedFundingMetadata(BaseModel):
    """Payload of the remembered-funding metadata endpoint."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    remembered_funding: list[str] = Field(default_factory=list)

    @field_validator("remembered_funding", mode="before")
    @classmethod
    def default_missing(cls, v: object) -> object:
        """Treat a null list as empty."""
        return [] if v is None else v
