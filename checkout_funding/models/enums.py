"""Domain enums used across the funding config, schemas and rule table.

All enums use str mixin so members compare equal to the raw identifiers
that arrive in selections and JSON payloads.
"""

from __future__ import annotations

from enum import Enum


class FundingSource(str, Enum):
    """Payment methods a checkout button can render."""

    PAYPAL = "paypal"
    VENMO = "venmo"
    CREDIT = "credit"
    CARD = "card"
    IDEAL = "ideal"
    ELV = "elv"
    BANCONTACT = "bancontact"
    GIROPAY = "giropay"
    EPS = "eps"
    SOFORT = "sofort"
    MYBANK = "mybank"


class CardBrand(str, Enum):
    """Card brands — filtered separately from funding sources."""

    VISA = "visa"
    MASTERCARD = "mastercard"
    AMEX = "amex"
    DISCOVER = "discover"
    SWITCH = "switch"
    MAESTRO = "maestro"
    HIPER = "hiper"
    ELO = "elo"
    JCB = "jcb"
    CUP = "cup"


class Environment(str, Enum):
    """Checkout environment the button is rendered in."""

    PRODUCTION = "production"
    SANDBOX = "sandbox"
    TEST = "test"
    LOCAL = "local"
    STAGE = "stage"


class ButtonLayout(str, Enum):
    """Button stack orientation — drives the secondary-button rule."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class EligibilityReason(str, Enum):
    """Terminal outcome of the eligibility rule table."""

    PRIMARY = "primary"
    NOT_ENABLED = "not_enabled"
    SECONDARY_DISALLOWED = "secondary_disallowed"
    OPT_OUT = "opt_out"
    DISALLOWED_COUNTRY = "disallowed_country"
    DEFAULT_COUNTRY = "default_country"
    DEFAULT = "default"
    OPT_IN = "opt_in"
    REMEMBERED = "remembered"
    NEED_OPT_IN = "need_opt_in"


# Human-readable descriptions for trace output
REASON_DESCRIPTIONS: dict[EligibilityReason, str] = {
    EligibilityReason.PRIMARY: "The funding source is the primary source",
    EligibilityReason.NOT_ENABLED: "The funding source is not currently enabled for use",
    EligibilityReason.SECONDARY_DISALLOWED: "The funding source is disallowed as a secondary button",
    EligibilityReason.OPT_OUT: "The funding source was disallowed in funding.disallowed",
    EligibilityReason.DISALLOWED_COUNTRY: "The funding source is not enabled for the current locale",
    EligibilityReason.DEFAULT_COUNTRY: "The funding source is enabled by default for the current locale",
    EligibilityReason.DEFAULT: "The funding source is enabled by default for all users",
    EligibilityReason.OPT_IN: "The funding source was allowed in funding.allowed",
    EligibilityReason.REMEMBERED: "The funding source was remembered for the current user",
    EligibilityReason.NEED_OPT_IN: "The funding source needs to be allowed in funding.allowed",
}
