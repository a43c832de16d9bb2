"""
Canonical enums shared by every modgate component.

Each enum's value *is* its machine-readable wire string, so the Enum's own
value lookup is the single parse/format registry. Human-readable names live in
one display table per enum. Parsing is exact-case for label codes, actions and
role filter modes, and case-insensitive for models, tiers and billing cycles.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple

from modgate.datatypes.errors import UnknownVariant, UnresolvedModelError


class WireEnum(Enum):
    """Base for enums that round-trip through a wire string."""

    @classmethod
    def _normalize(cls, raw: str) -> str:
        return raw

    @classmethod
    def parse(cls, raw: object):
        """Return the variant named by ``raw``.

        Raises:
            UnknownVariant: If ``raw`` is not a string naming a variant.
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise UnknownVariant(cls.__name__, raw)
        try:
            return cls(cls._normalize(raw))
        except ValueError:
            raise UnknownVariant(cls.__name__, raw) from None

    def to_wire_string(self) -> str:
        return self.value

    def to_display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    def __str__(self) -> str:
        return self.value


class CaseInsensitiveWireEnum(WireEnum):
    """Wire enum whose parser ignores case; wire strings are lowercase."""

    @classmethod
    def _normalize(cls, raw: str) -> str:
        return raw.lower()


class ModerationLabel(WireEnum):
    """Moderation categories a classifier can flag."""

    S = "S"
    H = "H"
    V = "V"
    HR = "HR"
    SH = "SH"
    S3 = "S3"
    SP = "SP"
    SE = "SE"
    T = "T"

    @classmethod
    def all_labels(cls) -> List["ModerationLabel"]:
        """Every label in declaration order."""
        return list(cls)

    @classmethod
    def default_labels(cls) -> Tuple["ModerationLabel", ...]:
        """Labels enabled for a guild that has not chosen its own (everything but T)."""
        return tuple(label for label in cls if label is not cls.T)


class ModerationModel(CaseInsensitiveWireEnum):
    """Classification strength tiers. ``AUTO`` is a request-time placeholder."""

    AUTO = "auto"
    OBSERVER = "observer"
    SENTINEL = "sentinel"
    ARBITER = "arbiter"

    @property
    def is_auto(self) -> bool:
        return self is ModerationModel.AUTO

    def credits_per_byte(self) -> int:
        """Credits charged per classified byte.

        Raises:
            UnresolvedModelError: If called on ``AUTO``; it must be resolved first.
        """
        if self is ModerationModel.AUTO:
            raise UnresolvedModelError("Auto must be resolved before calculating credits")
        return _CREDITS_PER_BYTE[self]

    @classmethod
    def all_models(cls) -> List["ModerationModel"]:
        return list(cls)

    @classmethod
    def concrete_models(cls) -> List["ModerationModel"]:
        return [model for model in cls if not model.is_auto]


class ModerationAction(WireEnum):
    """Enforcement operations applied to a flagged message."""

    DELETE = "delete"
    TIMEOUT = "timeout"
    WARN = "warn"


class RoleFilterMode(WireEnum):
    """How ``filtered_roles`` is interpreted when not moderating all roles."""

    INCLUDE = "include"
    EXCLUDE = "exclude"


class Tier(CaseInsensitiveWireEnum):
    """Subscription levels."""

    FREE = "free"
    STARTER = "starter"
    PRO = "pro"
    ENTERPRISE = "enterprise"

    def get_features(self) -> Tuple[str, ...]:
        return _TIER_FEATURES[self]

    def get_description(self) -> str:
        return _TIER_DESCRIPTIONS[self]


class BillingCycle(CaseInsensitiveWireEnum):
    """Subscription billing cadence."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


# -------------------- Lookup tables --------------------

_CREDITS_PER_BYTE: Dict[ModerationModel, int] = {
    ModerationModel.OBSERVER: 1,
    ModerationModel.SENTINEL: 3,
    ModerationModel.ARBITER: 9,
}

_LABEL_NAMES: Dict[ModerationLabel, str] = {
    ModerationLabel.S: "Sexual",
    ModerationLabel.H: "Harassment",
    ModerationLabel.V: "Violence",
    ModerationLabel.HR: "Hate/Racism",
    ModerationLabel.SH: "Self-Harm",
    ModerationLabel.S3: "Sexual (Severe/Minors)",
    ModerationLabel.SP: "Spam",
    ModerationLabel.SE: "Sensitive Content",
    ModerationLabel.T: "Toxicity",
}

_MODEL_NAMES: Dict[ModerationModel, str] = {
    ModerationModel.AUTO: "Auto",
    ModerationModel.OBSERVER: "Observer",
    ModerationModel.SENTINEL: "Sentinel",
    ModerationModel.ARBITER: "Arbiter",
}

_ACTION_NAMES: Dict[ModerationAction, str] = {
    ModerationAction.DELETE: "Delete",
    ModerationAction.TIMEOUT: "Timeout",
    ModerationAction.WARN: "Warn",
}

_ROLE_FILTER_NAMES: Dict[RoleFilterMode, str] = {
    RoleFilterMode.INCLUDE: "Include",
    RoleFilterMode.EXCLUDE: "Exclude",
}

_TIER_NAMES: Dict[Tier, str] = {
    Tier.FREE: "Free",
    Tier.STARTER: "Starter",
    Tier.PRO: "Pro",
    Tier.ENTERPRISE: "Enterprise",
}

_BILLING_CYCLE_NAMES: Dict[BillingCycle, str] = {
    BillingCycle.MONTHLY: "Monthly",
    BillingCycle.YEARLY: "Yearly",
}

_DISPLAY_NAMES: Dict[WireEnum, str] = {
    **_LABEL_NAMES,
    **_MODEL_NAMES,
    **_ACTION_NAMES,
    **_ROLE_FILTER_NAMES,
    **_TIER_NAMES,
    **_BILLING_CYCLE_NAMES,
}

_TIER_DESCRIPTIONS: Dict[Tier, str] = {
    Tier.FREE: "Basic automated moderation for small communities.",
    Tier.STARTER: "Stronger classification and context-aware review for growing servers.",
    Tier.PRO: "Every model, automatic model selection and a large monthly credit pool.",
    Tier.ENTERPRISE: "High-volume moderation across many guilds with the largest credit pool.",
}

_TIER_FEATURES: Dict[Tier, Tuple[str, ...]] = {
    Tier.FREE: (
        "Observer model",
        "Channel and role filters",
        "Delete, timeout and warn actions",
    ),
    Tier.STARTER: (
        "Observer and Sentinel models",
        "Automatic model selection",
        "Context-aware re-evaluation",
        "Alerts channel",
    ),
    Tier.PRO: (
        "Observer, Sentinel and Arbiter models",
        "Automatic model selection",
        "Context-aware re-evaluation",
        "Alerts channel",
        "Priority support",
    ),
    Tier.ENTERPRISE: (
        "Observer, Sentinel and Arbiter models",
        "Automatic model selection",
        "Context-aware re-evaluation",
        "Alerts channel",
        "Dedicated support",
        "Custom credit allowances",
    ),
}
