"""
Static catalog of what each subscription tier may spend.

The catalog is not persisted. It supplies the ``allowed_models`` and
``max_credits`` inputs of the model resolver. Monthly caps can be overridden
per tier from the application config; allowed models cannot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from modgate.configuration.app_configuration import AppConfig, app_config
from modgate.datatypes.enums import ModerationModel, Tier


@dataclass(frozen=True, slots=True)
class TierPlan:
    """Spending envelope of one tier."""

    tier: Tier
    allowed_models: FrozenSet[ModerationModel]
    monthly_credits: int


TIER_CATALOG: Dict[Tier, TierPlan] = {
    Tier.FREE: TierPlan(
        tier=Tier.FREE,
        allowed_models=frozenset({ModerationModel.OBSERVER}),
        monthly_credits=10_000,
    ),
    Tier.STARTER: TierPlan(
        tier=Tier.STARTER,
        allowed_models=frozenset({ModerationModel.OBSERVER, ModerationModel.SENTINEL}),
        monthly_credits=100_000,
    ),
    Tier.PRO: TierPlan(
        tier=Tier.PRO,
        allowed_models=frozenset(ModerationModel.concrete_models()),
        monthly_credits=500_000,
    ),
    Tier.ENTERPRISE: TierPlan(
        tier=Tier.ENTERPRISE,
        allowed_models=frozenset(ModerationModel.concrete_models()),
        monthly_credits=2_500_000,
    ),
}


def get_plan(tier: Tier, config: Optional[AppConfig] = None) -> TierPlan:
    """Return the plan for ``tier`` with any configured credit override applied."""
    plan = TIER_CATALOG[tier]
    overrides = (config or app_config).tier_credit_overrides
    if tier in overrides:
        return TierPlan(tier=tier, allowed_models=plan.allowed_models, monthly_credits=overrides[tier])
    return plan


def allowed_models(tier: Tier) -> FrozenSet[ModerationModel]:
    return TIER_CATALOG[tier].allowed_models
