"""
Model selection under a credit budget.

Explicit model requests are echoed unchanged. ``AUTO`` requests go through a
weighted allocation over the ``n`` allowed models, weighted ``n, n-1, ..., 1``
from best to cheapest (total weight ``n * (n + 1) // 2``). Walking the ranks
best-first accumulates the weights already passed into a ladder of integer
thresholds

    cumulative * max_credits // total_weight        (0, then rising)

and the ladder is assigned from the cheapest model upwards: the cheapest model
needs any positive balance, the best model needs the highest threshold. Better
models are therefore reachable only while a proportionally larger share of the
budget remains, and spending degrades gracefully as the month's budget is
consumed. All arithmetic is integer.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from modgate.configuration.app_configuration import AppConfig
from modgate.configuration.tier_catalog import get_plan
from modgate.datatypes.credit_datatypes import CreditState
from modgate.datatypes.enums import ModerationModel, Tier
from modgate.util.logger import get_logger

logger = get_logger("model_resolver")

FALLBACK_MODEL = ModerationModel.OBSERVER


def _ranked(allowed_models: Iterable[ModerationModel]) -> List[ModerationModel]:
    """Concrete models, deduplicated, most expensive first."""
    concrete = [model for model in dict.fromkeys(allowed_models) if not model.is_auto]
    return sorted(concrete, key=lambda model: model.credits_per_byte(), reverse=True)


def auto_thresholds(max_credits: int, allowed_models: Iterable[ModerationModel]) -> List[Tuple[ModerationModel, int]]:
    """Return ``(model, threshold)`` pairs for an ``AUTO`` request, best model first.

    A model is usable while the remaining balance is strictly above its
    threshold. The cheapest model's threshold is always 0.
    """
    ranked = _ranked(allowed_models)
    n = len(ranked)
    total_weight = n * (n + 1) // 2

    ladder: List[int] = []
    cumulative = 0
    for rank in range(n):
        ladder.append(cumulative * max_credits // total_weight if max_credits > 0 else 0)
        cumulative += n - rank

    return [(model, ladder[n - 1 - rank]) for rank, model in enumerate(ranked)]


def resolve_auto(
    remaining_credits: int,
    max_credits: int,
    allowed_models: Iterable[ModerationModel],
) -> ModerationModel:
    """Pick a concrete model for an ``AUTO`` request.

    Falls back to ``OBSERVER`` when no concrete model is allowed and to the
    cheapest allowed model when the balance clears no threshold.
    """
    thresholds = auto_thresholds(max_credits, allowed_models)
    if not thresholds:
        return FALLBACK_MODEL

    for model, threshold in thresholds:
        if remaining_credits > threshold:
            return model

    return thresholds[-1][0]


def resolve(
    model_request: ModerationModel,
    remaining_credits: int,
    max_credits: int,
    allowed_models: Iterable[ModerationModel],
) -> ModerationModel:
    """Return the concrete model to run for ``model_request``.

    Non-``AUTO`` requests are returned unchanged, with no credit awareness.
    """
    if not model_request.is_auto:
        return model_request

    model = resolve_auto(remaining_credits, max_credits, allowed_models)
    logger.debug(
        "[RESOLVER] Auto resolved to %s (remaining=%d, max=%d)",
        model, remaining_credits, max_credits,
    )
    return model


def clamp_to_tier(model: ModerationModel, allowed_models: Iterable[ModerationModel]) -> ModerationModel:
    """Bound a configured model by the models a tier allows.

    ``AUTO`` passes through; the resolver already honours the allowed set. A
    concrete model outside the set is lowered to the most capable allowed model
    that costs no more than it, or to the cheapest allowed model when every
    allowed model costs more.
    """
    if model.is_auto:
        return model

    ranked = _ranked(allowed_models)
    if model in ranked:
        return model
    if not ranked:
        logger.warning("[RESOLVER] No concrete model allowed, using %s instead of %s", FALLBACK_MODEL, model)
        return FALLBACK_MODEL

    cost = model.credits_per_byte()
    clamped = next((m for m in ranked if m.credits_per_byte() <= cost), ranked[-1])
    logger.warning("[RESOLVER] Model %s not allowed by tier, clamped to %s", model, clamped)
    return clamped


def resolve_for_tier(
    config_model: ModerationModel,
    credit_state: CreditState,
    tier: Tier,
    config: Optional[AppConfig] = None,
) -> ModerationModel:
    """Clamp the guild's configured model to ``tier`` and resolve it against one credit snapshot.

    The account's own ``max_monthly_credits`` is the budget when set; otherwise
    the tier's catalog cap is used.
    """
    plan = get_plan(tier, config)
    requested = clamp_to_tier(config_model, plan.allowed_models)
    max_credits = credit_state.max_monthly_credits or plan.monthly_credits
    return resolve(requested, credit_state.remaining_credits, max_credits, plan.allowed_models)
