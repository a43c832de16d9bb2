"""
Credit accounting for a single moderation call.

The ledger performs no I/O: it computes a cost and a new balance from a
snapshot. Committing the new balance atomically (a conditional decrement, or
a per-account lock) is the job of the store, see
modgate.repositories.credit_repo.
"""

from __future__ import annotations

from modgate.datatypes.credit_datatypes import CreditBalance, CreditState
from modgate.datatypes.enums import ModerationModel
from modgate.datatypes.errors import InsufficientCredits
from modgate.util.logger import get_logger

logger = get_logger("credit_ledger")


def cost(model: ModerationModel, byte_length: int) -> int:
    """Credits needed to classify ``byte_length`` bytes with ``model``.

    Raises:
        ValueError: If ``byte_length`` is negative.
        UnresolvedModelError: If ``model`` is ``AUTO``.
    """
    if byte_length < 0:
        raise ValueError(f"byte_length must be non-negative, got {byte_length}")
    return byte_length * model.credits_per_byte()


def can_afford(state: CreditState, model: ModerationModel, byte_length: int) -> bool:
    return cost(model, byte_length) <= state.remaining_credits


def charge(state: CreditState, model: ModerationModel, byte_length: int) -> int:
    """Return the balance left after charging for the call.

    ``state`` is not modified; the caller commits the returned balance.

    Raises:
        InsufficientCredits: If the call costs more than the remaining credits.
    """
    required = cost(model, byte_length)
    if required > state.remaining_credits:
        logger.info(
            "[LEDGER] Refused %s charge of %d credits (%d bytes), %d remaining",
            model, required, byte_length, state.remaining_credits,
        )
        raise InsufficientCredits(required, state.remaining_credits)

    new_balance = state.remaining_credits - required
    logger.debug("[LEDGER] Charged %d credits for %s, %d -> %d", required, model, state.remaining_credits, new_balance)
    return new_balance


def balance_summary(state: CreditState) -> CreditBalance:
    """Summarise a snapshot for display. Usage is a percentage rounded to two decimals."""
    used = state.used_credits
    usage = round(used * 100 / state.max_monthly_credits, 2) if state.max_monthly_credits > 0 else 0.0
    return CreditBalance(
        used_current_period=used,
        max_monthly_credits=state.max_monthly_credits,
        remaining_credits=state.remaining_credits,
        usage_percentage=usage,
        reset_date=state.reset_date,
    )
