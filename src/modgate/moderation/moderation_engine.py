"""
Decision pipeline for one moderation event.

The engine wires the pure components together and performs no I/O:

1. ``plan``: scope check, model resolution and credit charge against one
   credit snapshot, producing the classifier request to send.
2. The caller sends the request, commits ``plan.projected_balance`` and
   receives a classifier response.
3. ``finalize``: interpret the response against the guild config.
4. If the decision has ``needs_context``, the caller gathers prior messages
   and calls ``plan_context`` then ``finalize`` once more. There is never a
   third pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from modgate.configuration.app_configuration import AppConfig
from modgate.datatypes.credit_datatypes import CreditState
from modgate.datatypes.enums import ModerationModel, Tier
from modgate.datatypes.guild_config import GuildModerationConfig
from modgate.datatypes.moderation_datatypes import ModerationDecision, ModerationRequest, ModerationResponse
from modgate.moderation import action_resolver, credit_ledger, model_resolver
from modgate.moderation.applicability import IdLike, in_scope
from modgate.util.logger import get_logger

logger = get_logger("moderation_engine")


@dataclass(frozen=True, slots=True)
class ModerationPlan:
    """What to run for one message, computed from a single credit snapshot.

    Attributes:
        in_scope: False when the message is not subject to moderation; every
            other field is then empty and nothing should be charged.
        model: Concrete model to classify with.
        cost: Credits the classifier call costs.
        projected_balance: Balance to commit once the call is made.
        request: Classifier request to send.
    """

    in_scope: bool
    model: Optional[ModerationModel] = None
    cost: int = 0
    projected_balance: int = 0
    request: Optional[ModerationRequest] = None

    @classmethod
    def skipped(cls, balance: int) -> "ModerationPlan":
        return cls(in_scope=False, projected_balance=balance)


class ModerationEngine:
    """Stateless facade over the applicability filter, resolver, ledger and action resolver.

    An instance holds only the application config used to look up tier plans,
    so one engine can serve any number of guilds concurrently.
    """

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config

    def plan(
        self,
        guild_config: GuildModerationConfig,
        channel_id: IdLike,
        author_role_ids: Iterable[IdLike],
        text: str,
        credit_state: CreditState,
        tier: Tier,
    ) -> ModerationPlan:
        """Decide whether and how to classify ``text``.

        Raises:
            InsufficientCredits: If the resolved model costs more than the balance.
        """
        if not in_scope(guild_config, channel_id, author_role_ids):
            return ModerationPlan.skipped(credit_state.remaining_credits)

        model = model_resolver.resolve_for_tier(guild_config.model, credit_state, tier, self.config)
        request = ModerationRequest(
            text=text,
            model=model,
            enabled_labels=guild_config.enabled_labels,
            include_context=False,
        )
        return self._charge(request, model, credit_state)

    def plan_context(
        self,
        first_plan: ModerationPlan,
        history: Sequence[str],
        guild_config: GuildModerationConfig,
        credit_state: CreditState,
    ) -> ModerationPlan:
        """Plan the context-aware second pass for a message whose decision needs context.

        Keeps the model of the first pass and prepends at most
        ``context_history_count`` of the most recent prior messages, oldest
        first. ``credit_state`` must be the snapshot after the first charge.

        Raises:
            ValueError: If ``first_plan`` was out of scope.
            InsufficientCredits: If the longer request is unaffordable.
        """
        if not first_plan.in_scope or first_plan.request is None:
            raise ValueError("Context pass requires an in-scope first plan")

        window = action_resolver.context_window(guild_config)
        prior = list(history)[-window:] if window > 0 else []
        text = "\n".join([*prior, first_plan.request.text])
        request = ModerationRequest(
            text=text,
            model=first_plan.model,
            enabled_labels=guild_config.enabled_labels,
            include_context=True,
        )
        logger.debug("[ENGINE] Context pass with %d prior messages", len(prior))
        return self._charge(request, first_plan.model, credit_state)

    def finalize(self, classification: ModerationResponse, guild_config: GuildModerationConfig) -> ModerationDecision:
        decision = action_resolver.decide(classification, guild_config)
        logger.debug(
            "[ENGINE] Decision flagged=%s labels=%s actions=%s needs_context=%s",
            decision.flagged,
            sorted(label.value for label in decision.labels),
            sorted(action.value for action in decision.actions),
            decision.needs_context,
        )
        return decision

    @staticmethod
    def _charge(request: ModerationRequest, model: ModerationModel, credit_state: CreditState) -> ModerationPlan:
        new_balance = credit_ledger.charge(credit_state, model, request.byte_length)
        return ModerationPlan(
            in_scope=True,
            model=model,
            cost=credit_state.remaining_credits - new_balance,
            projected_balance=new_balance,
            request=request,
        )
