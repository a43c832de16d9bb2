"""
Interpret a classifier response against a guild's configuration.

Only labels the guild enabled can flag a message; these are the active labels.
The configured action set is applied uniformly to a flagged message. When the
guild enabled context re-evaluation and the classifier reported ambiguity on
an active label, the decision asks the caller to classify again with prior
messages attached. The second pass is driven by the caller and comes back
through :func:`decide`.
"""

from __future__ import annotations

from modgate.datatypes.guild_config import GuildModerationConfig
from modgate.datatypes.moderation_datatypes import ModerationDecision, ModerationResponse
from modgate.util.logger import get_logger

logger = get_logger("action_resolver")


def decide(classification: ModerationResponse, config: GuildModerationConfig) -> ModerationDecision:
    """Build the decision for one classifier response.

    ``needs_context`` is ``None`` when the classifier did not report it.
    Otherwise it is True only if context is enabled for the guild, the
    classifier reported ambiguity, and the ambiguous labels (``context_labels``
    when given, else the classifier's labels) include at least one active label.
    """
    enabled = config.enabled_labels
    active_labels = frozenset(classification.labels) & enabled
    flagged = bool(active_labels)

    if classification.flagged and not flagged:
        logger.debug(
            "[ACTIONS] Classifier flagged %s but none are enabled, treating as clean",
            sorted(label.value for label in classification.labels),
        )

    context_labels = None
    if classification.context_labels is not None:
        context_labels = frozenset(classification.context_labels) & enabled

    needs_context = None
    if classification.needs_context is not None:
        ambiguous = context_labels if context_labels is not None else active_labels
        needs_context = bool(
            config.enable_context
            and classification.needs_context
            and not ambiguous.isdisjoint(active_labels)
        )

    return ModerationDecision(
        flagged=flagged,
        labels=active_labels,
        scores={label: score for label, score in classification.scores.items() if label in enabled},
        actions=frozenset(config.actions) if flagged else frozenset(),
        needs_context=needs_context,
        context_labels=context_labels,
    )


def context_window(config: GuildModerationConfig) -> int:
    """Number of prior messages to gather for a context re-evaluation (0 when disabled)."""
    return config.context_history_count if config.enable_context else 0
