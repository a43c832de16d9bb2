"""Tests for turning classifier responses into moderation decisions."""

from modgate.datatypes.enums import ModerationAction, ModerationLabel
from modgate.datatypes.guild_config import DEFAULT_GUILD_CONFIG, GuildModerationConfig
from modgate.datatypes.moderation_datatypes import ModerationResponse
from modgate.moderation.action_resolver import context_window, decide

S = ModerationLabel.S
H = ModerationLabel.H
V = ModerationLabel.V
T = ModerationLabel.T
SP = ModerationLabel.SP


class TestDecide:
    def test_clean_response(self):
        decision = decide(ModerationResponse(flagged=False), DEFAULT_GUILD_CONFIG)

        assert decision.flagged is False
        assert decision.labels == frozenset()
        assert decision.actions == frozenset()

    def test_enabled_label_flags_with_configured_actions(self):
        config = DEFAULT_GUILD_CONFIG.with_overrides(
            actions=frozenset({ModerationAction.DELETE, ModerationAction.WARN})
        )
        response = ModerationResponse(flagged=True, labels=frozenset({H}), scores={H: 0.91})

        decision = decide(response, config)

        assert decision.flagged is True
        assert decision.labels == frozenset({H})
        assert decision.actions == frozenset({ModerationAction.DELETE, ModerationAction.WARN})
        assert decision.scores == {H: 0.91}

    def test_disabled_labels_are_ignored(self):
        # T is off by default
        response = ModerationResponse(flagged=True, labels=frozenset({T}), scores={T: 0.99, S: 0.1})

        decision = decide(response, DEFAULT_GUILD_CONFIG)

        assert decision.flagged is False
        assert decision.actions == frozenset()
        assert decision.scores == {S: 0.1}

    def test_labels_are_intersected_with_enabled_set(self):
        config = DEFAULT_GUILD_CONFIG.with_overrides(enabled_labels=frozenset({S, V}))
        response = ModerationResponse(flagged=True, labels=frozenset({S, H}))

        decision = decide(response, config)

        assert decision.labels == frozenset({S})

    def test_no_enabled_labels_never_flags(self):
        config = DEFAULT_GUILD_CONFIG.with_overrides(enabled_labels=frozenset())
        response = ModerationResponse(flagged=True, labels=frozenset(ModerationLabel.all_labels()))

        assert decide(response, config).flagged is False

    def test_flagged_with_empty_action_set(self):
        config = DEFAULT_GUILD_CONFIG.with_overrides(actions=frozenset())
        response = ModerationResponse(flagged=True, labels=frozenset({S}))

        decision = decide(response, config)

        assert decision.flagged is True
        assert decision.actions == frozenset()

    def test_classifier_verdict_is_recomputed(self):
        response = ModerationResponse(flagged=False, labels=frozenset({S}))

        assert decide(response, DEFAULT_GUILD_CONFIG).flagged is True

    def test_end_to_end_scenario(self):
        config = GuildModerationConfig.from_dict(
            {
                "is_active": True,
                "moderate_all_channels": True,
                "enabled_labels": ["S", "V"],
                "actions": ["delete"],
            }
        )
        response = ModerationResponse(flagged=True, labels=[V, SP], scores={V: 0.9, SP: 0.4})

        decision = decide(response, config)

        assert decision.flagged is True
        assert decision.labels == frozenset({V})
        assert decision.actions == frozenset({ModerationAction.DELETE})
        assert decision.scores == {V: 0.9}

    def test_list_valued_labels_are_accepted(self):
        response = ModerationResponse(
            flagged=True, labels=[V, SP], needs_context=True, context_labels=[V]
        )

        decision = decide(response, DEFAULT_GUILD_CONFIG.with_overrides(enable_context=True))

        assert decision.labels == frozenset({V, SP})
        assert decision.context_labels == frozenset({V})
        assert decision.needs_context is True


class TestNeedsContext:
    def _config(self, **overrides) -> GuildModerationConfig:
        return DEFAULT_GUILD_CONFIG.with_overrides(enable_context=True, **overrides)

    def test_unreported_signal_stays_unreported(self):
        decision = decide(ModerationResponse(flagged=False), self._config())

        assert decision.needs_context is None
        assert decision.context_labels is None

    def test_ambiguous_active_label_requests_context(self):
        response = ModerationResponse(
            flagged=True, labels=frozenset({H}), needs_context=True, context_labels=frozenset({H})
        )

        decision = decide(response, self._config())

        assert decision.needs_context is True
        assert decision.context_labels == frozenset({H})

    def test_context_disabled_suppresses_request(self):
        response = ModerationResponse(
            flagged=True, labels=frozenset({H}), needs_context=True, context_labels=frozenset({H})
        )

        decision = decide(response, DEFAULT_GUILD_CONFIG)

        assert decision.needs_context is False

    def test_ambiguity_on_enabled_but_inactive_label_is_ignored(self):
        # H is enabled but the classifier did not report it over threshold
        response = ModerationResponse(
            flagged=True, labels=frozenset({V}), needs_context=True, context_labels=frozenset({H})
        )

        decision = decide(response, self._config())

        assert decision.needs_context is False
        assert decision.context_labels == frozenset({H})

    def test_ambiguity_on_disabled_label_is_ignored(self):
        response = ModerationResponse(flagged=False, needs_context=True, context_labels=frozenset({T}))

        decision = decide(response, self._config())

        assert decision.needs_context is False
        assert decision.context_labels == frozenset()

    def test_falls_back_to_labels_without_context_labels(self):
        response = ModerationResponse(flagged=True, labels=frozenset({V}), needs_context=True)

        assert decide(response, self._config()).needs_context is True

    def test_classifier_not_ambiguous(self):
        response = ModerationResponse(flagged=True, labels=frozenset({V}), needs_context=False)

        assert decide(response, self._config()).needs_context is False


class TestContextWindow:
    def test_disabled(self):
        assert context_window(DEFAULT_GUILD_CONFIG) == 0

    def test_enabled(self):
        config = DEFAULT_GUILD_CONFIG.with_overrides(enable_context=True, context_history_count=3)

        assert context_window(config) == 3
