"""Tests for credit-aware model resolution."""

import pytest

from modgate.configuration.app_configuration import AppConfig
from modgate.datatypes.credit_datatypes import CreditState
from modgate.datatypes.enums import ModerationModel, Tier
from modgate.moderation.model_resolver import (
    FALLBACK_MODEL,
    auto_thresholds,
    clamp_to_tier,
    resolve,
    resolve_auto,
    resolve_for_tier,
)

OBSERVER = ModerationModel.OBSERVER
SENTINEL = ModerationModel.SENTINEL
ARBITER = ModerationModel.ARBITER
AUTO = ModerationModel.AUTO
ALL = [OBSERVER, SENTINEL, ARBITER]


@pytest.fixture()
def empty_config(tmp_path):
    return AppConfig(tmp_path / "missing.yml")


class TestAutoThresholds:
    def test_three_model_ladder(self):
        assert auto_thresholds(1200, ALL) == [(ARBITER, 1000), (SENTINEL, 600), (OBSERVER, 0)]

    def test_order_of_allowed_models_does_not_matter(self):
        assert auto_thresholds(1200, [SENTINEL, OBSERVER, ARBITER]) == auto_thresholds(1200, ALL)

    def test_two_model_ladder(self):
        # weights 2, 1 -> total 3
        assert auto_thresholds(900, [OBSERVER, SENTINEL]) == [(SENTINEL, 600), (OBSERVER, 0)]

    def test_single_model(self):
        assert auto_thresholds(1200, [SENTINEL]) == [(SENTINEL, 0)]

    def test_auto_and_duplicates_are_ignored(self):
        assert auto_thresholds(1200, [AUTO, OBSERVER, OBSERVER]) == [(OBSERVER, 0)]

    def test_thresholds_use_integer_division(self):
        thresholds = dict(auto_thresholds(1000, ALL))

        assert thresholds == {ARBITER: 833, SENTINEL: 500, OBSERVER: 0}

    def test_zero_budget(self):
        assert auto_thresholds(0, ALL) == [(ARBITER, 0), (SENTINEL, 0), (OBSERVER, 0)]


class TestResolveAuto:
    @pytest.mark.parametrize(
        "remaining, expected",
        [
            (1500, ARBITER),
            (1200, ARBITER),
            (1001, ARBITER),
            (1000, SENTINEL),
            (800, SENTINEL),
            (601, SENTINEL),
            (600, OBSERVER),
            (500, OBSERVER),
            (1, OBSERVER),
            (0, OBSERVER),
        ],
    )
    def test_budget_of_1200(self, remaining, expected):
        assert resolve_auto(remaining, 1200, ALL) is expected

    def test_no_allowed_models_falls_back_to_observer(self):
        assert resolve_auto(10_000, 10_000, []) is FALLBACK_MODEL is OBSERVER

    def test_only_auto_allowed_falls_back_to_observer(self):
        assert resolve_auto(10_000, 10_000, [AUTO]) is OBSERVER

    def test_cheapest_allowed_model_when_nothing_clears(self):
        assert resolve_auto(0, 1200, [SENTINEL, ARBITER]) is SENTINEL

    def test_zero_budget_with_credits_left(self):
        assert resolve_auto(50, 0, ALL) is ARBITER

    def test_result_is_always_allowed(self):
        allowed = [OBSERVER, SENTINEL]
        for remaining in range(0, 2001, 50):
            assert resolve_auto(remaining, 1200, allowed) in allowed

    def test_more_credits_never_pick_a_cheaper_model(self):
        previous_cost = 0
        for remaining in range(0, 1601):
            cost = resolve_auto(remaining, 1200, ALL).credits_per_byte()
            assert cost >= previous_cost
            previous_cost = cost


class TestResolve:
    @pytest.mark.parametrize("model", ALL)
    def test_explicit_request_is_echoed(self, model):
        assert resolve(model, 0, 1200, []) is model
        assert resolve(model, 10**9, 1200, ALL) is model

    def test_auto_is_resolved(self):
        assert resolve(AUTO, 1500, 1200, ALL) is ARBITER


class TestClampToTier:
    def test_allowed_model_unchanged(self):
        assert clamp_to_tier(SENTINEL, [OBSERVER, SENTINEL]) is SENTINEL

    def test_auto_passes_through(self):
        assert clamp_to_tier(AUTO, [OBSERVER]) is AUTO

    def test_disallowed_model_lowered_to_best_affordable(self):
        assert clamp_to_tier(ARBITER, [OBSERVER, SENTINEL]) is SENTINEL
        assert clamp_to_tier(ARBITER, [OBSERVER]) is OBSERVER

    def test_cheapest_allowed_when_all_cost_more(self):
        assert clamp_to_tier(OBSERVER, [SENTINEL, ARBITER]) is SENTINEL

    def test_nothing_allowed(self):
        assert clamp_to_tier(ARBITER, []) is OBSERVER


class TestResolveForTier:
    def test_free_tier_never_exceeds_observer(self, empty_config):
        state = CreditState(remaining_credits=10_000, max_monthly_credits=10_000)

        assert resolve_for_tier(ARBITER, state, Tier.FREE, empty_config) is OBSERVER
        assert resolve_for_tier(AUTO, state, Tier.FREE, empty_config) is OBSERVER

    def test_auto_uses_account_cap(self, empty_config):
        state = CreditState(remaining_credits=1500, max_monthly_credits=1200)

        assert resolve_for_tier(AUTO, state, Tier.PRO, empty_config) is ARBITER

    def test_auto_falls_back_to_tier_cap(self, empty_config):
        # Pro cap is 500,000 -> Arbiter above 416,666, Sentinel above 250,000
        state = CreditState(remaining_credits=300_000, max_monthly_credits=0)

        assert resolve_for_tier(AUTO, state, Tier.PRO, empty_config) is SENTINEL

    def test_explicit_allowed_model_ignores_balance(self, empty_config):
        state = CreditState(remaining_credits=0, max_monthly_credits=100_000)

        assert resolve_for_tier(SENTINEL, state, Tier.STARTER, empty_config) is SENTINEL
