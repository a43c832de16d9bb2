"""Tests for the canonical wire enums."""

import pytest

from modgate.datatypes.enums import (
    BillingCycle,
    ModerationAction,
    ModerationLabel,
    ModerationModel,
    RoleFilterMode,
    Tier,
)
from modgate.datatypes.errors import ModgateError, UnknownVariant, UnresolvedModelError

ALL_ENUMS = [ModerationLabel, ModerationModel, ModerationAction, RoleFilterMode, Tier, BillingCycle]


class TestWireStrings:
    """Every variant formats to a wire string that parses back to itself."""

    @pytest.mark.parametrize("enum_cls", ALL_ENUMS, ids=lambda cls: cls.__name__)
    def test_every_variant_round_trips(self, enum_cls):
        for variant in enum_cls:
            assert enum_cls.parse(variant.to_wire_string()) is variant

    def test_label_codes(self):
        assert [label.to_wire_string() for label in ModerationLabel.all_labels()] == [
            "S", "H", "V", "HR", "SH", "S3", "SP", "SE", "T",
        ]

    def test_str_is_wire_string(self):
        assert str(ModerationModel.SENTINEL) == "sentinel"
        assert str(ModerationLabel.HR) == "HR"

    def test_parse_accepts_existing_variant(self):
        assert ModerationAction.parse(ModerationAction.WARN) is ModerationAction.WARN


class TestCaseSensitivity:
    def test_models_parse_case_insensitively(self):
        assert ModerationModel.parse("SENTINEL") is ModerationModel.SENTINEL
        assert ModerationModel.parse("Auto") is ModerationModel.AUTO
        assert ModerationModel.parse("sentinel").to_wire_string() == "sentinel"

    def test_tiers_and_cycles_parse_case_insensitively(self):
        assert Tier.parse("PRO") is Tier.PRO
        assert BillingCycle.parse("Yearly") is BillingCycle.YEARLY

    def test_label_codes_are_exact_case(self):
        with pytest.raises(UnknownVariant):
            ModerationLabel.parse("hr")

    def test_actions_and_filter_modes_are_exact_case(self):
        with pytest.raises(UnknownVariant):
            ModerationAction.parse("Delete")
        with pytest.raises(UnknownVariant):
            RoleFilterMode.parse("INCLUDE")


class TestUnknownVariant:
    def test_unknown_string(self):
        with pytest.raises(UnknownVariant) as excinfo:
            ModerationModel.parse("overseer")

        assert excinfo.value.enum_name == "ModerationModel"
        assert excinfo.value.raw == "overseer"
        assert "overseer" in str(excinfo.value)

    def test_non_string_input(self):
        with pytest.raises(UnknownVariant):
            ModerationLabel.parse(3)

    def test_is_a_value_error_and_modgate_error(self):
        with pytest.raises(ValueError):
            Tier.parse("platinum")
        with pytest.raises(ModgateError):
            Tier.parse("platinum")


class TestModerationLabel:
    def test_default_labels_exclude_toxicity(self):
        defaults = ModerationLabel.default_labels()

        assert ModerationLabel.T not in defaults
        assert len(defaults) == 8
        assert set(defaults) | {ModerationLabel.T} == set(ModerationLabel.all_labels())

    def test_display_names(self):
        assert ModerationLabel.S.to_display_name() == "Sexual"
        assert ModerationLabel.HR.to_display_name() == "Hate/Racism"
        assert ModerationLabel.S3.to_display_name() == "Sexual (Severe/Minors)"
        assert ModerationLabel.SE.to_display_name() == "Sensitive Content"
        assert ModerationLabel.T.to_display_name() == "Toxicity"


class TestModerationModel:
    def test_costs_are_strictly_increasing(self):
        costs = [model.credits_per_byte() for model in ModerationModel.concrete_models()]

        assert costs == [1, 3, 9]
        assert costs == sorted(costs)
        assert len(set(costs)) == len(costs)

    def test_auto_has_no_cost(self):
        with pytest.raises(UnresolvedModelError):
            ModerationModel.AUTO.credits_per_byte()

    def test_unresolved_model_is_not_a_recoverable_error(self):
        assert not issubclass(UnresolvedModelError, ModgateError)

    def test_concrete_models_exclude_auto(self):
        assert ModerationModel.AUTO in ModerationModel.all_models()
        assert ModerationModel.AUTO not in ModerationModel.concrete_models()
        assert ModerationModel.AUTO.is_auto
        assert not ModerationModel.ARBITER.is_auto

    def test_display_names(self):
        assert ModerationModel.AUTO.to_display_name() == "Auto"
        assert ModerationModel.ARBITER.to_display_name() == "Arbiter"


class TestTier:
    @pytest.mark.parametrize("tier", list(Tier))
    def test_every_tier_is_described(self, tier):
        assert tier.get_description()
        assert len(tier.get_features()) > 0
        assert tier.to_display_name() == tier.value.capitalize()
