from pathlib import Path

import pytest
import yaml

from modgate.configuration.app_configuration import DEFAULT_DATABASE_PATH, AppConfig
from modgate.datatypes.enums import Tier


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "app_config.yml"


def test_app_config_reload_parses_yaml(config_path: Path) -> None:
    config_payload = {
        "default_tier": "Starter",
        "tiers": {
            "free": {"monthly_credits": 20000},
            "pro": {"monthly_credits": 750000},
        },
        "database": {"path": str(config_path.parent / "store.db")},
    }
    config_path.write_text(yaml.safe_dump(config_payload), encoding="utf-8")

    config = AppConfig(config_path)

    assert config.get("default_tier") == "Starter"
    assert config.default_tier is Tier.STARTER
    assert config.tier_credit_overrides == {Tier.FREE: 20000, Tier.PRO: 750000}
    assert config.database_path == (config_path.parent / "store.db").resolve()


def test_app_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    missing_path = tmp_path / "does_not_exist.yml"

    config = AppConfig(missing_path)

    assert config.data == {}
    assert config.get("anything", "fallback") == "fallback"
    assert config.default_tier is Tier.FREE
    assert config.tier_credit_overrides == {}
    assert config.database_path == DEFAULT_DATABASE_PATH.resolve()


def test_app_config_invalid_yaml_returns_defaults(config_path: Path) -> None:
    config_path.write_text("tiers: [unclosed", encoding="utf-8")

    config = AppConfig(config_path)

    assert config.data == {}


def test_app_config_non_mapping_is_ignored(config_path: Path) -> None:
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    assert AppConfig(config_path).data == {}


def test_app_config_skips_bad_overrides(config_path: Path) -> None:
    config_path.write_text(
        yaml.safe_dump(
            {
                "default_tier": "platinum",
                "tiers": {
                    "platinum": {"monthly_credits": 1},
                    "free": {"monthly_credits": -5},
                    "starter": {"monthly_credits": "lots"},
                    "pro": "not a mapping",
                    "enterprise": {"monthly_credits": 3000000},
                },
            }
        ),
        encoding="utf-8",
    )

    config = AppConfig(config_path)

    assert config.default_tier is Tier.FREE
    assert config.tier_credit_overrides == {Tier.ENTERPRISE: 3000000}


def test_app_config_reload_picks_up_changes(config_path: Path) -> None:
    config_path.write_text("default_tier: free\n", encoding="utf-8")
    config = AppConfig(config_path)
    assert config.default_tier is Tier.FREE

    config_path.write_text("default_tier: pro\n", encoding="utf-8")
    reloaded = config.reload()

    assert reloaded == {"default_tier": "pro"}
    assert config.default_tier is Tier.PRO
