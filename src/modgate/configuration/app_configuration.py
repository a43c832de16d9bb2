from __future__ import annotations
from pathlib import Path
import fcntl
import os
from typing import Any, Dict
import yaml

from modgate.datatypes.enums import Tier
from modgate.datatypes.errors import UnknownVariant
from modgate.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path(os.environ.get("MODGATE_CONFIG", "./config/app_config.yml")).resolve()
DEFAULT_DATABASE_PATH = Path("./data/modgate.db")


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` (or the file
    named by ``MODGATE_CONFIG``) and exposes typed accessors for the settings
    the decision core consults. fcntl shared locks make reads safe while another
    process rewrites the file.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.warning("[APP CONFIGURATION] Config file %s not found, using defaults.", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.error("[APP CONFIGURATION] Config %s is not a mapping, ignoring it.", self.config_path)
            return {}
        return data

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the cached configuration mapping. Callers should not mutate it."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def default_tier(self) -> Tier:
        """Tier assumed for accounts whose subscription is unknown. Defaults to ``free``."""
        raw = self._data.get("default_tier", Tier.FREE.value)
        try:
            return Tier.parse(raw)
        except UnknownVariant:
            logger.warning("[APP CONFIGURATION] Unknown default_tier %r, falling back to free", raw)
            return Tier.FREE

    @property
    def tier_credit_overrides(self) -> Dict[Tier, int]:
        """Monthly credit caps overriding the static tier catalog.

        Read from ``tiers.<tier>.monthly_credits``. Unknown tiers and
        non-integer or negative values are skipped with a warning.
        """
        tiers = self._data.get("tiers", {})
        if not isinstance(tiers, dict):
            return {}

        overrides: Dict[Tier, int] = {}
        for raw_tier, settings in tiers.items():
            try:
                tier = Tier.parse(raw_tier)
            except UnknownVariant:
                logger.warning("[APP CONFIGURATION] Ignoring unknown tier %r", raw_tier)
                continue
            if not isinstance(settings, dict) or "monthly_credits" not in settings:
                continue
            value = settings["monthly_credits"]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                logger.warning("[APP CONFIGURATION] Ignoring invalid monthly_credits %r for tier %s", value, tier)
                continue
            overrides[tier] = value
        return overrides

    @property
    def database_path(self) -> Path:
        """Path of the SQLite file used by the reference store adapter."""
        database = self._data.get("database", {})
        if isinstance(database, dict) and database.get("path"):
            return Path(str(database["path"])).resolve()
        return DEFAULT_DATABASE_PATH.resolve()


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
