from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import fcntl
from typing import Any, Dict, Tuple
import yaml

from namewarden.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("config/app_config.yml")
DEFAULT_DB_PATH = Path("./data/app.db")

PROTECTED_ROLE_SOURCES = ("store", "fixed")
DEFAULT_ESCALATION_CONTACT_IDS: Tuple[int, ...] = (198981821147381760, 197852493537869824)
DEFAULT_CONFIGURATION_TIMEOUT_MINUTES = 60.0


def _id_tuple(value: Any, key: str) -> Tuple[int, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        logger.warning("[APP CONFIGURATION] spam_filter.%s should be a list, got %r", key, value)
        return ()
    ids = []
    for item in value:
        try:
            ids.append(int(item))
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Ignoring non-numeric id %r in spam_filter.%s", item, key)
    return tuple(ids)


@dataclass(frozen=True, slots=True)
class SpamFilterSettings:
    """Immutable view of the ``spam_filter`` section of the config file.

    Attributes:
        enabled_guild_ids: Guilds the filter runs in; empty means every guild
        protected_role_source: ``store`` (roles configured via /spam-filter) or ``fixed``
        fixed_protected_role_ids: High-ranking roles used by the ``fixed`` source
        exempt_role_ids: Roles that always skip the filter, on top of the stored role allowlist
        escalation_contact_ids: The two users named in the auto-ban DM
        configuration_timeout_minutes: How long the config prompt waits for a reaction
    """
    enabled_guild_ids: Tuple[int, ...] = ()
    protected_role_source: str = "store"
    fixed_protected_role_ids: Tuple[int, ...] = ()
    exempt_role_ids: Tuple[int, ...] = ()
    escalation_contact_ids: Tuple[int, ...] = DEFAULT_ESCALATION_CONTACT_IDS
    configuration_timeout_minutes: float = DEFAULT_CONFIGURATION_TIMEOUT_MINUTES

    @property
    def configuration_timeout_seconds(self) -> float:
        return self.configuration_timeout_minutes * 60

    def is_enabled_for(self, guild_id: int) -> bool:
        return not self.enabled_guild_ids or guild_id in self.enabled_guild_ids

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "SpamFilterSettings":
        source = str(data.get("protected_role_source", "store")).lower()
        if source not in PROTECTED_ROLE_SOURCES:
            logger.warning(
                "[APP CONFIGURATION] Unknown protected_role_source %r, falling back to 'store'", source
            )
            source = "store"

        contacts = _id_tuple(data.get("escalation_contact_ids"), "escalation_contact_ids")

        try:
            timeout = float(data.get("configuration_timeout_minutes", DEFAULT_CONFIGURATION_TIMEOUT_MINUTES))
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid configuration_timeout_minutes, using default")
            timeout = DEFAULT_CONFIGURATION_TIMEOUT_MINUTES
        if timeout <= 0:
            timeout = DEFAULT_CONFIGURATION_TIMEOUT_MINUTES

        return cls(
            enabled_guild_ids=_id_tuple(data.get("enabled_guild_ids"), "enabled_guild_ids"),
            protected_role_source=source,
            fixed_protected_role_ids=_id_tuple(data.get("fixed_protected_role_ids"), "fixed_protected_role_ids"),
            exempt_role_ids=_id_tuple(data.get("exempt_role_ids"), "exempt_role_ids"),
            escalation_contact_ids=contacts or DEFAULT_ESCALATION_CONTACT_IDS,
            configuration_timeout_minutes=timeout,
        )


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches contents of ``./config/app_config.yml`` and exposes
    dictionary-like access helpers plus typed shortcuts for the database path
    and the spam filter settings. Uses fcntl file locks for safe concurrent
    access across processes.
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
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
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
        """Return the current cached configuration mapping.

        The returned dict is the internal cache (shallow reference). Callers
        should not mutate it; use get(...) or the provided properties instead.
        """
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def database_path(self) -> Path:
        """Return the SQLite file used by the Config Store."""
        database = self._data.get("database", {})
        if isinstance(database, dict) and database.get("path"):
            return Path(str(database["path"])).resolve()
        return DEFAULT_DB_PATH.resolve()

    @property
    def spam_filter(self) -> SpamFilterSettings:
        """Return the spam filter settings, defaults filled in."""
        section = self._data.get("spam_filter", {})
        if not isinstance(section, dict):
            section = {}
        return SpamFilterSettings.from_mapping(section)


