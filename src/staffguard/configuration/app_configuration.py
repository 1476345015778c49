from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional
import yaml

from staffguard.datatypes.discord_datatypes import ChannelID, UserID
from staffguard.datatypes.moderation_datatypes import LogCategory
from staffguard.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

# Environment variables that take precedence over the YAML file
ENV_OWNER_ID = "OWNER_ID"
ENV_HEAD_STAFF_IDS = "HEAD_STAFF_IDS"
ENV_STAFF_WHITELIST = "STAFF_WHITELIST"
ENV_LOG_CHANNELS = {
    LogCategory.SECURITY: "LOG_CHANNEL_ID",
    LogCategory.WARN: "WARN_CHANNEL_ID",
    LogCategory.BAN: "BAN_CHANNEL_ID",
}


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Process-wide settings, read once at startup and never mutated.

    Attributes:
        owner_id: The bot owner; ``None`` when unconfigured (nobody is owner).
        head_staff_ids: Users allowed to manage staff roles.
        staff_whitelist: Users treated as staff in every guild.
        log_channels: Destination channel per log category.
    """

    owner_id: Optional[UserID] = None
    head_staff_ids: FrozenSet[UserID] = frozenset()
    staff_whitelist: FrozenSet[UserID] = frozenset()
    log_channels: Mapping[LogCategory, ChannelID] | None = None

    def log_channel_for(self, category: LogCategory) -> Optional[ChannelID]:
        if not self.log_channels:
            return None
        return self.log_channels.get(category)


def parse_id_list(raw: Any, label: str) -> FrozenSet[UserID]:
    """Parse a YAML list or a comma separated string into user IDs.

    Blank entries are ignored; malformed ones are dropped with a warning.
    """
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        items: Iterable[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple, set)):
        items = raw
    else:
        items = [raw]

    parsed = set()
    for item in items:
        if isinstance(item, str) and not item.strip():
            continue
        try:
            parsed.add(UserID(item))
        except ValueError:
            logger.warning("[APP CONFIGURATION] Ignoring invalid id %r in %s", item, label)
    return frozenset(parsed)


def parse_optional_id(raw: Any, label: str, id_type=UserID):
    """Parse a single optional ID; empty or invalid values yield ``None``."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        return id_type(raw)
    except ValueError:
        logger.warning("[APP CONFIGURATION] Ignoring invalid id %r for %s", raw, label)
        return None


class AppConfig:
    """Loader around the YAML application configuration.

    ``./config/app_config.yml`` supplies the defaults and the environment
    variables listed in ``ENV_*`` override them, so deployments can keep ids
    out of the file entirely.
    """

    def __init__(self, config_path: Path = CONFIG_PATH, environ: Mapping[str, str] | None = None) -> None:
        self.config_path = config_path
        self.environ = os.environ if environ is None else environ
        self._data: Dict[str, Any] = {}

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            logger.warning("[APP CONFIGURATION] Config file %s not found; using environment only.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s must be a mapping, got %s", self.config_path, type(data).__name__)
            return {}
        return data

    def _env(self, name: str) -> Optional[str]:
        value = self.environ.get(name)
        return value if value else None

    # --------------------------
    # Public API
    # --------------------------
    @property
    def data(self) -> Dict[str, Any]:
        """Return the raw mapping loaded by the last call to :meth:`load`."""
        return self._data

    def load(self) -> BotSettings:
        """Read the file and environment and build an immutable :class:`BotSettings`."""
        self._data = self.load_from_disk()

        staff_section = self._data.get("staff", {})
        if not isinstance(staff_section, dict):
            staff_section = {}
        channels_section = self._data.get("log_channels", {})
        if not isinstance(channels_section, dict):
            channels_section = {}

        owner_raw = self._env(ENV_OWNER_ID) or staff_section.get("owner_id")
        head_raw = self._env(ENV_HEAD_STAFF_IDS) or staff_section.get("head_staff_ids")
        whitelist_raw = self._env(ENV_STAFF_WHITELIST) or staff_section.get("whitelist")

        log_channels: Dict[LogCategory, ChannelID] = {}
        for category, env_name in ENV_LOG_CHANNELS.items():
            raw = self._env(env_name) or channels_section.get(category.value)
            channel_id = parse_optional_id(raw, f"log_channels.{category.value}", ChannelID)
            if channel_id is not None:
                log_channels[category] = channel_id

        settings = BotSettings(
            owner_id=parse_optional_id(owner_raw, "owner_id"),
            head_staff_ids=parse_id_list(head_raw, "head_staff_ids"),
            staff_whitelist=parse_id_list(whitelist_raw, "whitelist"),
            log_channels=log_channels,
        )

        if settings.owner_id is None:
            logger.warning("[APP CONFIGURATION] No owner configured; the restore command is unavailable.")
        missing = [str(c) for c in LogCategory if c not in log_channels]
        if missing:
            logger.warning("[APP CONFIGURATION] No log channel configured for: %s", ", ".join(missing))
        logger.info(
            "[APP CONFIGURATION] Loaded settings: %d head staff, %d whitelisted staff, %d log channels",
            len(settings.head_staff_ids), len(settings.staff_whitelist), len(log_channels),
        )
        return settings
