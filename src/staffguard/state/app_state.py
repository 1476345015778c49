"""
Application state shared by every command handler and event listener.

One :class:`AppState` is built at startup and handed to each cog, instead of
module-level singletons, so tests can build isolated instances. Nothing here
is persisted: the stores vanish when the process exits.
"""

from dataclasses import dataclass, field

from staffguard.configuration.app_configuration import BotSettings
from staffguard.moderation.notification_sink import NotificationSink
from staffguard.moderation.restore_engine import RestoreEngine
from staffguard.state.action_log import ActionLog
from staffguard.state.channel_backup_store import ChannelBackupStore
from staffguard.state.keyed_locks import KeyedLocks
from staffguard.state.staff_directory import StaffDirectory
from staffguard.state.warning_store import WarningStore
from staffguard.util.logger import get_logger

logger = get_logger("app_state")


@dataclass
class AppState:
    settings: BotSettings
    notifications: NotificationSink
    staff: StaffDirectory
    warnings: WarningStore = field(default_factory=WarningStore)
    actions: ActionLog = field(default_factory=ActionLog)
    backups: ChannelBackupStore = field(default_factory=ChannelBackupStore)
    locks: KeyedLocks = field(default_factory=KeyedLocks)
    restore_engine: RestoreEngine = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.restore_engine is None:
            self.restore_engine = RestoreEngine(self.actions, self.backups)

    @classmethod
    def create(cls, bot, settings: BotSettings) -> "AppState":
        """Build a fresh state for ``bot`` with empty stores."""
        state = cls(
            settings=settings,
            notifications=NotificationSink(bot, settings),
            staff=StaffDirectory(settings),
        )
        logger.info("[APP STATE] Application state initialized")
        return state
