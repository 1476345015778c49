"""
Pytest configuration and fixtures for StaffGuard tests.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from staffguard.configuration.app_configuration import BotSettings  # noqa: E402
from staffguard.datatypes.discord_datatypes import ChannelID, UserID  # noqa: E402
from staffguard.datatypes.moderation_datatypes import LogCategory  # noqa: E402
from staffguard.state.app_state import AppState  # noqa: E402
from staffguard.state.staff_directory import StaffDirectory  # noqa: E402

OWNER_ID = 1
HEAD_STAFF_ID = 2
WHITELISTED_ID = 3


@pytest.fixture
def settings():
    return BotSettings(
        owner_id=UserID(OWNER_ID),
        head_staff_ids=frozenset({UserID(HEAD_STAFF_ID)}),
        staff_whitelist=frozenset({UserID(WHITELISTED_ID)}),
        log_channels={
            LogCategory.SECURITY: ChannelID(501),
            LogCategory.WARN: ChannelID(502),
            LogCategory.BAN: ChannelID(503),
        },
    )


@pytest.fixture
def notifications():
    """Stands in for NotificationSink; every send succeeds."""
    return SimpleNamespace(
        security=AsyncMock(return_value=True),
        warn=AsyncMock(return_value=True),
        ban=AsyncMock(return_value=True),
    )


@pytest.fixture
def state(settings, notifications):
    return AppState(settings=settings, notifications=notifications, staff=StaffDirectory(settings))
