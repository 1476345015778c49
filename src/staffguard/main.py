"""
StaffGuard Discord Moderation Bot
=================================

A Discord bot giving a server's staff slash commands to ban, kick, mute, warn
and unban members, logging membership and role changes to a security channel,
and keeping channel backups so deleted channels and a rogue staff member's
actions can be rolled back.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. STAFFGUARD_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("STAFFGUARD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()

import asyncio
import discord
from dotenv import load_dotenv

from staffguard.bot.command_dispatcher import CommandDispatcher
from staffguard.configuration.app_configuration import AppConfig, BotSettings
from staffguard.state.app_state import AppState
from staffguard.util.logger import get_logger, handle_exception


logger = get_logger("main")

TOKEN_ENV_VARS = ("DISCORD_BOT_TOKEN", "BOT_TOKEN")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Returns
    -------
    str
        Discord bot token extracted from the loaded environment.

    Raises
    ------
    SystemExit
        If no token variable is set.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    for name in TOKEN_ENV_VARS:
        token = os.getenv(name)
        if token:
            return token
    logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
    sys.exit(1)


def load_settings() -> BotSettings:
    """Read the YAML configuration (with environment overrides) once at startup."""
    return AppConfig(BASE_DIR / "config" / "app_config.yml").load()


def build_intents() -> discord.Intents:
    """Construct the Discord intents required by the bot.

    Returns
    -------
    discord.Intents
        Intents enabling guild and member events.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    return intents


def load_cogs(discord_bot_instance: discord.Bot, state: AppState) -> CommandDispatcher:
    """Register all cogs with the bot, sharing one dispatcher between them.

    Parameters
    ----------
    discord_bot_instance:
        Py-Cord bot object that should receive the cogs.
    state:
        Application state handed to the dispatcher and listeners.
    """
    from staffguard.bot.cogs import events_listener, moderation_cmds, staff_cmds

    dispatcher = CommandDispatcher(state)
    events_listener.setup(discord_bot_instance, state)
    staff_cmds.setup(discord_bot_instance, dispatcher)
    moderation_cmds.setup(discord_bot_instance, dispatcher)

    logger.info("All cogs loaded successfully.")
    return dispatcher


def create_bot(settings: BotSettings) -> discord.Bot:
    """Instantiate the Discord bot, its application state, and its cogs."""
    bot = discord.Bot(intents=build_intents())
    state = AppState.create(bot, settings)
    bot.app_state = state
    load_cogs(bot, state)
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection.

    Parameters
    ----------
    bot:
        Discord client to start.
    token:
        Authentication token used to connect to Discord.
    """
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None = None) -> None:
    """Close the Discord connection if it is still open."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing the Discord client: %s", exc)
    logger.info("Shutdown complete. In-memory moderation state has been discarded.")


async def async_main() -> int:
    """Bootstrap the bot and run it until disconnect, returning an exit code.

    Returns
    -------
    int
        Process exit code reflecting success or failure.
    """
    token = load_environment()
    settings = load_settings()

    try:
        bot = create_bot(settings)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    exit_code = 0
    try:
        await start_bot(bot, token)
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the bot token: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot)

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    logger.info("Starting StaffGuard…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        if code is None:
            return 1
        try:
            return int(code)
        except (ValueError, TypeError):
            logger.warning("SystemExit.code is not an int (%r); defaulting to 1", code)
            return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
