"""
Namewarden
==========

A Discord bot that auto-bans members who join with, or change their nickname
to, a look-alike of a high-ranking member's name.
"""

import os
import sys
from pathlib import Path

def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. NAMEWARDEN_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("NAMEWARDEN_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]

BASE_DIR = resolve_base_dir()

import asyncio
import discord
from dotenv import load_dotenv

from namewarden.configuration.app_configuration import CONFIG_PATH, AppConfig
from namewarden.database.db_connection import ConnectionManager, db_connection
from namewarden.database.db_schema import SchemaManager
from namewarden.spam_filter.services import SpamFilterServices, build_spam_filter_services
from namewarden.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Construct the Discord intents required by the spam filter.

    Members are needed for join/update/unban events and for listing the
    holders of protected roles; DM reactions drive the configuration prompt.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    intents.bans = True
    intents.dm_reactions = True
    return intents


def load_cogs(discord_bot_instance: discord.Bot, services: SpamFilterServices) -> None:
    """Register all operational cogs with the provided Discord bot instance."""
    from namewarden.bot.cogs import events_listener, spam_filter_cmds

    events_listener.setup(discord_bot_instance, services)
    spam_filter_cmds.setup(discord_bot_instance, services)

    logger.info("All cogs loaded successfully.")


def create_bot(services: SpamFilterServices) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    load_cogs(bot, services)
    return bot


async def initialize_database(connection: ConnectionManager, config: AppConfig) -> None:
    """Open the SQLite Config Store and create its schema."""
    await connection.open(config.database_path)
    await SchemaManager.initialize_schema(connection.connection)


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None, connection: ConnectionManager) -> None:
    """Gracefully stop the Discord bot and close the database."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing the Discord client: %s", exc)

    await connection.close()
    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap the database, the spam filter and the bot, returning an exit code."""
    token = load_environment()
    config = AppConfig(BASE_DIR / CONFIG_PATH)

    try:
        logger.info("Initializing database...")
        await initialize_database(db_connection, config)
    except Exception as exc:
        logger.critical("Failed to initialize database: %s", exc)
        await db_connection.close()
        return 1

    services = build_spam_filter_services(config.spam_filter, db_connection)

    try:
        bot = create_bot(services)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        await shutdown_runtime(None, db_connection)
        return 1

    exit_code = 0
    try:
        await start_bot(bot, token)
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, db_connection)

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process exit code."""
    sys.excepthook = handle_exception
    os.chdir(BASE_DIR)
    logger.info("Starting Namewarden…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
