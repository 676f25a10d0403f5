#!/usr/bin/env python3
"""
Discord Ticket Bot - Main Entry Point

A multi-server ticket bot where every server picks its ticket categories
from one global catalog managed by the bot owner.
"""

import asyncio
import os
import signal
import sys
from pathlib import Path
from typing import Optional

import discord
from discord.ext import commands
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from logging_config import setup_logging, get_logger, get_audit_logger, AuditLogger
from config.config_manager import ConfigManager, BotSettings, ConfigurationError
from database.document_store import DocumentStore
from database.sqlite_adapter import SQLiteAdapter
from core.category_registry import CategoryRegistry
from core.tenant_config_store import TenantConfigStore
from core.consistency_coordinator import ConsistencyCoordinator
from core.stats_aggregator import StatsAggregator

logger = get_logger(__name__)


class TicketBot(commands.Bot):
    """Main Discord bot class for the multi-server ticket system."""

    def __init__(self, settings: Optional[BotSettings] = None):
        intents = discord.Intents.default()
        intents.guilds = True
        intents.members = True

        self.settings = settings or BotSettings.from_env()

        options = {}
        if self.settings.owner_ids:
            options['owner_ids'] = set(self.settings.owner_ids)

        super().__init__(
            command_prefix=os.getenv('COMMAND_PREFIX', '!'),
            intents=intents,
            help_command=None,
            case_insensitive=True,
            **options
        )

        self.config_manager: Optional[ConfigManager] = None
        self.document_store: Optional[DocumentStore] = None
        self.database_adapter: Optional[SQLiteAdapter] = None
        self.category_registry: Optional[CategoryRegistry] = None
        self.tenant_store: Optional[TenantConfigStore] = None
        self.coordinator: Optional[ConsistencyCoordinator] = None
        self.stats_aggregator: Optional[StatsAggregator] = None
        self.audit_logger: Optional[AuditLogger] = None
        self._shutdown_initiated = False

    async def setup_hook(self):
        """Initialize bot components and load extensions."""
        logger.info("Starting bot setup...")

        try:
            self.audit_logger = get_audit_logger()
            await self._initialize_config()
            await self._initialize_storage()
            await self._initialize_database()
            self._initialize_services()

            await self.load_extensions()

            await self.tree.sync()
            logger.info("Slash commands synced successfully")

            logger.info("Bot setup completed successfully")

        except Exception as e:
            logger.error(f"Error during bot setup: {e}")
            await self._cleanup_on_error()
            raise

    async def _initialize_config(self):
        """Initialize configuration manager."""
        logger.info("Initializing configuration manager...")

        self.config_manager = ConfigManager(self.settings)

        errors = self.config_manager.validate_configuration()
        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"- {error}" for error in errors)
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        logger.info("Configuration manager initialized successfully")

    async def _initialize_storage(self):
        """Load the global category catalog from the shared document."""
        logger.info("Loading global category catalog...")

        self.document_store = DocumentStore(self.settings.data_dir)
        self.category_registry = CategoryRegistry(self.document_store, self.settings.config_file)
        self.tenant_store = TenantConfigStore(self.document_store, self.settings.server_config_file)
        await self.category_registry.load()

    async def _initialize_database(self):
        """Initialize database connection and test connectivity."""
        logger.info("Initializing database connection...")

        self.database_adapter = SQLiteAdapter(self.settings.database_url)
        await self.database_adapter.connect()

        if not await self.database_adapter.is_connected():
            raise ConnectionError("Database connection test failed")

        logger.info("Database connection established successfully")

    def _initialize_services(self):
        if not self.category_registry or not self.tenant_store:
            raise RuntimeError("Storage must be initialized before the coordinator")

        if not self.database_adapter:
            raise RuntimeError("Database adapter must be initialized before the stats aggregator")

        self.coordinator = ConsistencyCoordinator(self.category_registry, self.tenant_store)
        self.stats_aggregator = StatsAggregator(self.database_adapter)
        logger.info("Category coordinator and stats aggregator initialized")

    async def _cleanup_on_error(self):
        """Cleanup resources when initialization fails."""
        logger.info("Cleaning up resources due to initialization error...")

        if self.database_adapter:
            try:
                await self.database_adapter.disconnect()
            except Exception as e:
                logger.error(f"Error during database cleanup: {e}")

        self.database_adapter = None
        self.coordinator = None
        self.stats_aggregator = None

    async def load_extensions(self):
        """Dynamically load all command modules from the commands directory."""
        commands_dir = Path(__file__).parent / "commands"

        if not commands_dir.exists():
            logger.warning("Commands directory not found")
            return

        loaded_count = 0
        failed_count = 0

        for file_path in sorted(commands_dir.glob("*.py")):
            # base_cog.py holds shared helpers, not a command module
            if file_path.name.startswith("__") or file_path.name == "base_cog.py":
                continue

            module_name = f"commands.{file_path.stem}"

            try:
                await self.load_extension(module_name)
                logger.info(f"✅ Loaded extension: {module_name}")
                loaded_count += 1
            except Exception as e:
                logger.error(f"❌ Failed to load extension {module_name}: {e}")
                failed_count += 1

        logger.info(f"Extension loading complete: {loaded_count} loaded, {failed_count} failed")

    async def on_ready(self):
        """Called when the bot is ready and connected to Discord."""
        logger.info(f"{self.user} has connected to Discord!")
        logger.info(f"Bot is in {len(self.guilds)} guilds")

        activity = discord.Activity(
            type=discord.ActivityType.watching,
            name="for tickets | /categories"
        )
        await self.change_presence(activity=activity)

    async def on_error(self, event, *args, **kwargs):
        """Global error handler for bot events."""
        logger.error(f"Error in event {event}: {args}", exc_info=True)

    async def close(self):
        """Cleanup when bot is shutting down."""
        if self._shutdown_initiated:
            return

        self._shutdown_initiated = True
        logger.info("Bot is shutting down...")

        try:
            if self.database_adapter:
                await self.database_adapter.disconnect()
                logger.info("Database connection closed")

        except Exception as e:
            logger.error(f"Error during shutdown cleanup: {e}")
        finally:
            await super().close()


def validate_environment() -> bool:
    """
    Validate required environment variables and configuration.

    Returns:
        bool: True if environment is valid, False otherwise
    """
    logger.info("Validating environment configuration...")

    if not os.getenv('DISCORD_TOKEN'):
        logger.error("Missing required environment variable: DISCORD_TOKEN")
        logger.error("Please check your .env file or environment configuration")
        return False

    try:
        BotSettings.from_env()
    except ConfigurationError as e:
        logger.error(str(e))
        return False

    logger.info("Environment validation completed successfully")
    return True


def setup_signal_handlers(bot: TicketBot, loop: asyncio.AbstractEventLoop):
    """
    Close the bot gracefully on SIGTERM/SIGINT.

    Args:
        bot: The bot instance
        loop: The running event loop
    """
    for sig in (getattr(signal, 'SIGTERM', None), getattr(signal, 'SIGINT', None)):
        if sig is None:
            continue
        try:
            loop.add_signal_handler(sig, lambda s=sig: asyncio.create_task(_shutdown(bot, s.name)))
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass


async def _shutdown(bot: TicketBot, signal_name: str):
    logger.info(f"Received {signal_name}, initiating graceful shutdown...")
    await bot.close()


async def main():
    """Main function to start the bot with proper initialization and error handling."""
    settings = BotSettings.from_env()
    setup_logging(log_dir=settings.log_dir, log_level=settings.log_level)

    logger.info("Starting Discord Ticket Bot...")

    if not validate_environment():
        logger.error("Environment validation failed. Exiting.")
        sys.exit(1)

    bot = TicketBot(settings)
    setup_signal_handlers(bot, asyncio.get_running_loop())

    try:
        logger.info("Connecting to Discord...")
        await bot.start(os.getenv('DISCORD_TOKEN'))

    except discord.LoginFailure:
        logger.error("Invalid Discord token. Please check your DISCORD_TOKEN environment variable.")
        sys.exit(1)

    except discord.HTTPException as e:
        logger.error(f"HTTP error connecting to Discord: {e}")
        sys.exit(1)

    finally:
        if not bot._shutdown_initiated:
            await bot.close()


def run():
    """Console entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
