"""
Main Discord bot entry for the Bucks economy bot.
"""

import asyncio
import logging

# Configure logging BEFORE importing discord to prevent duplicate handlers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,  # Override any existing handlers (e.g., from discord.py)
)
logger = logging.getLogger("bucks_bot")


class _PyNaClFilter(logging.Filter):
    """Filter out the PyNaCl warning from discord.py."""

    def filter(self, record):
        return "PyNaCl is not installed" not in record.getMessage()


logging.getLogger("discord.client").addFilter(_PyNaClFilter())

import discord
from discord.app_commands.errors import TransformerError
from discord.ext import commands

# discord.py adds its own handler to the 'discord' logger on import
_discord_logger = logging.getLogger("discord")
_discord_logger.handlers.clear()
_discord_logger.setLevel(logging.INFO)

from config import ADMIN_USER_IDS, BOT_OWNER_ID, DB_PATH, DISCORD_BOT_TOKEN
from infrastructure.service_container import ServiceConfig, ServiceContainer
from utils.guild import ensure_level_roles, guild_key

intents = discord.Intents.default()
intents.members = True

bot = commands.Bot(command_prefix="!", intents=intents)

_container: ServiceContainer | None = None


def _init_services():
    """Initialize all services via ServiceContainer (lazy, idempotent)."""
    global _container
    if _container is not None:
        return

    _container = ServiceContainer(
        ServiceConfig(db_path=DB_PATH, owner_id=BOT_OWNER_ID, admin_user_ids=ADMIN_USER_IDS)
    )
    _container.initialize()
    _container.expose_to_bot(bot)
    bot.leaderboard_service.ensure_leaderboard()


EXTENSIONS = [
    "commands.bank",
    "commands.leaderboard",
    "commands.lottery",
    "commands.levels",
    "commands.betting",
    "commands.cancel",
    "commands.info",
]


async def _load_extensions():
    """Load command extensions if not already loaded."""
    _init_services()

    loaded_extensions = []
    failed_extensions = []
    for ext in EXTENSIONS:
        if ext in bot.extensions:
            logger.debug(f"Extension {ext} already loaded, skipping")
            continue
        try:
            await bot.load_extension(ext)
            loaded_extensions.append(ext)
            logger.info(f"Loaded extension: {ext}")
        except Exception as exc:
            failed_extensions.append(ext)
            logger.error(f"Failed to load extension {ext}: {exc}", exc_info=True)

    logger.info(
        f"Extension loading complete: {len(loaded_extensions)} loaded, "
        f"{len(failed_extensions)} failed"
    )


async def provision_guild(guild: discord.Guild) -> None:
    """Create the guild's lottery and level roles if they are missing."""
    await asyncio.to_thread(bot.lottery_service.ensure_lottery, guild_key(guild))
    try:
        await ensure_level_roles(guild)
    except discord.HTTPException as exc:
        logger.warning(f"Could not create level roles in guild {guild.id}: {exc}")


@bot.event
async def setup_hook():
    """Load command cogs."""
    _init_services()
    await _load_extensions()


@bot.event
async def on_ready():
    logger.info(f"{bot.user} connected. Guilds: {len(bot.guilds)}")

    if _container.owner_policy.owner_id is None:
        app_info = await bot.application_info()
        _container.set_owner(app_info.owner.id)

    for guild in bot.guilds:
        await provision_guild(guild)

    try:
        await bot.tree.sync()
        logger.info("Slash commands synced globally.")
    except Exception as exc:
        logger.error(f"Failed to sync commands: {exc}", exc_info=True)


@bot.event
async def on_guild_join(guild: discord.Guild):
    logger.info(f"Joined guild {guild.id} ({guild.name})")
    await provision_guild(guild)


@bot.tree.error
async def on_app_command_error(interaction: discord.Interaction, error: discord.app_commands.AppCommandError):
    """Global error handler for app commands - prevents infinite 'thinking...' state."""
    logger.error(
        f"App command error in '{interaction.command.name if interaction.command else 'unknown'}': {error}",
        exc_info=error,
    )

    if isinstance(error, TransformerError):
        value = getattr(error, "value", None)
        error_msg = (
            f"Could not understand `{value}`. "
            "Mention a user with @ and use plain numbers for amounts."
        )
    else:
        error_msg = "An error occurred while processing your command. Please try again."

    try:
        if interaction.response.is_done():
            await interaction.followup.send(content=f"❌ {error_msg}", ephemeral=True)
        else:
            await interaction.response.send_message(content=f"❌ {error_msg}", ephemeral=True)
    except Exception as followup_error:
        logger.error(f"Failed to send error message to user: {followup_error}")


def main():
    if not DISCORD_BOT_TOKEN:
        raise SystemExit("DISCORD_BOT_TOKEN is not set")
    bot.run(DISCORD_BOT_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
