"""
Level commands: inspect the ladder and buy the next tier.
"""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from services.level_service import LevelService
from utils.embeds import create_level_embed, create_level_purchase_embed, create_rejection_embed
from utils.formatting import to_participant
from utils.guild import guild_key, sync_level_role
from utils.interaction_safety import safe_defer, safe_followup

logger = logging.getLogger("bucks_bot.commands.levels")


class LevelPurchaseView(discord.ui.View):
    """Confirmation button shown to the user who ran /level."""

    def __init__(self, level_service: LevelService, owner_id: int):
        super().__init__(timeout=120)
        self.level_service = level_service
        self.owner_id = owner_id

    @discord.ui.button(label="Agree to purchase?", style=discord.ButtonStyle.green)
    async def purchase(self, interaction: discord.Interaction, button: discord.ui.Button):
        if interaction.user.id != self.owner_id:
            await interaction.response.send_message(
                "Run `/level` yourself to buy a level.", ephemeral=True
            )
            return
        if not await safe_defer(interaction, ephemeral=False):
            return

        buyer = to_participant(interaction.user)
        try:
            result = await self.level_service.purchase_next(buyer, guild_key(interaction.guild))
        except Exception as exc:
            logger.error(f"Failed to purchase level: {exc}", exc_info=True)
            await safe_followup(
                interaction, content="Failed to purchase the level. Please try again.", ephemeral=True
            )
            return

        if not result:
            await safe_followup(interaction, embed=create_rejection_embed(result.error), ephemeral=True)
            return

        purchase = result.value
        button.disabled = True
        self.stop()
        await safe_followup(interaction, embed=create_level_purchase_embed(buyer.username, purchase))

        if isinstance(interaction.user, discord.Member):
            previous = purchase.previous.id if purchase.previous else 0
            try:
                await sync_level_role(interaction.user, previous, purchase.level.id)
            except discord.HTTPException as exc:
                logger.warning(f"Failed to sync level role for {buyer.user_id}: {exc}")


class LevelCommands(commands.Cog):
    def __init__(self, bot: commands.Bot, level_service: LevelService):
        self.bot = bot
        self.level_service = level_service

    @app_commands.command(name="level", description="See your level and buy the next one")
    async def level(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=True):
            return
        status = await self.level_service.describe(to_participant(interaction.user))
        view = LevelPurchaseView(self.level_service, interaction.user.id) if status.can_afford else None
        await safe_followup(interaction, embed=create_level_embed(status), view=view, ephemeral=True)


async def setup(bot: commands.Bot):
    level_service = getattr(bot, "level_service", None)
    if level_service is None:
        raise RuntimeError("Level service not registered on bot.")
    await bot.add_cog(LevelCommands(bot, level_service))
