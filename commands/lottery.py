"""
Lottery commands, the ticket button, and the post-command draw check.
"""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from domain.models.money import format_money
from services.lottery_service import LotteryService
from utils.embeds import create_lottery_embed, create_lottery_winner_embed, create_rejection_embed
from utils.formatting import to_participant
from utils.guild import guild_key
from utils.interaction_safety import safe_defer, safe_followup

logger = logging.getLogger("bucks_bot.commands.lottery")


class LotteryView(discord.ui.View):
    """Button that buys one ticket for whoever presses it."""

    def __init__(self, lottery_service: LotteryService, guild_id: str):
        super().__init__(timeout=600)
        self.lottery_service = lottery_service
        self.guild_id = guild_id

    @discord.ui.button(label="Buy a ticket", style=discord.ButtonStyle.green, emoji="🎟️")
    async def buy_ticket(self, interaction: discord.Interaction, button: discord.ui.Button):
        if not await safe_defer(interaction, ephemeral=True):
            return
        buyer = to_participant(interaction.user)
        try:
            result = await self.lottery_service.buy_ticket(buyer, self.guild_id)
        except Exception as exc:
            logger.error(f"Failed to buy lottery ticket: {exc}", exc_info=True)
            await safe_followup(
                interaction, content="Failed to buy a ticket. Please try again.", ephemeral=True
            )
            return

        if not result:
            await safe_followup(interaction, embed=create_rejection_embed(result.error), ephemeral=True)
            return

        purchase = result.value
        await safe_followup(
            interaction,
            content=(
                f"🎟️ You now hold {purchase.ticket_count} ticket(s). "
                f"Jackpot: {format_money(purchase.pot)}. "
                f"Your balance: {format_money(purchase.new_balance)}."
            ),
            ephemeral=True,
        )


class LotteryCommands(commands.Cog):
    def __init__(self, bot: commands.Bot, lottery_service: LotteryService):
        self.bot = bot
        self.lottery_service = lottery_service

    @app_commands.command(name="lottery", description="See the current jackpot and buy tickets")
    async def lottery(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=False):
            return
        guild_id = guild_key(interaction.guild)
        lottery = await self.lottery_service.get_lottery(guild_id)
        await safe_followup(
            interaction,
            embed=create_lottery_embed(lottery, self.lottery_service.duration_seconds),
            view=LotteryView(self.lottery_service, guild_id),
        )

    @commands.Cog.listener()
    async def on_app_command_completion(self, interaction: discord.Interaction, command):
        """Draw the guild lottery if it is due, then announce the winner in the channel."""
        if interaction.guild is None:
            return
        try:
            settlement = await self.lottery_service.resolve_if_due(guild_key(interaction.guild))
        except Exception as exc:
            logger.error(f"Lottery resolution failed: {exc}", exc_info=True)
            return
        if settlement is None or interaction.channel is None:
            return
        try:
            await interaction.channel.send(embed=create_lottery_winner_embed(settlement))
        except discord.HTTPException as exc:
            logger.warning(f"Failed to announce lottery winner: {exc}")


async def setup(bot: commands.Bot):
    lottery_service = getattr(bot, "lottery_service", None)
    if lottery_service is None:
        raise RuntimeError("Lottery service not registered on bot.")
    await bot.add_cog(LotteryCommands(bot, lottery_service))
