"""
Leaderboard commands: the richest, the poorest, and where you stand.
"""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from services.leaderboard_service import LeaderboardService
from utils.embeds import create_ranking_embed, create_standing_embed
from utils.formatting import to_participant
from utils.guild import guild_key
from utils.interaction_safety import safe_defer, safe_followup

logger = logging.getLogger("bucks_bot.commands.leaderboard")


class LeaderboardCommands(commands.Cog):
    def __init__(self, bot: commands.Bot, leaderboard_service: LeaderboardService):
        self.bot = bot
        self.leaderboard_service = leaderboard_service

    @app_commands.command(name="leaderboard", description="Show the wokest users in this server")
    async def leaderboard(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=False):
            return
        entries = await self.leaderboard_service.get_top(guild_key(interaction.guild))
        await safe_followup(
            interaction,
            embed=create_ranking_embed("🏆 Wokest Users", entries, discord.Color.green()),
        )

    @app_commands.command(name="skeeterboard", description="Show the most problematic users in this server")
    async def skeeterboard(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=False):
            return
        entries = await self.leaderboard_service.get_bottom(guild_key(interaction.guild))
        await safe_followup(
            interaction,
            embed=create_ranking_embed("🦟 Most Problematic Users", entries, discord.Color.red()),
        )

    @app_commands.command(name="amiwoke", description="Find out if you're woke or problematic")
    async def amiwoke(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=False):
            return
        user = to_participant(interaction.user)
        standing = await self.leaderboard_service.standing(guild_key(interaction.guild), user.user_id)
        await safe_followup(interaction, embed=create_standing_embed(user.username, standing))


async def setup(bot: commands.Bot):
    leaderboard_service = getattr(bot, "leaderboard_service", None)
    if leaderboard_service is None:
        raise RuntimeError("Leaderboard service not registered on bot.")
    await bot.add_cog(LeaderboardCommands(bot, leaderboard_service))
