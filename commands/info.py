"""
Information commands for the bot: /info
"""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from utils.embeds import create_level_ladder_text

logger = logging.getLogger("bucks_bot.commands.info")


def build_info_embed(bot: commands.Bot) -> discord.Embed:
    """List every registered slash command with its description, plus the level ladder."""
    embed = discord.Embed(title="Bucks Bot Commands", color=discord.Color.blue())
    for command in sorted(bot.tree.walk_commands(), key=lambda c: c.name):
        embed.add_field(
            name=f"/{command.name}",
            value=getattr(command, "description", None) or "No description available",
            inline=False,
        )
    embed.add_field(name="Levels", value=create_level_ladder_text(), inline=False)
    return embed


class InfoCommands(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="info", description="How every command works")
    async def info(self, interaction: discord.Interaction):
        logger.info(f"info invoked by {interaction.user.id}")
        await interaction.response.send_message(embed=build_info_embed(self.bot), ephemeral=True)


async def setup(bot: commands.Bot):
    await bot.add_cog(InfoCommands(bot))
