"""
Betting commands for user-created bets.
"""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from domain.models.bet import Bet
from domain.models.money import format_money
from services.betting_service import BettingService
from utils.embeds import create_bet_embed, create_rejection_embed, create_settlement_embed
from utils.formatting import to_participant
from utils.guild import guild_key
from utils.interaction_safety import safe_defer, safe_followup

logger = logging.getLogger("bucks_bot.commands.betting")


class WagerModal(discord.ui.Modal):
    """Asks how much to wager on the chosen option."""

    amount = discord.ui.TextInput(label="Wager amount", placeholder="0.01 - 20.00", max_length=12)

    def __init__(self, betting_service: BettingService, bet_id: str, option: str):
        super().__init__(title=f"Wager on {option}"[:45])
        self.betting_service = betting_service
        self.bet_id = bet_id
        self.option = option

    async def on_submit(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=False):
            return
        bettor = to_participant(interaction.user)
        try:
            result = await self.betting_service.place_wager(
                self.bet_id, bettor, self.option, self.amount.value, guild_key(interaction.guild)
            )
        except Exception as exc:
            logger.error(f"Failed to place wager: {exc}", exc_info=True)
            await safe_followup(
                interaction, content="Failed to place the wager. Please try again.", ephemeral=True
            )
            return

        if not result:
            await safe_followup(interaction, embed=create_rejection_embed(result.error), ephemeral=True)
            return

        receipt = result.value
        await safe_followup(
            interaction,
            content=(
                f"**{bettor.username}** wagered {format_money(receipt.amount)} on **{receipt.option}**. "
                f"Pot is now {format_money(receipt.pot)}."
            ),
        )


class BetOptionSelect(discord.ui.Select):
    """
    Option picker. Each entry's value is "<bet id>:<option index>", so a
    single select registered on startup can serve every bet message.
    """

    def __init__(self, betting_service: BettingService, bet: Bet | None = None):
        self.betting_service = betting_service
        options = []
        if bet is not None:
            options = [
                discord.SelectOption(label=name[:100], value=f"{bet.id}:{idx}")
                for idx, name in enumerate(bet.option_names())
            ]
        super().__init__(
            placeholder="Pick an option to wager on",
            options=options,
            custom_id="bet:wager",
        )

    async def callback(self, interaction: discord.Interaction):
        bet_id, _, index = self.values[0].rpartition(":")
        bet = await self.betting_service.get_bet(bet_id)
        if bet is None:
            await interaction.response.send_message("That bet has already ended.", ephemeral=True)
            return
        names = bet.option_names()
        if not index.isdigit() or int(index) >= len(names):
            await interaction.response.send_message("That option no longer exists.", ephemeral=True)
            return
        option = names[int(index)]
        await interaction.response.send_modal(WagerModal(self.betting_service, bet.id, option))


class BetView(discord.ui.View):
    def __init__(self, betting_service: BettingService, bet: Bet | None = None):
        super().__init__(timeout=None)
        self.add_item(BetOptionSelect(betting_service, bet))


class BettingCommands(commands.Cog):
    """Slash commands to open and end bets."""

    def __init__(self, bot: commands.Bot, betting_service: BettingService):
        self.bot = bot
        self.betting_service = betting_service

    @app_commands.command(name="startbet", description="Open a bet others can wager on")
    @app_commands.describe(
        reason="What the bet is about",
        option1="First outcome",
        option2="Second outcome",
        option3="Third outcome",
        option4="Fourth outcome",
        option5="Fifth outcome",
        option6="Sixth outcome",
    )
    async def startbet(
        self,
        interaction: discord.Interaction,
        reason: str,
        option1: str,
        option2: str,
        option3: str | None = None,
        option4: str | None = None,
        option5: str | None = None,
        option6: str | None = None,
    ):
        if not await safe_defer(interaction, ephemeral=False):
            return
        options = [o for o in (option1, option2, option3, option4, option5, option6) if o is not None]
        owner = to_participant(interaction.user)
        try:
            result = await self.betting_service.create_bet(reason, owner, options)
        except Exception as exc:
            logger.error(f"Failed to create bet: {exc}", exc_info=True)
            await safe_followup(
                interaction, content="Failed to create the bet. Please try again.", ephemeral=True
            )
            return

        if not result:
            await safe_followup(interaction, embed=create_rejection_embed(result.error), ephemeral=True)
            return

        bet = result.value
        await safe_followup(
            interaction, embed=create_bet_embed(bet), view=BetView(self.betting_service, bet)
        )

    @app_commands.command(name="endbet", description="End a bet you opened and pay the winners")
    @app_commands.describe(
        reason="The reason the bet was opened with",
        winner="The winning option",
    )
    async def endbet(self, interaction: discord.Interaction, reason: str, winner: str):
        if not await safe_defer(interaction, ephemeral=False):
            return
        caller = to_participant(interaction.user)
        try:
            result = await self.betting_service.settle(
                reason, winner, caller, guild_key(interaction.guild)
            )
        except Exception as exc:
            logger.error(f"Failed to settle bet: {exc}", exc_info=True)
            await safe_followup(
                interaction, content="Failed to end the bet. Please try again.", ephemeral=True
            )
            return

        if not result:
            await safe_followup(interaction, embed=create_rejection_embed(result.error), ephemeral=True)
            return

        await safe_followup(interaction, embed=create_settlement_embed(result.value))


async def setup(bot: commands.Bot):
    betting_service = getattr(bot, "betting_service", None)
    if betting_service is None:
        raise RuntimeError("Betting service not registered on bot.")
    await bot.add_cog(BettingCommands(bot, betting_service))
    bot.add_view(BetView(betting_service))
