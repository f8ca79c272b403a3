"""
Bank commands: peer transfers, balance and transaction history.
"""

import logging

import discord
from discord import app_commands
from discord.ext import commands

from services.transaction_service import TransactionService, TransferKind
from utils.embeds import (
    create_balance_embed,
    create_rejection_embed,
    create_transactions_embed,
    create_transfer_embed,
)
from utils.formatting import to_participant
from utils.guild import guild_key
from utils.interaction_safety import safe_defer, safe_followup

logger = logging.getLogger("bucks_bot.commands.bank")


class BankCommands(commands.Cog):
    """Slash commands that move or report bucks."""

    def __init__(self, bot: commands.Bot, transaction_service: TransactionService):
        self.bot = bot
        self.transaction_service = transaction_service

    async def _transfer(
        self,
        interaction: discord.Interaction,
        user: discord.Member | None,
        amount: float,
        reason: str | None,
        kind: TransferKind,
    ) -> None:
        logger.info(f"{kind.value}bucks invoked by {interaction.user.id}")
        if not await safe_defer(interaction, ephemeral=False):
            return

        actor = to_participant(interaction.user)
        target = to_participant(user) if user is not None else None
        signed = amount if kind is TransferKind.GIVE else -amount
        try:
            result = await self.transaction_service.transfer(
                actor, target, signed, reason, kind, guild_key(interaction.guild)
            )
        except Exception as exc:
            logger.error(f"Failed to process {kind.value}bucks: {exc}", exc_info=True)
            await safe_followup(
                interaction,
                content="Failed to process the transaction. Please try again.",
                ephemeral=True,
            )
            return

        if not result:
            await safe_followup(interaction, embed=create_rejection_embed(result.error), ephemeral=True)
            return

        await safe_followup(
            interaction,
            embed=create_transfer_embed(actor.username, result.value, given=kind is TransferKind.GIVE),
        )

    @app_commands.command(name="givebucks", description="Give bucks to another user")
    @app_commands.describe(
        amount="How many bucks to give",
        user="Who gets the bucks",
        reason="Why they deserve it",
    )
    async def givebucks(
        self,
        interaction: discord.Interaction,
        amount: float,
        user: discord.Member | None = None,
        reason: str | None = None,
    ):
        await self._transfer(interaction, user, amount, reason, TransferKind.GIVE)

    @app_commands.command(name="takebucks", description="Take bucks from another user")
    @app_commands.describe(
        amount="How many bucks to take",
        user="Who loses the bucks",
        reason="Why they deserve it",
    )
    async def takebucks(
        self,
        interaction: discord.Interaction,
        amount: float,
        user: discord.Member | None = None,
        reason: str | None = None,
    ):
        await self._transfer(interaction, user, amount, reason, TransferKind.TAKE)

    @app_commands.command(name="balance", description="Check your balance")
    async def balance(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=False):
            return
        user = to_participant(interaction.user)
        balance = await self.transaction_service.get_balance(user)
        await safe_followup(interaction, embed=create_balance_embed(user.username, balance))

    @app_commands.command(name="transactions", description="See your last ten transactions")
    async def transactions(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=True):
            return
        user = to_participant(interaction.user)
        history = await self.transaction_service.get_transactions(user)
        await safe_followup(
            interaction, embed=create_transactions_embed(user.username, history), ephemeral=True
        )


async def setup(bot: commands.Bot):
    transaction_service = getattr(bot, "transaction_service", None)
    if transaction_service is None:
        raise RuntimeError("Transaction service not registered on bot.")
    await bot.add_cog(BankCommands(bot, transaction_service))
