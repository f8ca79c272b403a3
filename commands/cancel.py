"""
Cancel commands: open tickets against users, vote on them, list them.
"""

import logging
import re

import discord
from discord import app_commands
from discord.ext import commands

from domain.models.cancel_ticket import CancelTicket
from domain.models.money import format_money
from services.cancel_service import CancelService
from utils.embeds import (
    create_cancel_ticket_embed,
    create_rejection_embed,
    create_ticket_list_embed,
)
from utils.formatting import mention, to_participant
from utils.guild import guild_key
from utils.interaction_safety import safe_defer, safe_followup

logger = logging.getLogger("bucks_bot.commands.cancel")


TICKET_FOOTER_PATTERN = re.compile(r"Ticket ([0-9a-f-]{36})")


class CancelVoteView(discord.ui.View):
    """
    Vote button attached to a ticket embed.

    One instance without a ticket id is registered on startup so buttons on
    older messages keep working; it reads the ticket id from the embed footer.
    """

    def __init__(self, cancel_service: CancelService, ticket_id: str | None = None):
        super().__init__(timeout=None)
        self.cancel_service = cancel_service
        self.ticket_id = ticket_id

    @staticmethod
    def ticket_id_from_message(message: discord.Message | None) -> str | None:
        if message is None or not message.embeds:
            return None
        footer = message.embeds[0].footer.text or ""
        match = TICKET_FOOTER_PATTERN.search(footer)
        return match.group(1) if match else None

    @discord.ui.button(
        label="Vote to Cancel",
        style=discord.ButtonStyle.red,
        emoji="🚫",
        custom_id="cancel:vote",
    )
    async def vote(self, interaction: discord.Interaction, button: discord.ui.Button):
        if not await safe_defer(interaction, ephemeral=True):
            return
        ticket_id = self.ticket_id or self.ticket_id_from_message(interaction.message)
        if ticket_id is None:
            await safe_followup(interaction, content="Could not find that ticket.", ephemeral=True)
            return
        voter = to_participant(interaction.user)
        try:
            result = await self.cancel_service.vote(ticket_id, voter, guild_key(interaction.guild))
        except Exception as exc:
            logger.error(f"Failed to record cancel vote: {exc}", exc_info=True)
            await safe_followup(
                interaction, content="Failed to record your vote. Please try again.", ephemeral=True
            )
            return

        if not result:
            await safe_followup(interaction, embed=create_rejection_embed(result.error), ephemeral=True)
            return

        outcome = result.value
        await safe_followup(
            interaction, content=f"Vote recorded ({outcome.votes}/{outcome.threshold}).", ephemeral=True
        )
        if outcome.canceled and interaction.channel is not None:
            try:
                await interaction.channel.send(
                    f"🚫 {mention(outcome.ticket.target_id)} has been canceled. "
                    f"New balance: {format_money(outcome.new_balance)}."
                )
            except discord.HTTPException as exc:
                logger.warning(f"Failed to announce cancellation: {exc}")


class TicketSelect(discord.ui.Select):
    """Pick one ticket from a list to see it in full (and vote on it)."""

    def __init__(self, cancel_service: CancelService, tickets: list[CancelTicket]):
        self.cancel_service = cancel_service
        super().__init__(
            placeholder="Pick a ticket to view",
            options=[
                discord.SelectOption(label=t.display_text[:100], value=t.id) for t in tickets[:25]
            ],
        )

    async def callback(self, interaction: discord.Interaction):
        ticket = await self.cancel_service.get_ticket(self.values[0])
        if ticket is None:
            await interaction.response.send_message("That ticket no longer exists.", ephemeral=True)
            return
        view = None if ticket.resolved else CancelVoteView(self.cancel_service, ticket.id)
        kwargs = {"embed": create_cancel_ticket_embed(ticket, self.cancel_service.vote_threshold)}
        if view is not None:
            kwargs["view"] = view
        await interaction.response.send_message(**kwargs)


class TicketListView(discord.ui.View):
    def __init__(self, cancel_service: CancelService, tickets: list[CancelTicket]):
        super().__init__(timeout=300)
        self.add_item(TicketSelect(cancel_service, tickets))


class CancelCommands(commands.Cog):
    def __init__(self, bot: commands.Bot, cancel_service: CancelService):
        self.bot = bot
        self.cancel_service = cancel_service

    @app_commands.command(name="cancel", description="Open a cancellation ticket against someone")
    @app_commands.describe(user="Who should be canceled", description="What they did")
    async def cancel(
        self,
        interaction: discord.Interaction,
        description: str,
        user: discord.Member | None = None,
    ):
        if not await safe_defer(interaction, ephemeral=False):
            return
        initiator = to_participant(interaction.user)
        target = to_participant(user) if user is not None else None
        try:
            result = await self.cancel_service.open_ticket(initiator, target, description)
        except Exception as exc:
            logger.error(f"Failed to open cancel ticket: {exc}", exc_info=True)
            await safe_followup(
                interaction, content="Failed to open the ticket. Please try again.", ephemeral=True
            )
            return

        if not result:
            await safe_followup(interaction, embed=create_rejection_embed(result.error), ephemeral=True)
            return

        ticket = result.value
        await safe_followup(
            interaction,
            embed=create_cancel_ticket_embed(ticket, self.cancel_service.vote_threshold),
            view=CancelVoteView(self.cancel_service, ticket.id),
        )

    async def _send_list(self, interaction: discord.Interaction, title: str, tickets) -> None:
        embed = create_ticket_list_embed(title, tickets, self.cancel_service.vote_threshold)
        view = TicketListView(self.cancel_service, tickets) if tickets else None
        await safe_followup(interaction, embed=embed, view=view, ephemeral=True)

    @app_commands.command(name="tickets", description="See the cancellation tickets you opened")
    async def tickets(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=True):
            return
        user = to_participant(interaction.user)
        tickets = await self.cancel_service.list_opened(user)
        await self._send_list(interaction, f"Tickets opened by {user.username}", tickets)

    @app_commands.command(name="complaints", description="See the cancellation tickets against you")
    async def complaints(self, interaction: discord.Interaction):
        if not await safe_defer(interaction, ephemeral=True):
            return
        user = to_participant(interaction.user)
        tickets = await self.cancel_service.list_against(user)
        await self._send_list(interaction, f"Complaints against {user.username}", tickets)


async def setup(bot: commands.Bot):
    cancel_service = getattr(bot, "cancel_service", None)
    if cancel_service is None:
        raise RuntimeError("Cancel service not registered on bot.")
    await bot.add_cog(CancelCommands(bot, cancel_service))
    bot.add_view(CancelVoteView(cancel_service))
