"""Tests for /cancel, /tickets and the vote button."""

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from commands.cancel import CancelCommands, CancelVoteView, TicketListView, setup
from domain.models.cancel_ticket import CancelTicket
from domain.models.participant import Participant
from services.cancel_service import VoteOutcome
from services.result import Result
from utils.embeds import create_cancel_ticket_embed


def _interaction(user_id=1, name="Alice"):
    interaction = MagicMock()
    interaction.user = SimpleNamespace(id=user_id, name=name.lower(), display_name=name)
    interaction.guild = SimpleNamespace(id=12345)
    interaction.channel = MagicMock()
    interaction.channel.send = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def deferred(monkeypatch):
    monkeypatch.setattr("commands.cancel.safe_defer", AsyncMock(return_value=True))


def _service(threshold=6):
    service = MagicMock()
    service.vote_threshold = threshold
    return service


@pytest.mark.asyncio
async def test_cancel_posts_ticket_with_vote_button(deferred):
    ticket = CancelTicket.open("1", "Alice", "2", "Bob", "spoilers", 0)
    service = _service()
    service.open_ticket = AsyncMock(return_value=Result.ok(ticket))
    cog = CancelCommands(MagicMock(), service)
    interaction = _interaction()

    await cog.cancel.callback(cog, interaction, "spoilers", SimpleNamespace(id=2, name="bob", display_name="Bob"))

    kwargs = interaction.followup.send.call_args.kwargs
    assert kwargs["embed"].title == "🚫 Cancel Bob?"
    assert isinstance(kwargs["view"], CancelVoteView)
    assert kwargs["view"].ticket_id == ticket.id


@pytest.mark.asyncio
async def test_vote_reaching_threshold_announces(deferred):
    ticket = CancelTicket.open("1", "Alice", "2", "Bob", "spoilers", 0)
    service = _service()
    service.vote = AsyncMock(
        return_value=Result.ok(
            VoteOutcome(
                ticket=ticket,
                votes=6,
                threshold=6,
                canceled=True,
                penalty=Decimal("-12"),
                new_balance=Decimal("0.00"),
            )
        )
    )
    view = CancelVoteView(service, ticket.id)
    interaction = _interaction(user_id=7, name="Voter")

    await view.vote.callback(interaction)

    service.vote.assert_awaited_once()
    assert "6/6" in interaction.followup.send.call_args.kwargs["content"]
    announcement = interaction.channel.send.call_args.args[0]
    assert "<@2>" in announcement and "$0.00" in announcement


@pytest.mark.asyncio
async def test_registered_vote_button_reads_ticket_from_embed(deferred):
    ticket = CancelTicket.open("1", "Alice", "2", "Bob", "spoilers", 0)
    service = _service()
    service.vote = AsyncMock(
        return_value=Result.ok(VoteOutcome(ticket=ticket, votes=1, threshold=6))
    )
    view = CancelVoteView(service)
    interaction = _interaction(user_id=7, name="Voter")
    interaction.message = SimpleNamespace(embeds=[create_cancel_ticket_embed(ticket, 6)])

    await view.vote.callback(interaction)

    service.vote.assert_awaited_once_with(ticket.id, Participant("7", "Voter"), "12345")
    assert "1/6" in interaction.followup.send.call_args.kwargs["content"]


@pytest.mark.asyncio
async def test_vote_without_ticket_reference_is_refused(deferred):
    service = _service()
    service.vote = AsyncMock()
    view = CancelVoteView(service)
    interaction = _interaction()
    interaction.message = SimpleNamespace(embeds=[])

    await view.vote.callback(interaction)

    service.vote.assert_not_awaited()
    assert "Could not find" in interaction.followup.send.call_args.kwargs["content"]


@pytest.mark.asyncio
async def test_setup_registers_persistent_vote_view():
    bot = MagicMock()
    bot.cancel_service = _service()
    bot.add_cog = AsyncMock()

    await setup(bot)

    view = bot.add_view.call_args.args[0]
    assert isinstance(view, CancelVoteView)
    assert view.is_persistent()
    assert view.ticket_id is None


@pytest.mark.asyncio
async def test_tickets_lists_with_picker(deferred):
    tickets = [
        CancelTicket.open("1", "Alice", "2", "Bob", "newer", 20),
        CancelTicket.open("1", "Alice", "3", "Carol", "older", 10),
    ]
    service = _service()
    service.list_opened = AsyncMock(return_value=tickets)
    cog = CancelCommands(MagicMock(), service)
    interaction = _interaction()

    await cog.tickets.callback(cog, interaction)

    kwargs = interaction.followup.send.call_args.kwargs
    assert kwargs["ephemeral"] is True
    assert isinstance(kwargs["view"], TicketListView)


@pytest.mark.asyncio
async def test_complaints_without_tickets_has_no_picker(deferred):
    service = _service()
    service.list_against = AsyncMock(return_value=[])
    cog = CancelCommands(MagicMock(), service)
    interaction = _interaction()

    await cog.complaints.callback(cog, interaction)

    kwargs = interaction.followup.send.call_args.kwargs
    assert "view" not in kwargs
