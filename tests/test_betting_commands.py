"""
Tests for /startbet, /endbet and the wager select/modal.
"""

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from commands.betting import BetOptionSelect, BettingCommands, BetView, WagerModal, setup
from domain.models.bet import Bet
from domain.models.participant import Participant
from services import error_codes
from services.betting_service import BetSettlement, WagerReceipt
from services.result import Result


def _interaction():
    interaction = MagicMock()
    interaction.user = SimpleNamespace(id=10, name="host", display_name="Host")
    interaction.guild = SimpleNamespace(id=12345)
    interaction.response = MagicMock()
    interaction.response.send_modal = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def deferred(monkeypatch):
    monkeypatch.setattr("commands.betting.safe_defer", AsyncMock(return_value=True))


@pytest.mark.asyncio
async def test_startbet_collects_given_options(deferred):
    bet = Bet.create("Game 1", "10", "Host", ["Radiant", "Dire", "Draw"], 0)
    service = MagicMock()
    service.create_bet = AsyncMock(return_value=Result.ok(bet))
    cog = BettingCommands(MagicMock(), service)
    interaction = _interaction()

    await cog.startbet.callback(cog, interaction, "Game 1", "Radiant", "Dire", "Draw", None, None, None)

    service.create_bet.assert_awaited_once_with(
        "Game 1", Participant("10", "Host"), ["Radiant", "Dire", "Draw"]
    )
    kwargs = interaction.followup.send.call_args.kwargs
    assert kwargs["embed"].title == "🎲 Game 1"
    assert isinstance(kwargs["view"], BetView)


@pytest.mark.asyncio
async def test_startbet_duplicate_is_rejected(deferred):
    service = MagicMock()
    service.create_bet = AsyncMock(
        return_value=Result.fail("A bet with that reason is already open.", code=error_codes.BET_EXISTS)
    )
    cog = BettingCommands(MagicMock(), service)
    interaction = _interaction()

    await cog.startbet.callback(cog, interaction, "Game 1", "A", "B", None, None, None, None)

    kwargs = interaction.followup.send.call_args.kwargs
    assert kwargs["ephemeral"] is True
    assert "already open" in kwargs["embed"].description


@pytest.mark.asyncio
async def test_endbet_reports_winners(deferred):
    bet = Bet.create("Game 1", "10", "Host", ["Radiant", "Dire"], 0)
    bet.add_wager("1", "Alice", "Radiant", Decimal("10"))
    bet.add_wager("2", "Bob", "Dire", Decimal("10"))
    settlement = BetSettlement(
        bet=bet, winning_option="Radiant", pot=bet.pot, payouts=bet.compute_payouts("Radiant")
    )
    service = MagicMock()
    service.settle = AsyncMock(return_value=Result.ok(settlement))
    cog = BettingCommands(MagicMock(), service)
    interaction = _interaction()

    await cog.endbet.callback(cog, interaction, "Game 1", "radiant")

    service.settle.assert_awaited_once_with("Game 1", "radiant", Participant("10", "Host"), "12345")
    embed = interaction.followup.send.call_args.kwargs["embed"]
    assert embed.title == "🏁 Bet Ended: Game 1"


@pytest.mark.asyncio
async def test_option_select_opens_wager_modal():
    bet = Bet.create("Game 1", "10", "Host", ["Radiant", "Dire"], 0)
    service = MagicMock()
    service.get_bet = AsyncMock(return_value=bet)
    select = BetOptionSelect(service, bet)
    select._values = [f"{bet.id}:1"]
    interaction = _interaction()

    await select.callback(interaction)

    service.get_bet.assert_awaited_once_with(bet.id)
    modal = interaction.response.send_modal.call_args.args[0]
    assert isinstance(modal, WagerModal)
    assert modal.option == "Dire"
    assert modal.bet_id == bet.id
    assert [o.value for o in select.options] == [f"{bet.id}:0", f"{bet.id}:1"]


@pytest.mark.asyncio
async def test_registered_select_serves_bets_posted_earlier():
    bet = Bet.create("Game 1", "10", "Host", ["Radiant", "Dire"], 0)
    service = MagicMock()
    service.get_bet = AsyncMock(return_value=bet)
    select = BetOptionSelect(service)
    select._values = [f"{bet.id}:0"]
    interaction = _interaction()

    await select.callback(interaction)

    assert select.custom_id == BetOptionSelect(service, bet).custom_id
    assert interaction.response.send_modal.call_args.args[0].option == "Radiant"


@pytest.mark.asyncio
async def test_select_on_ended_bet_is_refused():
    service = MagicMock()
    service.get_bet = AsyncMock(return_value=None)
    select = BetOptionSelect(service)
    select._values = ["gone:0"]
    interaction = _interaction()
    interaction.response.send_message = AsyncMock()

    await select.callback(interaction)

    interaction.response.send_modal.assert_not_awaited()
    assert "already ended" in interaction.response.send_message.call_args.args[0]


@pytest.mark.asyncio
async def test_setup_registers_persistent_bet_view():
    bot = MagicMock()
    bot.betting_service = MagicMock()
    bot.add_cog = AsyncMock()

    await setup(bot)

    view = bot.add_view.call_args.args[0]
    assert isinstance(view, BetView)
    assert view.is_persistent()


@pytest.mark.asyncio
async def test_wager_modal_submits_amount(deferred):
    service = MagicMock()
    service.place_wager = AsyncMock(
        return_value=Result.ok(
            WagerReceipt(
                bet_id="b",
                option="Dire",
                amount=Decimal("2.5"),
                option_total=Decimal("2.5"),
                pot=Decimal("7.5"),
                new_balance=Decimal("-2.5"),
            )
        )
    )
    modal = WagerModal(service, "b", "Dire")
    modal.amount._value = "2.50"
    interaction = _interaction()

    await modal.on_submit(interaction)

    service.place_wager.assert_awaited_once_with("b", Participant("10", "Host"), "Dire", "2.50", "12345")
    content = interaction.followup.send.call_args.kwargs["content"]
    assert "$2.50" in content and "Dire" in content
