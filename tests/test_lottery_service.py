"""
Tests for ticket purchases and lottery resolution.
"""

from decimal import Decimal

import pytest

from domain.models.lottery import lottery_id_for
from services import error_codes
from services.lottery_service import LotteryService
from tests.conftest import TEST_GUILD_ID, TEST_GUILD_ID_SECONDARY, make_participant

ALICE = make_participant(1, "Alice")
BOB = make_participant(2, "Bob")


class FixedDraw:
    def __init__(self, value):
        self.value = value

    def randrange(self, stop):
        return self.value


def test_ensure_lottery_is_idempotent(lottery_service, lottery_repository):
    first = lottery_service.ensure_lottery(TEST_GUILD_ID)
    first.add_to_pot(Decimal("3"))
    lottery_repository.upsert(first)

    again = lottery_service.ensure_lottery(TEST_GUILD_ID)

    assert again.pot == Decimal("8.00")
    assert lottery_repository.get(lottery_id_for(TEST_GUILD_ID_SECONDARY)) is None


@pytest.mark.asyncio
async def test_buy_ticket_charges_and_grows_pot(lottery_service, provisioned, account_repository):
    result = await lottery_service.buy_ticket(ALICE, TEST_GUILD_ID)

    assert result.success
    purchase = result.value
    assert purchase.ticket_count == 1
    assert purchase.total_tickets == 1
    assert purchase.pot == Decimal("7.00")
    assert purchase.new_balance == Decimal("-2.00")

    account = account_repository.get("1")
    assert account.transactions[0].initiator == "Lottery"
    assert account.transactions[0].comment == "Bought a lottery ticket"


@pytest.mark.asyncio
async def test_buy_ticket_below_floor_is_rejected(lottery_service, provisioned, fund):
    fund(1, -100.01)

    result = await lottery_service.buy_ticket(ALICE, TEST_GUILD_ID)

    assert not result.success
    assert result.error_code == error_codes.INSUFFICIENT_FUNDS


@pytest.mark.asyncio
async def test_buy_ticket_at_floor_is_allowed(lottery_service, provisioned, fund):
    fund(1, -100)
    result = await lottery_service.buy_ticket(ALICE, TEST_GUILD_ID)
    assert result.success
    assert result.value.new_balance == Decimal("-102.00")


@pytest.mark.asyncio
async def test_resolve_not_due_does_nothing(lottery_service, provisioned):
    await lottery_service.buy_ticket(ALICE, TEST_GUILD_ID)
    lottery = await lottery_service.get_lottery(TEST_GUILD_ID)

    settlement = await lottery_service.resolve_if_due(
        TEST_GUILD_ID, now=lottery.started_at + lottery_service.duration_seconds - 1
    )

    assert settlement is None


@pytest.mark.asyncio
async def test_resolve_without_tickets_does_nothing(lottery_service, provisioned):
    lottery = await lottery_service.get_lottery(TEST_GUILD_ID)
    settlement = await lottery_service.resolve_if_due(
        TEST_GUILD_ID, now=lottery.started_at + lottery_service.duration_seconds
    )
    assert settlement is None


@pytest.mark.asyncio
async def test_resolve_pays_pot_and_resets(
    lottery_repository, transaction_service, leaderboard_service, account_repository
):
    service = LotteryService(lottery_repository, transaction_service, rng=FixedDraw(2))
    leaderboard_service.ensure_leaderboard()
    service.ensure_lottery(TEST_GUILD_ID)
    await service.buy_ticket(ALICE, TEST_GUILD_ID)
    await service.buy_ticket(ALICE, TEST_GUILD_ID)
    await service.buy_ticket(BOB, TEST_GUILD_ID)
    lottery = await service.get_lottery(TEST_GUILD_ID)
    now = lottery.started_at + service.duration_seconds

    settlement = await service.resolve_if_due(TEST_GUILD_ID, now=now)

    assert settlement.winner_id == "2"
    assert settlement.amount == Decimal("11.00")
    assert settlement.total_tickets == 3
    assert settlement.new_balance == Decimal("9.00")
    assert account_repository.get("2").transactions[0].comment == "Won the lottery!"

    fresh = lottery_repository.get(lottery_id_for(TEST_GUILD_ID))
    assert fresh.pot == Decimal("5.00")
    assert fresh.tickets == {}
    assert fresh.started_at == now
    assert await service.resolve_if_due(TEST_GUILD_ID, now=now + 1) is None
