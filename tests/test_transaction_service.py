"""
Tests for TransactionService peer transfers against a real SQLite store.
"""

from decimal import Decimal

import pytest

from domain.models.lottery import lottery_id_for
from domain.models.money import MAX_AMOUNT, format_money
from repositories.base_repository import MissingDocumentError
from services import error_codes
from services.transaction_service import TransferKind
from tests.conftest import OWNER_ID, TEST_GUILD_ID, make_participant

ALICE = make_participant(1, "Alice")
BOB = make_participant(2, "Bob")
OWNER = make_participant(OWNER_ID, "Owner")


@pytest.fixture
def clock(monkeypatch):
    """Controllable wall clock for the transaction service."""
    now = {"value": 1_700_000_000}
    monkeypatch.setattr("services.transaction_service.time.time", lambda: now["value"])
    return now


@pytest.mark.asyncio
async def test_give_changes_balance_by_exact_amount(transaction_service, provisioned, clock):
    result = await transaction_service.transfer(
        ALICE, BOB, 2.5, "great play", TransferKind.GIVE, TEST_GUILD_ID
    )

    assert result.success
    receipt = result.value
    assert receipt.amount == Decimal("2.50")
    assert receipt.new_balance == Decimal("2.50")
    assert receipt.transaction.initiator == "Alice"
    assert receipt.transaction.comment == "great play"

    stored = transaction_service.account_repo.get("2")
    assert stored.balance == Decimal("2.50")
    assert stored.transactions[0].amount == Decimal("2.50")


@pytest.mark.asyncio
async def test_take_debits_target(transaction_service, provisioned, clock):
    result = await transaction_service.transfer(ALICE, BOB, -3, None, TransferKind.TAKE, TEST_GUILD_ID)
    assert result.success
    assert transaction_service.account_repo.get("2").balance == Decimal("-3.00")


@pytest.mark.asyncio
async def test_transfer_updates_leaderboard_and_lottery(
    transaction_service, provisioned, clock, lottery_repository, leaderboard_service
):
    before = lottery_repository.get(lottery_id_for(TEST_GUILD_ID)).pot

    await transaction_service.transfer(ALICE, BOB, 4, None, TransferKind.GIVE, TEST_GUILD_ID)

    after = lottery_repository.get(lottery_id_for(TEST_GUILD_ID)).pot
    assert after - before == Decimal("1.00")
    top = await leaderboard_service.get_top(TEST_GUILD_ID)
    assert [(e.user_id, e.balance) for e in top] == [("2", Decimal("4.00"))]


@pytest.mark.asyncio
async def test_actor_account_is_created_lazily(transaction_service, provisioned, clock):
    await transaction_service.transfer(ALICE, BOB, 1, None, TransferKind.GIVE, TEST_GUILD_ID)

    actor = transaction_service.account_repo.get("1")
    assert actor is not None
    assert actor.balance == Decimal("0.00")
    assert actor.last_interaction == {"2": clock["value"]}


@pytest.mark.asyncio
async def test_repeat_transfer_is_rate_limited(transaction_service, provisioned, clock):
    first = await transaction_service.transfer(ALICE, BOB, 1, None, TransferKind.GIVE, TEST_GUILD_ID)
    assert first.success

    clock["value"] += 60
    second = await transaction_service.transfer(ALICE, BOB, 1, None, TransferKind.TAKE, TEST_GUILD_ID)

    assert not second.success
    assert second.error_code == error_codes.RATE_LIMITED
    assert second.detail["retry_after_minutes"] == 4
    assert transaction_service.account_repo.get("2").balance == Decimal("1.00")


@pytest.mark.asyncio
async def test_cooldown_boundary_is_accepted(transaction_service, provisioned, clock):
    await transaction_service.transfer(ALICE, BOB, 1, None, TransferKind.GIVE, TEST_GUILD_ID)

    clock["value"] += transaction_service.cooldown_seconds
    result = await transaction_service.transfer(ALICE, BOB, 1, None, TransferKind.GIVE, TEST_GUILD_ID)

    assert result.success
    assert result.value.new_balance == Decimal("2.00")


@pytest.mark.asyncio
async def test_cooldown_is_per_target(transaction_service, provisioned, clock):
    carol = make_participant(3, "Carol")
    await transaction_service.transfer(ALICE, BOB, 1, None, TransferKind.GIVE, TEST_GUILD_ID)
    result = await transaction_service.transfer(ALICE, carol, 1, None, TransferKind.GIVE, TEST_GUILD_ID)
    assert result.success


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "amount,kind",
    [
        (10.01, TransferKind.GIVE),
        (0, TransferKind.GIVE),
        (-1, TransferKind.GIVE),
        (-5.01, TransferKind.TAKE),
        (1, TransferKind.TAKE),
    ],
)
async def test_out_of_range_amounts_are_rejected(transaction_service, provisioned, clock, amount, kind):
    result = await transaction_service.transfer(ALICE, BOB, amount, None, kind, TEST_GUILD_ID)

    assert not result.success
    assert result.error_code == error_codes.INVALID_AMOUNT
    assert transaction_service.account_repo.get("2") is None


@pytest.mark.asyncio
async def test_non_numeric_amount_is_rejected(transaction_service, provisioned, clock):
    result = await transaction_service.transfer(ALICE, BOB, "lots", None, TransferKind.GIVE, TEST_GUILD_ID)
    assert result.error_code == error_codes.INVALID_AMOUNT


@pytest.mark.asyncio
async def test_caps_widen_with_level(transaction_service, provisioned, clock, account_repository):
    actor = transaction_service.get_account("1", "Alice")
    actor.level = 11
    account_repository.upsert(actor)

    result = await transaction_service.transfer(ALICE, BOB, 20, None, TransferKind.GIVE, TEST_GUILD_ID)

    assert result.success


@pytest.mark.asyncio
async def test_missing_target_is_rejected(transaction_service, provisioned, clock):
    result = await transaction_service.transfer(ALICE, None, 1, None, TransferKind.GIVE, TEST_GUILD_ID)
    assert result.error_code == error_codes.TARGET_UNRESOLVABLE


@pytest.mark.asyncio
async def test_self_transfer_is_forbidden(transaction_service, provisioned, clock):
    result = await transaction_service.transfer(ALICE, ALICE, 1, None, TransferKind.GIVE, TEST_GUILD_ID)
    assert result.error_code == error_codes.SELF_TARGET_FORBIDDEN
    assert transaction_service.account_repo.get("1") is None


@pytest.mark.asyncio
async def test_owner_may_target_self_without_limits(transaction_service, provisioned, clock):
    first = await transaction_service.transfer(OWNER, OWNER, 500, None, TransferKind.GIVE, TEST_GUILD_ID)
    second = await transaction_service.transfer(OWNER, OWNER, -50, None, TransferKind.TAKE, TEST_GUILD_ID)

    assert first.success and second.success
    assert transaction_service.account_repo.get(str(OWNER_ID)).balance == Decimal("450.00")


@pytest.mark.asyncio
async def test_owner_still_needs_correct_sign(transaction_service, provisioned, clock):
    result = await transaction_service.transfer(OWNER, BOB, -5, None, TransferKind.GIVE, TEST_GUILD_ID)
    assert result.error_code == error_codes.INVALID_AMOUNT


@pytest.mark.asyncio
async def test_reason_is_truncated(transaction_service, provisioned, clock):
    result = await transaction_service.transfer(ALICE, BOB, 1, "x" * 500, TransferKind.GIVE, TEST_GUILD_ID)
    assert len(result.value.transaction.comment) == 200


@pytest.mark.asyncio
async def test_reason_is_censored_before_storage(transaction_service, provisioned, clock, account_repository):
    result = await transaction_service.transfer(ALICE, BOB, 1, "you shit", TransferKind.GIVE, TEST_GUILD_ID)

    assert result.value.transaction.comment == "you ****"
    assert account_repository.get("2").transactions[0].comment == "you ****"


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [1e30, "1e30", "-1e30"])
async def test_huge_amounts_are_rejected_with_range(transaction_service, provisioned, clock, amount):
    result = await transaction_service.transfer(ALICE, BOB, amount, None, TransferKind.GIVE, TEST_GUILD_ID)

    assert result.error_code == error_codes.INVALID_AMOUNT
    assert result.detail["high"] == MAX_AMOUNT
    assert format_money(MAX_AMOUNT) in result.error


@pytest.mark.asyncio
async def test_owner_huge_gift_is_rejected_not_raised(transaction_service, provisioned, clock):
    result = await transaction_service.transfer(OWNER, BOB, 1e30, None, TransferKind.GIVE, TEST_GUILD_ID)

    assert result.error_code == error_codes.INVALID_AMOUNT
    assert transaction_service.account_repo.get("2") is None


@pytest.mark.asyncio
async def test_missing_lottery_raises(transaction_service, leaderboard_service, clock):
    leaderboard_service.ensure_leaderboard()

    with pytest.raises(MissingDocumentError):
        await transaction_service.transfer(ALICE, BOB, 1, None, TransferKind.GIVE, "unprovisioned")


@pytest.mark.asyncio
async def test_balance_and_history_reads_persist_new_accounts(transaction_service):
    balance = await transaction_service.get_balance(ALICE)
    history = await transaction_service.get_transactions(ALICE)

    assert balance == Decimal("0.00")
    assert history == []
    assert transaction_service.account_repo.get("1").username == "Alice"
