"""
Lottery service: ticket purchases and the daily weighted draw.
"""

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from decimal import Decimal

from config import (
    LOTTERY_DURATION_SECONDS,
    LOTTERY_MIN_BALANCE,
    LOTTERY_SEED_JACKPOT,
    LOTTERY_TICKET_JACKPOT_INCREMENT,
    LOTTERY_TICKET_PRICE,
)
from domain.models.lottery import Lottery, lottery_id_for
from domain.models.money import format_money, to_money
from domain.models.participant import Participant
from repositories.interfaces import ILotteryRepository
from services import error_codes
from services.fanout import WriteBatch, gather_reads
from services.result import Result
from services.transaction_service import TransactionService

logger = logging.getLogger("bucks_bot.services.lottery")

LOTTERY_INITIATOR = "Lottery"


@dataclass
class TicketPurchase:
    ticket_count: int
    total_tickets: int
    pot: Decimal
    new_balance: Decimal


@dataclass
class LotterySettlement:
    guild_id: str
    winner_id: str
    winner_name: str
    amount: Decimal
    new_balance: Decimal
    total_tickets: int


class LotteryService:
    """
    Per-guild lottery.

    Tickets cost a fixed price and grow the pot. Once the lottery has run for
    its duration the next completed command draws a winner weighted by ticket
    count, credits the whole pot and starts a fresh lottery.
    """

    def __init__(
        self,
        lottery_repo: ILotteryRepository,
        transaction_service: TransactionService,
        seed_jackpot: float | None = None,
        ticket_price: float | None = None,
        jackpot_increment: float | None = None,
        min_balance: float | None = None,
        duration_seconds: int | None = None,
        rng: random.Random | None = None,
    ):
        self.lottery_repo = lottery_repo
        self.transaction_service = transaction_service
        self.seed_jackpot = to_money(seed_jackpot if seed_jackpot is not None else LOTTERY_SEED_JACKPOT)
        self.ticket_price = to_money(ticket_price if ticket_price is not None else LOTTERY_TICKET_PRICE)
        self.jackpot_increment = to_money(
            jackpot_increment if jackpot_increment is not None else LOTTERY_TICKET_JACKPOT_INCREMENT
        )
        self.min_balance = to_money(min_balance if min_balance is not None else LOTTERY_MIN_BALANCE)
        self.duration_seconds = (
            duration_seconds if duration_seconds is not None else LOTTERY_DURATION_SECONDS
        )
        self.rng = rng or random.Random()

    def ensure_lottery(self, guild_id: str) -> Lottery:
        """Create the guild's lottery if it does not exist yet."""
        lottery = self.lottery_repo.get(lottery_id_for(guild_id))
        if lottery is None:
            logger.info(f"Provisioning lottery for guild {guild_id}")
            lottery = Lottery.fresh(guild_id, self.seed_jackpot, int(time.time()))
            self.lottery_repo.upsert(lottery)
        return lottery

    async def get_lottery(self, guild_id: str) -> Lottery:
        return await asyncio.to_thread(self.lottery_repo.require, lottery_id_for(guild_id))

    async def buy_ticket(self, buyer: Participant, guild_id: str) -> Result[TicketPurchase]:
        ts = self.transaction_service
        account, board, lottery = await gather_reads(
            lambda: ts.get_account(buyer.user_id, buyer.username),
            ts.load_leaderboard,
            lambda: self.lottery_repo.require(lottery_id_for(guild_id)),
        )

        if account.balance < self.min_balance:
            return Result.fail(
                f"You need a balance of at least {format_money(self.min_balance)} to buy a ticket. "
                f"You have {format_money(account.balance)}.",
                code=error_codes.INSUFFICIENT_FUNDS,
            )

        now = int(time.time())
        count = lottery.add_ticket(buyer.user_id, self.jackpot_increment)
        ts.post(account, -self.ticket_price, LOTTERY_INITIATOR, "Bought a lottery ticket", now)
        ts.record_standing(board, guild_id, account)

        batch = WriteBatch("buy_ticket")
        batch.add("buyer", ts.account_repo.upsert, account)
        batch.add("leaderboard", ts.leaderboard_repo.upsert, board)
        batch.add("lottery", self.lottery_repo.upsert, lottery)
        await batch.commit()

        logger.info(f"{buyer.user_id} bought lottery ticket #{count} in guild {guild_id}")
        return Result.ok(
            TicketPurchase(
                ticket_count=count,
                total_tickets=lottery.total_tickets,
                pot=lottery.pot,
                new_balance=account.balance,
            )
        )

    async def resolve_if_due(self, guild_id: str, now: int | None = None) -> LotterySettlement | None:
        """
        Pay out and reset the guild lottery if its duration has elapsed.

        Returns None when the lottery is not due or has no tickets. Payout and
        reset writes are best effort: failures are logged, not raised.
        """
        now = now if now is not None else int(time.time())
        lottery = await asyncio.to_thread(self.lottery_repo.require, lottery_id_for(guild_id))
        if not lottery.is_due(now, self.duration_seconds):
            return None

        winner_id = lottery.draw_winner(self.rng)
        if winner_id is None:
            return None

        ts = self.transaction_service
        account, board = await gather_reads(
            lambda: ts.get_account(winner_id),
            ts.load_leaderboard,
        )
        amount = lottery.pot
        total_tickets = lottery.total_tickets
        ts.post(account, amount, LOTTERY_INITIATOR, "Won the lottery!", now)
        ts.record_standing(board, guild_id, account)
        lottery.reset(self.seed_jackpot, now)

        batch = WriteBatch("resolve_lottery")
        batch.add("winner", ts.account_repo.upsert, account)
        batch.add("leaderboard", ts.leaderboard_repo.upsert, board)
        batch.add("lottery", self.lottery_repo.upsert, lottery)
        await batch.commit(raise_on_failure=False)

        logger.info(f"Lottery in guild {guild_id} won by {winner_id} for {amount}")
        return LotterySettlement(
            guild_id=guild_id,
            winner_id=winner_id,
            winner_name=account.username,
            amount=amount,
            new_balance=account.balance,
            total_tickets=total_tickets,
        )
