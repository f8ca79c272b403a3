"""
Level ladder purchases.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from decimal import Decimal

from config import LOTTERY_LEVEL_INCREMENT
from domain.models.level import MAX_LEVEL, Level, get_level, next_level
from domain.models.lottery import lottery_id_for
from domain.models.money import format_money, to_money
from domain.models.participant import Participant
from repositories.interfaces import ILotteryRepository
from services import error_codes
from services.fanout import WriteBatch, gather_reads
from services.result import Result
from services.transaction_service import TransactionService

logger = logging.getLogger("bucks_bot.services.levels")

LEVEL_INITIATOR = "Level Shop"


@dataclass
class LevelStatus:
    current: Level | None
    next: Level | None
    balance: Decimal
    upper_limit: Decimal
    lower_limit: Decimal

    @property
    def can_afford(self) -> bool:
        return self.next is not None and self.balance >= self.next.cost


@dataclass
class LevelPurchase:
    previous: Level | None
    level: Level
    new_balance: Decimal


class LevelService:
    """Sells the next tier of the level ladder; each tier widens transfer caps."""

    def __init__(
        self,
        lottery_repo: ILotteryRepository,
        transaction_service: TransactionService,
        lottery_increment: float | None = None,
    ):
        self.lottery_repo = lottery_repo
        self.transaction_service = transaction_service
        self.lottery_increment = to_money(
            lottery_increment if lottery_increment is not None else LOTTERY_LEVEL_INCREMENT
        )

    async def describe(self, user: Participant) -> LevelStatus:
        ts = self.transaction_service
        account = await asyncio.to_thread(ts.get_account, user.user_id, user.username)
        upper, lower = ts.caps_for(account)
        return LevelStatus(
            current=get_level(account.level),
            next=next_level(account.level),
            balance=account.balance,
            upper_limit=upper,
            lower_limit=lower,
        )

    async def purchase_next(self, user: Participant, guild_id: str) -> Result[LevelPurchase]:
        ts = self.transaction_service
        account, board, lottery = await gather_reads(
            lambda: ts.get_account(user.user_id, user.username),
            ts.load_leaderboard,
            lambda: self.lottery_repo.require(lottery_id_for(guild_id)),
        )

        if account.level >= MAX_LEVEL:
            return Result.fail("You're already at the highest level.", code=error_codes.MAX_LEVEL_REACHED)
        target = next_level(account.level)
        if account.balance < target.cost:
            return Result.fail(
                f"{target.name} costs {format_money(target.cost)}. "
                f"You have {format_money(account.balance)}.",
                code=error_codes.INSUFFICIENT_FUNDS,
            )

        previous = get_level(account.level)
        now = int(time.time())
        account.level = target.id
        ts.post(account, -target.cost, LEVEL_INITIATOR, f"Purchased {target.name}", now)
        ts.record_standing(board, guild_id, account)
        lottery.add_to_pot(self.lottery_increment)

        batch = WriteBatch("purchase_level")
        batch.add("buyer", ts.account_repo.upsert, account)
        batch.add("leaderboard", ts.leaderboard_repo.upsert, board)
        batch.add("lottery", self.lottery_repo.upsert, lottery)
        await batch.commit()

        logger.info(f"{user.user_id} purchased level {target.id} ({target.name})")
        return Result.ok(LevelPurchase(previous=previous, level=target, new_balance=account.balance))
