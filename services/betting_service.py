"""
Handles betting-related business logic.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from decimal import Decimal

from config import (
    BET_MAX_OPTIONS,
    BET_MAX_WAGER,
    BET_MIN_OPTIONS,
    BET_MIN_WAGER,
    LOTTERY_WAGER_INCREMENT,
)
from domain.models.bet import Bet, bet_id_for
from domain.models.lottery import lottery_id_for
from domain.models.money import format_money, parse_amount, to_money
from domain.models.participant import Participant
from repositories.interfaces import IBetRepository, ILotteryRepository
from services import error_codes
from services.fanout import WriteBatch, gather_reads
from services.result import Result
from services.text_filter import clean_text
from services.transaction_service import TransactionService

logger = logging.getLogger("bucks_bot.services.betting")

BET_INITIATOR = "Bet"


@dataclass
class WagerReceipt:
    bet_id: str
    option: str
    amount: Decimal
    option_total: Decimal
    pot: Decimal
    new_balance: Decimal


@dataclass
class BetSettlement:
    bet: Bet
    winning_option: str
    pot: Decimal
    payouts: dict[str, Decimal]

    @property
    def winners(self) -> dict[str, Decimal]:
        return {uid: amount for uid, amount in self.payouts.items() if amount > 0}


class BettingService:
    """
    User-created bets.

    A bet is identified by its normalized reason, so only one bet per reason
    can be open. Each user wagers once; the stake is debited immediately.
    Ending a bet pays each winner their rounded share of the whole pot and
    deletes the bet.
    """

    def __init__(
        self,
        bet_repo: IBetRepository,
        lottery_repo: ILotteryRepository,
        transaction_service: TransactionService,
        min_wager: float | None = None,
        max_wager: float | None = None,
        min_options: int | None = None,
        max_options: int | None = None,
        lottery_increment: float | None = None,
    ):
        self.bet_repo = bet_repo
        self.lottery_repo = lottery_repo
        self.transaction_service = transaction_service
        self.min_wager = to_money(min_wager if min_wager is not None else BET_MIN_WAGER)
        self.max_wager = to_money(max_wager if max_wager is not None else BET_MAX_WAGER)
        self.min_options = min_options if min_options is not None else BET_MIN_OPTIONS
        self.max_options = max_options if max_options is not None else BET_MAX_OPTIONS
        self.lottery_increment = to_money(
            lottery_increment if lottery_increment is not None else LOTTERY_WAGER_INCREMENT
        )

    async def get_bet(self, bet_id: str) -> Bet | None:
        return await asyncio.to_thread(self.bet_repo.get, bet_id)

    async def create_bet(
        self, reason: str | None, owner: Participant, options: list[str]
    ) -> Result[Bet]:
        """Open a new bet with 2-6 distinct, non-empty options."""
        reason = clean_text((reason or "").strip())
        if not reason.strip():
            return Result.fail("Give the bet a reason.", code=error_codes.VALIDATION_ERROR)

        cleaned = [clean_text((o or "").strip()) for o in options]
        if any(not o for o in cleaned):
            return Result.fail("Bet options can't be empty.", code=error_codes.INVALID_OPTION)
        if not self.min_options <= len(cleaned) <= self.max_options:
            return Result.fail(
                f"A bet needs between {self.min_options} and {self.max_options} options.",
                code=error_codes.VALIDATION_ERROR,
            )
        if len({o.casefold() for o in cleaned}) != len(cleaned):
            return Result.fail("Bet options must all be different.", code=error_codes.INVALID_OPTION)

        bet_id = bet_id_for(reason)
        existing = await asyncio.to_thread(self.bet_repo.get, bet_id)
        if existing is not None:
            return Result.fail(
                "A bet with that reason is already open. End it or pick a different reason.",
                code=error_codes.BET_EXISTS,
            )

        bet = Bet.create(reason, owner.user_id, owner.username, cleaned, int(time.time()))
        await asyncio.to_thread(self.bet_repo.upsert, bet)
        logger.info(f"{owner.user_id} opened bet {bet.id} with {len(cleaned)} options")
        return Result.ok(bet)

    async def place_wager(
        self, bet_id: str, user: Participant, option: str, amount, guild_id: str
    ) -> Result[WagerReceipt]:
        try:
            amount = parse_amount(amount)
        except ValueError:
            amount = None
        if amount is None or amount < self.min_wager or amount > self.max_wager:
            return Result.fail(
                f"Wager must be between {format_money(self.min_wager)} and "
                f"{format_money(self.max_wager)}.",
                code=error_codes.INVALID_AMOUNT,
            )

        ts = self.transaction_service
        bet, account, board, lottery = await gather_reads(
            lambda: self.bet_repo.get(bet_id),
            lambda: ts.get_account(user.user_id, user.username),
            ts.load_leaderboard,
            lambda: self.lottery_repo.require(lottery_id_for(guild_id)),
        )
        if bet is None:
            return Result.fail("That bet has already ended.", code=error_codes.BET_NOT_FOUND)
        if option not in bet.options:
            return Result.fail(
                f"Pick one of: {', '.join(bet.option_names())}.", code=error_codes.INVALID_OPTION
            )
        if bet.has_wagered(user.user_id):
            return Result.fail(
                "You already placed a wager on this bet.", code=error_codes.ALREADY_WAGERED
            )

        now = int(time.time())
        bet.add_wager(user.user_id, user.username, option, amount)
        ts.post(account, -amount, BET_INITIATOR, f"Wagered on {option}: {bet.reason}", now)
        ts.record_standing(board, guild_id, account)
        lottery.add_to_pot(self.lottery_increment)

        batch = WriteBatch("place_wager")
        batch.add("bet", self.bet_repo.upsert, bet)
        batch.add("bettor", ts.account_repo.upsert, account)
        batch.add("leaderboard", ts.leaderboard_repo.upsert, board)
        batch.add("lottery", self.lottery_repo.upsert, lottery)
        await batch.commit()

        logger.info(f"{user.user_id} wagered {amount} on '{option}' in bet {bet.id}")
        return Result.ok(
            WagerReceipt(
                bet_id=bet.id,
                option=option,
                amount=amount,
                option_total=bet.options[option].total,
                pot=bet.pot,
                new_balance=account.balance,
            )
        )

    async def settle(
        self, reason: str, winning_option: str, caller: Participant, guild_id: str
    ) -> Result[BetSettlement]:
        """
        End a bet, pay the winners and delete it.

        Only the bet's owner or a privileged user may end it. Writes are best
        effort: a failed payout write is logged and the rest still land.
        """
        bet_id = bet_id_for(clean_text((reason or "").strip()))
        bet = await asyncio.to_thread(self.bet_repo.get, bet_id)
        if bet is None:
            return Result.fail(
                "No open bet with that reason. Check the spelling.", code=error_codes.BET_NOT_FOUND
            )

        ts = self.transaction_service
        if caller.user_id != bet.owner_id and not ts.owner_policy.is_privileged(caller.user_id):
            return Result.fail(
                f"Only {bet.owner_name or 'the bet owner'} can end this bet.",
                code=error_codes.NOT_BET_OWNER,
            )

        wanted = (winning_option or "").strip().casefold()
        winner = next((name for name in bet.options if name.casefold() == wanted), None)
        if winner is None:
            return Result.fail(
                f"Winning option must be one of: {', '.join(bet.option_names())}.",
                code=error_codes.INVALID_OPTION,
            )

        payouts = bet.compute_payouts(winner)
        pot = bet.pot
        paid = [uid for uid, amount in payouts.items() if amount > 0]
        loaded = await gather_reads(
            ts.load_leaderboard,
            *(lambda uid=uid: ts.get_account(uid, bet.wagers[uid].username) for uid in paid),
        )
        board, accounts = loaded[0], loaded[1:]

        now = int(time.time())
        batch = WriteBatch("settle_bet")
        for account in accounts:
            ts.post(account, payouts[account.user_id], BET_INITIATOR, f"Won the bet: {bet.reason}", now)
            ts.record_standing(board, guild_id, account)
            batch.add(f"winner:{account.user_id}", ts.account_repo.upsert, account)
        batch.add("leaderboard", ts.leaderboard_repo.upsert, board)
        batch.add("bet", self.bet_repo.delete, bet.id)
        await batch.commit(raise_on_failure=False)

        logger.info(f"Bet {bet.id} settled on '{winner}': {len(paid)} winner(s), pot {pot}")
        return Result.ok(BetSettlement(bet=bet, winning_option=winner, pot=pot, payouts=payouts))
