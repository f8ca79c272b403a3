"""
Transaction engine: validated peer transfers and system-initiated postings.
"""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from config import (
    GIVE_CAP,
    HISTORY_LIMIT,
    LEADERBOARD_SIZE,
    LOTTERY_TRANSFER_INCREMENT,
    TAKE_CAP,
    TRANSFER_COOLDOWN_SECONDS,
)
from domain.models.account import Transaction, UserAccount
from domain.models.leaderboard import LEADERBOARD_ID, Leaderboard
from domain.models.level import transfer_caps
from domain.models.lottery import lottery_id_for
from domain.models.money import CENT, MAX_AMOUNT, format_money, parse_amount, to_money
from domain.models.participant import Participant
from repositories.interfaces import IAccountRepository, ILeaderboardRepository, ILotteryRepository
from services import error_codes
from services.fanout import WriteBatch, gather_reads
from services.permissions import OwnerPolicy
from services.result import Result
from services.text_filter import clean_text

logger = logging.getLogger("bucks_bot.services.transactions")


class TransferKind(Enum):
    GIVE = "give"
    TAKE = "take"


@dataclass
class TransferReceipt:
    target_id: str
    target_name: str
    amount: Decimal
    new_balance: Decimal
    transaction: Transaction


class TransactionService:
    """
    Applies balance changes to accounts and keeps the leaderboard in step.

    Peer transfers (give/take) are rate limited per (actor, target) pair and
    capped by the actor's level; privileged identities bypass both. System
    postings (lottery wins, wagers, payouts, level purchases, penalties) skip
    every peer rule.
    """

    def __init__(
        self,
        account_repo: IAccountRepository,
        leaderboard_repo: ILeaderboardRepository,
        lottery_repo: ILotteryRepository,
        owner_policy: OwnerPolicy | None = None,
        cooldown_seconds: int | None = None,
        give_cap: float | None = None,
        take_cap: float | None = None,
        history_limit: int | None = None,
        leaderboard_size: int | None = None,
        lottery_increment: float | None = None,
    ):
        self.account_repo = account_repo
        self.leaderboard_repo = leaderboard_repo
        self.lottery_repo = lottery_repo
        self.owner_policy = owner_policy or OwnerPolicy()
        self.cooldown_seconds = (
            cooldown_seconds if cooldown_seconds is not None else TRANSFER_COOLDOWN_SECONDS
        )
        self.give_cap = to_money(give_cap if give_cap is not None else GIVE_CAP)
        self.take_cap = to_money(take_cap if take_cap is not None else TAKE_CAP)
        self.history_limit = history_limit if history_limit is not None else HISTORY_LIMIT
        self.leaderboard_size = leaderboard_size if leaderboard_size is not None else LEADERBOARD_SIZE
        self.lottery_increment = to_money(
            lottery_increment if lottery_increment is not None else LOTTERY_TRANSFER_INCREMENT
        )

    # =========================================================================
    # Account access
    # =========================================================================

    def get_account(self, user_id: str, username: str = "") -> UserAccount:
        """Load an account, constructing a zero-balance one on a miss (not persisted)."""
        account = self.account_repo.get(user_id)
        if account is None:
            logger.debug(f"Creating account for {user_id}")
            account = UserAccount(user_id=user_id, username=username)
        elif username:
            account.username = username
        return account

    def load_account(self, user_id: str, username: str = "") -> UserAccount:
        """Load an account, persisting it immediately if it did not exist yet."""
        account = self.account_repo.get(user_id)
        if account is None:
            account = UserAccount(user_id=user_id, username=username)
            self.account_repo.upsert(account)
        elif username and account.username != username:
            account.username = username
            self.account_repo.upsert(account)
        return account

    def caps_for(self, account: UserAccount) -> tuple[Decimal, Decimal]:
        return transfer_caps(account.level, self.give_cap, self.take_cap)

    # =========================================================================
    # Posting helpers (no writes; callers batch them)
    # =========================================================================

    def post(
        self, account: UserAccount, amount: Decimal, initiator: str, comment: str, now: int
    ) -> Transaction:
        """Apply a system-initiated delta; no caps or cooldowns."""
        return account.apply(
            amount, initiator, clean_text(comment), now, history_limit=self.history_limit
        )

    def record_standing(self, board: Leaderboard, guild_id: str, account: UserAccount) -> None:
        board.update(
            guild_id, account.user_id, account.username, account.balance, size=self.leaderboard_size
        )

    def load_leaderboard(self) -> Leaderboard:
        return self.leaderboard_repo.require(LEADERBOARD_ID)

    # =========================================================================
    # Peer transfers
    # =========================================================================

    def check_transfer(
        self,
        actor: UserAccount,
        target_id: str,
        amount: Decimal,
        kind: TransferKind,
        now: int,
    ) -> Result | None:
        """Return a failed Result if the transfer breaks a peer rule, else None."""
        privileged = self.owner_policy.is_privileged(actor.user_id)

        if not privileged:
            elapsed = actor.seconds_since_interaction(target_id, now)
            if elapsed is not None and elapsed < self.cooldown_seconds:
                minutes = max(1, math.ceil((self.cooldown_seconds - elapsed) / 60))
                return Result.fail(
                    f"You can only do that once every {self.cooldown_seconds // 60} minutes "
                    f"for the same person. Wait {minutes} more minute(s).",
                    code=error_codes.RATE_LIMITED,
                    retry_after_minutes=minutes,
                )

        upper, lower = self.caps_for(actor)
        if kind is TransferKind.GIVE:
            low, high = CENT, upper
            out_of_range = amount < low or (not privileged and amount > high)
        else:
            low, high = lower, -CENT
            out_of_range = amount > high or (not privileged and amount < low)
        if out_of_range:
            if privileged:
                bound = "at least $0.01" if kind is TransferKind.GIVE else "at most -$0.01"
                message = f"Amount must be {bound}."
            else:
                message = f"Amount must be between {format_money(low)} and {format_money(high)}."
            return Result.fail(message, code=error_codes.INVALID_AMOUNT, low=low, high=high)
        return None

    async def transfer(
        self,
        actor: Participant,
        target: Participant | None,
        amount,
        reason: str | None,
        kind: TransferKind,
        guild_id: str,
    ) -> Result[TransferReceipt]:
        """
        Move bucks onto `target`'s balance on behalf of `actor`.

        Reads the actor, target, leaderboard and guild lottery concurrently,
        validates, mutates in memory, then writes target, leaderboard, lottery
        and (if different) actor concurrently. Raises MissingDocumentError if
        the leaderboard or lottery has not been provisioned, and
        PartialWriteError if any write fails.
        """
        if target is None:
            return Result.fail(
                "Mention a user to send bucks to.", code=error_codes.TARGET_UNRESOLVABLE
            )

        try:
            amount = parse_amount(amount)
        except ValueError:
            return Result.fail(
                f"Amount must be a number between {format_money(-MAX_AMOUNT)} "
                f"and {format_money(MAX_AMOUNT)}.",
                code=error_codes.INVALID_AMOUNT,
                low=-MAX_AMOUNT,
                high=MAX_AMOUNT,
            )

        privileged = self.owner_policy.is_privileged(actor.user_id)
        same_user = actor.user_id == target.user_id
        if same_user and not privileged:
            return Result.fail(
                "You can't give or take bucks from yourself. Mention someone else.",
                code=error_codes.SELF_TARGET_FORBIDDEN,
            )

        comment = clean_text(reason)
        now = int(time.time())

        actor_account, target_account, board, lottery = await gather_reads(
            lambda: self.get_account(actor.user_id, actor.username),
            lambda: None if same_user else self.get_account(target.user_id, target.username),
            self.load_leaderboard,
            lambda: self.lottery_repo.require(lottery_id_for(guild_id)),
        )
        if same_user:
            target_account = actor_account

        rejection = self.check_transfer(actor_account, target.user_id, amount, kind, now)
        if rejection is not None:
            logger.info(
                f"Rejected {kind.value} {amount} from {actor.user_id} to {target.user_id}: "
                f"{rejection.error_code}"
            )
            return rejection

        txn = target_account.apply(
            amount, actor.username, comment, now, history_limit=self.history_limit
        )
        actor_account.record_interaction(target.user_id, now)
        self.record_standing(board, guild_id, target_account)
        lottery.add_to_pot(self.lottery_increment)

        batch = WriteBatch(f"{kind.value}bucks")
        batch.add("target", self.account_repo.upsert, target_account)
        batch.add("leaderboard", self.leaderboard_repo.upsert, board)
        batch.add("lottery", self.lottery_repo.upsert, lottery)
        if not same_user:
            batch.add("actor", self.account_repo.upsert, actor_account)
        await batch.commit()

        logger.info(
            f"{actor.user_id} {kind.value} {amount} -> {target.user_id} "
            f"(balance {target_account.balance})"
        )
        return Result.ok(
            TransferReceipt(
                target_id=target.user_id,
                target_name=target_account.username,
                amount=amount,
                new_balance=target_account.balance,
                transaction=txn,
            )
        )

    # =========================================================================
    # Reporting
    # =========================================================================

    async def get_balance(self, user: Participant) -> Decimal:
        account = await asyncio.to_thread(self.load_account, user.user_id, user.username)
        return account.balance

    async def get_transactions(self, user: Participant) -> list[Transaction]:
        account = await asyncio.to_thread(self.load_account, user.user_id, user.username)
        return list(account.transactions)
