"""
Cancellation tickets: complaints with a per-pair cooldown and a vote-driven penalty.
"""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from decimal import Decimal

from config import CANCEL_COOLDOWN_SECONDS, CANCEL_VOTE_THRESHOLD
from domain.models.cancel_ticket import CancelTicket, cancellation_penalty, ticket_id_for
from domain.models.money import ZERO
from domain.models.participant import Participant
from repositories.interfaces import ICancelTicketRepository
from services import error_codes
from services.fanout import WriteBatch, gather_reads
from services.result import Result
from services.text_filter import clean_text
from services.transaction_service import TransactionService

logger = logging.getLogger("bucks_bot.services.cancel")

CANCEL_INITIATOR = "Cancel Culture"


@dataclass
class VoteOutcome:
    ticket: CancelTicket
    votes: int
    threshold: int
    canceled: bool = False
    penalty: Decimal = ZERO
    new_balance: Decimal | None = None


class CancelService:
    """
    Opens cancellation tickets and tallies votes on them.

    One ticket exists per (initiator, target) pair; a new one may replace it
    only after the cooldown. When a ticket collects enough votes it is
    resolved once and the target's balance is penalized.
    """

    def __init__(
        self,
        ticket_repo: ICancelTicketRepository,
        transaction_service: TransactionService,
        cooldown_seconds: int | None = None,
        vote_threshold: int | None = None,
    ):
        self.ticket_repo = ticket_repo
        self.transaction_service = transaction_service
        self.cooldown_seconds = (
            cooldown_seconds if cooldown_seconds is not None else CANCEL_COOLDOWN_SECONDS
        )
        self.vote_threshold = vote_threshold if vote_threshold is not None else CANCEL_VOTE_THRESHOLD

    async def get_ticket(self, ticket_id: str) -> CancelTicket | None:
        return await asyncio.to_thread(self.ticket_repo.get, ticket_id)

    async def open_ticket(
        self, initiator: Participant, target: Participant | None, description: str | None
    ) -> Result[CancelTicket]:
        if target is None:
            return Result.fail("Mention the user you want to cancel.", code=error_codes.TARGET_UNRESOLVABLE)

        description = clean_text((description or "").strip())
        if not description:
            return Result.fail(
                "Say why they should be canceled.", code=error_codes.VALIDATION_ERROR
            )

        ts = self.transaction_service
        same_user = initiator.user_id == target.user_id
        if same_user and not ts.owner_policy.is_privileged(initiator.user_id):
            return Result.fail("You can't cancel yourself.", code=error_codes.SELF_TARGET_FORBIDDEN)

        ticket_id = ticket_id_for(initiator.user_id, target.user_id)
        existing, initiator_account, target_account = await gather_reads(
            lambda: self.ticket_repo.get(ticket_id),
            lambda: ts.get_account(initiator.user_id, initiator.username),
            lambda: None if same_user else ts.get_account(target.user_id, target.username),
        )
        if same_user:
            target_account = initiator_account

        now = int(time.time())
        if existing is not None:
            remaining = existing.cooldown_remaining(now, self.cooldown_seconds)
            if remaining > 0:
                hours = max(1, math.ceil(remaining / 3600))
                return Result.fail(
                    f"You already tried to cancel {target.username}. Try again in {hours} hour(s).",
                    code=error_codes.COOLDOWN_ACTIVE,
                    retry_after_hours=hours,
                )

        ticket = CancelTicket.open(
            initiator.user_id, initiator.username, target.user_id, target.username, description, now
        )
        initiator_account.add_ticket_opened(ticket.id, ticket.display_text)
        target_account.add_ticket_against(ticket.id, ticket.display_text)

        batch = WriteBatch("open_cancel_ticket")
        batch.add("ticket", self.ticket_repo.upsert, ticket)
        batch.add("initiator", ts.account_repo.upsert, initiator_account)
        if not same_user:
            batch.add("target", ts.account_repo.upsert, target_account)
        await batch.commit()

        logger.info(f"{initiator.user_id} opened cancel ticket {ticket.id} against {target.user_id}")
        return Result.ok(ticket)

    async def vote(self, ticket_id: str, voter: Participant, guild_id: str) -> Result[VoteOutcome]:
        """
        Add a vote. Reaching the threshold resolves the ticket and applies the
        penalty exactly once: a positive balance drops to zero, a negative one doubles.
        """
        ticket = await asyncio.to_thread(self.ticket_repo.get, ticket_id)
        if ticket is None:
            return Result.fail("That ticket no longer exists.", code=error_codes.TICKET_NOT_FOUND)
        if ticket.resolved:
            return Result.fail(
                f"{ticket.target_name} has already been canceled.", code=error_codes.TICKET_RESOLVED
            )
        if voter.user_id == ticket.target_id:
            return Result.fail(
                "You can't vote on your own cancellation.", code=error_codes.PERMISSION_DENIED
            )
        if not ticket.add_vote(voter.user_id):
            return Result.fail("You already voted on this ticket.", code=error_codes.ALREADY_VOTED)

        outcome = VoteOutcome(ticket=ticket, votes=len(ticket.votes), threshold=self.vote_threshold)
        batch = WriteBatch("cancel_vote")
        batch.add("ticket", self.ticket_repo.upsert, ticket)

        if ticket.resolve_if_threshold(self.vote_threshold):
            ts = self.transaction_service
            account, board = await gather_reads(
                lambda: ts.get_account(ticket.target_id, ticket.target_name),
                ts.load_leaderboard,
            )
            penalty = cancellation_penalty(account.balance)
            ts.post(account, penalty, CANCEL_INITIATOR, "This person was canceled.", int(time.time()))
            ts.record_standing(board, guild_id, account)
            batch.add("target", ts.account_repo.upsert, account)
            batch.add("leaderboard", ts.leaderboard_repo.upsert, board)
            outcome.canceled = True
            outcome.penalty = penalty
            outcome.new_balance = account.balance
            logger.info(f"{ticket.target_id} canceled via ticket {ticket.id} (penalty {penalty})")

        await batch.commit()
        return Result.ok(outcome)

    async def _load_referenced(self, ticket_ids: list[str]) -> list[CancelTicket]:
        if not ticket_ids:
            return []
        tickets = await gather_reads(
            *(lambda tid=tid: self.ticket_repo.get(tid) for tid in ticket_ids)
        )
        found = [t for t in tickets if t is not None]
        return sorted(found, key=lambda t: t.opened_at, reverse=True)

    async def list_opened(self, user: Participant) -> list[CancelTicket]:
        """Tickets the user opened, newest first."""
        account = await asyncio.to_thread(
            self.transaction_service.get_account, user.user_id, user.username
        )
        return await self._load_referenced(list(account.tickets_i_opened))

    async def list_against(self, user: Participant) -> list[CancelTicket]:
        """Tickets opened against the user, newest first."""
        account = await asyncio.to_thread(
            self.transaction_service.get_account, user.user_id, user.username
        )
        return await self._load_referenced(list(account.tickets_against_me))
