"""
Cancellation ticket domain model.
"""

import hashlib
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from domain.models.money import ZERO, to_money


class TicketStatus(Enum):
    OPEN = "open"
    RESOLVED = "resolved"


def ticket_id_for(initiator_id: str, target_id: str) -> str:
    """UUID built from the first 16 bytes of SHA-512 over initiator id + target id."""
    digest = hashlib.sha512(f"{initiator_id}{target_id}".encode("utf-8")).digest()
    return str(uuid.UUID(bytes=digest[:16]))


def cancellation_penalty(balance: Decimal) -> Decimal:
    """Delta applied to a canceled user: a positive balance goes to zero, a negative one doubles."""
    if balance > 0:
        return to_money(-balance)
    if balance < 0:
        return to_money(balance)
    return ZERO


@dataclass
class CancelTicket:
    """
    A complaint one user opens against another.

    Votes accumulate while the ticket is OPEN. Reaching the vote threshold
    moves it to RESOLVED exactly once; a resolved ticket accepts no votes.
    """

    id: str
    initiator_id: str
    initiator_name: str
    target_id: str
    target_name: str
    description: str
    opened_at: int
    votes: set[str] = field(default_factory=set)
    status: TicketStatus = TicketStatus.OPEN

    @classmethod
    def open(
        cls,
        initiator_id: str,
        initiator_name: str,
        target_id: str,
        target_name: str,
        description: str,
        now: int,
    ) -> "CancelTicket":
        return cls(
            id=ticket_id_for(initiator_id, target_id),
            initiator_id=initiator_id,
            initiator_name=initiator_name,
            target_id=target_id,
            target_name=target_name,
            description=description,
            opened_at=now,
        )

    @property
    def resolved(self) -> bool:
        return self.status is TicketStatus.RESOLVED

    @property
    def display_text(self) -> str:
        return f"{self.initiator_name} vs {self.target_name}: {self.description}"

    def cooldown_remaining(self, now: int, cooldown_seconds: int) -> int:
        """Seconds until another ticket may be opened for this pair (0 if allowed)."""
        return max(0, self.opened_at + cooldown_seconds - now)

    def add_vote(self, voter_id: str) -> bool:
        if self.resolved or voter_id in self.votes:
            return False
        self.votes.add(voter_id)
        return True

    def resolve_if_threshold(self, threshold: int) -> bool:
        """Transition OPEN -> RESOLVED when votes reach the threshold. True only on the transition."""
        if self.resolved or len(self.votes) < threshold:
            return False
        self.status = TicketStatus.RESOLVED
        return True

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "initiator_id": self.initiator_id,
            "initiator_name": self.initiator_name,
            "target_id": self.target_id,
            "target_name": self.target_name,
            "description": self.description,
            "opened_at": self.opened_at,
            "votes": sorted(self.votes),
            "resolved": self.resolved,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "CancelTicket":
        return cls(
            id=doc["id"],
            initiator_id=doc["initiator_id"],
            initiator_name=doc.get("initiator_name", ""),
            target_id=doc["target_id"],
            target_name=doc.get("target_name", ""),
            description=doc.get("description", ""),
            opened_at=int(doc.get("opened_at", 0)),
            votes=set(doc.get("votes", [])),
            status=TicketStatus.RESOLVED if doc.get("resolved") else TicketStatus.OPEN,
        )
