"""
Lottery domain model with the weighted ticket draw.
"""

import random
from dataclasses import dataclass, field
from decimal import Decimal

from domain.models.money import to_money

LOTTERY_ID_PREFIX = "lottery|"


def lottery_id_for(guild_id: str) -> str:
    return f"{LOTTERY_ID_PREFIX}{guild_id}"


@dataclass
class Lottery:
    """
    Per-guild lottery.

    Invariant: total_tickets == sum(tickets.values()). Ticket holders are kept
    in first-purchase order so the draw is reproducible for a given random source.
    """

    guild_id: str
    pot: Decimal
    started_at: int
    tickets: dict[str, int] = field(default_factory=dict)
    total_tickets: int = 0

    @property
    def id(self) -> str:
        return lottery_id_for(self.guild_id)

    @classmethod
    def fresh(cls, guild_id: str, seed_jackpot: Decimal, now: int) -> "Lottery":
        return cls(guild_id=guild_id, pot=to_money(seed_jackpot), started_at=now)

    def add_ticket(self, user_id: str, jackpot_increment: Decimal) -> int:
        """Record one ticket for `user_id`; returns that user's new ticket count."""
        self.tickets[user_id] = self.tickets.get(user_id, 0) + 1
        self.total_tickets += 1
        self.add_to_pot(jackpot_increment)
        return self.tickets[user_id]

    def add_to_pot(self, amount: Decimal) -> None:
        self.pot = to_money(self.pot + to_money(amount))

    def draw_winner(self, rng: random.Random | None = None) -> str | None:
        """
        Pick a winner weighted by ticket count.

        Draws an integer in [0, total_tickets) and walks ticket holders in
        insertion order, subtracting each holder's count until the draw falls
        inside one holder's range.
        """
        if self.total_tickets <= 0:
            return None
        rng = rng or random.Random()
        draw = rng.randrange(self.total_tickets)
        for user_id, count in self.tickets.items():
            if draw < count:
                return user_id
            draw -= count
        return None

    def is_due(self, now: int, duration_seconds: int) -> bool:
        return now - self.started_at >= duration_seconds

    def reset(self, seed_jackpot: Decimal, now: int) -> None:
        self.pot = to_money(seed_jackpot)
        self.tickets = {}
        self.total_tickets = 0
        self.started_at = now

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "guild_id": self.guild_id,
            "pot": str(self.pot),
            "started_at": self.started_at,
            "tickets": [[uid, count] for uid, count in self.tickets.items()],
            "total_tickets": self.total_tickets,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "Lottery":
        guild_id = doc.get("guild_id") or doc["id"][len(LOTTERY_ID_PREFIX):]
        return cls(
            guild_id=guild_id,
            pot=to_money(doc.get("pot", "0")),
            started_at=int(doc.get("started_at", 0)),
            tickets={uid: int(count) for uid, count in doc.get("tickets", [])},
            total_tickets=int(doc.get("total_tickets", 0)),
        )
