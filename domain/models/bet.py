"""
Bet domain model: content-addressed wager event with a parimutuel payout.
"""

import hashlib
import uuid
from dataclasses import dataclass, field
from decimal import Decimal

from domain.models.money import ZERO, round_ratio, to_money


def normalize_reason(reason: str) -> str:
    """Identity form of a bet reason: surrounding whitespace stripped, case-folded."""
    return reason.strip().casefold()


def bet_id_for(reason: str) -> str:
    """UUID built from the first 16 bytes of SHA-256 over the normalized reason."""
    digest = hashlib.sha256(normalize_reason(reason).encode("utf-8")).digest()
    return str(uuid.UUID(bytes=digest[:16]))


@dataclass
class BetOption:
    total: Decimal = ZERO
    voters: set[str] = field(default_factory=set)


@dataclass
class Wager:
    amount: Decimal
    option: str
    username: str = ""


@dataclass
class Bet:
    """
    An open bet.

    Options are fixed at creation. Each user may wager once; the option
    total always equals the sum of wagers placed on it.
    """

    id: str
    reason: str
    owner_id: str
    owner_name: str
    options: dict[str, BetOption]
    wagers: dict[str, Wager] = field(default_factory=dict)
    created_at: int = 0

    @classmethod
    def create(
        cls, reason: str, owner_id: str, owner_name: str, option_names: list[str], now: int
    ) -> "Bet":
        return cls(
            id=bet_id_for(reason),
            reason=reason.strip(),
            owner_id=owner_id,
            owner_name=owner_name,
            options={name: BetOption() for name in option_names},
            created_at=now,
        )

    @property
    def pot(self) -> Decimal:
        return to_money(sum((o.total for o in self.options.values()), ZERO))

    def option_names(self) -> list[str]:
        return list(self.options)

    def has_wagered(self, user_id: str) -> bool:
        return user_id in self.wagers

    def add_wager(self, user_id: str, username: str, option: str, amount: Decimal) -> None:
        if option not in self.options:
            raise KeyError(option)
        if user_id in self.wagers:
            raise ValueError(f"User {user_id} already wagered on this bet")
        amount = to_money(amount)
        self.wagers[user_id] = Wager(amount=amount, option=option, username=username)
        chosen = self.options[option]
        chosen.total = to_money(chosen.total + amount)
        chosen.voters.add(user_id)

    def compute_payouts(self, winning_option: str) -> dict[str, Decimal]:
        """
        Payout per wagering user; losers map to zero.

        Each winner's share of the winning option is rounded to two places
        before it is multiplied by the whole pot, so payouts need not sum
        exactly to the pot.
        """
        if winning_option not in self.options:
            raise KeyError(winning_option)
        winning_total = self.options[winning_option].total
        pot = self.pot
        payouts: dict[str, Decimal] = {}
        for user_id, wager in self.wagers.items():
            if wager.option != winning_option or winning_total <= 0:
                payouts[user_id] = ZERO
                continue
            share = round_ratio(wager.amount, winning_total)
            payouts[user_id] = to_money(share * pot)
        return payouts

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "reason": self.reason,
            "owner_id": self.owner_id,
            "owner_name": self.owner_name,
            "created_at": self.created_at,
            "options": [
                [name, {"total": str(o.total), "voters": sorted(o.voters)}]
                for name, o in self.options.items()
            ],
            "wagers": {
                uid: {"amount": str(w.amount), "option": w.option, "username": w.username}
                for uid, w in self.wagers.items()
            },
        }

    @classmethod
    def from_document(cls, doc: dict) -> "Bet":
        return cls(
            id=doc["id"],
            reason=doc["reason"],
            owner_id=doc["owner_id"],
            owner_name=doc.get("owner_name", ""),
            created_at=int(doc.get("created_at", 0)),
            options={
                name: BetOption(total=to_money(o["total"]), voters=set(o.get("voters", [])))
                for name, o in doc.get("options", [])
            },
            wagers={
                uid: Wager(amount=to_money(w["amount"]), option=w["option"], username=w.get("username", ""))
                for uid, w in doc.get("wagers", {}).items()
            },
        )
