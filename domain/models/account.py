"""
User account domain model: balance, capped history and ticket references.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from domain.models.money import ZERO, to_money


@dataclass
class Transaction:
    """A single balance change recorded on an account."""

    initiator: str
    comment: str
    amount: Decimal
    timestamp: int

    def to_document(self) -> dict:
        return {
            "initiator": self.initiator,
            "comment": self.comment,
            "amount": str(self.amount),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_document(cls, doc: dict) -> "Transaction":
        return cls(
            initiator=doc["initiator"],
            comment=doc.get("comment", ""),
            amount=to_money(doc["amount"]),
            timestamp=int(doc["timestamp"]),
        )


def _push_capped(mapping: dict[str, str], key: str, text: str, limit: int) -> None:
    # Insertion order is age order; re-inserting a key moves it to the newest slot.
    mapping.pop(key, None)
    mapping[key] = text
    while len(mapping) > limit:
        del mapping[next(iter(mapping))]


@dataclass
class UserAccount:
    """
    Persistent record of a user's bucks.

    Accounts are created lazily with a zero balance the first time any
    operation references a user, and are never deleted.
    """

    user_id: str
    username: str = ""
    balance: Decimal = ZERO
    last_interaction: dict[str, int] = field(default_factory=dict)
    transactions: list[Transaction] = field(default_factory=list)  # newest first
    level: int = 0
    tickets_against_me: dict[str, str] = field(default_factory=dict)
    tickets_i_opened: dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.user_id

    def apply(
        self,
        amount: Decimal,
        initiator: str,
        comment: str,
        timestamp: int,
        history_limit: int = 10,
    ) -> Transaction:
        """
        Apply a signed delta to the balance and record it in the history.

        History keeps only the newest `history_limit` entries by timestamp;
        older entries are dropped silently.
        """
        amount = to_money(amount)
        self.balance = to_money(self.balance + amount)
        txn = Transaction(initiator=initiator, comment=comment, amount=amount, timestamp=timestamp)
        self.transactions.insert(0, txn)
        # sort is stable, so same-second entries keep newest-first order
        self.transactions.sort(key=lambda t: t.timestamp, reverse=True)
        del self.transactions[history_limit:]
        return txn

    def seconds_since_interaction(self, other_id: str, now: int) -> int | None:
        """Seconds since this account last transferred with `other_id`, or None if never."""
        last = self.last_interaction.get(other_id)
        if last is None:
            return None
        return now - last

    def record_interaction(self, other_id: str, now: int) -> None:
        self.last_interaction[other_id] = now

    def add_ticket_against(self, ticket_id: str, text: str, limit: int = 10) -> None:
        _push_capped(self.tickets_against_me, ticket_id, text, limit)

    def add_ticket_opened(self, ticket_id: str, text: str, limit: int = 10) -> None:
        _push_capped(self.tickets_i_opened, ticket_id, text, limit)

    def to_document(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "balance": str(self.balance),
            "last_interaction": dict(self.last_interaction),
            "transactions": [t.to_document() for t in self.transactions],
            "level": self.level,
            "tickets_against_me": [[k, v] for k, v in self.tickets_against_me.items()],
            "tickets_i_opened": [[k, v] for k, v in self.tickets_i_opened.items()],
        }

    @classmethod
    def from_document(cls, doc: dict) -> "UserAccount":
        return cls(
            user_id=doc["id"],
            username=doc.get("username", ""),
            balance=to_money(doc.get("balance", "0")),
            last_interaction={k: int(v) for k, v in doc.get("last_interaction", {}).items()},
            transactions=[Transaction.from_document(t) for t in doc.get("transactions", [])],
            level=int(doc.get("level", 0)),
            tickets_against_me={k: v for k, v in doc.get("tickets_against_me", [])},
            tickets_i_opened={k: v for k, v in doc.get("tickets_i_opened", [])},
        )
