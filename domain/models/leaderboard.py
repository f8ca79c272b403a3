"""
Leaderboard aggregate: global balance map with per-guild top and bottom lists.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from domain.models.money import to_money

LEADERBOARD_ID = "leaderboard"


def _user_order(user_id: str) -> tuple:
    # Numeric platform ids sort numerically; anything else after them, lexically.
    if user_id.isdigit():
        return (0, int(user_id), "")
    return (1, 0, user_id)


@dataclass
class LeaderboardEntry:
    """One user's standing as last reported to the leaderboard."""

    user_id: str
    username: str
    balance: Decimal
    guilds: set[str] = field(default_factory=set)

    def to_document(self) -> dict:
        return {
            "username": self.username,
            "balance": str(self.balance),
            "guilds": sorted(self.guilds),
        }

    @classmethod
    def from_document(cls, user_id: str, doc: dict) -> "LeaderboardEntry":
        return cls(
            user_id=user_id,
            username=doc.get("username", ""),
            balance=to_money(doc.get("balance", "0")),
            guilds=set(doc.get("guilds", [])),
        )


@dataclass
class Leaderboard:
    """
    Single global leaderboard document.

    `top_by_guild` and `bottom_by_guild` hold ordered user ids and are rebuilt
    from `all_users` for every guild of a user whenever that user is updated.
    Ties on balance are broken by ascending user id.
    """

    all_users: dict[str, LeaderboardEntry] = field(default_factory=dict)
    top_by_guild: dict[str, list[str]] = field(default_factory=dict)
    bottom_by_guild: dict[str, list[str]] = field(default_factory=dict)
    id: str = LEADERBOARD_ID

    def update(
        self,
        guild_id: str,
        user_id: str,
        username: str,
        balance: Decimal,
        size: int = 3,
    ) -> None:
        """Upsert a user's balance, tag guild membership and recompute rankings."""
        entry = self.all_users.get(user_id)
        if entry is None:
            entry = LeaderboardEntry(user_id=user_id, username=username, balance=balance)
            self.all_users[user_id] = entry
        entry.balance = to_money(balance)
        if username:
            entry.username = username
        if guild_id:
            entry.guilds.add(guild_id)

        for gid in entry.guilds:
            self._recompute_guild(gid, size)

    def _recompute_guild(self, guild_id: str, size: int) -> None:
        members = [e for e in self.all_users.values() if guild_id in e.guilds]
        top = sorted(members, key=lambda e: (-e.balance, _user_order(e.user_id)))
        bottom = sorted(members, key=lambda e: (e.balance, _user_order(e.user_id)))
        self.top_by_guild[guild_id] = [e.user_id for e in top[:size]]
        self.bottom_by_guild[guild_id] = [e.user_id for e in bottom[:size]]

    def top(self, guild_id: str) -> list[LeaderboardEntry]:
        return [self.all_users[uid] for uid in self.top_by_guild.get(guild_id, [])]

    def bottom(self, guild_id: str) -> list[LeaderboardEntry]:
        return [self.all_users[uid] for uid in self.bottom_by_guild.get(guild_id, [])]

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "all_users": {uid: e.to_document() for uid, e in self.all_users.items()},
            "top_by_guild": {gid: list(ids) for gid, ids in self.top_by_guild.items()},
            "bottom_by_guild": {gid: list(ids) for gid, ids in self.bottom_by_guild.items()},
        }

    @classmethod
    def from_document(cls, doc: dict) -> "Leaderboard":
        return cls(
            all_users={
                uid: LeaderboardEntry.from_document(uid, e)
                for uid, e in doc.get("all_users", {}).items()
            },
            top_by_guild={gid: list(ids) for gid, ids in doc.get("top_by_guild", {}).items()},
            bottom_by_guild={gid: list(ids) for gid, ids in doc.get("bottom_by_guild", {}).items()},
            id=doc.get("id", LEADERBOARD_ID),
        )
