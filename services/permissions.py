"""
Permission checking utilities for the bot.
"""

from dataclasses import dataclass, field


@dataclass
class OwnerPolicy:
    """
    Privileged identities injected into services.

    The owner (and any allowlisted admin) bypasses transfer cooldowns,
    magnitude caps and the self-target rule, and may end any bet.
    """

    owner_id: int | None = None
    admin_user_ids: set[int] = field(default_factory=set)

    def is_privileged(self, user_id: int | str | None) -> bool:
        if user_id is None:
            return False
        try:
            uid = int(user_id)
        except (TypeError, ValueError):
            return False
        if self.owner_id is not None and uid == self.owner_id:
            return True
        return uid in self.admin_user_ids
