"""
Shared formatting helpers.
"""

from decimal import Decimal

from domain.models.money import format_money
from domain.models.participant import Participant

BUCKS_EMOTE = "💵"


def format_signed(amount: Decimal) -> str:
    """Money with an explicit sign, e.g. +$2.00 / -$1.50."""
    return f"+{format_money(amount)}" if amount > 0 else format_money(amount)


def format_relative_time(timestamp: int) -> str:
    """Discord relative timestamp markup."""
    return f"<t:{int(timestamp)}:R>"


def mention(user_id: str | int) -> str:
    return f"<@{user_id}>"


def to_participant(user) -> Participant:
    """Resolve a Discord user/member to the identity services work with."""
    return Participant(user_id=str(user.id), username=getattr(user, "display_name", None) or user.name)
