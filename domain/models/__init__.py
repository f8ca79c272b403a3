"""
Domain models - pure data structures representing business entities.
"""

from domain.models.account import Transaction, UserAccount
from domain.models.bet import Bet, BetOption, Wager
from domain.models.cancel_ticket import CancelTicket, TicketStatus
from domain.models.leaderboard import Leaderboard, LeaderboardEntry
from domain.models.level import LEVELS, Level
from domain.models.lottery import Lottery
from domain.models.participant import Participant

__all__ = [
    "Bet",
    "BetOption",
    "CancelTicket",
    "LEVELS",
    "Leaderboard",
    "LeaderboardEntry",
    "Level",
    "Lottery",
    "Participant",
    "TicketStatus",
    "Transaction",
    "UserAccount",
    "Wager",
]
