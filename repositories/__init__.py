"""
Repository layer for data access abstraction.
"""

from repositories.account_repository import AccountRepository
from repositories.base_repository import BaseRepository, MissingDocumentError
from repositories.bet_repository import BetRepository
from repositories.cancel_ticket_repository import CancelTicketRepository
from repositories.interfaces import (
    IAccountRepository,
    IBetRepository,
    ICancelTicketRepository,
    ILeaderboardRepository,
    ILotteryRepository,
)
from repositories.leaderboard_repository import LeaderboardRepository
from repositories.lottery_repository import LotteryRepository

__all__ = [
    "BaseRepository",
    "MissingDocumentError",
    "AccountRepository",
    "LeaderboardRepository",
    "LotteryRepository",
    "BetRepository",
    "CancelTicketRepository",
    "IAccountRepository",
    "ILeaderboardRepository",
    "ILotteryRepository",
    "IBetRepository",
    "ICancelTicketRepository",
]
