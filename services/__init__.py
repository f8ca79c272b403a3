"""
Application services layer.

Services orchestrate business operations using repositories and domain models.
"""

from services.betting_service import BettingService
from services.cancel_service import CancelService
from services.fanout import PartialWriteError, WriteBatch
from services.leaderboard_service import LeaderboardService
from services.level_service import LevelService
from services.lottery_service import LotteryService
from services.permissions import OwnerPolicy

# Result type for consistent error handling
from services.result import Result
from services.transaction_service import TransactionService, TransferKind

__all__ = [
    "BettingService",
    "CancelService",
    "LeaderboardService",
    "LevelService",
    "LotteryService",
    "OwnerPolicy",
    "PartialWriteError",
    "Result",
    "TransactionService",
    "TransferKind",
    "WriteBatch",
]
