"""
Service container for dependency injection and initialization.

This module centralizes service creation and wiring so bot.py only has
to build one container and expose it.

Usage:
    container = ServiceContainer(ServiceConfig(db_path="bucks.db"))
    container.initialize()

    transaction_service = container.transaction_service
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from services.betting_service import BettingService
    from services.cancel_service import CancelService
    from services.leaderboard_service import LeaderboardService
    from services.level_service import LevelService
    from services.lottery_service import LotteryService
    from services.transaction_service import TransactionService

from infrastructure.schema_manager import SchemaManager
from repositories.account_repository import AccountRepository
from repositories.bet_repository import BetRepository
from repositories.cancel_ticket_repository import CancelTicketRepository
from repositories.leaderboard_repository import LeaderboardRepository
from repositories.lottery_repository import LotteryRepository
from services.permissions import OwnerPolicy

logger = logging.getLogger("bucks_bot.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    account: AccountRepository | None = None
    leaderboard: LeaderboardRepository | None = None
    lottery: LotteryRepository | None = None
    bet: BetRepository | None = None
    cancel_ticket: CancelTicketRepository | None = None


@dataclass
class ServiceConfig:
    """
    Configuration for service initialization.

    Economy tunables left as None fall back to the values in config.py
    inside each service.
    """

    db_path: str = "bucks.db"
    owner_id: int | None = None
    admin_user_ids: list[int] = field(default_factory=list)

    transfer_cooldown_seconds: int | None = None
    give_cap: float | None = None
    take_cap: float | None = None
    lottery_duration_seconds: int | None = None
    cancel_cooldown_seconds: int | None = None
    cancel_vote_threshold: int | None = None


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection.
    """

    def __init__(self, config: ServiceConfig | None = None):
        self.config = config or ServiceConfig()
        self.owner_policy = OwnerPolicy(
            owner_id=self.config.owner_id, admin_user_ids=set(self.config.admin_user_ids)
        )
        self._initialized = False
        self._repos = RepositoryContainer()
        self._services: dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """
        Initialize schema, repositories and services in dependency order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")
        SchemaManager(self.config.db_path).initialize()
        self._init_repositories()
        self._init_services()
        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_repositories(self) -> None:
        logger.debug("Initializing repositories")
        db_path = self.config.db_path
        self._repos.account = AccountRepository(db_path)
        self._repos.leaderboard = LeaderboardRepository(db_path)
        self._repos.lottery = LotteryRepository(db_path)
        self._repos.bet = BetRepository(db_path)
        self._repos.cancel_ticket = CancelTicketRepository(db_path)

    def _init_services(self) -> None:
        logger.debug("Initializing services")

        from services.betting_service import BettingService
        from services.cancel_service import CancelService
        from services.leaderboard_service import LeaderboardService
        from services.level_service import LevelService
        from services.lottery_service import LotteryService
        from services.transaction_service import TransactionService

        cfg = self.config
        transactions = TransactionService(
            account_repo=self._repos.account,
            leaderboard_repo=self._repos.leaderboard,
            lottery_repo=self._repos.lottery,
            owner_policy=self.owner_policy,
            cooldown_seconds=cfg.transfer_cooldown_seconds,
            give_cap=cfg.give_cap,
            take_cap=cfg.take_cap,
        )
        self._services["transaction"] = transactions
        self._services["leaderboard"] = LeaderboardService(self._repos.leaderboard)
        self._services["lottery"] = LotteryService(
            lottery_repo=self._repos.lottery,
            transaction_service=transactions,
            duration_seconds=cfg.lottery_duration_seconds,
        )
        self._services["betting"] = BettingService(
            bet_repo=self._repos.bet,
            lottery_repo=self._repos.lottery,
            transaction_service=transactions,
        )
        self._services["level"] = LevelService(
            lottery_repo=self._repos.lottery,
            transaction_service=transactions,
        )
        self._services["cancel"] = CancelService(
            ticket_repo=self._repos.cancel_ticket,
            transaction_service=transactions,
            cooldown_seconds=cfg.cancel_cooldown_seconds,
            vote_threshold=cfg.cancel_vote_threshold,
        )

    def set_owner(self, owner_id: int) -> None:
        """Record the owner identity resolved after login (when not configured)."""
        self.owner_policy.owner_id = owner_id
        logger.info(f"Owner identity set to {owner_id}")

    # =========================================================================
    # Service accessors
    # =========================================================================

    @property
    def transaction_service(self) -> "TransactionService | None":
        return self._services.get("transaction")

    @property
    def leaderboard_service(self) -> "LeaderboardService | None":
        return self._services.get("leaderboard")

    @property
    def lottery_service(self) -> "LotteryService | None":
        return self._services.get("lottery")

    @property
    def betting_service(self) -> "BettingService | None":
        return self._services.get("betting")

    @property
    def level_service(self) -> "LevelService | None":
        return self._services.get("level")

    @property
    def cancel_service(self) -> "CancelService | None":
        return self._services.get("cancel")

    def expose_to_bot(self, bot) -> None:
        """
        Expose services on the Discord bot object.

        Command extensions pick them up in their setup() via getattr(bot, ...).
        """
        bot.owner_policy = self.owner_policy
        bot.transaction_service = self.transaction_service
        bot.leaderboard_service = self.leaderboard_service
        bot.lottery_service = self.lottery_service
        bot.betting_service = self.betting_service
        bot.level_service = self.level_service
        bot.cancel_service = self.cancel_service
        logger.info("Services exposed to bot object")
