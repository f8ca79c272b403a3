"""
Pytest fixtures for tests.

Schema creation runs once per session into a template database; each test
copies the template instead of re-initializing.

Import TEST_GUILD_ID from here instead of defining it locally.
"""

import random
import shutil

import pytest

from domain.models.participant import Participant
from infrastructure.schema_manager import SchemaManager
from repositories.account_repository import AccountRepository
from repositories.bet_repository import BetRepository
from repositories.cancel_ticket_repository import CancelTicketRepository
from repositories.leaderboard_repository import LeaderboardRepository
from repositories.lottery_repository import LotteryRepository
from services.betting_service import BettingService
from services.cancel_service import CancelService
from services.leaderboard_service import LeaderboardService
from services.level_service import LevelService
from services.lottery_service import LotteryService
from services.permissions import OwnerPolicy
from services.transaction_service import TransactionService


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

TEST_GUILD_ID = "12345"
"""Standard guild key for single-guild tests."""

TEST_GUILD_ID_SECONDARY = "67890"
"""Secondary guild key for multi-guild isolation tests."""

OWNER_ID = 999
"""Configured owner identity for privileged-path tests."""


def make_participant(user_id, username=None) -> Participant:
    return Participant(user_id=str(user_id), username=username or f"User{user_id}")


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """Create a schema template database once per test session."""
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    SchemaManager(template_path).initialize()
    yield template_path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """Temporary database with initialized schema (file copy of the template)."""
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


@pytest.fixture
def account_repository(repo_db_path):
    return AccountRepository(repo_db_path)


@pytest.fixture
def leaderboard_repository(repo_db_path):
    return LeaderboardRepository(repo_db_path)


@pytest.fixture
def lottery_repository(repo_db_path):
    return LotteryRepository(repo_db_path)


@pytest.fixture
def bet_repository(repo_db_path):
    return BetRepository(repo_db_path)


@pytest.fixture
def cancel_ticket_repository(repo_db_path):
    return CancelTicketRepository(repo_db_path)


@pytest.fixture
def owner_policy():
    return OwnerPolicy(owner_id=OWNER_ID)


@pytest.fixture
def transaction_service(account_repository, leaderboard_repository, lottery_repository, owner_policy):
    return TransactionService(
        account_repo=account_repository,
        leaderboard_repo=leaderboard_repository,
        lottery_repo=lottery_repository,
        owner_policy=owner_policy,
    )


@pytest.fixture
def leaderboard_service(leaderboard_repository):
    return LeaderboardService(leaderboard_repository)


@pytest.fixture
def lottery_service(lottery_repository, transaction_service):
    return LotteryService(
        lottery_repo=lottery_repository,
        transaction_service=transaction_service,
        rng=random.Random(7),
    )


@pytest.fixture
def provisioned(leaderboard_service, lottery_service):
    """Create the leaderboard and the test guild lottery, as startup does."""
    leaderboard_service.ensure_leaderboard()
    lottery_service.ensure_lottery(TEST_GUILD_ID)
    return TEST_GUILD_ID


@pytest.fixture
def betting_service(bet_repository, lottery_repository, transaction_service):
    return BettingService(
        bet_repo=bet_repository,
        lottery_repo=lottery_repository,
        transaction_service=transaction_service,
    )


@pytest.fixture
def level_service(lottery_repository, transaction_service):
    return LevelService(lottery_repo=lottery_repository, transaction_service=transaction_service)


@pytest.fixture
def cancel_service(cancel_ticket_repository, transaction_service):
    return CancelService(
        ticket_repo=cancel_ticket_repository,
        transaction_service=transaction_service,
    )


@pytest.fixture
def fund(transaction_service, account_repository):
    """Seed a balance directly, bypassing transfer rules."""

    def _fund(user_id, amount, username=None):
        account = transaction_service.get_account(str(user_id), username or f"User{user_id}")
        transaction_service.post(account, amount, "Test", "seed", 1)
        account_repository.upsert(account)
        return account

    return _fund
