"""
Tests for ServiceContainer wiring and the /info embed.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

from commands.info import build_info_embed
from infrastructure.service_container import ServiceConfig, ServiceContainer
from services.betting_service import BettingService
from services.transaction_service import TransactionService


def test_initialize_wires_services(tmp_path):
    container = ServiceContainer(ServiceConfig(db_path=str(tmp_path / "bucks.db"), admin_user_ids=[5]))

    container.initialize()
    container.initialize()

    assert container.is_initialized
    assert isinstance(container.transaction_service, TransactionService)
    assert isinstance(container.betting_service, BettingService)
    assert container.betting_service.transaction_service is container.transaction_service
    assert container.transaction_service.owner_policy.is_privileged(5)


def test_config_overrides_reach_services(tmp_path):
    container = ServiceContainer(
        ServiceConfig(
            db_path=str(tmp_path / "bucks.db"),
            transfer_cooldown_seconds=60,
            cancel_vote_threshold=2,
            lottery_duration_seconds=10,
        )
    )
    container.initialize()

    assert container.transaction_service.cooldown_seconds == 60
    assert container.cancel_service.vote_threshold == 2
    assert container.lottery_service.duration_seconds == 10


def test_set_owner_is_seen_by_services(tmp_path):
    container = ServiceContainer(ServiceConfig(db_path=str(tmp_path / "bucks.db")))
    container.initialize()
    assert not container.transaction_service.owner_policy.is_privileged(42)

    container.set_owner(42)

    assert container.transaction_service.owner_policy.is_privileged("42")


def test_expose_to_bot(tmp_path):
    container = ServiceContainer(ServiceConfig(db_path=str(tmp_path / "bucks.db")))
    container.initialize()
    bot = SimpleNamespace()

    container.expose_to_bot(bot)

    assert bot.transaction_service is container.transaction_service
    assert bot.leaderboard_service is container.leaderboard_service
    assert bot.lottery_service is container.lottery_service
    assert bot.level_service is container.level_service
    assert bot.cancel_service is container.cancel_service
    assert bot.owner_policy is container.owner_policy


def test_info_embed_lists_commands():
    bot = MagicMock()
    bot.tree.walk_commands.return_value = [
        SimpleNamespace(name="takebucks", description="Take bucks from another user"),
        SimpleNamespace(name="givebucks", description="Give bucks to another user"),
    ]

    embed = build_info_embed(bot)

    names = [f.name for f in embed.fields]
    assert names == ["/givebucks", "/takebucks", "Levels"]
    assert "Galaxy Brain" in embed.fields[-1].value
