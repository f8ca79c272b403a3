"""
Leaderboard queries and provisioning.
"""

import asyncio
import logging

from domain.models.leaderboard import LEADERBOARD_ID, Leaderboard, LeaderboardEntry
from repositories.interfaces import ILeaderboardRepository

logger = logging.getLogger("bucks_bot.services.leaderboard")

WOKE = "woke"
PROBLEMATIC = "problematic"
NEUTRAL = "neutral"


class LeaderboardService:
    """Read access to per-guild rankings plus first-run creation of the singleton."""

    def __init__(self, leaderboard_repo: ILeaderboardRepository):
        self.leaderboard_repo = leaderboard_repo

    def ensure_leaderboard(self) -> Leaderboard:
        board = self.leaderboard_repo.get(LEADERBOARD_ID)
        if board is None:
            logger.info("Provisioning leaderboard")
            board = Leaderboard()
            self.leaderboard_repo.upsert(board)
        return board

    async def get_top(self, guild_id: str) -> list[LeaderboardEntry]:
        board = await asyncio.to_thread(self.leaderboard_repo.require, LEADERBOARD_ID)
        return board.top(guild_id)

    async def get_bottom(self, guild_id: str) -> list[LeaderboardEntry]:
        board = await asyncio.to_thread(self.leaderboard_repo.require, LEADERBOARD_ID)
        return board.bottom(guild_id)

    async def standing(self, guild_id: str, user_id: str) -> str:
        """'woke' if in the guild's top list, 'problematic' if in the bottom list, else 'neutral'."""
        board = await asyncio.to_thread(self.leaderboard_repo.require, LEADERBOARD_ID)
        if user_id in board.top_by_guild.get(guild_id, []):
            return WOKE
        if user_id in board.bottom_by_guild.get(guild_id, []):
            return PROBLEMATIC
        return NEUTRAL
