"""
Repository for the global leaderboard document.
"""

from domain.models.leaderboard import Leaderboard
from repositories.base_repository import BaseRepository
from repositories.interfaces import ILeaderboardRepository


class LeaderboardRepository(BaseRepository[Leaderboard], ILeaderboardRepository):
    collection = "leaderboards"

    def _to_document(self, value: Leaderboard) -> dict:
        return value.to_document()

    def _from_document(self, doc: dict) -> Leaderboard:
        return Leaderboard.from_document(doc)

    def _document_id(self, value: Leaderboard) -> str:
        return value.id
