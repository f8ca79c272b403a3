"""
Repository for open bet documents.
"""

from domain.models.bet import Bet
from repositories.base_repository import BaseRepository
from repositories.interfaces import IBetRepository


class BetRepository(BaseRepository[Bet], IBetRepository):
    collection = "bets"

    def _to_document(self, value: Bet) -> dict:
        return value.to_document()

    def _from_document(self, doc: dict) -> Bet:
        return Bet.from_document(doc)

    def _document_id(self, value: Bet) -> str:
        return value.id
