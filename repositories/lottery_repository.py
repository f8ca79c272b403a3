"""
Repository for per-guild lottery documents.
"""

from domain.models.lottery import Lottery
from repositories.base_repository import BaseRepository
from repositories.interfaces import ILotteryRepository


class LotteryRepository(BaseRepository[Lottery], ILotteryRepository):
    collection = "lotteries"

    def _to_document(self, value: Lottery) -> dict:
        return value.to_document()

    def _from_document(self, doc: dict) -> Lottery:
        return Lottery.from_document(doc)

    def _document_id(self, value: Lottery) -> str:
        return value.id
