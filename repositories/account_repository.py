"""
Repository for user account documents.
"""

from domain.models.account import UserAccount
from repositories.base_repository import BaseRepository
from repositories.interfaces import IAccountRepository


class AccountRepository(BaseRepository[UserAccount], IAccountRepository):
    collection = "accounts"

    def _to_document(self, value: UserAccount) -> dict:
        return value.to_document()

    def _from_document(self, doc: dict) -> UserAccount:
        return UserAccount.from_document(doc)

    def _document_id(self, value: UserAccount) -> str:
        return value.user_id
