"""
Repository for cancellation ticket documents.
"""

from domain.models.cancel_ticket import CancelTicket
from repositories.base_repository import BaseRepository
from repositories.interfaces import ICancelTicketRepository


class CancelTicketRepository(BaseRepository[CancelTicket], ICancelTicketRepository):
    collection = "cancel_tickets"

    def _to_document(self, value: CancelTicket) -> dict:
        return value.to_document()

    def _from_document(self, doc: dict) -> CancelTicket:
        return CancelTicket.from_document(doc)

    def _document_id(self, value: CancelTicket) -> str:
        return value.id
