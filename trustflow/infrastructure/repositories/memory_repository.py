"""In-memory implementation of HistoryRepository."""

from typing import Optional

from trustflow.domain.entities import (
    BuyerHistory,
    PaymentRecord,
    SellerHistory,
    TrustScoreRecord,
)
from trustflow.domain.exceptions import BackingStoreUnavailableException
from trustflow.domain.interfaces import HistoryRepository
from trustflow.infrastructure.memory import InMemoryHistoryStore


class InMemoryHistoryRepository(HistoryRepository):
    """
    HistoryRepository backed by an InMemoryHistoryStore.

    Entities are frozen, so stored values can be handed out directly.
    """

    def __init__(self, store: InMemoryHistoryStore):
        self._store = store

    def _check(self, operation: str) -> None:
        if not self._store.is_open:
            raise BackingStoreUnavailableException(operation, "store is closed")

    async def get_seller_history(self, seller_id: str) -> Optional[SellerHistory]:
        self._check("get_seller_history")
        return self._store.sellers.get(seller_id)

    async def get_buyer_history(self, buyer_id: str) -> Optional[BuyerHistory]:
        self._check("get_buyer_history")
        return self._store.buyers.get(buyer_id)

    async def count_late_payments(self, seller_id: str) -> int:
        self._check("count_late_payments")
        return sum(1 for p in self._store.payments.get(seller_id, []) if p.is_late)

    async def write_seller_history(self, history: SellerHistory) -> SellerHistory:
        self._check("write_seller_history")
        self._store.sellers[history.seller_id] = history
        return history

    async def write_buyer_history(self, history: BuyerHistory) -> BuyerHistory:
        self._check("write_buyer_history")
        self._store.buyers[history.buyer_id] = history
        return history

    async def save_score_record(self, record: TrustScoreRecord) -> TrustScoreRecord:
        self._check("save_score_record")
        self._store.score_records[record.invoice_id].append(record)
        return record

    async def get_latest_score_record(
        self,
        invoice_id: str,
    ) -> Optional[TrustScoreRecord]:
        self._check("get_latest_score_record")
        records = self._store.score_records.get(invoice_id)
        if not records:
            return None
        return records[-1]

    async def add_payment(self, payment: PaymentRecord) -> PaymentRecord:
        self._check("add_payment")
        return self._store.record_payment(payment)

    async def commit(self) -> None:
        # Writes land in the store immediately.
        self._check("commit")
