"""In-process history store used when no database is configured."""

from collections import defaultdict
from typing import Dict, List

import structlog

from trustflow.domain.entities import (
    BuyerHistory,
    PaymentRecord,
    SellerHistory,
    TrustScoreRecord,
)

logger = structlog.get_logger(__name__)


class InMemoryHistoryStore:
    """
    Holds seller/buyer history, the payments ledger and score records.

    One store is created at application startup and closed at shutdown;
    repositories receive it explicitly rather than reaching for module state.
    """

    def __init__(self):
        self.sellers: Dict[str, SellerHistory] = {}
        self.buyers: Dict[str, BuyerHistory] = {}
        self.payments: Dict[str, List[PaymentRecord]] = defaultdict(list)
        self.score_records: Dict[str, List[TrustScoreRecord]] = defaultdict(list)
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    def ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("History store is closed")

    def record_payment(self, payment: PaymentRecord) -> PaymentRecord:
        """Append a payment to the ledger, as the payment workflow does."""
        self.ensure_open()
        self.payments[payment.seller_id].append(payment)
        return payment

    def close(self) -> None:
        """Drop all state; the store cannot be used afterwards."""
        logger.info(
            "history_store_closed",
            sellers=len(self.sellers),
            buyers=len(self.buyers),
        )
        self.sellers.clear()
        self.buyers.clear()
        self.payments.clear()
        self.score_records.clear()
        self._closed = True
