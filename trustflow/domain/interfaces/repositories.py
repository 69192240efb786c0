"""Repository interfaces for trust history persistence."""

from abc import ABC, abstractmethod
from typing import Optional

from trustflow.domain.entities import (
    BuyerHistory,
    PaymentRecord,
    SellerHistory,
    TrustScoreRecord,
)


class HistoryRepository(ABC):
    """
    Abstract repository for seller/buyer history and score records.

    Implementations may use PostgreSQL, in-memory storage, etc.
    A missing row is reported as None, never as an error. Any failure to
    reach the underlying store raises BackingStoreUnavailableException.
    """

    @abstractmethod
    async def get_seller_history(self, seller_id: str) -> Optional[SellerHistory]:
        """
        Retrieve a seller's settlement history.

        Args:
            seller_id: The seller's identifier

        Returns:
            The history if the seller has a row, None otherwise
        """
        ...

    @abstractmethod
    async def get_buyer_history(self, buyer_id: str) -> Optional[BuyerHistory]:
        """
        Retrieve a buyer's payment history.

        Args:
            buyer_id: The normalized buyer identifier

        Returns:
            The history if the buyer has a row, None otherwise
        """
        ...

    @abstractmethod
    async def count_late_payments(self, seller_id: str) -> int:
        """
        Count late-marked payments on a seller's invoices.

        Args:
            seller_id: The seller's identifier

        Returns:
            Number of late payments (0 if none)
        """
        ...

    @abstractmethod
    async def write_seller_history(self, history: SellerHistory) -> SellerHistory:
        """
        Insert or replace a seller's history in a single write.

        Args:
            history: The complete history to store

        Returns:
            The stored history
        """
        ...

    @abstractmethod
    async def write_buyer_history(self, history: BuyerHistory) -> BuyerHistory:
        """
        Insert or replace a buyer's history in a single write.

        Args:
            history: The complete history to store

        Returns:
            The stored history
        """
        ...

    @abstractmethod
    async def save_score_record(self, record: TrustScoreRecord) -> TrustScoreRecord:
        """
        Persist an audit copy of a computed trust score.

        Args:
            record: The score record to save

        Returns:
            The saved record
        """
        ...

    @abstractmethod
    async def get_latest_score_record(
        self,
        invoice_id: str,
    ) -> Optional[TrustScoreRecord]:
        """
        Retrieve the most recent score record for an invoice.

        Args:
            invoice_id: The invoice's identifier

        Returns:
            The newest record if any, None otherwise
        """
        ...

    @abstractmethod
    async def add_payment(self, payment: PaymentRecord) -> PaymentRecord:
        """
        Append a payment to the payments ledger.

        Args:
            payment: The payment received on one of the seller's invoices

        Returns:
            The stored payment
        """
        ...

    @abstractmethod
    async def commit(self) -> None:
        """
        Make the writes issued so far durable.

        Mutators call this while still holding their per-key lock, so the
        next holder reads the committed state.
        """
        ...
