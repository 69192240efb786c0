"""Seller and buyer history aggregates."""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional


NEUTRAL_TRUST_SCORE = 50
DEFAULT_REPUTATION_SCORE = 50


def normalize_buyer_id(buyer_id: str) -> str:
    """Buyer identifiers are e-mail addresses; compare them case-insensitively."""
    return buyer_id.strip().lower()


@dataclass(frozen=True)
class SellerHistory:
    """
    Aggregate outcome history for a single seller.

    Only settlements change it, and no counter is ever decremented.

    Attributes:
        seller_id: The seller's identifier
        total_invoices: Number of settled invoices
        successful_invoices: Settled invoices that were paid in full
        defaulted_invoices: Settled invoices that defaulted
        total_raised: Sum of amounts of successful invoices
        current_trust_score: Score recomputed at the last settlement
    """

    seller_id: str
    total_invoices: int = 0
    successful_invoices: int = 0
    defaulted_invoices: int = 0
    total_raised: Decimal = Decimal("0")
    current_trust_score: int = NEUTRAL_TRUST_SCORE
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if min(self.total_invoices, self.successful_invoices, self.defaulted_invoices) < 0:
            raise ValueError("Invoice counters cannot be negative")
        if self.successful_invoices + self.defaulted_invoices > self.total_invoices:
            raise ValueError(
                "successful_invoices + defaulted_invoices cannot exceed total_invoices"
            )
        if self.total_raised < 0:
            raise ValueError("total_raised cannot be negative")
        if not 0 <= self.current_trust_score <= 100:
            raise ValueError("current_trust_score must be within 0-100")

    @classmethod
    def empty(cls, seller_id: str) -> "SellerHistory":
        """History of a seller that has never settled an invoice."""
        return cls(seller_id=seller_id)

    @property
    def has_history(self) -> bool:
        return self.total_invoices > 0

    @property
    def success_rate(self) -> Optional[float]:
        """Share of settled invoices paid in full, None for a new seller."""
        if not self.has_history:
            return None
        return self.successful_invoices / self.total_invoices

    @property
    def average_amount(self) -> Optional[Decimal]:
        """Average raised amount per settled invoice, None without raised volume."""
        if not self.has_history or self.total_raised <= 0:
            return None
        return self.total_raised / self.total_invoices

    def with_settlement(self, amount: Decimal, succeeded: bool) -> "SellerHistory":
        """Return the history after one more settled invoice."""
        if succeeded:
            return replace(
                self,
                total_invoices=self.total_invoices + 1,
                successful_invoices=self.successful_invoices + 1,
                total_raised=self.total_raised + amount,
                updated_at=datetime.utcnow(),
            )
        return replace(
            self,
            total_invoices=self.total_invoices + 1,
            defaulted_invoices=self.defaulted_invoices + 1,
            updated_at=datetime.utcnow(),
        )

    def with_trust_score(self, score: int) -> "SellerHistory":
        return replace(self, current_trust_score=score)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "seller_id": self.seller_id,
            "total_invoices": self.total_invoices,
            "successful_invoices": self.successful_invoices,
            "defaulted_invoices": self.defaulted_invoices,
            "total_raised": str(self.total_raised),
            "current_trust_score": self.current_trust_score,
        }


@dataclass(frozen=True)
class BuyerHistory:
    """Payment reliability history for a single buyer."""

    buyer_id: str
    reputation_score: int = DEFAULT_REPUTATION_SCORE
    invoices_confirmed: int = 0
    invoices_paid: int = 0
    late_payments: int = 0
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not 0 <= self.reputation_score <= 100:
            raise ValueError("reputation_score must be within 0-100")
        if min(self.invoices_confirmed, self.invoices_paid, self.late_payments) < 0:
            raise ValueError("Buyer counters cannot be negative")

    @classmethod
    def empty(
        cls,
        buyer_id: str,
        reputation_score: int = DEFAULT_REPUTATION_SCORE,
    ) -> "BuyerHistory":
        """History of a buyer that has never confirmed or paid an invoice."""
        return cls(buyer_id=buyer_id, reputation_score=reputation_score)

    def with_payment(self, on_time: bool, penalty_step: int) -> "BuyerHistory":
        """Return the history after one more payment, lowering reputation if late."""
        if on_time:
            return replace(
                self,
                invoices_paid=self.invoices_paid + 1,
                updated_at=datetime.utcnow(),
            )
        return replace(
            self,
            invoices_paid=self.invoices_paid + 1,
            late_payments=self.late_payments + 1,
            reputation_score=max(0, self.reputation_score - penalty_step),
            updated_at=datetime.utcnow(),
        )

    def with_confirmation(self) -> "BuyerHistory":
        return replace(
            self,
            invoices_confirmed=self.invoices_confirmed + 1,
            updated_at=datetime.utcnow(),
        )

    def to_dict(self) -> dict:
        return {
            "buyer_id": self.buyer_id,
            "reputation_score": self.reputation_score,
            "invoices_confirmed": self.invoices_confirmed,
            "invoices_paid": self.invoices_paid,
            "late_payments": self.late_payments,
        }
