"""Trust score value objects and the audit record persisted per invoice."""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import UUID, uuid4


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def clamp_score(value: int) -> int:
    return max(0, min(100, value))


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    The exact factor values behind a trust score.

    The score is always reconstructible as
    clamp(round_half_up(base + seller_history + buyer_reputation
    + invoice_size + penalties)).

    Attributes:
        seller_history: Past success factor (0-40)
        buyer_reputation: Counterparty reputation factor (0-25)
        invoice_size: Size consistency factor (0-20)
        penalties: Late payment factor (0-15)
        base: Starting score the factors are added to
        degraded: True when the history store could not be reached at all
    """

    seller_history: float
    buyer_reputation: float
    invoice_size: float
    penalties: float
    base: int = 50
    degraded: bool = False

    @classmethod
    def degraded_breakdown(cls, base: int) -> "ScoreBreakdown":
        return cls(
            seller_history=0,
            buyer_reputation=0,
            invoice_size=0,
            penalties=0,
            base=base,
            degraded=True,
        )

    @property
    def raw_total(self) -> float:
        return (
            self.base
            + self.seller_history
            + self.buyer_reputation
            + self.invoice_size
            + self.penalties
        )

    def final_score(self) -> int:
        return clamp_score(round_half_up(self.raw_total))

    def to_dict(self) -> dict:
        return {
            "seller_history": self.seller_history,
            "buyer_reputation": self.buyer_reputation,
            "invoice_size": self.invoice_size,
            "penalties": self.penalties,
            "base": self.base,
            "degraded": self.degraded,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScoreBreakdown":
        return cls(
            seller_history=data["seller_history"],
            buyer_reputation=data["buyer_reputation"],
            invoice_size=data["invoice_size"],
            penalties=data["penalties"],
            base=data.get("base", 50),
            degraded=data.get("degraded", False),
        )


@dataclass(frozen=True)
class TrustScoreResult:
    """A computed trust score together with its breakdown."""

    score: int
    breakdown: ScoreBreakdown

    @property
    def degraded(self) -> bool:
        return self.breakdown.degraded


@dataclass(frozen=True)
class Invoice:
    """
    The invoice attributes relevant to scoring.

    Invoices are owned by the invoice workflow; the engine only reads them.
    """

    id: str
    seller_id: str
    amount: Decimal
    buyer_id: Optional[str] = None


def compute_trust_hash(invoice_id: str, score: int) -> str:
    """Integrity hash anchoring a score to its invoice."""
    return hashlib.sha256(f"{invoice_id}|{score}".encode("utf-8")).hexdigest()


@dataclass
class TrustScoreRecord:
    """
    Audit copy of a trust score computed for an invoice.

    Records are an audit trail, never the authoritative seller state.
    """

    invoice_id: str
    seller_id: str
    score: int
    breakdown: ScoreBreakdown
    trust_hash: str
    buyer_id: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class PaymentRecord:
    """A payment received against one of a seller's invoices."""

    invoice_id: str
    seller_id: str
    amount: Decimal
    is_late: bool = False
    id: UUID = field(default_factory=uuid4)
    paid_at: datetime = field(default_factory=datetime.utcnow)
