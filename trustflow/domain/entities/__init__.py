"""Domain Entities - Core business objects."""

from .history import (
    BuyerHistory,
    SellerHistory,
    DEFAULT_REPUTATION_SCORE,
    NEUTRAL_TRUST_SCORE,
    normalize_buyer_id,
)
from .score import (
    Invoice,
    PaymentRecord,
    ScoreBreakdown,
    TrustScoreRecord,
    TrustScoreResult,
    clamp_score,
    compute_trust_hash,
    round_half_up,
)

__all__ = [
    "BuyerHistory",
    "SellerHistory",
    "DEFAULT_REPUTATION_SCORE",
    "NEUTRAL_TRUST_SCORE",
    "normalize_buyer_id",
    "Invoice",
    "PaymentRecord",
    "ScoreBreakdown",
    "TrustScoreRecord",
    "TrustScoreResult",
    "clamp_score",
    "compute_trust_hash",
    "round_half_up",
]
