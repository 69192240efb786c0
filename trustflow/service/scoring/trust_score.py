"""
Trust Score Calculation for the TrustFlow Trust Score Engine.

The score starts at the base (50) and every factor adds points, so the
unclamped total can exceed 100. The total is rounded once, half-up, and then
clamped to 0-100.
"""

from decimal import Decimal
from typing import Optional

from trustflow.domain.entities import (
    BuyerHistory,
    ScoreBreakdown,
    SellerHistory,
    TrustScoreResult,
)

from .factors import (
    score_buyer_reputation,
    score_invoice_size,
    score_penalties,
    score_seller_history,
)
from .settings import TrustScoringSettings, trust_scoring_settings


def calculate_trust_score(
    seller_history: Optional[SellerHistory],
    invoice_amount: Decimal,
    buyer_history: Optional[BuyerHistory] = None,
    late_count: Optional[int] = None,
    settings: TrustScoringSettings = trust_scoring_settings,
) -> TrustScoreResult:
    """
    Calculate the trust score for an invoice from history snapshots.

    Args:
        seller_history: Seller history, None if unknown
        invoice_amount: Amount of the invoice being scored
        buyer_history: Buyer history, None if unknown
        late_count: Late payments on the seller's invoices, None if unknown
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        TrustScoreResult with the clamped score and the breakdown used
    """
    reputation = buyer_history.reputation_score if buyer_history else None

    breakdown = ScoreBreakdown(
        seller_history=score_seller_history(seller_history, settings),
        buyer_reputation=score_buyer_reputation(reputation, settings),
        invoice_size=score_invoice_size(seller_history, invoice_amount, settings),
        penalties=score_penalties(late_count, settings),
        base=settings.base_score,
    )

    return TrustScoreResult(score=breakdown.final_score(), breakdown=breakdown)


def degraded_trust_score(
    settings: TrustScoringSettings = trust_scoring_settings,
) -> TrustScoreResult:
    """Score used when the history store cannot be reached at all."""
    breakdown = ScoreBreakdown.degraded_breakdown(settings.base_score)
    return TrustScoreResult(score=breakdown.final_score(), breakdown=breakdown)


def explain_trust_score(result: TrustScoreResult) -> str:
    """
    Generate a human-readable explanation of a trust score.

    Args:
        result: The computed score

    Returns:
        Explanation string
    """
    breakdown = result.breakdown
    if breakdown.degraded:
        return (
            f"Score {result.score}: history unavailable, "
            f"base score of {breakdown.base} applied"
        )

    return (
        f"Score {result.score}: base {breakdown.base}"
        f" + seller history {breakdown.seller_history}"
        f" + buyer reputation {breakdown.buyer_reputation}"
        f" + invoice size {breakdown.invoice_size}"
        f" + penalties {breakdown.penalties}"
        f" = {breakdown.raw_total} (clamped to 0-100)"
    )
