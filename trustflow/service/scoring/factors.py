"""
Trust Score Factors for the TrustFlow Trust Score Engine.

Each function turns one signal into points on top of the base score:

- Seller history (40): share of settled invoices paid in full
- Buyer reputation (25): the buyer's reputation score, scaled
- Invoice size (20): closeness of the invoice to the seller's average
- Penalties (15): late payments on the seller's invoices

A None input means the signal is unknown, either because the
party has no history or because the lookup failed. Unknown signals
score the documented neutral value.
"""

from decimal import Decimal
from typing import Optional

from trustflow.domain.entities import SellerHistory, round_half_up

from .settings import TrustScoringSettings, trust_scoring_settings


def score_seller_history(
    history: Optional[SellerHistory],
    settings: TrustScoringSettings = trust_scoring_settings,
) -> float:
    """
    Score the seller's past success rate.

    Args:
        history: Seller history, None if unknown
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        round(success_rate * weight), or the neutral value for a new seller
    """
    if history is None or not history.has_history:
        return settings.neutral_seller_history

    return round_half_up(history.success_rate * settings.weight_seller_history)


def score_buyer_reputation(
    reputation_score: Optional[int],
    settings: TrustScoringSettings = trust_scoring_settings,
) -> float:
    """
    Scale a 0-100 buyer reputation to the buyer factor weight.

    Not rounded: the default reputation of 50 yields 12.5 points.
    """
    if reputation_score is None:
        reputation_score = settings.default_reputation_score

    reputation_score = max(0, min(100, reputation_score))
    return reputation_score / 100 * settings.weight_buyer_reputation


def calculate_size_deviation(
    history: Optional[SellerHistory],
    invoice_amount: Decimal,
) -> Optional[Decimal]:
    """
    Relative distance of an invoice amount from the seller's average.

    Returns:
        |amount - avg| / avg, or None when the seller has no raised volume
    """
    if history is None:
        return None

    avg_amount = history.average_amount
    if avg_amount is None:
        return None

    return abs(invoice_amount - avg_amount) / avg_amount


def score_invoice_size(
    history: Optional[SellerHistory],
    invoice_amount: Decimal,
    settings: TrustScoringSettings = trust_scoring_settings,
) -> float:
    """
    Score how consistent an invoice is with the seller's usual size.

    Args:
        history: Seller history, None if unknown
        invoice_amount: Amount of the invoice being scored
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Tiered points by deviation, or the neutral value without history
    """
    deviation = calculate_size_deviation(history, invoice_amount)
    if deviation is None:
        return settings.neutral_invoice_size

    for upper_bound, points in settings.size_tiers:
        if deviation < upper_bound:
            return points

    return settings.size_points_outlier


def score_penalties(
    late_count: Optional[int],
    settings: TrustScoringSettings = trust_scoring_settings,
) -> float:
    """
    Score the seller's late-payment record (fewer is better).

    Args:
        late_count: Late payments on the seller's invoices, None if unknown
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Tiered points, or the neutral value when the count is unknown
    """
    if late_count is None:
        return settings.neutral_penalties
    if late_count == 0:
        return settings.penalty_points_clean
    elif late_count < settings.penalty_severe_late_count:
        return settings.penalty_points_moderate
    else:
        return settings.penalty_points_severe
