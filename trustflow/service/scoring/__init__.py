"""
Trust Scoring Module for the TrustFlow Trust Score Engine
"""

from .settings import TrustScoringSettings, trust_scoring_settings
from .factors import (
    calculate_size_deviation,
    score_buyer_reputation,
    score_invoice_size,
    score_penalties,
    score_seller_history,
)
from .trust_score import (
    calculate_trust_score,
    degraded_trust_score,
    explain_trust_score,
)

__all__ = [
    # Settings
    "TrustScoringSettings",
    "trust_scoring_settings",
    # Factors
    "calculate_size_deviation",
    "score_buyer_reputation",
    "score_invoice_size",
    "score_penalties",
    "score_seller_history",
    # Scoring
    "calculate_trust_score",
    "degraded_trust_score",
    "explain_trust_score",
]
