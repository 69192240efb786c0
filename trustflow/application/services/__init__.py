"""Application services (use cases)."""

from .locks import KeyedLockRegistry
from .trust_score_service import TrustScoreEngine

__all__ = [
    "KeyedLockRegistry",
    "TrustScoreEngine",
]
