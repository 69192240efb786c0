"""Database infrastructure."""

from .connection import DatabaseSessionManager, db_manager
from .models import (
    Base,
    BuyerHistoryModel,
    PaymentModel,
    SellerHistoryModel,
    TrustScoreModel,
)

__all__ = [
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "BuyerHistoryModel",
    "PaymentModel",
    "SellerHistoryModel",
    "TrustScoreModel",
]
