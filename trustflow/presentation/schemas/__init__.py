"""Pydantic schemas for API request/response validation."""

from .trust import (
    BuyerPaymentRequestSchema,
    BuyerStatsSchema,
    InvoiceScoreRequestSchema,
    ScoreBreakdownSchema,
    SellerStatsSchema,
    SettlementRequestSchema,
    SettlementResponseSchema,
    TrustScoreRecordSchema,
    TrustScoreRequestSchema,
    TrustScoreResponseSchema,
)
from .error import ErrorResponseSchema

__all__ = [
    "BuyerPaymentRequestSchema",
    "BuyerStatsSchema",
    "InvoiceScoreRequestSchema",
    "ScoreBreakdownSchema",
    "SellerStatsSchema",
    "SettlementRequestSchema",
    "SettlementResponseSchema",
    "TrustScoreRecordSchema",
    "TrustScoreRequestSchema",
    "TrustScoreResponseSchema",
    "ErrorResponseSchema",
]
