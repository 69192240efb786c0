"""Data Transfer Objects for application layer."""

from .requests import (
    BuyerPaymentRequest,
    InvoicePaymentRequest,
    ScoreRequest,
    SettlementRequest,
    to_decimal,
)

__all__ = [
    "BuyerPaymentRequest",
    "InvoicePaymentRequest",
    "ScoreRequest",
    "SettlementRequest",
    "to_decimal",
]
