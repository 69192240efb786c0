"""Data transfer objects for trust score engine operations."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

# Amounts are stored as NUMERIC(18, 2).
AMOUNT_QUANTUM = Decimal("0.01")
MAX_AMOUNT = Decimal(10) ** 16


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a numeric input to Decimal, None if it is not a finite number."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def _identifier_errors(value: Any, field_name: str) -> List[str]:
    if not isinstance(value, str) or not value.strip():
        return [f"{field_name} is required"]
    if len(value.strip()) > 255:
        return [f"{field_name} must be at most 255 characters"]
    return []


def _amount_errors(value: Any, field_name: str) -> List[str]:
    amount = to_decimal(value)
    if amount is None:
        return [f"{field_name} must be a finite number"]
    if amount <= 0:
        return [f"{field_name} must be positive"]
    if amount >= MAX_AMOUNT:
        return [f"{field_name} must be below {MAX_AMOUNT:.0f}"]
    if amount != amount.quantize(AMOUNT_QUANTUM):
        return [f"{field_name} must have at most 2 decimal places"]
    return []


@dataclass(frozen=True)
class ScoreRequest:
    """Input data for computing a trust score."""
    seller_id: str
    invoice_amount: Any
    buyer_id: Optional[str] = None

    def validate(self) -> List[str]:
        errors = _identifier_errors(self.seller_id, "seller_id")
        errors += _amount_errors(self.invoice_amount, "invoice_amount")
        if self.buyer_id is not None:
            errors += _identifier_errors(self.buyer_id, "buyer_id")
        return errors

    @property
    def amount(self) -> Decimal:
        return to_decimal(self.invoice_amount)


@dataclass(frozen=True)
class SettlementRequest:
    """Input data for recording an invoice settlement."""
    seller_id: str
    amount: Any
    succeeded: bool

    def validate(self) -> List[str]:
        errors = _identifier_errors(self.seller_id, "seller_id")
        errors += _amount_errors(self.amount, "amount")
        if not isinstance(self.succeeded, bool):
            errors.append("succeeded must be a boolean")
        return errors

    @property
    def decimal_amount(self) -> Decimal:
        return to_decimal(self.amount)


@dataclass(frozen=True)
class BuyerPaymentRequest:
    """Input data for recording a buyer payment."""
    buyer_id: str
    on_time: bool

    def validate(self) -> List[str]:
        errors = _identifier_errors(self.buyer_id, "buyer_id")
        if not isinstance(self.on_time, bool):
            errors.append("on_time must be a boolean")
        return errors


@dataclass(frozen=True)
class InvoicePaymentRequest:
    """Input data for adding a payment to the payments ledger."""
    invoice_id: str
    seller_id: str
    amount: Any
    is_late: bool

    def validate(self) -> List[str]:
        errors = _identifier_errors(self.invoice_id, "invoice_id")
        errors += _identifier_errors(self.seller_id, "seller_id")
        errors += _amount_errors(self.amount, "amount")
        if not isinstance(self.is_late, bool):
            errors.append("is_late must be a boolean")
        return errors

    @property
    def decimal_amount(self) -> Decimal:
        return to_decimal(self.amount)
