"""Trust score related Pydantic schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trustflow.domain.entities import (
    BuyerHistory,
    ScoreBreakdown,
    SellerHistory,
    TrustScoreRecord,
    TrustScoreResult,
)


def _strip_identifier(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("identifier cannot be empty or whitespace")
    return v.strip()


class TrustScoreRequestSchema(BaseModel):
    """Schema for POST /v1/trust-score request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "seller_id": "seller_123",
                    "invoice_amount": "1000.00",
                    "buyer_id": "buyer@example.com",
                }
            ]
        }
    )
    seller_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Seller profile identifier",
    )
    invoice_amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=2,
        allow_inf_nan=False,
        description="Invoice amount",
    )
    buyer_id: Optional[str] = Field(
        None,
        min_length=1,
        max_length=255,
        description="Buyer e-mail used for the reputation factor",
    )

    @field_validator("seller_id", "buyer_id")
    @classmethod
    def validate_identifiers(cls, v: Optional[str]) -> Optional[str]:
        return _strip_identifier(v)


class InvoiceScoreRequestSchema(BaseModel):
    """Schema for POST /v1/invoices/{invoice_id}/trust-score request body."""

    seller_id: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2, allow_inf_nan=False)
    buyer_id: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("seller_id", "buyer_id")
    @classmethod
    def validate_identifiers(cls, v: Optional[str]) -> Optional[str]:
        return _strip_identifier(v)


class ScoreBreakdownSchema(BaseModel):
    """Schema for the factor breakdown of a trust score."""

    seller_history: float = Field(..., ge=0, description="Past success factor (0-40)")
    buyer_reputation: float = Field(..., ge=0, description="Buyer reputation factor (0-25)")
    invoice_size: float = Field(..., ge=0, description="Size consistency factor (0-20)")
    penalties: float = Field(..., ge=0, description="Late payment factor (0-15)")
    base: int = Field(..., description="Base score the factors are added to")
    degraded: bool = Field(
        ...,
        description="True when history was unavailable and the base score was used",
    )

    @classmethod
    def from_entity(cls, breakdown: ScoreBreakdown) -> "ScoreBreakdownSchema":
        return cls(**breakdown.to_dict())


class TrustScoreResponseSchema(BaseModel):
    """Schema for POST /v1/trust-score response body."""

    score: int = Field(..., ge=0, le=100, description="Trust score (0-100)")
    breakdown: ScoreBreakdownSchema

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "score": 100,
                    "breakdown": {
                        "seller_history": 32,
                        "buyer_reputation": 12.5,
                        "invoice_size": 20,
                        "penalties": 15,
                        "base": 50,
                        "degraded": False,
                    },
                }
            ]
        }
    )

    @classmethod
    def from_entity(cls, result: TrustScoreResult) -> "TrustScoreResponseSchema":
        return cls(
            score=result.score,
            breakdown=ScoreBreakdownSchema.from_entity(result.breakdown),
        )


class TrustScoreRecordSchema(BaseModel):
    """Schema for a persisted invoice trust score."""

    invoice_id: str
    seller_id: str
    buyer_id: Optional[str] = None
    score: int = Field(..., ge=0, le=100)
    breakdown: ScoreBreakdownSchema
    trust_hash: str = Field(..., description="sha256 of '<invoice_id>|<score>'")
    created_at: str = Field(..., description="ISO 8601 timestamp of the computation")

    @classmethod
    def from_entity(cls, record: TrustScoreRecord) -> "TrustScoreRecordSchema":
        return cls(
            invoice_id=record.invoice_id,
            seller_id=record.seller_id,
            buyer_id=record.buyer_id,
            score=record.score,
            breakdown=ScoreBreakdownSchema.from_entity(record.breakdown),
            trust_hash=record.trust_hash,
            created_at=record.created_at.isoformat() + "Z",
        )


class SettlementRequestSchema(BaseModel):
    """Schema for POST /v1/sellers/{seller_id}/settlements request body."""

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=18,
        decimal_places=2,
        allow_inf_nan=False,
        description="Settled amount",
    )
    succeeded: bool = Field(..., description="True if paid in full, False if defaulted")


class SettlementResponseSchema(BaseModel):
    """Schema for a recorded settlement."""

    seller_id: str
    trust_score: int = Field(..., ge=0, le=100, description="Recomputed trust score")


class SellerStatsSchema(BaseModel):
    """Schema for GET /v1/sellers/{seller_id}/stats response."""

    seller_id: str
    total_invoices: int = Field(..., ge=0)
    successful_invoices: int = Field(..., ge=0)
    defaulted_invoices: int = Field(..., ge=0)
    total_raised: Decimal = Field(..., ge=0)
    current_trust_score: int = Field(..., ge=0, le=100)

    @classmethod
    def from_entity(cls, history: SellerHistory) -> "SellerStatsSchema":
        return cls(**history.to_dict())


class BuyerPaymentRequestSchema(BaseModel):
    """Schema for POST /v1/buyers/{buyer_id}/payments request body."""

    on_time: bool = Field(..., description="Whether the payment arrived by its due date")


class BuyerStatsSchema(BaseModel):
    """Schema for GET /v1/buyers/{buyer_id}/stats response."""

    buyer_id: str
    reputation_score: int = Field(..., ge=0, le=100)
    invoices_confirmed: int = Field(..., ge=0)
    invoices_paid: int = Field(..., ge=0)
    late_payments: int = Field(..., ge=0)

    @classmethod
    def from_entity(cls, history: BuyerHistory) -> "BuyerStatsSchema":
        return cls(**history.to_dict())
