"""SQLAlchemy ORM models for trust history entities."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    Integer,
    JSON,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SellerHistoryModel(Base):
    """Persisted settlement history per seller."""

    __tablename__ = "seller_histories"

    seller_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    total_invoices: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful_invoices: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    defaulted_invoices: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_raised: Mapped[Decimal] = mapped_column(
        Numeric(18, 2),
        nullable=False,
        default=Decimal("0"),
    )
    trust_score: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class BuyerHistoryModel(Base):
    """Persisted payment history per buyer, keyed by normalized e-mail."""

    __tablename__ = "buyer_histories"

    buyer_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    reputation_score: Mapped[int] = mapped_column(Integer, nullable=False, default=50)
    invoices_confirmed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    invoices_paid: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    late_payments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class PaymentModel(Base):
    """Payment received on a seller's invoice; written by the payment workflow."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    invoice_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    seller_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    is_late: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    paid_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )


class TrustScoreModel(Base):
    """Audit copy of a trust score computed for an invoice."""

    __tablename__ = "trust_scores"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    invoice_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    seller_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    buyer_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    breakdown: Mapped[dict] = mapped_column(JSON, nullable=False)
    trust_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )
