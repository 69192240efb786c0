"""SQL (PostgreSQL / SQLite) implementation of HistoryRepository."""

from contextlib import contextmanager
from datetime import datetime
from typing import Generator, Optional
from uuid import UUID

from asyncpg.exceptions import InterfaceError, PostgresError
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trustflow.domain.entities import (
    BuyerHistory,
    PaymentRecord,
    ScoreBreakdown,
    SellerHistory,
    TrustScoreRecord,
)
from trustflow.domain.exceptions import BackingStoreUnavailableException
from trustflow.domain.interfaces import HistoryRepository
from trustflow.infrastructure.database.models import (
    BuyerHistoryModel,
    PaymentModel,
    SellerHistoryModel,
    TrustScoreModel,
)


class SqlHistoryRepository(HistoryRepository):
    """
    SQL implementation of the History repository.

    Uses SQLAlchemy async session for database operations. Writes are
    flushed; commit() ends the transaction.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @contextmanager
    def _translate_errors(self, operation: str) -> Generator[None, None, None]:
        # asyncpg connect errors reach us unwrapped by SQLAlchemy.
        try:
            yield
        except (SQLAlchemyError, PostgresError, InterfaceError, OSError) as e:
            raise BackingStoreUnavailableException(operation, type(e).__name__) from e

    async def get_seller_history(self, seller_id: str) -> Optional[SellerHistory]:
        """Retrieve a seller's history row."""
        with self._translate_errors("get_seller_history"):
            model = await self._session.get(SellerHistoryModel, seller_id)

        if model is None:
            return None

        return self._to_seller_entity(model)

    async def get_buyer_history(self, buyer_id: str) -> Optional[BuyerHistory]:
        """Retrieve a buyer's history row."""
        with self._translate_errors("get_buyer_history"):
            model = await self._session.get(BuyerHistoryModel, buyer_id)

        if model is None:
            return None

        return self._to_buyer_entity(model)

    async def count_late_payments(self, seller_id: str) -> int:
        """Count late payments on the seller's invoices."""
        stmt = (
            select(func.count(PaymentModel.id))
            .where(PaymentModel.seller_id == seller_id)
            .where(PaymentModel.is_late.is_(True))
        )
        with self._translate_errors("count_late_payments"):
            result = await self._session.execute(stmt)

        return result.scalar_one() or 0

    async def write_seller_history(self, history: SellerHistory) -> SellerHistory:
        """Insert or update the seller's row with counters and score together."""
        with self._translate_errors("write_seller_history"):
            model = await self._session.get(SellerHistoryModel, history.seller_id)
            if model is None:
                model = SellerHistoryModel(seller_id=history.seller_id)
                self._session.add(model)

            model.total_invoices = history.total_invoices
            model.successful_invoices = history.successful_invoices
            model.defaulted_invoices = history.defaulted_invoices
            model.total_raised = history.total_raised
            model.trust_score = history.current_trust_score
            model.updated_at = history.updated_at or datetime.utcnow()

            await self._session.flush()

        return history

    async def write_buyer_history(self, history: BuyerHistory) -> BuyerHistory:
        """Insert or update the buyer's row."""
        with self._translate_errors("write_buyer_history"):
            model = await self._session.get(BuyerHistoryModel, history.buyer_id)
            if model is None:
                model = BuyerHistoryModel(buyer_id=history.buyer_id)
                self._session.add(model)

            model.reputation_score = history.reputation_score
            model.invoices_confirmed = history.invoices_confirmed
            model.invoices_paid = history.invoices_paid
            model.late_payments = history.late_payments
            model.updated_at = history.updated_at or datetime.utcnow()

            await self._session.flush()

        return history

    async def save_score_record(self, record: TrustScoreRecord) -> TrustScoreRecord:
        """Persist a trust score audit record."""
        model = TrustScoreModel(
            id=str(record.id),
            invoice_id=record.invoice_id,
            seller_id=record.seller_id,
            buyer_id=record.buyer_id,
            score=record.score,
            breakdown=record.breakdown.to_dict(),
            trust_hash=record.trust_hash,
            created_at=record.created_at,
        )

        with self._translate_errors("save_score_record"):
            self._session.add(model)
            await self._session.flush()

        return record

    async def add_payment(self, payment: PaymentRecord) -> PaymentRecord:
        """Insert a row into the payments ledger."""
        model = PaymentModel(
            id=str(payment.id),
            invoice_id=payment.invoice_id,
            seller_id=payment.seller_id,
            amount=payment.amount,
            is_late=payment.is_late,
            paid_at=payment.paid_at,
        )

        with self._translate_errors("add_payment"):
            self._session.add(model)
            await self._session.flush()

        return payment

    async def commit(self) -> None:
        """Commit the session transaction; on failure it is rolled back."""
        with self._translate_errors("commit"):
            try:
                await self._session.commit()
            except Exception:
                await self._session.rollback()
                raise

    async def get_latest_score_record(
        self,
        invoice_id: str,
    ) -> Optional[TrustScoreRecord]:
        """Retrieve the newest score record for an invoice."""
        stmt = (
            select(TrustScoreModel)
            .where(TrustScoreModel.invoice_id == invoice_id)
            .order_by(TrustScoreModel.created_at.desc())
            .limit(1)
        )
        with self._translate_errors("get_latest_score_record"):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None

        return TrustScoreRecord(
            id=UUID(model.id),
            invoice_id=model.invoice_id,
            seller_id=model.seller_id,
            buyer_id=model.buyer_id,
            score=model.score,
            breakdown=ScoreBreakdown.from_dict(model.breakdown),
            trust_hash=model.trust_hash,
            created_at=model.created_at,
        )

    def _to_seller_entity(self, model: SellerHistoryModel) -> SellerHistory:
        """Convert database model to domain entity."""
        return SellerHistory(
            seller_id=model.seller_id,
            total_invoices=model.total_invoices,
            successful_invoices=model.successful_invoices,
            defaulted_invoices=model.defaulted_invoices,
            total_raised=model.total_raised,
            current_trust_score=model.trust_score,
            updated_at=model.updated_at,
        )

    def _to_buyer_entity(self, model: BuyerHistoryModel) -> BuyerHistory:
        """Convert database model to domain entity."""
        return BuyerHistory(
            buyer_id=model.buyer_id,
            reputation_score=model.reputation_score,
            invoices_confirmed=model.invoices_confirmed,
            invoices_paid=model.invoices_paid,
            late_payments=model.late_payments,
            updated_at=model.updated_at,
        )
