"""Trust score engine - scores invoices and evolves seller/buyer history."""

import asyncio
from typing import Any, Awaitable, Optional, Tuple, TypeVar

import structlog

from trustflow.application.dto import (
    BuyerPaymentRequest,
    InvoicePaymentRequest,
    ScoreRequest,
    SettlementRequest,
)
from trustflow.application.services.locks import KeyedLockRegistry
from trustflow.core.config import settings
from trustflow.core.metrics import (
    record_buyer_payment as record_buyer_payment_metric,
    record_repository_failure,
    record_settlement as record_settlement_metric,
    record_trust_score,
    track_repository_latency,
)
from trustflow.domain.entities import (
    BuyerHistory,
    Invoice,
    PaymentRecord,
    SellerHistory,
    TrustScoreRecord,
    TrustScoreResult,
    compute_trust_hash,
    normalize_buyer_id,
)
from trustflow.domain.exceptions import (
    BackingStoreUnavailableException,
    InvalidInputException,
    ScoreRecordNotFoundException,
)
from trustflow.domain.interfaces import HistoryRepository
from trustflow.service.scoring import (
    TrustScoringSettings,
    calculate_trust_score,
    degraded_trust_score,
    trust_scoring_settings,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class TrustScoreEngine:
    """
    Application service for trust scoring use cases.

    Scoring never fails because of the history store: unreachable lookups
    fall back to neutral factors. Mutations always surface store failures
    so callers can retry them.
    """

    def __init__(
        self,
        repository: HistoryRepository,
        locks: Optional[KeyedLockRegistry] = None,
        scoring_settings: TrustScoringSettings = trust_scoring_settings,
        timeout_seconds: Optional[float] = None,
    ):
        self._repo = repository
        self._locks = locks if locks is not None else KeyedLockRegistry()
        self._scoring = scoring_settings
        self._timeout = timeout_seconds or settings.repository_timeout_seconds

    async def compute_score(
        self,
        seller_id: str,
        invoice_amount: Any,
        buyer_id: Optional[str] = None,
    ) -> TrustScoreResult:
        """
        Compute the trust score of an invoice for a seller.

        Args:
            seller_id: The seller's identifier
            invoice_amount: Positive invoice amount
            buyer_id: Optional buyer identifier for the reputation factor

        Returns:
            TrustScoreResult with the score (0-100) and its breakdown

        Raises:
            InvalidInputException: If the identifiers or amount are invalid
        """
        request = ScoreRequest(
            seller_id=seller_id,
            invoice_amount=invoice_amount,
            buyer_id=buyer_id,
        )
        errors = request.validate()
        if errors:
            raise InvalidInputException("; ".join(errors))

        seller_id = request.seller_id.strip()
        buyer_key = normalize_buyer_id(buyer_id) if buyer_id is not None else None

        log = logger.bind(seller_id=seller_id, buyer_id=buyer_key)

        seller_ok, seller_history = await self._lookup(
            "get_seller_history",
            self._repo.get_seller_history(seller_id),
            log,
        )
        late_ok, late_count = await self._lookup(
            "count_late_payments",
            self._repo.count_late_payments(seller_id),
            log,
        )
        lookups = [seller_ok, late_ok]

        buyer_history = None
        if buyer_key is not None:
            buyer_ok, buyer_history = await self._lookup(
                "get_buyer_history",
                self._repo.get_buyer_history(buyer_key),
                log,
            )
            lookups.append(buyer_ok)

        if not any(lookups):
            result = degraded_trust_score(self._scoring)
            record_trust_score(result.score, "degraded")
            log.warning("trust_score_degraded", score=result.score)
            return result

        result = calculate_trust_score(
            seller_history=seller_history,
            invoice_amount=request.amount,
            buyer_history=buyer_history,
            late_count=late_count,
            settings=self._scoring,
        )

        outcome = "full" if all(lookups) else "partial"
        record_trust_score(result.score, outcome)
        log.info(
            "trust_score_computed",
            score=result.score,
            outcome=outcome,
            **result.breakdown.to_dict(),
        )

        return result

    async def record_settlement(
        self,
        seller_id: str,
        amount: Any,
        succeeded: bool,
    ) -> int:
        """
        Apply an invoice outcome to the seller's history and rescore.

        Counters and the recomputed score are written in one repository call
        and committed before the per-seller lock is released.

        Args:
            seller_id: The seller's identifier
            amount: Settled invoice amount
            succeeded: True if paid in full, False if defaulted

        Returns:
            The seller's updated trust score

        Raises:
            InvalidInputException: If the request is invalid
            BackingStoreUnavailableException: If the store failed; nothing was written
        """
        request = SettlementRequest(seller_id=seller_id, amount=amount, succeeded=succeeded)
        errors = request.validate()
        if errors:
            raise InvalidInputException("; ".join(errors))

        seller_id = request.seller_id.strip()
        settled_amount = request.decimal_amount
        log = logger.bind(seller_id=seller_id, amount=str(settled_amount), succeeded=succeeded)

        async with self._locks.hold(("seller", seller_id)):
            current = await self._call(
                "get_seller_history",
                self._repo.get_seller_history(seller_id),
            )
            if current is None:
                current = SellerHistory.empty(seller_id)

            updated = current.with_settlement(settled_amount, succeeded)

            late_count = await self._call(
                "count_late_payments",
                self._repo.count_late_payments(seller_id),
            )
            result = calculate_trust_score(
                seller_history=updated,
                invoice_amount=settled_amount,
                late_count=late_count,
                settings=self._scoring,
            )

            await self._call(
                "write_seller_history",
                self._repo.write_seller_history(updated.with_trust_score(result.score)),
            )
            await self._call("commit", self._repo.commit())

        record_settlement_metric(succeeded)
        log.info(
            "settlement_recorded",
            total_invoices=updated.total_invoices,
            trust_score=result.score,
        )

        return result.score

    async def record_buyer_payment(self, buyer_id: str, on_time: bool) -> BuyerHistory:
        """
        Apply one payment to a buyer's history.

        Not idempotent: call exactly once per payment event.

        Returns:
            The buyer's history as written under the buyer lock

        Raises:
            InvalidInputException: If the request is invalid
            BackingStoreUnavailableException: If the store failed; nothing was written
        """
        request = BuyerPaymentRequest(buyer_id=buyer_id, on_time=on_time)
        errors = request.validate()
        if errors:
            raise InvalidInputException("; ".join(errors))

        buyer_key = normalize_buyer_id(buyer_id)

        updated = await self._update_buyer(
            buyer_key,
            lambda history: history.with_payment(
                on_time,
                self._scoring.buyer_late_penalty_step,
            ),
        )

        record_buyer_payment_metric(on_time)
        logger.info(
            "buyer_payment_recorded",
            buyer_id=buyer_key,
            on_time=on_time,
            reputation_score=updated.reputation_score,
        )
        return updated

    async def record_buyer_confirmation(self, buyer_id: str) -> BuyerHistory:
        """Count an invoice confirmation by the buyer."""
        errors = BuyerPaymentRequest(buyer_id=buyer_id, on_time=True).validate()
        if errors:
            raise InvalidInputException("; ".join(errors))

        buyer_key = normalize_buyer_id(buyer_id)
        updated = await self._update_buyer(buyer_key, lambda h: h.with_confirmation())

        logger.info(
            "buyer_confirmation_recorded",
            buyer_id=buyer_key,
            invoices_confirmed=updated.invoices_confirmed,
        )
        return updated

    async def get_seller_stats(self, seller_id: str) -> SellerHistory:
        """
        Read a seller's history, with zero-value defaults for unknown sellers.

        Raises:
            BackingStoreUnavailableException: If the store failed
        """
        seller_id = self._require_identifier(seller_id, "seller_id")
        history = await self._call(
            "get_seller_history",
            self._repo.get_seller_history(seller_id),
        )
        return history or SellerHistory.empty(seller_id)

    async def get_buyer_stats(self, buyer_id: str) -> BuyerHistory:
        """
        Read a buyer's history, with the default reputation for unknown buyers.

        Raises:
            BackingStoreUnavailableException: If the store failed
        """
        buyer_key = normalize_buyer_id(self._require_identifier(buyer_id, "buyer_id"))
        history = await self._call(
            "get_buyer_history",
            self._repo.get_buyer_history(buyer_key),
        )
        return history or BuyerHistory.empty(buyer_key, self._scoring.default_reputation_score)

    async def score_invoice(self, invoice: Invoice) -> TrustScoreRecord:
        """
        Score an invoice at verification time and keep an audit record.

        A failed audit write is logged; the score is still returned.

        Args:
            invoice: The invoice being verified

        Returns:
            The score record, including its integrity hash
        """
        invoice_id = self._require_identifier(invoice.id, "invoice_id")
        result = await self.compute_score(
            invoice.seller_id,
            invoice.amount,
            invoice.buyer_id,
        )

        record = TrustScoreRecord(
            invoice_id=invoice_id,
            seller_id=invoice.seller_id.strip(),
            buyer_id=normalize_buyer_id(invoice.buyer_id) if invoice.buyer_id else None,
            score=result.score,
            breakdown=result.breakdown,
            trust_hash=compute_trust_hash(invoice_id, result.score),
        )

        try:
            await self._call("save_score_record", self._repo.save_score_record(record))
            await self._call("commit", self._repo.commit())
        except BackingStoreUnavailableException as e:
            logger.warning(
                "trust_score_record_not_saved",
                invoice_id=invoice_id,
                error=e.message,
            )

        return record

    async def get_score_record(self, invoice_id: str) -> TrustScoreRecord:
        """
        Get the latest score recorded for an invoice.

        Raises:
            ScoreRecordNotFoundException: If the invoice was never scored
        """
        invoice_id = self._require_identifier(invoice_id, "invoice_id")
        record = await self._call(
            "get_latest_score_record",
            self._repo.get_latest_score_record(invoice_id),
        )
        if record is None:
            raise ScoreRecordNotFoundException(invoice_id)
        return record

    async def record_invoice_payment(
        self,
        invoice_id: str,
        seller_id: str,
        amount: Any,
        is_late: bool = False,
    ) -> PaymentRecord:
        """
        Add a payment on one of a seller's invoices to the payments ledger.

        Late payments feed the penalty factor of later scores. Not idempotent.

        Raises:
            InvalidInputException: If the request is invalid
            BackingStoreUnavailableException: If the store failed
        """
        request = InvoicePaymentRequest(
            invoice_id=invoice_id,
            seller_id=seller_id,
            amount=amount,
            is_late=is_late,
        )
        errors = request.validate()
        if errors:
            raise InvalidInputException("; ".join(errors))

        payment = PaymentRecord(
            invoice_id=request.invoice_id.strip(),
            seller_id=request.seller_id.strip(),
            amount=request.decimal_amount,
            is_late=is_late,
        )

        async with self._locks.hold(("seller", payment.seller_id)):
            await self._call("add_payment", self._repo.add_payment(payment))
            await self._call("commit", self._repo.commit())

        logger.info(
            "invoice_payment_recorded",
            invoice_id=payment.invoice_id,
            seller_id=payment.seller_id,
            is_late=is_late,
        )
        return payment

    async def _update_buyer(self, buyer_key: str, change) -> BuyerHistory:
        """Read-modify-write a buyer's history under the buyer's lock."""
        async with self._locks.hold(("buyer", buyer_key)):
            current = await self._call(
                "get_buyer_history",
                self._repo.get_buyer_history(buyer_key),
            )
            if current is None:
                current = BuyerHistory.empty(buyer_key, self._scoring.default_reputation_score)

            updated = change(current)
            await self._call("write_buyer_history", self._repo.write_buyer_history(updated))
            await self._call("commit", self._repo.commit())

        return updated

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Await a repository call with the configured timeout."""
        try:
            with track_repository_latency(operation):
                return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError:
            record_repository_failure(operation, "timeout")
            raise BackingStoreUnavailableException(operation, "timed out") from None
        except BackingStoreUnavailableException:
            record_repository_failure(operation, "error")
            raise

    async def _lookup(
        self,
        operation: str,
        awaitable: Awaitable[T],
        log,
    ) -> Tuple[bool, Optional[T]]:
        """Run a read for scoring; a failed read yields (False, None)."""
        try:
            return True, await self._call(operation, awaitable)
        except BackingStoreUnavailableException as e:
            log.warning("history_lookup_failed", operation=operation, error=e.message)
            return False, None

    @staticmethod
    def _require_identifier(value: str, field_name: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputException(f"{field_name} is required")
        return value.strip()
