"""Trust score record exceptions."""

from .base import DomainException


class ScoreRecordNotFoundException(DomainException):
    """Raised when no trust score has been recorded for an invoice."""

    def __init__(self, invoice_id: str):
        super().__init__(
            message=f"Trust score not found for invoice: {invoice_id}",
            code="SCORE_RECORD_NOT_FOUND",
        )
        self.invoice_id = invoice_id
