"""Trust score API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from trustflow.application.services import TrustScoreEngine
from trustflow.core.dependencies import get_trust_score_engine
from trustflow.domain.entities import Invoice
from trustflow.presentation.schemas import (
    ErrorResponseSchema,
    InvoiceScoreRequestSchema,
    TrustScoreRecordSchema,
    TrustScoreRequestSchema,
    TrustScoreResponseSchema,
)

trust_router = APIRouter(
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
    },
)

InvoiceId = Annotated[
    str,
    Path(min_length=1, max_length=255, description="Invoice identifier"),
]


@trust_router.post(
    "/trust-score",
    response_model=TrustScoreResponseSchema,
    summary="Compute Trust Score",
    description="""Compute the trust score of an invoice amount for a seller""",
)
async def compute_trust_score(
    request: TrustScoreRequestSchema,
    engine: Annotated[TrustScoreEngine, Depends(get_trust_score_engine)],
) -> TrustScoreResponseSchema:
    """
    Compute a trust score without recording it.

    The score degrades to the base score when history is unavailable
    instead of failing.
    """
    result = await engine.compute_score(
        request.seller_id,
        request.invoice_amount,
        request.buyer_id,
    )
    return TrustScoreResponseSchema.from_entity(result)


@trust_router.post(
    "/invoices/{invoice_id}/trust-score",
    response_model=TrustScoreRecordSchema,
    status_code=201,
    summary="Score Invoice",
    description="""Score an invoice at verification time and keep an audit record""",
)
async def score_invoice(
    invoice_id: InvoiceId,
    request: InvoiceScoreRequestSchema,
    engine: Annotated[TrustScoreEngine, Depends(get_trust_score_engine)],
) -> TrustScoreRecordSchema:
    record = await engine.score_invoice(
        Invoice(
            id=invoice_id,
            seller_id=request.seller_id,
            amount=request.amount,
            buyer_id=request.buyer_id,
        )
    )
    return TrustScoreRecordSchema.from_entity(record)


@trust_router.get(
    "/invoices/{invoice_id}/trust-score",
    response_model=TrustScoreRecordSchema,
    summary="Get Invoice Trust Score",
    description="""Get the latest trust score recorded for an invoice""",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Invoice never scored"},
        503: {"model": ErrorResponseSchema, "description": "History store unavailable"},
    },
)
async def get_invoice_trust_score(
    invoice_id: InvoiceId,
    engine: Annotated[TrustScoreEngine, Depends(get_trust_score_engine)],
) -> TrustScoreRecordSchema:
    record = await engine.get_score_record(invoice_id)
    return TrustScoreRecordSchema.from_entity(record)
