"""Seller and buyer history API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from trustflow.application.services import TrustScoreEngine
from trustflow.core.dependencies import get_trust_score_engine
from trustflow.presentation.schemas import (
    BuyerPaymentRequestSchema,
    BuyerStatsSchema,
    ErrorResponseSchema,
    SellerStatsSchema,
    SettlementRequestSchema,
    SettlementResponseSchema,
)

history_router = APIRouter(
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        503: {"model": ErrorResponseSchema, "description": "History store unavailable"},
    },
)

SellerId = Annotated[
    str,
    Path(min_length=1, max_length=255, description="Seller identifier"),
]
BuyerId = Annotated[
    str,
    Path(min_length=1, max_length=255, description="Buyer e-mail"),
]


@history_router.get(
    "/sellers/{seller_id}/stats",
    response_model=SellerStatsSchema,
    summary="Get Seller Stats",
    description="""Settlement history of a seller; zeroes for unknown sellers""",
)
async def get_seller_stats(
    seller_id: SellerId,
    engine: Annotated[TrustScoreEngine, Depends(get_trust_score_engine)],
) -> SellerStatsSchema:
    history = await engine.get_seller_stats(seller_id)
    return SellerStatsSchema.from_entity(history)


@history_router.post(
    "/sellers/{seller_id}/settlements",
    response_model=SettlementResponseSchema,
    status_code=201,
    summary="Record Settlement",
    description="""
    Record the outcome of a seller's invoice and recompute the seller's
    trust score.

    Not idempotent. A 503 means nothing was recorded and the call may be
    retried.
    """,
)
async def record_settlement(
    seller_id: SellerId,
    request: SettlementRequestSchema,
    engine: Annotated[TrustScoreEngine, Depends(get_trust_score_engine)],
) -> SettlementResponseSchema:
    score = await engine.record_settlement(seller_id, request.amount, request.succeeded)
    return SettlementResponseSchema(seller_id=seller_id.strip(), trust_score=score)


@history_router.get(
    "/buyers/{buyer_id}/stats",
    response_model=BuyerStatsSchema,
    summary="Get Buyer Stats",
    description="""Payment history of a buyer; default reputation for unknown buyers""",
)
async def get_buyer_stats(
    buyer_id: BuyerId,
    engine: Annotated[TrustScoreEngine, Depends(get_trust_score_engine)],
) -> BuyerStatsSchema:
    history = await engine.get_buyer_stats(buyer_id)
    return BuyerStatsSchema.from_entity(history)


@history_router.post(
    "/buyers/{buyer_id}/payments",
    response_model=BuyerStatsSchema,
    status_code=201,
    summary="Record Buyer Payment",
    description="""Record one payment by a buyer. Not idempotent.""",
)
async def record_buyer_payment(
    buyer_id: BuyerId,
    request: BuyerPaymentRequestSchema,
    engine: Annotated[TrustScoreEngine, Depends(get_trust_score_engine)],
) -> BuyerStatsSchema:
    history = await engine.record_buyer_payment(buyer_id, request.on_time)
    return BuyerStatsSchema.from_entity(history)


@history_router.post(
    "/buyers/{buyer_id}/confirmations",
    response_model=BuyerStatsSchema,
    status_code=201,
    summary="Record Buyer Confirmation",
    description="""Count an invoice confirmation by a buyer""",
)
async def record_buyer_confirmation(
    buyer_id: BuyerId,
    engine: Annotated[TrustScoreEngine, Depends(get_trust_score_engine)],
) -> BuyerStatsSchema:
    history = await engine.record_buyer_confirmation(buyer_id)
    return BuyerStatsSchema.from_entity(history)
