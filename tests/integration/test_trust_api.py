"""
Integration tests for the trust score API.

These tests verify:
1. POST /v1/trust-score returns a score with its breakdown
2. Settlements and buyer payments update history visible through stats
3. Invoice score records can be read back with their hash
4. Store failures degrade scoring but fail mutations with 503
5. Concurrent settlements lose no updates
"""

import asyncio
from decimal import Decimal

import pytest
from httpx import AsyncClient

from trustflow.domain.entities import PaymentRecord, compute_trust_hash
from trustflow.infrastructure.memory import InMemoryHistoryStore


# =============================================================================
# Health Tests
# =============================================================================

class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health_returns_backend(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["history_backend"] in ("memory", "sql")


# =============================================================================
# Trust Score Endpoint Tests
# =============================================================================

class TestTrustScoreEndpoint:
    """Tests for POST /v1/trust-score."""

    @pytest.mark.asyncio
    async def test_new_seller_gets_neutral_breakdown(
        self,
        client: AsyncClient,
        score_request: dict,
    ):
        response = await client.post("/v1/trust-score", json=score_request)

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 100
        assert data["breakdown"]["seller_history"] == 20
        assert data["breakdown"]["buyer_reputation"] == 12.5
        assert data["breakdown"]["invoice_size"] == 10
        assert data["breakdown"]["penalties"] == 15
        assert data["breakdown"]["base"] == 50
        assert data["breakdown"]["degraded"] is False

    @pytest.mark.asyncio
    async def test_response_carries_request_id(
        self,
        client: AsyncClient,
        score_request: dict,
    ):
        response = await client.post(
            "/v1/trust-score",
            json=score_request,
            headers={"X-Request-ID": "req-123"},
        )

        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_score_reflects_settled_history(self, client: AsyncClient):
        """8 of 10 invoices paid, avg 100: 50 + 32 + 12.5 + 20 + 15 -> 100."""
        for i in range(10):
            response = await client.post(
                "/v1/sellers/seller_hist/settlements",
                json={"amount": "125" if i < 8 else "900", "succeeded": i < 8},
            )
            assert response.status_code == 201

        response = await client.post(
            "/v1/trust-score",
            json={"seller_id": "seller_hist", "invoice_amount": 100},
        )

        data = response.json()
        assert data["breakdown"]["seller_history"] == 32
        assert data["breakdown"]["invoice_size"] == 20
        assert data["score"] == 100

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -10, "abc"])
    async def test_invalid_amount_returns_422(self, client: AsyncClient, amount):
        response = await client.post(
            "/v1/trust-score",
            json={"seller_id": "seller_1", "invoice_amount": amount},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_sub_cent_invoice_amount_returns_422(self, client: AsyncClient):
        response = await client.post(
            "/v1/trust-score",
            json={"seller_id": "seller_1", "invoice_amount": "0.004"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_seller_returns_422(self, client: AsyncClient):
        response = await client.post("/v1/trust-score", json={"invoice_amount": 100})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_blank_seller_returns_422(self, client: AsyncClient):
        response = await client.post(
            "/v1/trust-score",
            json={"seller_id": "   ", "invoice_amount": 100},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unavailable_store_degrades_to_base_score(
        self,
        client_with_closed_store: AsyncClient,
        score_request: dict,
    ):
        response = await client_with_closed_store.post("/v1/trust-score", json=score_request)

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 50
        assert data["breakdown"]["degraded"] is True


# =============================================================================
# Seller Endpoint Tests
# =============================================================================

class TestSellerEndpoints:
    """Tests for seller stats and settlements."""

    @pytest.mark.asyncio
    async def test_unknown_seller_stats_are_zero(self, client: AsyncClient):
        response = await client.get("/v1/sellers/nobody/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["total_invoices"] == 0
        assert Decimal(data["total_raised"]) == 0
        assert data["current_trust_score"] == 50

    @pytest.mark.asyncio
    async def test_settlement_increments_once(self, client: AsyncClient):
        response = await client.post(
            "/v1/sellers/seller_1/settlements",
            json={"amount": "10", "succeeded": True},
        )

        assert response.status_code == 201
        assert response.json()["seller_id"] == "seller_1"

        stats = (await client.get("/v1/sellers/seller_1/stats")).json()
        assert stats["total_invoices"] == 1
        assert stats["successful_invoices"] == 1
        assert stats["defaulted_invoices"] == 0
        assert Decimal(stats["total_raised"]) == Decimal("10")
        assert stats["current_trust_score"] == response.json()["trust_score"]

    @pytest.mark.asyncio
    async def test_defaulted_settlement(self, client: AsyncClient):
        response = await client.post(
            "/v1/sellers/seller_2/settlements",
            json={"amount": "250.50", "succeeded": False},
        )

        # 50 + 0 + 12.5 + 10 + 15 = 87.5
        assert response.json()["trust_score"] == 88

        stats = (await client.get("/v1/sellers/seller_2/stats")).json()
        assert stats["defaulted_invoices"] == 1
        assert Decimal(stats["total_raised"]) == 0

    @pytest.mark.asyncio
    async def test_settlement_with_zero_amount_returns_422(self, client: AsyncClient):
        response = await client.post(
            "/v1/sellers/seller_1/settlements",
            json={"amount": 0, "succeeded": True},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0.004", "10000000000000000"])
    async def test_settlement_amount_outside_stored_precision_returns_422(
        self,
        client: AsyncClient,
        amount,
    ):
        response = await client.post(
            "/v1/sellers/seller_1/settlements",
            json={"amount": amount, "succeeded": True},
        )

        assert response.status_code == 422
        stats = (await client.get("/v1/sellers/seller_1/stats")).json()
        assert stats["total_invoices"] == 0

    @pytest.mark.asyncio
    async def test_blank_seller_path_returns_400(self, client: AsyncClient):
        response = await client.get("/v1/sellers/%20%20/stats")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "INVALID_INPUT"
        assert "request_id" in data

    @pytest.mark.asyncio
    async def test_settlement_on_unavailable_store_returns_503(
        self,
        client_with_closed_store: AsyncClient,
    ):
        response = await client_with_closed_store.post(
            "/v1/sellers/seller_1/settlements",
            json={"amount": "10", "succeeded": True},
        )

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"
        data = response.json()
        assert data["error"] == "BACKING_STORE_UNAVAILABLE"
        assert data["request_id"]

    @pytest.mark.asyncio
    async def test_stats_on_unavailable_store_returns_503(
        self,
        client_with_closed_store: AsyncClient,
    ):
        response = await client_with_closed_store.get("/v1/sellers/seller_1/stats")

        assert response.status_code == 503


# =============================================================================
# Buyer Endpoint Tests
# =============================================================================

class TestBuyerEndpoints:
    """Tests for buyer stats, payments and confirmations."""

    @pytest.mark.asyncio
    async def test_unknown_buyer_has_default_reputation(self, client: AsyncClient):
        response = await client.get("/v1/buyers/new@example.com/stats")

        assert response.status_code == 200
        assert response.json()["reputation_score"] == 50

    @pytest.mark.asyncio
    async def test_late_payment_lowers_reputation(self, client: AsyncClient):
        response = await client.post(
            "/v1/buyers/Late@Example.com/payments",
            json={"on_time": False},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["buyer_id"] == "late@example.com"
        assert data["reputation_score"] == 45
        assert data["late_payments"] == 1

    @pytest.mark.asyncio
    async def test_reputation_floors_at_zero(self, client: AsyncClient):
        for _ in range(11):
            await client.post("/v1/buyers/bad@example.com/payments", json={"on_time": False})

        data = (await client.get("/v1/buyers/bad@example.com/stats")).json()
        assert data["reputation_score"] == 0
        assert data["invoices_paid"] == 11

    @pytest.mark.asyncio
    async def test_buyer_reputation_feeds_trust_score(self, client: AsyncClient):
        for _ in range(4):
            await client.post("/v1/buyers/slow@example.com/payments", json={"on_time": False})

        response = await client.post(
            "/v1/trust-score",
            json={
                "seller_id": "seller_1",
                "invoice_amount": 100,
                "buyer_id": "SLOW@example.com",
            },
        )

        # reputation 30 -> 7.5 points
        assert response.json()["breakdown"]["buyer_reputation"] == 7.5

    @pytest.mark.asyncio
    async def test_confirmation_is_counted(self, client: AsyncClient):
        response = await client.post("/v1/buyers/buyer@example.com/confirmations")

        assert response.status_code == 201
        assert response.json()["invoices_confirmed"] == 1

    @pytest.mark.asyncio
    async def test_payment_without_on_time_returns_422(self, client: AsyncClient):
        response = await client.post("/v1/buyers/buyer@example.com/payments", json={})

        assert response.status_code == 422


# =============================================================================
# Invoice Score Record Tests
# =============================================================================

class TestInvoiceScoreRecords:
    """Tests for scoring invoices at verification time."""

    @pytest.mark.asyncio
    async def test_score_invoice_and_read_back(self, client: AsyncClient):
        response = await client.post(
            "/v1/invoices/inv_42/trust-score",
            json={"seller_id": "seller_1", "amount": "500", "buyer_id": "b@example.com"},
        )

        assert response.status_code == 201
        created = response.json()
        assert created["invoice_id"] == "inv_42"
        assert created["trust_hash"] == compute_trust_hash("inv_42", created["score"])

        response = await client.get("/v1/invoices/inv_42/trust-score")

        assert response.status_code == 200
        fetched = response.json()
        assert fetched["score"] == created["score"]
        assert fetched["trust_hash"] == created["trust_hash"]
        assert fetched["breakdown"] == created["breakdown"]

    @pytest.mark.asyncio
    async def test_unscored_invoice_returns_404(self, client: AsyncClient):
        response = await client.get("/v1/invoices/inv_missing/trust-score")

        assert response.status_code == 404
        assert response.json()["error"] == "SCORE_RECORD_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_score_invoice_with_unavailable_store_still_scores(
        self,
        client_with_closed_store: AsyncClient,
    ):
        response = await client_with_closed_store.post(
            "/v1/invoices/inv_1/trust-score",
            json={"seller_id": "seller_1", "amount": "500"},
        )

        assert response.status_code == 201
        assert response.json()["score"] == 50
        assert response.json()["breakdown"]["degraded"] is True


# =============================================================================
# In-Memory Backend Tests
# =============================================================================

class TestInMemoryBackend:
    """Tests against the in-memory store, which tolerates concurrent requests."""

    @pytest.mark.asyncio
    async def test_concurrent_settlements_lose_no_updates(
        self,
        memory_client: AsyncClient,
    ):
        n = 20

        responses = await asyncio.gather(
            *(
                memory_client.post(
                    "/v1/sellers/seller_busy/settlements",
                    json={"amount": "50", "succeeded": True},
                )
                for _ in range(n)
            )
        )

        assert all(r.status_code == 201 for r in responses)
        stats = (await memory_client.get("/v1/sellers/seller_busy/stats")).json()
        assert stats["total_invoices"] == n
        assert Decimal(stats["total_raised"]) == Decimal("50") * n

    @pytest.mark.asyncio
    async def test_late_payments_ledger_feeds_penalties(
        self,
        memory_client: AsyncClient,
        history_store: InMemoryHistoryStore,
    ):
        for i in range(3):
            history_store.record_payment(
                PaymentRecord(
                    invoice_id=f"inv_{i}",
                    seller_id="seller_late",
                    amount=Decimal("100"),
                    is_late=True,
                )
            )

        response = await memory_client.post(
            "/v1/trust-score",
            json={"seller_id": "seller_late", "invoice_amount": 10},
        )

        # 50 + 20 + 12.5 + 10 + 5 = 97.5
        assert response.json()["breakdown"]["penalties"] == 5
        assert response.json()["score"] == 98

    @pytest.mark.asyncio
    async def test_concurrent_payments_each_report_their_own_write(
        self,
        memory_client: AsyncClient,
    ):
        n = 6

        responses = await asyncio.gather(
            *(
                memory_client.post(
                    "/v1/buyers/busy@example.com/payments",
                    json={"on_time": False},
                )
                for _ in range(n)
            )
        )

        late_counts = sorted(r.json()["late_payments"] for r in responses)
        assert late_counts == list(range(1, n + 1))
