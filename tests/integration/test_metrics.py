"""
Integration tests for metrics tracking.

These tests verify:
1. The metrics endpoint returns Prometheus text format
2. Ledger postings and rejections are counted by type and reason
3. Credit request outcomes and batch runs are counted

Counters are process-global, so assertions compare before/after deltas.
"""

from datetime import datetime
from typing import Optional

import pytest
from httpx import AsyncClient

from src.core.config import settings
from src.core.metrics import REGISTRY

from tests.integration.conftest import ESTABLISHMENT_ID


def sample(name: str, **labels) -> float:
    value: Optional[float] = REGISTRY.get_sample_value(name, labels)
    return value or 0.0


# =============================================================================
# Metrics Endpoint Tests
# =============================================================================

class TestMetricsEndpoint:
    @pytest.mark.asyncio
    async def test_metrics_endpoint_returns_prometheus_format(self, client: AsyncClient):
        response = await client.get("/metrics")

        assert response.status_code == 200
        content_type = response.headers.get("content-type", "")
        assert "text/plain" in content_type or "text/openmetrics" in content_type
        assert "# HELP" in response.text

    @pytest.mark.asyncio
    async def test_metrics_include_ledger_metrics(self, client: AsyncClient, open_account):
        account = await open_account()
        await client.post(
            f"/v1/credit-accounts/{account.id}/purchases",
            json={"amount": "25.00"},
        )

        content = (await client.get("/metrics")).text

        assert "storecredit_ledger_transactions_total" in content
        assert "storecredit_ledger_amount_total" in content
        assert "storecredit_http_requests_total" in content

    @pytest.mark.asyncio
    async def test_metrics_can_be_disabled(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "metrics_enabled", False)

        response = await client.get("/metrics")

        assert response.status_code == 404


# =============================================================================
# Ledger Metrics Tests
# =============================================================================

class TestLedgerMetrics:
    @pytest.mark.asyncio
    async def test_purchase_increments_counters(self, client: AsyncClient, open_account):
        account = await open_account()
        count_before = sample("storecredit_ledger_transactions_total", type="PURCHASE")
        amount_before = sample("storecredit_ledger_amount_total", type="PURCHASE")

        response = await client.post(
            f"/v1/credit-accounts/{account.id}/purchases",
            json={"amount": "40.00"},
        )
        assert response.status_code == 201

        assert sample("storecredit_ledger_transactions_total", type="PURCHASE") == count_before + 1
        assert sample("storecredit_ledger_amount_total", type="PURCHASE") == amount_before + 40.0

    @pytest.mark.asyncio
    async def test_payment_amount_is_counted_positive(self, client: AsyncClient, open_account):
        account = await open_account(balance="100.00")
        amount_before = sample("storecredit_ledger_amount_total", type="PAYMENT")

        await client.post(
            f"/v1/credit-accounts/{account.id}/payments",
            json={"amount": "30.00"},
        )

        assert sample("storecredit_ledger_amount_total", type="PAYMENT") == amount_before + 30.0

    @pytest.mark.asyncio
    async def test_rejection_is_counted_and_nothing_posted(
        self,
        client: AsyncClient,
        open_account,
    ):
        account = await open_account(credit_limit="100.00")
        rejected_before = sample(
            "storecredit_rejected_operations_total",
            operation="purchase",
            reason="credit_limit_exceeded",
        )
        posted_before = sample("storecredit_ledger_transactions_total", type="PURCHASE")

        response = await client.post(
            f"/v1/credit-accounts/{account.id}/purchases",
            json={"amount": "500.00"},
        )
        assert response.status_code == 422

        assert sample(
            "storecredit_rejected_operations_total",
            operation="purchase",
            reason="credit_limit_exceeded",
        ) == rejected_before + 1
        assert sample("storecredit_ledger_transactions_total", type="PURCHASE") == posted_before


# =============================================================================
# Workflow Metrics Tests
# =============================================================================

class TestWorkflowMetrics:
    @pytest.mark.asyncio
    async def test_credit_request_outcomes(
        self,
        client: AsyncClient,
        credit_request_payload: dict,
    ):
        created_before = sample("storecredit_credit_requests_total", outcome="created")
        approved_before = sample("storecredit_credit_requests_total", outcome="approved")

        response = await client.post("/v1/credit-requests", json=credit_request_payload)
        request_id = response.json()["credit_request_id"]
        await client.post(f"/v1/credit-requests/{request_id}/approve")

        assert sample("storecredit_credit_requests_total", outcome="created") == created_before + 1
        assert sample("storecredit_credit_requests_total", outcome="approved") == approved_before + 1

    @pytest.mark.asyncio
    async def test_batch_run_counted(self, interest_service, open_account):
        await open_account(balance="1000.00", last_interest_accrual_at=datetime(2025, 1, 1))
        runs_before = sample("storecredit_batch_runs_total", job="interest")
        accruals_before = sample("storecredit_ledger_transactions_total", type="INTEREST_ACCRUAL")

        await interest_service.apply_interest_to_all_accounts(
            ESTABLISHMENT_ID,
            now=datetime(2025, 2, 1),
        )

        assert sample("storecredit_batch_runs_total", job="interest") == runs_before + 1
        assert sample(
            "storecredit_ledger_transactions_total",
            type="INTEREST_ACCRUAL",
        ) == accruals_before + 1
        assert sample("storecredit_batch_latency_seconds_count", job="interest") >= 1
