"""
Integration tests for resilience and error handling.

These tests verify:
1. Directory API failures surface as 503 without touching the ledger
2. The HTTP directory client retries timeouts with backoff
3. 404 and other HTTP errors are final and mapped to domain exceptions
"""

from uuid import uuid4

import httpx
import pytest
from httpx import AsyncClient

from src.domain.exceptions import (
    ClientNotFoundException,
    DirectoryAPIException,
    DirectoryAPITimeoutException,
)
from src.infrastructure.clients import HttpClientDirectory, HttpEstablishmentDirectory

from tests.integration.conftest import CLIENT_ID, ESTABLISHMENT_ID


BASE_URL = "http://directory.test"


@pytest.fixture
def directory_transport(monkeypatch):
    """
    Route every httpx.AsyncClient created by the directory client through a
    MockTransport driven by ``handler``.
    """
    real_client = httpx.AsyncClient
    calls = []

    def install(handler):
        def recording_handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return handler(request)

        def make_client(**kwargs):
            return real_client(transport=httpx.MockTransport(recording_handler), **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", make_client)
        return calls

    return install


# =============================================================================
# Directory Failure Tests
# =============================================================================

class TestDirectoryFailure:
    @pytest.mark.asyncio
    async def test_directory_error_returns_503(
        self,
        client: AsyncClient,
        mock_client_directory,
        credit_request_payload: dict,
    ):
        mock_client_directory.fail_mode = True

        response = await client.post("/v1/credit-requests", json=credit_request_payload)

        assert response.status_code == 503
        assert response.json()["error"] == "DIRECTORY_API_ERROR"

        pending = await client.get(
            f"/v1/establishments/{ESTABLISHMENT_ID}/credit-requests/pending"
        )
        assert pending.json() == []

    @pytest.mark.asyncio
    async def test_directory_timeout_returns_503(
        self,
        client: AsyncClient,
        mock_client_directory,
        account_payload: dict,
    ):
        async def raise_timeout(client_id):
            raise DirectoryAPITimeoutException()

        mock_client_directory.get_client_by_id = raise_timeout

        response = await client.post("/v1/credit-accounts", json=account_payload)

        assert response.status_code == 503
        assert response.json()["error"] == "DIRECTORY_API_TIMEOUT"

        accounts = await client.get(f"/v1/establishments/{ESTABLISHMENT_ID}/credit-accounts")
        assert accounts.json() == []


# =============================================================================
# HTTP Directory Client Tests
# =============================================================================

class TestHttpDirectoryClient:
    @pytest.mark.asyncio
    async def test_fetches_client(self, directory_transport):
        calls = directory_transport(
            lambda request: httpx.Response(
                200,
                json={"id": CLIENT_ID, "name": "Maria Silva", "is_active": False},
            )
        )
        directory = HttpClientDirectory(base_url=BASE_URL, max_retries=2)

        client = await directory.get_client_by_id(CLIENT_ID)

        assert client.id == CLIENT_ID
        assert client.name == "Maria Silva"
        assert client.is_active is False
        assert str(calls[0].url) == f"{BASE_URL}/clients/{CLIENT_ID}"

    @pytest.mark.asyncio
    async def test_fetches_establishment_with_default_rule(self, directory_transport):
        rule_id = uuid4()
        directory_transport(
            lambda request: httpx.Response(
                200,
                json={
                    "id": ESTABLISHMENT_ID,
                    "name": "Mercado Central",
                    "admin_id": 7,
                    "late_fee_rule_id": str(rule_id),
                },
            )
        )
        directory = HttpEstablishmentDirectory(base_url=BASE_URL, max_retries=2)

        establishment = await directory.get_establishment_by_id(ESTABLISHMENT_ID)

        assert establishment.admin_id == 7
        assert establishment.late_fee_rule_id == rule_id

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self, directory_transport):
        calls = directory_transport(lambda request: httpx.Response(404))
        directory = HttpClientDirectory(base_url=BASE_URL, max_retries=3)

        with pytest.raises(ClientNotFoundException):
            await directory.get_client_by_id(CLIENT_ID)

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_server_error_is_final(self, directory_transport):
        calls = directory_transport(lambda request: httpx.Response(500, text="boom"))
        directory = HttpClientDirectory(base_url=BASE_URL, max_retries=3)

        with pytest.raises(DirectoryAPIException) as exc_info:
            await directory.get_client_by_id(CLIENT_ID)

        assert exc_info.value.status_code == 500
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_timeout_is_retried(self, directory_transport):
        attempts = {"count": 0}

        def flaky(request: httpx.Request) -> httpx.Response:
            attempts["count"] += 1
            if attempts["count"] == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json={"id": CLIENT_ID, "name": "Maria Silva"})

        calls = directory_transport(flaky)
        directory = HttpClientDirectory(base_url=BASE_URL, max_retries=2)

        client = await directory.get_client_by_id(CLIENT_ID)

        assert client.name == "Maria Silva"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_persistent_timeout_raises(self, directory_transport):
        def always_timeout(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        calls = directory_transport(always_timeout)
        directory = HttpClientDirectory(base_url=BASE_URL, max_retries=2)

        with pytest.raises(DirectoryAPITimeoutException):
            await directory.get_client_by_id(CLIENT_ID)

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_establishment_without_admin_is_rejected(self, directory_transport):
        calls = directory_transport(
            lambda request: httpx.Response(
                200,
                json={"id": ESTABLISHMENT_ID, "name": "Mercado Central"},
            )
        )
        directory = HttpEstablishmentDirectory(base_url=BASE_URL, max_retries=3)

        with pytest.raises(DirectoryAPIException) as exc_info:
            await directory.get_establishment_by_id(ESTABLISHMENT_ID)

        assert exc_info.value.code == "DIRECTORY_API_ERROR"
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_non_json_body_is_rejected(self, directory_transport):
        directory_transport(lambda request: httpx.Response(200, text="<html>oops</html>"))
        directory = HttpClientDirectory(base_url=BASE_URL, max_retries=2)

        with pytest.raises(DirectoryAPIException) as exc_info:
            await directory.get_client_by_id(CLIENT_ID)

        assert exc_info.value.status_code == 200
