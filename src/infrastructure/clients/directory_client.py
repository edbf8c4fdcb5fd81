"""HTTP implementations of the client and establishment directories."""

import asyncio
from decimal import Decimal
from typing import Any, Callable, Dict
from uuid import UUID

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import (
    track_directory_fetch_latency,
    record_directory_fetch_success,
    record_directory_fetch_failure,
)
from src.domain.entities import ClientInfo, EstablishmentInfo
from src.domain.exceptions import (
    ClientNotFoundException,
    DirectoryAPIException,
    DirectoryAPITimeoutException,
    DomainException,
    EstablishmentNotFoundException,
)
from src.domain.interfaces import ClientDirectory, EstablishmentDirectory

logger = structlog.get_logger(__name__)


class _HttpDirectoryClient:
    """
    Shared GET-with-retry logic for the directory service.

    Timeouts and transport errors are retried with exponential backoff.
    A 404 is final and mapped to the resource's not-found exception; any
    other 4xx/5xx is final and mapped to DirectoryAPIException.
    """

    resource: str = "resource"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ):
        self._base_url = base_url or settings.directory_api_url
        self._timeout = timeout or settings.directory_api_timeout
        self._max_retries = max_retries or settings.directory_max_retries

    async def _fetch(
        self,
        path: str,
        not_found: Callable[[], DomainException],
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        last_exception = None

        for attempt in range(self._max_retries):
            try:
                with track_directory_fetch_latency():
                    async with httpx.AsyncClient(timeout=self._timeout) as client:
                        response = await client.get(url)

                if response.status_code == 404:
                    record_directory_fetch_failure(self.resource, "not_found")
                    raise not_found()

                if response.status_code >= 400:
                    record_directory_fetch_failure(self.resource, "error")
                    raise DirectoryAPIException(
                        message=f"Directory API error: {response.text}",
                        status_code=response.status_code,
                    )

                try:
                    data = response.json()
                except ValueError:
                    data = None
                if not isinstance(data, dict):
                    raise self._malformed(response.status_code)

                record_directory_fetch_success(self.resource)
                return data

            except httpx.TimeoutException:
                record_directory_fetch_failure(self.resource, "timeout")
                last_exception = DirectoryAPITimeoutException()
                logger.warning(
                    "directory_api_timeout",
                    url=url,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                )
            except httpx.HTTPError as e:
                record_directory_fetch_failure(self.resource, "error")
                last_exception = DirectoryAPIException(
                    message=f"Unexpected error: {str(e)}",
                )
                logger.error(
                    "directory_api_error",
                    url=url,
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or DirectoryAPIException(f"Failed to fetch {url}")

    def _malformed(self, status_code: int | None = None) -> DirectoryAPIException:
        record_directory_fetch_failure(self.resource, "malformed")
        return DirectoryAPIException(
            message=f"Malformed {self.resource} payload from directory API",
            status_code=status_code,
        )


class HttpClientDirectory(_HttpDirectoryClient, ClientDirectory):
    """HTTP client for ``GET /clients/{id}``."""

    resource = "client"

    async def get_client_by_id(self, client_id: int) -> ClientInfo:
        data = await self._fetch(
            f"/clients/{client_id}",
            lambda: ClientNotFoundException(client_id),
        )

        credit_limit = data.get("credit_limit")

        try:
            return ClientInfo(
                id=int(data.get("id", client_id)),
                name=data.get("name", ""),
                is_active=bool(data.get("is_active", True)),
                credit_limit=Decimal(str(credit_limit)) if credit_limit is not None else None,
                email=data.get("email"),
                phone=data.get("phone"),
            )
        except (TypeError, ValueError, ArithmeticError):
            raise self._malformed()


class HttpEstablishmentDirectory(_HttpDirectoryClient, EstablishmentDirectory):
    """HTTP client for ``GET /establishments/{id}``."""

    resource = "establishment"

    async def get_establishment_by_id(self, establishment_id: int) -> EstablishmentInfo:
        data = await self._fetch(
            f"/establishments/{establishment_id}",
            lambda: EstablishmentNotFoundException(establishment_id),
        )

        rule_id = data.get("late_fee_rule_id")

        try:
            return EstablishmentInfo(
                id=int(data.get("id", establishment_id)),
                name=data.get("name", ""),
                admin_id=int(data["admin_id"]),
                late_fee_rule_id=UUID(str(rule_id)) if rule_id else None,
            )
        except (KeyError, TypeError, ValueError):
            raise self._malformed()
