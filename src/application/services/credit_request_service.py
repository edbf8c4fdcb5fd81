"""Credit request service - application, approval and rejection workflow."""

from typing import List
from uuid import UUID

import structlog

from src.core.metrics import record_credit_request
from src.domain.entities import CreditRequest, EstablishmentInfo
from src.domain.exceptions import (
    ClientInactiveException,
    CreditAccountAlreadyExistsException,
    CreditRequestNotFoundException,
    CreditRequestNotPendingException,
    InvalidCreditTermsException,
    NotEstablishmentAdminException,
)
from src.domain.interfaces import (
    ClientDirectory,
    CreditAccountRepository,
    CreditRequestRepository,
    EstablishmentDirectory,
)
from src.application.dto import (
    CreateCreditAccountRequest,
    CreateCreditRequest,
    CreditRequestResponse,
)
from src.service.ledger import to_money, utcnow

from .credit_account_service import CreditAccountService

logger = structlog.get_logger(__name__)


class CreditRequestService:
    """
    Application service for credit requests.

    Only the establishment's admin may decide a request. Approval opens the
    credit account and marks the request APPROVED in one atomic unit; a
    request is decided at most once.
    """

    def __init__(
        self,
        request_repository: CreditRequestRepository,
        account_repository: CreditAccountRepository,
        account_service: CreditAccountService,
        client_directory: ClientDirectory,
        establishment_directory: EstablishmentDirectory,
    ):
        self._request_repo = request_repository
        self._account_repo = account_repository
        self._account_service = account_service
        self._clients = client_directory
        self._establishments = establishment_directory

    async def create_credit_request(self, request: CreateCreditRequest) -> CreditRequestResponse:
        """
        File a credit application on behalf of a client.

        Raises:
            InvalidCreditTermsException: If the requested terms are invalid
            ClientNotFoundException: If the client is unknown
            ClientInactiveException: If the client is inactive
            EstablishmentNotFoundException: If the establishment is unknown
            CreditAccountAlreadyExistsException: If the client already holds
                an account at the establishment
        """
        errors = request.validate()
        if errors:
            raise InvalidCreditTermsException("; ".join(errors))

        client = await self._clients.get_client_by_id(request.client_id)
        if not client.is_active:
            raise ClientInactiveException(client.id)

        establishment = await self._establishments.get_establishment_by_id(
            request.establishment_id
        )

        if await self._account_repo.exists_for_client(client.id, establishment.id):
            raise CreditAccountAlreadyExistsException(client.id, establishment.id)

        credit_request = CreditRequest(
            client_id=client.id,
            establishment_id=establishment.id,
            requested_credit_limit=to_money(request.requested_credit_limit),
            monthly_due_day=request.monthly_due_day,
            interest_rate=request.interest_rate,
            interest_type=request.interest_type,
            credit_type=request.credit_type,
            grace_period_months=request.grace_period_months,
        )
        await self._request_repo.save(credit_request)

        record_credit_request("created")
        logger.info(
            "credit_request_created",
            credit_request_id=str(credit_request.id),
            client_id=client.id,
            establishment_id=establishment.id,
            requested_credit_limit=str(credit_request.requested_credit_limit),
        )

        return CreditRequestResponse.from_entity(credit_request)

    async def get_credit_request(self, request_id: UUID) -> CreditRequestResponse:
        credit_request = await self._request_repo.get_by_id(request_id)
        if credit_request is None:
            raise CreditRequestNotFoundException(str(request_id))
        return CreditRequestResponse.from_entity(credit_request)

    async def approve_credit_request(
        self,
        request_id: UUID,
        acting_admin_id: int,
    ) -> CreditRequestResponse:
        """
        Approve a pending request and open the matching credit account.

        The account takes the requested terms and the establishment's
        default late-fee rule.

        Raises:
            CreditRequestNotFoundException: If the request doesn't exist
            NotEstablishmentAdminException: If the caller is not the admin
            CreditRequestNotPendingException: If the request was already decided
        """
        establishment = await self._authorize(request_id, acting_admin_id)

        async with self._account_repo.atomic():
            credit_request = await self._lock_pending(request_id)

            account = await self._account_service.open_account(
                CreateCreditAccountRequest(
                    establishment_id=credit_request.establishment_id,
                    client_id=credit_request.client_id,
                    credit_limit=credit_request.requested_credit_limit,
                    monthly_due_day=credit_request.monthly_due_day,
                    interest_rate=credit_request.interest_rate,
                    interest_type=credit_request.interest_type,
                    credit_type=credit_request.credit_type,
                    grace_period_months=credit_request.grace_period_months,
                ),
                establishment=establishment,
            )

            credit_request.approve(account.id, acting_admin_id, at=utcnow())
            await self._request_repo.update(credit_request)

        record_credit_request("approved")
        logger.info(
            "credit_request_approved",
            credit_request_id=str(request_id),
            credit_account_id=str(account.id),
            admin_id=acting_admin_id,
        )

        return CreditRequestResponse.from_entity(credit_request)

    async def reject_credit_request(
        self,
        request_id: UUID,
        acting_admin_id: int,
    ) -> CreditRequestResponse:
        await self._authorize(request_id, acting_admin_id)

        async with self._account_repo.atomic():
            credit_request = await self._lock_pending(request_id)
            credit_request.reject(acting_admin_id, at=utcnow())
            await self._request_repo.update(credit_request)

        record_credit_request("rejected")
        logger.info(
            "credit_request_rejected",
            credit_request_id=str(request_id),
            admin_id=acting_admin_id,
        )

        return CreditRequestResponse.from_entity(credit_request)

    async def list_pending(self, establishment_id: int) -> List[CreditRequestResponse]:
        requests = await self._request_repo.list_pending(establishment_id)
        return [CreditRequestResponse.from_entity(r) for r in requests]

    async def _authorize(self, request_id: UUID, acting_admin_id: int) -> EstablishmentInfo:
        credit_request = await self._request_repo.get_by_id(request_id)
        if credit_request is None:
            raise CreditRequestNotFoundException(str(request_id))

        establishment = await self._establishments.get_establishment_by_id(
            credit_request.establishment_id
        )
        if establishment.admin_id != acting_admin_id:
            record_credit_request("forbidden")
            logger.warning(
                "credit_request_forbidden",
                credit_request_id=str(request_id),
                user_id=acting_admin_id,
                establishment_id=establishment.id,
            )
            raise NotEstablishmentAdminException(acting_admin_id, establishment.id)

        return establishment

    async def _lock_pending(self, request_id: UUID) -> CreditRequest:
        credit_request = await self._request_repo.get_for_update(request_id)
        if credit_request is None:
            raise CreditRequestNotFoundException(str(request_id))
        if not credit_request.is_pending:
            raise CreditRequestNotPendingException(str(request_id), credit_request.status.value)
        return credit_request
