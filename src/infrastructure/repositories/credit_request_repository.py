"""PostgreSQL repository implementation for credit requests."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import (
    CreditRequest,
    CreditRequestStatus,
    CreditType,
    InterestType,
)
from src.domain.exceptions import CreditRequestNotFoundException
from src.domain.interfaces import CreditRequestRepository
from src.infrastructure.database.models import CreditRequestModel


class PostgresCreditRequestRepository(CreditRequestRepository):
    """PostgreSQL-backed credit request repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, request: CreditRequest) -> CreditRequest:
        model = CreditRequestModel(
            id=request.id,
            client_id=request.client_id,
            establishment_id=request.establishment_id,
            requested_credit_limit=request.requested_credit_limit,
            monthly_due_day=request.monthly_due_day,
            interest_rate=request.interest_rate,
            interest_type=request.interest_type.value,
            credit_type=request.credit_type.value,
            grace_period_months=request.grace_period_months,
            status=request.status.value,
            created_at=request.created_at,
        )

        self._session.add(model)
        await self._session.flush()

        return request

    async def get_by_id(self, request_id: UUID) -> Optional[CreditRequest]:
        model = await self._session.get(CreditRequestModel, request_id)

        if model is None:
            return None

        return self._to_entity(model)

    async def get_for_update(self, request_id: UUID) -> Optional[CreditRequest]:
        stmt = (
            select(CreditRequestModel)
            .where(CreditRequestModel.id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def update(self, request: CreditRequest) -> CreditRequest:
        model = await self._session.get(CreditRequestModel, request.id)

        if model is None:
            raise CreditRequestNotFoundException(str(request.id))

        model.status = request.status.value
        model.approved_at = request.approved_at
        model.rejected_at = request.rejected_at
        model.decided_by = request.decided_by
        model.credit_account_id = request.credit_account_id

        await self._session.flush()

        return request

    async def list_pending(self, establishment_id: int) -> List[CreditRequest]:
        stmt = (
            select(CreditRequestModel)
            .where(
                CreditRequestModel.establishment_id == establishment_id,
                CreditRequestModel.status == CreditRequestStatus.PENDING.value,
            )
            .order_by(CreditRequestModel.created_at, CreditRequestModel.id)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    def _to_entity(self, model: CreditRequestModel) -> CreditRequest:
        return CreditRequest(
            id=model.id,
            client_id=model.client_id,
            establishment_id=model.establishment_id,
            requested_credit_limit=model.requested_credit_limit,
            monthly_due_day=model.monthly_due_day,
            interest_rate=model.interest_rate,
            interest_type=InterestType(model.interest_type),
            credit_type=CreditType(model.credit_type),
            grace_period_months=model.grace_period_months,
            status=CreditRequestStatus(model.status),
            approved_at=model.approved_at,
            rejected_at=model.rejected_at,
            decided_by=model.decided_by,
            credit_account_id=model.credit_account_id,
            created_at=model.created_at,
        )
