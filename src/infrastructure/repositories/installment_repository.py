"""PostgreSQL repository implementation for installments."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Installment, InstallmentStatus
from src.domain.exceptions import InstallmentNotFoundException
from src.domain.interfaces import InstallmentRepository
from src.infrastructure.database.models import InstallmentModel


class PostgresInstallmentRepository(InstallmentRepository):
    """PostgreSQL-backed installment repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, installment: Installment) -> Installment:
        self._session.add(
            InstallmentModel(
                id=installment.id,
                credit_account_id=installment.credit_account_id,
                due_date=installment.due_date,
                amount=installment.amount,
                status=installment.status.value,
                paid_at=installment.paid_at,
                created_at=installment.created_at,
            )
        )
        await self._session.flush()

        return installment

    async def get_by_id(self, installment_id: UUID) -> Optional[Installment]:
        model = await self._session.get(InstallmentModel, installment_id)

        if model is None:
            return None

        return self._to_entity(model)

    async def update(self, installment: Installment) -> Installment:
        model = await self._session.get(InstallmentModel, installment.id)

        if model is None:
            raise InstallmentNotFoundException(str(installment.id))

        model.status = installment.status.value
        model.paid_at = installment.paid_at
        model.amount = installment.amount
        model.due_date = installment.due_date

        await self._session.flush()

        return installment

    async def get_by_credit_account_id(self, account_id: UUID) -> List[Installment]:
        stmt = (
            select(InstallmentModel)
            .where(InstallmentModel.credit_account_id == account_id)
            .order_by(InstallmentModel.due_date, InstallmentModel.created_at)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def list_overdue(self, account_id: UUID, today: date) -> List[Installment]:
        stmt = (
            select(InstallmentModel)
            .where(
                InstallmentModel.credit_account_id == account_id,
                InstallmentModel.status != InstallmentStatus.PAID.value,
                InstallmentModel.due_date < today,
            )
            .order_by(InstallmentModel.due_date)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    def _to_entity(self, model: InstallmentModel) -> Installment:
        return Installment(
            id=model.id,
            credit_account_id=model.credit_account_id,
            due_date=model.due_date,
            amount=model.amount,
            status=InstallmentStatus(model.status),
            paid_at=model.paid_at,
            created_at=model.created_at,
        )
