"""PostgreSQL repository implementation for credit accounts."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import CreditAccount, CreditType, InterestType
from src.domain.exceptions import (
    CreditAccountAlreadyExistsException,
    CreditAccountNotFoundException,
)
from src.domain.interfaces import CreditAccountRepository
from src.infrastructure.database.models import CreditAccountModel
from src.service.ledger import utcnow


class PostgresCreditAccountRepository(CreditAccountRepository):
    """
    PostgreSQL-backed credit account repository.

    Atomic units are SAVEPOINTs on the request session, so a failed unit
    leaves earlier work in the same request intact. Row locks are taken with
    SELECT ... FOR UPDATE and survive a released SAVEPOINT; they go away only
    when the outer transaction ends, which batch runs force with commit().
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncGenerator[None, None]:
        async with self._session.begin_nested():
            yield

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def save(self, account: CreditAccount) -> CreditAccount:
        model = CreditAccountModel(
            id=account.id,
            client_id=account.client_id,
            establishment_id=account.establishment_id,
            credit_limit=account.credit_limit,
            current_balance=account.current_balance,
            monthly_due_day=account.monthly_due_day,
            interest_rate=account.interest_rate,
            interest_type=account.interest_type.value,
            credit_type=account.credit_type.value,
            grace_period_months=account.grace_period_months,
            is_blocked=account.is_blocked,
            last_interest_accrual_at=account.last_interest_accrual_at,
            late_fee_rule_id=account.late_fee_rule_id,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )

        self._session.add(model)
        await self._flush_unique(account)

        return account

    async def get_by_id(self, account_id: UUID) -> Optional[CreditAccount]:
        model = await self._session.get(CreditAccountModel, account_id)

        if model is None:
            return None

        return self._to_entity(model)

    async def get_for_update(self, account_id: UUID) -> Optional[CreditAccount]:
        stmt = (
            select(CreditAccountModel)
            .where(CreditAccountModel.id == account_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def update(self, account: CreditAccount) -> CreditAccount:
        model = await self._session.get(CreditAccountModel, account.id)

        if model is None:
            raise CreditAccountNotFoundException(str(account.id))

        model.client_id = account.client_id
        model.credit_limit = account.credit_limit
        model.current_balance = account.current_balance
        model.monthly_due_day = account.monthly_due_day
        model.interest_rate = account.interest_rate
        model.interest_type = account.interest_type.value
        model.credit_type = account.credit_type.value
        model.grace_period_months = account.grace_period_months
        model.is_blocked = account.is_blocked
        model.last_interest_accrual_at = account.last_interest_accrual_at
        model.late_fee_rule_id = account.late_fee_rule_id

        account.updated_at = utcnow()
        model.updated_at = account.updated_at

        await self._flush_unique(account)

        return account

    async def delete(self, account_id: UUID) -> None:
        model = await self._session.get(CreditAccountModel, account_id)

        if model is None:
            raise CreditAccountNotFoundException(str(account_id))

        await self._session.delete(model)
        await self._session.flush()

    async def list_by_establishment(self, establishment_id: int) -> List[CreditAccount]:
        stmt = (
            select(CreditAccountModel)
            .where(CreditAccountModel.establishment_id == establishment_id)
            .order_by(CreditAccountModel.created_at, CreditAccountModel.id)
        )
        return await self._fetch_all(stmt)

    async def list_by_client(self, client_id: int) -> List[CreditAccount]:
        stmt = (
            select(CreditAccountModel)
            .where(CreditAccountModel.client_id == client_id)
            .order_by(CreditAccountModel.created_at, CreditAccountModel.id)
        )
        return await self._fetch_all(stmt)

    async def list_with_outstanding_balance(
        self,
        establishment_id: int,
    ) -> List[CreditAccount]:
        stmt = (
            select(CreditAccountModel)
            .where(
                CreditAccountModel.establishment_id == establishment_id,
                CreditAccountModel.current_balance > 0,
            )
            .order_by(CreditAccountModel.created_at, CreditAccountModel.id)
        )
        return await self._fetch_all(stmt)

    async def exists_for_client(self, client_id: int, establishment_id: int) -> bool:
        stmt = select(
            exists().where(
                CreditAccountModel.client_id == client_id,
                CreditAccountModel.establishment_id == establishment_id,
            )
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def _fetch_all(self, stmt) -> List[CreditAccount]:
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def _flush_unique(self, account: CreditAccount) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            if "unique" in str(e.orig).lower():
                raise CreditAccountAlreadyExistsException(
                    account.client_id,
                    account.establishment_id,
                ) from e
            raise

    def _to_entity(self, model: CreditAccountModel) -> CreditAccount:
        return CreditAccount(
            id=model.id,
            client_id=model.client_id,
            establishment_id=model.establishment_id,
            credit_limit=model.credit_limit,
            current_balance=model.current_balance,
            monthly_due_day=model.monthly_due_day,
            interest_rate=model.interest_rate,
            interest_type=InterestType(model.interest_type),
            credit_type=CreditType(model.credit_type),
            grace_period_months=model.grace_period_months,
            is_blocked=model.is_blocked,
            last_interest_accrual_at=model.last_interest_accrual_at,
            late_fee_rule_id=model.late_fee_rule_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
