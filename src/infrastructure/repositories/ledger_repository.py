"""PostgreSQL repository implementation for ledger entries."""

from datetime import date
from typing import List
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import (
    CreditAccountHistory,
    LateFee,
    RecipientType,
    Transaction,
    TransactionType,
)
from src.domain.interfaces import LedgerRepository
from src.infrastructure.database.models import (
    CreditAccountHistoryModel,
    LateFeeModel,
    TransactionModel,
)


class PostgresLedgerRepository(LedgerRepository):
    """PostgreSQL-backed repository for transactions, history and late fees."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add_transaction(self, transaction: Transaction) -> Transaction:
        self._session.add(
            TransactionModel(
                id=transaction.id,
                credit_account_id=transaction.credit_account_id,
                type=transaction.type.value,
                amount=transaction.amount,
                recipient_type=transaction.recipient_type.value,
                recipient_id=transaction.recipient_id,
                description=transaction.description,
                occurred_at=transaction.occurred_at,
            )
        )
        await self._session.flush()

        return transaction

    async def add_history(self, entry: CreditAccountHistory) -> CreditAccountHistory:
        self._session.add(
            CreditAccountHistoryModel(
                id=entry.id,
                credit_account_id=entry.credit_account_id,
                transaction_id=entry.transaction_id,
                type=entry.type.value,
                amount=entry.amount,
                resulting_balance=entry.resulting_balance,
                description=entry.description,
                occurred_at=entry.occurred_at,
            )
        )
        await self._session.flush()

        return entry

    async def add_late_fee(self, late_fee: LateFee) -> LateFee:
        self._session.add(
            LateFeeModel(
                id=late_fee.id,
                credit_account_id=late_fee.credit_account_id,
                rule_id=late_fee.rule_id,
                amount=late_fee.amount,
                days_overdue=late_fee.days_overdue,
                applied_on=late_fee.applied_on,
                created_at=late_fee.created_at,
            )
        )
        await self._session.flush()

        return late_fee

    async def list_transactions(
        self,
        account_id: UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Transaction]:
        stmt = (
            select(TransactionModel)
            .where(TransactionModel.credit_account_id == account_id)
            .order_by(TransactionModel.occurred_at.desc(), TransactionModel.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)

        return [
            Transaction(
                id=model.id,
                credit_account_id=model.credit_account_id,
                type=TransactionType(model.type),
                amount=model.amount,
                recipient_type=RecipientType(model.recipient_type),
                recipient_id=model.recipient_id,
                description=model.description,
                occurred_at=model.occurred_at,
            )
            for model in result.scalars().all()
        ]

    async def list_history(
        self,
        account_id: UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> List[CreditAccountHistory]:
        stmt = (
            select(CreditAccountHistoryModel)
            .where(CreditAccountHistoryModel.credit_account_id == account_id)
            .order_by(
                CreditAccountHistoryModel.occurred_at.desc(),
                CreditAccountHistoryModel.id,
            )
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)

        return [
            CreditAccountHistory(
                id=model.id,
                credit_account_id=model.credit_account_id,
                transaction_id=model.transaction_id,
                type=TransactionType(model.type),
                amount=model.amount,
                resulting_balance=model.resulting_balance,
                description=model.description,
                occurred_at=model.occurred_at,
            )
            for model in result.scalars().all()
        ]

    async def list_late_fees(self, account_id: UUID) -> List[LateFee]:
        stmt = (
            select(LateFeeModel)
            .where(LateFeeModel.credit_account_id == account_id)
            .order_by(LateFeeModel.applied_on.desc(), LateFeeModel.created_at.desc())
        )
        result = await self._session.execute(stmt)

        return [
            LateFee(
                id=model.id,
                credit_account_id=model.credit_account_id,
                rule_id=model.rule_id,
                amount=model.amount,
                days_overdue=model.days_overdue,
                applied_on=model.applied_on,
                created_at=model.created_at,
            )
            for model in result.scalars().all()
        ]

    async def has_late_fee_since(self, account_id: UUID, since: date) -> bool:
        stmt = select(
            exists().where(
                LateFeeModel.credit_account_id == account_id,
                LateFeeModel.applied_on >= since,
            )
        )
        result = await self._session.execute(stmt)
        return bool(result.scalar())
