"""Installment service - repayment schedules for LONG_TERM accounts."""

from datetime import date
from decimal import Decimal
from typing import List
from uuid import UUID

import structlog

from src.domain.entities import CreditAccount, CreditType, Installment, InstallmentStatus
from src.domain.exceptions import (
    CreditAccountNotFoundException,
    InstallmentAlreadyPaidException,
    InstallmentNotFoundException,
    InstallmentsNotSupportedException,
    InvalidAmountException,
)
from src.domain.interfaces import CreditAccountRepository, InstallmentRepository
from src.application.dto import InstallmentResponse
from src.service.ledger import to_money, utcnow

logger = structlog.get_logger(__name__)


class InstallmentService:
    def __init__(
        self,
        account_repository: CreditAccountRepository,
        installment_repository: InstallmentRepository,
    ):
        self._account_repo = account_repository
        self._installment_repo = installment_repository

    async def create_installment(
        self,
        account_id: UUID,
        due_date: date,
        amount: Decimal,
    ) -> InstallmentResponse:
        """
        Schedule an installment on a LONG_TERM account.

        Raises:
            CreditAccountNotFoundException: If the account doesn't exist
            InstallmentsNotSupportedException: If the account is not LONG_TERM
            InvalidAmountException: If the amount is not positive
        """
        account = await self._get_account(account_id)
        if account.credit_type is not CreditType.LONG_TERM:
            raise InstallmentsNotSupportedException(str(account_id))

        amount = to_money(amount)
        if amount <= 0:
            raise InvalidAmountException(amount)

        installment = Installment(
            credit_account_id=account.id,
            due_date=due_date,
            amount=amount,
        )
        await self._installment_repo.save(installment)

        logger.info(
            "installment_created",
            credit_account_id=str(account_id),
            installment_id=str(installment.id),
            due_date=due_date.isoformat(),
            amount=str(amount),
        )

        return InstallmentResponse.from_entity(installment)

    async def list_installments(self, account_id: UUID) -> List[InstallmentResponse]:
        await self._get_account(account_id)
        installments = await self._installment_repo.get_by_credit_account_id(account_id)
        return [InstallmentResponse.from_entity(i) for i in installments]

    async def list_overdue_installments(
        self,
        account_id: UUID,
        today: date | None = None,
    ) -> List[InstallmentResponse]:
        """Unpaid installments whose due date is before ``today``."""
        today = today or utcnow().date()
        await self._get_account(account_id)
        installments = await self._installment_repo.list_overdue(account_id, today)
        return [InstallmentResponse.from_entity(i) for i in installments]

    async def mark_installment_paid(self, installment_id: UUID) -> InstallmentResponse:
        installment = await self._installment_repo.get_by_id(installment_id)
        if installment is None:
            raise InstallmentNotFoundException(str(installment_id))
        if installment.status is InstallmentStatus.PAID:
            raise InstallmentAlreadyPaidException(str(installment_id))

        installment.mark_paid()
        await self._installment_repo.update(installment)

        logger.info(
            "installment_paid",
            installment_id=str(installment_id),
            credit_account_id=str(installment.credit_account_id),
        )

        return InstallmentResponse.from_entity(installment)

    async def _get_account(self, account_id: UUID) -> CreditAccount:
        account = await self._account_repo.get_by_id(account_id)
        if account is None:
            raise CreditAccountNotFoundException(str(account_id))
        return account
