"""Interest service - periodic interest accrual per account and per establishment."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from src.core.metrics import (
    record_batch_failure,
    record_batch_run,
    record_ledger_transaction,
    track_batch_latency,
)
from src.domain.entities import (
    CreditAccount,
    CreditType,
    RecipientType,
    TransactionType,
)
from src.domain.exceptions import CreditAccountNotFoundException, DomainException
from src.domain.interfaces import (
    CreditAccountRepository,
    InstallmentRepository,
    LedgerRepository,
)
from src.application.dto import BatchFailure, BatchResult, LedgerOperationResult
from src.service.ledger import (
    ZERO,
    LedgerSettings,
    accrued_interest,
    interest_period_elapsed,
    ledger_settings,
    utcnow,
)

from .ledger_writer import LedgerWriter

logger = structlog.get_logger(__name__)


class InterestService:
    """
    Application service for interest accrual.

    Accrual is idempotent within one interest period: once an account has
    accrued, further calls are no-ops until a full calendar month has passed
    since ``last_interest_accrual_at``.
    """

    JOB = "interest"

    def __init__(
        self,
        account_repository: CreditAccountRepository,
        ledger_repository: LedgerRepository,
        installment_repository: InstallmentRepository,
        settings: LedgerSettings = ledger_settings,
    ):
        self._account_repo = account_repository
        self._installment_repo = installment_repository
        self._settings = settings
        self._writer = LedgerWriter(account_repository, ledger_repository, settings)

    async def apply_interest(
        self,
        account_id: UUID,
        now: datetime | None = None,
    ) -> LedgerOperationResult:
        """
        Accrue one period of interest on an account.

        Args:
            account_id: The account to accrue on
            now: Reference time (defaults to the current UTC time)

        Returns:
            LedgerOperationResult; ``applied`` is False for a no-op

        Raises:
            CreditAccountNotFoundException: If the account doesn't exist
        """
        now = now or utcnow()

        async with self._account_repo.atomic():
            account = await self._account_repo.get_for_update(account_id)
            if account is None:
                raise CreditAccountNotFoundException(str(account_id))

            result = await self._accrue(account, now)

        if result.applied:
            record_ledger_transaction(TransactionType.INTEREST_ACCRUAL.value, result.amount)
            logger.info(
                "interest_applied",
                credit_account_id=str(account_id),
                amount=str(result.amount),
                balance=str(result.resulting_balance),
            )
        else:
            logger.debug(
                "interest_skipped",
                credit_account_id=str(account_id),
                reason=result.reason,
            )

        return result

    async def apply_interest_to_all_accounts(
        self,
        establishment_id: int,
        now: datetime | None = None,
    ) -> BatchResult:
        """
        Accrue interest on every account of an establishment.

        Each account is its own transaction, committed before the next one
        starts so its row lock is not held for the rest of the run. A failing
        account is rolled back, logged and reported in the result; the run
        continues with the next account.
        """
        now = now or utcnow()
        log = logger.bind(establishment_id=establishment_id, job=self.JOB)
        record_batch_run(self.JOB)

        applied = 0
        skipped = 0
        total = ZERO
        failures = []

        with track_batch_latency(self.JOB):
            accounts = await self._account_repo.list_by_establishment(establishment_id)
            await self._account_repo.commit()
            log.info("interest_batch_started", accounts=len(accounts))

            for account in accounts:
                try:
                    result = await self.apply_interest(account.id, now)
                    await self._account_repo.commit()
                except (DomainException, SQLAlchemyError) as e:
                    await self._account_repo.rollback()
                    error = e.code if isinstance(e, DomainException) else "STORAGE_ERROR"
                    record_batch_failure(self.JOB, error)
                    log.warning(
                        "interest_account_failed",
                        credit_account_id=str(account.id),
                        error=error,
                        message=str(e),
                    )
                    failures.append(
                        BatchFailure(
                            credit_account_id=str(account.id),
                            error=error,
                            message=str(e),
                        )
                    )
                    continue

                if result.applied:
                    applied += 1
                    total += result.amount
                else:
                    skipped += 1

        log.info(
            "interest_batch_completed",
            processed=len(accounts),
            applied=applied,
            skipped=skipped,
            failed=len(failures),
            total_amount=str(total),
        )

        return BatchResult(
            establishment_id=establishment_id,
            job=self.JOB,
            processed=len(accounts),
            applied=applied,
            skipped=skipped,
            total_amount=total,
            failures=failures,
        )

    async def _accrue(self, account: CreditAccount, now: datetime) -> LedgerOperationResult:
        if account.current_balance <= 0:
            return self._skipped(account, "no_outstanding_balance")

        if not interest_period_elapsed(account.last_interest_accrual_at, now, self._settings):
            return self._skipped(account, "interest_period_not_elapsed")

        installments = []
        if account.credit_type is CreditType.LONG_TERM:
            installments = await self._installment_repo.get_by_credit_account_id(account.id)

        interest = accrued_interest(
            account.credit_type,
            account.current_balance,
            account.interest_rate,
            account.interest_type,
            account.last_interest_accrual_at,
            now,
            installments,
            self._settings,
        )

        account.last_interest_accrual_at = now

        if interest <= 0:
            # Nothing to charge; still close the period.
            await self._account_repo.update(account)
            return self._skipped(account, "zero_interest")

        transaction = await self._writer.post(
            account,
            TransactionType.INTEREST_ACCRUAL,
            interest,
            RecipientType.CLIENT,
            account.client_id,
            "Monthly Interest",
            history_description="Monthly Interest Accrued",
            at=now,
        )

        return LedgerOperationResult(
            credit_account_id=str(account.id),
            applied=True,
            amount=interest,
            resulting_balance=account.current_balance,
            transaction_id=str(transaction.id),
        )

    @staticmethod
    def _skipped(account: CreditAccount, reason: str) -> LedgerOperationResult:
        return LedgerOperationResult(
            credit_account_id=str(account.id),
            applied=False,
            amount=Decimal("0.00"),
            resulting_balance=account.current_balance,
            reason=reason,
        )
