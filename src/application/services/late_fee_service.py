"""Late fee service - overdue detection, rule resolution and fee application."""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import SQLAlchemyError

from src.core.metrics import (
    record_batch_failure,
    record_batch_run,
    record_ledger_transaction,
    record_rejected_operation,
    track_batch_latency,
)
from src.domain.entities import (
    CreditAccount,
    LateFee,
    LateFeeRule,
    RecipientType,
    TransactionType,
)
from src.domain.exceptions import (
    CreditAccountNotFoundException,
    DomainException,
    InvalidLateFeeRuleException,
    LateFeeRuleNotFoundException,
    NoLateFeeRuleMatchedException,
)
from src.domain.interfaces import (
    CreditAccountRepository,
    LateFeeRuleRepository,
    LedgerRepository,
)
from src.application.dto import (
    BatchFailure,
    BatchResult,
    CreateLateFeeRuleRequest,
    LateFeeRuleResponse,
    LedgerOperationResult,
)
from src.service.ledger import (
    ZERO,
    LedgerSettings,
    compute_late_fee,
    current_due_date,
    days_overdue,
    ledger_settings,
    resolve_rule,
    rule_applies,
    utcnow,
)

from .ledger_writer import LedgerWriter

logger = structlog.get_logger(__name__)


class LateFeeService:
    """
    Application service for late fees and late-fee rule administration.

    An account is overdue once today is past this month's due date and it
    still owes money. The governing rule is the account's pinned rule when
    set, otherwise the first establishment (or global) rule whose window
    contains the days overdue. A pinned rule whose window misses the days
    overdue charges nothing.
    """

    JOB = "late_fees"

    def __init__(
        self,
        account_repository: CreditAccountRepository,
        ledger_repository: LedgerRepository,
        rule_repository: LateFeeRuleRepository,
        settings: LedgerSettings = ledger_settings,
    ):
        self._account_repo = account_repository
        self._ledger_repo = ledger_repository
        self._rule_repo = rule_repository
        self._settings = settings
        self._writer = LedgerWriter(account_repository, ledger_repository, settings)

    async def apply_late_fee(
        self,
        account_id: UUID,
        today: date | None = None,
    ) -> LedgerOperationResult:
        """
        Charge a late fee on an overdue account.

        Args:
            account_id: The account to charge
            today: Reference date (defaults to the current UTC date)

        Returns:
            LedgerOperationResult; ``applied`` is False when nothing is due

        Raises:
            CreditAccountNotFoundException: If the account doesn't exist
            NoLateFeeRuleMatchedException: If the account has no pinned rule
                and no establishment rule covers the days overdue
        """
        today = today or utcnow().date()

        async with self._account_repo.atomic():
            account = await self._account_repo.get_for_update(account_id)
            if account is None:
                raise CreditAccountNotFoundException(str(account_id))

            result = await self._charge(account, today)

        if result.applied:
            record_ledger_transaction(TransactionType.LATE_FEE_APPLIED.value, result.amount)
            logger.info(
                "late_fee_applied",
                credit_account_id=str(account_id),
                amount=str(result.amount),
                balance=str(result.resulting_balance),
            )

        return result

    async def apply_late_fees_to_all_accounts(
        self,
        establishment_id: int,
        today: date | None = None,
    ) -> BatchResult:
        """
        Charge late fees on every overdue account of an establishment.

        Only accounts with a positive balance that are past their due date
        are processed, each in its own committed transaction. Failures are
        rolled back per account and reported.
        """
        today = today or utcnow().date()
        log = logger.bind(establishment_id=establishment_id, job=self.JOB)
        record_batch_run(self.JOB)

        applied = 0
        skipped = 0
        total = ZERO
        failures = []

        with track_batch_latency(self.JOB):
            candidates = await self._account_repo.list_with_outstanding_balance(establishment_id)
            overdue = [
                account
                for account in candidates
                if days_overdue(today, account.monthly_due_day) > 0
            ]
            await self._account_repo.commit()
            log.info("late_fee_batch_started", accounts=len(overdue))

            for account in overdue:
                try:
                    result = await self.apply_late_fee(account.id, today)
                    await self._account_repo.commit()
                except (DomainException, SQLAlchemyError) as e:
                    await self._account_repo.rollback()
                    error = e.code if isinstance(e, DomainException) else "STORAGE_ERROR"
                    record_batch_failure(self.JOB, error)
                    log.warning(
                        "late_fee_account_failed",
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
            "late_fee_batch_completed",
            processed=len(overdue),
            applied=applied,
            skipped=skipped,
            failed=len(failures),
            total_amount=str(total),
        )

        return BatchResult(
            establishment_id=establishment_id,
            job=self.JOB,
            processed=len(overdue),
            applied=applied,
            skipped=skipped,
            total_amount=total,
            failures=failures,
        )

    # ------------------------------------------------------------------
    # Rule administration
    # ------------------------------------------------------------------

    async def create_rule(self, request: CreateLateFeeRuleRequest) -> LateFeeRuleResponse:
        errors = request.validate()
        if errors:
            raise InvalidLateFeeRuleException("; ".join(errors))

        rule = LateFeeRule(
            name=request.name.strip(),
            days_overdue_min=request.days_overdue_min,
            days_overdue_max=request.days_overdue_max,
            fee_type=request.fee_type,
            fee_value=request.fee_value,
            establishment_id=request.establishment_id,
        )
        await self._rule_repo.save(rule)

        logger.info(
            "late_fee_rule_created",
            late_fee_rule_id=str(rule.id),
            establishment_id=rule.establishment_id,
            window=f"{rule.days_overdue_min}-{rule.days_overdue_max}",
        )

        return LateFeeRuleResponse.from_entity(rule)

    async def get_rule(self, rule_id: UUID) -> LateFeeRuleResponse:
        rule = await self._rule_repo.get_by_id(rule_id)
        if rule is None:
            raise LateFeeRuleNotFoundException(str(rule_id))
        return LateFeeRuleResponse.from_entity(rule)

    async def list_rules(self, establishment_id: int) -> List[LateFeeRuleResponse]:
        """Rules in resolution order, falling back to the global set."""
        rules = await self._rule_repo.list_for_establishment(establishment_id)
        return [LateFeeRuleResponse.from_entity(rule) for rule in rules]

    async def list_all_rules(self) -> List[LateFeeRuleResponse]:
        rules = await self._rule_repo.list_all()
        return [LateFeeRuleResponse.from_entity(rule) for rule in rules]

    # ------------------------------------------------------------------

    async def _charge(self, account: CreditAccount, today: date) -> LedgerOperationResult:
        if account.current_balance <= 0:
            return self._skipped(account, "no_outstanding_balance")

        overdue_days = days_overdue(today, account.monthly_due_day)
        if overdue_days <= 0:
            return self._skipped(account, "not_overdue")

        if self._settings.one_late_fee_per_period:
            period_start = current_due_date(today, account.monthly_due_day)
            if await self._ledger_repo.has_late_fee_since(account.id, period_start):
                return self._skipped(account, "already_charged_this_period")

        rule = await self._resolve_rule(account, overdue_days)
        if not rule_applies(rule, overdue_days):
            return self._skipped(account, "outside_rule_window")

        fee = compute_late_fee(rule, account.current_balance, self._settings)

        if fee <= 0:
            return self._skipped(account, "zero_fee")

        transaction = await self._writer.post(
            account,
            TransactionType.LATE_FEE_APPLIED,
            fee,
            RecipientType.ESTABLISHMENT,
            account.establishment_id,
            f"Late fee: {rule.name} ({overdue_days} days overdue)",
            history_description="Late Payment Fee Applied",
        )
        await self._ledger_repo.add_late_fee(
            LateFee(
                credit_account_id=account.id,
                amount=fee,
                applied_on=today,
                days_overdue=overdue_days,
                rule_id=rule.id,
            )
        )

        return LedgerOperationResult(
            credit_account_id=str(account.id),
            applied=True,
            amount=fee,
            resulting_balance=account.current_balance,
            transaction_id=str(transaction.id),
        )

    async def _resolve_rule(self, account: CreditAccount, overdue_days: int) -> LateFeeRule:
        pinned: Optional[LateFeeRule] = None
        if account.late_fee_rule_id is not None:
            pinned = await self._rule_repo.get_by_id(account.late_fee_rule_id)

        candidates = []
        if pinned is None:
            candidates = await self._rule_repo.list_for_establishment(account.establishment_id)

        rule = resolve_rule(candidates, overdue_days, pinned_rule=pinned)

        if rule is None:
            record_rejected_operation("late_fee", "no_applicable_rule")
            raise NoLateFeeRuleMatchedException(str(account.id), overdue_days)

        return rule

    @staticmethod
    def _skipped(account: CreditAccount, reason: str) -> LedgerOperationResult:
        return LedgerOperationResult(
            credit_account_id=str(account.id),
            applied=False,
            amount=Decimal("0.00"),
            resulting_balance=account.current_balance,
            reason=reason,
        )
