"""
Integration tests for interest accrual.

These tests verify:
1. One period of interest is posted once a calendar month has elapsed
2. Accrual is idempotent inside the month window
3. LONG_TERM accounts accrue on their pending installments
4. Batch runs isolate per-account failures
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import OperationalError

from src.application.services import InterestService
from src.domain.entities import CreditType, InterestType, RecipientType, TransactionType
from src.domain.exceptions import CreditAccountNotFoundException
from src.infrastructure.repositories import PostgresInstallmentRepository

from tests.integration.conftest import CLIENT_ID, ESTABLISHMENT_ID, SECOND_CLIENT_ID


class LockTimeoutInstallmentRepository(PostgresInstallmentRepository):
    """Installment repository whose reads fail as if the row lock timed out."""

    async def get_by_credit_account_id(self, account_id):
        raise OperationalError("SELECT", {}, Exception("lock timeout"))


class TestApplyInterest:
    @pytest.mark.asyncio
    async def test_interest_posted_after_a_month(
        self,
        open_account,
        interest_service,
        ledger_repository,
    ):
        account = await open_account(
            balance="1000.00",
            last_interest_accrual_at=datetime(2025, 1, 1),
        )

        result = await interest_service.apply_interest(account.id, now=datetime(2025, 2, 1))

        # 1000 * 5% * 31/365
        assert result.applied is True
        assert result.amount == Decimal("4.25")
        assert result.resulting_balance == Decimal("1004.25")

        transactions = await ledger_repository.list_transactions(account.id)
        interest = [t for t in transactions if t.type is TransactionType.INTEREST_ACCRUAL]
        assert len(interest) == 1
        assert interest[0].amount == Decimal("4.25")
        assert interest[0].recipient_type is RecipientType.CLIENT
        assert interest[0].recipient_id == CLIENT_ID

        history = await ledger_repository.list_history(account.id)
        entry = next(h for h in history if h.transaction_id == interest[0].id)
        assert entry.description == "Monthly Interest Accrued"
        assert entry.resulting_balance == Decimal("1004.25")

    @pytest.mark.asyncio
    async def test_second_call_in_same_month_is_noop(
        self,
        open_account,
        interest_service,
        ledger_repository,
    ):
        account = await open_account(
            balance="1000.00",
            last_interest_accrual_at=datetime(2025, 1, 1),
        )

        await interest_service.apply_interest(account.id, now=datetime(2025, 2, 1))
        second = await interest_service.apply_interest(account.id, now=datetime(2025, 2, 20))

        assert second.applied is False
        assert second.reason == "interest_period_not_elapsed"
        assert second.resulting_balance == Decimal("1004.25")

        interest_rows = [
            t
            for t in await ledger_repository.list_transactions(account.id)
            if t.type is TransactionType.INTEREST_ACCRUAL
        ]
        assert len(interest_rows) == 1

    @pytest.mark.asyncio
    async def test_next_month_accrues_on_new_balance(self, open_account, interest_service):
        account = await open_account(
            balance="1000.00",
            last_interest_accrual_at=datetime(2025, 1, 1),
        )

        await interest_service.apply_interest(account.id, now=datetime(2025, 2, 1))
        result = await interest_service.apply_interest(account.id, now=datetime(2025, 3, 1))

        # 1004.25 * 5% * 28/365
        assert result.amount == Decimal("3.85")
        assert result.resulting_balance == Decimal("1008.10")

    @pytest.mark.asyncio
    async def test_no_interest_without_balance(
        self,
        open_account,
        interest_service,
        ledger_repository,
    ):
        account = await open_account(last_interest_accrual_at=datetime(2025, 1, 1))

        result = await interest_service.apply_interest(account.id, now=datetime(2025, 2, 1))

        assert result.applied is False
        assert result.reason == "no_outstanding_balance"
        assert await ledger_repository.list_transactions(account.id) == []

    @pytest.mark.asyncio
    async def test_effective_interest(self, open_account, interest_service):
        account = await open_account(
            balance="1000.00",
            interest_type=InterestType.EFFECTIVE,
            last_interest_accrual_at=datetime(2025, 1, 1),
        )

        result = await interest_service.apply_interest(account.id, now=datetime(2025, 1, 31))

        assert result.applied is False

        result = await interest_service.apply_interest(account.id, now=datetime(2025, 2, 1))

        # 1000 * (1.05 ** (31/365) - 1)
        assert result.amount == Decimal("4.15")

    @pytest.mark.asyncio
    async def test_long_term_accrues_on_pending_installments(
        self,
        open_account,
        interest_service,
        installment_service,
    ):
        account = await open_account(
            balance="1000.00",
            credit_type=CreditType.LONG_TERM,
            last_interest_accrual_at=datetime(2025, 1, 1),
        )
        await installment_service.create_installment(
            account.id, date(2025, 3, 3), Decimal("1000.00")
        )
        paid = await installment_service.create_installment(
            account.id, date(2025, 3, 3), Decimal("1000.00")
        )
        await installment_service.mark_installment_paid(UUID(paid.installment_id))

        result = await interest_service.apply_interest(account.id, now=datetime(2025, 2, 1))

        # Only the pending installment: 1000 * 5% * 30/365
        assert result.amount == Decimal("4.11")

    @pytest.mark.asyncio
    async def test_unknown_account(self, interest_service):
        with pytest.raises(CreditAccountNotFoundException):
            await interest_service.apply_interest(uuid4())


class TestInterestBatch:
    @pytest.mark.asyncio
    async def test_batch_processes_every_account(self, open_account, interest_service):
        await open_account(balance="1000.00", last_interest_accrual_at=datetime(2025, 1, 1))
        await open_account(
            client_id=SECOND_CLIENT_ID,
            last_interest_accrual_at=datetime(2025, 1, 1),
        )

        result = await interest_service.apply_interest_to_all_accounts(
            ESTABLISHMENT_ID,
            now=datetime(2025, 2, 1),
        )

        assert result.processed == 2
        assert result.applied == 1
        assert result.skipped == 1
        assert result.failed == 0
        assert result.total_amount == Decimal("4.25")

    @pytest.mark.asyncio
    async def test_batch_isolates_failing_account(
        self,
        open_account,
        account_repository,
        ledger_repository,
        test_session,
    ):
        broken = await open_account(
            balance="1000.00",
            credit_type=CreditType.LONG_TERM,
            last_interest_accrual_at=datetime(2025, 1, 1),
        )
        healthy = await open_account(
            client_id=SECOND_CLIENT_ID,
            balance="1000.00",
            last_interest_accrual_at=datetime(2025, 1, 1),
        )

        service = InterestService(
            account_repository,
            ledger_repository,
            LockTimeoutInstallmentRepository(test_session),
        )

        result = await service.apply_interest_to_all_accounts(
            ESTABLISHMENT_ID,
            now=datetime(2025, 2, 1),
        )

        assert result.processed == 2
        assert result.applied == 1
        assert result.failed == 1
        assert result.failures[0].credit_account_id == str(broken.id)
        assert result.failures[0].error == "STORAGE_ERROR"

        stored = await account_repository.get_by_id(healthy.id)
        assert stored.current_balance == Decimal("1004.25")

    @pytest.mark.asyncio
    async def test_batch_commits_each_account(
        self,
        open_account,
        interest_service,
        account_repository,
        ledger_repository,
        test_session,
    ):
        account = await open_account(
            balance="1000.00",
            last_interest_accrual_at=datetime(2025, 1, 1),
        )

        await interest_service.apply_interest_to_all_accounts(
            ESTABLISHMENT_ID,
            now=datetime(2025, 2, 1),
        )

        # No transaction (and so no row lock) outlives the run.
        assert not test_session.in_transaction()

        # Rolling back the caller's session no longer undoes the run.
        await test_session.rollback()

        stored = await account_repository.get_by_id(account.id)
        assert stored.current_balance == Decimal("1004.25")
        transactions = await ledger_repository.list_transactions(account.id)
        assert [t.type for t in transactions].count(TransactionType.INTEREST_ACCRUAL) == 1
