"""
Integration tests for purchases and payments.

These tests verify:
1. Balance arithmetic and the Transaction + History pair per posting
2. Rejections (credit limit, payment over balance, blocked) change nothing
3. A crash in the middle of a posting leaves no partial writes
4. Paying off a blocked account unblocks it
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from src.application.services import TransactionService
from src.domain.entities import TransactionType
from src.domain.exceptions import (
    AccountBlockedException,
    CreditAccountNotFoundException,
    CreditLimitExceededException,
    InvalidAmountException,
    LimitExceededException,
    InsufficientContextException,
    PaymentExceedsBalanceException,
)
from src.infrastructure.repositories import PostgresLedgerRepository


class CrashingLedgerRepository(PostgresLedgerRepository):
    """Ledger repository that fails after the transaction row is written."""

    async def add_history(self, entry):
        raise RuntimeError("storage failure while writing history")


# =============================================================================
# Purchases
# =============================================================================

class TestPurchases:
    @pytest.mark.asyncio
    async def test_purchase_increases_balance_and_records_ledger(
        self,
        open_account,
        transaction_service,
        ledger_repository,
        account_repository,
    ):
        account = await open_account(credit_limit="1000.00")

        result = await transaction_service.process_purchase(
            account.id,
            Decimal("150.00"),
            "Groceries",
        )

        assert result.applied is True
        assert result.resulting_balance == Decimal("150.00")

        stored = await account_repository.get_by_id(account.id)
        assert stored.current_balance == Decimal("150.00")

        transactions = await ledger_repository.list_transactions(account.id)
        history = await ledger_repository.list_history(account.id)

        assert len(transactions) == 1
        assert transactions[0].type is TransactionType.PURCHASE
        assert transactions[0].amount == Decimal("150.00")
        assert transactions[0].description == "Groceries"

        assert len(history) == 1
        assert history[0].transaction_id == transactions[0].id
        assert history[0].amount == Decimal("150.00")
        assert history[0].resulting_balance == Decimal("150.00")

    @pytest.mark.asyncio
    async def test_purchase_over_limit_is_rejected_then_exact_fit_is_accepted(
        self,
        open_account,
        transaction_service,
        ledger_repository,
        account_repository,
    ):
        account = await open_account(credit_limit="1000.00", balance="200.00")

        with pytest.raises(CreditLimitExceededException) as exc_info:
            await transaction_service.process_purchase(account.id, Decimal("900.00"))

        assert isinstance(exc_info.value, LimitExceededException)
        stored = await account_repository.get_by_id(account.id)
        assert stored.current_balance == Decimal("200.00")
        assert len(await ledger_repository.list_transactions(account.id)) == 1

        result = await transaction_service.process_purchase(account.id, Decimal("800.00"))

        assert result.resulting_balance == Decimal("1000.00")
        assert len(await ledger_repository.list_transactions(account.id)) == 2

    @pytest.mark.asyncio
    async def test_blocked_account_rejects_purchase(
        self,
        open_account,
        transaction_service,
        account_repository,
    ):
        account = await open_account(balance="100.00", is_blocked=True)

        with pytest.raises(AccountBlockedException):
            await transaction_service.process_purchase(account.id, Decimal("10.00"))

        stored = await account_repository.get_by_id(account.id)
        assert stored.current_balance == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_non_positive_amount_is_rejected(self, open_account, transaction_service):
        account = await open_account()

        with pytest.raises(InvalidAmountException):
            await transaction_service.process_purchase(account.id, Decimal("0"))

        with pytest.raises(InvalidAmountException):
            await transaction_service.process_payment(account.id, Decimal("-5"))

    @pytest.mark.asyncio
    async def test_unknown_account(self, transaction_service):
        with pytest.raises(CreditAccountNotFoundException):
            await transaction_service.process_purchase(uuid4(), Decimal("10.00"))


# =============================================================================
# Payments
# =============================================================================

class TestPayments:
    @pytest.mark.asyncio
    async def test_payment_over_balance_is_rejected_then_full_payment_clears(
        self,
        open_account,
        transaction_service,
        ledger_repository,
        account_repository,
    ):
        account = await open_account(balance="500.00")

        with pytest.raises(PaymentExceedsBalanceException) as exc_info:
            await transaction_service.process_payment(account.id, Decimal("600.00"))

        assert isinstance(exc_info.value, InsufficientContextException)
        stored = await account_repository.get_by_id(account.id)
        assert stored.current_balance == Decimal("500.00")

        result = await transaction_service.process_payment(account.id, Decimal("500.00"))

        assert result.resulting_balance == Decimal("0.00")

        transactions = await ledger_repository.list_transactions(account.id)
        payment = next(t for t in transactions if t.type is TransactionType.PAYMENT)
        assert payment.amount == Decimal("-500.00")

    @pytest.mark.asyncio
    async def test_full_payment_unblocks_account(
        self,
        open_account,
        transaction_service,
        ledger_repository,
        account_repository,
    ):
        account = await open_account(balance="500.00", is_blocked=True)

        await transaction_service.process_payment(account.id, Decimal("500.00"))

        stored = await account_repository.get_by_id(account.id)
        assert stored.is_blocked is False
        assert stored.current_balance == Decimal("0.00")

        types = [t.type for t in await ledger_repository.list_transactions(account.id)]
        assert TransactionType.ACCOUNT_UNBLOCKED in types

    @pytest.mark.asyncio
    async def test_partial_payment_keeps_account_blocked(
        self,
        open_account,
        transaction_service,
        account_repository,
    ):
        account = await open_account(balance="500.00", is_blocked=True)

        await transaction_service.process_payment(account.id, Decimal("200.00"))

        stored = await account_repository.get_by_id(account.id)
        assert stored.is_blocked is True
        assert stored.current_balance == Decimal("300.00")


# =============================================================================
# Atomicity
# =============================================================================

class TestAtomicity:
    @pytest.mark.asyncio
    async def test_crash_mid_posting_leaves_no_orphan_transaction(
        self,
        open_account,
        test_session,
        account_repository,
        ledger_repository,
    ):
        account = await open_account(balance="100.00")
        crashing = TransactionService(account_repository, CrashingLedgerRepository(test_session))

        with pytest.raises(RuntimeError):
            await crashing.process_purchase(account.id, Decimal("50.00"))

        stored = await account_repository.get_for_update(account.id)
        transactions = await ledger_repository.list_transactions(account.id)
        history = await ledger_repository.list_history(account.id)

        assert stored.current_balance == Decimal("100.00")
        assert len(transactions) == 1
        assert len(history) == 1
        assert history[0].transaction_id == transactions[0].id

    @pytest.mark.asyncio
    async def test_session_stays_usable_after_rejection(
        self,
        open_account,
        transaction_service,
    ):
        account = await open_account(credit_limit="100.00")

        with pytest.raises(CreditLimitExceededException):
            await transaction_service.process_purchase(account.id, Decimal("500.00"))

        result = await transaction_service.process_purchase(account.id, Decimal("100.00"))
        assert result.resulting_balance == Decimal("100.00")
