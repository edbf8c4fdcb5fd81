"""
Integration tests for late fees.

These tests verify:
1. Overdue detection against the monthly due day
2. Rule resolution: pinned rule, establishment rules, global fallback
3. At most one late fee per billing period
4. Batch runs isolate per-account failures
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest

from src.application.dto import CreateLateFeeRuleRequest
from src.domain.entities import FeeType, TransactionType
from src.domain.exceptions import (
    InvalidLateFeeRuleException,
    LateFeeRuleNotFoundException,
    NoApplicableRuleException,
    NoLateFeeRuleMatchedException,
)

from tests.integration.conftest import (
    ESTABLISHMENT_ID,
    OTHER_ESTABLISHMENT_ID,
    SECOND_CLIENT_ID,
)


MARCH_15 = date(2025, 3, 15)


def rule_request(
    days_min: int = 1,
    days_max: int = 30,
    fee_type: FeeType = FeeType.PERCENTAGE,
    fee_value: str = "5",
    establishment_id: int | None = ESTABLISHMENT_ID,
    name: str = "Standard",
) -> CreateLateFeeRuleRequest:
    return CreateLateFeeRuleRequest(
        name=name,
        days_overdue_min=days_min,
        days_overdue_max=days_max,
        fee_type=fee_type,
        fee_value=Decimal(fee_value),
        establishment_id=establishment_id,
    )


# =============================================================================
# Single Account
# =============================================================================

class TestApplyLateFee:
    @pytest.mark.asyncio
    async def test_percentage_fee_on_overdue_account(
        self,
        open_account,
        late_fee_service,
        ledger_repository,
    ):
        await late_fee_service.create_rule(rule_request())
        account = await open_account(balance="1000.00", monthly_due_day=10)

        result = await late_fee_service.apply_late_fee(account.id, MARCH_15)

        assert result.applied is True
        assert result.amount == Decimal("50.00")
        assert result.resulting_balance == Decimal("1050.00")

        late_fees = await ledger_repository.list_late_fees(account.id)
        assert len(late_fees) == 1
        assert late_fees[0].days_overdue == 5
        assert late_fees[0].applied_on == MARCH_15

        transactions = await ledger_repository.list_transactions(account.id)
        fee_rows = [t for t in transactions if t.type is TransactionType.LATE_FEE_APPLIED]
        assert len(fee_rows) == 1
        assert fee_rows[0].description == "Late fee: Standard (5 days overdue)"

    @pytest.mark.asyncio
    async def test_second_run_in_same_period_is_skipped(
        self,
        open_account,
        late_fee_service,
        account_repository,
    ):
        await late_fee_service.create_rule(rule_request())
        account = await open_account(balance="1000.00", monthly_due_day=10)

        await late_fee_service.apply_late_fee(account.id, MARCH_15)
        second = await late_fee_service.apply_late_fee(account.id, date(2025, 3, 20))

        assert second.applied is False
        assert second.reason == "already_charged_this_period"

        stored = await account_repository.get_by_id(account.id)
        assert stored.current_balance == Decimal("1050.00")

    @pytest.mark.asyncio
    async def test_next_period_can_be_charged_again(self, open_account, late_fee_service):
        await late_fee_service.create_rule(rule_request(fee_type=FeeType.FIXED_AMOUNT, fee_value="20"))
        account = await open_account(balance="1000.00", monthly_due_day=10)

        await late_fee_service.apply_late_fee(account.id, MARCH_15)
        result = await late_fee_service.apply_late_fee(account.id, date(2025, 4, 15))

        assert result.applied is True
        assert result.resulting_balance == Decimal("1040.00")

    @pytest.mark.asyncio
    async def test_not_overdue_on_due_date(self, open_account, late_fee_service):
        await late_fee_service.create_rule(rule_request())
        account = await open_account(balance="1000.00", monthly_due_day=10)

        result = await late_fee_service.apply_late_fee(account.id, date(2025, 3, 10))

        assert result.applied is False
        assert result.reason == "not_overdue"

    @pytest.mark.asyncio
    async def test_no_fee_without_balance(self, open_account, late_fee_service):
        await late_fee_service.create_rule(rule_request())
        account = await open_account(monthly_due_day=10)

        result = await late_fee_service.apply_late_fee(account.id, MARCH_15)

        assert result.applied is False
        assert result.reason == "no_outstanding_balance"

    @pytest.mark.asyncio
    async def test_no_matching_rule_is_rejected(
        self,
        open_account,
        late_fee_service,
        account_repository,
    ):
        await late_fee_service.create_rule(rule_request(days_min=20, days_max=30))
        account = await open_account(balance="1000.00", monthly_due_day=10)

        with pytest.raises(NoLateFeeRuleMatchedException) as exc_info:
            await late_fee_service.apply_late_fee(account.id, MARCH_15)

        assert isinstance(exc_info.value, NoApplicableRuleException)
        stored = await account_repository.get_by_id(account.id)
        assert stored.current_balance == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_global_rules_apply_when_establishment_has_none(
        self,
        open_account,
        late_fee_service,
    ):
        await late_fee_service.create_rule(rule_request(establishment_id=None, fee_value="10"))
        await late_fee_service.create_rule(rule_request(fee_value="1"))
        account = await open_account(
            balance="1000.00",
            establishment_id=OTHER_ESTABLISHMENT_ID,
            monthly_due_day=10,
        )

        result = await late_fee_service.apply_late_fee(account.id, MARCH_15)

        assert result.amount == Decimal("100.00")

    @pytest.mark.asyncio
    async def test_pinned_rule_overrides_establishment_rules(
        self,
        open_account,
        late_fee_service,
    ):
        await late_fee_service.create_rule(rule_request())
        pinned = await late_fee_service.create_rule(
            rule_request(days_max=60, fee_type=FeeType.FIXED_AMOUNT, fee_value="25", name="Pinned")
        )
        account = await open_account(
            balance="1000.00",
            monthly_due_day=10,
            late_fee_rule_id=UUID(pinned.late_fee_rule_id),
        )

        result = await late_fee_service.apply_late_fee(account.id, MARCH_15)

        assert result.amount == Decimal("25.00")

    @pytest.mark.asyncio
    async def test_pinned_rule_outside_window_charges_nothing(
        self,
        open_account,
        late_fee_service,
        ledger_repository,
    ):
        await late_fee_service.create_rule(rule_request())
        pinned = await late_fee_service.create_rule(
            rule_request(
                days_min=40,
                days_max=60,
                fee_type=FeeType.FIXED_AMOUNT,
                fee_value="25",
                name="Pinned",
            )
        )
        account = await open_account(
            balance="1000.00",
            monthly_due_day=10,
            late_fee_rule_id=UUID(pinned.late_fee_rule_id),
        )

        result = await late_fee_service.apply_late_fee(account.id, MARCH_15)

        assert result.applied is False
        assert result.reason == "outside_rule_window"
        assert result.resulting_balance == Decimal("1000.00")
        assert await ledger_repository.list_late_fees(account.id) == []


# =============================================================================
# Batch
# =============================================================================

class TestLateFeeBatch:
    @pytest.mark.asyncio
    async def test_batch_isolates_account_without_applicable_rule(
        self,
        open_account,
        late_fee_service,
        account_repository,
        test_session,
    ):
        await late_fee_service.create_rule(rule_request(days_min=1, days_max=3))

        # Five days overdue on March 15: no rule covers it.
        failing = await open_account(balance="500.00", monthly_due_day=10)
        charged = await open_account(
            client_id=SECOND_CLIENT_ID,
            balance="1000.00",
            monthly_due_day=14,
        )
        await open_account(client_id=None, monthly_due_day=10)

        result = await late_fee_service.apply_late_fees_to_all_accounts(
            ESTABLISHMENT_ID,
            MARCH_15,
        )

        assert result.processed == 2
        assert result.applied == 1
        assert result.failed == 1
        assert result.total_amount == Decimal("50.00")
        assert result.failures[0].credit_account_id == str(failing.id)
        assert result.failures[0].error == "NO_APPLICABLE_RULE"

        assert not test_session.in_transaction()
        await test_session.rollback()

        stored = await account_repository.get_by_id(charged.id)
        assert stored.current_balance == Decimal("1050.00")

    @pytest.mark.asyncio
    async def test_batch_skips_accounts_not_yet_due(self, open_account, late_fee_service):
        await late_fee_service.create_rule(rule_request())
        await open_account(balance="1000.00", monthly_due_day=20)

        result = await late_fee_service.apply_late_fees_to_all_accounts(
            ESTABLISHMENT_ID,
            MARCH_15,
        )

        assert result.processed == 0
        assert result.applied == 0

    @pytest.mark.asyncio
    async def test_batch_skips_pinned_rule_outside_window(
        self,
        open_account,
        late_fee_service,
    ):
        await late_fee_service.create_rule(rule_request())
        narrow = await late_fee_service.create_rule(rule_request(days_min=40, days_max=60))
        await open_account(
            balance="500.00",
            monthly_due_day=10,
            late_fee_rule_id=UUID(narrow.late_fee_rule_id),
        )
        await open_account(
            client_id=SECOND_CLIENT_ID,
            balance="1000.00",
            monthly_due_day=10,
        )

        result = await late_fee_service.apply_late_fees_to_all_accounts(
            ESTABLISHMENT_ID,
            MARCH_15,
        )

        assert result.processed == 2
        assert result.applied == 1
        assert result.skipped == 1
        assert result.failed == 0
        assert result.total_amount == Decimal("50.00")


# =============================================================================
# Rules
# =============================================================================

class TestLateFeeRules:
    @pytest.mark.asyncio
    async def test_inverted_window_is_rejected(self, late_fee_service):
        with pytest.raises(InvalidLateFeeRuleException):
            await late_fee_service.create_rule(rule_request(days_min=10, days_max=5))

    @pytest.mark.asyncio
    async def test_list_rules_in_resolution_order(self, late_fee_service):
        await late_fee_service.create_rule(rule_request(days_min=8, days_max=15, name="Second"))
        await late_fee_service.create_rule(rule_request(days_min=1, days_max=7, name="First"))

        rules = await late_fee_service.list_rules(ESTABLISHMENT_ID)

        assert [r.name for r in rules] == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_unknown_rule(self, late_fee_service):
        with pytest.raises(LateFeeRuleNotFoundException):
            await late_fee_service.get_rule(UUID("00000000-0000-0000-0000-000000000001"))
