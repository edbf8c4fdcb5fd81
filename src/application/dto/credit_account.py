"""Data transfer objects for credit account operations."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from src.domain.entities import CreditType, InterestType


def _validate_terms(
    credit_limit: Optional[Decimal],
    monthly_due_day: Optional[int],
    interest_rate: Optional[Decimal],
    grace_period_months: Optional[int],
) -> List[str]:
    errors = []

    if credit_limit is not None and credit_limit < 0:
        errors.append("credit_limit must not be negative")

    if monthly_due_day is not None and not 1 <= monthly_due_day <= 31:
        errors.append("monthly_due_day must be between 1 and 31")

    if interest_rate is not None and interest_rate < 0:
        errors.append("interest_rate must not be negative")

    if grace_period_months is not None and grace_period_months < 0:
        errors.append("grace_period_months must not be negative")

    return errors


@dataclass(frozen=True)
class CreateCreditAccountRequest:
    """Input data for opening a credit account."""

    establishment_id: int
    credit_limit: Decimal
    monthly_due_day: int
    interest_rate: Decimal
    interest_type: InterestType
    credit_type: CreditType
    client_id: Optional[int] = None
    grace_period_months: int = 0
    late_fee_rule_id: Optional[UUID] = None

    def validate(self) -> List[str]:
        return _validate_terms(
            self.credit_limit,
            self.monthly_due_day,
            self.interest_rate,
            self.grace_period_months,
        )


@dataclass(frozen=True)
class UpdateCreditAccountRequest:
    """Partial update; fields left as None are not changed."""

    credit_limit: Optional[Decimal] = None
    monthly_due_day: Optional[int] = None
    interest_rate: Optional[Decimal] = None
    interest_type: Optional[InterestType] = None
    credit_type: Optional[CreditType] = None
    grace_period_months: Optional[int] = None
    is_blocked: Optional[bool] = None
    late_fee_rule_id: Optional[UUID] = None

    def validate(self) -> List[str]:
        return _validate_terms(
            self.credit_limit,
            self.monthly_due_day,
            self.interest_rate,
            self.grace_period_months,
        )


@dataclass(frozen=True)
class CreditAccountResponse:
    """Response data for a credit account."""

    credit_account_id: str
    client_id: Optional[int]
    establishment_id: int
    credit_limit: Decimal
    current_balance: Decimal
    available_credit: Decimal
    monthly_due_day: int
    interest_rate: Decimal
    interest_type: str
    credit_type: str
    grace_period_months: int
    is_blocked: bool
    late_fee_rule_id: Optional[str]
    last_interest_accrual_at: Optional[datetime]
    created_at: datetime

    @classmethod
    def from_entity(cls, account) -> "CreditAccountResponse":
        return cls(
            credit_account_id=str(account.id),
            client_id=account.client_id,
            establishment_id=account.establishment_id,
            credit_limit=account.credit_limit,
            current_balance=account.current_balance,
            available_credit=account.available_credit,
            monthly_due_day=account.monthly_due_day,
            interest_rate=account.interest_rate,
            interest_type=account.interest_type.value,
            credit_type=account.credit_type.value,
            grace_period_months=account.grace_period_months,
            is_blocked=account.is_blocked,
            late_fee_rule_id=str(account.late_fee_rule_id) if account.late_fee_rule_id else None,
            last_interest_accrual_at=account.last_interest_accrual_at,
            created_at=account.created_at,
        )


@dataclass(frozen=True)
class DebtSummaryEntry:
    """One row of an establishment's debt report."""

    credit_account_id: str
    client_id: Optional[int]
    client_name: Optional[str]
    credit_type: str
    interest_rate: Decimal
    number_of_installments: int
    current_balance: Decimal
    due_date: date
