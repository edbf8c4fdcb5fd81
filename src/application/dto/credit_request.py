"""Data transfer objects for the credit request workflow."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from src.domain.entities import CreditType, InterestType

from .credit_account import _validate_terms


@dataclass(frozen=True)
class CreateCreditRequest:
    """Input data for a client's credit application."""

    client_id: int
    establishment_id: int
    requested_credit_limit: Decimal
    monthly_due_day: int
    interest_rate: Decimal
    interest_type: InterestType
    credit_type: CreditType
    grace_period_months: int = 0

    def validate(self) -> List[str]:
        return _validate_terms(
            self.requested_credit_limit,
            self.monthly_due_day,
            self.interest_rate,
            self.grace_period_months,
        )


@dataclass(frozen=True)
class CreditRequestResponse:
    credit_request_id: str
    client_id: int
    establishment_id: int
    requested_credit_limit: Decimal
    monthly_due_day: int
    interest_rate: Decimal
    interest_type: str
    credit_type: str
    grace_period_months: int
    status: str
    credit_account_id: Optional[str]
    approved_at: Optional[datetime]
    rejected_at: Optional[datetime]
    created_at: datetime

    @classmethod
    def from_entity(cls, request) -> "CreditRequestResponse":
        return cls(
            credit_request_id=str(request.id),
            client_id=request.client_id,
            establishment_id=request.establishment_id,
            requested_credit_limit=request.requested_credit_limit,
            monthly_due_day=request.monthly_due_day,
            interest_rate=request.interest_rate,
            interest_type=request.interest_type.value,
            credit_type=request.credit_type.value,
            grace_period_months=request.grace_period_months,
            status=request.status.value,
            credit_account_id=str(request.credit_account_id) if request.credit_account_id else None,
            approved_at=request.approved_at,
            rejected_at=request.rejected_at,
            created_at=request.created_at,
        )
