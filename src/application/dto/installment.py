"""Data transfer objects for installments."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class InstallmentResponse:
    """Single installment of a LONG_TERM account."""

    installment_id: str
    credit_account_id: str
    due_date: date
    amount: Decimal
    status: str
    paid_at: Optional[datetime]

    @classmethod
    def from_entity(cls, installment) -> "InstallmentResponse":
        return cls(
            installment_id=str(installment.id),
            credit_account_id=str(installment.credit_account_id),
            due_date=installment.due_date,
            amount=installment.amount,
            status=installment.status.value,
            paid_at=installment.paid_at,
        )
