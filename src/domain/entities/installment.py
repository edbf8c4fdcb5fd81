"""Installment entity for LONG_TERM credit accounts."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from src.service.ledger import InstallmentStatus, utcnow


@dataclass
class Installment:
    """A scheduled repayment on a LONG_TERM account."""

    credit_account_id: UUID
    due_date: date
    amount: Decimal
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_at: datetime | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)

    def is_overdue(self, today: date) -> bool:
        return self.status is not InstallmentStatus.PAID and self.due_date < today

    def mark_paid(self, at: datetime | None = None) -> None:
        self.status = InstallmentStatus.PAID
        self.paid_at = at or utcnow()
