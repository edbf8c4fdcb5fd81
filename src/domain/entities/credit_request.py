"""Credit request entity and its approval state machine."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from src.domain.exceptions import CreditRequestNotPendingException
from src.service.ledger import CreditType, InterestType, utcnow


class CreditRequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


@dataclass
class CreditRequest:
    """
    A client's application for a credit line at an establishment.

    PENDING is the only non-terminal status; a request is decided once.
    """

    client_id: int
    establishment_id: int
    requested_credit_limit: Decimal
    monthly_due_day: int
    interest_rate: Decimal
    interest_type: InterestType
    credit_type: CreditType
    grace_period_months: int = 0
    status: CreditRequestStatus = CreditRequestStatus.PENDING
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    decided_by: int | None = None
    credit_account_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_pending(self) -> bool:
        return self.status is CreditRequestStatus.PENDING

    def _ensure_pending(self) -> None:
        if not self.is_pending:
            raise CreditRequestNotPendingException(str(self.id), self.status.value)

    def approve(self, credit_account_id: UUID, admin_id: int, at: datetime | None = None) -> None:
        """Mark the request approved and link the account opened for it."""
        self._ensure_pending()
        self.status = CreditRequestStatus.APPROVED
        self.approved_at = at or utcnow()
        self.decided_by = admin_id
        self.credit_account_id = credit_account_id

    def reject(self, admin_id: int, at: datetime | None = None) -> None:
        self._ensure_pending()
        self.status = CreditRequestStatus.REJECTED
        self.rejected_at = at or utcnow()
        self.decided_by = admin_id
