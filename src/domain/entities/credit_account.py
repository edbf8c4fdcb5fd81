"""Credit account domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from src.service.ledger import CreditType, InterestType, utcnow


@dataclass
class CreditAccount:
    """
    A revolving credit line a client holds at one establishment.

    ``current_balance`` is signed: positive means the client owes money.
    The balance is only ever changed together with a ledger Transaction and
    a history row.
    """

    establishment_id: int
    credit_limit: Decimal
    monthly_due_day: int
    interest_rate: Decimal
    interest_type: InterestType
    credit_type: CreditType
    client_id: int | None = None
    grace_period_months: int = 0
    is_blocked: bool = False
    current_balance: Decimal = Decimal("0.00")
    last_interest_accrual_at: datetime | None = None
    late_fee_rule_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def available_credit(self) -> Decimal:
        return self.credit_limit - self.current_balance

    @property
    def has_outstanding_balance(self) -> bool:
        return self.current_balance > 0

    @property
    def is_assigned(self) -> bool:
        return self.client_id is not None

    def can_charge(self, amount: Decimal) -> bool:
        """True if a purchase of ``amount`` stays within the credit limit."""
        return self.current_balance + amount <= self.credit_limit

    def can_settle(self, amount: Decimal) -> bool:
        """True if a payment of ``amount`` does not exceed what is owed."""
        return amount <= self.current_balance
