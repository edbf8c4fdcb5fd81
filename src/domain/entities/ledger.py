"""Append-only ledger entities: transactions, history rows and late fees."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from src.service.ledger import utcnow


class TransactionType(str, Enum):
    PURCHASE = "PURCHASE"
    PAYMENT = "PAYMENT"
    INTEREST_ACCRUAL = "INTEREST_ACCRUAL"
    LATE_FEE_APPLIED = "LATE_FEE_APPLIED"
    CREDIT_LIMIT_INCREASE = "CREDIT_LIMIT_INCREASE"
    CREDIT_LIMIT_DECREASE = "CREDIT_LIMIT_DECREASE"
    EARLY_PAYMENT = "EARLY_PAYMENT"
    ACCOUNT_BLOCKED = "ACCOUNT_BLOCKED"
    ACCOUNT_UNBLOCKED = "ACCOUNT_UNBLOCKED"


class RecipientType(str, Enum):
    """Party on the receiving side of a ledger transaction."""

    CLIENT = "CLIENT"
    ESTABLISHMENT = "ESTABLISHMENT"
    ADMIN = "ADMIN"


@dataclass
class Transaction:
    """
    A single ledger movement.

    ``amount`` is signed by its effect: purchases, interest and fees are
    positive, payments are negative. Administrative events (limit changes,
    block/unblock) carry the limit delta or zero.
    """

    type: TransactionType
    amount: Decimal
    recipient_type: RecipientType
    credit_account_id: UUID | None = None
    recipient_id: int | None = None
    description: str = ""
    id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)


@dataclass
class CreditAccountHistory:
    """Balance change applied to an account together with the resulting balance."""

    credit_account_id: UUID
    type: TransactionType
    amount: Decimal
    resulting_balance: Decimal
    description: str = ""
    transaction_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)


@dataclass
class LateFee:
    credit_account_id: UUID
    amount: Decimal
    applied_on: date
    days_overdue: int
    rule_id: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
