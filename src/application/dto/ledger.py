"""Data transfer objects for ledger mutations and projections."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class LedgerOperationResult:
    """
    Outcome of a single ledger mutation on one account.

    ``applied`` is False for no-ops (interest not yet due, nothing overdue);
    ``reason`` then says why.
    """

    credit_account_id: str
    applied: bool
    amount: Decimal
    resulting_balance: Decimal
    transaction_id: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class BatchFailure:
    credit_account_id: str
    error: str
    message: str


@dataclass(frozen=True)
class BatchResult:
    """Summary of an establishment-wide interest or late-fee run."""

    establishment_id: int
    job: str
    processed: int
    applied: int
    skipped: int
    total_amount: Decimal
    failures: List[BatchFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass(frozen=True)
class TransactionResponse:
    transaction_id: str
    credit_account_id: Optional[str]
    type: str
    amount: Decimal
    recipient_type: str
    recipient_id: Optional[int]
    description: str
    occurred_at: datetime

    @classmethod
    def from_entity(cls, transaction) -> "TransactionResponse":
        return cls(
            transaction_id=str(transaction.id),
            credit_account_id=(
                str(transaction.credit_account_id) if transaction.credit_account_id else None
            ),
            type=transaction.type.value,
            amount=transaction.amount,
            recipient_type=transaction.recipient_type.value,
            recipient_id=transaction.recipient_id,
            description=transaction.description,
            occurred_at=transaction.occurred_at,
        )


@dataclass(frozen=True)
class HistoryEntryResponse:
    history_id: str
    credit_account_id: str
    type: str
    amount: Decimal
    resulting_balance: Decimal
    description: str
    occurred_at: datetime

    @classmethod
    def from_entity(cls, entry) -> "HistoryEntryResponse":
        return cls(
            history_id=str(entry.id),
            credit_account_id=str(entry.credit_account_id),
            type=entry.type.value,
            amount=entry.amount,
            resulting_balance=entry.resulting_balance,
            description=entry.description,
            occurred_at=entry.occurred_at,
        )


@dataclass(frozen=True)
class LateFeeResponse:
    late_fee_id: str
    credit_account_id: str
    rule_id: Optional[str]
    amount: Decimal
    days_overdue: int
    applied_on: date

    @classmethod
    def from_entity(cls, late_fee) -> "LateFeeResponse":
        return cls(
            late_fee_id=str(late_fee.id),
            credit_account_id=str(late_fee.credit_account_id),
            rule_id=str(late_fee.rule_id) if late_fee.rule_id else None,
            amount=late_fee.amount,
            days_overdue=late_fee.days_overdue,
            applied_on=late_fee.applied_on,
        )
