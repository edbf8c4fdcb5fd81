"""SQLAlchemy ORM models for the credit ledger."""

from datetime import datetime, date
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.service.ledger import utcnow

# Fixed-point columns. Money keeps two places; rates and fee values keep four
# so that fractional percentages survive a round trip.
Money = Numeric(14, 2)
Rate = Numeric(9, 4)


class Base(DeclarativeBase):
    pass


class CreditAccountModel(Base):
    """Persisted credit account."""

    __tablename__ = "credit_accounts"
    __table_args__ = (
        UniqueConstraint(
            "client_id",
            "establishment_id",
            name="uq_credit_accounts_client_establishment",
        ),
        CheckConstraint(
            "monthly_due_day BETWEEN 1 AND 31",
            name="ck_credit_accounts_due_day",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    client_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    establishment_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    credit_limit: Mapped[Decimal] = mapped_column(Money, nullable=False)
    current_balance: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        default=Decimal("0.00"),
    )
    monthly_due_day: Mapped[int] = mapped_column(Integer, nullable=False)
    interest_rate: Mapped[Decimal] = mapped_column(Rate, nullable=False)
    interest_type: Mapped[str] = mapped_column(String(20), nullable=False)
    credit_type: Mapped[str] = mapped_column(String(20), nullable=False)
    grace_period_months: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_interest_accrual_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )
    late_fee_rule_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("late_fee_rules.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )


class TransactionModel(Base):
    """Append-only ledger transaction."""

    __tablename__ = "ledger_transactions"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    credit_account_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("credit_accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    recipient_type: Mapped[str] = mapped_column(String(20), nullable=False)
    recipient_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )


class CreditAccountHistoryModel(Base):
    """Balance change row written with every transaction."""

    __tablename__ = "credit_account_history"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    credit_account_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("credit_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    transaction_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("ledger_transactions.id", ondelete="SET NULL"),
        nullable=True,
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    resulting_balance: Mapped[Decimal] = mapped_column(Money, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )


class LateFeeModel(Base):
    __tablename__ = "late_fees"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    credit_account_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("credit_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rule_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("late_fee_rules.id", ondelete="SET NULL"),
        nullable=True,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    days_overdue: Mapped[int] = mapped_column(Integer, nullable=False)
    applied_on: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )


class LateFeeRuleModel(Base):
    """Late-fee schedule; a NULL establishment marks a global rule."""

    __tablename__ = "late_fee_rules"
    __table_args__ = (
        CheckConstraint(
            "days_overdue_max > days_overdue_min",
            name="ck_late_fee_rules_window",
        ),
    )

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    establishment_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    days_overdue_min: Mapped[int] = mapped_column(Integer, nullable=False)
    days_overdue_max: Mapped[int] = mapped_column(Integer, nullable=False)
    fee_type: Mapped[str] = mapped_column(String(20), nullable=False)
    fee_value: Mapped[Decimal] = mapped_column(Rate, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )


class CreditRequestModel(Base):
    """Persisted credit request."""

    __tablename__ = "credit_requests"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    client_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    establishment_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    requested_credit_limit: Mapped[Decimal] = mapped_column(Money, nullable=False)
    monthly_due_day: Mapped[int] = mapped_column(Integer, nullable=False)
    interest_rate: Mapped[Decimal] = mapped_column(Rate, nullable=False)
    interest_type: Mapped[str] = mapped_column(String(20), nullable=False)
    credit_type: Mapped[str] = mapped_column(String(20), nullable=False)
    grace_period_months: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="PENDING",
        index=True,
    )
    approved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    decided_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    credit_account_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("credit_accounts.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )


class InstallmentModel(Base):
    """Persisted installment of a LONG_TERM account."""

    __tablename__ = "installments"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
    )
    credit_account_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("credit_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="PENDING",
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
    )
