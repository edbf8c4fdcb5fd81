"""Ledger Pydantic schemas - purchases, payments, batch runs and projections."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LedgerAmountSchema(BaseModel):
    """Schema for purchase and payment request bodies."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"amount": "150.00", "description": "Groceries"}]}
    )

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=14,
        decimal_places=2,
        description="Amount of the operation",
        examples=["150.00"],
    )
    description: str = Field("", max_length=255, description="Free-text description")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return v.strip()


class LedgerOperationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    credit_account_id: str
    applied: bool = Field(..., description="False when the operation was a no-op")
    amount: Decimal
    resulting_balance: Decimal = Field(..., description="Balance after the operation")
    transaction_id: Optional[str] = None
    reason: Optional[str] = Field(
        None,
        description="Why nothing was applied",
        examples=["interest_period_not_elapsed"],
    )


class BatchFailureSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    credit_account_id: str
    error: str = Field(..., examples=["NO_APPLICABLE_RULE"])
    message: str


class BatchResultSchema(BaseModel):
    """Result of an establishment-wide interest or late-fee run."""

    model_config = ConfigDict(from_attributes=True)

    establishment_id: int
    job: str = Field(..., examples=["interest"])
    processed: int
    applied: int
    skipped: int
    failed: int
    total_amount: Decimal
    failures: List[BatchFailureSchema]


class TransactionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_id: str
    credit_account_id: Optional[str]
    type: str = Field(..., examples=["PURCHASE"])
    amount: Decimal
    recipient_type: str
    recipient_id: Optional[int]
    description: str
    occurred_at: datetime


class HistoryEntrySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    history_id: str
    credit_account_id: str
    type: str
    amount: Decimal = Field(..., description="Signed change to the balance")
    resulting_balance: Decimal
    description: str
    occurred_at: datetime


class LateFeeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    late_fee_id: str
    credit_account_id: str
    rule_id: Optional[str]
    amount: Decimal
    days_overdue: int
    applied_on: date
