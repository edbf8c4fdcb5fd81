"""Credit account Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import CreditType, InterestType


class CreateCreditAccountSchema(BaseModel):
    """Schema for POST /v1/credit-accounts request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "establishment_id": 10,
                    "client_id": 42,
                    "credit_limit": "1000.00",
                    "monthly_due_day": 10,
                    "interest_rate": "5.0000",
                    "interest_type": "NOMINAL",
                    "credit_type": "SHORT_TERM",
                }
            ]
        }
    )

    establishment_id: int = Field(..., gt=0, description="Establishment granting the credit")
    client_id: Optional[int] = Field(
        None,
        gt=0,
        description="Client holding the account; may be assigned later",
    )
    credit_limit: Decimal = Field(
        ...,
        ge=0,
        max_digits=14,
        decimal_places=2,
        description="Maximum balance the client may owe",
        examples=["1000.00"],
    )
    monthly_due_day: int = Field(..., ge=1, le=31, description="Day of month payment is due")
    interest_rate: Decimal = Field(
        ...,
        ge=0,
        max_digits=9,
        decimal_places=4,
        description="Annual interest rate in percent",
        examples=["5.0000"],
    )
    interest_type: InterestType = Field(..., description="NOMINAL or EFFECTIVE")
    credit_type: CreditType = Field(..., description="SHORT_TERM or LONG_TERM")
    grace_period_months: int = Field(0, ge=0, description="Grace period in months")
    late_fee_rule_id: Optional[UUID] = Field(
        None,
        description="Late-fee rule pinned to this account",
    )


class UpdateCreditAccountSchema(BaseModel):
    """Schema for PATCH /v1/credit-accounts/{id}; omitted fields are unchanged."""

    credit_limit: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    monthly_due_day: Optional[int] = Field(None, ge=1, le=31)
    interest_rate: Optional[Decimal] = Field(None, ge=0, max_digits=9, decimal_places=4)
    interest_type: Optional[InterestType] = None
    credit_type: Optional[CreditType] = None
    grace_period_months: Optional[int] = Field(None, ge=0)
    is_blocked: Optional[bool] = Field(None, description="Block or unblock purchases")
    late_fee_rule_id: Optional[UUID] = None


class CreditAccountResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    credit_account_id: str = Field(..., description="UUID of the credit account")
    client_id: Optional[int]
    establishment_id: int
    credit_limit: Decimal = Field(..., examples=["1000.00"])
    current_balance: Decimal = Field(
        ...,
        description="Amount owed; negative means the client is in credit",
        examples=["200.00"],
    )
    available_credit: Decimal = Field(..., examples=["800.00"])
    monthly_due_day: int
    interest_rate: Decimal
    interest_type: str
    credit_type: str
    grace_period_months: int
    is_blocked: bool
    late_fee_rule_id: Optional[str]
    last_interest_accrual_at: Optional[datetime]
    created_at: datetime


class DebtSummaryEntrySchema(BaseModel):
    """One row of GET /v1/establishments/{id}/debt-summary."""

    model_config = ConfigDict(from_attributes=True)

    credit_account_id: str
    client_id: Optional[int]
    client_name: Optional[str] = Field(None, examples=["Maria Silva"])
    credit_type: str
    interest_rate: Decimal
    number_of_installments: int = Field(..., ge=0)
    current_balance: Decimal
    due_date: date = Field(..., description="Next payment due date")
