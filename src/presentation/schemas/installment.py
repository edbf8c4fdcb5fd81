"""Installment Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateInstallmentSchema(BaseModel):
    due_date: date = Field(..., description="Due date (YYYY-MM-DD)", examples=["2025-10-01"])
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2, examples=["250.00"])


class InstallmentResponseSchema(BaseModel):
    """Schema for an installment of a LONG_TERM account."""

    model_config = ConfigDict(from_attributes=True)

    installment_id: str = Field(..., description="UUID of the installment")
    credit_account_id: str
    due_date: date
    amount: Decimal
    status: str = Field(..., examples=["PENDING"])
    paid_at: Optional[datetime]
