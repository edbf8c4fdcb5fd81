"""Credit request Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import CreditType, InterestType


class CreateCreditRequestSchema(BaseModel):
    """Schema for POST /v1/credit-requests request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "client_id": 42,
                    "establishment_id": 10,
                    "requested_credit_limit": "1500.00",
                    "monthly_due_day": 5,
                    "interest_rate": "3.5000",
                    "interest_type": "EFFECTIVE",
                    "credit_type": "LONG_TERM",
                    "grace_period_months": 1,
                }
            ]
        }
    )

    client_id: int = Field(..., gt=0, description="Client applying for credit")
    establishment_id: int = Field(..., gt=0, description="Establishment asked for credit")
    requested_credit_limit: Decimal = Field(
        ...,
        ge=0,
        max_digits=14,
        decimal_places=2,
        examples=["1500.00"],
    )
    monthly_due_day: int = Field(..., ge=1, le=31)
    interest_rate: Decimal = Field(..., ge=0, max_digits=9, decimal_places=4)
    interest_type: InterestType
    credit_type: CreditType
    grace_period_months: int = Field(0, ge=0)


class CreditRequestResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    credit_request_id: str
    client_id: int
    establishment_id: int
    requested_credit_limit: Decimal
    monthly_due_day: int
    interest_rate: Decimal
    interest_type: str
    credit_type: str
    grace_period_months: int
    status: str = Field(..., examples=["PENDING"])
    credit_account_id: Optional[str] = Field(
        None,
        description="Account opened on approval",
    )
    approved_at: Optional[datetime]
    rejected_at: Optional[datetime]
    created_at: datetime
