"""Late-fee rule Pydantic schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import FeeType


class CreateLateFeeRuleSchema(BaseModel):
    """Schema for POST /v1/late-fee-rules request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "First week",
                    "establishment_id": 10,
                    "days_overdue_min": 1,
                    "days_overdue_max": 7,
                    "fee_type": "PERCENTAGE",
                    "fee_value": "5.00",
                }
            ]
        }
    )

    name: str = Field(..., min_length=1, max_length=120)
    establishment_id: Optional[int] = Field(
        None,
        gt=0,
        description="Owning establishment; omit for a global rule",
    )
    days_overdue_min: int = Field(..., ge=0, description="First day of the window (inclusive)")
    days_overdue_max: int = Field(..., ge=0, description="Last day of the window (inclusive)")
    fee_type: FeeType = Field(..., description="PERCENTAGE of the balance or FIXED_AMOUNT")
    fee_value: Decimal = Field(..., ge=0, max_digits=9, decimal_places=4, examples=["5.00"])


class LateFeeRuleResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    late_fee_rule_id: str
    establishment_id: Optional[int]
    name: str
    days_overdue_min: int
    days_overdue_max: int
    fee_type: str
    fee_value: Decimal
