"""Data transfer objects for late-fee rules."""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from src.domain.entities import FeeType


@dataclass(frozen=True)
class CreateLateFeeRuleRequest:
    name: str
    days_overdue_min: int
    days_overdue_max: int
    fee_type: FeeType
    fee_value: Decimal
    establishment_id: Optional[int] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.name or not self.name.strip():
            errors.append("name is required")

        if self.days_overdue_min < 0:
            errors.append("days_overdue_min must not be negative")

        if self.days_overdue_max <= self.days_overdue_min:
            errors.append("days_overdue_max must be greater than days_overdue_min")

        if self.fee_value < 0:
            errors.append("fee_value must not be negative")

        return errors


@dataclass(frozen=True)
class LateFeeRuleResponse:
    late_fee_rule_id: str
    establishment_id: Optional[int]
    name: str
    days_overdue_min: int
    days_overdue_max: int
    fee_type: str
    fee_value: Decimal

    @classmethod
    def from_entity(cls, rule) -> "LateFeeRuleResponse":
        return cls(
            late_fee_rule_id=str(rule.id),
            establishment_id=rule.establishment_id,
            name=rule.name,
            days_overdue_min=rule.days_overdue_min,
            days_overdue_max=rule.days_overdue_max,
            fee_type=rule.fee_type.value,
            fee_value=rule.fee_value,
        )
