"""Late-fee rule entity."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from src.service.ledger import FeeType, utcnow


@dataclass
class LateFeeRule:
    """
    Fee schedule for accounts overdue between ``days_overdue_min`` and
    ``days_overdue_max`` days (inclusive).

    Rules without an establishment belong to the global rule set.
    """

    name: str
    days_overdue_min: int
    days_overdue_max: int
    fee_type: FeeType
    fee_value: Decimal
    establishment_id: int | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
