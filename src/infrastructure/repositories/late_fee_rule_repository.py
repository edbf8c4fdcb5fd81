"""PostgreSQL repository implementation for late-fee rules."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import FeeType, LateFeeRule
from src.domain.interfaces import LateFeeRuleRepository
from src.infrastructure.database.models import LateFeeRuleModel

_RESOLUTION_ORDER = (
    LateFeeRuleModel.days_overdue_min,
    LateFeeRuleModel.created_at,
    LateFeeRuleModel.id,
)


class PostgresLateFeeRuleRepository(LateFeeRuleRepository):
    """
    PostgreSQL-backed late-fee rule repository.

    Rules with a NULL establishment form the global rule set, used for any
    establishment that has not configured rules of its own.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def save(self, rule: LateFeeRule) -> LateFeeRule:
        self._session.add(
            LateFeeRuleModel(
                id=rule.id,
                establishment_id=rule.establishment_id,
                name=rule.name,
                days_overdue_min=rule.days_overdue_min,
                days_overdue_max=rule.days_overdue_max,
                fee_type=rule.fee_type.value,
                fee_value=rule.fee_value,
                created_at=rule.created_at,
            )
        )
        await self._session.flush()

        return rule

    async def get_by_id(self, rule_id: UUID) -> Optional[LateFeeRule]:
        model = await self._session.get(LateFeeRuleModel, rule_id)

        if model is None:
            return None

        return self._to_entity(model)

    async def list_for_establishment(self, establishment_id: int) -> List[LateFeeRule]:
        stmt = (
            select(LateFeeRuleModel)
            .where(LateFeeRuleModel.establishment_id == establishment_id)
            .order_by(*_RESOLUTION_ORDER)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        if not models:
            stmt = (
                select(LateFeeRuleModel)
                .where(LateFeeRuleModel.establishment_id.is_(None))
                .order_by(*_RESOLUTION_ORDER)
            )
            result = await self._session.execute(stmt)
            models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    async def list_all(self) -> List[LateFeeRule]:
        stmt = select(LateFeeRuleModel).order_by(
            LateFeeRuleModel.establishment_id,
            *_RESOLUTION_ORDER,
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    def _to_entity(self, model: LateFeeRuleModel) -> LateFeeRule:
        return LateFeeRule(
            id=model.id,
            establishment_id=model.establishment_id,
            name=model.name,
            days_overdue_min=model.days_overdue_min,
            days_overdue_max=model.days_overdue_max,
            fee_type=FeeType(model.fee_type),
            fee_value=model.fee_value,
            created_at=model.created_at,
        )
