"""Late-fee rule and installment administration endpoints."""

from typing import Annotated, List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status

from src.application.dto import CreateLateFeeRuleRequest
from src.application.services import InstallmentService, LateFeeService
from src.core.dependencies import get_installment_service, get_late_fee_service
from src.presentation.schemas import (
    CreateLateFeeRuleSchema,
    ErrorResponseSchema,
    InstallmentResponseSchema,
    LateFeeRuleResponseSchema,
)

late_fee_rule_router = APIRouter(prefix="/late-fee-rules")
installment_router = APIRouter(prefix="/installments")

Rules = Annotated[LateFeeService, Depends(get_late_fee_service)]


@late_fee_rule_router.post(
    "",
    response_model=LateFeeRuleResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create Late-Fee Rule",
    responses={400: {"model": ErrorResponseSchema, "description": "Invalid overdue window"}},
)
async def create_late_fee_rule(
    request: CreateLateFeeRuleSchema,
    service: Rules,
) -> LateFeeRuleResponseSchema:
    response = await service.create_rule(CreateLateFeeRuleRequest(**request.model_dump()))
    return LateFeeRuleResponseSchema.model_validate(response)


@late_fee_rule_router.get(
    "",
    response_model=List[LateFeeRuleResponseSchema],
    summary="List All Late-Fee Rules",
)
async def list_late_fee_rules(service: Rules) -> List[LateFeeRuleResponseSchema]:
    rules = await service.list_all_rules()
    return [LateFeeRuleResponseSchema.model_validate(r) for r in rules]


@late_fee_rule_router.get(
    "/{rule_id}",
    response_model=LateFeeRuleResponseSchema,
    summary="Get Late-Fee Rule",
    responses={404: {"model": ErrorResponseSchema, "description": "Rule not found"}},
)
async def get_late_fee_rule(
    rule_id: Annotated[UUID, Path(description="UUID of the rule")],
    service: Rules,
) -> LateFeeRuleResponseSchema:
    response = await service.get_rule(rule_id)
    return LateFeeRuleResponseSchema.model_validate(response)


@installment_router.post(
    "/{installment_id}/pay",
    response_model=InstallmentResponseSchema,
    summary="Mark Installment Paid",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Installment not found"},
        409: {"model": ErrorResponseSchema, "description": "Installment already paid"},
    },
)
async def mark_installment_paid(
    installment_id: Annotated[UUID, Path(description="UUID of the installment")],
    service: Annotated[InstallmentService, Depends(get_installment_service)],
) -> InstallmentResponseSchema:
    response = await service.mark_installment_paid(installment_id)
    return InstallmentResponseSchema.model_validate(response)
