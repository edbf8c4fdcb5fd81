"""Establishment-scoped endpoints: account listings, batch runs and reports."""

from datetime import date, datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query

from src.application.services import (
    CreditAccountService,
    CreditRequestService,
    InterestService,
    LateFeeService,
)
from src.core.dependencies import (
    get_credit_account_service,
    get_credit_request_service,
    get_interest_service,
    get_late_fee_service,
)
from src.presentation.schemas import (
    BatchResultSchema,
    CreditAccountResponseSchema,
    CreditRequestResponseSchema,
    DebtSummaryEntrySchema,
    LateFeeRuleResponseSchema,
)
from src.service.ledger import as_naive_utc

establishment_router = APIRouter(prefix="/establishments")

EstablishmentId = Annotated[int, Path(gt=0, description="Establishment identifier")]


@establishment_router.get(
    "/{establishment_id}/credit-accounts",
    response_model=List[CreditAccountResponseSchema],
    summary="List Establishment Accounts",
)
async def list_credit_accounts(
    establishment_id: EstablishmentId,
    service: Annotated[CreditAccountService, Depends(get_credit_account_service)],
) -> List[CreditAccountResponseSchema]:
    accounts = await service.list_by_establishment(establishment_id)
    return [CreditAccountResponseSchema.model_validate(a) for a in accounts]


@establishment_router.post(
    "/{establishment_id}/apply-interest",
    response_model=BatchResultSchema,
    summary="Run Interest Accrual",
    description="""
    Accrue interest on every account of the establishment.

    Accounts are processed one at a time; a failing account is reported in
    ``failures`` and does not stop the run.
    """,
)
async def apply_interest_to_all_accounts(
    establishment_id: EstablishmentId,
    service: Annotated[InterestService, Depends(get_interest_service)],
    as_of: Annotated[Optional[datetime], Query(description="Reference time (UTC)")] = None,
) -> BatchResultSchema:
    result = await service.apply_interest_to_all_accounts(
        establishment_id,
        as_naive_utc(as_of) if as_of else None,
    )
    return BatchResultSchema.model_validate(result)


@establishment_router.post(
    "/{establishment_id}/apply-late-fees",
    response_model=BatchResultSchema,
    summary="Run Late Fees",
)
async def apply_late_fees_to_all_accounts(
    establishment_id: EstablishmentId,
    service: Annotated[LateFeeService, Depends(get_late_fee_service)],
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
) -> BatchResultSchema:
    result = await service.apply_late_fees_to_all_accounts(establishment_id, as_of)
    return BatchResultSchema.model_validate(result)


@establishment_router.get(
    "/{establishment_id}/debt-summary",
    response_model=List[DebtSummaryEntrySchema],
    summary="Debt Summary",
)
async def get_debt_summary(
    establishment_id: EstablishmentId,
    service: Annotated[CreditAccountService, Depends(get_credit_account_service)],
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
) -> List[DebtSummaryEntrySchema]:
    entries = await service.get_debt_summary(establishment_id, as_of)
    return [DebtSummaryEntrySchema.model_validate(e) for e in entries]


@establishment_router.get(
    "/{establishment_id}/credit-requests/pending",
    response_model=List[CreditRequestResponseSchema],
    summary="List Pending Credit Requests",
)
async def list_pending_credit_requests(
    establishment_id: EstablishmentId,
    service: Annotated[CreditRequestService, Depends(get_credit_request_service)],
) -> List[CreditRequestResponseSchema]:
    requests = await service.list_pending(establishment_id)
    return [CreditRequestResponseSchema.model_validate(r) for r in requests]


@establishment_router.get(
    "/{establishment_id}/late-fee-rules",
    response_model=List[LateFeeRuleResponseSchema],
    summary="List Late-Fee Rules",
    description="Rules in resolution order; falls back to global rules.",
)
async def list_late_fee_rules(
    establishment_id: EstablishmentId,
    service: Annotated[LateFeeService, Depends(get_late_fee_service)],
) -> List[LateFeeRuleResponseSchema]:
    rules = await service.list_rules(establishment_id)
    return [LateFeeRuleResponseSchema.model_validate(r) for r in rules]
