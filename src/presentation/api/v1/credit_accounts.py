"""Credit account API endpoints."""

from datetime import date, datetime
from typing import Annotated, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response, status

from src.application.dto import CreateCreditAccountRequest, UpdateCreditAccountRequest
from src.application.services import (
    CreditAccountService,
    InstallmentService,
    InterestService,
    LateFeeService,
    TransactionService,
)
from src.core.dependencies import (
    get_credit_account_service,
    get_installment_service,
    get_interest_service,
    get_late_fee_service,
    get_transaction_service,
)
from src.presentation.schemas import (
    CreateCreditAccountSchema,
    CreateInstallmentSchema,
    CreditAccountResponseSchema,
    ErrorResponseSchema,
    HistoryEntrySchema,
    InstallmentResponseSchema,
    LateFeeSchema,
    LedgerAmountSchema,
    LedgerOperationSchema,
    TransactionSchema,
    UpdateCreditAccountSchema,
)
from src.service.ledger import as_naive_utc

credit_account_router = APIRouter(
    prefix="/credit-accounts",
    responses={
        401: {"description": "Missing or invalid bearer token"},
        404: {"model": ErrorResponseSchema, "description": "Credit account not found"},
    },
)

AccountId = Annotated[UUID, Path(description="UUID of the credit account")]
Accounts = Annotated[CreditAccountService, Depends(get_credit_account_service)]
Transactions = Annotated[TransactionService, Depends(get_transaction_service)]
Installments = Annotated[InstallmentService, Depends(get_installment_service)]
Limit = Annotated[int, Query(ge=1, le=500, description="Maximum number of rows")]
Offset = Annotated[int, Query(ge=0, description="Rows to skip")]


@credit_account_router.post(
    "",
    response_model=CreditAccountResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Open Credit Account",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid credit terms"},
        409: {"model": ErrorResponseSchema, "description": "Client already has an account"},
    },
)
async def create_credit_account(
    request: CreateCreditAccountSchema,
    service: Accounts,
) -> CreditAccountResponseSchema:
    response = await service.create_credit_account(
        CreateCreditAccountRequest(**request.model_dump())
    )
    return CreditAccountResponseSchema.model_validate(response)


@credit_account_router.get(
    "/{account_id}",
    response_model=CreditAccountResponseSchema,
    summary="Get Credit Account",
)
async def get_credit_account(account_id: AccountId, service: Accounts) -> CreditAccountResponseSchema:
    response = await service.get_credit_account(account_id)
    return CreditAccountResponseSchema.model_validate(response)


@credit_account_router.patch(
    "/{account_id}",
    response_model=CreditAccountResponseSchema,
    summary="Update Credit Account",
    description="""
    Partially update an account's terms.

    Credit limit changes and blocking/unblocking are recorded in the
    account's ledger.
    """,
)
async def update_credit_account(
    account_id: AccountId,
    request: UpdateCreditAccountSchema,
    service: Accounts,
) -> CreditAccountResponseSchema:
    response = await service.update_credit_account(
        account_id,
        UpdateCreditAccountRequest(**request.model_dump(exclude_unset=True)),
    )
    return CreditAccountResponseSchema.model_validate(response)


@credit_account_router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Credit Account",
    responses={409: {"model": ErrorResponseSchema, "description": "Account still has a balance"}},
)
async def delete_credit_account(account_id: AccountId, service: Accounts) -> Response:
    await service.delete_credit_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@credit_account_router.put(
    "/{account_id}/clients/{client_id}",
    response_model=CreditAccountResponseSchema,
    summary="Assign Credit Account to Client",
    responses={409: {"model": ErrorResponseSchema, "description": "Account already assigned"}},
)
async def assign_to_client(
    account_id: AccountId,
    client_id: Annotated[int, Path(gt=0)],
    service: Accounts,
) -> CreditAccountResponseSchema:
    response = await service.assign_to_client(account_id, client_id)
    return CreditAccountResponseSchema.model_validate(response)


@credit_account_router.post(
    "/{account_id}/purchases",
    response_model=LedgerOperationSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Process Purchase",
    responses={
        422: {"model": ErrorResponseSchema, "description": "Credit limit exceeded"},
        423: {"model": ErrorResponseSchema, "description": "Account is blocked"},
    },
)
async def process_purchase(
    account_id: AccountId,
    request: LedgerAmountSchema,
    service: Transactions,
) -> LedgerOperationSchema:
    result = await service.process_purchase(account_id, request.amount, request.description)
    return LedgerOperationSchema.model_validate(result)


@credit_account_router.post(
    "/{account_id}/payments",
    response_model=LedgerOperationSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Process Payment",
    responses={422: {"model": ErrorResponseSchema, "description": "Payment exceeds balance"}},
)
async def process_payment(
    account_id: AccountId,
    request: LedgerAmountSchema,
    service: Transactions,
) -> LedgerOperationSchema:
    result = await service.process_payment(account_id, request.amount, request.description)
    return LedgerOperationSchema.model_validate(result)


@credit_account_router.post(
    "/{account_id}/apply-interest",
    response_model=LedgerOperationSchema,
    summary="Apply Interest to One Account",
)
async def apply_interest(
    account_id: AccountId,
    service: Annotated[InterestService, Depends(get_interest_service)],
    as_of: Annotated[Optional[datetime], Query(description="Reference time (UTC)")] = None,
) -> LedgerOperationSchema:
    result = await service.apply_interest(account_id, as_naive_utc(as_of) if as_of else None)
    return LedgerOperationSchema.model_validate(result)


@credit_account_router.post(
    "/{account_id}/apply-late-fee",
    response_model=LedgerOperationSchema,
    summary="Apply Late Fee to One Account",
    responses={422: {"model": ErrorResponseSchema, "description": "No applicable rule"}},
)
async def apply_late_fee(
    account_id: AccountId,
    service: Annotated[LateFeeService, Depends(get_late_fee_service)],
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
) -> LedgerOperationSchema:
    result = await service.apply_late_fee(account_id, as_of)
    return LedgerOperationSchema.model_validate(result)


@credit_account_router.get(
    "/{account_id}/transactions",
    response_model=List[TransactionSchema],
    summary="List Transactions",
    description="Ledger transactions of the account, newest first.",
)
async def list_transactions(
    account_id: AccountId,
    service: Transactions,
    limit: Limit = 100,
    offset: Offset = 0,
) -> List[TransactionSchema]:
    transactions = await service.list_transactions(account_id, limit, offset)
    return [TransactionSchema.model_validate(t) for t in transactions]


@credit_account_router.get(
    "/{account_id}/history",
    response_model=List[HistoryEntrySchema],
    summary="List Balance History",
)
async def list_history(
    account_id: AccountId,
    service: Transactions,
    limit: Limit = 100,
    offset: Offset = 0,
) -> List[HistoryEntrySchema]:
    entries = await service.list_history(account_id, limit, offset)
    return [HistoryEntrySchema.model_validate(e) for e in entries]


@credit_account_router.get(
    "/{account_id}/late-fees",
    response_model=List[LateFeeSchema],
    summary="List Late Fees",
)
async def list_late_fees(account_id: AccountId, service: Transactions) -> List[LateFeeSchema]:
    late_fees = await service.list_late_fees(account_id)
    return [LateFeeSchema.model_validate(f) for f in late_fees]


@credit_account_router.post(
    "/{account_id}/installments",
    response_model=InstallmentResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule Installment",
    responses={409: {"model": ErrorResponseSchema, "description": "Account is not LONG_TERM"}},
)
async def create_installment(
    account_id: AccountId,
    request: CreateInstallmentSchema,
    service: Installments,
) -> InstallmentResponseSchema:
    response = await service.create_installment(account_id, request.due_date, request.amount)
    return InstallmentResponseSchema.model_validate(response)


@credit_account_router.get(
    "/{account_id}/installments",
    response_model=List[InstallmentResponseSchema],
    summary="List Installments",
)
async def list_installments(
    account_id: AccountId,
    service: Installments,
) -> List[InstallmentResponseSchema]:
    installments = await service.list_installments(account_id)
    return [InstallmentResponseSchema.model_validate(i) for i in installments]


@credit_account_router.get(
    "/{account_id}/installments/overdue",
    response_model=List[InstallmentResponseSchema],
    summary="List Overdue Installments",
)
async def list_overdue_installments(
    account_id: AccountId,
    service: Installments,
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
) -> List[InstallmentResponseSchema]:
    installments = await service.list_overdue_installments(account_id, as_of)
    return [InstallmentResponseSchema.model_validate(i) for i in installments]
