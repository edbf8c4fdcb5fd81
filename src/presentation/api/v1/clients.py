"""Client-scoped endpoints."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Path

from src.application.services import CreditAccountService
from src.core.dependencies import get_credit_account_service
from src.presentation.schemas import CreditAccountResponseSchema

client_router = APIRouter(prefix="/clients")


@client_router.get(
    "/{client_id}/credit-accounts",
    response_model=List[CreditAccountResponseSchema],
    summary="List Client Accounts",
    description="Credit accounts the client holds across establishments.",
)
async def list_client_credit_accounts(
    client_id: Annotated[int, Path(gt=0, description="Client identifier")],
    service: Annotated[CreditAccountService, Depends(get_credit_account_service)],
) -> List[CreditAccountResponseSchema]:
    accounts = await service.list_by_client(client_id)
    return [CreditAccountResponseSchema.model_validate(a) for a in accounts]
