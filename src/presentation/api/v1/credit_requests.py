"""Credit request API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status

from src.application.dto import CreateCreditRequest
from src.application.services import CreditRequestService
from src.core.dependencies import get_credit_request_service
from src.core.security import get_current_identity
from src.domain.entities import Identity
from src.presentation.schemas import (
    CreateCreditRequestSchema,
    CreditRequestResponseSchema,
    ErrorResponseSchema,
)

credit_request_router = APIRouter(
    prefix="/credit-requests",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Credit request not found"},
    },
)

RequestId = Annotated[UUID, Path(description="UUID of the credit request")]
Requests = Annotated[CreditRequestService, Depends(get_credit_request_service)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


@credit_request_router.post(
    "",
    response_model=CreditRequestResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create Credit Request",
    responses={
        409: {"model": ErrorResponseSchema, "description": "Inactive client or existing account"},
    },
)
async def create_credit_request(
    request: CreateCreditRequestSchema,
    service: Requests,
) -> CreditRequestResponseSchema:
    response = await service.create_credit_request(CreateCreditRequest(**request.model_dump()))
    return CreditRequestResponseSchema.model_validate(response)


@credit_request_router.get(
    "/{request_id}",
    response_model=CreditRequestResponseSchema,
    summary="Get Credit Request",
)
async def get_credit_request(request_id: RequestId, service: Requests) -> CreditRequestResponseSchema:
    response = await service.get_credit_request(request_id)
    return CreditRequestResponseSchema.model_validate(response)


@credit_request_router.post(
    "/{request_id}/approve",
    response_model=CreditRequestResponseSchema,
    summary="Approve Credit Request",
    description="""
    Approve a pending request and open the client's credit account.

    Only the establishment's admin may approve.
    """,
    responses={
        403: {"model": ErrorResponseSchema, "description": "Caller is not the establishment admin"},
        409: {"model": ErrorResponseSchema, "description": "Request already decided"},
    },
)
async def approve_credit_request(
    request_id: RequestId,
    service: Requests,
    identity: CurrentIdentity,
) -> CreditRequestResponseSchema:
    response = await service.approve_credit_request(request_id, identity.user_id)
    return CreditRequestResponseSchema.model_validate(response)


@credit_request_router.post(
    "/{request_id}/reject",
    response_model=CreditRequestResponseSchema,
    summary="Reject Credit Request",
    responses={
        403: {"model": ErrorResponseSchema, "description": "Caller is not the establishment admin"},
        409: {"model": ErrorResponseSchema, "description": "Request already decided"},
    },
)
async def reject_credit_request(
    request_id: RequestId,
    service: Requests,
    identity: CurrentIdentity,
) -> CreditRequestResponseSchema:
    response = await service.reject_credit_request(request_id, identity.user_id)
    return CreditRequestResponseSchema.model_validate(response)
