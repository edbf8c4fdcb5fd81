"""Error handling middleware and exception handlers."""

from typing import Dict, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from src.domain.exceptions import (
    BlockedException,
    ConflictException,
    DirectoryAPIException,
    DirectoryAPITimeoutException,
    DomainException,
    ForbiddenException,
    InsufficientContextException,
    InvalidStateException,
    LimitExceededException,
    NoApplicableRuleException,
    NotFoundException,
    ValidationException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)

# Handlers are resolved along the exception's MRO, so each concrete
# exception inherits the status of its category.
CATEGORY_STATUS: Dict[Type[DomainException], int] = {
    NotFoundException: 404,
    ForbiddenException: 403,
    InvalidStateException: 409,
    ConflictException: 409,
    ValidationException: 400,
    LimitExceededException: 422,
    InsufficientContextException: 422,
    NoApplicableRuleException: 422,
    BlockedException: 423,
}


def _error_body(code: str, message: str) -> dict:
    return {
        "error": code,
        "message": message,
        "request_id": get_request_id(),
    }


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exception categories to HTTP responses.
    """

    async def category_handler(request: Request, exc: DomainException) -> JSONResponse:
        status_code = next(
            (
                CATEGORY_STATUS[cls]
                for cls in type(exc).__mro__
                if cls in CATEGORY_STATUS
            ),
            400,
        )
        logger.info(
            "domain_error",
            request_id=get_request_id(),
            code=exc.code,
            status_code=status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status_code,
            content=_error_body(exc.code, exc.message),
        )

    for category in CATEGORY_STATUS:
        app.add_exception_handler(category, category_handler)

    @app.exception_handler(DirectoryAPITimeoutException)
    async def directory_timeout_handler(
        request: Request,
        exc: DirectoryAPITimeoutException,
    ) -> JSONResponse:
        """Handle directory service timeouts."""
        logger.error(
            "directory_api_timeout",
            request_id=get_request_id(),
        )
        return JSONResponse(
            status_code=503,
            content=_error_body(exc.code, "Service temporarily unavailable. Please try again."),
        )

    @app.exception_handler(DirectoryAPIException)
    async def directory_error_handler(
        request: Request,
        exc: DirectoryAPIException,
    ) -> JSONResponse:
        """Handle directory service errors."""
        logger.error(
            "directory_api_error",
            request_id=get_request_id(),
            message=exc.message,
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=503,
            content=_error_body(exc.code, "Unable to process request. Please try again later."),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions, including storage failures."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred."),
        )
