"""Credit request workflow exceptions."""

from .base import ForbiddenException, InvalidStateException, NotFoundException


class CreditRequestNotFoundException(NotFoundException):
    """Raised when a credit request cannot be found."""

    def __init__(self, request_id: str):
        super().__init__(
            message=f"Credit request not found: {request_id}",
            code="CREDIT_REQUEST_NOT_FOUND",
        )
        self.request_id = request_id


class CreditRequestNotPendingException(InvalidStateException):
    """Raised when approving or rejecting a request that was already decided."""

    def __init__(self, request_id: str, status: str):
        super().__init__(
            message=f"Credit request {request_id} is {status}, expected PENDING",
            code="CREDIT_REQUEST_NOT_PENDING",
        )
        self.request_id = request_id
        self.status = status


class NotEstablishmentAdminException(ForbiddenException):
    """Raised when the acting user does not administer the establishment."""

    def __init__(self, user_id: int, establishment_id: int):
        super().__init__(
            message=f"User {user_id} is not the admin of establishment {establishment_id}",
            code="NOT_ESTABLISHMENT_ADMIN",
        )
        self.user_id = user_id
        self.establishment_id = establishment_id
