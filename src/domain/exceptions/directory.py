"""Client / establishment directory exceptions."""

from .base import DomainException, InvalidStateException, NotFoundException


class DirectoryAPIException(DomainException):
    """Raised when the directory API returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="DIRECTORY_API_ERROR",
        )
        self.status_code = status_code


class DirectoryAPITimeoutException(DirectoryAPIException):
    """Raised when the directory API times out."""

    def __init__(self):
        super().__init__(
            message="Directory API request timed out",
            status_code=None,
        )
        self.code = "DIRECTORY_API_TIMEOUT"


class ClientNotFoundException(NotFoundException):
    def __init__(self, client_id: int):
        super().__init__(
            message=f"Client not found: {client_id}",
            code="CLIENT_NOT_FOUND",
        )
        self.client_id = client_id


class EstablishmentNotFoundException(NotFoundException):
    def __init__(self, establishment_id: int):
        super().__init__(
            message=f"Establishment not found: {establishment_id}",
            code="ESTABLISHMENT_NOT_FOUND",
        )
        self.establishment_id = establishment_id


class ClientInactiveException(InvalidStateException):
    """Raised when opening credit for a deactivated client."""

    def __init__(self, client_id: int):
        super().__init__(
            message=f"Client {client_id} is not active",
            code="CLIENT_INACTIVE",
        )
        self.client_id = client_id
