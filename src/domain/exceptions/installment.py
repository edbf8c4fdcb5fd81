"""Installment exceptions."""

from .base import InvalidStateException, NotFoundException


class InstallmentNotFoundException(NotFoundException):
    def __init__(self, installment_id: str):
        super().__init__(
            message=f"Installment not found: {installment_id}",
            code="INSTALLMENT_NOT_FOUND",
        )
        self.installment_id = installment_id


class InstallmentsNotSupportedException(InvalidStateException):
    """Raised when scheduling installments on a SHORT_TERM account."""

    def __init__(self, account_id: str):
        super().__init__(
            message=f"Credit account {account_id} is not a LONG_TERM account",
            code="INSTALLMENTS_NOT_SUPPORTED",
        )
        self.account_id = account_id


class InstallmentAlreadyPaidException(InvalidStateException):
    def __init__(self, installment_id: str):
        super().__init__(
            message=f"Installment {installment_id} is already paid",
            code="INSTALLMENT_ALREADY_PAID",
        )
        self.installment_id = installment_id
