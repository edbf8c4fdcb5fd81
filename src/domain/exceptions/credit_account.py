"""Credit account and ledger mutation exceptions."""

from decimal import Decimal

from .base import (
    BlockedException,
    ConflictException,
    InsufficientContextException,
    InvalidStateException,
    LimitExceededException,
    NotFoundException,
    ValidationException,
)


class CreditAccountNotFoundException(NotFoundException):
    """Raised when a credit account cannot be found."""

    def __init__(self, account_id: str):
        super().__init__(
            message=f"Credit account not found: {account_id}",
            code="CREDIT_ACCOUNT_NOT_FOUND",
        )
        self.account_id = account_id


class CreditAccountAlreadyExistsException(ConflictException):
    """Raised when the client already holds an account at the establishment."""

    def __init__(self, client_id: int | None, establishment_id: int):
        super().__init__(
            message=(
                f"Client {client_id} already has a credit account "
                f"at establishment {establishment_id}"
            ),
            code="CREDIT_ACCOUNT_ALREADY_EXISTS",
        )
        self.client_id = client_id
        self.establishment_id = establishment_id


class CreditAccountAlreadyAssignedException(InvalidStateException):
    def __init__(self, account_id: str):
        super().__init__(
            message=f"Credit account {account_id} is already assigned to a client",
            code="CREDIT_ACCOUNT_ALREADY_ASSIGNED",
        )
        self.account_id = account_id


class CreditAccountHasBalanceException(InvalidStateException):
    """Raised when deleting an account that still carries a balance."""

    def __init__(self, account_id: str, balance: Decimal):
        super().__init__(
            message=f"Credit account {account_id} has an outstanding balance of {balance}",
            code="CREDIT_ACCOUNT_HAS_BALANCE",
        )
        self.account_id = account_id
        self.balance = balance


class CreditLimitExceededException(LimitExceededException):
    """Raised when a purchase would exceed the available credit."""

    def __init__(self, account_id: str, amount: Decimal, available: Decimal):
        super().__init__(
            message=(
                f"Purchase of {amount} exceeds available credit of {available} "
                f"on account {account_id}"
            ),
            code="CREDIT_LIMIT_EXCEEDED",
        )
        self.account_id = account_id
        self.amount = amount
        self.available = available


class PaymentExceedsBalanceException(InsufficientContextException):
    """Raised when a payment is larger than the outstanding balance."""

    def __init__(self, account_id: str, amount: Decimal, balance: Decimal):
        super().__init__(
            message=(
                f"Payment of {amount} exceeds the current balance of {balance} "
                f"on account {account_id}"
            ),
            code="PAYMENT_EXCEEDS_BALANCE",
        )
        self.account_id = account_id
        self.amount = amount
        self.balance = balance


class AccountBlockedException(BlockedException):
    def __init__(self, account_id: str):
        super().__init__(
            message=f"Credit account {account_id} is blocked",
            code="ACCOUNT_BLOCKED",
        )
        self.account_id = account_id


class InvalidAmountException(ValidationException):
    """Raised when a ledger amount is zero or negative."""

    def __init__(self, amount: Decimal):
        super().__init__(
            message=f"Amount must be greater than zero, got {amount}",
            code="INVALID_AMOUNT",
        )
        self.amount = amount


class InvalidCreditTermsException(ValidationException):
    """Raised when requested credit terms fail validation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_CREDIT_TERMS",
        )
