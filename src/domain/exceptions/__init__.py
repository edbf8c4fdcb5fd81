"""Domain Exceptions - Business rule violations and domain errors."""

from .base import (
    DomainException,
    NotFoundException,
    ForbiddenException,
    InvalidStateException,
    ConflictException,
    ValidationException,
    LimitExceededException,
    InsufficientContextException,
    BlockedException,
    NoApplicableRuleException,
)
from .credit_account import (
    CreditAccountNotFoundException,
    CreditAccountAlreadyExistsException,
    CreditAccountAlreadyAssignedException,
    CreditAccountHasBalanceException,
    CreditLimitExceededException,
    PaymentExceedsBalanceException,
    AccountBlockedException,
    InvalidAmountException,
    InvalidCreditTermsException,
)
from .credit_request import (
    CreditRequestNotFoundException,
    CreditRequestNotPendingException,
    NotEstablishmentAdminException,
)
from .late_fee import (
    LateFeeRuleNotFoundException,
    InvalidLateFeeRuleException,
    NoLateFeeRuleMatchedException,
)
from .installment import (
    InstallmentNotFoundException,
    InstallmentsNotSupportedException,
    InstallmentAlreadyPaidException,
)
from .directory import (
    DirectoryAPIException,
    DirectoryAPITimeoutException,
    ClientNotFoundException,
    EstablishmentNotFoundException,
    ClientInactiveException,
)

__all__ = [
    # Categories
    "DomainException",
    "NotFoundException",
    "ForbiddenException",
    "InvalidStateException",
    "ConflictException",
    "ValidationException",
    "LimitExceededException",
    "InsufficientContextException",
    "BlockedException",
    "NoApplicableRuleException",
    # Credit accounts
    "CreditAccountNotFoundException",
    "CreditAccountAlreadyExistsException",
    "CreditAccountAlreadyAssignedException",
    "CreditAccountHasBalanceException",
    "CreditLimitExceededException",
    "PaymentExceedsBalanceException",
    "AccountBlockedException",
    "InvalidAmountException",
    "InvalidCreditTermsException",
    # Credit requests
    "CreditRequestNotFoundException",
    "CreditRequestNotPendingException",
    "NotEstablishmentAdminException",
    # Late fees
    "LateFeeRuleNotFoundException",
    "InvalidLateFeeRuleException",
    "NoLateFeeRuleMatchedException",
    # Installments
    "InstallmentNotFoundException",
    "InstallmentsNotSupportedException",
    "InstallmentAlreadyPaidException",
    # Directory
    "DirectoryAPIException",
    "DirectoryAPITimeoutException",
    "ClientNotFoundException",
    "EstablishmentNotFoundException",
    "ClientInactiveException",
]
