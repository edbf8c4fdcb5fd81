"""Application services (use cases)."""

from .credit_account_service import CreditAccountService
from .credit_request_service import CreditRequestService
from .installment_service import InstallmentService
from .interest_service import InterestService
from .late_fee_service import LateFeeService
from .ledger_writer import LedgerWriter
from .transaction_service import TransactionService

__all__ = [
    "CreditAccountService",
    "CreditRequestService",
    "InstallmentService",
    "InterestService",
    "LateFeeService",
    "LedgerWriter",
    "TransactionService",
]
