"""Data Transfer Objects for application layer."""

from .credit_account import (
    CreateCreditAccountRequest,
    UpdateCreditAccountRequest,
    CreditAccountResponse,
    DebtSummaryEntry,
)
from .credit_request import CreateCreditRequest, CreditRequestResponse
from .installment import InstallmentResponse
from .late_fee_rule import CreateLateFeeRuleRequest, LateFeeRuleResponse
from .ledger import (
    BatchFailure,
    BatchResult,
    HistoryEntryResponse,
    LateFeeResponse,
    LedgerOperationResult,
    TransactionResponse,
)

__all__ = [
    "CreateCreditAccountRequest",
    "UpdateCreditAccountRequest",
    "CreditAccountResponse",
    "DebtSummaryEntry",
    "CreateCreditRequest",
    "CreditRequestResponse",
    "InstallmentResponse",
    "CreateLateFeeRuleRequest",
    "LateFeeRuleResponse",
    "BatchFailure",
    "BatchResult",
    "HistoryEntryResponse",
    "LateFeeResponse",
    "LedgerOperationResult",
    "TransactionResponse",
]
