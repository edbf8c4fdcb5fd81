"""Pydantic schemas for API request/response validation."""

from .credit_account import (
    CreateCreditAccountSchema,
    CreditAccountResponseSchema,
    DebtSummaryEntrySchema,
    UpdateCreditAccountSchema,
)
from .credit_request import CreateCreditRequestSchema, CreditRequestResponseSchema
from .error import ErrorResponseSchema
from .installment import CreateInstallmentSchema, InstallmentResponseSchema
from .late_fee_rule import CreateLateFeeRuleSchema, LateFeeRuleResponseSchema
from .ledger import (
    BatchFailureSchema,
    BatchResultSchema,
    HistoryEntrySchema,
    LateFeeSchema,
    LedgerAmountSchema,
    LedgerOperationSchema,
    TransactionSchema,
)

__all__ = [
    "CreateCreditAccountSchema",
    "CreditAccountResponseSchema",
    "DebtSummaryEntrySchema",
    "UpdateCreditAccountSchema",
    "CreateCreditRequestSchema",
    "CreditRequestResponseSchema",
    "ErrorResponseSchema",
    "CreateInstallmentSchema",
    "InstallmentResponseSchema",
    "CreateLateFeeRuleSchema",
    "LateFeeRuleResponseSchema",
    "BatchFailureSchema",
    "BatchResultSchema",
    "HistoryEntrySchema",
    "LateFeeSchema",
    "LedgerAmountSchema",
    "LedgerOperationSchema",
    "TransactionSchema",
]
