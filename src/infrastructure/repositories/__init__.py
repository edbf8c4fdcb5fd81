"""Repository implementations."""

from .credit_account_repository import PostgresCreditAccountRepository
from .credit_request_repository import PostgresCreditRequestRepository
from .installment_repository import PostgresInstallmentRepository
from .late_fee_rule_repository import PostgresLateFeeRuleRepository
from .ledger_repository import PostgresLedgerRepository

__all__ = [
    "PostgresCreditAccountRepository",
    "PostgresCreditRequestRepository",
    "PostgresInstallmentRepository",
    "PostgresLateFeeRuleRepository",
    "PostgresLedgerRepository",
]
