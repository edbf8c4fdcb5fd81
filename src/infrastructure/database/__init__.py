"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import (
    Base,
    CreditAccountModel,
    CreditAccountHistoryModel,
    CreditRequestModel,
    InstallmentModel,
    LateFeeModel,
    LateFeeRuleModel,
    TransactionModel,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "CreditAccountModel",
    "CreditAccountHistoryModel",
    "CreditRequestModel",
    "InstallmentModel",
    "LateFeeModel",
    "LateFeeRuleModel",
    "TransactionModel",
]
