"""
Domain Interfaces (Ports)
"""

from .repositories import (
    CreditAccountRepository,
    CreditRequestRepository,
    InstallmentRepository,
    LateFeeRuleRepository,
    LedgerRepository,
)
from .clients import ClientDirectory, EstablishmentDirectory

__all__ = [
    "CreditAccountRepository",
    "CreditRequestRepository",
    "InstallmentRepository",
    "LateFeeRuleRepository",
    "LedgerRepository",
    "ClientDirectory",
    "EstablishmentDirectory",
]
