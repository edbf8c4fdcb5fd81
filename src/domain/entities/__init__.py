"""Domain Entities - Core business objects."""

from src.service.ledger import CreditType, FeeType, InstallmentStatus, InterestType

from .credit_account import CreditAccount
from .credit_request import CreditRequest, CreditRequestStatus
from .directory import ClientInfo, EstablishmentInfo, Identity
from .installment import Installment
from .late_fee_rule import LateFeeRule
from .ledger import (
    CreditAccountHistory,
    LateFee,
    RecipientType,
    Transaction,
    TransactionType,
)

__all__ = [
    "CreditAccount",
    "CreditType",
    "InterestType",
    "CreditRequest",
    "CreditRequestStatus",
    "ClientInfo",
    "EstablishmentInfo",
    "Identity",
    "Installment",
    "InstallmentStatus",
    "LateFeeRule",
    "FeeType",
    "CreditAccountHistory",
    "LateFee",
    "RecipientType",
    "Transaction",
    "TransactionType",
]
