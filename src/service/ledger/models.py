"""Enumerations shared by the ledger calculations and the domain layer."""

from enum import Enum


class InterestType(str, Enum):
    """How the periodic rate is applied over a fraction of a year."""

    NOMINAL = "NOMINAL"
    EFFECTIVE = "EFFECTIVE"


class CreditType(str, Enum):
    """SHORT_TERM accrues on the balance, LONG_TERM on pending installments."""

    SHORT_TERM = "SHORT_TERM"
    LONG_TERM = "LONG_TERM"


class FeeType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
