"""
Ledger calculation module for the Store Credit service.

Pure functions: no I/O, no persistence. Everything here takes plain values
(or objects exposing the needed attributes) and returns Decimals, dates or
the selected rule.
"""

from .models import CreditType, FeeType, InstallmentStatus, InterestType
from .settings import LedgerSettings, ledger_settings
from .money import ZERO, percent_of, to_money
from .dates import (
    add_months,
    as_naive_utc,
    current_due_date,
    days_overdue,
    elapsed_days,
    interest_period_elapsed,
    upcoming_due_date,
    utcnow,
)
from .interest import (
    accrued_interest,
    calculate_interest,
    effective_interest,
    long_term_interest,
    nominal_interest,
    short_term_interest,
)
from .late_fees import compute_late_fee, order_rules, resolve_rule, rule_applies

__all__ = [
    # Settings
    "LedgerSettings",
    "ledger_settings",
    # Models
    "CreditType",
    "FeeType",
    "InstallmentStatus",
    "InterestType",
    # Money
    "ZERO",
    "percent_of",
    "to_money",
    # Dates
    "add_months",
    "as_naive_utc",
    "current_due_date",
    "days_overdue",
    "elapsed_days",
    "interest_period_elapsed",
    "upcoming_due_date",
    "utcnow",
    # Interest
    "accrued_interest",
    "calculate_interest",
    "effective_interest",
    "long_term_interest",
    "nominal_interest",
    "short_term_interest",
    # Late Fees
    "compute_late_fee",
    "order_rules",
    "resolve_rule",
    "rule_applies",
]
