"""
Interest accrual formulas.

Two day-count formulas are supported, selected by the account's
interest type:

    NOMINAL:    principal * rate/100 * days/days_in_year
    EFFECTIVE:  principal * ((1 + rate/100) ** (days/days_in_year) - 1)

SHORT_TERM accounts accrue on the current balance over the days since the
previous accrual. LONG_TERM accounts accrue on every pending installment
whose due date is still in the future, over the days left until that due
date, and the per-installment amounts are summed.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from .dates import as_date, elapsed_days
from .models import CreditType, InstallmentStatus, InterestType
from .money import ZERO, Amount, to_money
from .settings import LedgerSettings, ledger_settings


def nominal_interest(
    principal: Amount,
    rate: Amount,
    days: int,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """Simple (nominal) interest over ``days`` days."""
    if days <= 0:
        return to_money(ZERO, settings)

    year_fraction = Decimal(days) / Decimal(settings.days_in_year)
    return to_money(
        Decimal(principal) * Decimal(rate) / Decimal(100) * year_fraction,
        settings,
    )


def effective_interest(
    principal: Amount,
    rate: Amount,
    days: int,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """Compound (effective) interest over ``days`` days."""
    if days <= 0:
        return to_money(ZERO, settings)

    year_fraction = Decimal(days) / Decimal(settings.days_in_year)
    growth = (Decimal(1) + Decimal(rate) / Decimal(100)) ** year_fraction
    return to_money(Decimal(principal) * (growth - Decimal(1)), settings)


def calculate_interest(
    principal: Amount,
    rate: Amount,
    interest_type: InterestType,
    days: int,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """
    Interest on a principal for a number of days.

    Args:
        principal: Amount the interest is computed on
        rate: Annual rate in percent
        interest_type: NOMINAL or EFFECTIVE
        days: Number of days the principal was outstanding
        settings: Ledger settings (uses defaults if not provided)

    Returns:
        Interest amount rounded to the money quantum
    """
    if InterestType(interest_type) is InterestType.EFFECTIVE:
        return effective_interest(principal, rate, days, settings)
    return nominal_interest(principal, rate, days, settings)


def short_term_interest(
    balance: Amount,
    rate: Amount,
    interest_type: InterestType,
    last_accrual: Optional[datetime],
    now: datetime,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """Interest on the outstanding balance since the previous accrual."""
    if last_accrual is None or Decimal(balance) <= ZERO:
        return to_money(ZERO, settings)

    days = elapsed_days(last_accrual, now)
    return calculate_interest(balance, rate, interest_type, days, settings)


def long_term_interest(
    installments: Iterable,
    rate: Amount,
    interest_type: InterestType,
    today: date | datetime,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """
    Interest summed over pending installments that are not yet due.

    Args:
        installments: Objects exposing ``amount``, ``due_date`` and ``status``
        rate: Annual rate in percent
        interest_type: NOMINAL or EFFECTIVE
        today: Reference date
        settings: Ledger settings (uses defaults if not provided)

    Returns:
        Total interest rounded to the money quantum
    """
    today = as_date(today)
    total = ZERO

    for installment in installments:
        if InstallmentStatus(installment.status) is not InstallmentStatus.PENDING:
            continue
        due = as_date(installment.due_date)
        if due <= today:
            continue
        total += calculate_interest(
            installment.amount,
            rate,
            interest_type,
            (due - today).days,
            settings,
        )

    return to_money(total, settings)


def accrued_interest(
    credit_type: CreditType,
    balance: Amount,
    rate: Amount,
    interest_type: InterestType,
    last_accrual: Optional[datetime],
    now: datetime,
    installments: Iterable = (),
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """Interest owed for one accrual period, dispatched on the credit type."""
    if CreditType(credit_type) is CreditType.LONG_TERM:
        return long_term_interest(installments, rate, interest_type, now, settings)
    return short_term_interest(balance, rate, interest_type, last_accrual, now, settings)
