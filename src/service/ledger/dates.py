"""
Day-granularity date arithmetic for billing periods.

Every timestamp handled by the ledger is a naive datetime in UTC. Billing
periods are calendar months anchored on the account's monthly due day; a due
day that does not exist in a month (31 in April, 30 in February) is clamped
to the last day of that month.
"""

import calendar
from datetime import date, datetime, timezone
from typing import Optional, TypeVar

from .settings import LedgerSettings, ledger_settings

D = TypeVar("D", date, datetime)


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def add_months(value: D, months: int) -> D:
    """
    Shift a date or datetime by whole calendar months.

    The day of month is clamped to the target month's length, so
    Jan 31 + 1 month is Feb 28 (or 29).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def due_date_for_period(year: int, month: int, due_day: int) -> date:
    """Due date of the billing period in ``year``/``month``."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(due_day, last_day))


def current_due_date(today: date | datetime, due_day: int) -> date:
    today = as_date(today)
    return due_date_for_period(today.year, today.month, due_day)


def days_overdue(today: date | datetime, due_day: int) -> int:
    """
    Whole days elapsed since this month's due date.

    Returns 0 when the due date has not yet passed.
    """
    today = as_date(today)
    due = current_due_date(today, due_day)
    if today <= due:
        return 0
    return (today - due).days


def upcoming_due_date(today: date | datetime, due_day: int) -> date:
    """This month's due date if still ahead (or today), else next month's."""
    today = as_date(today)
    due = current_due_date(today, due_day)
    if due >= today:
        return due
    following = add_months(date(today.year, today.month, 1), 1)
    return due_date_for_period(following.year, following.month, due_day)


def elapsed_days(start: date | datetime, end: date | datetime) -> int:
    """Calendar days between two instants, never negative."""
    return max((as_date(end) - as_date(start)).days, 0)


def interest_period_elapsed(
    last_accrual: Optional[datetime],
    now: datetime,
    settings: LedgerSettings = ledger_settings,
) -> bool:
    """
    Check whether a full interest period has passed since the last accrual.

    The period is measured in calendar months, not in a fixed number of
    days: an accrual on Jan 31 becomes due again on Feb 28.

    Args:
        last_accrual: Timestamp of the previous accrual, None if never accrued
        now: Reference time
        settings: Ledger settings (uses defaults if not provided)

    Returns:
        True if interest may be accrued at ``now``
    """
    if last_accrual is None:
        return True
    return now >= add_months(last_accrual, settings.interest_period_months)
