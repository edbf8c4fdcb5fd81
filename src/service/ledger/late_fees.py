"""
Late-fee rule resolution and fee computation.

A rule covers an inclusive window of days overdue. When an account has a
pinned rule, that rule governs whatever its window; a pinned rule whose
window misses the days overdue charges nothing. Otherwise the candidate rules
are scanned in a deterministic order (``days_overdue_min``, then ``created_at``,
then ``id``) and the first one whose window contains the days overdue wins.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List

from .models import FeeType
from .money import Amount, percent_of, to_money
from .settings import LedgerSettings, ledger_settings


def rule_applies(rule, days_overdue: int) -> bool:
    return rule.days_overdue_min <= days_overdue <= rule.days_overdue_max


def order_rules(rules: Iterable) -> List:
    """Sort rules into resolution order."""
    return sorted(
        rules,
        key=lambda rule: (
            rule.days_overdue_min,
            rule.created_at or datetime.min,
            str(rule.id),
        ),
    )


def resolve_rule(
    rules: Iterable,
    days_overdue: int,
    pinned_rule=None,
):
    """
    Pick the rule that governs a fee for ``days_overdue`` days.

    Args:
        rules: Candidate rules (establishment rules, or global ones)
        days_overdue: Whole days past the due date
        pinned_rule: Rule attached to the account, if any

    Returns:
        The pinned rule when given, else the first matching candidate, or
        None when no candidate applies
    """
    if pinned_rule is not None:
        return pinned_rule

    for rule in order_rules(rules):
        if rule_applies(rule, days_overdue):
            return rule

    return None


def compute_late_fee(
    rule,
    balance: Amount,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """
    Fee charged under ``rule`` on an outstanding ``balance``.

    PERCENTAGE rules charge ``fee_value`` percent of the balance;
    FIXED_AMOUNT rules charge ``fee_value`` as is.
    """
    if FeeType(rule.fee_type) is FeeType.PERCENTAGE:
        return percent_of(balance, rule.fee_value, settings)
    return to_money(rule.fee_value, settings)
