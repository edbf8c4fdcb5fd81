"""Fixed-precision money helpers."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from .settings import LedgerSettings, ledger_settings

Amount = Union[Decimal, int, str]

ZERO = Decimal("0")


def to_money(value: Amount, settings: LedgerSettings = ledger_settings) -> Decimal:
    """
    Quantize a value to the configured money precision.

    Floats are rejected; callers must hand over Decimal, int or str so that
    no binary rounding leaks into stored balances.

    Args:
        value: Amount to normalize
        settings: Ledger settings (uses defaults if not provided)

    Returns:
        Decimal rounded half-up to the money quantum
    """
    if isinstance(value, float):
        raise TypeError("Monetary amounts must not be floats")

    return Decimal(value).quantize(settings.money_quantum, rounding=ROUND_HALF_UP)


def percent_of(
    amount: Amount,
    percent: Amount,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """Return ``percent`` percent of ``amount``, money-rounded."""
    return to_money(Decimal(amount) * Decimal(percent) / Decimal(100), settings)
