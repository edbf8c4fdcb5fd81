"""
Ledger Settings for the Store Credit ledger engine.

Configurable parameters for interest accrual and late-fee computation.

Environment variables use the LEDGER_ prefix:
    LEDGER_MONEY_DECIMAL_PLACES=2
    LEDGER_DAYS_IN_YEAR=365
    LEDGER_ONE_LATE_FEE_PER_PERIOD=true

Usage:
    from src.service.ledger.settings import ledger_settings

    places = ledger_settings.money_decimal_places

    # Or create custom settings for testing
    custom = LedgerSettings(days_in_year=360)
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Configurable parameters for ledger calculations.

    All settings can be overridden via environment variables with LEDGER_ prefix.
    Rates are expressed in percent (5 means 5%).
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Money ===
    money_decimal_places: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places kept on every stored amount",
    )

    # === Interest ===
    days_in_year: int = Field(
        default=365,
        gt=0,
        description="Day-count basis used by both interest formulas",
    )
    interest_period_months: int = Field(
        default=1,
        ge=1,
        description="Calendar months that must elapse between two accruals",
    )

    # === Late Fees ===
    one_late_fee_per_period: bool = Field(
        default=True,
        description="Skip accounts already charged a late fee in the current billing period",
    )

    @property
    def money_quantum(self) -> Decimal:
        """Smallest representable amount, e.g. Decimal('0.01')."""
        return Decimal(1).scaleb(-self.money_decimal_places)


@lru_cache
def get_ledger_settings() -> LedgerSettings:
    """Get cached ledger settings instance."""
    return LedgerSettings()


ledger_settings = get_ledger_settings()
