"""Read-only views of records owned by the client/establishment directory."""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID


@dataclass(frozen=True)
class ClientInfo:
    id: int
    name: str
    is_active: bool = True
    credit_limit: Decimal | None = None
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class EstablishmentInfo:
    """
    Establishment as seen by the ledger.

    ``late_fee_rule_id`` is the default rule pinned on accounts opened
    through the credit request workflow.
    """

    id: int
    name: str
    admin_id: int
    late_fee_rule_id: UUID | None = None


@dataclass(frozen=True)
class Identity:
    """Authenticated caller decoded from the bearer token."""

    user_id: int
    role: str = "admin"
