"""Ledger writer - the single path through which balances change."""

from datetime import datetime
from decimal import Decimal

from src.domain.entities import (
    CreditAccount,
    CreditAccountHistory,
    RecipientType,
    Transaction,
    TransactionType,
)
from src.domain.interfaces import CreditAccountRepository, LedgerRepository
from src.service.ledger import LedgerSettings, ledger_settings, to_money, utcnow


class LedgerWriter:
    """
    Posts one ledger movement against a locked account.

    A posting writes the new balance, a Transaction and a history row that
    references it. The writer never opens a unit of work itself: callers wrap
    the load-with-lock, their business checks and every posting in one
    ``atomic()`` block so the three writes commit or vanish together.
    """

    def __init__(
        self,
        account_repository: CreditAccountRepository,
        ledger_repository: LedgerRepository,
        settings: LedgerSettings = ledger_settings,
    ):
        self._account_repo = account_repository
        self._ledger_repo = ledger_repository
        self._settings = settings

    async def post(
        self,
        account: CreditAccount,
        transaction_type: TransactionType,
        amount: Decimal,
        recipient_type: RecipientType,
        recipient_id: int | None,
        description: str,
        history_description: str | None = None,
        balance_delta: Decimal | None = None,
        at: datetime | None = None,
    ) -> Transaction:
        """
        Apply a movement to ``account`` and record it.

        Args:
            account: Account previously loaded with ``get_for_update``
            transaction_type: Ledger transaction type
            amount: Signed transaction amount
            recipient_type: Party receiving the movement
            recipient_id: Identifier of that party, if known
            description: Transaction description
            history_description: History row description (defaults to ``description``)
            balance_delta: Change to the balance; defaults to ``amount``.
                Administrative events pass zero.
            at: Timestamp for both rows (defaults to now)

        Returns:
            The recorded transaction
        """
        at = at or utcnow()
        amount = to_money(amount, self._settings)
        delta = amount if balance_delta is None else to_money(balance_delta, self._settings)

        account.current_balance = to_money(account.current_balance + delta, self._settings)
        await self._account_repo.update(account)

        transaction = Transaction(
            type=transaction_type,
            amount=amount,
            recipient_type=recipient_type,
            recipient_id=recipient_id,
            credit_account_id=account.id,
            description=description,
            occurred_at=at,
        )
        await self._ledger_repo.add_transaction(transaction)

        await self._ledger_repo.add_history(
            CreditAccountHistory(
                credit_account_id=account.id,
                transaction_id=transaction.id,
                type=transaction_type,
                amount=delta,
                resulting_balance=account.current_balance,
                description=history_description or description,
                occurred_at=at,
            )
        )

        return transaction
