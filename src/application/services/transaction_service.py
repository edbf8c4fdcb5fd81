"""Transaction service - purchases, payments and ledger projections."""

from decimal import Decimal
from uuid import UUID

import structlog

from src.core.metrics import record_ledger_transaction, record_rejected_operation
from src.domain.entities import CreditAccount, RecipientType, TransactionType
from src.domain.exceptions import (
    AccountBlockedException,
    CreditAccountNotFoundException,
    CreditLimitExceededException,
    InvalidAmountException,
    PaymentExceedsBalanceException,
)
from src.domain.interfaces import CreditAccountRepository, LedgerRepository
from src.application.dto import (
    HistoryEntryResponse,
    LateFeeResponse,
    LedgerOperationResult,
    TransactionResponse,
)
from src.service.ledger import to_money, utcnow

from .ledger_writer import LedgerWriter

logger = structlog.get_logger(__name__)


class TransactionService:
    """
    Application service for balance-changing client operations.

    Every operation loads the account under an exclusive row lock, checks
    its business rule and posts through the LedgerWriter inside a single
    atomic unit; a rejected operation leaves no trace in the ledger.
    """

    def __init__(
        self,
        account_repository: CreditAccountRepository,
        ledger_repository: LedgerRepository,
    ):
        self._account_repo = account_repository
        self._ledger_repo = ledger_repository
        self._writer = LedgerWriter(account_repository, ledger_repository)

    async def process_purchase(
        self,
        account_id: UUID,
        amount: Decimal,
        description: str = "",
    ) -> LedgerOperationResult:
        """
        Charge a purchase to an account.

        Args:
            account_id: The account to charge
            amount: Purchase amount, greater than zero
            description: Free-text description stored on the transaction

        Returns:
            LedgerOperationResult with the new balance

        Raises:
            CreditAccountNotFoundException: If the account doesn't exist
            AccountBlockedException: If the account is blocked
            CreditLimitExceededException: If the purchase exceeds available credit
        """
        amount = self._require_positive(amount)
        log = logger.bind(credit_account_id=str(account_id), amount=str(amount))

        async with self._account_repo.atomic():
            account = await self._lock(account_id)

            if account.is_blocked:
                record_rejected_operation("purchase", "blocked")
                log.warning("purchase_rejected_blocked")
                raise AccountBlockedException(str(account_id))

            if not account.can_charge(amount):
                record_rejected_operation("purchase", "credit_limit_exceeded")
                log.warning(
                    "purchase_rejected_limit",
                    balance=str(account.current_balance),
                    credit_limit=str(account.credit_limit),
                )
                raise CreditLimitExceededException(
                    str(account_id),
                    amount,
                    account.available_credit,
                )

            transaction = await self._writer.post(
                account,
                TransactionType.PURCHASE,
                amount,
                RecipientType.CLIENT,
                account.client_id,
                description or "Purchase",
            )

        record_ledger_transaction(TransactionType.PURCHASE.value, amount)
        log.info("purchase_processed", balance=str(account.current_balance))

        return LedgerOperationResult(
            credit_account_id=str(account.id),
            applied=True,
            amount=amount,
            resulting_balance=account.current_balance,
            transaction_id=str(transaction.id),
        )

    async def process_payment(
        self,
        account_id: UUID,
        amount: Decimal,
        description: str = "",
    ) -> LedgerOperationResult:
        """
        Record a client payment.

        Blocked accounts still accept payments. A payment that brings a
        blocked account to zero (or below) unblocks it in the same unit.

        Raises:
            CreditAccountNotFoundException: If the account doesn't exist
            PaymentExceedsBalanceException: If the payment exceeds the balance
        """
        amount = self._require_positive(amount)
        log = logger.bind(credit_account_id=str(account_id), amount=str(amount))

        async with self._account_repo.atomic():
            account = await self._lock(account_id)

            if not account.can_settle(amount):
                record_rejected_operation("payment", "exceeds_balance")
                log.warning("payment_rejected", balance=str(account.current_balance))
                raise PaymentExceedsBalanceException(
                    str(account_id),
                    amount,
                    account.current_balance,
                )

            at = utcnow()
            transaction = await self._writer.post(
                account,
                TransactionType.PAYMENT,
                -amount,
                RecipientType.ESTABLISHMENT,
                account.establishment_id,
                description or "Payment",
                at=at,
            )

            unblocked = account.is_blocked and account.current_balance <= 0
            if unblocked:
                account.is_blocked = False
                await self._writer.post(
                    account,
                    TransactionType.ACCOUNT_UNBLOCKED,
                    Decimal("0"),
                    RecipientType.CLIENT,
                    account.client_id,
                    "Account unblocked after full payment",
                    at=at,
                )

        record_ledger_transaction(TransactionType.PAYMENT.value, amount)
        log.info(
            "payment_processed",
            balance=str(account.current_balance),
            unblocked=unblocked,
        )

        return LedgerOperationResult(
            credit_account_id=str(account.id),
            applied=True,
            amount=amount,
            resulting_balance=account.current_balance,
            transaction_id=str(transaction.id),
        )

    async def list_transactions(
        self,
        account_id: UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TransactionResponse]:
        await self._get(account_id)
        transactions = await self._ledger_repo.list_transactions(account_id, limit, offset)
        return [TransactionResponse.from_entity(t) for t in transactions]

    async def list_history(
        self,
        account_id: UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> list[HistoryEntryResponse]:
        await self._get(account_id)
        entries = await self._ledger_repo.list_history(account_id, limit, offset)
        return [HistoryEntryResponse.from_entity(e) for e in entries]

    async def list_late_fees(self, account_id: UUID) -> list[LateFeeResponse]:
        await self._get(account_id)
        late_fees = await self._ledger_repo.list_late_fees(account_id)
        return [LateFeeResponse.from_entity(f) for f in late_fees]

    async def _lock(self, account_id: UUID) -> CreditAccount:
        account = await self._account_repo.get_for_update(account_id)
        if account is None:
            raise CreditAccountNotFoundException(str(account_id))
        return account

    async def _get(self, account_id: UUID) -> CreditAccount:
        account = await self._account_repo.get_by_id(account_id)
        if account is None:
            logger.warning("credit_account_not_found", credit_account_id=str(account_id))
            raise CreditAccountNotFoundException(str(account_id))
        return account

    @staticmethod
    def _require_positive(amount: Decimal) -> Decimal:
        amount = to_money(amount)
        if amount <= 0:
            raise InvalidAmountException(amount)
        return amount
