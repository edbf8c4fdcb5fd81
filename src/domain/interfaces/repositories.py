"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import date
from typing import AsyncContextManager, List, Optional
from uuid import UUID

from src.domain.entities import (
    CreditAccount,
    CreditAccountHistory,
    CreditRequest,
    Installment,
    LateFee,
    LateFeeRule,
    Transaction,
)


class CreditAccountRepository(ABC):
    """
    Abstract repository for CreditAccount persistence.

    Besides CRUD it owns the two primitives every balance mutation relies on:
    an atomic unit of work and an exclusive row lock on a single account.
    All ledger repositories handed to a service share one unit of work.
    """

    @abstractmethod
    def atomic(self) -> AsyncContextManager[None]:
        """
        Open an atomic unit of work.

        Everything written inside the block is committed together or, if the
        block raises, discarded together. Units may be nested; an inner
        failure only discards the inner unit.
        """
        ...

    @abstractmethod
    async def commit(self) -> None:
        """
        End the enclosing transaction, making its work durable and releasing
        every row lock it holds. Batch runs call this after each account.
        """
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Discard the enclosing transaction and release its row locks."""
        ...

    @abstractmethod
    async def save(self, account: CreditAccount) -> CreditAccount:
        """
        Persist a new credit account.

        Args:
            account: The account to save

        Returns:
            The saved account

        Raises:
            CreditAccountAlreadyExistsException: If the client already holds
                an account at the establishment
        """
        ...

    @abstractmethod
    async def get_by_id(self, account_id: UUID) -> Optional[CreditAccount]:
        """
        Retrieve an account by ID without locking.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_for_update(self, account_id: UUID) -> Optional[CreditAccount]:
        """
        Retrieve an account and hold an exclusive row lock on it until the
        enclosing unit of work ends.

        Args:
            account_id: The account's unique identifier

        Returns:
            The freshly read account if found, None otherwise
        """
        ...

    @abstractmethod
    async def update(self, account: CreditAccount) -> CreditAccount:
        """Write back every mutable field of an existing account."""
        ...

    @abstractmethod
    async def delete(self, account_id: UUID) -> None:
        ...

    @abstractmethod
    async def list_by_establishment(self, establishment_id: int) -> List[CreditAccount]:
        """Accounts of an establishment, oldest first."""
        ...

    @abstractmethod
    async def list_by_client(self, client_id: int) -> List[CreditAccount]:
        """Accounts held by a client across establishments, oldest first."""
        ...

    @abstractmethod
    async def list_with_outstanding_balance(
        self,
        establishment_id: int,
    ) -> List[CreditAccount]:
        """Accounts of an establishment whose balance is greater than zero."""
        ...

    @abstractmethod
    async def exists_for_client(self, client_id: int, establishment_id: int) -> bool:
        """True if the client already holds an account at the establishment."""
        ...


class LedgerRepository(ABC):
    """
    Abstract repository for the append-only ledger tables.

    Transactions, history rows and late fees are never updated or deleted.
    """

    @abstractmethod
    async def add_transaction(self, transaction: Transaction) -> Transaction:
        ...

    @abstractmethod
    async def add_history(self, entry: CreditAccountHistory) -> CreditAccountHistory:
        ...

    @abstractmethod
    async def add_late_fee(self, late_fee: LateFee) -> LateFee:
        ...

    @abstractmethod
    async def list_transactions(
        self,
        account_id: UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Transaction]:
        """
        Retrieve transactions for an account.

        Args:
            account_id: The account's identifier
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip

        Returns:
            Transactions ordered by occurred_at descending
        """
        ...

    @abstractmethod
    async def list_history(
        self,
        account_id: UUID,
        limit: int = 100,
        offset: int = 0,
    ) -> List[CreditAccountHistory]:
        """History rows for an account, newest first."""
        ...

    @abstractmethod
    async def list_late_fees(self, account_id: UUID) -> List[LateFee]:
        """Late fees charged to an account, newest first."""
        ...

    @abstractmethod
    async def has_late_fee_since(self, account_id: UUID, since: date) -> bool:
        """True if a late fee was applied to the account on or after ``since``."""
        ...


class CreditRequestRepository(ABC):
    """Abstract repository for CreditRequest persistence."""

    @abstractmethod
    async def save(self, request: CreditRequest) -> CreditRequest:
        ...

    @abstractmethod
    async def get_by_id(self, request_id: UUID) -> Optional[CreditRequest]:
        ...

    @abstractmethod
    async def get_for_update(self, request_id: UUID) -> Optional[CreditRequest]:
        """Retrieve a request holding an exclusive row lock on it."""
        ...

    @abstractmethod
    async def update(self, request: CreditRequest) -> CreditRequest:
        ...

    @abstractmethod
    async def list_pending(self, establishment_id: int) -> List[CreditRequest]:
        """Pending requests of an establishment, oldest first."""
        ...


class InstallmentRepository(ABC):
    """Abstract repository for Installment persistence."""

    @abstractmethod
    async def save(self, installment: Installment) -> Installment:
        ...

    @abstractmethod
    async def get_by_id(self, installment_id: UUID) -> Optional[Installment]:
        ...

    @abstractmethod
    async def update(self, installment: Installment) -> Installment:
        ...

    @abstractmethod
    async def get_by_credit_account_id(self, account_id: UUID) -> List[Installment]:
        """All installments of an account ordered by due date."""
        ...

    @abstractmethod
    async def list_overdue(self, account_id: UUID, today: date) -> List[Installment]:
        """Unpaid installments of an account whose due date is before ``today``."""
        ...


class LateFeeRuleRepository(ABC):
    """Abstract repository for LateFeeRule persistence."""

    @abstractmethod
    async def save(self, rule: LateFeeRule) -> LateFeeRule:
        ...

    @abstractmethod
    async def get_by_id(self, rule_id: UUID) -> Optional[LateFeeRule]:
        ...

    @abstractmethod
    async def list_for_establishment(self, establishment_id: int) -> List[LateFeeRule]:
        """
        Rules that govern an establishment's accounts.

        Args:
            establishment_id: The establishment's identifier

        Returns:
            The establishment's own rules, or the global rules when it has
            none, ordered by days_overdue_min, created_at and id
        """
        ...

    @abstractmethod
    async def list_all(self) -> List[LateFeeRule]:
        ...
