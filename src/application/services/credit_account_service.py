"""Credit account service - account lifecycle, administration and reporting."""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

import structlog

from src.domain.entities import (
    ClientInfo,
    CreditAccount,
    CreditType,
    EstablishmentInfo,
    InstallmentStatus,
    RecipientType,
    TransactionType,
)
from src.domain.exceptions import (
    ClientInactiveException,
    ClientNotFoundException,
    CreditAccountAlreadyAssignedException,
    CreditAccountAlreadyExistsException,
    CreditAccountHasBalanceException,
    CreditAccountNotFoundException,
    InvalidCreditTermsException,
    LateFeeRuleNotFoundException,
)
from src.domain.interfaces import (
    ClientDirectory,
    CreditAccountRepository,
    EstablishmentDirectory,
    InstallmentRepository,
    LateFeeRuleRepository,
    LedgerRepository,
)
from src.application.dto import (
    CreateCreditAccountRequest,
    CreditAccountResponse,
    DebtSummaryEntry,
    UpdateCreditAccountRequest,
)
from src.service.ledger import to_money, upcoming_due_date, utcnow

from .ledger_writer import LedgerWriter

logger = structlog.get_logger(__name__)


class CreditAccountService:
    """
    Application service for credit account use cases.

    Administrative changes that matter to the client (limit changes and
    blocking) are recorded in the ledger with a zero balance movement so the
    account history tells the full story.
    """

    def __init__(
        self,
        account_repository: CreditAccountRepository,
        ledger_repository: LedgerRepository,
        installment_repository: InstallmentRepository,
        rule_repository: LateFeeRuleRepository,
        client_directory: ClientDirectory,
        establishment_directory: EstablishmentDirectory,
    ):
        self._account_repo = account_repository
        self._installment_repo = installment_repository
        self._rule_repo = rule_repository
        self._clients = client_directory
        self._establishments = establishment_directory
        self._writer = LedgerWriter(account_repository, ledger_repository)

    async def create_credit_account(
        self,
        request: CreateCreditAccountRequest,
    ) -> CreditAccountResponse:
        """
        Open a credit account directly.

        Args:
            request: Terms of the new account

        Returns:
            CreditAccountResponse for the stored account

        Raises:
            InvalidCreditTermsException: If the terms fail validation
            EstablishmentNotFoundException: If the establishment is unknown
            ClientNotFoundException: If the client is unknown
            ClientInactiveException: If the client is inactive
            CreditAccountAlreadyExistsException: If the client already has an
                account at this establishment
        """
        errors = request.validate()
        if errors:
            raise InvalidCreditTermsException("; ".join(errors))

        async with self._account_repo.atomic():
            account = await self.open_account(request)

        return CreditAccountResponse.from_entity(account)

    async def open_account(
        self,
        request: CreateCreditAccountRequest,
        establishment: Optional[EstablishmentInfo] = None,
    ) -> CreditAccount:
        """
        Build and store an account inside the caller's unit of work.

        Used by account creation and by credit request approval. When the
        request pins no late-fee rule the establishment default is used.
        """
        if establishment is None:
            establishment = await self._establishments.get_establishment_by_id(
                request.establishment_id
            )

        if request.client_id is not None:
            await self._require_active_client(request.client_id)
            if await self._account_repo.exists_for_client(request.client_id, establishment.id):
                raise CreditAccountAlreadyExistsException(request.client_id, establishment.id)

        late_fee_rule_id = await self._pick_late_fee_rule(
            request.late_fee_rule_id,
            establishment,
        )

        account = CreditAccount(
            establishment_id=establishment.id,
            client_id=request.client_id,
            credit_limit=to_money(request.credit_limit),
            monthly_due_day=request.monthly_due_day,
            interest_rate=request.interest_rate,
            interest_type=request.interest_type,
            credit_type=request.credit_type,
            grace_period_months=request.grace_period_months,
            late_fee_rule_id=late_fee_rule_id,
            last_interest_accrual_at=utcnow(),
        )
        await self._account_repo.save(account)

        logger.info(
            "credit_account_opened",
            credit_account_id=str(account.id),
            establishment_id=account.establishment_id,
            client_id=account.client_id,
            credit_limit=str(account.credit_limit),
            credit_type=account.credit_type.value,
        )

        return account

    async def get_credit_account(self, account_id: UUID) -> CreditAccountResponse:
        account = await self._get(account_id)
        return CreditAccountResponse.from_entity(account)

    async def update_credit_account(
        self,
        account_id: UUID,
        request: UpdateCreditAccountRequest,
    ) -> CreditAccountResponse:
        """
        Apply a partial update to an account.

        A changed credit limit posts CREDIT_LIMIT_INCREASE or
        CREDIT_LIMIT_DECREASE with the delta as amount; a changed block flag
        posts ACCOUNT_BLOCKED or ACCOUNT_UNBLOCKED. Neither moves the balance.
        """
        errors = request.validate()
        if errors:
            raise InvalidCreditTermsException("; ".join(errors))

        log = logger.bind(credit_account_id=str(account_id))

        async with self._account_repo.atomic():
            account = await self._lock(account_id)
            at = utcnow()

            if request.late_fee_rule_id is not None:
                if await self._rule_repo.get_by_id(request.late_fee_rule_id) is None:
                    raise LateFeeRuleNotFoundException(str(request.late_fee_rule_id))
                account.late_fee_rule_id = request.late_fee_rule_id

            for name in ("monthly_due_day", "interest_rate", "interest_type",
                         "credit_type", "grace_period_months"):
                value = getattr(request, name)
                if value is not None:
                    setattr(account, name, value)

            if request.credit_limit is not None:
                new_limit = to_money(request.credit_limit)
                delta = new_limit - account.credit_limit
                if delta != 0:
                    account.credit_limit = new_limit
                    increase = delta > 0
                    await self._writer.post(
                        account,
                        TransactionType.CREDIT_LIMIT_INCREASE
                        if increase
                        else TransactionType.CREDIT_LIMIT_DECREASE,
                        delta,
                        RecipientType.CLIENT,
                        account.client_id,
                        f"Credit limit {'increased' if increase else 'decreased'} to {new_limit}",
                        balance_delta=Decimal("0"),
                        at=at,
                    )
                    log.info("credit_limit_changed", delta=str(delta), credit_limit=str(new_limit))

            if request.is_blocked is not None and request.is_blocked != account.is_blocked:
                account.is_blocked = request.is_blocked
                await self._writer.post(
                    account,
                    TransactionType.ACCOUNT_BLOCKED
                    if request.is_blocked
                    else TransactionType.ACCOUNT_UNBLOCKED,
                    Decimal("0"),
                    RecipientType.CLIENT,
                    account.client_id,
                    "Account blocked" if request.is_blocked else "Account unblocked",
                    at=at,
                )
                log.info("credit_account_block_changed", is_blocked=account.is_blocked)

            await self._account_repo.update(account)

        return CreditAccountResponse.from_entity(account)

    async def delete_credit_account(self, account_id: UUID) -> None:
        """
        Remove an account that owes nothing.

        Raises:
            CreditAccountNotFoundException: If the account doesn't exist
            CreditAccountHasBalanceException: If the balance is not zero
        """
        async with self._account_repo.atomic():
            account = await self._lock(account_id)
            if account.current_balance != 0:
                raise CreditAccountHasBalanceException(str(account_id), account.current_balance)
            await self._account_repo.delete(account_id)

        logger.info("credit_account_deleted", credit_account_id=str(account_id))

    async def list_by_establishment(self, establishment_id: int) -> List[CreditAccountResponse]:
        accounts = await self._account_repo.list_by_establishment(establishment_id)
        return [CreditAccountResponse.from_entity(a) for a in accounts]

    async def list_by_client(self, client_id: int) -> List[CreditAccountResponse]:
        accounts = await self._account_repo.list_by_client(client_id)
        return [CreditAccountResponse.from_entity(a) for a in accounts]

    async def assign_to_client(self, account_id: UUID, client_id: int) -> CreditAccountResponse:
        """Attach an unassigned account to an active client."""
        await self._require_active_client(client_id)

        async with self._account_repo.atomic():
            account = await self._lock(account_id)
            if account.is_assigned:
                raise CreditAccountAlreadyAssignedException(str(account_id))
            if await self._account_repo.exists_for_client(client_id, account.establishment_id):
                raise CreditAccountAlreadyExistsException(client_id, account.establishment_id)

            account.client_id = client_id
            await self._account_repo.update(account)

        logger.info(
            "credit_account_assigned",
            credit_account_id=str(account_id),
            client_id=client_id,
        )

        return CreditAccountResponse.from_entity(account)

    async def get_debt_summary(
        self,
        establishment_id: int,
        today: date | None = None,
    ) -> List[DebtSummaryEntry]:
        """
        Report every account of an establishment with its next due date.

        LONG_TERM accounts report their next unpaid installment; anything
        else reports the next monthly due date on or after today.
        """
        today = today or utcnow().date()
        accounts = await self._account_repo.list_by_establishment(establishment_id)
        names: Dict[int, Optional[str]] = {}
        entries = []

        for account in accounts:
            client_name = None
            if account.client_id is not None:
                if account.client_id not in names:
                    names[account.client_id] = await self._client_name(account.client_id)
                client_name = names[account.client_id]

            number_of_installments = 0
            due_date = upcoming_due_date(today, account.monthly_due_day)

            if account.credit_type is CreditType.LONG_TERM:
                installments = await self._installment_repo.get_by_credit_account_id(account.id)
                number_of_installments = len(installments)
                pending = sorted(
                    i.due_date
                    for i in installments
                    if i.status is not InstallmentStatus.PAID and i.due_date >= today
                )
                if pending:
                    due_date = pending[0]

            entries.append(
                DebtSummaryEntry(
                    credit_account_id=str(account.id),
                    client_id=account.client_id,
                    client_name=client_name,
                    credit_type=account.credit_type.value,
                    interest_rate=account.interest_rate,
                    number_of_installments=number_of_installments,
                    current_balance=account.current_balance,
                    due_date=due_date,
                )
            )

        return entries

    # ------------------------------------------------------------------

    async def _require_active_client(self, client_id: int) -> ClientInfo:
        client = await self._clients.get_client_by_id(client_id)
        if not client.is_active:
            raise ClientInactiveException(client_id)
        return client

    async def _client_name(self, client_id: int) -> Optional[str]:
        try:
            client = await self._clients.get_client_by_id(client_id)
        except ClientNotFoundException:
            logger.warning("debt_summary_client_missing", client_id=client_id)
            return None
        return client.name

    async def _pick_late_fee_rule(
        self,
        requested: Optional[UUID],
        establishment: EstablishmentInfo,
    ) -> Optional[UUID]:
        if requested is not None:
            if await self._rule_repo.get_by_id(requested) is None:
                raise LateFeeRuleNotFoundException(str(requested))
            return requested

        default = establishment.late_fee_rule_id
        if default is not None and await self._rule_repo.get_by_id(default) is None:
            logger.warning(
                "establishment_default_rule_missing",
                establishment_id=establishment.id,
                late_fee_rule_id=str(default),
            )
            return None
        return default

    async def _lock(self, account_id: UUID) -> CreditAccount:
        account = await self._account_repo.get_for_update(account_id)
        if account is None:
            raise CreditAccountNotFoundException(str(account_id))
        return account

    async def _get(self, account_id: UUID) -> CreditAccount:
        account = await self._account_repo.get_by_id(account_id)
        if account is None:
            raise CreditAccountNotFoundException(str(account_id))
        return account
