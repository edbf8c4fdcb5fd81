"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import get_db_session
from src.infrastructure.repositories import (
    PostgresCreditAccountRepository,
    PostgresCreditRequestRepository,
    PostgresInstallmentRepository,
    PostgresLateFeeRuleRepository,
    PostgresLedgerRepository,
)
from src.infrastructure.clients import HttpClientDirectory, HttpEstablishmentDirectory
from src.application.services import (
    CreditAccountService,
    CreditRequestService,
    InstallmentService,
    InterestService,
    LateFeeService,
    TransactionService,
)
from src.domain.interfaces import (
    ClientDirectory,
    CreditAccountRepository,
    CreditRequestRepository,
    EstablishmentDirectory,
    InstallmentRepository,
    LateFeeRuleRepository,
    LedgerRepository,
)

Session = Annotated[AsyncSession, Depends(get_db_session)]


# Repository dependencies
async def get_credit_account_repository(session: Session) -> CreditAccountRepository:
    return PostgresCreditAccountRepository(session)


async def get_ledger_repository(session: Session) -> LedgerRepository:
    return PostgresLedgerRepository(session)


async def get_credit_request_repository(session: Session) -> CreditRequestRepository:
    return PostgresCreditRequestRepository(session)


async def get_installment_repository(session: Session) -> InstallmentRepository:
    return PostgresInstallmentRepository(session)


async def get_late_fee_rule_repository(session: Session) -> LateFeeRuleRepository:
    return PostgresLateFeeRuleRepository(session)


# Directory dependencies
def get_client_directory() -> ClientDirectory:
    """Get the HTTP client directory."""
    return HttpClientDirectory()


def get_establishment_directory() -> EstablishmentDirectory:
    """Get the HTTP establishment directory."""
    return HttpEstablishmentDirectory()


AccountRepo = Annotated[CreditAccountRepository, Depends(get_credit_account_repository)]
LedgerRepo = Annotated[LedgerRepository, Depends(get_ledger_repository)]
RequestRepo = Annotated[CreditRequestRepository, Depends(get_credit_request_repository)]
InstallmentRepo = Annotated[InstallmentRepository, Depends(get_installment_repository)]
RuleRepo = Annotated[LateFeeRuleRepository, Depends(get_late_fee_rule_repository)]
Clients = Annotated[ClientDirectory, Depends(get_client_directory)]
Establishments = Annotated[EstablishmentDirectory, Depends(get_establishment_directory)]


# Service dependencies
async def get_transaction_service(
    account_repo: AccountRepo,
    ledger_repo: LedgerRepo,
) -> TransactionService:
    return TransactionService(
        account_repository=account_repo,
        ledger_repository=ledger_repo,
    )


async def get_interest_service(
    account_repo: AccountRepo,
    ledger_repo: LedgerRepo,
    installment_repo: InstallmentRepo,
) -> InterestService:
    return InterestService(
        account_repository=account_repo,
        ledger_repository=ledger_repo,
        installment_repository=installment_repo,
    )


async def get_late_fee_service(
    account_repo: AccountRepo,
    ledger_repo: LedgerRepo,
    rule_repo: RuleRepo,
) -> LateFeeService:
    return LateFeeService(
        account_repository=account_repo,
        ledger_repository=ledger_repo,
        rule_repository=rule_repo,
    )


async def get_credit_account_service(
    account_repo: AccountRepo,
    ledger_repo: LedgerRepo,
    installment_repo: InstallmentRepo,
    rule_repo: RuleRepo,
    clients: Clients,
    establishments: Establishments,
) -> CreditAccountService:
    """Get a CreditAccountService instance with all dependencies."""
    return CreditAccountService(
        account_repository=account_repo,
        ledger_repository=ledger_repo,
        installment_repository=installment_repo,
        rule_repository=rule_repo,
        client_directory=clients,
        establishment_directory=establishments,
    )


async def get_credit_request_service(
    request_repo: RequestRepo,
    account_repo: AccountRepo,
    account_service: Annotated[CreditAccountService, Depends(get_credit_account_service)],
    clients: Clients,
    establishments: Establishments,
) -> CreditRequestService:
    return CreditRequestService(
        request_repository=request_repo,
        account_repository=account_repo,
        account_service=account_service,
        client_directory=clients,
        establishment_directory=establishments,
    )


async def get_installment_service(
    account_repo: AccountRepo,
    installment_repo: InstallmentRepo,
) -> InstallmentService:
    return InstallmentService(
        account_repository=account_repo,
        installment_repository=installment_repo,
    )
