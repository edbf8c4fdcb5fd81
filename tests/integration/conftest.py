"""
Fixtures for integration tests.

Provides:
- In-memory SQLite database with SAVEPOINT support
- Repositories and services bound to the test session
- Mock client and establishment directories
- Authenticated test client for the FastAPI app
"""

from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator, Dict
from uuid import UUID

import jwt
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.main import app
from src.core.config import settings
from src.core.dependencies import (
    get_client_directory,
    get_credit_account_repository,
    get_credit_request_repository,
    get_establishment_directory,
    get_installment_repository,
    get_late_fee_rule_repository,
    get_ledger_repository,
)
from src.application.dto import CreateCreditAccountRequest
from src.application.services import (
    CreditAccountService,
    CreditRequestService,
    InstallmentService,
    InterestService,
    LateFeeService,
    TransactionService,
)
from src.domain.entities import ClientInfo, CreditType, EstablishmentInfo, InterestType
from src.domain.exceptions import (
    ClientNotFoundException,
    DirectoryAPIException,
    EstablishmentNotFoundException,
)
from src.domain.interfaces import ClientDirectory, EstablishmentDirectory
from src.infrastructure.database import Base
from src.infrastructure.repositories import (
    PostgresCreditAccountRepository,
    PostgresCreditRequestRepository,
    PostgresInstallmentRepository,
    PostgresLateFeeRuleRepository,
    PostgresLedgerRepository,
)


# =============================================================================
# Test Data
# =============================================================================

ESTABLISHMENT_ID = 10
ADMIN_ID = 7
OTHER_ESTABLISHMENT_ID = 20
OTHER_ADMIN_ID = 8

CLIENT_ID = 42
SECOND_CLIENT_ID = 43
INACTIVE_CLIENT_ID = 44
UNKNOWN_CLIENT_ID = 999


def auth_headers(user_id: int = ADMIN_ID) -> Dict[str, str]:
    """Bearer header carrying a token signed with the configured secret."""
    token = jwt.encode(
        {"sub": str(user_id), "role": "admin"},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Mock Clients
# =============================================================================

class MockClientDirectory(ClientDirectory):
    """In-memory client directory."""

    def __init__(self, fail_mode: bool = False):
        self.fail_mode = fail_mode
        self.call_count = 0
        self.clients: Dict[int, ClientInfo] = {
            CLIENT_ID: ClientInfo(id=CLIENT_ID, name="Maria Silva"),
            SECOND_CLIENT_ID: ClientInfo(id=SECOND_CLIENT_ID, name="Joao Souza"),
            INACTIVE_CLIENT_ID: ClientInfo(
                id=INACTIVE_CLIENT_ID,
                name="Ana Lima",
                is_active=False,
            ),
        }

    async def get_client_by_id(self, client_id: int) -> ClientInfo:
        self.call_count += 1

        if self.fail_mode:
            raise DirectoryAPIException("Directory unavailable", status_code=500)

        if client_id not in self.clients:
            raise ClientNotFoundException(client_id)

        return self.clients[client_id]


class MockEstablishmentDirectory(EstablishmentDirectory):
    """In-memory establishment directory."""

    def __init__(self):
        self.establishments: Dict[int, EstablishmentInfo] = {
            ESTABLISHMENT_ID: EstablishmentInfo(
                id=ESTABLISHMENT_ID,
                name="Mercado Central",
                admin_id=ADMIN_ID,
            ),
            OTHER_ESTABLISHMENT_ID: EstablishmentInfo(
                id=OTHER_ESTABLISHMENT_ID,
                name="Padaria Norte",
                admin_id=OTHER_ADMIN_ID,
            ),
        }

    def set_default_rule(self, establishment_id: int, rule_id: UUID) -> None:
        current = self.establishments[establishment_id]
        self.establishments[establishment_id] = EstablishmentInfo(
            id=current.id,
            name=current.name,
            admin_id=current.admin_id,
            late_fee_rule_id=rule_id,
        )

    async def get_establishment_by_id(self, establishment_id: int) -> EstablishmentInfo:
        if establishment_id not in self.establishments:
            raise EstablishmentNotFoundException(establishment_id)
        return self.establishments[establishment_id]


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy
    # emit BEGIN itself.
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


# =============================================================================
# Repository Fixtures
# =============================================================================

@pytest.fixture
def account_repository(test_session) -> PostgresCreditAccountRepository:
    return PostgresCreditAccountRepository(test_session)


@pytest.fixture
def ledger_repository(test_session) -> PostgresLedgerRepository:
    return PostgresLedgerRepository(test_session)


@pytest.fixture
def installment_repository(test_session) -> PostgresInstallmentRepository:
    return PostgresInstallmentRepository(test_session)


@pytest.fixture
def rule_repository(test_session) -> PostgresLateFeeRuleRepository:
    return PostgresLateFeeRuleRepository(test_session)


@pytest.fixture
def request_repository(test_session) -> PostgresCreditRequestRepository:
    return PostgresCreditRequestRepository(test_session)


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def mock_client_directory() -> MockClientDirectory:
    return MockClientDirectory()


@pytest.fixture
def mock_establishment_directory() -> MockEstablishmentDirectory:
    return MockEstablishmentDirectory()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def transaction_service(account_repository, ledger_repository) -> TransactionService:
    return TransactionService(account_repository, ledger_repository)


@pytest.fixture
def interest_service(
    account_repository,
    ledger_repository,
    installment_repository,
) -> InterestService:
    return InterestService(account_repository, ledger_repository, installment_repository)


@pytest.fixture
def late_fee_service(account_repository, ledger_repository, rule_repository) -> LateFeeService:
    return LateFeeService(account_repository, ledger_repository, rule_repository)


@pytest.fixture
def installment_service(account_repository, installment_repository) -> InstallmentService:
    return InstallmentService(account_repository, installment_repository)


@pytest.fixture
def credit_account_service(
    account_repository,
    ledger_repository,
    installment_repository,
    rule_repository,
    mock_client_directory,
    mock_establishment_directory,
) -> CreditAccountService:
    return CreditAccountService(
        account_repository=account_repository,
        ledger_repository=ledger_repository,
        installment_repository=installment_repository,
        rule_repository=rule_repository,
        client_directory=mock_client_directory,
        establishment_directory=mock_establishment_directory,
    )


@pytest.fixture
def credit_request_service(
    request_repository,
    account_repository,
    credit_account_service,
    mock_client_directory,
    mock_establishment_directory,
) -> CreditRequestService:
    return CreditRequestService(
        request_repository=request_repository,
        account_repository=account_repository,
        account_service=credit_account_service,
        client_directory=mock_client_directory,
        establishment_directory=mock_establishment_directory,
    )


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def open_account(credit_account_service, transaction_service, account_repository):
    """
    Factory opening an account and driving it to a starting state.

    The starting balance is reached through a real purchase so the ledger
    stays consistent with the balance.
    """

    async def _open(
        credit_limit: str = "1000.00",
        balance: str = "0.00",
        client_id: int | None = CLIENT_ID,
        establishment_id: int = ESTABLISHMENT_ID,
        monthly_due_day: int = 10,
        interest_rate: str = "5",
        interest_type: InterestType = InterestType.NOMINAL,
        credit_type: CreditType = CreditType.SHORT_TERM,
        late_fee_rule_id: UUID | None = None,
        last_interest_accrual_at: datetime | None = None,
        is_blocked: bool = False,
    ):
        response = await credit_account_service.create_credit_account(
            CreateCreditAccountRequest(
                establishment_id=establishment_id,
                client_id=client_id,
                credit_limit=Decimal(credit_limit),
                monthly_due_day=monthly_due_day,
                interest_rate=Decimal(interest_rate),
                interest_type=interest_type,
                credit_type=credit_type,
                late_fee_rule_id=late_fee_rule_id,
            )
        )
        account_id = UUID(response.credit_account_id)

        if Decimal(balance) > 0:
            await transaction_service.process_purchase(account_id, Decimal(balance))

        if last_interest_accrual_at is not None or is_blocked:
            account = await account_repository.get_for_update(account_id)
            if last_interest_accrual_at is not None:
                account.last_interest_accrual_at = last_interest_accrual_at
            account.is_blocked = is_blocked
            await account_repository.update(account)

        return await account_repository.get_by_id(account_id)

    return _open


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    mock_client_directory: MockClientDirectory,
    mock_establishment_directory: MockEstablishmentDirectory,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses the in-memory SQLite session for every repository
    - Uses the in-memory client and establishment directories
    - Sends a valid bearer token for the establishment admin
    """
    app.dependency_overrides[get_credit_account_repository] = (
        lambda: PostgresCreditAccountRepository(test_session)
    )
    app.dependency_overrides[get_ledger_repository] = (
        lambda: PostgresLedgerRepository(test_session)
    )
    app.dependency_overrides[get_credit_request_repository] = (
        lambda: PostgresCreditRequestRepository(test_session)
    )
    app.dependency_overrides[get_installment_repository] = (
        lambda: PostgresInstallmentRepository(test_session)
    )
    app.dependency_overrides[get_late_fee_rule_repository] = (
        lambda: PostgresLateFeeRuleRepository(test_session)
    )
    app.dependency_overrides[get_client_directory] = lambda: mock_client_directory
    app.dependency_overrides[get_establishment_directory] = lambda: mock_establishment_directory

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers=auth_headers(ADMIN_ID),
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def account_payload() -> dict:
    """Request body for opening a SHORT_TERM account."""
    return {
        "establishment_id": ESTABLISHMENT_ID,
        "client_id": CLIENT_ID,
        "credit_limit": "1000.00",
        "monthly_due_day": 10,
        "interest_rate": "5",
        "interest_type": "NOMINAL",
        "credit_type": "SHORT_TERM",
    }


@pytest.fixture
def credit_request_payload() -> dict:
    """Request body for a credit application."""
    return {
        "client_id": CLIENT_ID,
        "establishment_id": ESTABLISHMENT_ID,
        "requested_credit_limit": "1500.00",
        "monthly_due_day": 5,
        "interest_rate": "3.5",
        "interest_type": "EFFECTIVE",
        "credit_type": "LONG_TERM",
        "grace_period_months": 1,
    }
