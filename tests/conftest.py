"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from finance_manager.config import get_settings
from finance_manager.container import build_container
from finance_manager.main import create_app
from finance_manager.models import Base
from finance_manager.models.base import build_engine
from finance_manager.schemas.user import UserCreate
from finance_manager.schemas.wallet import WalletCreate
from finance_manager.services import (
    UserService,
    WalletService,
    TransactionService,
    BalanceSyncService,
    DashboardService,
)
from finance_manager.unit_of_work import unit_of_work_factory


# Use SQLite for tests, no external database needed.
# A file (not :memory:) so the sync worker thread sees the same data.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = build_engine(TEST_DATABASE_URL)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    This ensures each test starts with a clean database.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestSessionLocal


@pytest.fixture
def uow_factory(session_factory):
    return unit_of_work_factory(session_factory)


@pytest.fixture
def db_session():
    """
    A raw session for inspecting rows and simulating drift.

    Changes made through it must be committed explicitly to be
    visible to the services.
    """
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def user_service(uow_factory):
    return UserService(uow_factory)


@pytest.fixture
def wallet_service(uow_factory):
    return WalletService(uow_factory)


@pytest.fixture
def transaction_service(uow_factory):
    return TransactionService(uow_factory)


@pytest.fixture
def balance_sync_service(uow_factory):
    return BalanceSyncService(uow_factory, batch_size=2)


@pytest.fixture
def dashboard_service(uow_factory):
    return DashboardService(uow_factory)


@pytest.fixture
def user(user_service):
    return user_service.create_user(UserCreate(
        name="Test User", email="test@test.com",
    ))


@pytest.fixture
def other_user(user_service):
    return user_service.create_user(UserCreate(
        name="Other User", email="other@test.com",
    ))


@pytest.fixture
def wallet(wallet_service, user):
    """Wallet with no opening balance."""
    return wallet_service.create_wallet(WalletCreate(
        name="Cash", type="cash", category="daily", user_id=user.id,
    ))


@pytest.fixture
def container(session_factory):
    return build_container(get_settings(), session_factory)


@pytest.fixture
def client(container):
    """
    Provide a test client wired to the test database.

    The client is not used as a context manager, so the lifespan
    (and the periodic worker) never starts.
    """
    app = create_app(container)
    yield TestClient(app)
