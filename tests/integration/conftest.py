import pytest
import pytest_asyncio
from datetime import date, timedelta
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.depends import enable_sqlite_savepoints, get_session
from billing_ledger.domain.insurance_provider import InsuranceProvider
from billing_ledger.domain.service_code import ServiceCode
import billing_ledger.domain  # noqa: F401  registers all tables


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite engine shared by every session of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from billing_ledger.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def service_code_id(db_session):
    code = ServiceCode(
        code="90837",
        description="Psychotherapy, 60 minutes",
        default_rate=Decimal("150.00"),
        category="therapy",
    )
    db_session.add(code)
    await db_session.commit()
    await db_session.refresh(code)
    return code.id


@pytest_asyncio.fixture
async def insurance_provider_id(db_session):
    provider = InsuranceProvider(name="Blue Shield", payer_id="BS-001")
    db_session.add(provider)
    await db_session.commit()
    await db_session.refresh(provider)
    return provider.id


@pytest.fixture
def issue_date():
    return date.today()


@pytest.fixture
def due_date(issue_date):
    return issue_date + timedelta(days=30)
