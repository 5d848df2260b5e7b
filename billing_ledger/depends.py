from typing import Optional
from fastapi import Header
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from billing_ledger.adapter.repositories import (
    SqlAlchemyInsuranceClaimRepository,
    SqlAlchemyInvoiceRepository,
    SqlAlchemyPaymentRepository,
)
from billing_ledger.adapter.services import (
    SqlAlchemyUnitOfWork,
    create_client_registry,
    create_notification_service,
)
from billing_ledger.app.services import (
    ClaimPaymentHandler,
    ClientRegistry,
    DomainEventDispatcher,
    InvoiceNumberSequencer,
    NotificationService,
    PaymentLedger,
)
from billing_ledger.app.use_cases.claims.workflow import ClaimWorkflow
from billing_ledger.domain.events import ClaimPaid


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Let pysqlite/aiosqlite honour SAVEPOINT and serialize writers

    The driver's own transaction handling skips BEGIN and breaks nested
    transactions; take over BEGIN so begin_nested() works. BEGIN IMMEDIATE
    takes the write lock up front, standing in for SELECT FOR UPDATE, so a
    second writer waits (up to the busy timeout) instead of failing at commit.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_client_registry() -> ClientRegistry:
    return create_client_registry(
        ApplicationConfig.CLIENT_REGISTRY_URL,
        timeout=float(ApplicationConfig.CLIENT_REGISTRY_TIMEOUT),
    )


def get_notification_service() -> NotificationService:
    return create_notification_service(ApplicationConfig.NOTIFICATION_WEBHOOK_URL)


def get_invoice_sequencer(session: AsyncSession) -> InvoiceNumberSequencer:
    return InvoiceNumberSequencer(
        SqlAlchemyInvoiceRepository(session),
        prefix=ApplicationConfig.INVOICE_NUMBER_PREFIX,
    )


def get_acting_user(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Acting user id from the X-User-Id header"""
    return x_user_id


def build_payment_ledger(session: AsyncSession) -> PaymentLedger:
    return PaymentLedger(SqlAlchemyInvoiceRepository(session), SqlAlchemyPaymentRepository(session))


def build_claim_workflow(session: AsyncSession) -> ClaimWorkflow:
    """Claim workflow with ClaimPaid wired to the insurance payment handler"""
    payment_ledger = build_payment_ledger(session)
    dispatcher = DomainEventDispatcher()
    dispatcher.subscribe(ClaimPaid, ClaimPaymentHandler(payment_ledger, payment_ledger.payment_repo))
    return ClaimWorkflow(SqlAlchemyInsuranceClaimRepository(session), payment_ledger, dispatcher)
