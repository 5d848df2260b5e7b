"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from datetime import date
from decimal import Decimal
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.errors import DuplicateKeyError
from billing_ledger.domain.invoice import Invoice, InvoiceStatus

_OPEN_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.OVERDUE)


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Savepoint-guarded inserts so number collisions can be retried
    - Year-scoped advisory lock for numbering on PostgreSQL
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        try:
            async with self.session.begin_nested():
                self.session.add(invoice)
                await self.session.flush()
        except IntegrityError:
            raise DuplicateKeyError("Invoice", "invoice_number", invoice.invoice_number)
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        stmt = select(Invoice).where(Invoice.id == invoice_id)

        if for_update:
            # Reload attributes that may have changed before the lock was granted
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.invoice_number == invoice_number)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list(
        self,
        client_id: Optional[str] = None,
        status: Optional[InvoiceStatus] = None,
        today: Optional[date] = None,
        issue_date_from: Optional[date] = None,
        issue_date_to: Optional[date] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        insurance_provider_id: Optional[int] = None,
        funding_program_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Invoice]:
        today = today or date.today()
        statement = select(Invoice)

        if client_id:
            statement = statement.where(Invoice.client_id == client_id)

        # Stored SENT/OVERDUE may be stale; the due date decides
        if status == InvoiceStatus.OVERDUE:
            statement = statement.where(Invoice.status.in_(_OPEN_STATUSES), Invoice.due_date < today)
        elif status == InvoiceStatus.SENT:
            statement = statement.where(Invoice.status.in_(_OPEN_STATUSES), Invoice.due_date >= today)
        elif status:
            statement = statement.where(Invoice.status == status)

        if issue_date_from:
            statement = statement.where(Invoice.issue_date >= issue_date_from)
        if issue_date_to:
            statement = statement.where(Invoice.issue_date <= issue_date_to)
        if min_amount is not None:
            statement = statement.where(Invoice.total_amount >= min_amount)
        if max_amount is not None:
            statement = statement.where(Invoice.total_amount <= max_amount)
        if insurance_provider_id:
            statement = statement.where(Invoice.insurance_provider_id == insurance_provider_id)
        if funding_program_id:
            statement = statement.where(Invoice.funding_program_id == funding_program_id)

        statement = statement.order_by(Invoice.issue_date.desc(), Invoice.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, invoice: Invoice) -> Invoice:
        invoice.updated_at = utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def delete(self, invoice: Invoice) -> None:
        await self.session.delete(invoice)
        await self.session.flush()

    async def lock_number_sequence(self, year: int) -> None:
        if self.session.get_bind().dialect.name != "postgresql":
            return
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:key))"),
            {"key": f"invoice_number:{year}"},
        )

    async def get_max_invoice_number(self, prefix: str) -> Optional[str]:
        # Longer numbers sort first so a sequence past 99999 still wins
        statement = (
            select(Invoice.invoice_number)
            .where(Invoice.invoice_number.like(f"{prefix}%"))
            .order_by(func.length(Invoice.invoice_number).desc(), Invoice.invoice_number.desc())
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def count_by_insurance_provider(self, insurance_provider_id: int) -> int:
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.insurance_provider_id == insurance_provider_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def count_by_funding_program(self, funding_program_id: int) -> int:
        statement = (
            select(func.count())
            .select_from(Invoice)
            .where(Invoice.funding_program_id == funding_program_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()
