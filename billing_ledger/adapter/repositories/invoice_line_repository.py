"""SQLAlchemy Invoice Line Item Repository Implementation"""

from typing import List, Optional, Sequence
from sqlalchemy import delete
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.invoice_line import InvoiceLineItem


class SqlAlchemyInvoiceLineRepository(InvoiceLineRepository):
    """SQLAlchemy implementation of InvoiceLineRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, line: InvoiceLineItem) -> InvoiceLineItem:
        self.session.add(line)
        await self.session.flush()
        await self.session.refresh(line)
        return line

    async def create_many(self, lines: List[InvoiceLineItem]) -> List[InvoiceLineItem]:
        self.session.add_all(lines)
        await self.session.flush()
        for line in lines:
            await self.session.refresh(line)
        return lines

    async def get_by_id(self, line_id: int) -> Optional[InvoiceLineItem]:
        statement = select(InvoiceLineItem).where(InvoiceLineItem.id == line_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLineItem]:
        statement = (
            select(InvoiceLineItem)
            .where(InvoiceLineItem.invoice_id == invoice_id)
            .order_by(InvoiceLineItem.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_ids(self, line_ids: Sequence[int]) -> List[InvoiceLineItem]:
        if not line_ids:
            return []
        statement = (
            select(InvoiceLineItem)
            .where(InvoiceLineItem.id.in_(list(line_ids)))
            .order_by(InvoiceLineItem.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, line: InvoiceLineItem) -> InvoiceLineItem:
        line.updated_at = utcnow()
        self.session.add(line)
        await self.session.flush()
        await self.session.refresh(line)
        return line

    async def delete(self, line: InvoiceLineItem) -> None:
        await self.session.delete(line)
        await self.session.flush()

    async def delete_by_invoice_id(self, invoice_id: int) -> int:
        statement = delete(InvoiceLineItem).where(InvoiceLineItem.invoice_id == invoice_id)
        result = await self.session.execute(statement)
        return result.rowcount

    async def count_by_service_code(self, service_code_id: int) -> int:
        statement = (
            select(func.count())
            .select_from(InvoiceLineItem)
            .where(InvoiceLineItem.service_code_id == service_code_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()
