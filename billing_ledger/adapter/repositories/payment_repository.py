"""SQLAlchemy Payment Repository Implementation"""

from datetime import date
from typing import List, Optional
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.app.repositories.payment_repository import PaymentRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.invoice import Invoice
from billing_ledger.domain.payment import Payment, PaymentMethod


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Sums are left to the caller so money stays in Decimal on every backend.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        statement = select(Payment).where(Payment.id == payment_id)
        if for_update:
            statement = statement.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_invoice_id(self, invoice_id: int, include_voided: bool = False) -> List[Payment]:
        statement = select(Payment).where(Payment.invoice_id == invoice_id)

        if not include_voided:
            statement = statement.where(Payment.voided_at.is_(None))

        statement = statement.order_by(Payment.payment_date, Payment.id).execution_options(populate_existing=True)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_claim_id(self, claim_id: int) -> Optional[Payment]:
        statement = (
            select(Payment)
            .where(Payment.insurance_claim_id == claim_id)
            .where(Payment.voided_at.is_(None))
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def list(
        self,
        invoice_id: Optional[int] = None,
        client_id: Optional[str] = None,
        method: Optional[PaymentMethod] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        include_voided: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Payment]:
        statement = select(Payment)

        if invoice_id:
            statement = statement.where(Payment.invoice_id == invoice_id)
        if client_id:
            statement = statement.join(Invoice, Invoice.id == Payment.invoice_id).where(
                Invoice.client_id == client_id
            )
        if method:
            statement = statement.where(Payment.method == method)
        if date_from:
            statement = statement.where(Payment.payment_date >= date_from)
        if date_to:
            statement = statement.where(Payment.payment_date <= date_to)
        if not include_voided:
            statement = statement.where(Payment.voided_at.is_(None))

        statement = statement.order_by(Payment.payment_date.desc(), Payment.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, payment: Payment) -> Payment:
        payment.updated_at = utcnow()
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def delete(self, payment: Payment) -> None:
        await self.session.delete(payment)
        await self.session.flush()

    async def count_by_invoice_id(self, invoice_id: int) -> int:
        statement = (
            select(func.count())
            .select_from(Payment)
            .where(Payment.invoice_id == invoice_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()
