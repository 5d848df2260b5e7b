"""SQLAlchemy Insurance Claim Repository Implementation"""

from typing import List, Optional, Sequence
from sqlalchemy import delete
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.app.repositories.insurance_claim_repository import InsuranceClaimRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.insurance_claim import ClaimStatus, InsuranceClaim, InsuranceClaimItem


class SqlAlchemyInsuranceClaimRepository(InsuranceClaimRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, claim: InsuranceClaim) -> InsuranceClaim:
        self.session.add(claim)
        await self.session.flush()
        await self.session.refresh(claim)
        return claim

    async def get_by_id(self, claim_id: int, for_update: bool = False) -> Optional[InsuranceClaim]:
        stmt = select(InsuranceClaim).where(InsuranceClaim.id == claim_id)

        if for_update:
            # Reload attributes that may have changed before the lock was granted
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_invoice_id(self, invoice_id: int) -> List[InsuranceClaim]:
        statement = (
            select(InsuranceClaim)
            .where(InsuranceClaim.invoice_id == invoice_id)
            .order_by(InsuranceClaim.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list(
        self,
        invoice_id: Optional[int] = None,
        insurance_provider_id: Optional[int] = None,
        status: Optional[ClaimStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[InsuranceClaim]:
        statement = select(InsuranceClaim)

        if invoice_id:
            statement = statement.where(InsuranceClaim.invoice_id == invoice_id)
        if insurance_provider_id:
            statement = statement.where(InsuranceClaim.insurance_provider_id == insurance_provider_id)
        if status:
            statement = statement.where(InsuranceClaim.status == status)

        statement = statement.order_by(InsuranceClaim.created_at.desc(), InsuranceClaim.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update(self, claim: InsuranceClaim) -> InsuranceClaim:
        claim.updated_at = utcnow()
        self.session.add(claim)
        await self.session.flush()
        await self.session.refresh(claim)
        return claim

    async def delete(self, claim: InsuranceClaim) -> None:
        await self.session.execute(
            delete(InsuranceClaimItem).where(InsuranceClaimItem.claim_id == claim.id)
        )
        await self.session.delete(claim)
        await self.session.flush()

    async def add_items(self, items: List[InsuranceClaimItem]) -> List[InsuranceClaimItem]:
        self.session.add_all(items)
        await self.session.flush()
        return items

    async def get_items(self, claim_id: int) -> List[InsuranceClaimItem]:
        statement = (
            select(InsuranceClaimItem)
            .where(InsuranceClaimItem.claim_id == claim_id)
            .order_by(InsuranceClaimItem.invoice_line_item_id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def remove_items(self, claim_id: int, line_item_ids: Sequence[int]) -> int:
        if not line_item_ids:
            return 0
        statement = (
            delete(InsuranceClaimItem)
            .where(InsuranceClaimItem.claim_id == claim_id)
            .where(InsuranceClaimItem.invoice_line_item_id.in_(list(line_item_ids)))
        )
        result = await self.session.execute(statement)
        return result.rowcount

    async def count_items_for_line(self, line_item_id: int) -> int:
        statement = (
            select(func.count())
            .select_from(InsuranceClaimItem)
            .where(InsuranceClaimItem.invoice_line_item_id == line_item_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def count_by_insurance_provider(self, insurance_provider_id: int) -> int:
        statement = (
            select(func.count())
            .select_from(InsuranceClaim)
            .where(InsuranceClaim.insurance_provider_id == insurance_provider_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()
