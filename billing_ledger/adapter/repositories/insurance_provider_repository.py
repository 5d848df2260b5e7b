"""SQLAlchemy Insurance Provider Repository Implementation"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.app.repositories.insurance_provider_repository import InsuranceProviderRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.insurance_provider import InsuranceProvider


class SqlAlchemyInsuranceProviderRepository(InsuranceProviderRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, provider: InsuranceProvider) -> InsuranceProvider:
        self.session.add(provider)
        await self.session.flush()
        await self.session.refresh(provider)
        return provider

    async def get_by_id(self, provider_id: int) -> Optional[InsuranceProvider]:
        statement = select(InsuranceProvider).where(InsuranceProvider.id == provider_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[InsuranceProvider]:
        statement = select(InsuranceProvider).where(InsuranceProvider.name == name)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list(self, active_only: bool = False) -> List[InsuranceProvider]:
        statement = select(InsuranceProvider)
        if active_only:
            statement = statement.where(InsuranceProvider.is_active.is_(True))
        result = await self.session.execute(statement.order_by(InsuranceProvider.name))
        return list(result.scalars().all())

    async def update(self, provider: InsuranceProvider) -> InsuranceProvider:
        provider.updated_at = utcnow()
        self.session.add(provider)
        await self.session.flush()
        await self.session.refresh(provider)
        return provider

    async def delete(self, provider: InsuranceProvider) -> None:
        await self.session.delete(provider)
        await self.session.flush()
