"""SQLAlchemy Service Code Repository Implementation"""

from typing import List, Optional, Sequence
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.app.repositories.service_code_repository import ServiceCodeRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.service_code import ServiceCode


class SqlAlchemyServiceCodeRepository(ServiceCodeRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, service_code: ServiceCode) -> ServiceCode:
        self.session.add(service_code)
        await self.session.flush()
        await self.session.refresh(service_code)
        return service_code

    async def get_by_id(self, service_code_id: int) -> Optional[ServiceCode]:
        statement = select(ServiceCode).where(ServiceCode.id == service_code_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_ids(self, service_code_ids: Sequence[int]) -> List[ServiceCode]:
        if not service_code_ids:
            return []
        statement = select(ServiceCode).where(ServiceCode.id.in_(set(service_code_ids)))
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_code(self, code: str) -> Optional[ServiceCode]:
        statement = select(ServiceCode).where(ServiceCode.code == code)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list(self, active_only: bool = False, category: Optional[str] = None) -> List[ServiceCode]:
        statement = select(ServiceCode)

        if active_only:
            statement = statement.where(ServiceCode.is_active.is_(True))
        if category:
            statement = statement.where(ServiceCode.category == category)

        result = await self.session.execute(statement.order_by(ServiceCode.code))
        return list(result.scalars().all())

    async def update(self, service_code: ServiceCode) -> ServiceCode:
        service_code.updated_at = utcnow()
        self.session.add(service_code)
        await self.session.flush()
        await self.session.refresh(service_code)
        return service_code

    async def delete(self, service_code: ServiceCode) -> None:
        await self.session.delete(service_code)
        await self.session.flush()
