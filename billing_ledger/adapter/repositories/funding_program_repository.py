"""SQLAlchemy Funding Program Repository Implementation"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.app.repositories.funding_program_repository import FundingProgramRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.funding_program import FundingProgram


class SqlAlchemyFundingProgramRepository(FundingProgramRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, program: FundingProgram) -> FundingProgram:
        self.session.add(program)
        await self.session.flush()
        await self.session.refresh(program)
        return program

    async def get_by_id(self, program_id: int) -> Optional[FundingProgram]:
        statement = select(FundingProgram).where(FundingProgram.id == program_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[FundingProgram]:
        statement = select(FundingProgram).where(FundingProgram.name == name)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list(self, active_only: bool = False) -> List[FundingProgram]:
        statement = select(FundingProgram)
        if active_only:
            statement = statement.where(FundingProgram.is_active.is_(True))
        result = await self.session.execute(statement.order_by(FundingProgram.name))
        return list(result.scalars().all())

    async def update(self, program: FundingProgram) -> FundingProgram:
        program.updated_at = utcnow()
        self.session.add(program)
        await self.session.flush()
        await self.session.refresh(program)
        return program

    async def delete(self, program: FundingProgram) -> None:
        await self.session.delete(program)
        await self.session.flush()
