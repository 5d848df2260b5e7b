"""Funding Program Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from billing_ledger.domain.funding_program import FundingProgram


class FundingProgramRepository(ABC):

    @abstractmethod
    async def create(self, program: FundingProgram) -> FundingProgram:
        pass

    @abstractmethod
    async def get_by_id(self, program_id: int) -> Optional[FundingProgram]:
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[FundingProgram]:
        pass

    @abstractmethod
    async def list(self, active_only: bool = False) -> List[FundingProgram]:
        pass

    @abstractmethod
    async def update(self, program: FundingProgram) -> FundingProgram:
        pass

    @abstractmethod
    async def delete(self, program: FundingProgram) -> None:
        pass
