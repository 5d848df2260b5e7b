"""Insurance Provider Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from billing_ledger.domain.insurance_provider import InsuranceProvider


class InsuranceProviderRepository(ABC):

    @abstractmethod
    async def create(self, provider: InsuranceProvider) -> InsuranceProvider:
        pass

    @abstractmethod
    async def get_by_id(self, provider_id: int) -> Optional[InsuranceProvider]:
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[InsuranceProvider]:
        pass

    @abstractmethod
    async def list(self, active_only: bool = False) -> List[InsuranceProvider]:
        pass

    @abstractmethod
    async def update(self, provider: InsuranceProvider) -> InsuranceProvider:
        pass

    @abstractmethod
    async def delete(self, provider: InsuranceProvider) -> None:
        pass
