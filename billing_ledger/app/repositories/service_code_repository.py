"""Service Code Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from billing_ledger.domain.service_code import ServiceCode


class ServiceCodeRepository(ABC):

    @abstractmethod
    async def create(self, service_code: ServiceCode) -> ServiceCode:
        pass

    @abstractmethod
    async def get_by_id(self, service_code_id: int) -> Optional[ServiceCode]:
        pass

    @abstractmethod
    async def get_by_ids(self, service_code_ids: Sequence[int]) -> List[ServiceCode]:
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[ServiceCode]:
        pass

    @abstractmethod
    async def list(self, active_only: bool = False, category: Optional[str] = None) -> List[ServiceCode]:
        """Catalog entries ordered by code"""
        pass

    @abstractmethod
    async def update(self, service_code: ServiceCode) -> ServiceCode:
        pass

    @abstractmethod
    async def delete(self, service_code: ServiceCode) -> None:
        pass
