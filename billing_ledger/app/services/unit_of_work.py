from abc import ABC, abstractmethod
from typing import Optional
from billing_ledger.domain.errors import ConcurrencyError


class UnitOfWork(ABC):
    """Transaction boundary shared by the repositories of one use case."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    def conflict_from(self, error: Exception) -> Optional[ConcurrencyError]:
        """Map a storage failure caused by a concurrent writer to a retryable error, else None."""
        return None
