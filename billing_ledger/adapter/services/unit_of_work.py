from typing import Optional

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel.ext.asyncio.session import AsyncSession
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.domain.errors import ConcurrencyError

# serialization_failure, deadlock_detected, lock_not_available
RETRYABLE_SQLSTATES = {"40001", "40P01", "55P03"}


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

    def conflict_from(self, error: Exception) -> Optional[ConcurrencyError]:
        if isinstance(error, StaleDataError):
            return ConcurrencyError("Row changed by a concurrent writer", {"reason": str(error)})
        if isinstance(error, DBAPIError):
            orig = error.orig
            sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
            if sqlstate in RETRYABLE_SQLSTATES or "database is locked" in str(orig):
                return ConcurrencyError(
                    "Transaction lost a race with a concurrent writer",
                    {"reason": str(orig), "sqlstate": sqlstate},
                )
        return None
