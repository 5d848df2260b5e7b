import logging
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.domain.errors import LedgerError, ValidationError
from billing_ledger.domain.money import ZERO, to_money

logger = logging.getLogger(__name__)


class CatalogCommand:
    """Write-side catalog use case: one transaction, typed errors as Results."""

    error_code = "CATALOG_OPERATION_FAILED"
    error_message = "Failed to update catalog"

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def _fail(self, subject, e: Exception) -> Result:
        await self.uow.rollback()
        e = self.uow.conflict_from(e) or e
        if isinstance(e, LedgerError):
            logger.warning(f"{type(self).__name__} ({subject}) rejected: {e.message}")
            return Return.err(e.to_error())
        logger.exception(f"{type(self).__name__} ({subject}) failed")
        return Return.err(Error(code=self.error_code, message=self.error_message, reason=str(e)))


def non_negative_money(value: Optional[Decimal], field: str) -> Optional[Decimal]:
    if value is None:
        return None
    amount = to_money(value)
    if amount < ZERO:
        raise ValidationError(f"{field} must not be negative", field=field, value=amount)
    return amount
