"""Payment adjustment use cases

UpdatePayment, RemovePayment and VoidPayment. Each one runs the matching
PaymentLedger operation under the invoice lock and commits.
"""

import logging
from datetime import date
from typing import Callable
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.services.payment_ledger import PaymentLedger
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.domain.errors import LedgerError
from .dtos import (
    InvoiceBalanceDTO,
    PaymentResponseDTO,
    PaymentResultDTO,
    UpdatePaymentCommandDTO,
    VoidPaymentCommandDTO,
)

logger = logging.getLogger(__name__)


class _PaymentAdjustment:
    error_code = "PAYMENT_ADJUSTMENT_FAILED"
    error_message = "Failed to adjust payment"

    def __init__(
        self,
        uow: UnitOfWork,
        payment_ledger: PaymentLedger,
        invoice_repo: InvoiceRepository,
        today: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.payment_ledger = payment_ledger
        self.invoice_repo = invoice_repo
        self.today = today

    async def _fail(self, payment_id: int, e: Exception) -> Result[PaymentResultDTO]:
        await self.uow.rollback()
        e = self.uow.conflict_from(e) or e
        if isinstance(e, LedgerError):
            logger.warning(f"{type(self).__name__} on payment {payment_id} rejected: {e.message}")
            return Return.err(e.to_error())
        logger.exception(f"{type(self).__name__} on payment {payment_id} failed")
        return Return.err(Error(code=self.error_code, message=self.error_message, reason=str(e)))

    async def _result(self, payment=None, invoice_id: int = None) -> PaymentResultDTO:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        return PaymentResultDTO(
            payment=PaymentResponseDTO.from_entity(payment) if payment else None,
            invoice=InvoiceBalanceDTO.from_entity(invoice, self.today()),
        )


class UpdatePayment(_PaymentAdjustment):
    """Edit amount, date, method or reference; the overpayment limit is re-checked."""

    error_code = "UPDATE_PAYMENT_FAILED"
    error_message = "Failed to update payment"

    async def execute(self, command: UpdatePaymentCommandDTO) -> Result[PaymentResultDTO]:
        try:
            payment = await self.payment_ledger.update(
                command.payment_id,
                amount=command.amount,
                payment_date=command.payment_date,
                method=command.method,
                reference_number=command.reference_number,
                notes=command.notes,
            )
            result = await self._result(payment, payment.invoice_id)
            await self.uow.commit()
            return Return.ok(result)
        except Exception as e:
            return await self._fail(command.payment_id, e)


class RemovePayment(_PaymentAdjustment):
    """Delete a payment. A PAID invoice may move back to PARTIALLY_PAID, SENT or OVERDUE."""

    error_code = "REMOVE_PAYMENT_FAILED"
    error_message = "Failed to remove payment"

    async def execute(self, payment_id: int) -> Result[PaymentResultDTO]:
        try:
            invoice = await self.payment_ledger.remove(payment_id)
            result = await self._result(invoice_id=invoice.id)
            await self.uow.commit()
            return Return.ok(result)
        except Exception as e:
            return await self._fail(payment_id, e)


class VoidPayment(_PaymentAdjustment):
    """Void a payment, keeping the row for audit."""

    error_code = "VOID_PAYMENT_FAILED"
    error_message = "Failed to void payment"

    async def execute(self, command: VoidPaymentCommandDTO) -> Result[PaymentResultDTO]:
        try:
            payment = await self.payment_ledger.void(command.payment_id, command.reason, command.acting_user)
            result = await self._result(payment, payment.invoice_id)
            await self.uow.commit()
            return Return.ok(result)
        except Exception as e:
            return await self._fail(command.payment_id, e)
