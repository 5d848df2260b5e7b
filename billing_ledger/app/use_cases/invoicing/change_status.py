"""Invoice status use cases

SendInvoice, UpdateInvoiceStatus (manual override) and CancelInvoice. None of
them writes a status directly: each sets the stored override and lets the
payment ledger re-derive status from money and dates.
"""

import logging
from datetime import date
from typing import Callable, Optional
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.services.payment_ledger import PaymentLedger
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.errors import ConflictError, InvalidStateError, LedgerError, ValidationError
from billing_ledger.domain.invoice import Invoice, InvoiceStatus
from .dtos import InvoiceResponseDTO, UpdateInvoiceStatusCommandDTO

logger = logging.getLogger(__name__)

MANUAL_STATUSES = frozenset({
    InvoiceStatus.DRAFT,
    InvoiceStatus.SENT,
    InvoiceStatus.PENDING_INSURANCE,
    InvoiceStatus.INSURANCE_DENIED,
})


class _InvoiceStatusUseCase:
    error_code = "INVOICE_STATUS_FAILED"

    def __init__(
        self,
        uow: UnitOfWork,
        payment_ledger: PaymentLedger,
        line_repo: InvoiceLineRepository,
        today: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.payment_ledger = payment_ledger
        self.line_repo = line_repo
        self.today = today

    async def _run(self, invoice_id: int, target: Optional[InvoiceStatus], acting_user: Optional[str]):
        try:
            invoice = await self.payment_ledger.lock_invoice(invoice_id)
            previous = invoice.current_status(self.today())

            await self.transition(invoice, target)

            invoice = await self.payment_ledger.recompute(invoice)
            await self.uow.commit()

            logger.info(
                f"Invoice {invoice.invoice_number} {previous.value} -> {invoice.status.value} "
                f"by {acting_user}"
            )
            lines = await self.line_repo.get_by_invoice_id(invoice.id)
            return Return.ok(InvoiceResponseDTO.from_entity(invoice, self.today(), lines))

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Status change on invoice {invoice_id} rejected: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            conflict = self.uow.conflict_from(e)
            if conflict:
                logger.warning(f"Status change on invoice {invoice_id} failed: {conflict.message}")
                return Return.err(conflict.to_error())
            logger.exception(f"Status change on invoice {invoice_id} failed")
            return Return.err(
                Error(
                    code=self.error_code,
                    message="Failed to change invoice status",
                    reason=str(e),
                )
            )

    async def transition(self, invoice: Invoice, target: Optional[InvoiceStatus]) -> None:
        raise NotImplementedError

    def _ensure_not_cancelled(self, invoice: Invoice) -> None:
        if invoice.is_cancelled:
            raise InvalidStateError(
                f"Invoice {invoice.invoice_number} is cancelled",
                current_state=InvoiceStatus.CANCELLED,
            )


class SendInvoice(_InvoiceStatusUseCase):
    """DRAFT -> SENT. Marks the invoice issued and opens it for payments."""

    error_code = "SEND_INVOICE_FAILED"

    async def execute(self, invoice_id: int, acting_user: Optional[str] = None) -> Result[InvoiceResponseDTO]:
        return await self._run(invoice_id, InvoiceStatus.SENT, acting_user)

    async def transition(self, invoice: Invoice, target: Optional[InvoiceStatus]) -> None:
        if not invoice.is_draft:
            raise InvalidStateError(
                f"Only draft invoices can be sent; invoice {invoice.invoice_number} "
                f"is {invoice.current_status(self.today()).value}",
                current_state=invoice.current_status(self.today()),
            )
        invoice.status_override = None
        invoice.issued_at = utcnow()


class UpdateInvoiceStatus(_InvoiceStatusUseCase):
    """
    Manual status override

    Allowed targets: DRAFT (no payments recorded), SENT (clears any override),
    PENDING_INSURANCE and INSURANCE_DENIED (invoice already sent and not paid).
    PAID, PARTIALLY_PAID and OVERDUE follow from payments and dates and cannot
    be set; CANCELLED goes through CancelInvoice.
    """

    error_code = "UPDATE_INVOICE_STATUS_FAILED"

    async def execute(self, command: UpdateInvoiceStatusCommandDTO) -> Result[InvoiceResponseDTO]:
        return await self._run(command.invoice_id, command.status, command.acting_user)

    async def transition(self, invoice: Invoice, target: Optional[InvoiceStatus]) -> None:
        if target not in MANUAL_STATUSES:
            raise ValidationError(
                f"Status {target.value} cannot be set manually",
                field="status",
                allowed=sorted(s.value for s in MANUAL_STATUSES),
            )
        self._ensure_not_cancelled(invoice)

        if target == InvoiceStatus.DRAFT:
            payments = await self.payment_ledger.payment_repo.get_by_invoice_id(invoice.id)
            if payments:
                raise ConflictError(
                    f"Invoice {invoice.invoice_number} has payments and cannot return to draft",
                    {"payment_count": len(payments)},
                )
            invoice.status_override = InvoiceStatus.DRAFT
            return

        if target == InvoiceStatus.SENT:
            invoice.status_override = None
            if invoice.issued_at is None:
                invoice.issued_at = utcnow()
            return

        # Insurance states run in parallel to the payment states of a sent invoice
        current = invoice.current_status(self.today())
        if invoice.is_draft or current == InvoiceStatus.PAID:
            raise InvalidStateError(
                f"Invoice {invoice.invoice_number} is {current.value}; "
                f"{target.value} requires a sent, unpaid invoice",
                current_state=current,
            )
        invoice.status_override = target


class CancelInvoice(_InvoiceStatusUseCase):
    """Cancel from any state except PAID. Line items and payments are kept."""

    error_code = "CANCEL_INVOICE_FAILED"

    async def execute(self, invoice_id: int, acting_user: Optional[str] = None) -> Result[InvoiceResponseDTO]:
        return await self._run(invoice_id, InvoiceStatus.CANCELLED, acting_user)

    async def transition(self, invoice: Invoice, target: Optional[InvoiceStatus]) -> None:
        self._ensure_not_cancelled(invoice)
        current = invoice.current_status(self.today())
        if current == InvoiceStatus.PAID:
            raise InvalidStateError(
                f"Invoice {invoice.invoice_number} is paid and cannot be cancelled",
                current_state=current,
            )
        invoice.status_override = InvoiceStatus.CANCELLED
        invoice.cancelled_at = utcnow()
