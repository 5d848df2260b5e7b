"""DeleteInvoice Use Case"""

import logging
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.app.repositories.payment_repository import PaymentRepository
from billing_ledger.app.repositories.insurance_claim_repository import InsuranceClaimRepository
from billing_ledger.domain.errors import ConflictError, InvoiceNotFoundError, LedgerError
from billing_ledger.domain.insurance_claim import ClaimStatus

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete an invoice

    Business Rules:
    1. Only invoices without payments (voided ones included) can be deleted;
       anything else must be cancelled instead
    2. Draft claims are deleted with the invoice; submitted claims block deletion
    3. Line items are deleted with the invoice
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        line_repo: InvoiceLineRepository,
        payment_repo: PaymentRepository,
        claim_repo: InsuranceClaimRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.line_repo = line_repo
        self.payment_repo = payment_repo
        self.claim_repo = claim_repo

    async def execute(self, invoice_id: int) -> Result[None]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id, for_update=True)
            if not invoice:
                raise InvoiceNotFoundError(invoice_id)

            payment_count = await self.payment_repo.count_by_invoice_id(invoice.id)
            if payment_count:
                raise ConflictError(
                    f"Invoice {invoice.invoice_number} has payments; cancel instead",
                    {"invoice_id": invoice.id, "payment_count": payment_count},
                )

            claims = await self.claim_repo.get_by_invoice_id(invoice.id)
            submitted = [c for c in claims if c.status != ClaimStatus.DRAFT]
            if submitted:
                raise ConflictError(
                    f"Invoice {invoice.invoice_number} has submitted insurance claims; cancel instead",
                    {"invoice_id": invoice.id, "claim_ids": [c.id for c in submitted]},
                )

            for claim in claims:
                await self.claim_repo.delete(claim)
            removed_lines = await self.line_repo.delete_by_invoice_id(invoice.id)
            await self.invoice_repo.delete(invoice)

            await self.uow.commit()

            logger.info(
                f"Deleted invoice {invoice.invoice_number} with {removed_lines} line items "
                f"and {len(claims)} draft claims"
            )
            return Return.ok(None)

        except LedgerError as e:
            await self.uow.rollback()
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            conflict = self.uow.conflict_from(e)
            if conflict:
                logger.warning(f"Deleting invoice {invoice_id} failed: {conflict.message}")
                return Return.err(conflict.to_error())
            logger.exception(f"Deleting invoice {invoice_id} failed")
            return Return.err(
                Error(
                    code="DELETE_INVOICE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )
