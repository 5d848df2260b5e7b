"""UpdateInvoice Use Case

Edits invoice header fields and, while the invoice is DRAFT, its line items.
Totals are recomputed in the same transaction.
"""

import logging
from datetime import date
from typing import Callable
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.services.payment_ledger import PaymentLedger
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.app.repositories.service_code_repository import ServiceCodeRepository
from billing_ledger.app.repositories.insurance_provider_repository import InsuranceProviderRepository
from billing_ledger.app.repositories.funding_program_repository import FundingProgramRepository
from billing_ledger.app.repositories.insurance_claim_repository import InsuranceClaimRepository
from billing_ledger.domain.errors import (
    ConflictError,
    FundingProgramNotFoundError,
    InsuranceProviderNotFoundError,
    InvalidStateError,
    LedgerError,
    LineItemNotFoundError,
    ReferencedEntityError,
    ValidationError,
)
from billing_ledger.domain.invoice import Invoice, InvoiceStatus
from billing_ledger.domain.money import ZERO, line_amount, money_sum, to_money
from .dtos import UpdateInvoiceCommandDTO, InvoiceResponseDTO
from .line_items import build_line_item, load_service_codes

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Edit an invoice

    Business Rules:
    1. Cancelled invoices are read-only
    2. Line items, issue date, tax and discount change only while DRAFT
    3. Line items referenced by an insurance claim cannot be removed or
       repriced, and stay billed to insurance
    4. An invoice keeps at least one line item
    5. New total may not fall below amount already paid
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_ledger: PaymentLedger,
        line_repo: InvoiceLineRepository,
        service_code_repo: ServiceCodeRepository,
        provider_repo: InsuranceProviderRepository,
        program_repo: FundingProgramRepository,
        claim_repo: InsuranceClaimRepository,
        today: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.payment_ledger = payment_ledger
        self.line_repo = line_repo
        self.service_code_repo = service_code_repo
        self.provider_repo = provider_repo
        self.program_repo = program_repo
        self.claim_repo = claim_repo
        self.today = today

    async def execute(self, command: UpdateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        try:
            # Step 1: Lock invoice
            invoice = await self.payment_ledger.lock_invoice(command.invoice_id)

            if invoice.is_cancelled:
                raise InvalidStateError(
                    f"Invoice {invoice.invoice_number} is cancelled",
                    current_state=InvoiceStatus.CANCELLED,
                )

            draft_only = command.touches_totals or command.issue_date is not None
            if draft_only and not invoice.is_draft:
                raise InvalidStateError(
                    f"Invoice {invoice.invoice_number} is no longer a draft; "
                    "line items, issue date, tax and discount are frozen",
                    current_state=invoice.current_status(self.today()),
                )

            # Step 2: Header fields
            await self._apply_header(invoice, command)

            # Step 3: Line item changes
            if command.touches_line_items:
                await self._remove_lines(invoice, command)
                await self._update_lines(invoice, command)
                await self._add_lines(invoice, command)

            # Step 4: Totals
            lines = await self.line_repo.get_by_invoice_id(invoice.id)
            if not lines:
                raise ValidationError("An invoice needs at least one line item", field="line_items")

            invoice.apply_totals(money_sum(line.amount for line in lines))
            if invoice.total_amount < ZERO:
                raise ValidationError(
                    "Discount exceeds invoice subtotal",
                    field="discount_amount",
                    subtotal=invoice.subtotal,
                    discount_amount=invoice.discount_amount,
                )
            if invoice.total_amount < to_money(invoice.amount_paid):
                raise ConflictError(
                    "New total is below the amount already paid",
                    {"total_amount": invoice.total_amount, "amount_paid": invoice.amount_paid},
                )

            # Step 5: Persist and re-derive status (due date may have moved)
            invoice = await self.payment_ledger.recompute(invoice)
            await self.uow.commit()

            logger.info(f"Updated invoice {invoice.invoice_number}: total {invoice.total_amount}")
            return Return.ok(InvoiceResponseDTO.from_entity(invoice, self.today(), lines))

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice {command.invoice_id} update rejected: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            conflict = self.uow.conflict_from(e)
            if conflict:
                logger.warning(f"Invoice {command.invoice_id} update failed: {conflict.message}")
                return Return.err(conflict.to_error())
            logger.exception(f"Invoice {command.invoice_id} update failed")
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )

    async def _apply_header(self, invoice: Invoice, command: UpdateInvoiceCommandDTO) -> None:
        issue_date = command.issue_date or invoice.issue_date
        due_date = command.due_date or invoice.due_date
        if due_date < issue_date:
            raise ValidationError(
                "Due date must not be before issue date",
                field="due_date",
                issue_date=issue_date.isoformat(),
                due_date=due_date.isoformat(),
            )
        invoice.issue_date = issue_date
        invoice.due_date = due_date

        if command.insurance_provider_id is not None:
            if not await self.provider_repo.get_by_id(command.insurance_provider_id):
                raise InsuranceProviderNotFoundError(command.insurance_provider_id)
            invoice.insurance_provider_id = command.insurance_provider_id

        if command.funding_program_id is not None:
            if not await self.program_repo.get_by_id(command.funding_program_id):
                raise FundingProgramNotFoundError(command.funding_program_id)
            invoice.funding_program_id = command.funding_program_id

        if command.tax_amount is not None:
            invoice.tax_amount = to_money(command.tax_amount)
        if command.discount_amount is not None:
            invoice.discount_amount = to_money(command.discount_amount)
        if command.policy_number is not None:
            invoice.policy_number = command.policy_number
        if command.beneficiary_name is not None:
            invoice.beneficiary_name = command.beneficiary_name
        if command.notes is not None:
            invoice.notes = command.notes

    async def _owned_line(self, invoice: Invoice, line_item_id: int):
        line = await self.line_repo.get_by_id(line_item_id)
        if not line or line.invoice_id != invoice.id:
            raise LineItemNotFoundError(line_item_id)
        return line

    async def _remove_lines(self, invoice: Invoice, command: UpdateInvoiceCommandDTO) -> None:
        for line_item_id in command.remove_line_item_ids:
            line = await self._owned_line(invoice, line_item_id)
            claims = await self.claim_repo.count_items_for_line(line.id)
            if claims:
                raise ReferencedEntityError("Line item", line.id, "insurance claims", claims)
            await self.line_repo.delete(line)

    async def _update_lines(self, invoice: Invoice, command: UpdateInvoiceCommandDTO) -> None:
        for change in command.update_line_items:
            line = await self._owned_line(invoice, change.line_item_id)
            quantity = line.quantity if change.quantity is None else change.quantity
            rate = to_money(line.rate if change.rate is None else change.rate)
            amount = line_amount(quantity, rate)
            if amount != to_money(line.amount) or change.bill_to_insurance is False:
                claims = await self.claim_repo.count_items_for_line(line.id)
                if claims:
                    raise ReferencedEntityError("Line item", line.id, "insurance claims", claims)
            line.quantity = quantity
            line.rate = rate
            if change.description is not None:
                line.description = change.description
            if change.date_of_service is not None:
                line.date_of_service = change.date_of_service
            if change.bill_to_insurance is not None:
                line.bill_to_insurance = change.bill_to_insurance
            if change.notes is not None:
                line.notes = change.notes
            line.amount = amount
            await self.line_repo.update(line)

    async def _add_lines(self, invoice: Invoice, command: UpdateInvoiceCommandDTO) -> None:
        if not command.add_line_items:
            return
        codes = await load_service_codes(self.service_code_repo, command.add_line_items)
        await self.line_repo.create_many(
            [build_line_item(item, codes[item.service_code_id], invoice.id) for item in command.add_line_items]
        )
