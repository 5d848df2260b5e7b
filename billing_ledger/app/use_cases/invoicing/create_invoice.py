"""CreateInvoice Use Case

Creates a DRAFT invoice with its line items in one transaction.
"""

import logging
from datetime import date
from typing import Callable, Optional
from libs.result import Result, Return, Error
from billing_ledger.app.services.unit_of_work import UnitOfWork
from billing_ledger.app.services.client_registry import ClientRegistry
from billing_ledger.app.services.invoice_numbering import InvoiceNumberSequencer
from billing_ledger.app.services.notification_service import NotificationService
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.app.repositories.service_code_repository import ServiceCodeRepository
from billing_ledger.app.repositories.insurance_provider_repository import InsuranceProviderRepository
from billing_ledger.app.repositories.funding_program_repository import FundingProgramRepository
from billing_ledger.domain.base import utcnow
from billing_ledger.domain.errors import (
    ClientNotFoundError,
    DuplicateKeyError,
    FundingProgramNotFoundError,
    InsuranceProviderNotFoundError,
    InvoiceNumberCollisionError,
    LedgerError,
    ValidationError,
)
from billing_ledger.domain.invoice import Invoice, InvoiceStatus
from billing_ledger.domain.money import ZERO, money_sum, to_money
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO
from .line_items import build_line_item, load_service_codes

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create a draft invoice

    Business Rules:
    1. Client must exist in the client registry
    2. At least one line item; due_date >= issue_date
    3. Service codes must exist and be active; rate and description default from the catalog
    4. Referenced insurance provider and funding program must exist
    5. Invoice number is generated (INV-<issue year>-NNNNN) unless supplied;
       supplied duplicates are rejected
    6. Status DRAFT, amount_paid 0

    Flow:
    1. Validate client, dates and references
    2. Build line items and totals
    3. Allocate number and insert invoice (one retry on collision)
    4. Insert line items
    5. Commit transaction
    6. Hand notification to the notifier if requested
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        line_repo: InvoiceLineRepository,
        service_code_repo: ServiceCodeRepository,
        provider_repo: InsuranceProviderRepository,
        program_repo: FundingProgramRepository,
        client_registry: ClientRegistry,
        notification_service: Optional[NotificationService] = None,
        sequencer: Optional[InvoiceNumberSequencer] = None,
        today: Callable[[], date] = date.today,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.line_repo = line_repo
        self.service_code_repo = service_code_repo
        self.provider_repo = provider_repo
        self.program_repo = program_repo
        self.client_registry = client_registry
        self.notification_service = notification_service
        self.sequencer = sequencer or InvoiceNumberSequencer(invoice_repo)
        self.today = today

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with client, dates and line items

        Returns:
            Result[InvoiceResponseDTO]: Success with invoice details or error
        """
        try:
            # Step 1: Validate client, dates and references
            if not await self.client_registry.exists(command.client_id):
                raise ClientNotFoundError(command.client_id)

            if not command.line_items:
                raise ValidationError("An invoice needs at least one line item", field="line_items")

            if command.due_date < command.issue_date:
                raise ValidationError(
                    "Due date must not be before issue date",
                    field="due_date",
                    issue_date=command.issue_date.isoformat(),
                    due_date=command.due_date.isoformat(),
                )

            if command.insurance_provider_id and not await self.provider_repo.get_by_id(
                command.insurance_provider_id
            ):
                raise InsuranceProviderNotFoundError(command.insurance_provider_id)

            if command.funding_program_id and not await self.program_repo.get_by_id(
                command.funding_program_id
            ):
                raise FundingProgramNotFoundError(command.funding_program_id)

            # Step 2: Build line items and totals
            codes = await load_service_codes(self.service_code_repo, command.line_items)
            lines = [build_line_item(item, codes[item.service_code_id]) for item in command.line_items]

            invoice = Invoice(
                invoice_number="",
                client_id=command.client_id,
                issue_date=command.issue_date,
                due_date=command.due_date,
                status=InvoiceStatus.DRAFT,
                status_override=InvoiceStatus.DRAFT,
                tax_amount=to_money(command.tax_amount),
                discount_amount=to_money(command.discount_amount),
                amount_paid=ZERO,
                insurance_provider_id=command.insurance_provider_id,
                funding_program_id=command.funding_program_id,
                policy_number=command.policy_number,
                beneficiary_name=command.beneficiary_name,
                notes=command.notes,
                created_by=command.acting_user,
            )
            invoice.apply_totals(money_sum(line.amount for line in lines))

            if invoice.total_amount < ZERO:
                raise ValidationError(
                    "Discount exceeds invoice subtotal",
                    field="discount_amount",
                    subtotal=invoice.subtotal,
                    discount_amount=invoice.discount_amount,
                )

            if command.send_notification:
                invoice.notification_requested_at = utcnow()

            # Step 3: Allocate number and insert invoice
            invoice = await self._insert(invoice, command.invoice_number)

            # Step 4: Insert line items
            for line in lines:
                line.invoice_id = invoice.id
            lines = await self.line_repo.create_many(lines)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Created invoice {invoice.invoice_number} for client {invoice.client_id}: "
                f"{len(lines)} line items, total {invoice.total_amount}"
            )

        except LedgerError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice creation rejected for client {command.client_id}: {e.message}")
            return Return.err(e.to_error())
        except Exception as e:
            await self.uow.rollback()
            conflict = self.uow.conflict_from(e)
            if conflict:
                logger.warning(f"Invoice creation failed for client {command.client_id}: {conflict.message}")
                return Return.err(conflict.to_error())
            logger.exception(f"Invoice creation failed for client {command.client_id}")
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )

        # Step 6: Delivery happens after commit and never affects the ledger
        if command.send_notification and self.notification_service:
            await self._notify(invoice)

        return Return.ok(InvoiceResponseDTO.from_entity(invoice, self.today(), lines))

    async def _insert(self, invoice: Invoice, supplied_number: Optional[str]) -> Invoice:
        if supplied_number:
            if await self.invoice_repo.get_by_invoice_number(supplied_number):
                raise DuplicateKeyError("Invoice", "invoice_number", supplied_number)
            invoice.invoice_number = supplied_number
            return await self.invoice_repo.create(invoice)

        for attempt in range(2):
            invoice.invoice_number = await self.sequencer.next(invoice.issue_date.year)
            try:
                return await self.invoice_repo.create(invoice)
            except DuplicateKeyError:
                logger.warning(
                    f"Invoice number {invoice.invoice_number} collided (attempt {attempt + 1})"
                )

        raise InvoiceNumberCollisionError(invoice.invoice_number)

    async def _notify(self, invoice: Invoice) -> None:
        try:
            sent = await self.notification_service.send_invoice_notification(invoice)
        except Exception as e:
            logger.error(f"Notification for invoice {invoice.invoice_number} failed: {e}")
            return
        if not sent:
            logger.warning(f"Notification for invoice {invoice.invoice_number} was not delivered")
