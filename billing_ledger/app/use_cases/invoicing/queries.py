"""Invoice read use cases

Plain reads without row locks. Status is derived against today's date.
"""

from datetime import date
from typing import Callable
from libs.result import Result, Return
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.app.repositories.invoice_line_repository import InvoiceLineRepository
from billing_ledger.domain.errors import InvoiceNotFoundError
from .dtos import InvoiceResponseDTO, ListInvoicesQueryDTO, ListInvoicesResponseDTO


class GetInvoice:
    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        line_repo: InvoiceLineRepository,
        today: Callable[[], date] = date.today,
    ):
        self.invoice_repo = invoice_repo
        self.line_repo = line_repo
        self.today = today

    async def execute(self, invoice_id: int) -> Result[InvoiceResponseDTO]:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if not invoice:
            return Return.err(InvoiceNotFoundError(invoice_id).to_error())

        lines = await self.line_repo.get_by_invoice_id(invoice.id)
        return Return.ok(InvoiceResponseDTO.from_entity(invoice, self.today(), lines))


class GetInvoiceByNumber(GetInvoice):
    """Look an invoice up by its human-facing number, e.g. INV-2025-00042."""

    async def execute(self, invoice_number: str) -> Result[InvoiceResponseDTO]:
        invoice = await self.invoice_repo.get_by_invoice_number(invoice_number)
        if not invoice:
            return Return.err(InvoiceNotFoundError(invoice_number).to_error())

        lines = await self.line_repo.get_by_invoice_id(invoice.id)
        return Return.ok(InvoiceResponseDTO.from_entity(invoice, self.today(), lines))


class ListInvoices:
    """
    List invoices with the filters used by billing screens and reports

    Filtering by OVERDUE returns sent invoices whose due date has passed even
    if no write has touched them since.
    """

    def __init__(self, invoice_repo: InvoiceRepository, today: Callable[[], date] = date.today):
        self.invoice_repo = invoice_repo
        self.today = today

    async def execute(self, query: ListInvoicesQueryDTO) -> Result[ListInvoicesResponseDTO]:
        today = self.today()
        invoices = await self.invoice_repo.list(
            client_id=query.client_id,
            status=query.status,
            today=today,
            issue_date_from=query.issue_date_from,
            issue_date_to=query.issue_date_to,
            min_amount=query.min_amount,
            max_amount=query.max_amount,
            insurance_provider_id=query.insurance_provider_id,
            funding_program_id=query.funding_program_id,
            limit=query.limit,
            offset=query.offset,
        )
        return Return.ok(
            ListInvoicesResponseDTO(
                invoices=[InvoiceResponseDTO.from_entity(invoice, today) for invoice in invoices],
                count=len(invoices),
                limit=query.limit,
                offset=query.offset,
            )
        )
