"""Invoice Numbering Sequencer

Produces INV-<year>-<5-digit-seq> numbers inside the caller's transaction.

Correctness relies on two layers:
1. A year-scoped lock held until the transaction ends, so two writers never
   read the same maximum.
2. The unique constraint on invoice_number, which catches anything the lock
   cannot (e.g. stores without advisory locks). Callers retry once.
"""

import logging
from billing_ledger.app.repositories.invoice_repository import InvoiceRepository
from billing_ledger.domain.invoice import (
    INVOICE_NUMBER_PREFIX,
    format_invoice_number,
    invoice_number_prefix,
    parse_invoice_number,
)

logger = logging.getLogger(__name__)


class InvoiceNumberSequencer:
    def __init__(self, invoice_repo: InvoiceRepository, prefix: str = INVOICE_NUMBER_PREFIX):
        self.invoice_repo = invoice_repo
        self.prefix = prefix

    async def next(self, year: int) -> str:
        """
        Next unused invoice number for the given year

        Args:
            year: Issue-date year of the invoice

        Returns:
            Invoice number string, starting at <prefix>-<year>-00001
        """
        await self.invoice_repo.lock_number_sequence(year)

        max_number = await self.invoice_repo.get_max_invoice_number(
            invoice_number_prefix(year, self.prefix)
        )

        if max_number:
            _, _, sequence = parse_invoice_number(max_number)
            sequence += 1
        else:
            sequence = 1

        invoice_number = format_invoice_number(year, sequence, self.prefix)
        logger.debug(f"Allocated invoice number {invoice_number}")
        return invoice_number
