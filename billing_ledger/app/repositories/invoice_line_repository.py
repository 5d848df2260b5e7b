"""Invoice Line Item Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from billing_ledger.domain.invoice_line import InvoiceLineItem


class InvoiceLineRepository(ABC):
    """
    Repository interface for InvoiceLineItem persistence

    Line items are always accessed through their owning invoice.
    """

    @abstractmethod
    async def create(self, line: InvoiceLineItem) -> InvoiceLineItem:
        """Persist a single line item"""
        pass

    @abstractmethod
    async def create_many(self, lines: List[InvoiceLineItem]) -> List[InvoiceLineItem]:
        """
        Persist several line items in one flush

        Args:
            lines: Line items that already reference their invoice

        Returns:
            Created line items with generated IDs
        """
        pass

    @abstractmethod
    async def get_by_id(self, line_id: int) -> Optional[InvoiceLineItem]:
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLineItem]:
        """All line items of an invoice, in insertion order"""
        pass

    @abstractmethod
    async def get_by_ids(self, line_ids: Sequence[int]) -> List[InvoiceLineItem]:
        pass

    @abstractmethod
    async def update(self, line: InvoiceLineItem) -> InvoiceLineItem:
        pass

    @abstractmethod
    async def delete(self, line: InvoiceLineItem) -> None:
        pass

    @abstractmethod
    async def delete_by_invoice_id(self, invoice_id: int) -> int:
        """Delete all line items of an invoice, returning the number removed"""
        pass

    @abstractmethod
    async def count_by_service_code(self, service_code_id: int) -> int:
        """Number of line items that reference a service code"""
        pass
