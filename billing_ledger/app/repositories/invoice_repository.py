"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import date
from decimal import Decimal
from billing_ledger.domain.invoice import Invoice, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Provides access to invoice data for billing operations.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        The insert runs inside a savepoint so a unique-number violation leaves
        the surrounding transaction usable.

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID

        Raises:
            DuplicateKeyError: invoice_number is already taken
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        """
        Retrieve invoice by invoice number

        Args:
            invoice_number: Unique invoice number

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def list(
        self,
        client_id: Optional[str] = None,
        status: Optional[InvoiceStatus] = None,
        today: Optional[date] = None,
        issue_date_from: Optional[date] = None,
        issue_date_to: Optional[date] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
        insurance_provider_id: Optional[int] = None,
        funding_program_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Invoice]:
        """
        List invoices matching the given filters, newest first

        SENT and OVERDUE are told apart by comparing due_date with ``today``
        so listings agree with lazily derived status.

        Returns:
            List of invoices
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def delete(self, invoice: Invoice) -> None:
        """Delete an invoice row. Callers remove owned rows first."""
        pass

    @abstractmethod
    async def lock_number_sequence(self, year: int) -> None:
        """
        Serialize invoice numbering for a year until the transaction ends

        No-op on stores that already serialize writers.
        """
        pass

    @abstractmethod
    async def get_max_invoice_number(self, prefix: str) -> Optional[str]:
        """
        Highest invoice number starting with ``prefix``

        Args:
            prefix: Number prefix, e.g. 'INV-2025-'

        Returns:
            Highest matching number, or None if the year has no invoices
        """
        pass

    @abstractmethod
    async def count_by_insurance_provider(self, insurance_provider_id: int) -> int:
        pass

    @abstractmethod
    async def count_by_funding_program(self, funding_program_id: int) -> int:
        pass
