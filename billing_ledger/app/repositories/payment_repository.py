"""Payment Repository Interface

Defines the contract for payment persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from billing_ledger.domain.payment import Payment, PaymentMethod


class PaymentRepository(ABC):
    """
    Repository interface for Payment persistence

    Payments are append-mostly; amount edits and removals always run under
    the owning invoice's row lock.
    """

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Create a new payment

        Args:
            payment: Payment entity to persist

        Returns:
            Created Payment with generated ID
        """
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        """
        Retrieve a payment by ID

        Args:
            payment_id: Payment ID
            for_update: If True, locks the row with SELECT FOR UPDATE and
                reloads it, so edits made before the lock are seen
        """
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int, include_voided: bool = False) -> List[Payment]:
        """
        Retrieve payments recorded against an invoice

        Args:
            invoice_id: Invoice ID
            include_voided: Include voided payments (audit views)

        Returns:
            Payments ordered by payment date
        """
        pass

    @abstractmethod
    async def get_by_claim_id(self, claim_id: int) -> Optional[Payment]:
        """Non-voided payment generated from an insurance claim, if any"""
        pass

    @abstractmethod
    async def list(
        self,
        invoice_id: Optional[int] = None,
        client_id: Optional[str] = None,
        method: Optional[PaymentMethod] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        include_voided: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Payment]:
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def delete(self, payment: Payment) -> None:
        pass

    @abstractmethod
    async def count_by_invoice_id(self, invoice_id: int) -> int:
        """Number of payments (voided included) recorded against an invoice"""
        pass
