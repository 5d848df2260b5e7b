"""Notification Service Interface

Defines the contract for delivering invoice notifications. The ledger only
records that a notification was requested; delivery belongs to the
implementation.
"""

from abc import ABC, abstractmethod
from billing_ledger.domain.invoice import Invoice


class NotificationService(ABC):
    """
    Abstract notification service for invoice delivery

    Implementations can deliver via:
    - Webhook (HTTP POST)
    - Email gateway
    - Logging (development)
    """

    @abstractmethod
    async def send_invoice_notification(self, invoice: Invoice) -> bool:
        """
        Notify the client that an invoice was created

        Args:
            invoice: Committed invoice

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
