"""Notification Service Implementations

Concrete channels for invoice notifications.
"""

import logging
from typing import List, Optional
import httpx
from billing_ledger.app.services.notification_service import NotificationService
from billing_ledger.domain.invoice import Invoice

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that only logs

    Used in development and as the always-on channel next to a webhook.
    """

    async def send_invoice_notification(self, invoice: Invoice) -> bool:
        logger.info(
            f"[INVOICE NOTIFICATION] Invoice: {invoice.invoice_number}, "
            f"Client: {invoice.client_id}, "
            f"Total: {invoice.total_amount}, "
            f"Due: {invoice.due_date.isoformat()}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that POSTs invoice details to a webhook

    Delivery failures are reported as False, never raised.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_invoice_notification(self, invoice: Invoice) -> bool:
        payload = {
            "type": "invoice_created",
            "invoice_id": invoice.id,
            "invoice_number": invoice.invoice_number,
            "client_id": invoice.client_id,
            "status": invoice.status.value,
            "issue_date": invoice.issue_date.isoformat(),
            "due_date": invoice.due_date.isoformat(),
            "total_amount": str(invoice.total_amount),
            "amount_paid": str(invoice.amount_paid),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Webhook notification sent for invoice {invoice.invoice_number}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook notification for invoice {invoice.invoice_number}: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """Delegates to several channels; succeeds if any one of them does."""

    def __init__(self, services: List[NotificationService]):
        self.services = services

    async def send_invoice_notification(self, invoice: Invoice) -> bool:
        success = False
        for service in self.services:
            try:
                if await service.send_invoice_notification(invoice):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Build the notification service for the configured channels

    Args:
        webhook_url: Optional webhook URL. When set, notifications go to the
                     log and the webhook; otherwise to the log only.
    """
    services: List[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
