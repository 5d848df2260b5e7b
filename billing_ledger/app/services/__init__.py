from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .client_registry import ClientRegistry
from .invoice_numbering import InvoiceNumberSequencer
from .payment_ledger import PaymentLedger
from .event_dispatcher import DomainEventDispatcher
from .claim_payment_handler import ClaimPaymentHandler

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "ClientRegistry",
    "InvoiceNumberSequencer",
    "PaymentLedger",
    "DomainEventDispatcher",
    "ClaimPaymentHandler",
]
