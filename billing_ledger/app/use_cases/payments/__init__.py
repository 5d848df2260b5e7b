"""Payment ledger use cases"""
from .apply_payment import ApplyPayment
from .adjust_payment import UpdatePayment, RemovePayment, VoidPayment
from .queries import GetPayment, ListPayments
from .dtos import (
    ApplyPaymentCommandDTO,
    UpdatePaymentCommandDTO,
    VoidPaymentCommandDTO,
    ListPaymentsQueryDTO,
    PaymentResponseDTO,
    InvoiceBalanceDTO,
    PaymentResultDTO,
    ListPaymentsResponseDTO,
)

__all__ = [
    "ApplyPayment",
    "UpdatePayment",
    "RemovePayment",
    "VoidPayment",
    "GetPayment",
    "ListPayments",
    "ApplyPaymentCommandDTO",
    "UpdatePaymentCommandDTO",
    "VoidPaymentCommandDTO",
    "ListPaymentsQueryDTO",
    "PaymentResponseDTO",
    "InvoiceBalanceDTO",
    "PaymentResultDTO",
    "ListPaymentsResponseDTO",
]
