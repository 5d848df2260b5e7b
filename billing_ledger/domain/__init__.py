from .base import BaseModel, utcnow
from .service_code import ServiceCode
from .insurance_provider import InsuranceProvider
from .funding_program import FundingProgram
from .invoice import Invoice, InvoiceStatus, derive_status
from .invoice_line import InvoiceLineItem
from .payment import Payment, PaymentMethod
from .insurance_claim import InsuranceClaim, InsuranceClaimItem, ClaimStatus
from .events import ClaimPaid

__all__ = [
    "BaseModel",
    "utcnow",
    "ServiceCode",
    "InsuranceProvider",
    "FundingProgram",
    "Invoice",
    "InvoiceStatus",
    "derive_status",
    "InvoiceLineItem",
    "Payment",
    "PaymentMethod",
    "InsuranceClaim",
    "InsuranceClaimItem",
    "ClaimStatus",
    "ClaimPaid",
]
