from .service_code_repository import ServiceCodeRepository
from .insurance_provider_repository import InsuranceProviderRepository
from .funding_program_repository import FundingProgramRepository
from .invoice_repository import InvoiceRepository
from .invoice_line_repository import InvoiceLineRepository
from .payment_repository import PaymentRepository
from .insurance_claim_repository import InsuranceClaimRepository

__all__ = [
    "ServiceCodeRepository",
    "InsuranceProviderRepository",
    "FundingProgramRepository",
    "InvoiceRepository",
    "InvoiceLineRepository",
    "PaymentRepository",
    "InsuranceClaimRepository",
]
