from .service_code_repository import SqlAlchemyServiceCodeRepository
from .insurance_provider_repository import SqlAlchemyInsuranceProviderRepository
from .funding_program_repository import SqlAlchemyFundingProgramRepository
from .invoice_repository import SqlAlchemyInvoiceRepository
from .invoice_line_repository import SqlAlchemyInvoiceLineRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .insurance_claim_repository import SqlAlchemyInsuranceClaimRepository

__all__ = [
    "SqlAlchemyServiceCodeRepository",
    "SqlAlchemyInsuranceProviderRepository",
    "SqlAlchemyFundingProgramRepository",
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyInvoiceLineRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyInsuranceClaimRepository",
]
