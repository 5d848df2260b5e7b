from .invoice_request import (
    CreateInvoiceRequestSchema,
    UpdateInvoiceRequestSchema,
    UpdateInvoiceStatusRequestSchema,
)
from .payment_request import ApplyPaymentRequestSchema, UpdatePaymentRequestSchema, VoidPaymentRequestSchema
from .claim_request import (
    CreateClaimRequestSchema,
    UpdateClaimRequestSchema,
    SubmitClaimRequestSchema,
    ClaimResponseRequestSchema,
    ClaimPaymentRequestSchema,
    ClaimActionRequestSchema,
)
from .catalog_request import (
    CreateServiceCodeRequestSchema,
    UpdateServiceCodeRequestSchema,
    CreateInsuranceProviderRequestSchema,
    UpdateInsuranceProviderRequestSchema,
    CreateFundingProgramRequestSchema,
    UpdateFundingProgramRequestSchema,
)

__all__ = [
    "CreateInvoiceRequestSchema",
    "UpdateInvoiceRequestSchema",
    "UpdateInvoiceStatusRequestSchema",
    "ApplyPaymentRequestSchema",
    "UpdatePaymentRequestSchema",
    "VoidPaymentRequestSchema",
    "CreateClaimRequestSchema",
    "UpdateClaimRequestSchema",
    "SubmitClaimRequestSchema",
    "ClaimResponseRequestSchema",
    "ClaimPaymentRequestSchema",
    "ClaimActionRequestSchema",
    "CreateServiceCodeRequestSchema",
    "UpdateServiceCodeRequestSchema",
    "CreateInsuranceProviderRequestSchema",
    "UpdateInsuranceProviderRequestSchema",
    "CreateFundingProgramRequestSchema",
    "UpdateFundingProgramRequestSchema",
]
