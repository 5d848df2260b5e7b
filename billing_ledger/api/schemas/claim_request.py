"""Request schemas for the Insurance Claim API"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from billing_ledger.domain.insurance_claim import ClaimStatus


class CreateClaimRequestSchema(BaseModel):
    invoice_id: int
    insurance_provider_id: int
    line_item_ids: Optional[List[int]] = Field(
        default=None,
        description="Claimed line items; all bill-to-insurance items when omitted",
    )
    claimed_amount: Optional[Decimal] = None
    claim_number: Optional[str] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    auto_generate_payment: bool = True
    notes: Optional[str] = None


class UpdateClaimRequestSchema(BaseModel):
    claim_number: Optional[str] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    claimed_amount: Optional[Decimal] = None
    auto_generate_payment: Optional[bool] = None
    notes: Optional[str] = None
    add_line_item_ids: List[int] = Field(default_factory=list)
    remove_line_item_ids: List[int] = Field(default_factory=list)


class SubmitClaimRequestSchema(BaseModel):
    submission_date: Optional[date] = None
    claim_number: Optional[str] = None


class ClaimResponseRequestSchema(BaseModel):
    """Payer response: in_review, approved, partially_approved, denied or paid"""

    status: ClaimStatus
    approved_amount: Optional[Decimal] = None
    paid_amount: Optional[Decimal] = None
    response_date: Optional[date] = None
    denial_reason: Optional[str] = None
    response_details: Optional[str] = None


class ClaimPaymentRequestSchema(BaseModel):
    paid_amount: Decimal
    payment_date: Optional[date] = None


class ClaimActionRequestSchema(BaseModel):
    notes: Optional[str] = None
