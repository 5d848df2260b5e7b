"""Data Transfer Objects for Insurance Claim Use Cases"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from billing_ledger.domain.insurance_claim import ClaimStatus, InsuranceClaim, InsuranceClaimItem


class CreateClaimCommandDTO(BaseModel):
    """
    Command DTO for drafting an insurance claim

    When line_item_ids is omitted, every bill-to-insurance item of the
    invoice joins the claim.
    """

    invoice_id: int
    insurance_provider_id: int
    line_item_ids: Optional[List[int]] = Field(default=None, description="Explicit claim membership")
    claimed_amount: Optional[Decimal] = Field(default=None, description="Defaults to the items' total")
    claim_number: Optional[str] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    auto_generate_payment: bool = Field(default=True, description="Record an INSURANCE payment when paid")
    notes: Optional[str] = None
    acting_user: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": 1,
                "insurance_provider_id": 3,
                "policy_number": "POL-99812",
                "auto_generate_payment": True,
            }
        }


class UpdateClaimCommandDTO(BaseModel):
    """Header edits; membership edits only while DRAFT."""

    claim_id: int
    claim_number: Optional[str] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    claimed_amount: Optional[Decimal] = None
    auto_generate_payment: Optional[bool] = None
    notes: Optional[str] = None
    add_line_item_ids: List[int] = Field(default_factory=list)
    remove_line_item_ids: List[int] = Field(default_factory=list)
    acting_user: Optional[str] = None


class SubmitClaimCommandDTO(BaseModel):
    claim_id: int
    submission_date: Optional[date] = None
    claim_number: Optional[str] = None
    acting_user: Optional[str] = None


class RecordClaimResponseCommandDTO(BaseModel):
    """
    Payer response to a submitted claim

    A response of APPROVED or PARTIALLY_APPROVED that already carries a
    paid_amount means the money arrived: the claim is recorded as PAID.
    """

    claim_id: int
    status: ClaimStatus
    approved_amount: Optional[Decimal] = None
    paid_amount: Optional[Decimal] = None
    response_date: Optional[date] = None
    denial_reason: Optional[str] = None
    response_details: Optional[str] = None
    acting_user: Optional[str] = None


class RecordClaimPaymentCommandDTO(BaseModel):
    claim_id: int
    paid_amount: Decimal
    payment_date: Optional[date] = None
    acting_user: Optional[str] = None


class ClaimActionCommandDTO(BaseModel):
    """Appeal or close a claim"""

    claim_id: int
    notes: Optional[str] = None
    acting_user: Optional[str] = None


class ListClaimsQueryDTO(BaseModel):
    invoice_id: Optional[int] = None
    insurance_provider_id: Optional[int] = None
    status: Optional[ClaimStatus] = None
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class ClaimItemDTO(BaseModel):
    line_item_id: int
    claimed_amount: Decimal


class ClaimResponseDTO(BaseModel):
    """Response DTO for claim operations"""

    claim_id: int
    invoice_id: int
    insurance_provider_id: int
    claim_number: Optional[str] = None
    policy_number: Optional[str] = None
    beneficiary_name: Optional[str] = None
    status: str
    claimed_amount: Decimal
    approved_amount: Optional[Decimal] = None
    paid_amount: Optional[Decimal] = None
    submission_date: Optional[date] = None
    response_date: Optional[date] = None
    denial_reason: Optional[str] = None
    response_details: Optional[str] = None
    auto_generate_payment: bool
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: List[ClaimItemDTO] = Field(default_factory=list)
    payment_id: Optional[int] = Field(default=None, description="Payment generated by this operation")

    @classmethod
    def from_entity(
        cls,
        claim: InsuranceClaim,
        items: Optional[List[InsuranceClaimItem]] = None,
        payment_id: Optional[int] = None,
    ) -> "ClaimResponseDTO":
        return cls(
            claim_id=claim.id,
            invoice_id=claim.invoice_id,
            insurance_provider_id=claim.insurance_provider_id,
            claim_number=claim.claim_number,
            policy_number=claim.policy_number,
            beneficiary_name=claim.beneficiary_name,
            status=claim.status.value,
            claimed_amount=claim.claimed_amount,
            approved_amount=claim.approved_amount,
            paid_amount=claim.paid_amount,
            submission_date=claim.submission_date,
            response_date=claim.response_date,
            denial_reason=claim.denial_reason,
            response_details=claim.response_details,
            auto_generate_payment=claim.auto_generate_payment,
            notes=claim.notes,
            created_by=claim.created_by,
            created_at=claim.created_at,
            updated_at=claim.updated_at,
            items=[
                ClaimItemDTO(line_item_id=i.invoice_line_item_id, claimed_amount=i.claimed_amount)
                for i in items or []
            ],
            payment_id=payment_id,
        )


class ListClaimsResponseDTO(BaseModel):
    claims: List[ClaimResponseDTO]
    count: int
    limit: int
    offset: int
