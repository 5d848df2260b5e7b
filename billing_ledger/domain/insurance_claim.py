"""Insurance Claim Domain Entities

Tracks claims filed with insurance providers against invoice line items.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Boolean, Date, ForeignKey, Numeric, String, Text
from billing_ledger.domain.base import BaseModel, BigIntId, utcnow
from billing_ledger.domain.invoice import InvoiceStatus


class ClaimStatus(str, Enum):
    """Insurance claim status types"""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    IN_REVIEW = "in_review"
    APPROVED = "approved"
    PARTIALLY_APPROVED = "partially_approved"
    DENIED = "denied"
    APPEALED = "appealed"
    PAID = "paid"
    CLOSED = "closed"


_PAYER_RESPONSES = frozenset({
    ClaimStatus.IN_REVIEW,
    ClaimStatus.APPROVED,
    ClaimStatus.PARTIALLY_APPROVED,
    ClaimStatus.DENIED,
    ClaimStatus.PAID,
})

CLAIM_TRANSITIONS: Dict[ClaimStatus, FrozenSet[ClaimStatus]] = {
    ClaimStatus.DRAFT: frozenset({ClaimStatus.SUBMITTED}),
    ClaimStatus.SUBMITTED: _PAYER_RESPONSES,
    ClaimStatus.IN_REVIEW: _PAYER_RESPONSES - {ClaimStatus.IN_REVIEW},
    ClaimStatus.APPEALED: _PAYER_RESPONSES,
    ClaimStatus.APPROVED: frozenset({ClaimStatus.PAID, ClaimStatus.CLOSED}),
    ClaimStatus.PARTIALLY_APPROVED: frozenset({ClaimStatus.APPEALED, ClaimStatus.PAID, ClaimStatus.CLOSED}),
    ClaimStatus.DENIED: frozenset({ClaimStatus.APPEALED, ClaimStatus.CLOSED}),
    ClaimStatus.PAID: frozenset({ClaimStatus.CLOSED}),
    ClaimStatus.CLOSED: frozenset(),
}

# Claims in these states are awaiting the payer
AWAITING_RESPONSE = frozenset({ClaimStatus.SUBMITTED, ClaimStatus.IN_REVIEW, ClaimStatus.APPEALED})

# Claims in these states no longer hold the invoice in an insurance state
SETTLED = frozenset({ClaimStatus.PAID, ClaimStatus.CLOSED})


def can_transition(current: ClaimStatus, target: ClaimStatus) -> bool:
    return target in CLAIM_TRANSITIONS[current]


class InsuranceClaim(BaseModel, table=True):
    """
    InsuranceClaim - Claim filed with an insurance provider

    Domain Rules:
    - Covers a subset of one invoice's line items, frozen at submission
    - approved_amount <= claimed_amount, paid_amount <= approved_amount
    - Status follows CLAIM_TRANSITIONS
    - Reaching PAID with auto_generate_payment records exactly one
      INSURANCE payment against the invoice
    """

    __tablename__ = "insurance_claims"
    __table_args__ = (
        Index('ix_insurance_claims_invoice_id', 'invoice_id'),
        Index('ix_insurance_claims_provider_id', 'insurance_provider_id'),
        Index('ix_insurance_claims_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id"), nullable=False),
    )

    insurance_provider_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("insurance_providers.id"), nullable=False),
    )

    claim_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Payer-side claim reference"
    )

    policy_number: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))

    beneficiary_name: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))

    status: ClaimStatus = Field(default=ClaimStatus.DRAFT)

    claimed_amount: Decimal = Field(sa_column=Column(Numeric(15, 2), nullable=False))

    approved_amount: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(15, 2), nullable=True))

    paid_amount: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(15, 2), nullable=True))

    submission_date: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))

    response_date: Optional[date] = Field(default=None, sa_column=Column(Date, nullable=True))

    denial_reason: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    response_details: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    auto_generate_payment: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
    )

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_by: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime = Field(default_factory=utcnow)


class InsuranceClaimItem(BaseModel, table=True):
    """Membership of an invoice line item in a claim."""

    __tablename__ = "insurance_claim_items"
    __table_args__ = (
        Index('ix_insurance_claim_items_claim_id', 'claim_id'),
        Index('ix_insurance_claim_items_line_item_id', 'invoice_line_item_id'),
        Index('ux_insurance_claim_items_claim_line', 'claim_id', 'invoice_line_item_id', unique=True),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
    )

    claim_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("insurance_claims.id", ondelete="CASCADE"), nullable=False),
    )

    invoice_line_item_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoice_line_items.id"), nullable=False),
    )

    claimed_amount: Decimal = Field(
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="Line item amount at the time it joined the claim"
    )


def invoice_insurance_state(claims: List[InsuranceClaim]) -> Optional[InvoiceStatus]:
    """
    Insurance override an invoice should carry given its claims

    Draft and settled (PAID/CLOSED) claims do not count, and with none left
    there is no override. If every remaining claim was denied the invoice is
    INSURANCE_DENIED, else PENDING_INSURANCE.
    """
    active = [c for c in claims if c.status != ClaimStatus.DRAFT and c.status not in SETTLED]
    if not active:
        return None
    if all(c.status == ClaimStatus.DENIED for c in active):
        return InvoiceStatus.INSURANCE_DENIED
    return InvoiceStatus.PENDING_INSURANCE
