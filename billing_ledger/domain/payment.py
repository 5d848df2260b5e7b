"""Payment Domain Entity

Records a payment fact against an invoice. The ledger never talks to a payment
gateway; it only records what was received.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, ForeignKey, Numeric, String, Text
from billing_ledger.domain.base import BaseModel, BigIntId, utcnow


class PaymentMethod(str, Enum):
    """Payment method types"""
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    CHECK = "check"
    INSURANCE = "insurance"
    FUNDING_PROGRAM = "funding_program"
    OTHER = "other"


class Payment(BaseModel, table=True):
    """
    Payment - Money received against an invoice

    Domain Rules:
    - amount > 0
    - Sum of non-voided payments never exceeds the invoice total
    - Insurance payments generated from a claim carry insurance_claim_id,
      at most one per claim
    - Voided payments are kept for audit and excluded from all sums
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index('ix_payments_invoice_id', 'invoice_id'),
        Index('ix_payments_payment_date', 'payment_date'),
        Index('ix_payments_insurance_claim_id', 'insurance_claim_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntId, primary_key=True, autoincrement=True),
        description="Unique payment identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id"), nullable=False),
        description="Foreign key to Invoice"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(15, 2), nullable=False),
        description="Amount received (must be > 0)"
    )

    payment_date: date = Field(sa_column=Column(Date, nullable=False))

    method: PaymentMethod = Field(description="How the payment was made")

    reference_number: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Check number, transfer id or payer claim number"
    )

    notes: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    insurance_claim_id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, ForeignKey("insurance_claims.id"), nullable=True),
        description="Claim that generated this payment"
    )

    funding_program_reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
    )

    received_by: Optional[str] = Field(default=None, description="Acting user id")

    voided_at: Optional[datetime] = Field(default=None)

    void_reason: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_voided(self) -> bool:
        return self.voided_at is not None

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 7,
                "invoice_id": 1,
                "amount": "150.00",
                "payment_date": "2025-03-10",
                "method": "card",
                "reference_number": "txn_8841",
                "insurance_claim_id": None,
            }
        }
