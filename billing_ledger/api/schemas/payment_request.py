"""Request schemas for the Payment API"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field
from billing_ledger.domain.payment import PaymentMethod


class ApplyPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /billing/invoices/{invoice_id}/payments endpoint.
    """

    amount: Decimal = Field(..., description="Amount received (must be > 0)")
    method: PaymentMethod
    payment_date: date = Field(default_factory=date.today)
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    funding_program_reference: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "150.00",
                "method": "card",
                "payment_date": "2025-03-10",
                "reference_number": "txn_8841",
            }
        }


class UpdatePaymentRequestSchema(BaseModel):
    amount: Optional[Decimal] = None
    payment_date: Optional[date] = None
    method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None


class VoidPaymentRequestSchema(BaseModel):
    reason: str = Field(..., min_length=1, description="Why the payment is voided")
