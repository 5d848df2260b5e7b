"""Data Transfer Objects for Payment Use Cases"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from billing_ledger.domain.invoice import Invoice
from billing_ledger.domain.payment import Payment, PaymentMethod


class ApplyPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a payment

    Used as input to ApplyPayment use case.
    """

    invoice_id: int = Field(..., description="Invoice being paid")
    amount: Decimal = Field(..., description="Amount received (must be > 0)")
    method: PaymentMethod = Field(..., description="Payment method")
    payment_date: date = Field(default_factory=date.today)
    reference_number: Optional[str] = Field(default=None, description="Check number, transaction id, ...")
    notes: Optional[str] = None
    funding_program_reference: Optional[str] = None
    acting_user: Optional[str] = Field(default=None, description="User recording the payment")

    class Config:
        json_schema_extra = {
            "example": {
                "invoice_id": 1,
                "amount": "150.00",
                "method": "card",
                "payment_date": "2025-03-10",
                "reference_number": "txn_8841",
            }
        }


class UpdatePaymentCommandDTO(BaseModel):
    payment_id: int
    amount: Optional[Decimal] = None
    payment_date: Optional[date] = None
    method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    acting_user: Optional[str] = None


class VoidPaymentCommandDTO(BaseModel):
    payment_id: int
    reason: str = Field(..., min_length=1)
    acting_user: Optional[str] = None


class ListPaymentsQueryDTO(BaseModel):
    invoice_id: Optional[int] = None
    client_id: Optional[str] = None
    method: Optional[PaymentMethod] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    include_voided: bool = False
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class PaymentResponseDTO(BaseModel):
    """Response DTO for payment operations"""

    payment_id: int
    invoice_id: int
    amount: Decimal
    payment_date: date
    method: str
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    insurance_claim_id: Optional[int] = None
    funding_program_reference: Optional[str] = None
    received_by: Optional[str] = None
    voided_at: Optional[datetime] = None
    void_reason: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentResponseDTO":
        return cls(
            payment_id=payment.id,
            invoice_id=payment.invoice_id,
            amount=payment.amount,
            payment_date=payment.payment_date,
            method=payment.method.value,
            reference_number=payment.reference_number,
            notes=payment.notes,
            insurance_claim_id=payment.insurance_claim_id,
            funding_program_reference=payment.funding_program_reference,
            received_by=payment.received_by,
            voided_at=payment.voided_at,
            void_reason=payment.void_reason,
            created_at=payment.created_at,
        )


class InvoiceBalanceDTO(BaseModel):
    """Invoice balance snapshot returned after a payment change"""

    invoice_id: int
    invoice_number: str
    status: str
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal

    @classmethod
    def from_entity(cls, invoice: Invoice, today: date) -> "InvoiceBalanceDTO":
        return cls(
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            status=invoice.current_status(today).value,
            total_amount=invoice.total_amount,
            amount_paid=invoice.amount_paid,
            balance_due=invoice.total_amount - invoice.amount_paid,
        )


class PaymentResultDTO(BaseModel):
    payment: Optional[PaymentResponseDTO] = None
    invoice: InvoiceBalanceDTO


class ListPaymentsResponseDTO(BaseModel):
    payments: List[PaymentResponseDTO]
    count: int
    limit: int
    offset: int
